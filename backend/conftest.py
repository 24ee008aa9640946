"""Root conftest: load the test environment and route structlog through stdlib for caplog."""

from pathlib import Path

import pytest
import structlog
from dotenv import load_dotenv

from shared.logging import configure_structlog

# Must run before any HazariSettings is built so HAZARI_* values come from the test env.
load_dotenv(Path(__file__).resolve().parent.parent / ".env.tests")

configure_structlog()


@pytest.fixture(autouse=True)
def _clear_log_context():
    structlog.contextvars.clear_contextvars()
    yield
    structlog.contextvars.clear_contextvars()

"""Scorebook configuration via environment variables."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings

from hazari.logic.rules import DEFAULT_TOTAL_POINTS


class HazariSettings(BaseSettings):
    model_config = {"env_prefix": "HAZARI_"}

    data_file: Path = Path("backend/data/games.json")
    log_dir: str | None = "backend/logs/hazari"
    default_total_points: int = Field(default=DEFAULT_TOTAL_POINTS, ge=1)

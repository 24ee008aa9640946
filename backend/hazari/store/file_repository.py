"""File-backed game collection storing all ledgers as one JSON array."""

from __future__ import annotations

import asyncio
import contextlib
import json
import os
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING

import structlog
from pydantic import ValidationError

from hazari.logic.exceptions import CorruptStoreError, StoreError
from hazari.logic.ledger import ScoreLedger
from hazari.store.repository import GameCollectionStore

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = structlog.get_logger()

_FILE_PERMISSIONS = 0o600  # owner read/write only


class FileGameCollectionStore(GameCollectionStore):
    """File-backed game collection.

    The whole collection lives in a single JSON file and is read and written
    in full on every call. An asyncio.Lock serializes file access within one
    process; it does not make concurrent read-modify-write cycles from
    different callers safe, which remains the caller's responsibility.
    """

    def __init__(self, file_path: str | Path) -> None:
        self._file_path = Path(file_path)
        self._lock = asyncio.Lock()

    @property
    def file_path(self) -> Path:
        return self._file_path

    async def load_all(self) -> list[ScoreLedger]:
        async with self._lock:
            return self._load_from_file()

    async def save_all(self, ledgers: Sequence[ScoreLedger]) -> None:
        async with self._lock:
            self._save_to_file(ledgers)
        logger.debug("saved game collection", path=str(self._file_path), games=len(ledgers))

    async def clear_all(self) -> None:
        async with self._lock:
            try:
                self._file_path.unlink(missing_ok=True)
            except OSError as exc:
                msg = f"Failed to clear games at {self._file_path}"
                raise StoreError(msg) from exc
        logger.info("cleared game collection", path=str(self._file_path))

    def _load_from_file(self) -> list[ScoreLedger]:
        """Read and validate the collection.

        A missing file is an empty collection. An existing file that cannot be
        read, is not a JSON array, or holds an invalid ledger raises
        CorruptStoreError so that a later save never overwrites data we could
        not read.
        """
        if not self._file_path.exists():
            return []

        try:
            raw = self._file_path.read_text(encoding="utf-8")
        except OSError as exc:
            msg = f"Failed to read games from {self._file_path}"
            raise StoreError(msg) from exc

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            msg = f"Games file {self._file_path} is not valid JSON"
            raise CorruptStoreError(msg) from exc

        if not isinstance(data, list):
            msg = f"Expected JSON array at root in {self._file_path}"
            raise CorruptStoreError(msg)

        try:
            return [ScoreLedger.model_validate(record) for record in data]
        except ValidationError as exc:
            msg = f"Failed to parse game data from {self._file_path}"
            raise CorruptStoreError(msg) from exc

    def _save_to_file(self, ledgers: Sequence[ScoreLedger]) -> None:
        """Atomically write the collection.

        Writes to a temporary file in the same directory, then renames it into
        place so readers never see a partial file.
        """
        content = json.dumps([ledger.to_record() for ledger in ledgers], indent=2).encode("utf-8")

        try:
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                dir=self._file_path.parent,
                prefix=".games_",
                suffix=".tmp",
            )
        except OSError as exc:
            msg = f"Failed to write games to {self._file_path}"
            raise StoreError(msg) from exc

        fd_owned = True
        try:
            with os.fdopen(fd, "wb") as f:
                fd_owned = False  # os.fdopen took ownership; it will close fd
                f.write(content)
                f.flush()
                os.fchmod(f.fileno(), _FILE_PERMISSIONS)
            Path(tmp_path).replace(self._file_path)
        except OSError as exc:
            if fd_owned:
                with contextlib.suppress(OSError):
                    os.close(fd)
            with contextlib.suppress(OSError):
                Path(tmp_path).unlink()
            msg = f"Failed to write games to {self._file_path}"
            raise StoreError(msg) from exc

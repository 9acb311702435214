"""JSON file storage for a single token record."""

from __future__ import annotations

import contextlib
import logging
import os
import tempfile
from pathlib import Path
from typing import Optional, Union

from pydantic import ValidationError

from tokenkeeper.core.errors import TokenError
from tokenkeeper.models.token import TokenRecord

logger = logging.getLogger(__name__)


class TokenStoreError(TokenError):
    """Raised when the token file cannot be used."""

    def __init__(self, message: str, *, path: Path) -> None:
        super().__init__(message)
        self.path = path


class StoreReadError(TokenStoreError):
    """Raised when a token file exists but does not hold a readable record."""


class StoreWriteError(TokenStoreError):
    """Raised when a token record could not be written."""


class TokenFileStore:
    """
    Persist exactly one token record as JSON.

    Writes go to a temporary file in the target directory which is then renamed
    over the target, so readers never observe a half-written record.
    """

    def __init__(self, path: Union[str, Path] = "access_token") -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def exists(self) -> bool:
        return self._path.is_file()

    def save(self, record: TokenRecord) -> None:
        data = record.model_dump_json(indent=2)
        directory = self._path.parent
        tmp_path: Optional[Path] = None
        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self._path.name}.", suffix=".tmp", dir=directory
            )
            tmp_path = Path(tmp_name)
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(data)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_path, self._path)
        except OSError as exc:
            if tmp_path is not None:
                with contextlib.suppress(OSError):
                    tmp_path.unlink()
            raise StoreWriteError(
                f"Failed to save token to {self._path}: {exc}", path=self._path
            ) from exc
        logger.info("Saved token record to %s", self._path)

    def load(self) -> Optional[TokenRecord]:
        """Return the stored record, or None when nothing has been saved yet."""
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.debug("No token record at %s", self._path)
            return None
        except (OSError, UnicodeDecodeError) as exc:
            raise StoreReadError(
                f"Failed to read token from {self._path}: {exc}", path=self._path
            ) from exc

        try:
            record = TokenRecord.model_validate_json(raw)
        except ValidationError as exc:
            raise StoreReadError(
                f"Token file {self._path} is corrupted or incomplete.", path=self._path
            ) from exc
        logger.debug("Loaded token record from %s", self._path)
        return record


__all__ = [
    "StoreReadError",
    "StoreWriteError",
    "TokenFileStore",
    "TokenStoreError",
]

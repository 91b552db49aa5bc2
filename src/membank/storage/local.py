"""Local JSON file backend, for offline use and development.

Documents live under ``root``; the version token is the SHA-256 of the file
bytes, so a write is rejected if the file changed after it was read.
"""

from __future__ import annotations

import hashlib
import json
import logging
from pathlib import Path
from typing import Any

from membank.errors import InvalidDocument, StorageError, VersionConflict
from membank.storage.base import Snapshot

logger = logging.getLogger(__name__)


def _digest(raw: bytes) -> str:
    return hashlib.sha256(raw).hexdigest()


class LocalFileStorage:
    """Memory banks as plain JSON files in a directory."""

    def __init__(self, root: Path) -> None:
        self.root = root

    @property
    def name(self) -> str:
        return "local"

    def _resolve(self, path: str) -> Path:
        target = (self.root / path.lstrip("/")).resolve()
        if not target.is_relative_to(self.root.resolve()):
            raise StorageError(f"{path} escapes the storage directory")
        return target

    async def fetch(self, path: str) -> Snapshot:
        target = self._resolve(path)
        if not target.exists():
            return Snapshot()
        try:
            raw = target.read_bytes()
        except OSError as e:
            raise StorageError(f"Failed to read {path}: {e}") from e
        try:
            document = json.loads(raw.decode("utf-8")) if raw.strip() else {}
        except (ValueError, UnicodeDecodeError) as e:
            raise InvalidDocument(f"{path} is not valid JSON: {e}") from e
        if not isinstance(document, dict):
            raise InvalidDocument(f"{path} must contain a JSON object")
        return Snapshot(document=document, version=_digest(raw))

    async def write(
        self,
        path: str,
        document: dict[str, Any],
        version: str | None,
        message: str,
    ) -> str:
        target = self._resolve(path)
        try:
            current = _digest(target.read_bytes()) if target.exists() else None
        except OSError as e:
            raise StorageError(f"Failed to read {path}: {e}") from e
        if current != version:
            raise VersionConflict(f"{path} changed since it was read")

        raw = json.dumps(document, indent=2, ensure_ascii=False).encode("utf-8")
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(raw)
        except OSError as e:
            raise StorageError(f"Failed to write {path}: {e}") from e

        logger.info("Wrote %s: %s", target, message)
        return _digest(raw)

    async def close(self) -> None:
        pass

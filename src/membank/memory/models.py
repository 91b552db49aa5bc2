"""Typed records for the memory bank document.

On disk (or in the remote repository) the bank is plain JSON:

    {
      "memories": {
        "<key>": {"value": "...", "tags": ["a"], "created_at": "...", "updated_at": "..."}
      },
      "metadata": {"last_updated": "..."}
    }

``from_dict`` validates at the storage boundary, so the rest of the code
never touches raw dicts. Unknown members are carried through untouched.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from membank.errors import InvalidDocument


def utc_timestamp() -> str:
    """Current time as ``2026-10-19T09:30:00.123Z``."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(frozen=True)
class MemoryEntry:
    """One stored fact."""

    value: str
    tags: tuple[str, ...] = ()
    created_at: str | None = None
    updated_at: str | None = None

    @classmethod
    def from_dict(cls, key: str, data: Any) -> MemoryEntry:
        if not isinstance(data, dict):
            raise InvalidDocument(f"memory '{key}' is not an object")
        value = data.get("value")
        if not isinstance(value, str):
            raise InvalidDocument(f"memory '{key}' has no text value")
        tags = data.get("tags")
        if tags is None:
            tags = []
        if not isinstance(tags, list) or not all(isinstance(t, str) for t in tags):
            raise InvalidDocument(f"memory '{key}' has malformed tags")
        return cls(
            value=value,
            tags=tuple(tags),
            created_at=_optional_str(data.get("created_at"), key, "created_at"),
            updated_at=_optional_str(data.get("updated_at"), key, "updated_at"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "value": self.value,
            "tags": list(self.tags),
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


@dataclass(frozen=True)
class MemoryBank:
    """The whole persisted document: entries plus bookkeeping metadata."""

    memories: dict[str, MemoryEntry] = field(default_factory=dict)
    last_updated: str | None = None
    extra_metadata: dict[str, Any] = field(default_factory=dict)
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> MemoryBank:
        if not isinstance(data, dict):
            raise InvalidDocument("memory bank must be a JSON object")

        raw_memories = data.get("memories")
        if raw_memories is None:
            raw_memories = {}
        if not isinstance(raw_memories, dict):
            raise InvalidDocument("'memories' must be an object")
        memories = {
            key: MemoryEntry.from_dict(key, entry) for key, entry in raw_memories.items()
        }

        metadata = data.get("metadata")
        if metadata is None:
            metadata = {}
        if not isinstance(metadata, dict):
            raise InvalidDocument("'metadata' must be an object")
        last_updated = metadata.get("last_updated")
        if last_updated is not None and not isinstance(last_updated, str):
            raise InvalidDocument("'metadata.last_updated' must be a string")

        return cls(
            memories=memories,
            last_updated=last_updated,
            extra_metadata={k: v for k, v in metadata.items() if k != "last_updated"},
            extra={k: v for k, v in data.items() if k not in ("memories", "metadata")},
        )

    def to_dict(self) -> dict[str, Any]:
        metadata = dict(self.extra_metadata)
        if self.last_updated is not None:
            metadata["last_updated"] = self.last_updated
        return {
            **self.extra,
            "memories": {key: entry.to_dict() for key, entry in self.memories.items()},
            "metadata": metadata,
        }


def _optional_str(value: Any, key: str, name: str) -> str | None:
    if value is None or isinstance(value, str):
        return value
    raise InvalidDocument(f"memory '{key}' has a non-text {name}")

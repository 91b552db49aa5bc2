"""Storage protocol and shared types."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable


@dataclass
class Snapshot:
    """A document as fetched, plus the version token needed to replace it.

    ``version`` is None when the document does not exist yet; writing with
    ``version=None`` creates it.
    """

    document: dict[str, Any] = field(default_factory=dict)
    version: str | None = None


@runtime_checkable
class Storage(Protocol):
    """Protocol that all storage backends must implement."""

    @property
    def name(self) -> str: ...

    async def fetch(self, path: str) -> Snapshot:
        """Read the whole document at ``path``."""
        ...

    async def write(
        self,
        path: str,
        document: dict[str, Any],
        version: str | None,
        message: str,
    ) -> str:
        """Replace the document if it is still at ``version``. Returns the new version.

        Raises VersionConflict if someone else wrote in between.
        """
        ...

    async def close(self) -> None:
        """Release any held resources."""
        ...

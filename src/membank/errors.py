"""Exception hierarchy shared by the store, the storage backends and the handler."""

from __future__ import annotations


class MemoryBankError(Exception):
    """Base class for every error membank raises on purpose."""


class InvalidArgument(MemoryBankError, ValueError):
    """A store operation was called with an unusable key, value or tag."""


class InvalidDocument(MemoryBankError):
    """The stored document is not a valid memory bank."""


class StorageError(MemoryBankError):
    """Reading or writing the backing document failed."""

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class VersionConflict(StorageError):
    """The document changed between fetch and write."""

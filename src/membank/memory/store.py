"""Memory bank operations.

Every function takes a ``MemoryBank`` and returns one; the input is never
modified, so a caller that decides not to persist simply drops the result.
Persistence, locking and transport live in ``membank.core`` and
``membank.storage``.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, replace

from membank.errors import InvalidArgument
from membank.memory import messages
from membank.memory.commands import (
    Command,
    DeleteCommand,
    GetCommand,
    ListCommand,
    NoCommand,
    SaveCommand,
)
from membank.memory.models import MemoryBank, MemoryEntry, utc_timestamp

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandResult:
    """Outcome of applying one command to a bank."""

    bank: MemoryBank
    message: str | None
    mutated: bool = False
    change_description: str | None = None


# ── Operations ───────────────────────────────────────────────


def save_memory(
    bank: MemoryBank,
    key: str,
    value: str,
    tags: Iterable[str] = (),
    *,
    now: str | None = None,
) -> MemoryBank:
    """Write (or overwrite) ``key``.

    Overwriting resets ``created_at`` too: entries are replaced wholesale,
    never merged with the previous one.
    """
    if not key or not isinstance(key, str):
        raise InvalidArgument("キー名は必須で、文字列である必要があります")
    if any(c.isspace() for c in key):
        raise InvalidArgument(f"key '{key}' must not contain whitespace")
    if not isinstance(value, str):
        raise InvalidArgument(f"value for '{key}' must be a string")
    tags = tuple(tags or ())
    if not all(isinstance(tag, str) for tag in tags):
        raise InvalidArgument(f"tags for '{key}' must be strings")

    timestamp = now or utc_timestamp()
    entry = MemoryEntry(value=value, tags=tags, created_at=timestamp, updated_at=timestamp)
    return replace(bank, memories={**bank.memories, key: entry}, last_updated=timestamp)


def get_memory(bank: MemoryBank, key: str) -> MemoryEntry | None:
    return bank.memories.get(key)


def delete_memory(bank: MemoryBank, key: str, *, now: str | None = None) -> MemoryBank:
    """Remove ``key``. An absent key returns ``bank`` itself, metadata untouched."""
    if key not in bank.memories:
        return bank
    remaining = {k: entry for k, entry in bank.memories.items() if k != key}
    return replace(bank, memories=remaining, last_updated=now or utc_timestamp())


def list_memories(bank: MemoryBank, tag_filter: str | None = None) -> dict[str, MemoryEntry]:
    """Entries tagged ``tag_filter`` (exact match), or all of them."""
    if not tag_filter:
        return dict(bank.memories)
    return {key: entry for key, entry in bank.memories.items() if tag_filter in entry.tags}


# ── Command dispatch ─────────────────────────────────────────


def apply(bank: MemoryBank, command: Command, *, now: str | None = None) -> CommandResult:
    """Run the operation ``command`` names and format the reply."""
    if isinstance(command, SaveCommand):
        updated = save_memory(bank, command.key, command.value, command.tags, now=now)
        return CommandResult(
            bank=updated,
            message=messages.saved(command.key, command.value, command.tags),
            mutated=True,
            change_description=f"メモリを保存: {command.key}",
        )

    if isinstance(command, GetCommand):
        entry = get_memory(bank, command.key)
        if entry is None:
            return CommandResult(bank, messages.not_found(command.key))
        return CommandResult(bank, messages.found(command.key, entry))

    if isinstance(command, DeleteCommand):
        updated = delete_memory(bank, command.key, now=now)
        if updated is bank:
            return CommandResult(bank, messages.not_found(command.key))
        return CommandResult(
            bank=updated,
            message=messages.deleted(command.key),
            mutated=True,
            change_description=f"メモリを削除: {command.key}",
        )

    if isinstance(command, ListCommand):
        memories = list_memories(bank, command.tag_filter)
        logger.debug("list: %d of %d entries", len(memories), len(bank.memories))
        return CommandResult(bank, messages.listing(memories, command.tag_filter))

    if isinstance(command, NoCommand):
        return CommandResult(bank, None)

    raise TypeError(f"Unknown command: {command!r}")

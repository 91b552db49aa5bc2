"""membank orchestrator: turns one chat line into at most one document write.

Per command:
1. Parse the line (non-commands never touch storage)
2. Lane lock: serialize commands against the same document in this process
3. Fetch the document and its version token
4. Apply the command to the typed bank
5. Write back, conditional on the version token, only if something changed
6. Return the reply text
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from membank.config import MemBankConfig
from membank.errors import MemoryBankError
from membank.memory import messages
from membank.memory.commands import Command, NoCommand, parse_command
from membank.memory.models import MemoryBank
from membank.memory.store import apply

if TYPE_CHECKING:
    from membank.connectors.base import IncomingMessage
    from membank.storage.base import Storage

logger = logging.getLogger(__name__)


def build_storage(config: MemBankConfig) -> Storage:
    if config.backend == "github":
        from membank.storage.github import GitHubContentsStorage

        return GitHubContentsStorage(config.github)
    if config.backend == "local":
        from membank.storage.local import LocalFileStorage

        return LocalFileStorage(config.local_dir)
    raise ValueError(f"Unknown storage backend: {config.backend}")


class MemoryBankHandler:
    """Routes chat commands to the memory bank behind a storage backend."""

    def __init__(self, config: MemBankConfig, storage: Storage | None = None) -> None:
        self.config = config
        self.storage = storage or build_storage(config)
        self._lane_locks: dict[str, asyncio.Lock] = {}  # per-document serialization

    # ── Lane Queue (per-document serialization) ──────────────

    def _get_lane_lock(self, path: str) -> asyncio.Lock:
        if path not in self._lane_locks:
            self._lane_locks[path] = asyncio.Lock()
        return self._lane_locks[path]

    # ── Command handling ─────────────────────────────────────

    async def handle(self, text: str) -> str | None:
        """Reply to one chat line, or None if it is not a memory command."""
        return await self.execute(parse_command(text))

    async def handle_message(self, msg: IncomingMessage) -> str | None:
        """Connector entry point."""
        return await self.handle(msg.text)

    async def execute(self, command: Command) -> str | None:
        if isinstance(command, NoCommand):
            return None

        path = self.config.bank_path
        lock = self._get_lane_lock(path)
        async with lock:
            try:
                return await self._process(path, command)
            except MemoryBankError as e:
                logger.exception("Memory command %s failed", command.kind)
                return messages.failure(e)

    async def _process(self, path: str, command: Command) -> str | None:
        snapshot = await self.storage.fetch(path)
        bank = MemoryBank.from_dict(snapshot.document)

        result = apply(bank, command)
        if result.mutated:
            await self.storage.write(
                path,
                result.bank.to_dict(),
                snapshot.version,
                result.change_description or command.kind,
            )
        else:
            logger.debug("%s on %s: nothing to write", command.kind, path)
        return result.message

    # ── Lifecycle ─────────────────────────────────────────────

    async def close(self) -> None:
        await self.storage.close()

"""Local CLI REPL connector for development and testing."""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import TYPE_CHECKING, BinaryIO, TextIO

from membank.connectors.base import IncomingMessage

if TYPE_CHECKING:
    from membank.connectors.base import MessageHandler

logger = logging.getLogger(__name__)

_CLI_CHAT_ID = "cli"
_EXIT_WORDS = ("exit", "quit")

USAGE = "Commands: !save <key> <value> [#tag ...] | !get <key> | !delete <key> | !list [#tag]"


class CLIConnector:
    """Line-oriented REPL: one chat line in, one reply out."""

    def __init__(
        self,
        stdin: BinaryIO | None = None,
        stdout: TextIO | None = None,
        stderr: TextIO | None = None,
    ) -> None:
        self._stdin = stdin or sys.stdin.buffer
        self._stdout = stdout or sys.stdout
        self._stderr = stderr or sys.stderr
        self._running = False

    @property
    def name(self) -> str:
        return "cli"

    async def start(self, handler: MessageHandler) -> None:
        self._running = True
        loop = asyncio.get_running_loop()
        self._say(f"membank (type 'exit' or Ctrl+C to quit)\n{USAGE}")

        while self._running:
            line = await loop.run_in_executor(None, self._prompt)
            if line is None or line.lower() in _EXIT_WORDS:
                self._say("Bye!")
                break
            if not line:
                continue

            reply = await handler(IncomingMessage(line, _CLI_CHAT_ID, self.name))
            await self.reply(_CLI_CHAT_ID, reply)

    def _prompt(self) -> str | None:
        """Next stripped input line, or None at end of input."""
        self._stdout.write("\n> ")
        self._stdout.flush()
        raw = self._stdin.readline()
        if not raw:
            return None
        return raw.decode("utf-8", errors="replace").strip()

    def _say(self, text: str) -> None:
        print(text, file=self._stdout, flush=True)

    async def stop(self) -> None:
        self._running = False

    async def reply(self, chat_id: str, text: str | None) -> None:
        if text is None:
            print(USAGE, file=self._stderr, flush=True)
            return
        self._say(text)

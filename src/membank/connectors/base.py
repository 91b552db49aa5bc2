"""Connector protocol and shared types."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Coroutine, Optional, Protocol, runtime_checkable


@dataclass
class IncomingMessage:
    """A chat line received from any connector."""

    text: str
    chat_id: str
    connector_name: str = ""


# Callback type: core.MemoryBankHandler.handle_message
MessageHandler = Callable[[IncomingMessage], Coroutine[None, None, Optional[str]]]


@runtime_checkable
class Connector(Protocol):
    """Protocol that all input connectors must implement."""

    @property
    def name(self) -> str: ...

    async def start(self, handler: MessageHandler) -> None:
        """Start listening for messages. Call handler for each incoming message."""
        ...

    async def stop(self) -> None:
        """Gracefully stop the connector."""
        ...

    async def reply(self, chat_id: str, text: str | None) -> None:
        """Send a reply back to the given chat. None means "not a command"."""
        ...

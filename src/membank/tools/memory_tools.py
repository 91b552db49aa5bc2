"""Agent tools for memory bank access.

These functions are designed to be exposed as tools to the AI agent, so it
can save and recall facts without typing ``!`` commands. Each one goes
through the same fetch/apply/write cycle as a chat command.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from membank.memory.commands import (
    DeleteCommand,
    GetCommand,
    ListCommand,
    SaveCommand,
    split_tags,
)

if TYPE_CHECKING:
    from membank.core import MemoryBankHandler


def get_memory_tools(handler: MemoryBankHandler) -> dict[str, callable]:
    """Return a dict of tool_name -> async callable for memory operations.

    These can be registered as MCP tools or called directly.
    """

    async def save_memory(key: str, value: str, tags: list[str] | None = None) -> str:
        """Save a fact under key, replacing any previous value.

        Tags are optional labels; a leading # is accepted and dropped.
        """
        labels = tuple(
            label
            for tag in tags or ()
            for label in (split_tags(tag) if isinstance(tag, str) else (tag,))
        )
        return await handler.execute(SaveCommand(key, value, labels))

    async def get_memory(key: str) -> str:
        """Recall the fact stored under key."""
        return await handler.execute(GetCommand(key))

    async def delete_memory(key: str) -> str:
        """Forget the fact stored under key."""
        return await handler.execute(DeleteCommand(key))

    async def list_memories(tag: str | None = None) -> str:
        """List every stored fact, or only those carrying tag."""
        return await handler.execute(ListCommand(tag.lstrip("#") if tag else None))

    return {
        "save_memory": save_memory,
        "get_memory": get_memory,
        "delete_memory": delete_memory,
        "list_memories": list_memories,
    }

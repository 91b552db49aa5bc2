"""Reply strings shown to the chat user."""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from membank.memory.models import MemoryEntry


def tag_display(tags: Iterable[str]) -> str:
    return " ".join(f"#{tag}" for tag in tags)


def saved(key: str, value: str, tags: tuple[str, ...]) -> str:
    suffix = f" タグ: {tag_display(tags)}" if tags else ""
    return f"「{key}」を「{value}」として保存しました。{suffix}"


def found(key: str, entry: MemoryEntry) -> str:
    return f"「{key}」は「{entry.value}」です。{_tag_suffix(entry)}"


def not_found(key: str) -> str:
    return f"「{key}」は保存されていません。"


def deleted(key: str) -> str:
    return f"「{key}」を削除しました。"


def listing(memories: Mapping[str, MemoryEntry], tag_filter: str | None = None) -> str:
    if not memories:
        if tag_filter:
            return f"タグ「#{tag_filter}」で保存されているメモリはありません。"
        return "保存されているメモリはありません。"

    header = f"タグ「#{tag_filter}」で保存されているメモリ:" if tag_filter else "保存されているメモリ:"
    lines = [f"- {key}: {entry.value}{_tag_suffix(entry)}" for key, entry in memories.items()]
    return "\n".join([header, *lines])


def failure(error: Exception) -> str:
    return f"メモリーバンク操作中にエラーが発生しました: {error}"


def _tag_suffix(entry: MemoryEntry) -> str:
    return f" (タグ: {tag_display(entry.tags)})" if entry.tags else ""

"""Chat command grammar.

    !save <key> <value...> [#tag #tag ...]
    !get <key>
    !delete <key>
    !list [#tag]

The whole line must match; anything else is "no command". The scanner below
reproduces the matching rules the bot has always used:

- the save value is the *shortest* run after which either the line ends or
  ``<whitespace>#<something>`` completes it, so ``!save k v #`` keeps ``v #``
  as the value and ``!save k a#b`` keeps ``a#b``;
- the tag block is split on ``#``, trimmed, and empty pieces are dropped;
- a list filter is taken verbatim after its ``#``;
- values and tags never span a line break.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Union

_LINE_BREAKS = frozenset("\n\r\u2028\u2029")


@dataclass(frozen=True)
class SaveCommand:
    key: str
    value: str
    tags: tuple[str, ...] = ()
    kind: ClassVar[str] = "save"


@dataclass(frozen=True)
class GetCommand:
    key: str
    kind: ClassVar[str] = "get"


@dataclass(frozen=True)
class DeleteCommand:
    key: str
    kind: ClassVar[str] = "delete"


@dataclass(frozen=True)
class ListCommand:
    tag_filter: str | None = None
    kind: ClassVar[str] = "list"


@dataclass(frozen=True)
class NoCommand:
    kind: ClassVar[str] = "none"


Command = Union[SaveCommand, GetCommand, DeleteCommand, ListCommand, NoCommand]

NO_COMMAND = NoCommand()


def parse_command(text: object) -> Command:
    """Classify one line of chat input. Never raises."""
    if not isinstance(text, str) or not text.startswith("!"):
        return NO_COMMAND

    keyword_end = _skip(text, 1, lambda c: not c.isspace())
    keyword = text[1:keyword_end]

    if keyword == "save":
        return _parse_save(text, keyword_end) or NO_COMMAND
    if keyword in ("get", "delete"):
        key = _single_token(text, keyword_end)
        if key is None:
            return NO_COMMAND
        return GetCommand(key) if keyword == "get" else DeleteCommand(key)
    if keyword == "list":
        if keyword_end == len(text):
            return ListCommand()
        tag = _tag_tail(text, keyword_end)
        return ListCommand(tag) if tag is not None else NO_COMMAND
    return NO_COMMAND


def split_tags(tag_block: str) -> tuple[str, ...]:
    """``"a #b # c"`` -> ``("a", "b", "c")``."""
    return tuple(piece.strip() for piece in tag_block.split("#") if piece.strip())


# ── Scanner helpers ──────────────────────────────────────────


def _skip(text: str, pos: int, predicate) -> int:
    while pos < len(text) and predicate(text[pos]):
        pos += 1
    return pos


def _single_token(text: str, pos: int) -> str | None:
    """Whitespace run at ``pos`` followed by exactly one token up to the end."""
    start = _skip(text, pos, str.isspace)
    if start == pos or start == len(text):
        return None
    end = _skip(text, start, lambda c: not c.isspace())
    if end != len(text):
        return None
    return text[start:]


def _tag_tail(text: str, pos: int) -> str | None:
    """If ``text[pos:]`` is ``<whitespace>#<rest>``, return ``rest``.

    ``rest`` must be non-empty and free of line breaks.
    """
    hash_pos = _skip(text, pos, str.isspace)
    if hash_pos == pos or hash_pos >= len(text) or text[hash_pos] != "#":
        return None
    tail = text[hash_pos + 1 :]
    if not tail or any(c in _LINE_BREAKS for c in tail):
        return None
    return tail


def _parse_save(text: str, pos: int) -> SaveCommand | None:
    key_start = _skip(text, pos, str.isspace)
    if key_start == pos:
        return None
    key_end = _skip(text, key_start, lambda c: not c.isspace())
    if key_end == key_start:
        return None
    gap_end = _skip(text, key_end, str.isspace)

    # Prefer the longest separator; a shorter one only helps when nothing
    # but whitespace follows the key, making the value a whitespace char.
    for value_start in range(gap_end, key_end, -1):
        if value_start >= len(text):
            continue
        split = _split_value(text, value_start)
        if split is not None:
            value, tag_block = split
            return SaveCommand(text[key_start:key_end], value, split_tags(tag_block))
    return None


def _split_value(text: str, start: int) -> tuple[str, str] | None:
    for end in range(start + 1, len(text) + 1):
        if text[end - 1] in _LINE_BREAKS:
            return None
        if end == len(text):
            return text[start:], ""
        tail = _tag_tail(text, end)
        if tail is not None:
            return text[start:end], tail
    return None

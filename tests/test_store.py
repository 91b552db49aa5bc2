"""Tests for memory bank operations and command dispatch."""

from __future__ import annotations

import pytest

from membank.errors import InvalidArgument
from membank.memory.commands import (
    DeleteCommand,
    GetCommand,
    ListCommand,
    NO_COMMAND,
    SaveCommand,
)
from membank.memory.models import MemoryBank, MemoryEntry
from membank.memory.store import (
    apply,
    delete_memory,
    get_memory,
    list_memories,
    save_memory,
)

T1 = "2026-10-19T09:00:00.000Z"
T2 = "2026-10-19T10:00:00.000Z"


@pytest.fixture
def bank() -> MemoryBank:
    return MemoryBank(
        memories={
            "birthday": MemoryEntry("3月14日", ("family",), T1, T1),
            "lunch": MemoryEntry("ramen", ("food", "family"), T1, T1),
            "editor": MemoryEntry("vim", (), T1, T1),
        },
        last_updated=T1,
    )


class TestSave:
    def test_save_then_get(self):
        updated = save_memory(MemoryBank(), "k", "v", [])
        entry = get_memory(updated, "k")
        assert entry.value == "v"
        assert entry.tags == ()

    def test_sets_timestamps(self):
        updated = save_memory(MemoryBank(), "k", "v", ["t"], now=T1)
        entry = updated.memories["k"]
        assert entry.created_at == T1
        assert entry.updated_at == T1
        assert updated.last_updated == T1

    def test_default_timestamp_format(self):
        updated = save_memory(MemoryBank(), "k", "v")
        assert updated.last_updated.endswith("Z")
        assert len(updated.last_updated) == len(T1)

    def test_does_not_mutate_input(self, bank: MemoryBank):
        save_memory(bank, "new", "value", now=T2)
        assert "new" not in bank.memories
        assert bank.last_updated == T1

    def test_empty_value_allowed(self):
        updated = save_memory(MemoryBank(), "k", "")
        assert updated.memories["k"].value == ""

    def test_overwrite_replaces_entry_and_resets_created_at(self):
        first = save_memory(MemoryBank(), "k", "v", ["t"], now=T1)
        second = save_memory(first, "k", "v", ["t"], now=T2)
        entry = second.memories["k"]
        assert entry.value == "v"
        assert entry.tags == ("t",)
        assert entry.updated_at == T2
        # Overwrites are wholesale: created_at moves too.
        assert entry.created_at == T2

    def test_overwrite_keeps_position(self, bank: MemoryBank):
        updated = save_memory(bank, "birthday", "4月1日", now=T2)
        assert list(updated.memories) == ["birthday", "lunch", "editor"]

    @pytest.mark.parametrize("key", ["", None, 42])
    def test_invalid_key(self, key):
        with pytest.raises(InvalidArgument):
            save_memory(MemoryBank(), key, "v")

    @pytest.mark.parametrize("key", ["my key", "k\tv", "k\n"])
    def test_key_with_whitespace(self, key):
        with pytest.raises(InvalidArgument):
            save_memory(MemoryBank(), key, "v")

    def test_invalid_value(self):
        with pytest.raises(InvalidArgument):
            save_memory(MemoryBank(), "k", None)

    def test_invalid_tag(self):
        with pytest.raises(ValueError):
            save_memory(MemoryBank(), "k", "v", ["ok", 3])


class TestGet:
    def test_missing_key(self, bank: MemoryBank):
        assert get_memory(bank, "nope") is None

    def test_empty_bank(self):
        assert get_memory(MemoryBank(), "k") is None


class TestDelete:
    def test_removes_entry(self, bank: MemoryBank):
        updated = delete_memory(bank, "lunch", now=T2)
        assert "lunch" not in updated.memories
        assert updated.last_updated == T2
        assert "lunch" in bank.memories

    def test_absent_key_is_noop(self, bank: MemoryBank):
        assert delete_memory(bank, "nope", now=T2) is bank
        assert bank.last_updated == T1

    def test_absent_key_on_empty_bank(self):
        empty = MemoryBank(last_updated=T1)
        result = delete_memory(empty, "k", now=T2)
        assert result is empty
        assert result.last_updated == T1


class TestList:
    def test_all(self, bank: MemoryBank):
        assert list(list_memories(bank)) == ["birthday", "lunch", "editor"]

    def test_by_tag(self, bank: MemoryBank):
        assert list(list_memories(bank, "family")) == ["birthday", "lunch"]
        assert list(list_memories(bank, "food")) == ["lunch"]

    def test_tag_match_is_case_sensitive(self, bank: MemoryBank):
        assert list_memories(bank, "Family") == {}

    def test_empty_filter_means_all(self, bank: MemoryBank):
        assert len(list_memories(bank, "")) == 3

    def test_empty_bank(self):
        assert list_memories(MemoryBank()) == {}


class TestApply:
    def test_save(self):
        result = apply(MemoryBank(), SaveCommand("k", "v", ("a", "b")), now=T1)
        assert result.mutated
        assert result.change_description == "メモリを保存: k"
        assert result.message == "「k」を「v」として保存しました。 タグ: #a #b"
        assert result.bank.memories["k"].tags == ("a", "b")

    def test_save_without_tags(self):
        result = apply(MemoryBank(), SaveCommand("k", "v"))
        assert result.message == "「k」を「v」として保存しました。"

    def test_get_found(self, bank: MemoryBank):
        result = apply(bank, GetCommand("lunch"))
        assert not result.mutated
        assert result.bank is bank
        assert result.message == "「lunch」は「ramen」です。 (タグ: #food #family)"

    def test_get_without_tags(self, bank: MemoryBank):
        assert apply(bank, GetCommand("editor")).message == "「editor」は「vim」です。"

    def test_get_missing(self, bank: MemoryBank):
        assert apply(bank, GetCommand("nope")).message == "「nope」は保存されていません。"

    def test_delete(self, bank: MemoryBank):
        result = apply(bank, DeleteCommand("editor"), now=T2)
        assert result.mutated
        assert result.change_description == "メモリを削除: editor"
        assert result.message == "「editor」を削除しました。"
        assert "editor" not in result.bank.memories

    def test_delete_missing(self, bank: MemoryBank):
        result = apply(bank, DeleteCommand("nope"))
        assert not result.mutated
        assert result.bank is bank
        assert result.message == "「nope」は保存されていません。"

    def test_list(self, bank: MemoryBank):
        result = apply(bank, ListCommand())
        assert result.message.splitlines() == [
            "保存されているメモリ:",
            "- birthday: 3月14日 (タグ: #family)",
            "- lunch: ramen (タグ: #food #family)",
            "- editor: vim",
        ]

    def test_list_filtered(self, bank: MemoryBank):
        result = apply(bank, ListCommand("food"))
        assert result.message == "タグ「#food」で保存されているメモリ:\n- lunch: ramen (タグ: #food #family)"

    def test_list_empty(self):
        assert apply(MemoryBank(), ListCommand()).message == "保存されているメモリはありません。"

    def test_list_filtered_empty(self, bank: MemoryBank):
        result = apply(bank, ListCommand("work"))
        assert result.message == "タグ「#work」で保存されているメモリはありません。"

    def test_no_command(self, bank: MemoryBank):
        result = apply(bank, NO_COMMAND)
        assert result.message is None
        assert not result.mutated

    def test_invalid_save_propagates(self):
        with pytest.raises(InvalidArgument):
            apply(MemoryBank(), SaveCommand("", "v"))

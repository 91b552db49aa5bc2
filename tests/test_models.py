"""Tests for memory bank (de)serialization."""

from __future__ import annotations

import pytest

from membank.errors import InvalidDocument
from membank.memory.models import MemoryBank, MemoryEntry

DOC = {
    "memories": {
        "birthday": {
            "value": "3月14日",
            "tags": ["family"],
            "created_at": "2026-10-19T09:00:00.000Z",
            "updated_at": "2026-10-19T09:00:00.000Z",
        }
    },
    "metadata": {"last_updated": "2026-10-19T09:00:00.000Z", "owner": "jack"},
    "version_note": "kept",
}


class TestFromDict:
    def test_full_document(self):
        bank = MemoryBank.from_dict(DOC)
        entry = bank.memories["birthday"]
        assert entry == MemoryEntry(
            "3月14日", ("family",), "2026-10-19T09:00:00.000Z", "2026-10-19T09:00:00.000Z"
        )
        assert bank.last_updated == "2026-10-19T09:00:00.000Z"

    def test_round_trip_keeps_unknown_members(self):
        assert MemoryBank.from_dict(DOC).to_dict() == DOC

    def test_empty_document(self):
        bank = MemoryBank.from_dict({})
        assert bank.memories == {}
        assert bank.last_updated is None

    def test_missing_tags_and_timestamps(self):
        bank = MemoryBank.from_dict({"memories": {"k": {"value": "v"}}})
        assert bank.memories["k"] == MemoryEntry("v")

    @pytest.mark.parametrize(
        "doc",
        [
            [],
            {"memories": []},
            {"memories": {"k": "v"}},
            {"memories": {"k": {"tags": []}}},
            {"memories": {"k": {"value": 1}}},
            {"memories": {"k": {"value": "v", "tags": "a"}}},
            {"memories": {"k": {"value": "v", "tags": [1]}}},
            {"memories": {"k": {"value": "v", "created_at": 5}}},
            {"metadata": "yesterday"},
            {"metadata": {"last_updated": 123}},
        ],
    )
    def test_rejects_malformed(self, doc):
        with pytest.raises(InvalidDocument):
            MemoryBank.from_dict(doc)


class TestToDict:
    def test_empty_bank(self):
        assert MemoryBank().to_dict() == {"memories": {}, "metadata": {}}

    def test_entry_shape(self):
        entry = MemoryEntry("v", ("a", "b"), "c", "u")
        assert entry.to_dict() == {
            "value": "v",
            "tags": ["a", "b"],
            "created_at": "c",
            "updated_at": "u",
        }

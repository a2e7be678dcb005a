"""Sync journal tests.

Covers the JSONL journal format, reading events back, and rebuilding
module records by replay.
"""

from __future__ import annotations

import json
from decimal import Decimal
from pathlib import Path

import pytest

from dealsync.sync.journal import (
    InMemorySyncJournal,
    JsonlSyncJournal,
    SyncEvent,
    SyncEventType,
    SyncJournal,
    SyncJournalError,
    replay_records,
)
from dealsync.sync.mediator import SyncMediator
from dealsync.sync.models import FieldMapping, Relationship, RelationshipType
from dealsync.sync.store import InMemoryModuleStore


def _updated(module: str, origin: str | None = None, **changes: object) -> SyncEvent:
    return SyncEvent.module_updated(module, dict(changes), origin)


class TestJsonlSyncJournal:
    def test_writes_sorted_compact_lines(self, tmp_path: Path) -> None:
        path = tmp_path / "journal.jsonl"

        JsonlSyncJournal(path).record(_updated("a", b=2, a=1))

        line = path.read_text(encoding="utf-8").splitlines()[0]
        payload = json.loads(line)
        assert line == json.dumps(payload, sort_keys=True, separators=(",", ":"))
        assert payload["event_type"] == "sync.module.updated"
        assert payload["changes"] == {"a": 1, "b": 2}

    def test_appends_to_existing_journal(self, tmp_path: Path) -> None:
        path = tmp_path / "journal.jsonl"
        journal = JsonlSyncJournal(path)
        journal.record(_updated("a", x=1))

        JsonlSyncJournal(path).record(_updated("b", y=2))

        assert [e.module for e in journal.read_events()] == ["a", "b"]

    def test_creates_parent_directories(self, tmp_path: Path) -> None:
        path = tmp_path / "nested" / "dir" / "journal.jsonl"

        JsonlSyncJournal(path).record(_updated("a", x=1))

        assert path.exists()

    def test_round_trips_events(self, tmp_path: Path) -> None:
        journal = JsonlSyncJournal(tmp_path / "journal.jsonl")
        skipped = SyncEvent.mapping_skipped("b", "a-b", "x -> y", "bad value")
        journal.record(_updated("a", x={"nested": [1, 2]}))
        journal.record(skipped)

        events = journal.read_events()

        assert events[0].changes == {"x": {"nested": [1, 2]}}
        assert events[1] == skipped

    def test_unrepresentable_values_are_stored_as_text(self, tmp_path: Path) -> None:
        journal = JsonlSyncJournal(tmp_path / "journal.jsonl")

        journal.record(_updated("a", price=Decimal("1.50")))

        assert journal.read_events()[0].changes == {"price": "1.50"}

    def test_missing_journal_reads_empty(self, tmp_path: Path) -> None:
        assert JsonlSyncJournal(tmp_path / "never-written.jsonl").read_events() == []

    def test_malformed_line_reports_location(self, tmp_path: Path) -> None:
        path = tmp_path / "journal.jsonl"
        journal = JsonlSyncJournal(path)
        journal.record(_updated("a", x=1))
        with open(path, mode="a", encoding="utf-8") as f:
            f.write("{not json\n")

        with pytest.raises(SyncJournalError, match="journal.jsonl:2"):
            journal.read_events()

    def test_write_failure_raises(self, tmp_path: Path) -> None:
        with pytest.raises(SyncJournalError, match="Cannot append"):
            JsonlSyncJournal(tmp_path).record(_updated("a", x=1))

    def test_satisfies_protocol(self, tmp_path: Path) -> None:
        assert isinstance(JsonlSyncJournal(tmp_path / "j.jsonl"), SyncJournal)
        assert isinstance(InMemorySyncJournal(), SyncJournal)


class TestReplayRecords:
    def test_shallow_merge_in_order(self) -> None:
        events = [
            _updated("a", x=1, y={"k": 1}),
            SyncEvent.mapping_skipped("b", "a-b", "x -> y", "boom"),
            _updated("a", y={"j": 2}),
            _updated("b", origin="a", z=3),
        ]

        assert replay_records(events) == {"a": {"x": 1, "y": {"j": 2}}, "b": {"z": 3}}

    def test_empty(self) -> None:
        assert replay_records([]) == {}


class TestMediatorReplay:
    def test_replay_restores_propagated_state(self, tmp_path: Path) -> None:
        relationship = Relationship(
            source_module="a",
            target_module="b",
            relationship_type=RelationshipType.DATA_FLOW,
            strength=1.0,
            mappings=(FieldMapping("x", "copy.x"),),
        )
        journal = JsonlSyncJournal(tmp_path / "journal.jsonl")
        live = SyncMediator(["a", "b"], [relationship], journal=journal)
        live.update_module_data("a", {"x": 1})
        live.update_module_data("a", {"w": 2}, propagate=False)

        store = InMemoryModuleStore(replay_records(journal.read_events()))
        restored = SyncMediator(["a", "b"], [relationship], store=store)

        assert restored.get_module_data("a") == {"x": 1, "w": 2}
        assert restored.get_module_data("b") == {"copy": {"x": 1}}

    def test_in_memory_journal_filters_by_type(self) -> None:
        journal = InMemorySyncJournal()
        journal.record(_updated("a", x=1))
        journal.record(SyncEvent.mapping_skipped("b", "a-b", "x -> y", "boom"))

        assert [e.module for e in journal.of_type(SyncEventType.MAPPING_SKIPPED)] == ["b"]
        assert journal.read_events() == journal.events

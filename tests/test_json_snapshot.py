"""Tests for the JSON export adapter."""

import json
import logging
from datetime import date, datetime

import pytest

from cadence.adapters.json_snapshot import JsonSnapshotStore, SnapshotError
from cadence.core.models import ActivityKind, Weekly


@pytest.fixture
def export():
    return {
        "activities": [
            {
                "id": "gym",
                "name": "Gym",
                "type": "checkbox",
                "schedule": {"type": "weekly", "weekdays": [1, 3, 5]},
                "carryForward": True,
                "createdAt": "2024-02-05T06:00:00",
            },
            {"id": "routine", "name": "Morning Routine", "type": "container"},
            {"id": "x", "name": "X", "parentID": "routine"},
        ],
        "logs": [
            {
                "id": "l1",
                "activityID": "gym",
                "date": "2024-02-05",
                "status": "completed",
                "completedAt": "2024-02-05T18:30:00Z",
            },
        ],
        "vacationDays": ["2024-02-10", {"date": "2024-02-11"}],
        "configSnapshots": [
            {
                "activityID": "x",
                "effectiveFrom": "2024-01-01",
                "effectiveUntil": "2024-01-31",
                "schedule": {"type": "daily"},
            }
        ],
    }


class TestJsonSnapshotStore:
    def test_loads_all_sections(self, tmp_path, export):
        path = tmp_path / "tracker.json"
        path.write_text(json.dumps(export))

        snapshot = JsonSnapshotStore(path).load()

        assert [a.id for a in snapshot.activities] == ["gym", "routine", "x"]
        gym = snapshot.get("gym")
        assert gym.schedule == Weekly(frozenset({1, 3, 5}))
        assert gym.created_at == date(2024, 2, 5)
        assert snapshot.get("routine").kind is ActivityKind.CONTAINER
        assert snapshot.get("x").parent_id == "routine"
        assert len(snapshot.logs) == 1
        assert snapshot.logs[0].completed_at == datetime(2024, 2, 5, 18, 30)
        assert snapshot.vacations == frozenset({date(2024, 2, 10), date(2024, 2, 11)})
        assert len(snapshot.config_snapshots) == 1

    def test_missing_file_is_empty(self, tmp_path):
        store = JsonSnapshotStore(tmp_path / "nope.json")
        assert not store.exists()
        snapshot = store.load()
        assert snapshot.activities == ()
        assert snapshot.logs == ()

    def test_missing_sections_are_empty(self, tmp_path):
        path = tmp_path / "tracker.json"
        path.write_text(json.dumps({"activities": [{"id": "a"}]}))
        snapshot = JsonSnapshotStore(path).load()
        assert len(snapshot.activities) == 1
        assert snapshot.vacation_days == ()

    def test_malformed_json_raises(self, tmp_path):
        path = tmp_path / "tracker.json"
        path.write_text("{not json")
        with pytest.raises(SnapshotError, match="Malformed JSON"):
            JsonSnapshotStore(path).load()

    def test_non_object_raises(self, tmp_path):
        path = tmp_path / "tracker.json"
        path.write_text("[]")
        with pytest.raises(SnapshotError):
            JsonSnapshotStore(path).load()

    def test_bad_records_skipped_with_warning(self, tmp_path, caplog):
        path = tmp_path / "tracker.json"
        path.write_text(
            json.dumps(
                {
                    "activities": [{"id": "a"}, {"name": "no id"}],
                    "logs": [{"activityID": "a", "date": "not-a-date"}],
                }
            )
        )
        with caplog.at_level(logging.WARNING, logger="cadence.adapters.json_snapshot"):
            snapshot = JsonSnapshotStore(path).load()

        assert [a.id for a in snapshot.activities] == ["a"]
        assert snapshot.logs == ()
        assert "Skipping malformed activity" in caplog.text
        assert "Skipping malformed log" in caplog.text

    def test_expands_user_path(self):
        store = JsonSnapshotStore("~/tracker.json")
        assert "~" not in str(store.path)

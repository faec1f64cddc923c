"""
Tests for the meeting store adapters.
"""

import json

import pendulum
import pytest

from meetsync.adapters.json_store import JsonFileMeetingStore
from meetsync.adapters.memory_store import InMemoryMeetingStore
from meetsync.domain.exceptions import StorageError
from meetsync.domain.models import Meeting, Participant
from meetsync.domain.slot_generator import SlotGenerator
from meetsync.services.meeting_service import MeetingService

SLOTS = ["2025-09-25T16:00:00.000Z", "2025-09-25T16:30:00.000Z"]


def _meeting(code: str = "QWE456") -> Meeting:
    meeting = Meeting(
        code=code,
        name="Offsite",
        creator_name="Alice",
        time_slots=list(SLOTS),
        created_at=pendulum.datetime(2025, 9, 20, 11, 0, tz="America/Los_Angeles"),
    )
    meeting.participants.append(
        Participant(name="Bob", joined_at=pendulum.datetime(2025, 9, 21, 8, 0, tz="America/Los_Angeles"))
    )
    meeting.add_vote(SLOTS[1], "Bob")
    return meeting


class TestInMemoryMeetingStore:
    """Tests for InMemoryMeetingStore."""

    def test_missing_code_returns_none(self):
        """Test unknown codes are reported as None."""
        assert InMemoryMeetingStore().get("NOPE00") is None

    def test_keys_are_exact(self):
        """Test the store does no case folding of its own."""
        store = InMemoryMeetingStore()
        store.put("QWE456", _meeting())

        assert store.get("qwe456") is None
        assert store.list_codes() == ["QWE456"]

    def test_get_returns_independent_copy(self):
        """Test mutations are invisible until put."""
        store = InMemoryMeetingStore()
        store.put("QWE456", _meeting())

        fetched = store.get("QWE456")
        fetched.add_vote(SLOTS[0], "Mallory")

        assert store.get("QWE456").votes[SLOTS[0]] == []

        store.put("QWE456", fetched)
        assert store.get("QWE456").votes[SLOTS[0]] == ["Mallory"]


class TestJsonFileMeetingStore:
    """Tests for JsonFileMeetingStore."""

    def test_missing_file_starts_empty(self, tmp_path):
        """Test a fresh store has no meetings and creates no file."""
        store = JsonFileMeetingStore(tmp_path / "meetings.json")

        assert store.list_codes() == []
        assert not (tmp_path / "meetings.json").exists()

    def test_round_trip_across_instances(self, tmp_path):
        """Test a meeting written by one store is read back identically by another."""
        path = tmp_path / "meetings.json"
        original = _meeting()
        JsonFileMeetingStore(path).put(original.code, original)

        reloaded = JsonFileMeetingStore(path).get(original.code)

        assert reloaded is not None
        assert reloaded.votes == original.votes
        assert reloaded.participants[0].name == "Bob"
        assert reloaded.participants[0].joined_at == original.participants[0].joined_at
        assert reloaded.to_dict() == original.to_dict()

    def test_file_layout_is_one_record_per_code(self, tmp_path):
        """Test the on-disk layout is keyed by code."""
        path = tmp_path / "meetings.json"
        store = JsonFileMeetingStore(path)
        store.put("QWE456", _meeting("QWE456"))
        store.put("RTY789", _meeting("RTY789"))

        data = json.loads(path.read_text(encoding="utf-8"))

        assert set(data) == {"QWE456", "RTY789"}
        assert data["QWE456"]["votes"] == {SLOTS[0]: [], SLOTS[1]: ["Bob"]}
        assert data["QWE456"]["creatorName"] == "Alice"

    def test_stores_sharing_a_file_keep_each_others_meetings(self, tmp_path):
        """Test a write through one store does not drop records written through another."""
        path = tmp_path / "meetings.json"
        first = JsonFileMeetingStore(path)
        second = JsonFileMeetingStore(path)

        first.put("QWE456", _meeting("QWE456"))
        second.put("RTY789", _meeting("RTY789"))

        data = json.loads(path.read_text(encoding="utf-8"))
        assert set(data) == {"QWE456", "RTY789"}
        assert sorted(first.list_codes()) == ["QWE456", "RTY789"]
        assert first.get("RTY789") is not None

    def test_get_sees_votes_written_by_another_store(self, tmp_path):
        """Test reads are not served from a stale snapshot."""
        path = tmp_path / "meetings.json"
        reader = JsonFileMeetingStore(path)
        writer = JsonFileMeetingStore(path)
        writer.put("QWE456", _meeting())
        assert reader.get("QWE456").votes[SLOTS[0]] == []

        updated = writer.get("QWE456")
        updated.add_vote(SLOTS[0], "Bob")
        writer.put("QWE456", updated)

        assert reader.get("QWE456").votes[SLOTS[0]] == ["Bob"]

    def test_services_on_separate_stores_share_one_file(self, tmp_path):
        """Test two services over one path, as two CLI processes would run, lose nothing."""
        path = tmp_path / "meetings.json"
        services = [
            MeetingService(
                store=JsonFileMeetingStore(path),
                slot_generator=SlotGenerator(timezone="America/Los_Angeles"),
            )
            for _ in range(2)
        ]
        first_code = services[0].create_meeting("Offsite", "Alice", ["2025-09-25"], "09:00", "09:30").code
        second_code = services[1].create_meeting("Retro", "Carol", ["2025-09-25"], "09:00", "09:30").code

        services[0].submit_vote(first_code, "Bob", [SLOTS[0]])
        services[1].submit_vote(first_code, "Dan", [SLOTS[0]])

        assert set(JsonFileMeetingStore(path).list_codes()) == {first_code, second_code}
        assert services[0].get_meeting(first_code).votes[SLOTS[0]] == ["Bob", "Dan"]

    def test_creates_parent_directories(self, tmp_path):
        """Test the store path may point into a directory not yet created."""
        path = tmp_path / "nested" / "dir" / "meetings.json"

        JsonFileMeetingStore(path).put("QWE456", _meeting())

        assert path.exists()

    def test_invalid_json_raises_storage_error(self, tmp_path):
        """Test a corrupt file is reported, not silently replaced."""
        path = tmp_path / "meetings.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(StorageError, match="Could not read"):
            JsonFileMeetingStore(path)

    def test_non_object_root_raises_storage_error(self, tmp_path):
        """Test the root must be an object keyed by code."""
        path = tmp_path / "meetings.json"
        path.write_text("[]", encoding="utf-8")

        with pytest.raises(StorageError, match="JSON object"):
            JsonFileMeetingStore(path)

    def test_corrupt_record_raises_storage_error(self, tmp_path):
        """Test a record missing required fields surfaces as StorageError."""
        path = tmp_path / "meetings.json"
        path.write_text(json.dumps({"QWE456": {"id": "QWE456"}}), encoding="utf-8")
        store = JsonFileMeetingStore(path)

        with pytest.raises(StorageError, match="Corrupt meeting record"):
            store.get("QWE456")

    def test_service_over_json_store(self, tmp_path):
        """Test votes survive a restart when the service uses the file store."""
        path = tmp_path / "meetings.json"
        service = MeetingService(
            store=JsonFileMeetingStore(path),
            slot_generator=SlotGenerator(timezone="America/Los_Angeles"),
        )
        code = service.create_meeting("Offsite", "Alice", ["2025-09-25"], "09:00", "09:30").code
        service.submit_vote(code, "Bob", [SLOTS[0]])

        restarted = MeetingService(
            store=JsonFileMeetingStore(path),
            slot_generator=SlotGenerator(timezone="America/Los_Angeles"),
        )
        results = restarted.get_results(code)

        assert [(b.slot, b.votes, b.percentage) for b in results.best_slots] == [(SLOTS[0], 1, 100)]
        assert results.meeting.participants[0].name == "Bob"

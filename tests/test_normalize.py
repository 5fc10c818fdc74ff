from datetime import datetime, timezone, timedelta
from memdash.live.normalize import (
    normalize_document,
    normalize_snapshot,
    normalize_timestamp,
    parse_timestamp,
    record_to_document,
    to_iso,
)
from memdash.models.record import MemoryRecord


class FakeSnapshot:
    """Firestore-style document snapshot."""
    def __init__(self, id, data):
        self.id = id
        self._data = data

    def to_dict(self):
        return self._data


def test_missing_fields_get_defaults():
    r = normalize_document({"id": "m1"})
    assert r == MemoryRecord(id="m1", fact="", tags=[], pinned=False, related_to=[],
                             expires_at=None, created_at=None, updated_at=None)

def test_malformed_fields_degrade():
    r = normalize_document({
        "id": "m1",
        "fact": 42,
        "tags": "not-a-list",
        "pinned": "yes",
        "relatedTo": ["a", 3, None, "b"],
    })
    assert r.fact == ""
    assert r.tags == []
    assert r.pinned is False
    assert r.related_to == ["a", "b"]

def test_full_document():
    r = normalize_document({
        "id": "m1",
        "fact": "user prefers dark theme",
        "tags": ["ui", "prefs"],
        "pinned": True,
        "relatedTo": ["m2"],
        "createdAt": "2024-03-01T10:00:00.000Z",
    })
    assert r.fact == "user prefers dark theme"
    assert r.tags == ["ui", "prefs"]
    assert r.pinned is True
    assert r.related_to == ["m2"]
    assert r.created_at == "2024-03-01T10:00:00.000Z"

def test_snapshot_object():
    snap = FakeSnapshot("abc", {"fact": "hello", "pinned": True})
    r = normalize_document(snap)
    assert r.id == "abc"
    assert r.fact == "hello"
    assert r.pinned is True

def test_snapshot_object_without_data():
    r = normalize_document(FakeSnapshot("gone", None))
    assert r.id == "gone"
    assert r.fact == ""
    assert r.tags == []

def test_native_timestamps_become_iso():
    aware = datetime(2024, 1, 2, 3, 4, 5, 678000, tzinfo=timezone.utc)
    naive = datetime(2024, 1, 2, 3, 4, 5, 678000)
    shifted = datetime(2024, 1, 2, 5, 4, 5, 678000, tzinfo=timezone(timedelta(hours=2)))

    r = normalize_document({"id": "m", "createdAt": aware, "updatedAt": naive, "expiresAt": shifted})
    assert r.created_at == "2024-01-02T03:04:05.678Z"
    assert r.updated_at == "2024-01-02T03:04:05.678Z"
    assert r.expires_at == "2024-01-02T03:04:05.678Z"

def test_plain_timestamps_pass_through():
    assert normalize_timestamp("2024-01-01") == "2024-01-01"
    assert normalize_timestamp(1700000000000) == 1700000000000
    assert normalize_timestamp(None) is None

def test_parse_timestamp():
    assert parse_timestamp("2024-03-01T10:00:00.000Z") == datetime(2024, 3, 1, 10, tzinfo=timezone.utc)
    assert parse_timestamp("2024-03-01T12:00:00+02:00") == datetime(2024, 3, 1, 10, tzinfo=timezone.utc)
    assert parse_timestamp(0) == datetime(1970, 1, 1, tzinfo=timezone.utc)
    assert parse_timestamp("not a date") is None
    assert parse_timestamp(True) is None
    assert parse_timestamp(None) is None
    assert parse_timestamp(["2024"]) is None

def test_to_iso_round_trips_through_parse():
    dt = datetime(2024, 5, 6, 7, 8, 9, 123000, tzinfo=timezone.utc)
    assert parse_timestamp(to_iso(dt)) == dt

def test_record_to_document_inverts_normalize():
    doc = {
        "id": "m1",
        "fact": "f",
        "tags": ["a"],
        "pinned": True,
        "relatedTo": ["m2"],
        "expiresAt": None,
        "createdAt": "2024-03-01T10:00:00.000Z",
        "updatedAt": None,
    }
    assert record_to_document(normalize_document(doc)) == doc

def test_normalize_snapshot_keeps_order():
    records = normalize_snapshot([{"id": "b"}, {"id": "a"}, {"id": "c"}])
    assert [r.id for r in records] == ["b", "a", "c"]

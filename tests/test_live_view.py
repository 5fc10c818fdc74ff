import pytest
from memdash.live.collection import LiveCollectionView, pinned_first
from memdash.models.record import MemoryRecord
from memdash.storage.subscription import InMemorySource


class ManualSource:
    """Source that only pushes when the test says so."""
    def __init__(self):
        self.subscriptions = []

    def subscribe(self, user_id, on_snapshot, on_error):
        sub = {"user_id": user_id, "on_snapshot": on_snapshot, "on_error": on_error, "active": True}
        self.subscriptions.append(sub)

        def unsubscribe():
            sub["active"] = False

        return unsubscribe


def doc(id, created, pinned=False, **extra):
    return {"id": id, "fact": f"fact {id}", "pinned": pinned, "createdAt": created, **extra}


@pytest.fixture
def source():
    src = InMemorySource()
    src.replace("alice", [
        doc("A", "2024-03-04T00:00:00.000Z"),
        doc("B", "2024-03-03T00:00:00.000Z", pinned=True),
        doc("C", "2024-03-02T00:00:00.000Z"),
        doc("D", "2024-03-01T00:00:00.000Z", pinned=True),
    ])
    src.replace("bob", [doc("X", "2024-01-01T00:00:00.000Z")])
    return src


def test_pinned_first_is_stable():
    records = [
        MemoryRecord(id="A"),
        MemoryRecord(id="B", pinned=True),
        MemoryRecord(id="C"),
        MemoryRecord(id="D", pinned=True),
    ]
    assert [r.id for r in pinned_first(records)] == ["B", "D", "A", "C"]

def test_no_identity_is_empty_and_not_loading(source):
    view = LiveCollectionView(source, None)
    assert view.records == []
    assert view.loading is False
    assert view.wait_until_loaded(0)

def test_snapshot_is_partitioned_pinned_first(source):
    view = LiveCollectionView(source, "alice")
    assert view.loading is False
    assert [r.id for r in view.records] == ["B", "D", "A", "C"]

def test_loading_until_first_snapshot():
    src = ManualSource()
    view = LiveCollectionView(src, "alice")
    assert view.loading is True
    assert not view.wait_until_loaded(0)

    src.subscriptions[0]["on_snapshot"]([doc("A", None)])
    assert view.loading is False
    assert [r.id for r in view.records] == ["A"]

def test_updates_replace_the_whole_set(source):
    view = LiveCollectionView(source, "alice")
    source.put("alice", doc("E", "2024-03-05T00:00:00.000Z"))
    assert [r.id for r in view.records] == ["B", "D", "E", "A", "C"]

    source.delete("alice", "B")
    assert [r.id for r in view.records] == ["D", "E", "A", "C"]

def test_identity_switch_tears_down_first(source):
    view = LiveCollectionView(source, "alice")
    assert source.subscriber_count("alice") == 1

    view.set_identity("bob")
    assert source.subscriber_count("alice") == 0
    assert source.subscriber_count("bob") == 1
    assert [r.id for r in view.records] == ["X"]

    # Changes to the previous identity no longer reach the view
    source.put("alice", doc("Z", "2024-04-01T00:00:00.000Z"))
    assert [r.id for r in view.records] == ["X"]

def test_stale_snapshot_is_dropped():
    src = ManualSource()
    view = LiveCollectionView(src, "alice")
    old = src.subscriptions[0]

    view.set_identity("bob")
    assert old["active"] is False
    assert view.records == []
    assert view.loading is True

    # A late delivery from the torn-down subscription
    old["on_snapshot"]([doc("A", None)])
    assert view.records == []
    assert view.loading is True

    src.subscriptions[1]["on_snapshot"]([doc("X", None)])
    assert [r.id for r in view.records] == ["X"]

def test_sign_out_resets(source):
    view = LiveCollectionView(source, "alice")
    view.set_identity(None)
    assert view.records == []
    assert view.loading is False
    assert source.subscriber_count("alice") == 0

def test_same_identity_keeps_subscription(source):
    view = LiveCollectionView(source, "alice")
    view.set_identity("alice")
    assert source.subscriber_count("alice") == 1

def test_listeners_see_every_change(source):
    view = LiveCollectionView(source, "alice")
    seen = []
    view.add_listener(lambda records: seen.append([r.id for r in records]))

    source.delete("alice", "A")
    assert seen[-1] == ["B", "D", "C"]

def test_channel_error_is_reported(source):
    errors = []
    view = LiveCollectionView(source, "alice", on_error=errors.append)
    boom = RuntimeError("permission denied")

    source.fail("alice", boom)
    assert errors == [boom]
    assert view.error is boom
    # Last good snapshot is kept
    assert len(view.records) == 4

def test_close_unsubscribes(source):
    with LiveCollectionView(source, "alice"):
        assert source.subscriber_count("alice") == 1
    assert source.subscriber_count("alice") == 0

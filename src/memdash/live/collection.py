"""
Live collection of memory records for one identity.

The view owns exactly one subscription to a RecordSource. Every push is a
complete replacement snapshot: it is normalized, partitioned pinned-first and
published to listeners. Switching identity tears the old subscription down
before the new one is opened, and snapshots from a torn-down subscription are
dropped so a previous identity can never overwrite current state.
"""
import threading
import weakref
from typing import Any, Callable, List, Optional, Protocol
from memdash.live.normalize import normalize_snapshot
from memdash.models.record import MemoryRecord
from memdash.logging import logger

SnapshotCallback = Callable[[List[Any]], None]
ErrorCallback = Callable[[Exception], None]
Unsubscribe = Callable[[], None]
Listener = Callable[[List[MemoryRecord]], None]


class RecordSource(Protocol):
    def subscribe(
        self,
        user_id: str,
        on_snapshot: SnapshotCallback,
        on_error: ErrorCallback,
    ) -> Unsubscribe:
        """Push full snapshots (newest first) for user_id until unsubscribed."""
        ...


class ViewCallback:
    """
    Forwards source pushes to a view method without keeping the view alive.

    Sources that run on their own thread check `alive` and stop once the
    view has been garbage collected.
    """
    def __init__(self, method: Callable[[int, Any], None], generation: int):
        self._method = weakref.WeakMethod(method)
        self._generation = generation

    @property
    def alive(self) -> bool:
        return self._method() is not None

    def __call__(self, arg: Any):
        method = self._method()
        if method is not None:
            method(self._generation, arg)


def pinned_first(records: List[MemoryRecord]) -> List[MemoryRecord]:
    """Stable partition: pinned records first, source order kept within each group."""
    return sorted(records, key=lambda r: not r.pinned)


class LiveCollectionView:
    def __init__(
        self,
        source: RecordSource,
        user_id: Optional[str] = None,
        on_error: Optional[ErrorCallback] = None,
    ):
        self._source = source
        self._on_error = on_error
        self._lock = threading.RLock()
        self._listeners: List[Listener] = []
        self._unsubscribe: Optional[Unsubscribe] = None
        self._generation = 0

        self._user_id: Optional[str] = None
        self._records: List[MemoryRecord] = []
        self._loading = True
        self._loaded = threading.Event()
        self.error: Optional[Exception] = None

        self._subscribe(user_id)

    # -- state -------------------------------------------------------------

    @property
    def user_id(self) -> Optional[str]:
        return self._user_id

    @property
    def records(self) -> List[MemoryRecord]:
        with self._lock:
            return list(self._records)

    @property
    def loading(self) -> bool:
        with self._lock:
            return self._loading

    def wait_until_loaded(self, timeout: Optional[float] = None) -> bool:
        """Block until the current identity's first snapshot has arrived. Returns False on timeout."""
        return self._loaded.wait(timeout)

    def add_listener(self, listener: Listener):
        """Register a callback invoked with the new record list after every change."""
        self._listeners.append(listener)

    # -- subscription lifecycle --------------------------------------------

    def set_identity(self, user_id: Optional[str]):
        """Tear down the current subscription and subscribe for user_id."""
        with self._lock:
            if user_id == self._user_id:
                return
            logger.info(f"Switching live collection identity {self._user_id!r} -> {user_id!r}")
            self._teardown()
            self._subscribe(user_id)

    def close(self):
        with self._lock:
            self._teardown()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def _teardown(self):
        # Bump first so anything the old subscription delivers from now on is stale
        self._generation += 1
        if self._unsubscribe is not None:
            unsubscribe, self._unsubscribe = self._unsubscribe, None
            unsubscribe()

    def _subscribe(self, user_id: Optional[str]):
        with self._lock:
            self._generation += 1
            generation = self._generation
            self._user_id = user_id
            self._records = []
            self.error = None

            if user_id is None:
                # Nothing to wait for
                self._loading = False
                self._loaded.set()
                self._notify()
                return

            self._loading = True
            self._loaded.clear()
            self._notify()
            self._unsubscribe = self._source.subscribe(
                user_id,
                ViewCallback(self._handle_snapshot, generation),
                ViewCallback(self._handle_error, generation),
            )

    # -- source callbacks --------------------------------------------------

    def _handle_snapshot(self, generation: int, docs: List[Any]):
        records = pinned_first(normalize_snapshot(docs))
        with self._lock:
            if generation != self._generation:
                logger.debug("Dropping snapshot from a torn-down subscription")
                return
            self._records = records
            self._loading = False
            self._loaded.set()
            self._notify()

    def _handle_error(self, generation: int, exc: Exception):
        with self._lock:
            if generation != self._generation:
                return
            self.error = exc
        logger.error(f"Live subscription for {self._user_id!r} failed: {exc}")
        if self._on_error is not None:
            self._on_error(exc)

    def _notify(self):
        records = list(self._records)
        for listener in list(self._listeners):
            listener(records)

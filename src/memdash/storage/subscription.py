"""
Record sources that feed a LiveCollectionView.

Both push complete snapshots ordered newest first, never diffs.
- InMemorySource: in-process documents, pushes synchronously on every change.
- PollingSource: polls the SQLModel store on a daemon thread and pushes only
  when the snapshot changed.
"""
import contextvars
import hashlib
import json
import threading
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple
from sqlalchemy.engine import Engine
from sqlmodel import Session
from memdash.config import settings
from memdash.live.collection import SnapshotCallback, ErrorCallback, Unsubscribe
from memdash.live.normalize import parse_timestamp
from memdash.storage.store import list_documents
from memdash.logging import logger

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def newest_first(docs: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Order raw documents by createdAt descending; undated documents go last."""
    return sorted(
        docs,
        key=lambda d: parse_timestamp(d.get("createdAt")) or _EPOCH,
        reverse=True,
    )


def callback_alive(callback) -> bool:
    """False once a weakly bound subscriber (see ViewCallback) has been collected."""
    return getattr(callback, "alive", True)


def snapshot_fingerprint(docs: List[Dict[str, Any]]) -> str:
    payload = json.dumps(docs, sort_keys=True, default=str)
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


class InMemorySource:
    def __init__(self):
        self._lock = threading.RLock()
        self._docs: Dict[str, List[Dict[str, Any]]] = {}
        self._subscribers: Dict[str, List[Tuple[SnapshotCallback, ErrorCallback]]] = {}

    def subscribe(self, user_id: str, on_snapshot: SnapshotCallback, on_error: ErrorCallback) -> Unsubscribe:
        entry = (on_snapshot, on_error)
        with self._lock:
            self._subscribers.setdefault(user_id, []).append(entry)
            docs = self.snapshot(user_id)
        on_snapshot(docs)

        def unsubscribe():
            with self._lock:
                subs = self._subscribers.get(user_id, [])
                if entry in subs:
                    subs.remove(entry)

        return unsubscribe

    def subscriber_count(self, user_id: str) -> int:
        with self._lock:
            return len(self._subscribers.get(user_id, []))

    def snapshot(self, user_id: str) -> List[Dict[str, Any]]:
        with self._lock:
            return newest_first([dict(d) for d in self._docs.get(user_id, [])])

    def replace(self, user_id: str, docs: List[Dict[str, Any]]):
        with self._lock:
            self._docs[user_id] = [dict(d) for d in docs]
        self._push(user_id)

    def put(self, user_id: str, doc: Dict[str, Any]):
        """Insert doc, or replace the document with the same id."""
        with self._lock:
            docs = [d for d in self._docs.get(user_id, []) if d.get("id") != doc.get("id")]
            docs.append(dict(doc))
            self._docs[user_id] = docs
        self._push(user_id)

    def delete(self, user_id: str, doc_id: str):
        with self._lock:
            self._docs[user_id] = [d for d in self._docs.get(user_id, []) if d.get("id") != doc_id]
        self._push(user_id)

    def fail(self, user_id: str, exc: Exception):
        """Report a channel error to every subscriber of user_id."""
        with self._lock:
            subs = list(self._subscribers.get(user_id, []))
        for _, on_error in subs:
            on_error(exc)

    def _push(self, user_id: str):
        with self._lock:
            subs = [s for s in self._subscribers.get(user_id, []) if callback_alive(s[0])]
            self._subscribers[user_id] = subs
            subs = list(subs)
            docs = self.snapshot(user_id)
        for on_snapshot, _ in subs:
            on_snapshot(list(docs))


class PollingSubscription:
    def __init__(
        self,
        source: "PollingSource",
        user_id: str,
        on_snapshot: SnapshotCallback,
        on_error: ErrorCallback,
    ):
        self.source = source
        self.user_id = user_id
        self._on_snapshot = on_snapshot
        self._on_error = on_error
        self._fingerprint: Optional[str] = None
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def active(self) -> bool:
        return not self._stop.is_set()

    def poll_once(self) -> bool:
        """Fetch one snapshot; push it if it differs from the last one. Returns True if pushed."""
        docs = self.source.fetch(self.user_id)
        fingerprint = snapshot_fingerprint(docs)
        if fingerprint == self._fingerprint or self._stop.is_set():
            return False
        self._fingerprint = fingerprint
        self._on_snapshot(docs)
        return True

    def start(self):
        # Run under the caller's context so logs carry its session id
        context = contextvars.copy_context()
        self._thread = threading.Thread(
            target=context.run,
            args=(self._run,),
            name=f"memdash-poll-{self.user_id}",
            daemon=True,
        )
        self._thread.start()

    def stop(self):
        self._stop.set()

    def _run(self):
        while not self._stop.is_set():
            if not callback_alive(self._on_snapshot):
                logger.debug(f"Subscriber for {self.user_id!r} is gone; stopping poll")
                self._stop.set()
                return
            try:
                self.poll_once()
            except Exception as e:
                # No retry here: the subscriber decides what to do with the failure
                logger.error(f"Polling {self.user_id!r} failed: {e}")
                self._stop.set()
                self._on_error(e)
                return
            self._stop.wait(self.source.interval)


class PollingSource:
    def __init__(self, engine: Optional[Engine] = None, interval: Optional[float] = None):
        if engine is None:
            from memdash.db import engine as default_engine
            engine = default_engine
        self.engine = engine
        self.interval = settings.POLL_INTERVAL_SECONDS if interval is None else interval

    def fetch(self, user_id: str) -> List[Dict[str, Any]]:
        with Session(self.engine) as session:
            return [doc.to_document() for doc in list_documents(session, user_id)]

    def open(self, user_id: str, on_snapshot: SnapshotCallback, on_error: ErrorCallback) -> PollingSubscription:
        """Create a subscription without starting its polling thread."""
        return PollingSubscription(self, user_id, on_snapshot, on_error)

    def subscribe(self, user_id: str, on_snapshot: SnapshotCallback, on_error: ErrorCallback) -> Unsubscribe:
        subscription = self.open(user_id, on_snapshot, on_error)
        subscription.start()
        logger.debug(f"Polling store for {user_id!r} every {self.interval}s")
        return subscription.stop

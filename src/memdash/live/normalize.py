"""
Snapshot normalization.

Turns whatever the store pushes (plain mappings or Firestore-style snapshot
objects exposing ``.id`` and ``.to_dict()``) into canonical MemoryRecords.
Normalization is total: absent or malformed fields fall back to defaults.
"""
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any, Iterable, List, Optional, Tuple
from memdash.models.record import MemoryRecord


def to_iso(value: datetime) -> str:
    """Render a datetime as ISO-8601 UTC with millisecond precision and a Z suffix."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def normalize_timestamp(value: Any) -> Any:
    """Native datetimes become ISO strings; other present values pass through unchanged."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return to_iso(value)
    return value


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse a timestamp into an aware UTC datetime.

    Accepts datetimes, ISO-8601 strings (with or without a trailing Z) and
    epoch milliseconds. Returns None for anything else.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _string_list(value: Any) -> List[str]:
    if not isinstance(value, (list, tuple)):
        return []
    return [v for v in value if isinstance(v, str)]


def _document_parts(doc: Any) -> Tuple[str, Mapping]:
    if isinstance(doc, Mapping):
        doc_id, data = doc.get("id"), doc
    else:
        doc_id = getattr(doc, "id", None)
        to_dict = getattr(doc, "to_dict", None)
        data = to_dict() if callable(to_dict) else None
        if not isinstance(data, Mapping):
            data = {}
    return ("" if doc_id is None else str(doc_id)), data


def normalize_document(doc: Any) -> MemoryRecord:
    """Convert one raw document into a canonical MemoryRecord."""
    doc_id, data = _document_parts(doc)

    fact = data.get("fact")
    pinned = data.get("pinned")

    return MemoryRecord(
        id=doc_id,
        fact=fact if isinstance(fact, str) else "",
        tags=_string_list(data.get("tags")),
        pinned=pinned if isinstance(pinned, bool) else False,
        related_to=_string_list(data.get("relatedTo")),
        expires_at=normalize_timestamp(data.get("expiresAt")),
        created_at=normalize_timestamp(data.get("createdAt")),
        updated_at=normalize_timestamp(data.get("updatedAt")),
    )


def normalize_snapshot(docs: Iterable[Any]) -> List[MemoryRecord]:
    return [normalize_document(d) for d in docs]


def record_to_document(record: MemoryRecord) -> dict:
    """Inverse of normalize_document for a canonical record (camelCase keys)."""
    return {
        "id": record.id,
        "fact": record.fact,
        "tags": list(record.tags),
        "pinned": record.pinned,
        "relatedTo": list(record.related_to),
        "expiresAt": record.expires_at,
        "createdAt": record.created_at,
        "updatedAt": record.updated_at,
    }

"""
Export interchange format.

    {
      "version": "2.3.0",
      "exportedAt": "<ISO-8601>",
      "count": <n>,
      "memories": [{id, fact, tags, pinned, relatedTo, expiresAt, createdAt, updatedAt}, ...]
    }
"""
import json
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from memdash.errors import ExportFormatError
from memdash.live.normalize import record_to_document, to_iso
from memdash.models.record import MemoryRecord

EXPORT_VERSION = "2.3.0"


def build_export(records: List[MemoryRecord], now: Optional[datetime] = None) -> Dict[str, Any]:
    now = now or datetime.now(timezone.utc)
    return {
        "version": EXPORT_VERSION,
        "exportedAt": to_iso(now),
        "count": len(records),
        "memories": [record_to_document(r) for r in records],
    }


def dumps_export(records: List[MemoryRecord], now: Optional[datetime] = None) -> str:
    return json.dumps(build_export(records, now), indent=2, ensure_ascii=False)


def export_filename(now: Optional[datetime] = None) -> str:
    now = now or datetime.now(timezone.utc)
    return f"mcp-memories-{to_iso(now).split('T')[0]}.json"


def load_export(text: str) -> List[Dict[str, Any]]:
    """Parse an export document into raw memory documents ready for normalization."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ExportFormatError(f"Export is not valid JSON: {e}") from e

    if not isinstance(data, dict) or not isinstance(data.get("memories"), list):
        raise ExportFormatError("Export document has no 'memories' list")

    docs = [m for m in data["memories"] if isinstance(m, dict)]
    if len(docs) != len(data["memories"]):
        raise ExportFormatError("Every entry in 'memories' must be an object")
    return docs

from memdash.live.normalize import normalize_document, normalize_snapshot, parse_timestamp, to_iso
from memdash.live.collection import LiveCollectionView, RecordSource, pinned_first

__all__ = [
    "normalize_document",
    "normalize_snapshot",
    "parse_timestamp",
    "to_iso",
    "LiveCollectionView",
    "RecordSource",
    "pinned_first",
]

from collections import Counter
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional, Tuple
from memdash.live.normalize import parse_timestamp, to_iso
from memdash.models.record import MemoryRecord, MemoryStats

EXPIRING_WINDOW = timedelta(hours=24)


def compute_stats(records: List[MemoryRecord], now: Optional[datetime] = None) -> MemoryStats:
    """
    Aggregate counters over the current record set.

    expiring_soon counts expiries strictly inside (now, now + 24h). Tag counts
    are not de-duplicated within a single record.
    """
    now = parse_timestamp(now) if now is not None else datetime.now(timezone.utc)
    horizon = now + EXPIRING_WINDOW

    pinned = sum(1 for r in records if r.pinned)

    expiring_soon = 0
    for r in records:
        expires = parse_timestamp(r.expires_at)
        if expires is not None and now < expires < horizon:
            expiring_soon += 1

    tags: Dict[str, int] = {}
    for r in records:
        for t in r.tags:
            tags[t] = tags.get(t, 0) + 1

    created = [ts for ts in (parse_timestamp(r.created_at) for r in records) if ts is not None]

    return MemoryStats(
        total=len(records),
        pinned=pinned,
        expiring_soon=expiring_soon,
        tags=tags,
        newest_timestamp=to_iso(max(created)) if created else None,
        oldest_timestamp=to_iso(min(created)) if created else None,
    )


def activity_by_day(records: List[MemoryRecord], days: int = 14) -> List[Tuple[str, int]]:
    """Records per UTC day of creation, oldest first, keeping the last `days` buckets."""
    counts: Counter = Counter()
    for r in records:
        created = parse_timestamp(r.created_at)
        if created is not None:
            counts[created.date().isoformat()] += 1
    buckets = sorted(counts.items())
    return buckets[-days:] if days > 0 else []


def top_tags(tags: Dict[str, int], limit: int = 12) -> List[Tuple[str, int]]:
    return sorted(tags.items(), key=lambda kv: kv[1], reverse=True)[:limit]

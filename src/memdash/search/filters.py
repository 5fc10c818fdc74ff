from typing import List, Optional
from memdash.models.record import MemoryRecord


def all_tags(records: List[MemoryRecord]) -> List[str]:
    """Distinct tags across records, sorted."""
    return sorted({t for r in records for t in r.tags})


def filter_memories(
    records: List[MemoryRecord],
    query: str = "",
    tag: Optional[str] = None,
    pinned_only: bool = False,
) -> List[MemoryRecord]:
    """Explorer filter: substring match on fact or tags, exact tag, pinned toggle."""
    q = query.lower()
    out = []
    for r in records:
        if q and q not in r.fact.lower() and not any(q in t.lower() for t in r.tags):
            continue
        if tag and tag not in r.tags:
            continue
        if pinned_only and not r.pinned:
            continue
        out.append(r)
    return out

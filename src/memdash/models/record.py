from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass(frozen=True)
class MemoryRecord:
    """Canonical memory record. Updates replace the whole record."""
    id: str
    fact: str = ""
    tags: List[str] = field(default_factory=list)
    pinned: bool = False
    related_to: List[str] = field(default_factory=list)
    expires_at: Optional[str] = None  # ISO-8601
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


@dataclass
class MemoryStats:
    total: int = 0
    pinned: int = 0
    expiring_soon: int = 0
    tags: Dict[str, int] = field(default_factory=dict)
    newest_timestamp: Optional[str] = None
    oldest_timestamp: Optional[str] = None

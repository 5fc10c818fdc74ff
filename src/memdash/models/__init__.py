from memdash.models.record import MemoryRecord, MemoryStats
from memdash.models.memory import MemoryDoc

__all__ = [
    "MemoryRecord", "MemoryStats",
    "MemoryDoc",
]

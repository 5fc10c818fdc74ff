from memdash.search.relevance import compute_relevance, rank_memories, RelevanceResult
from memdash.search.filters import filter_memories, all_tags

__all__ = [
    "compute_relevance",
    "rank_memories",
    "RelevanceResult",
    "filter_memories",
    "all_tags",
]

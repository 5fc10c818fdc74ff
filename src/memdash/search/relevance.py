from dataclasses import dataclass
from typing import List
from memdash.models.record import MemoryRecord

# Lexical matching never claims a perfect score
MAX_SCORE = 0.95
FULL_MATCH_WEIGHT = 0.8
PARTIAL_MATCH_WEIGHT = 0.4
PARTIAL_CREDIT = 0.5
DEFAULT_LIMIT = 20


@dataclass
class RelevanceResult:
    record: MemoryRecord
    score: float


def compute_relevance(fact: str, tags: List[str], query: str) -> float:
    """
    Score how well query matches a memory, in [0, 0.95].

    A query word contained anywhere in the fact+tags text is a full match.
    Otherwise it earns partial credit if it is a prefix of some text word or
    some text word is a prefix of it; the best credit counts, not the sum.
    """
    text = f"{fact} {' '.join(tags)}".lower()
    query_words = query.lower().split()
    if not query_words:
        return 0.0

    # str.split drops empty words, so an untagged text's trailing space earns no prefix credit
    text_words = text.split()
    matched = 0
    partial = 0.0
    for word in query_words:
        if word in text:
            matched += 1
            continue
        best = 0.0
        for text_word in text_words:
            if text_word.startswith(word) or word.startswith(text_word):
                best = max(best, PARTIAL_CREDIT)
        partial += best

    word_score = (matched / len(query_words)) * FULL_MATCH_WEIGHT
    partial_score = (partial / len(query_words)) * PARTIAL_MATCH_WEIGHT
    return min(word_score + partial_score, MAX_SCORE)


def rank_memories(records: List[MemoryRecord], query: str, limit: int = DEFAULT_LIMIT) -> List[RelevanceResult]:
    """Records scoring above zero, best first; ties keep collection order."""
    if not query.strip():
        return []
    scored = [RelevanceResult(record=r, score=compute_relevance(r.fact, r.tags, query)) for r in records]
    hits = [s for s in scored if s.score > 0]
    # list.sort is stable
    hits.sort(key=lambda s: s.score, reverse=True)
    return hits[:limit]

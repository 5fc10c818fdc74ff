import pytest
from memdash.models.record import MemoryRecord
from memdash.search.relevance import compute_relevance, rank_memories
from memdash.search.filters import filter_memories, all_tags


def test_full_match_example():
    assert compute_relevance("user prefers dark theme", ["ui"], "dark theme") == pytest.approx(0.8)

def test_containment_beats_prefix_credit():
    assert compute_relevance("darkness settings", [], "dark") == pytest.approx(0.8)

def test_prefix_credit():
    # "themes" is not contained, but the text word "theme" is a prefix of it
    assert compute_relevance("theme", [], "themes") == pytest.approx(0.2)

def test_partial_credit_is_best_not_sum():
    # Both "theme" and "them" prefix "themes"; credit is still 0.5
    assert compute_relevance("them theme", [], "themes") == pytest.approx(0.2)

def test_mixed_query():
    # "dark" full, "modes" prefixed by nothing, "themes" prefixed by "theme"
    score = compute_relevance("dark theme", [], "dark modes themes")
    assert score == pytest.approx(0.8 / 3 + 0.2 / 3)

def test_tags_are_searched():
    assert compute_relevance("something", ["Python"], "python") == pytest.approx(0.8)

def test_no_match_and_empty_query():
    assert compute_relevance("alpha beta", [], "gamma") == 0
    assert compute_relevance("alpha beta", [], "") == 0
    assert compute_relevance("alpha beta", [], "   ") == 0
    assert compute_relevance("", [], "gamma") == 0

@pytest.mark.parametrize("fact,tags,query", [
    ("a b c", ["d"], "a b c d"),
    ("x", [], "x x x"),
    ("prefix", [], "pre prefixes p"),
    ("", ["tag"], "t"),
])
def test_score_bounds(fact, tags, query):
    assert 0 <= compute_relevance(fact, tags, query) <= 0.95

def _records(facts):
    return [MemoryRecord(id=str(i), fact=f) for i, f in enumerate(facts)]

def test_rank_orders_and_filters():
    records = _records(["dark theme", "nothing here", "dark", "themes are dark"])
    results = rank_memories(records, "dark theme")
    assert [r.record.id for r in results] == ["0", "3", "2"]
    assert results[0].score == pytest.approx(0.8)
    assert results[-1].score == pytest.approx(0.4)

def test_rank_ties_keep_collection_order():
    records = _records(["coffee black", "tea", "coffee white", "coffee"])
    results = rank_memories(records, "coffee")
    assert [r.record.id for r in results] == ["0", "2", "3"]

def test_rank_caps_results():
    records = _records([f"note {i}" for i in range(30)])
    assert len(rank_memories(records, "note")) == 20
    assert len(rank_memories(records, "note", limit=5)) == 5

def test_rank_empty_query():
    assert rank_memories(_records(["a"]), "") == []
    assert rank_memories(_records(["a"]), "  ") == []

def test_explorer_filters():
    records = [
        MemoryRecord(id="1", fact="Dark theme", tags=["ui"], pinned=True),
        MemoryRecord(id="2", fact="Lunch order", tags=["Food"]),
        MemoryRecord(id="3", fact="Coffee", tags=["food", "ui"]),
    ]
    assert [r.id for r in filter_memories(records, query="dark")] == ["1"]
    assert [r.id for r in filter_memories(records, query="food")] == ["2", "3"]
    assert [r.id for r in filter_memories(records, tag="ui")] == ["1", "3"]
    assert [r.id for r in filter_memories(records, pinned_only=True)] == ["1"]
    assert [r.id for r in filter_memories(records, query="co", tag="ui")] == ["3"]
    assert all_tags(records) == ["Food", "food", "ui"]

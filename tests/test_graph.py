from memdash.models.record import MemoryRecord
from memdash.views.graph import build_graph, truncate_label, pair_key


def rec(id, related=(), fact="", pinned=False, tags=()):
    return MemoryRecord(id=id, fact=fact or f"fact {id}", related_to=list(related), pinned=pinned, tags=list(tags))


def test_mutual_relation_yields_one_edge():
    g = build_graph([rec("A", ["B"]), rec("B", ["A"])])
    assert len(g.edges) == 1
    assert g.edge_set() == {("A", "B")}
    # First-seen direction is kept
    assert (g.edges[0].source, g.edges[0].target) == ("A", "B")

def test_dangling_references_are_dropped():
    g = build_graph([rec("A", ["ghost"])])
    assert len(g.nodes) == 1
    assert g.edges == []
    # link_count still reflects the raw relation list
    assert g.nodes[0].link_count == 1

def test_pair_referenced_many_times():
    records = [rec("A", ["B", "B", "C"]), rec("B", ["A", "C"]), rec("C", ["B", "A"])]
    g = build_graph(records)
    assert g.edge_set() == {("A", "B"), ("A", "C"), ("B", "C")}
    assert len(g.edges) == 3

def test_self_reference_is_one_edge():
    g = build_graph([rec("A", ["A", "A"]), rec("B", ["A"])])
    assert g.edge_set() == {("A", "A"), ("A", "B")}
    assert len(g.edges) == 2
    assert g.nodes[0].link_count == 2

def test_node_fields():
    g = build_graph([rec("A", ["B", "x"], pinned=True, tags=["ui"]), rec("B")])
    a = g.nodes[0]
    assert a.id == "A"
    assert a.pinned is True
    assert a.tags == ["ui"]
    assert a.link_count == 2

def test_label_truncation():
    assert truncate_label("x" * 60) == "x" * 60
    assert truncate_label("x" * 61) == "x" * 60 + "..."
    g = build_graph([rec("A", fact="y" * 100)])
    assert g.nodes[0].label == "y" * 60 + "..."

def test_rebuild_is_idempotent():
    records = [rec("A", ["B", "C"]), rec("B", ["C"]), rec("C", ["A", "ghost"])]
    first, second = build_graph(records), build_graph(records)
    assert [n.id for n in first.nodes] == [n.id for n in second.nodes]
    assert first.edge_set() == second.edge_set()
    assert first == second

def test_empty_input():
    g = build_graph([])
    assert g.nodes == [] and g.edges == []

def test_neighbours_and_dot():
    g = build_graph([rec("A", ["B"]), rec("B", ["C"]), rec("C"), rec("D")])
    assert g.neighbours("B") == ["A", "C"]
    assert g.neighbours("D") == []

    dot = g.to_dot()
    assert dot.startswith("graph memories {")
    assert '"A" -- "B";' in dot
    assert dot.count("--") == 2

def test_pair_key_is_unordered():
    assert pair_key("b", "a") == pair_key("a", "b") == ("a", "b")

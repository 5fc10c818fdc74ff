"""
Relationship graph derived from per-record relatedTo lists.

Relations are directed in the data but undirected in the graph: an edge
between A and B appears once no matter how many records reference the pair or
in which direction. References to ids that are not in the record set are
dropped.
"""
from dataclasses import dataclass, field
from typing import Dict, List, Set, Tuple
from memdash.models.record import MemoryRecord

LABEL_LENGTH = 60


@dataclass
class GraphNode:
    id: str
    label: str
    pinned: bool
    tags: List[str]
    link_count: int


@dataclass
class GraphEdge:
    source: str
    target: str

    @property
    def key(self) -> Tuple[str, str]:
        return pair_key(self.source, self.target)


@dataclass
class Graph:
    nodes: List[GraphNode] = field(default_factory=list)
    edges: List[GraphEdge] = field(default_factory=list)

    def edge_set(self) -> Set[Tuple[str, str]]:
        """Edges as unordered pairs, for comparisons that ignore direction and order."""
        return {e.key for e in self.edges}

    def neighbours(self, node_id: str) -> List[str]:
        out = []
        for e in self.edges:
            if e.source == node_id:
                out.append(e.target)
            elif e.target == node_id:
                out.append(e.source)
        return out

    def to_dot(self) -> str:
        """Graphviz DOT source; pinned nodes are amber, the rest blue."""
        lines = [
            "graph memories {",
            '  graph [overlap=false, splines=true, bgcolor="transparent"];',
            '  node [shape=circle, style=filled, fontsize=9, label=""];',
        ]
        for n in self.nodes:
            color = "#f59e0b" if n.pinned else "#3b82f6"
            width = 0.2 + n.link_count * 0.1
            lines.append(
                f'  "{_escape(n.id)}" [fillcolor="{color}", width={width:.2f}, tooltip="{_escape(n.label)}"];'
            )
        for e in self.edges:
            lines.append(f'  "{_escape(e.source)}" -- "{_escape(e.target)}";')
        lines.append("}")
        return "\n".join(lines)


def pair_key(a: str, b: str) -> Tuple[str, str]:
    return (a, b) if a <= b else (b, a)


def truncate_label(fact: str, length: int = LABEL_LENGTH) -> str:
    if len(fact) > length:
        return fact[:length] + "..."
    return fact


def _escape(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')


def build_graph(records: List[MemoryRecord]) -> Graph:
    nodes: Dict[str, GraphNode] = {}
    for r in records:
        nodes[r.id] = GraphNode(
            id=r.id,
            label=truncate_label(r.fact),
            pinned=r.pinned,
            tags=list(r.tags),
            link_count=len(r.related_to),
        )

    edges: List[GraphEdge] = []
    seen: Set[Tuple[str, str]] = set()
    for r in records:
        for rel_id in r.related_to:
            if rel_id not in nodes:
                continue
            key = pair_key(r.id, rel_id)
            if key in seen:
                continue
            seen.add(key)
            edges.append(GraphEdge(source=r.id, target=rel_id))

    return Graph(nodes=list(nodes.values()), edges=edges)

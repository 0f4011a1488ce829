"""Directed graph over interned node labels.

Labels are interned into small integer handles (NodeId) the first time
they are seen.  Every structure outside the graph works with handles
only: equality and hashing are integer operations and no copy of the
label text is ever kept elsewhere.

Internally the graph is two lists indexed by handle: forward
successor sets and reverse predecessor sets.  The reverse map lets
"who can reach the target" queries walk backwards without a full scan.

A graph is built once and then frozen.  Freezing converts every
successor set to a frozenset so successors() can hand the set out
directly without copying.
"""
from __future__ import annotations

from typing import AbstractSet, Iterable, Iterator, TypeAlias

NodeId: TypeAlias = int
Edge: TypeAlias = tuple[str, str]


class UnknownNode(LookupError):
    """Raised when a label or handle was never interned into the graph."""

    def __init__(self, node: str | NodeId) -> None:
        self.node = node
        super().__init__(f"Unknown node: {node!r}")


class GraphFrozen(RuntimeError):
    """Raised when a frozen graph is mutated."""


class Graph:
    """Directed graph with interned labels and set-valued adjacency."""

    __slots__ = ("_ids", "_labels", "_fwd", "_rev", "_frozen")

    def __init__(self) -> None:
        self._ids: dict[str, NodeId] = {}
        self._labels: list[str] = []
        self._fwd: list[AbstractSet[NodeId]] = []
        self._rev: list[AbstractSet[NodeId]] = []
        self._frozen = False

    # ---- construction ----------------------------------------------------

    def intern(self, label: str) -> NodeId:
        """Return the handle for *label*, creating the node if unseen."""
        node = self._ids.get(label)
        if node is not None:
            return node
        self._check_mutable()
        node = len(self._labels)
        self._ids[label] = node
        self._labels.append(label)
        self._fwd.append(set())
        self._rev.append(set())
        return node

    def add_edge(self, src: str, dst: str) -> None:
        """Add a directed edge src -> dst, interning both endpoints.

        Self-loops are stored as-is.  Adding an edge twice is a no-op.
        """
        self._check_mutable()
        s = self.intern(src)
        d = self.intern(dst)
        self._fwd[s].add(d)  # type: ignore[attr-defined]
        self._rev[d].add(s)  # type: ignore[attr-defined]

    def freeze(self) -> Graph:
        """Make the graph read-only.  Returns self for chaining."""
        if not self._frozen:
            self._fwd = [frozenset(s) for s in self._fwd]
            self._rev = [frozenset(s) for s in self._rev]
            self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def _check_mutable(self) -> None:
        if self._frozen:
            raise GraphFrozen("Graph is frozen; build a new one instead")

    # ---- identity --------------------------------------------------------

    def lookup(self, label: str) -> NodeId:
        """Handle for an existing *label*.  Never creates a node."""
        try:
            return self._ids[label]
        except KeyError:
            raise UnknownNode(label) from None

    def label(self, node: NodeId) -> str:
        self.check_node(node)
        return self._labels[node]

    def check_node(self, node: NodeId) -> None:
        """Raise UnknownNode unless *node* is a handle of this graph."""
        if not 0 <= node < len(self._labels):
            raise UnknownNode(node)

    # ---- queries ---------------------------------------------------------

    def has_node(self, label: str) -> bool:
        return label in self._ids

    def has_edge(self, src: str, dst: str) -> bool:
        s = self._ids.get(src)
        d = self._ids.get(dst)
        return s is not None and d is not None and d in self._fwd[s]

    def successors(self, node: NodeId) -> AbstractSet[NodeId]:
        """Successor handles of *node* (possibly empty)."""
        self.check_node(node)
        fwd = self._fwd[node]
        return fwd if self._frozen else frozenset(fwd)

    def predecessors(self, node: NodeId) -> AbstractSet[NodeId]:
        self.check_node(node)
        rev = self._rev[node]
        return rev if self._frozen else frozenset(rev)

    def in_degree(self, node: NodeId) -> int:
        self.check_node(node)
        return len(self._rev[node])

    def out_degree(self, node: NodeId) -> int:
        self.check_node(node)
        return len(self._fwd[node])

    def ancestors(self, node: NodeId) -> frozenset[NodeId]:
        """Every node with a path to *node*, *node* included."""
        self.check_node(node)
        seen = {node}
        stack = [node]
        while stack:
            cur = stack.pop()
            for pred in self._rev[cur]:
                if pred not in seen:
                    seen.add(pred)
                    stack.append(pred)
        return frozenset(seen)

    def nodes(self) -> Iterator[NodeId]:
        return iter(range(len(self._labels)))

    def edges(self) -> Iterator[tuple[NodeId, NodeId]]:
        for src, dsts in enumerate(self._fwd):
            for dst in dsts:
                yield src, dst

    def labeled_edges(self) -> Iterator[Edge]:
        labels = self._labels
        for src, dst in self.edges():
            yield labels[src], labels[dst]

    @property
    def node_count(self) -> int:
        return len(self._labels)

    @property
    def edge_count(self) -> int:
        return sum(len(dsts) for dsts in self._fwd)

    # ---- dunder ----------------------------------------------------------

    def __contains__(self, label: object) -> bool:
        return label in self._ids

    def __len__(self) -> int:
        return self.node_count

    def __repr__(self) -> str:
        state = ", frozen" if self._frozen else ""
        return f"Graph(nodes={self.node_count}, edges={self.edge_count}{state})"


def build_graph(edges: Iterable[Edge]) -> Graph:
    """Build a frozen graph from (src_label, dst_label) pairs."""
    g = Graph()
    for src, dst in edges:
        g.add_edge(src, dst)
    return g.freeze()

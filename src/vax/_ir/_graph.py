"""Graph container with derived lookup indices."""

from __future__ import annotations

import logging
from collections import Counter
from typing import TYPE_CHECKING, Any

from vax._errors import DuplicateNodeError, NodeNotFoundError
from vax._wire import RawGraph, normalize_raw_graph, parse_raw_graph

from ._compose import compose_tree
from ._edge import Edge, EdgeDirection, IncomingEdge
from ._node import Comment, Node

if TYPE_CHECKING:
    from collections.abc import Callable, Collection, Iterable, Mapping

logger = logging.getLogger(__name__)


class Graph:
    """A program graph: nodes, edges between their slots, and comments.

    The graph owns its nodes. Edges relate nodes by id only. Two indices are
    derived from the collections and rebuilt after every mutation:

    - ``node_by_id``: node id to Node
    - ``incoming_by_consumer``: consumer node id to the IncomingEdge records
      of every edge feeding it, in edge order

    ``add_nodes`` and ``add_edges`` do not re-validate id uniqueness; callers
    that splice nodes in must keep ids unique themselves.

    Example:
        >>> graph = Graph.from_raw({
        ...     "nodes": [{"id": "sum", "c": "Add", "a": {}, "edges": {}},
        ...               {"id": "one", "c": "Const", "a": {"Value": 1}, "edges": {}}],
        ...     "edges": [["sum", "a", "one", "out"]],
        ...     "comments": [],
        ... })
        >>> graph.incoming("sum")
        [IncomingEdge(consumer_slot='a', producer_id='one', producer_slot='out')]

    """

    __hash__ = None  # type: ignore[assignment]

    def __init__(
        self,
        nodes: Iterable[Node] = (),
        edges: Iterable[Edge] = (),
        comments: Iterable[Comment] = (),
    ) -> None:
        self.nodes: list[Node] = list(nodes)
        self.edges: list[Edge] = list(edges)
        self.comments: list[Comment] = list(comments)
        self.node_by_id: dict[str, Node] = {}
        self.incoming_by_consumer: dict[str, list[IncomingEdge]] = {}
        self._reindex()

    @classmethod
    def from_raw(cls, raw: RawGraph | Mapping[str, Any]) -> Graph:
        """Build a graph from its raw description.

        Raises:
            GraphFormatError: If ``raw`` does not match the wire format.
            DuplicateNodeError: If two nodes share an id.

        """
        raw_graph = parse_raw_graph(raw)
        seen: set[str] = set()
        for raw_node in raw_graph.nodes:
            if raw_node.id in seen:
                raise DuplicateNodeError(raw_node.id)
            seen.add(raw_node.id)
        return cls(
            nodes=[Node.from_raw(raw_node) for raw_node in raw_graph.nodes],
            edges=[Edge.from_raw(raw_edge) for raw_edge in raw_graph.edges],
            comments=[Comment.from_raw(raw_comment) for raw_comment in raw_graph.comments],
        )

    def to_raw_model(self) -> RawGraph:
        return RawGraph.model_construct(
            nodes=[node.to_raw_model() for node in self.nodes],
            edges=[edge.to_raw() for edge in self.edges],
            comments=[comment.to_raw_model() for comment in self.comments],
        )

    def to_raw(self) -> dict[str, Any]:
        """Dump the graph to its JSON-compatible wire form.

        Unset optional node keys (``t``, ``x``, ``y``, ``out``) are omitted, so
        an explicit ``null`` in the loaded JSON does not survive the dump.
        Round-trips are exact for canonical input, which is what
        `equals_raw` compares against.
        """
        return self.to_raw_model().to_wire()

    def _reindex(self) -> None:
        self.node_by_id = {node.id: node for node in self.nodes}
        incoming: dict[str, list[IncomingEdge]] = {}
        for edge in self.edges:
            incoming.setdefault(edge.consumer_id, []).append(edge.to_incoming())
        self.incoming_by_consumer = incoming

    # -- queries -------------------------------------------------------------

    def get_node(self, node_id: str) -> Node:
        """Get a node by id.

        Raises:
            NodeNotFoundError: If no node has this id.

        """
        try:
            return self.node_by_id[node_id]
        except KeyError:
            raise NodeNotFoundError(node_id) from None

    def nodes_by_ids(self, node_ids: Iterable[str]) -> list[Node]:
        """Get nodes in the order of ``node_ids``.

        Raises:
            NodeNotFoundError: On the first id with no matching node.

        """
        return [self.get_node(node_id) for node_id in node_ids]

    def edges_of(self, node: Node | str, direction: EdgeDirection = EdgeDirection.EITHER) -> list[Edge]:
        """Get the edges a node takes part in.

        Args:
            node: The node, or its id.
            direction: Restrict to edges where the node is the consumer,
                the producer, or either.

        Returns:
            Matching edges in graph order.

        """
        node_id = node if isinstance(node, str) else node.id
        return [edge for edge in self.edges if edge.touches(node_id, direction)]

    def incoming(self, node_id: str) -> list[IncomingEdge]:
        """Get the index records of all edges feeding ``node_id``."""
        return self.incoming_by_consumer.get(node_id, [])

    def root_nodes(self) -> list[Node]:
        """Get nodes that never appear as a consumer of any edge.

        Such a node has no incoming edges, so the tree composed from it has
        no children. `sink_nodes` gives the nodes nothing consumes from.
        """
        consumers = {edge.consumer_id for edge in self.edges}
        return [node for node in self.nodes if node.id not in consumers]

    def sink_nodes(self) -> list[Node]:
        """Get nodes that never appear as a producer of any edge."""
        producers = {edge.producer_id for edge in self.edges}
        return [node for node in self.nodes if node.id not in producers]

    def validate(self) -> list[str]:
        """Validate referential integrity and return a list of error messages.

        Checks for:
        - Edges whose consumer or producer id has no node
        - Consumer slots fed by more than one edge

        Returns:
            List of error messages. Empty list if the graph is valid.

        """
        errors: list[str] = []
        for edge in self.edges:
            errors.extend(
                f"Edge {edge} references missing node '{node_id}'"
                for node_id in (edge.consumer_id, edge.producer_id)
                if node_id not in self.node_by_id
            )
        slot_counts = Counter((edge.consumer_id, edge.consumer_slot) for edge in self.edges)
        errors.extend(
            f"Slot '{slot}' of node '{node_id}' is fed by {count} edges"
            for (node_id, slot), count in slot_counts.items()
            if count > 1
        )
        return errors

    # -- mutation ------------------------------------------------------------

    def add_nodes(self, nodes: Iterable[Node]) -> None:
        self.nodes.extend(nodes)
        self._reindex()

    def add_edges(self, edges: Iterable[Edge]) -> None:
        self.edges.extend(edges)
        self._reindex()

    def delete_nodes(self, predicate: Callable[[Node], bool]) -> None:
        """Remove every node matching ``predicate``. Edges are left untouched."""
        self.nodes = [node for node in self.nodes if not predicate(node)]
        self._reindex()

    def delete_edges(self, predicate: Callable[[Edge], bool]) -> None:
        """Remove every edge matching ``predicate``."""
        self.edges = [edge for edge in self.edges if not predicate(edge)]
        self._reindex()

    # -- copies --------------------------------------------------------------

    def clone(self) -> Graph:
        return self.clone_with_prefix("")

    def clone_with_prefix(self, prefix: str, *, rename_slots: bool = True) -> Graph:
        """Deep copy with every identifier prefixed.

        Node ids and the node ids referenced by edges are prefixed
        consistently. Edge slot names are prefixed too unless
        ``rename_slots`` is False. Attributes, positions and comments are
        copied unchanged.
        """
        return Graph(
            nodes=[node.clone(prefix) for node in self.nodes],
            edges=[edge.clone(prefix, rename_slots=rename_slots) for edge in self.edges],
            comments=list(self.comments),
        )

    def subgraph(self, node_ids: Collection[str]) -> Graph:
        """Create a graph with only the given nodes.

        Edges are kept only if both endpoints are in the node set. Comments
        are kept.
        """
        wanted = set(node_ids)
        return Graph(
            nodes=[node.clone() for node in self.nodes if node.id in wanted],
            edges=[edge for edge in self.edges if edge.consumer_id in wanted and edge.producer_id in wanted],
            comments=list(self.comments),
        )

    # -- tree composition ----------------------------------------------------

    def compose_tree_with_root(self, root_id: str) -> Node:
        """Compose the tree hanging below ``root_id``.

        Raises:
            NodeNotFoundError: If ``root_id`` is not in the graph.
            CycleDetectedError: If a node is reached again through its own subtree.
            DanglingReferenceError: If an edge names a missing producer.

        """
        return compose_tree(self, self.get_node(root_id))

    def compose_trees(self, roots: Iterable[Node] | None = None) -> list[Node]:
        """Compose one tree per root node (`root_nodes` unless ``roots`` is given)."""
        if roots is None:
            roots = self.root_nodes()
        trees = [self.compose_tree_with_root(root.id) for root in roots]
        logger.debug("Composed %d trees", len(trees))
        return trees

    # -- comparison ----------------------------------------------------------

    def equals(self, other: Graph) -> bool:
        """Compare the full wire content of two graphs."""
        return self.to_raw() == other.to_raw()

    def equals_raw(self, raw: RawGraph | Mapping[str, Any]) -> bool:
        """Compare this graph with a raw description.

        Raises:
            GraphFormatError: If ``raw`` does not match the wire format.

        """
        return self.to_raw() == normalize_raw_graph(raw)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Graph):
            return NotImplemented
        return self.equals(other)

    def __len__(self) -> int:
        """Return the number of nodes in the graph."""
        return len(self.nodes)

    def __contains__(self, node_id: object) -> bool:
        """Check if a node with the given id exists."""
        return node_id in self.node_by_id

    def __repr__(self) -> str:
        return f"Graph(nodes={len(self.nodes)}, edges={len(self.edges)}, comments={len(self.comments)})"

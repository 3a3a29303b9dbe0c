"""Composition of a graph walk into nested node trees.

Starting from one node, every incoming edge is resolved into a composed
copy of its producer, stored under the consumer slot name. A producer that
feeds several consumers is expanded once per consuming edge, so the result
is a tree rather than a DAG; diamond-shaped graphs grow exponentially.

Cycles are detected only along the path being expanded: there is no
graph-wide pre-check.
"""

from __future__ import annotations

import copy
from typing import TYPE_CHECKING

from vax._errors import CycleDetectedError, DanglingReferenceError

from ._edge import Edge
from ._node import Node

if TYPE_CHECKING:
    from ._graph import Graph


def compose_tree(
    graph: Graph,
    node: Node,
    ancestor_ids: tuple[str, ...] = (),
    incoming_slot: str | None = None,
) -> Node:
    """Compose the tree of producers feeding ``node``.

    Args:
        graph: The graph whose edges are followed.
        node: The node to expand.
        ancestor_ids: Ids on the path from the tree root down to ``node``'s parent.
        incoming_slot: Producer slot through which ``node`` is consumed by its parent.

    Returns:
        A new Node with ``edges`` mapping each consumer slot to its composed
        producer and ``out`` set to ``incoming_slot``. The input node is not
        modified.

    Raises:
        CycleDetectedError: If ``node`` is one of its own ancestors.
        DanglingReferenceError: If an incoming edge names a missing producer.

    """
    if node.id in ancestor_ids:
        raise CycleDetectedError(node.id, ancestor_ids)

    chain = (*ancestor_ids, node.id)

    children: dict[str, Node] = {}
    for consumer_slot, producer_id, producer_slot in graph.incoming(node.id):
        producer = graph.node_by_id.get(producer_id)
        if producer is None:
            raise DanglingReferenceError(producer_id, Edge(node.id, consumer_slot, producer_id, producer_slot))
        children[consumer_slot] = compose_tree(graph, producer, chain, producer_slot)

    return Node(
        id=node.id,
        component_type=node.component_type,
        attributes=copy.deepcopy(node.attributes),
        type_info=copy.deepcopy(node.type_info),
        x=node.x,
        y=node.y,
        edges=children,
        out=incoming_slot,
    )

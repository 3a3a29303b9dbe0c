"""Intermediate representation of node-graph programs.

Key types:
- Node: A graph vertex (and, once composed, a tree node)
- Edge: A wire between a producer slot and a consumer slot
- Comment: An inert annotation
- Graph: The container with its id and incoming-edge indices
- compose_tree: Turn a rooted graph walk into a nested tree
"""

from ._compose import compose_tree
from ._edge import Edge, EdgeDirection, IncomingEdge
from ._graph import Graph
from ._node import Comment, Node

__all__ = ["Comment", "Edge", "EdgeDirection", "Graph", "IncomingEdge", "Node", "compose_tree"]

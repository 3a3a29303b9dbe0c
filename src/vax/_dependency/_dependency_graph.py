"""Call graph of user functions."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Generic, TypeVar

from ._algorithms import find_cycle

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class DependencyGraph(Generic[T]):
    """Immutable "depends on" relation, used for which user function calls which.

    ``callees[Main] = {Helper}`` means the body of Main contains a Helper node.

    Attributes:
        _callees: Mapping from each node to the nodes it depends on.

    """

    _callees: dict[T, frozenset[T]] = field(default_factory=dict)

    @classmethod
    def from_edges(cls, edges: list[tuple[T, T]], nodes: frozenset[T] = frozenset()) -> DependencyGraph[T]:
        """Build a graph from ``(callee, caller)`` pairs.

        Args:
            edges: Pairs where the second element depends on the first.
            nodes: Extra nodes to include even if no edge mentions them.

        Example:
            >>> DependencyGraph.from_edges([("Helper", "Main"), ("Main", "Helper")]).find_cycle()
            ('Main', 'Helper', 'Main')

        """
        callees: defaultdict[T, set[T]] = defaultdict(set)
        for node in nodes:
            callees[node]
        for callee, caller in edges:
            callees[caller].add(callee)
            callees[callee]
        return cls(_callees={node: frozenset(deps) for node, deps in callees.items()})

    def find_cycle(self) -> tuple[T, ...] | None:
        """Return one dependency cycle (first node repeated at the end), or None."""
        return find_cycle(self._callees)

"""Graph algorithms for dependency graph operations."""

from collections.abc import Collection, Hashable, Mapping
from typing import TypeVar

T = TypeVar("T", bound=Hashable)

_EXHAUSTED = object()


def find_cycle(successors: Mapping[T, Collection[T]]) -> tuple[T, ...] | None:
    """Find one cycle in a graph, if there is any.

    Args:
        successors: Mapping from node to the nodes it points to.

    Returns:
        The nodes of a cycle in traversal order with the first node repeated
        at the end (``("a", "b", "a")``), or None if the graph is acyclic.

    Example:
        >>> find_cycle({"Main": ["Helper"], "Helper": ["Main"]})
        ('Main', 'Helper', 'Main')

    """
    # 0: unvisited, 1: on the current path, 2: finished
    state: dict[T, int] = {}

    for start in successors:
        if state.get(start):
            continue
        path: list[T] = [start]
        stack = [iter(successors.get(start, ()))]
        state[start] = 1
        while stack:
            successor = next(stack[-1], _EXHAUSTED)
            if successor is _EXHAUSTED:
                stack.pop()
                state[path.pop()] = 2
                continue
            match state.get(successor, 0):
                case 1:
                    return (*path[path.index(successor) :], successor)
                case 0:
                    state[successor] = 1
                    path.append(successor)
                    stack.append(iter(successors.get(successor, ())))
    return None

"""Exception hierarchy for vax.

Structural errors (cycles, dangling references) abort the composition or
inlining operation in progress. Nothing is retried internally.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ._inline._inliner import UnmatchedBoundary
    from ._ir import Edge


class VaxError(Exception):
    """Base class for all vax errors."""


class GraphFormatError(VaxError, ValueError):
    """Raised when a raw graph or schema does not match the wire format."""


class DuplicateNodeError(VaxError, ValueError):
    """Raised when a raw graph declares the same node id twice."""

    def __init__(self, node_id: str) -> None:
        self.node_id = node_id
        super().__init__(f"Duplicate node id '{node_id}'")


class NodeNotFoundError(VaxError, KeyError):
    """Raised when a node id has no matching node in the graph."""

    def __init__(self, node_id: str) -> None:
        self.node_id = node_id
        super().__init__(node_id)

    def __str__(self) -> str:
        return f"No node with id '{self.node_id}'"


class DanglingReferenceError(NodeNotFoundError):
    """Raised when an edge references a node that does not exist."""

    def __init__(self, node_id: str, edge: Edge | None = None) -> None:
        self.edge = edge
        super().__init__(node_id)

    def __str__(self) -> str:
        if self.edge is None:
            return f"Edge references missing node '{self.node_id}'"
        return f"Edge {self.edge} references missing node '{self.node_id}'"


class CycleDetectedError(VaxError):
    """Raised when a node reappears in its own ancestor chain during composition."""

    def __init__(self, node_id: str, chain: tuple[str, ...]) -> None:
        self.node_id = node_id
        self.chain = chain
        super().__init__(f"Node {node_id} is already present in graph parents: {', '.join(chain)}")


class UnmatchedBoundaryError(VaxError):
    """Raised when a call-site edge has no matching boundary marker in the function body."""

    def __init__(self, boundary: UnmatchedBoundary) -> None:
        self.boundary = boundary
        super().__init__(str(boundary))


class MissingFunctionBodyError(VaxError, KeyError):
    """Raised when a user-function type has no registered body graph."""

    def __init__(self, function_type: str) -> None:
        self.function_type = function_type
        super().__init__(function_type)

    def __str__(self) -> str:
        return f"No body registered for user function '{self.function_type}'"


class NonTerminatingInliningError(VaxError):
    """Raised when inlining does not reach a fixpoint."""


class RecursiveFunctionError(NonTerminatingInliningError):
    """Raised when user functions reference themselves, directly or transitively."""

    def __init__(self, cycle: tuple[str, ...]) -> None:
        self.cycle = cycle
        super().__init__(f"Recursive user functions cannot be inlined: {' -> '.join(cycle)}")

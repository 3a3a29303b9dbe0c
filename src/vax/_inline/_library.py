"""Storage of user-function body graphs."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from vax._dependency import DependencyGraph
from vax._errors import MissingFunctionBodyError
from vax._ir import Graph

if TYPE_CHECKING:
    from collections.abc import Collection, Iterable, Mapping

    from vax._wire import RawGraph

logger = logging.getLogger(__name__)


class FunctionLibrary:
    """Body graphs of user functions, keyed by component type name.

    A body is an ordinary graph whose boundary marker nodes (``UF_Input`` /
    ``UF_Output`` by default) stand for the call site's input and output
    slots. Bodies are never mutated by inlining; every call gets a clone.
    """

    def __init__(self, bodies: Mapping[str, Graph | RawGraph | Mapping[str, Any]] | None = None) -> None:
        self._bodies: dict[str, Graph] = {}
        for name, body in (bodies or {}).items():
            self.register(name, body)

    def register(self, name: str, body: Graph | RawGraph | Mapping[str, Any]) -> Graph:
        """Register (or replace) the body of user function ``name``.

        Raises:
            GraphFormatError: If a raw body does not match the wire format.

        """
        graph = body if isinstance(body, Graph) else Graph.from_raw(body)
        if name in self._bodies:
            logger.debug("Replacing body of user function '%s'", name)
        self._bodies[name] = graph
        return graph

    def get(self, name: str) -> Graph:
        """Get the body of user function ``name``.

        Raises:
            MissingFunctionBodyError: If no body is registered under ``name``.

        """
        try:
            return self._bodies[name]
        except KeyError:
            raise MissingFunctionBodyError(name) from None

    def names(self) -> list[str]:
        return list(self._bodies)

    def call_graph(self, function_types: Collection[str], roots: Iterable[str] | None = None) -> DependencyGraph[str]:
        """Build the graph of which user function calls which.

        An edge (callee, caller) is recorded whenever the body of ``caller``
        contains a node whose type is the user function ``callee``.

        Args:
            function_types: Component types that count as user functions.
            roots: Only follow bodies reachable from these functions.
                Defaults to every registered function.

        Returns:
            DependencyGraph where each function depends on the functions it calls.

        Raises:
            MissingFunctionBodyError: If a reachable function has no body.

        """
        pending = list(self._bodies if roots is None else roots)
        seen: set[str] = set()
        edges: list[tuple[str, str]] = []
        while pending:
            name = pending.pop()
            if name in seen:
                continue
            seen.add(name)
            callees = dict.fromkeys(n.component_type for n in self.get(name).nodes if n.component_type in function_types)
            for callee in callees:
                edges.append((callee, name))
                pending.append(callee)
        return DependencyGraph.from_edges(edges, nodes=frozenset(seen))

    def __contains__(self, name: object) -> bool:
        return name in self._bodies

    def __len__(self) -> int:
        return len(self._bodies)

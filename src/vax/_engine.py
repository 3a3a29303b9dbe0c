"""Engine facade holding the loaded graph, the schema and the function library."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from ._inline import FunctionLibrary, Inliner
from ._ir import Graph
from ._wire import Schema

if TYPE_CHECKING:
    from collections.abc import Collection, Iterable, Mapping

    from ._config import InlinerConfig
    from ._inline import InlineResult
    from ._ir import Node
    from ._wire import RawGraph

logger = logging.getLogger(__name__)


class Vax:
    """Entry point tying a loaded graph to its schema and user-function bodies.

    Example:
        >>> vax = Vax({"components": {"Double": {"isUserFunction": True}}})
        >>> vax.register_function("Double", double_body)
        >>> vax.load_graph(raw_graph)
        >>> trees = vax.compose_trees_inlined()

    """

    def __init__(
        self,
        schema: Schema | Mapping[str, Any],
        library: FunctionLibrary | None = None,
        config: InlinerConfig | None = None,
    ) -> None:
        self.schema = Schema.parse(schema)
        self.library = library if library is not None else FunctionLibrary()
        self.inliner = Inliner(self.schema, self.library, config)
        self._graph = Graph()

    @property
    def graph(self) -> Graph:
        """The currently loaded graph."""
        return self._graph

    def load_graph(self, raw: RawGraph | Mapping[str, Any]) -> Graph:
        """Load a raw graph, replacing the current one.

        If ``raw`` is structurally equal to the loaded graph, the loaded
        Graph object is returned as is and nothing is rebuilt.

        Raises:
            GraphFormatError: If ``raw`` does not match the wire format.
            DuplicateNodeError: If two nodes share an id.

        """
        if self._graph.equals_raw(raw):
            logger.debug("Raw graph unchanged, keeping loaded graph")
            return self._graph
        self._graph = Graph.from_raw(raw)
        logger.debug("Loaded %r", self._graph)
        return self._graph

    def save_graph(self, filter_node_ids: Collection[str] | None = None) -> dict[str, Any]:
        """Dump the loaded graph, or only the given nodes and the edges between them."""
        if filter_node_ids is None:
            return self._graph.to_raw()
        return self._graph.subgraph(filter_node_ids).to_raw()

    def register_function(self, name: str, body: Graph | RawGraph | Mapping[str, Any]) -> Graph:
        """Register the body graph of user function ``name``."""
        return self.library.register(name, body)

    def inline_user_functions(self, graph: Graph | None = None) -> InlineResult:
        """Inline all user functions in ``graph`` (the loaded graph by default), in place."""
        return self.inliner.run(self._graph if graph is None else graph)

    def inline_user_functions_in_graph(
        self,
        graph: Graph | None = None,
        known_function_types: Collection[str] | None = None,
    ) -> Graph:
        """Inline user functions in place and return the flattened graph.

        Args:
            graph: Graph to flatten. Defaults to the loaded graph.
            known_function_types: Component types to expand. Defaults to the
                schema's user functions.

        """
        return self.inliner.inline(self._graph if graph is None else graph, known_function_types)

    def compose_trees(self, roots: Iterable[Node] | None = None) -> list[Node]:
        """Compose one tree per root of the loaded graph, without inlining."""
        return self._graph.compose_trees(roots)

    def compose_trees_inlined(self) -> list[Node]:
        """Inline a copy of the loaded graph and compose one tree per root.

        The loaded graph itself is left untouched.
        """
        flat = self.inliner.inline(self._graph.clone())
        return flat.compose_trees()

"""Hygienic inlining of user-function calls.

Every node whose component type is a user function is replaced by a copy
of that function's body. The copy gets a fresh identifier prefix so that
repeated calls never collide, and the call site's edges are rewired onto
the body nodes behind the boundary markers:

    host:  ext.out -> call.In1          body:  In1-marker.value -> add.a
    after: ext.out -> uf_0_add.a

Passes repeat until no user-function node remains, since a body may itself
call other user functions.
"""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from vax._config import InlinerConfig, UnmatchedPolicy
from vax._errors import NonTerminatingInliningError, RecursiveFunctionError, UnmatchedBoundaryError
from vax._ir import Edge, EdgeDirection
from vax._wire import Schema

if TYPE_CHECKING:
    from collections.abc import Collection, Mapping

    from vax._ir import Graph, Node

    from ._library import FunctionLibrary

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class UnmatchedBoundary:
    """A call-site edge whose slot has no boundary marker in the function body.

    Attributes:
        call_id: Id of the user-function node being expanded.
        function_type: Component type of that node.
        edge: The host edge that could not be rewired.
        direction: AS_CONSUMER when the value flows into the call,
            AS_PRODUCER when it flows out of it.

    """

    call_id: str
    function_type: str
    edge: Edge
    direction: EdgeDirection

    @property
    def slot(self) -> str:
        """The call-site slot name that found no marker."""
        if self.direction == EdgeDirection.AS_CONSUMER:
            return self.edge.consumer_slot
        return self.edge.producer_slot

    def __str__(self) -> str:
        side = "input" if self.direction == EdgeDirection.AS_CONSUMER else "output"
        return (
            f"No {side} marker named '{self.slot}' in body of '{self.function_type}' "
            f"(call '{self.call_id}', edge {self.edge})"
        )


@dataclass(frozen=True, slots=True)
class InlineResult:
    """Result of inlining a graph to its fixpoint.

    Attributes:
        graph: The inlined graph (the input graph, mutated in place).
        passes: Number of passes run. Zero if the graph had no calls.
        expanded: Total number of user-function nodes replaced.
        unmatched: Call-site edges that found no boundary marker.

    """

    graph: Graph
    passes: int = 0
    expanded: int = 0
    unmatched: tuple[UnmatchedBoundary, ...] = ()

    @property
    def success(self) -> bool:
        """Check if every call-site edge was rewired."""
        return len(self.unmatched) == 0


class PrefixGenerator:
    """Monotonic source of identifier prefixes, one per inlined call."""

    def __init__(self, template: str = "uf_{}_", start: int = 0) -> None:
        self.template = template
        self._counter = itertools.count(start)

    def next_prefix(self) -> str:
        return self.template.format(next(self._counter))


class Inliner:
    """Replaces user-function nodes with hygienic copies of their bodies.

    Each Inliner owns its prefix counter, so separate instances produce the
    same prefixes for the same input. An Inliner mutates the graphs it is
    given and must not be shared between threads.

    Example:
        >>> inliner = Inliner(schema, library)
        >>> result = inliner.run(graph)
        >>> result.passes, result.expanded
        (1, 2)

    """

    def __init__(
        self,
        schema: Schema | Mapping[str, Any],
        library: FunctionLibrary,
        config: InlinerConfig | None = None,
    ) -> None:
        self.schema = Schema.parse(schema)
        self.library = library
        self.config = config or InlinerConfig()
        self.prefixes = PrefixGenerator(self.config.prefix_template)

    def function_types(self) -> frozenset[str]:
        """Component types the schema flags as user functions."""
        return self.schema.user_function_types()

    def run(self, graph: Graph, function_types: Collection[str] | None = None) -> InlineResult:
        """Inline every user-function call in ``graph`` until none remain.

        Args:
            graph: The host graph, mutated in place.
            function_types: Component types to treat as user functions.
                Defaults to the schema's user functions.

        Returns:
            InlineResult with the flattened graph and pass statistics.

        Raises:
            MissingFunctionBodyError: If a called function has no body.
            RecursiveFunctionError: If reachable functions call themselves.
            NonTerminatingInliningError: If ``max_passes`` is exceeded.
            UnmatchedBoundaryError: With `UnmatchedPolicy.RAISE`, on the
                first edge without a marker.

        """
        types = frozenset(function_types) if function_types is not None else self.function_types()
        unmatched: list[UnmatchedBoundary] = []
        passes = 0
        expanded = 0

        while calls := [node for node in graph.nodes if node.component_type in types]:
            if passes == 0:
                self._check_call_graph(types, {call.component_type for call in calls})
            if passes >= self.config.max_passes:
                msg = f"Inlining did not reach a fixpoint after {passes} passes ({len(calls)} calls left)"
                raise NonTerminatingInliningError(msg)
            passes += 1
            logger.debug("Inlining pass %d: %d calls", passes, len(calls))
            for call in calls:
                unmatched.extend(self.expand_call(call, graph))
            expanded += len(calls)

        logger.debug("Inlining finished after %d passes, %d calls expanded", passes, expanded)
        return InlineResult(graph=graph, passes=passes, expanded=expanded, unmatched=tuple(unmatched))

    def inline(self, graph: Graph, function_types: Collection[str] | None = None) -> Graph:
        """Same as `run`, returning only the graph."""
        return self.run(graph, function_types).graph

    def _check_call_graph(self, types: frozenset[str], roots: set[str]) -> None:
        cycle = self.library.call_graph(types, roots=sorted(roots)).find_cycle()
        if cycle is not None:
            raise RecursiveFunctionError(cycle)

    def expand_call(self, call: Node, host: Graph) -> list[UnmatchedBoundary]:
        """Replace one user-function node in ``host`` by a copy of its body.

        Edges feeding the call are moved onto the body nodes fed by the input
        marker of the same name; edges reading from the call are moved onto
        the body node feeding the output marker of the same name. When an
        input marker is wired straight to an output marker, the host
        producer is connected directly to the host consumers. Marker
        nodes and their edges are dropped, the call node is removed, and the
        rest of the body is appended to ``host``.

        Returns:
            Host edges that found no matching marker.

        Raises:
            MissingFunctionBodyError: If the function has no body.
            UnmatchedBoundaryError: With `UnmatchedPolicy.RAISE`; ``host`` is
                left unmodified.

        """
        config = self.config
        prefix = self.prefixes.next_prefix()
        body = self.library.get(call.component_type).clone_with_prefix(prefix, rename_slots=config.rename_slots)
        logger.debug("Expanding '%s' (%s) with prefix '%s'", call.id, call.component_type, prefix)

        inputs = self._markers(body, config.input_marker)
        outputs = self._markers(body, config.output_marker)
        marker_ids = {node.id for node in body.nodes if config.is_marker(node.component_type)}

        consumed_body_edges: set[int] = set()
        retired_host_edges: set[int] = set()
        rewired: list[Edge] = []
        unmatched: list[UnmatchedBoundary] = []
        # Body edges running straight from a marker to another marker, keyed by
        # id(): host edges entering through them and host edges leaving through them.
        entering: dict[int, list[Edge]] = {}
        leaving: dict[int, list[Edge]] = {}

        for edge in host.edges:
            if not edge.touches(call.id):
                continue
            replacements = [edge]
            forwarded = False
            if edge.consumer_id == call.id:
                marker_id = inputs.get(edge.consumer_slot)
                if marker_id is None:
                    unmatched.append(UnmatchedBoundary(call.id, call.component_type, edge, EdgeDirection.AS_CONSUMER))
                    continue
                replacements = []
                for inner in body.edges:
                    if inner.producer_id != marker_id:
                        continue
                    consumed_body_edges.add(id(inner))
                    if inner.consumer_id in marker_ids:
                        entering.setdefault(id(inner), []).append(edge)
                        forwarded = True
                    else:
                        replacements.append(edge.replace(consumer_id=inner.consumer_id, consumer_slot=inner.consumer_slot))
            if edge.producer_id == call.id:
                marker_id = outputs.get(edge.producer_slot)
                if marker_id is None:
                    unmatched.append(UnmatchedBoundary(call.id, call.component_type, edge, EdgeDirection.AS_PRODUCER))
                    continue
                feeding = []
                for inner in body.edges:
                    if inner.consumer_id != marker_id:
                        continue
                    consumed_body_edges.add(id(inner))
                    if inner.producer_id in marker_ids:
                        leaving.setdefault(id(inner), []).append(edge)
                        forwarded = True
                    else:
                        feeding.append(inner)
                replacements = [
                    replacement.replace(producer_id=inner.producer_id, producer_slot=inner.producer_slot)
                    for replacement in replacements
                    for inner in feeding
                ]
            if not replacements and not forwarded:
                logger.debug("Boundary for edge %s of '%s' is not connected inside the body", edge, call.id)
            retired_host_edges.add(id(edge))
            rewired.extend(replacements)

        # Pass-through: every producer entering an input marker feeds every
        # consumer leaving the output marker it is wired to.
        for key, sources in entering.items():
            for source in sources:
                rewired.extend(
                    target.replace(producer_id=source.producer_id, producer_slot=source.producer_slot)
                    for target in leaving.get(key, [])
                    if source.producer_id != call.id
                )

        if unmatched:
            if config.on_unmatched == UnmatchedPolicy.RAISE:
                raise UnmatchedBoundaryError(unmatched[0])
            for boundary in unmatched:
                logger.warning("%s", boundary)
                if config.on_unmatched == UnmatchedPolicy.DROP:
                    retired_host_edges.add(id(boundary.edge))

        body.delete_nodes(lambda node: node.id in marker_ids)
        body.delete_edges(
            lambda inner: id(inner) in consumed_body_edges
            or inner.consumer_id in marker_ids
            or inner.producer_id in marker_ids,
        )

        host.delete_edges(lambda edge: id(edge) in retired_host_edges)
        host.delete_nodes(lambda node: node.id == call.id)
        host.add_nodes(body.nodes)
        host.add_edges([*rewired, *body.edges])
        return unmatched

    def _markers(self, body: Graph, marker_type: str) -> dict[str, str]:
        """Map boundary names to marker node ids; the first marker of a name wins."""
        markers: dict[str, str] = {}
        for node in body.nodes:
            name = node.attributes.get(self.config.name_attribute)
            if node.component_type == marker_type and isinstance(name, str):
                markers.setdefault(name, node.id)
        return markers

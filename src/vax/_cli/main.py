import json
import logging
from pathlib import Path
from typing import Annotated, Any

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from vax._config import InlinerConfig, UnmatchedPolicy
from vax._errors import VaxError
from vax._inline import FunctionLibrary, Inliner
from vax._io import dump_raw_graph, load_function_library, load_graph, load_schema
from vax._ir import Graph
from vax._wire import Schema

from .config import ConfigError, VaxConfig, get_config
from .render import render_node_table, render_trees

app = typer.Typer()

logger = logging.getLogger(__name__)
# Console for stderr (info/errors)
err_console = Console(stderr=True)
# Console for stdout (results)
out_console = Console()


@app.callback()
def callback(
    *,
    verbose: bool = typer.Option(default=False, help="Enable verbose output"),
) -> None:
    """Vax node-graph IR tools."""
    log_level = logging.DEBUG if verbose else logging.INFO

    # Configure rich logging handler to output to stderr
    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        handlers=[
            RichHandler(
                console=err_console,
                show_time=False,
                show_path=verbose,
                rich_tracebacks=True,
            ),
        ],
    )


GraphArgument = Annotated[Path, typer.Argument(help="Path to a raw graph JSON file", exists=True, dir_okay=False)]
SchemaOption = Annotated[
    Path | None,
    typer.Option("-s", "--schema", help="Path to the component schema JSON file"),
]
FunctionsOption = Annotated[
    Path | None,
    typer.Option("-f", "--functions", help="Directory of user-function bodies (<Type>.json)"),
]


def _fail(message: str) -> typer.Exit:
    err_console.print(f"[red]✗ {escape(message)}[/red]")
    return typer.Exit(code=1)


def _load_config() -> VaxConfig:
    try:
        return get_config()
    except ConfigError as e:
        raise _fail(str(e)) from e


def _build_inliner(
    config: VaxConfig,
    schema_path: Path | None,
    functions_path: Path | None,
    on_unmatched: UnmatchedPolicy | None,
) -> Inliner:
    schema_path = schema_path or config.schema
    functions_path = functions_path or config.functions

    schema = load_schema(schema_path) if schema_path is not None else Schema()
    library = load_function_library(functions_path) if functions_path is not None else FunctionLibrary()
    if schema_path is not None:
        err_console.print(f"[cyan]Schema:[/cyan] {schema_path}")
    if functions_path is not None:
        err_console.print(f"[cyan]Functions:[/cyan] {functions_path} ({len(library)} bodies)")

    overrides: dict[str, Any] = {}
    if config.max_passes is not None:
        overrides["max_passes"] = config.max_passes
    policy = on_unmatched or config.on_unmatched
    if policy is not None:
        overrides["on_unmatched"] = policy
    return Inliner(schema, library, InlinerConfig(**overrides))


def _inline(inliner: Inliner, graph: Graph) -> Graph:
    result = inliner.run(graph)
    err_console.print(
        f"[cyan]Inlined[/cyan] {result.expanded} call(s) in {result.passes} pass(es)",
    )
    if not result.success:
        err_console.print(f"[yellow]⚠ {len(result.unmatched)} edge(s) found no boundary marker[/yellow]")
    return result.graph


@app.command()
def roots(path: GraphArgument) -> None:
    """List the root nodes of a graph (nodes that consume from nothing)."""
    try:
        graph = load_graph(path)
    except VaxError as e:
        raise _fail(str(e)) from e
    render_node_table(graph.root_nodes(), out_console, title="Root nodes")


@app.command()
def check(path: GraphArgument) -> None:
    """Check a graph for dangling edges and doubly fed slots."""
    try:
        graph = load_graph(path)
    except VaxError as e:
        raise _fail(str(e)) from e

    errors = graph.validate()
    if errors:
        for error in errors:
            err_console.print(f"  [red]•[/red] {escape(error)}")
        raise _fail(f"{len(errors)} problem(s) found")
    err_console.print(f"[green]✓ {len(graph)} nodes, {len(graph.edges)} edges, no problems[/green]")


@app.command()
def inline(
    path: GraphArgument,
    *,
    schema: SchemaOption = None,
    functions: FunctionsOption = None,
    output: Annotated[
        Path | None,
        typer.Option("-o", "--output", help="Path to output JSON file (stdout if omitted)"),
    ] = None,
    on_unmatched: Annotated[
        UnmatchedPolicy | None,
        typer.Option("--on-unmatched", help=UnmatchedPolicy.describe()),
    ] = None,
) -> None:
    """Inline every user-function call and write the flat graph."""
    config = _load_config()
    try:
        graph = load_graph(path)
        flat = _inline(_build_inliner(config, schema, functions, on_unmatched), graph)
    except VaxError as e:
        raise _fail(str(e)) from e

    if output is None:
        typer.echo(json.dumps(flat.to_raw(), indent=2))
        return
    dump_raw_graph(flat.to_raw(), output)
    err_console.print(f"[green]✓ Wrote flat graph to[/green] {output}")


@app.command()
def compose(  # noqa: PLR0913
    path: GraphArgument,
    *,
    schema: SchemaOption = None,
    functions: FunctionsOption = None,
    root: Annotated[
        str | None,
        typer.Option("--root", help="Compose only the tree below this node id"),
    ] = None,
    inline_first: Annotated[
        bool,
        typer.Option("--inline", help="Inline user functions before composing"),
    ] = False,
    from_sinks: Annotated[
        bool,
        typer.Option("--sinks", help="Start from sink nodes (nothing consumes from them) instead of root nodes"),
    ] = False,
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print trees as JSON instead of a tree view"),
    ] = False,
) -> None:
    """Compose the graph into one tree per root node."""
    config = _load_config()
    try:
        graph = load_graph(path)
        if inline_first:
            graph = _inline(_build_inliner(config, schema, functions, None), graph)
        if root is not None:
            trees = [graph.compose_tree_with_root(root)]
        else:
            trees = graph.compose_trees(graph.sink_nodes() if from_sinks else None)
    except VaxError as e:
        raise _fail(str(e)) from e

    if as_json:
        typer.echo(json.dumps([tree.to_raw() for tree in trees], indent=2))
        return
    render_trees(trees, out_console)

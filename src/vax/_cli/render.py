"""Rich rendering utilities for CLI commands."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

if TYPE_CHECKING:
    from rich.console import Console

    from vax._ir import Node


def render_node_table(nodes: list[Node], console: Console, *, title: str | None = None) -> None:
    """Render a list of nodes as a Rich table.

    Args:
        nodes: Nodes to render.
        console: Rich Console to output to.
        title: Optional table title.

    """
    if not nodes:
        console.print("[dim]No nodes[/dim]")
        return

    table = Table(show_header=True, header_style="bold cyan", title=title)
    table.add_column("Id", style="bold")
    table.add_column("Component")
    table.add_column("Attributes", style="dim")

    for node in nodes:
        attrs = ", ".join(f"{key}={value!r}" for key, value in node.attributes.items())
        table.add_row(escape(node.id), escape(node.component_type), escape(attrs))

    console.print(table)
    console.print(f"\n[dim]Total: {len(nodes)} nodes[/dim]")


def _node_label(node: Node, slot: str | None) -> str:
    label = f"[bold]{escape(node.id)}[/bold] [cyan]{escape(node.component_type)}[/cyan]"
    if slot is not None:
        out = f".{escape(node.out)}" if node.out is not None else ""
        label = f"[yellow]{escape(slot)}[/yellow] <- {label}[dim]{out}[/dim]"
    return label


def build_rich_tree(root: Node) -> Tree:
    """Build a Rich tree mirroring a composed node tree."""
    tree = Tree(_node_label(root, None))

    def add_children(branch: Tree, node: Node) -> None:
        for slot, child in node.edges.items():
            add_children(branch.add(_node_label(child, slot)), child)

    add_children(tree, root)
    return tree


def render_trees(trees: list[Node], console: Console) -> None:
    """Render composed trees, one Rich tree each."""
    if not trees:
        console.print("[dim]No trees[/dim]")
        return
    for tree in trees:
        console.print(build_rich_tree(tree))

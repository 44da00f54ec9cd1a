"""
Inspect Command - Show one node and its connections.

Mirrors the explorer's details panel: node fields, annotations carried
in the node metadata, and the incoming/outgoing connections.
"""

import sys

import click
from rich.console import Console
from rich.panel import Panel
from rich.tree import Tree

from ..utils import build_store, echo_error

console = Console()


@click.command()
@click.argument("graph_file", type=click.Path())
@click.argument("node_id")
@click.option("-f", "--filter", "connection_filter", default="", help="Filter connections by name")
def inspect(graph_file: str, node_id: str, connection_filter: str):
    """
    Show details and connections of NODE_ID.
    """
    store = build_store(graph_file)
    store.select_node(node_id)
    node = store.selected_node
    if node is None:
        echo_error(f"Node not found: {node_id}")
        sys.exit(1)

    lines = [
        f"[bold]{node.name}[/bold]  [dim]{node.type_label}[/dim]",
        f"Qualified name: {node.qualified_name}",
    ]
    if node.file_path:
        location = node.file_path
        if node.line_start is not None:
            location += f":{node.line_start}"
            if node.line_end is not None:
                location += f"-{node.line_end}"
        lines.append(f"File: {location}")
    if node.language:
        lines.append(f"Language: {node.language}")

    annotation = store.annotation_for(node.id)
    if annotation.status is not None:
        lines.append(f"Status: {annotation.status.value}")
    if annotation.tags:
        lines.append(f"Tags: {', '.join(annotation.tags)}")
    if annotation.notes:
        lines.append(f"Notes: {annotation.notes}")

    console.print(Panel("\n".join(lines), title=node.id, expand=False))

    edges = store.connections(node, connection_filter)
    tree = Tree(f"[bold]Connections[/bold] ({len(edges)})")
    outgoing = tree.add("[cyan]Outgoing[/cyan]")
    incoming = tree.add("[cyan]Incoming[/cyan]")
    for edge in edges:
        other = store.get_node(edge.other_end(node.id))
        name = other.name if other is not None else edge.other_end(node.id)
        branch = outgoing if edge.source == node.id else incoming
        branch.add(f"{name} [dim]({edge.type_label})[/dim]")

    console.print(tree)

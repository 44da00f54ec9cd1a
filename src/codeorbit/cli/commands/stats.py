"""
Stats Command - Summarise a graph by node and edge type.

Legend order matches the explorer: most frequent type first.
"""

import click
from rich.console import Console
from rich.table import Table

from ...store.appearance import AppearanceStore
from ..utils import build_store

console = Console()


@click.command()
@click.argument("graph_file", type=click.Path())
def stats(graph_file: str):
    """
    Show node and edge counts per type.
    """
    store = build_store(graph_file)
    graph = store.graph

    with AppearanceStore() as appearance:
        node_table = Table(title="Node types", show_header=True, header_style="bold")
        node_table.add_column("Type", style="cyan")
        node_table.add_column("Count", justify="right")
        node_table.add_column("Colour")
        for label, count in store.node_type_counts():
            color = appearance.color_for(label)
            node_table.add_row(label, str(count), f"[{color}]●[/] {color}")

    edge_table = Table(title="Edge types", show_header=True, header_style="bold")
    edge_table.add_column("Type", style="cyan")
    edge_table.add_column("Count", justify="right")
    for label, count in store.edge_type_counts():
        edge_table.add_row(label, str(count))

    name = graph.metadata.project_name or graph_file
    console.print(f"[bold]{name}[/bold]: {graph.node_count} nodes, {graph.edge_count} edges")
    console.print(node_table)
    console.print(edge_table)

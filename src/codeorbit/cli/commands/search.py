"""
Search Command - Filter a graph the way the explorer does.

Type filters hide every other type; the query is a case-insensitive
substring match over name, qualified name and file path.
"""

from typing import Tuple

import click
from rich.console import Console
from rich.table import Table

from ..utils import build_store, echo_warning

console = Console()


@click.command()
@click.argument("graph_file", type=click.Path())
@click.argument("query", default="")
@click.option("-t", "--type", "node_types", multiple=True, help="Only show these node types")
@click.option("--hide", "hidden_types", multiple=True, help="Hide these node types")
def search(graph_file: str, query: str, node_types: Tuple[str, ...], hidden_types: Tuple[str, ...]):
    """
    List nodes matching QUERY and the type filters.
    """
    store = build_store(graph_file)

    for label, _ in store.node_type_counts():
        hidden = (node_types and label not in node_types) or label in hidden_types
        if hidden:
            store.toggle_node_type(label)
    store.set_search_query(query)

    nodes = store.filtered_nodes()
    if not nodes:
        echo_warning("No nodes match the current filters")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("Id", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Type")
    table.add_column("File", style="dim")
    for node in nodes:
        table.add_row(node.id, node.name, node.type_label, node.file_path or "")

    console.print(table)
    s = store.stats()
    console.print(f"{s.visible_nodes} of {s.total_nodes} nodes, {s.visible_edges} of {s.total_edges} edges")

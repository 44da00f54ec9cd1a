"""
Layout Command - Assign 3D positions to a graph file.

Nodes that already carry a position keep it unless --reset is given.
"""

import click

from ...graph.layout import LAYOUTS, clear_positions, get_layout
from ...graph.loader import dump_graph
from ..utils import echo_info, echo_success, load_graph_or_exit


@click.command()
@click.argument("graph_file", type=click.Path())
@click.option(
    "-a", "--algorithm",
    type=click.Choice(sorted(LAYOUTS)),
    default="spherical",
    show_default=True,
    help="Layout policy",
)
@click.option("-o", "--output", help="Output file (defaults to overwriting the input)")
@click.option("--reset", is_flag=True, help="Discard existing positions first")
@click.option("--seed", type=int, default=0, show_default=True, help="Seed for the force layout")
def layout(graph_file: str, algorithm: str, output: str, reset: bool, seed: int):
    """
    Lay out a graph and write the positions back.
    """
    graph = load_graph_or_exit(graph_file)
    if reset:
        graph = clear_positions(graph)

    missing = sum(1 for n in graph.nodes if n.position is None)
    options = {"seed": seed} if algorithm == "force" else {}
    placed = get_layout(algorithm, **options).layout(graph)

    out = dump_graph(placed, output or graph_file)
    echo_success(f"Placed {missing} of {placed.node_count} nodes with the {algorithm} layout")
    echo_info(f"Written to {out}")

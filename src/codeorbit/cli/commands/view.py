"""
View Command - Render the explorer scene to an HTML page.

The page is a three.js viewer of one rendered frame: the filtered nodes,
the edges of the selection (or every filtered edge with --all-edges) and
the labels of the selected node.
"""

from typing import Optional, Tuple

import click

from ...graph.layout import LAYOUTS
from ...scene.html import write_html
from ...scene.renderer import EdgeMode, SceneRenderer
from ...store.appearance import AppearanceStore
from ..utils import build_store, echo_info, echo_success, echo_warning


@click.command()
@click.argument("graph_file", type=click.Path())
@click.option("-o", "--output", default="codeorbit.html", show_default=True, help="Output HTML file")
@click.option("-a", "--algorithm", type=click.Choice(sorted(LAYOUTS)), help="Layout for unplaced nodes")
@click.option("-s", "--select", "selected", help="Node id to select")
@click.option("-q", "--query", default="", help="Search query")
@click.option("--hide", "hidden_types", multiple=True, help="Hide these node types")
@click.option("--all-edges", is_flag=True, help="Draw every filtered edge, not only the selection's")
@click.option("--open", "open_browser", is_flag=True, help="Open the page in a browser")
def view(
    graph_file: str,
    output: str,
    algorithm: Optional[str],
    selected: Optional[str],
    query: str,
    hidden_types: Tuple[str, ...],
    all_edges: bool,
    open_browser: bool,
):
    """
    Write an interactive 3D view of a graph.
    """
    store = build_store(graph_file, layout=algorithm)
    for label in hidden_types:
        if store.is_visible_type(label):
            store.toggle_node_type(label)
    store.set_search_query(query)

    if selected:
        store.select_node(selected)
        if store.selected_node is None:
            echo_warning(f"Node not found: {selected}")

    with AppearanceStore() as appearance:
        renderer = SceneRenderer(
            store,
            appearance,
            edge_mode=EdgeMode.ALL if all_edges else EdgeMode.SELECTION,
        )
        frame = renderer.frame()
        renderer.close()

        title = store.graph.metadata.project_name or "CodeOrbit"
        out = write_html(
            frame,
            output,
            title=title,
            rotation_speed=appearance.rotation_speed,
            show_legend=appearance.show_legend,
            open_browser=open_browser,
        )

    if frame.no_results:
        echo_warning("No nodes match the current filters")
    echo_success(f"Scene written to {out}")
    echo_info(f"{len(frame.nodes)} nodes, {len(frame.edges)} edges")

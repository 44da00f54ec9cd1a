"""
CLI Utilities - Shared helper functions for command line operations.

Formatted printing, graph loading with user-facing errors, and the
helpers that build a populated store for a command.
"""

import re
import sys
from typing import Optional

import click

from ..core.types import Graph
from ..core.validation import GraphIntegrityError
from ..graph.layout import get_layout
from ..graph.loader import GraphLoadError, load_graph
from ..store.graph_store import GraphStore

HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}$")


def echo_success(message: str) -> None:
    """
    Print a success message with a green checkmark.

    Args:
        message (str): The message to display.
    """
    click.echo(click.style(f"✅ {message}", fg="green"))


def echo_error(message: str) -> None:
    """
    Print an error message with a red cross.

    Args:
        message (str): The error message to display.
    """
    click.echo(click.style(f"❌ {message}", fg="red"), err=True)


def echo_warning(message: str) -> None:
    """Print a warning message with a yellow alert symbol."""
    click.echo(click.style(f"⚠️  {message}", fg="yellow"))


def echo_info(message: str) -> None:
    """Print an informational message, dimmed."""
    click.echo(click.style(f"   {message}", dim=True))


def load_graph_or_exit(graph_file: str) -> Graph:
    """
    Load a graph file, printing the failure and exiting with status 1.

    Args:
        graph_file (str): Path to a graph JSON document.

    Returns:
        Graph: The parsed graph.
    """
    try:
        return load_graph(graph_file)
    except GraphLoadError as e:
        echo_error(str(e))
        sys.exit(1)


def build_store(graph_file: str, layout: Optional[str] = None) -> GraphStore:
    """
    Load a graph file into a fresh GraphStore.

    Integrity errors are printed one per line before exiting.
    """
    graph = load_graph_or_exit(graph_file)
    store = GraphStore(layout=get_layout(layout) if layout else None)
    try:
        store.set_graph(graph)
    except GraphIntegrityError as e:
        echo_error(f"Graph failed validation: {len(e.issues)} issue(s)")
        for issue in e.issues:
            echo_info(str(issue))
        sys.exit(1)
    return store


def require_hex_color(color: str) -> str:
    """Validate a #rrggbb colour string, exiting on failure."""
    if not HEX_COLOR.match(color):
        echo_error(f"Invalid colour '{color}': expected #rrggbb")
        sys.exit(1)
    return color.lower()

"""
Settings Command - Read and change the appearance settings.

Settings are stored in $CODEORBIT_HOME/settings.yaml (default
~/.codeorbit/settings.yaml) and apply to every graph.

Usage:
    codeorbit settings show
    codeorbit settings set-color module "#123456"
    codeorbit settings reset-colors
    codeorbit settings rotation 0.05
    codeorbit settings node-size 1.5
    codeorbit settings legend --off
"""

from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from ...store.appearance import AppearanceStore
from ..utils import echo_success, require_hex_color

console = Console()


@click.group()
def settings():
    """
    Show or change appearance settings.
    """
    pass


@settings.command("show")
def settings_show():
    """
    Print the current settings.
    """
    with AppearanceStore() as appearance:
        console.print(f"Legend: {'shown' if appearance.show_legend else 'hidden'}")
        console.print(f"Rotation speed: {appearance.rotation_speed}")
        console.print(f"Node size: {appearance.node_size_multiplier}")

        table = Table(title="Node colours", show_header=True, header_style="bold")
        table.add_column("Type", style="cyan")
        table.add_column("Colour")
        table.add_column("", style="dim")
        for label, color in appearance.node_colors.items():
            marker = "" if appearance.is_default_color(label) else "custom"
            table.add_row(label, f"[{color}]●[/] {color}", marker)
        console.print(table)


@settings.command("set-color")
@click.argument("type_label")
@click.argument("color")
def settings_set_color(type_label: str, color: str):
    """
    Set the colour of TYPE_LABEL to COLOR (#rrggbb).
    """
    color = require_hex_color(color)
    with AppearanceStore() as appearance:
        appearance.set_color(type_label, color)
    echo_success(f"{type_label} is now {color}")


@settings.command("reset-colors")
@click.argument("type_label", required=False)
def settings_reset_colors(type_label: Optional[str]):
    """
    Restore default colours, for one type or all of them.
    """
    with AppearanceStore() as appearance:
        if type_label:
            appearance.reset_color(type_label)
        else:
            appearance.reset_colors()
    echo_success(f"Reset colour of {type_label}" if type_label else "Reset all colours")


@settings.command("rotation")
@click.argument("speed", type=click.FloatRange(0.0, 1.0))
def settings_rotation(speed: float):
    """
    Set the auto-rotation speed (radians per second, 0 disables).
    """
    with AppearanceStore() as appearance:
        appearance.set_rotation_speed(speed)
    echo_success(f"Rotation speed set to {speed}")


@settings.command("node-size")
@click.argument("size", type=click.FloatRange(0.1, 5.0))
def settings_node_size(size: float):
    """
    Set the global node size multiplier.
    """
    with AppearanceStore() as appearance:
        appearance.set_node_size_multiplier(size)
    echo_success(f"Node size set to {size}")


@settings.command("legend")
@click.option("--on/--off", "visible", default=None, help="Show or hide; toggles when omitted")
def settings_legend(visible: Optional[bool]):
    """
    Show, hide or toggle the legend.
    """
    with AppearanceStore() as appearance:
        if visible is None:
            appearance.toggle_legend()
        else:
            appearance.set_show_legend(visible)
        state = "shown" if appearance.show_legend else "hidden"
    echo_success(f"Legend {state}")

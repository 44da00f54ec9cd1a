"""
Per-node visual state.

A node's look depends only on three flags: is it selected, hovered, or
connected to the selection. Priority is selected > hovered > connected >
default, and scale and emissive intensity grow monotonically with it.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class NodeVisualState:
    """How a node primitive is drawn."""
    scale: float
    emissive_intensity: float
    show_ring: bool
    show_label: bool


DEFAULT_STATE = NodeVisualState(scale=1.0, emissive_intensity=0.1, show_ring=False, show_label=False)
CONNECTED_STATE = NodeVisualState(scale=1.15, emissive_intensity=0.2, show_ring=False, show_label=False)
HOVERED_STATE = NodeVisualState(scale=1.3, emissive_intensity=0.3, show_ring=False, show_label=True)
SELECTED_STATE = NodeVisualState(scale=1.5, emissive_intensity=0.5, show_ring=True, show_label=True)


def visual_state(is_selected: bool, is_hovered: bool, is_connected: bool) -> NodeVisualState:
    """Resolve the visual state for a node from its interaction flags."""
    if is_selected:
        return SELECTED_STATE
    if is_hovered:
        return HOVERED_STATE
    if is_connected:
        return CONNECTED_STATE
    return DEFAULT_STATE

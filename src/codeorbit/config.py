"""
Global Configuration and Visual Defaults.

This module centralizes the built-in defaults shared by the stores and the
scene renderer: the node colour map, render parameters, camera rig limits
and layout constants. Values here are the "factory settings" a user returns
to when persisted settings are missing or unreadable.
"""

import os
from pathlib import Path
from typing import Dict

# --- Persistence ---

# Identifier of the appearance record inside the settings document
SETTINGS_KEY = "codeorbit-settings"

# Bumped when the persisted appearance record changes shape
SETTINGS_VERSION = 1

SETTINGS_FILENAME = "settings.yaml"

# --- Node Colors ---

# Fallback type label for the escape variant and for unknown colours
CUSTOM_TYPE_LABEL = "custom"

DEFAULT_NODE_COLORS: Dict[str, str] = {
    "module": "#1e9df1",
    "form": "#e91e63",
    "class": "#9c27b0",
    "function": "#17bf63",
    "method": "#00b87a",
    "component": "#00bcd4",
    "source_file": "#72767a",
    "controller": "#ff2d20",
    "model": "#f7b928",
    "view": "#9b59b6",
    "route": "#f39c12",
    "interface": "#68217a",
    CUSTOM_TYPE_LABEL: "#6b7280",
}

EDGE_COLOR = "#4b5563"
SELECTED_EDGE_COLOR = "#e5e7eb"

# --- Render Parameters ---

# Scene-group rotation in radians per second
DEFAULT_ROTATION_SPEED = 0.03

DEFAULT_NODE_SIZE_MULTIPLIER = 1.0

DEFAULT_SHOW_LEGEND = True

# Node visual size range accepted from producers
NODE_SIZE_MIN = 1.0
NODE_SIZE_MAX = 12.0
DEFAULT_NODE_SIZE = 4.0

# Sphere radius per unit of node visual size
NODE_RADIUS_FACTOR = 0.08

# Label height above the node centre per unit of node visual size
LABEL_OFFSET_FACTOR = 0.15

# --- Camera Rig ---

CAMERA_POSITION = (0.0, 0.0, 40.0)
CAMERA_FOV = 60.0
CAMERA_MIN_DISTANCE = 5.0
CAMERA_MAX_DISTANCE = 100.0
CAMERA_DAMPING = 0.05
CAMERA_ROTATE_SPEED = 0.5
CAMERA_ZOOM_SPEED = 0.8

# --- Layout ---

SPHERE_RADIUS = 20.0
SPHERE_JITTER = 2.0
GRID_SPACING = 3.0
GRID_DEPTH_JITTER = 5.0
FORCE_SCALE = 20.0
FORCE_ITERATIONS = 50


def settings_dir() -> Path:
    """
    Resolve the per-user settings directory.

    ``CODEORBIT_HOME`` overrides the default ``~/.codeorbit``.
    """
    override = os.getenv("CODEORBIT_HOME")
    if override:
        return Path(override).expanduser()
    return Path.home() / ".codeorbit"


def settings_path() -> Path:
    """Full path of the per-user settings document."""
    return settings_dir() / SETTINGS_FILENAME

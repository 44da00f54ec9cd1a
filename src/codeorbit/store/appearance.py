"""
Appearance Store.

Per-user visual configuration that outlives any particular graph: the
type-to-colour map, legend visibility, scene auto-rotation speed and the
global node-size multiplier.

Lifecycle:
    store = AppearanceStore()      # defaults, not yet loaded
    store.open()                   # load persisted record or fall back
    store.set_color("module", "#123456")   # persisted immediately
    store.close()

A missing, unreadable or invalid settings record is never fatal: the store
silently starts from the built-in defaults.

Storage:
    $CODEORBIT_HOME/settings.yaml (default ~/.codeorbit/settings.yaml),
    one record per settings key.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..config import (
    CUSTOM_TYPE_LABEL,
    DEFAULT_NODE_COLORS,
    DEFAULT_NODE_SIZE_MULTIPLIER,
    DEFAULT_ROTATION_SPEED,
    DEFAULT_SHOW_LEGEND,
    SETTINGS_KEY,
    SETTINGS_VERSION,
    settings_path,
)
from .events import Observable, StoreEvent

logger = logging.getLogger(__name__)


class AppearanceSettings(BaseModel):
    """The persisted appearance record."""
    model_config = ConfigDict(frozen=True, extra="ignore")

    version: int = SETTINGS_VERSION
    node_colors: Dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_NODE_COLORS))
    show_legend: bool = DEFAULT_SHOW_LEGEND
    rotation_speed: float = DEFAULT_ROTATION_SPEED
    node_size: float = DEFAULT_NODE_SIZE_MULTIPLIER


class SettingsBackend(ABC):
    """Key-value persistence facility for settings records."""

    @abstractmethod
    def load(self, key: str) -> Optional[Any]:
        """Return the stored record for ``key``, or None if there is none."""

    @abstractmethod
    def save(self, key: str, payload: Dict[str, Any]) -> None:
        """Store ``payload`` under ``key``, replacing any previous record."""


class MemorySettingsBackend(SettingsBackend):
    """Process-local backend, used by tests and ephemeral sessions."""

    def __init__(self, records: Optional[Dict[str, Any]] = None):
        self.records: Dict[str, Any] = dict(records or {})
        self.saves = 0

    def load(self, key: str) -> Optional[Any]:
        return self.records.get(key)

    def save(self, key: str, payload: Dict[str, Any]) -> None:
        self.records[key] = payload
        self.saves += 1


class YamlSettingsBackend(SettingsBackend):
    """
    Stores every settings record in one YAML document.

    The document is a mapping of settings key to record.
    """

    def __init__(self, path: Optional[Path] = None):
        self.path = path or settings_path()

    def _read_document(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        with open(self.path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"{self.path} does not contain a mapping")
        return data

    def load(self, key: str) -> Optional[Any]:
        return self._read_document().get(key)

    def save(self, key: str, payload: Dict[str, Any]) -> None:
        try:
            document = self._read_document()
        except (yaml.YAMLError, ValueError):
            # Unreadable document is replaced rather than merged
            document = {}
        document[key] = payload

        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            yaml.safe_dump(document, f, sort_keys=False, default_flow_style=False)


class AppearanceStore(Observable):
    """
    Holds and persists the appearance settings.

    The store imposes no range limits on rotation speed or size multiplier;
    clamping belongs to the UI control that produces the value.
    """

    def __init__(self, backend: Optional[SettingsBackend] = None, key: str = SETTINGS_KEY):
        super().__init__()
        self._backend = backend if backend is not None else YamlSettingsBackend()
        self._key = key
        self._settings = AppearanceSettings()
        self._open = False

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def open(self) -> "AppearanceStore":
        """Load the persisted record, falling back to defaults."""
        self._settings = self._load()
        self._open = True
        return self

    def close(self) -> None:
        self._open = False

    @property
    def is_open(self) -> bool:
        return self._open

    def __enter__(self) -> "AppearanceStore":
        return self.open()

    def __exit__(self, *args) -> None:
        self.close()

    def _load(self) -> AppearanceSettings:
        try:
            raw = self._backend.load(self._key)
            if raw is None:
                return AppearanceSettings()
            loaded = AppearanceSettings.model_validate(raw)
        except (OSError, yaml.YAMLError, ValueError, ValidationError) as e:
            logger.debug(f"Discarding unreadable appearance settings: {e}")
            return AppearanceSettings()

        if loaded.version != SETTINGS_VERSION:
            logger.debug(f"Discarding appearance settings version {loaded.version}")
            return AppearanceSettings()

        colors = {**DEFAULT_NODE_COLORS, **loaded.node_colors}
        return loaded.model_copy(update={"node_colors": colors})

    def _update(self, **changes: Any) -> None:
        if not self._open:
            raise RuntimeError("AppearanceStore is not open; call open() first")
        self._settings = self._settings.model_copy(update=changes)
        self._backend.save(self._key, self._settings.model_dump(mode="json"))
        self._notify(StoreEvent.APPEARANCE)

    # =========================================================================
    # Accessors
    # =========================================================================

    @property
    def settings(self) -> AppearanceSettings:
        return self._settings

    @property
    def node_colors(self) -> Dict[str, str]:
        return dict(self._settings.node_colors)

    @property
    def show_legend(self) -> bool:
        return self._settings.show_legend

    @property
    def rotation_speed(self) -> float:
        return self._settings.rotation_speed

    @property
    def node_size_multiplier(self) -> float:
        return self._settings.node_size

    def color_for(self, type_label: str) -> str:
        """Colour of a type, falling back to the custom colour."""
        colors = self._settings.node_colors
        return colors.get(type_label) or colors.get(CUSTOM_TYPE_LABEL) or DEFAULT_NODE_COLORS[CUSTOM_TYPE_LABEL]

    def is_default_color(self, type_label: str) -> bool:
        return self._settings.node_colors.get(type_label) == DEFAULT_NODE_COLORS.get(type_label)

    # =========================================================================
    # Mutators
    # =========================================================================

    def set_color(self, type_label: str, color: str) -> None:
        self._update(node_colors={**self._settings.node_colors, type_label: color})

    def reset_color(self, type_label: str) -> None:
        """Restore one type's default colour; types without a default are dropped."""
        colors = dict(self._settings.node_colors)
        if type_label in DEFAULT_NODE_COLORS:
            colors[type_label] = DEFAULT_NODE_COLORS[type_label]
        else:
            colors.pop(type_label, None)
        self._update(node_colors=colors)

    def reset_colors(self) -> None:
        self._update(node_colors=dict(DEFAULT_NODE_COLORS))

    def toggle_legend(self) -> None:
        self._update(show_legend=not self._settings.show_legend)

    def set_show_legend(self, visible: bool) -> None:
        self._update(show_legend=visible)

    def set_rotation_speed(self, speed: float) -> None:
        self._update(rotation_speed=speed)

    def set_node_size_multiplier(self, size: float) -> None:
        self._update(node_size=size)

    # Names used by the settings panel
    set_node_color = set_color
    reset_node_colors = reset_colors
    set_node_size = set_node_size_multiplier

"""Searchable, filterable overlay panel for settings exposed by loaded modules."""

from .app import InputEvent, SettingsPanelEngine
from .plugins import PluginRegistry, load_plugin_registry

__all__ = [
    "InputEvent",
    "SettingsPanelEngine",
    "PluginRegistry",
    "load_plugin_registry",
]

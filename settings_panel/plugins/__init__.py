"""Plugin registry helpers."""

from .registry import (
    PluginRegistry,
    iter_plugin_paths,
    load_plugin_registry,
    register_manifest,
)

__all__ = [
    "PluginRegistry",
    "iter_plugin_paths",
    "load_plugin_registry",
    "register_manifest",
]

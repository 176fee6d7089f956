"""Version utilities for the Settings Panel."""

from __future__ import annotations

from importlib import metadata

DEFAULT_VERSION = "1.0.0"


def load_version() -> str:
    try:
        return metadata.version("settings-panel")
    except metadata.PackageNotFoundError:
        return DEFAULT_VERSION

"""Config I/O utilities."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from ..exceptions import ConfigurationError, ValidationError
from .models import PanelSettings, validate_config

logger = logging.getLogger(__name__)

CONFIG_DIR_ENV = "SETTINGS_PANEL_CONFIG_DIR"
CONFIG_FILE_NAME = "settings_panel.json"


def get_config_dir() -> Path:
    override = os.environ.get(CONFIG_DIR_ENV, "").strip()
    if override:
        return Path(override)
    return Path.home() / ".settings_panel"


def get_config_path() -> Path:
    return get_config_dir() / CONFIG_FILE_NAME


def _read_panel_settings(config_path: Path) -> PanelSettings:
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigurationError(f"Could not read panel config: {exc}", file_path=str(config_path)) from exc
    if not isinstance(data, dict):
        raise ConfigurationError("Panel config is not a JSON object", file_path=str(config_path))
    try:
        return validate_config(data)
    except PydanticValidationError as exc:
        first = exc.errors()[0] if exc.errors() else {}
        field_name = ".".join(str(part) for part in first.get("loc", ()))
        raise ValidationError(f"Panel config validation failed: {exc}", field_name=field_name or None) from exc


def load_panel_settings(config_path: Optional[Path] = None, strict: bool = False) -> PanelSettings:
    """Load panel preferences.

    A missing file always yields defaults. Unreadable or invalid files yield
    defaults with a warning, or raise ``ConfigurationError`` /
    ``ValidationError`` when ``strict`` is set.
    """
    if config_path is None:
        config_path = get_config_path()
    config_path = Path(config_path)
    if not config_path.exists():
        return PanelSettings()
    try:
        return _read_panel_settings(config_path)
    except ConfigurationError as exc:
        if strict:
            raise
        logger.warning("%s (%s), using defaults", exc, config_path)
        return PanelSettings()


def save_panel_settings(settings: PanelSettings, config_path: Optional[Path] = None) -> bool:
    if config_path is None:
        config_path = get_config_path()
    config_path = Path(config_path)
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, "w", encoding="utf-8") as f:
            json.dump(settings.model_dump(), f, indent=2)
        return True
    except OSError as exc:
        logger.warning("Failed to write panel config %s: %s", config_path, exc)
        return False

"""Panel preferences: pydantic models plus JSON load/save helpers."""

from .models import (
    FilteringConfig,
    GeneralConfig,
    PanelSettings,
    PluginsConfig,
    validate_config,
)
from .io import (
    get_config_dir,
    get_config_path,
    load_panel_settings,
    save_panel_settings,
)

__all__ = [
    'FilteringConfig',
    'GeneralConfig',
    'PanelSettings',
    'PluginsConfig',
    'validate_config',
    'get_config_dir',
    'get_config_path',
    'load_panel_settings',
    'save_panel_settings',
]

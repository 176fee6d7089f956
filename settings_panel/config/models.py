from __future__ import annotations

from typing import Any, Dict, List, cast

from pydantic import BaseModel, ConfigDict, Field


class _BaseConfigModel(BaseModel):
    model_config = ConfigDict(extra="allow")


class FilteringConfig(_BaseConfigModel):
    show_advanced: bool = False
    show_keybinds: bool = True
    show_settings: bool = True


class GeneralConfig(_BaseConfigModel):
    toggle_key: str = "F1"
    hide_single_section: bool = False
    plugin_collapsed_default: bool = True
    sort_categories_alphabetically: bool = True


class PluginsConfig(_BaseConfigModel):
    enabled: bool = True
    paths: List[str] = Field(default_factory=list)


class PanelSettings(_BaseConfigModel):
    filtering: FilteringConfig = Field(default_factory=FilteringConfig)
    general: GeneralConfig = Field(default_factory=GeneralConfig)
    plugins: PluginsConfig = Field(default_factory=PluginsConfig)


def validate_config(payload: Dict[str, Any]) -> PanelSettings:
    return cast(PanelSettings, PanelSettings.model_validate(payload))

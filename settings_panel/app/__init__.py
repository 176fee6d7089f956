"""Application layer: the settings panel engine and its frame hooks."""

from .controller import InputEvent, SettingsPanelEngine, SettingsSource

__all__ = ["InputEvent", "SettingsPanelEngine", "SettingsSource"]

"""Settings aggregation pipeline: models, filtering, grouping, collapse state."""

from .models import (
    CategoryGroup,
    FilterState,
    KeyboardShortcut,
    KeyCode,
    ModuleDescriptor,
    ModuleGroup,
    SettingEntry,
    ValueCell,
)
from .filtering import filter_settings
from .grouping import group_settings
from .collapse import CollapseTracker
from .converters import ConverterRegistry, ValueConverter

__all__ = [
    "CategoryGroup",
    "FilterState",
    "KeyboardShortcut",
    "KeyCode",
    "ModuleDescriptor",
    "ModuleGroup",
    "SettingEntry",
    "ValueCell",
    "filter_settings",
    "group_settings",
    "CollapseTracker",
    "ConverterRegistry",
    "ValueConverter",
]

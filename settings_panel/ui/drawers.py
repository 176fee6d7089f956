"""Per-type value drawers with a generic fallback."""

from __future__ import annotations

import enum
import logging
from typing import Any, Callable, Dict

from ..core.models import KeyboardShortcut, KeyCode, SettingEntry
from .surface import LayoutSurface

logger = logging.getLogger(__name__)

Drawer = Callable[[SettingEntry, LayoutSurface], None]


def draw_fallback(entry: SettingEntry, surface: LayoutSurface) -> None:
    """Read-only text rendering for types without an editor."""
    value = entry.get()
    surface.label("" if value is None else str(value))


def draw_bool(entry: SettingEntry, surface: LayoutSurface) -> None:
    current = bool(entry.get())
    result = surface.toggle(current, "Enabled" if current else "Disabled")
    if result != current:
        entry.set(result)


def draw_choice(entry: SettingEntry, surface: LayoutSurface) -> None:
    """Cycle through acceptable values (or enum members) on click."""
    current = entry.get()
    choices = list(entry.acceptable_values)
    if not choices and isinstance(entry.setting_type, type) and issubclass(entry.setting_type, enum.Enum):
        choices = list(entry.setting_type)
    text = current.name if isinstance(current, enum.Enum) else str(current)
    if surface.button(text) and choices:
        try:
            index = choices.index(current)
        except ValueError:
            index = -1
        entry.set(choices[(index + 1) % len(choices)])


def draw_keybind(entry: SettingEntry, surface: LayoutSurface) -> None:
    value = entry.get()
    surface.label(str(value) if value is not None else "Not set")
    if surface.button("Clear"):
        entry.set(KeyboardShortcut() if entry.setting_type is KeyboardShortcut else KeyCode(""))


BUILTIN_DRAWERS: Dict[type, Drawer] = {
    bool: draw_bool,
    KeyboardShortcut: draw_keybind,
    KeyCode: draw_keybind,
}


class DrawerRegistry:
    """Resolves a drawer once per entry type; never returns None."""

    def __init__(self, fallback: Drawer = draw_fallback) -> None:
        self._drawers: Dict[type, Drawer] = dict(BUILTIN_DRAWERS)
        self.fallback = fallback

    def register(self, setting_type: type, drawer: Drawer) -> bool:
        if setting_type is None:
            raise ValueError("setting_type is required")
        if drawer is None:
            raise ValueError("drawer is required")
        if setting_type in self._drawers:
            logger.warning("Tried to add a setting drawer for type %s while one already exists.",
                           getattr(setting_type, "__qualname__", setting_type))
            return False
        self._drawers[setting_type] = drawer
        return True

    def resolve(self, setting_type: Any) -> Drawer:
        drawer = self._drawers.get(setting_type)
        if drawer is not None:
            return drawer
        if isinstance(setting_type, type):
            if issubclass(setting_type, enum.Enum):
                return draw_choice
            for base in setting_type.__mro__[1:]:
                drawer = self._drawers.get(base)
                if drawer is not None:
                    return drawer
        return self.fallback

    def resolve_for(self, entry: SettingEntry) -> Drawer:
        if entry.acceptable_values:
            return self._drawers.get(entry.setting_type) or draw_choice
        return self.resolve(entry.setting_type)

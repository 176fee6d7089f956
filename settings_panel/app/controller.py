"""Settings panel engine: owns the filtered list and all per-frame state."""

from __future__ import annotations

import logging
import webbrowser
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, FrozenSet, Iterator, List, Optional, Protocol, Set, Tuple

from ..config import PanelSettings, get_config_dir, save_panel_settings
from ..core.collapse import CollapseTracker
from ..core.converters import ConverterRegistry
from ..core.filtering import filter_settings
from ..core.grouping import WebsiteLookup, group_settings
from ..core.models import (
    SORT_MARKER,
    FilterState,
    KeyboardShortcut,
    ModuleDescriptor,
    ModuleGroup,
    SettingEntry,
)
from ..exceptions import ReentrancyError
from ..exports.settings_codec import (
    EXPORT_FILE_NAME,
    ExportResult,
    ImportResult,
    export_settings,
    import_settings,
)
from ..logging_config import LoggingTimer
from ..ui.drawers import DrawerRegistry
from ..ui.geometry import WindowGeometry, compute_window_geometry
from ..ui.surface import LayoutSurface
from ..ui.virtual_list import (
    PanelEvent,
    RenderOptions,
    RenderPass,
    Viewport,
    VirtualListRenderer,
)

logger = logging.getLogger(__name__)

TIP_EXPAND = "Tip: Click plugin names to expand. Click setting and group names to see their descriptions."
TIP_DRAG = "Tip: You can drag this window to move it. It will stay open while you interact with the application."
ESCAPE_KEY = "Escape"

FILTER_TOGGLES = ("show_advanced", "show_keybinds", "show_settings", "show_only_changed")


class SettingsSource(Protocol):
    def collect(self, include_debug: bool = False) -> Tuple[List[SettingEntry], Set[str]]: ...

    def describe(self, module_id: str) -> Optional[ModuleDescriptor]: ...


@dataclass(frozen=True)
class InputEvent:
    """Keys seen by the host's input hook this frame."""

    key: Optional[str] = None
    pressed: FrozenSet[str] = frozenset()


class SettingsPanelEngine:
    """Aggregates discovered settings into the list the panel draws.

    Constructed once per host with its collaborators injected. Opening the
    panel runs discovery; search and toggle edits only re-filter; import and
    the debug toggle re-run discovery. Closing drops the height cache and
    the scroll position while the filter toggles persist.
    """

    def __init__(
        self,
        source: SettingsSource,
        *,
        settings: Optional[PanelSettings] = None,
        drawers: Optional[DrawerRegistry] = None,
        converters: Optional[ConverterRegistry] = None,
        config_dir: Optional[Path] = None,
        config_path: Optional[Path] = None,
        website_lookup: Optional[WebsiteLookup] = None,
        open_website: Optional[Callable[[str], object]] = None,
        screen_size: Tuple[int, int] = (1920, 1080),
    ) -> None:
        self.source = source
        self.settings = settings or PanelSettings()
        self.converters = converters or ConverterRegistry()
        self.renderer = VirtualListRenderer(drawers or DrawerRegistry())
        self.config_dir = Path(config_dir) if config_dir else get_config_dir()
        self.config_path = config_path
        self.website_lookup = website_lookup
        self.open_website = open_website or webbrowser.open
        self.screen_size = screen_size

        filtering = self.settings.filtering
        general = self.settings.general
        self.state = FilterState(
            show_advanced=filtering.show_advanced,
            show_keybinds=filtering.show_keybinds,
            show_settings=filtering.show_settings,
            default_collapsed=general.plugin_collapsed_default,
            sort_alphabetical=general.sort_categories_alphabetically,
        )
        self.collapse = CollapseTracker(self.state)
        self.toggle_shortcut = KeyboardShortcut.parse(general.toggle_key)

        self.all_settings: List[SettingEntry] = []
        self.modules_without_settings: Set[str] = set()
        self.groups: List[ModuleGroup] = []
        self.geometry: WindowGeometry = compute_window_geometry(*screen_size)
        self.scroll_top = 0.0
        self.show_debug = False
        self.override_hotkey = False
        self.header_was_clicked = False
        self.window_was_moved = False
        self._displaying = False
        self._busy: Optional[str] = None
        self._display_listeners: List[Callable[[bool], None]] = []

    # ------------------------------------------------------------------ lifecycle

    @property
    def displaying(self) -> bool:
        return self._displaying

    def add_display_listener(self, listener: Callable[[bool], None]) -> None:
        self._display_listeners.append(listener)

    def set_displaying(self, value: bool) -> None:
        value = bool(value)
        if value == self._displaying:
            return
        self._displaying = value
        if value:
            self.geometry = compute_window_geometry(*self.screen_size)
            self.window_was_moved = False
            self.build_setting_list()
        else:
            self._forget_frame_state()
            self._persist()
        for listener in list(self._display_listeners):
            listener(value)

    def open(self) -> None:
        self.set_displaying(True)

    def close(self) -> None:
        self.set_displaying(False)

    def toggle_display(self) -> bool:
        self.set_displaying(not self._displaying)
        return self._displaying

    def _forget_frame_state(self) -> None:
        for group in self.groups:
            group.height = 0
        self.renderer.reset()
        self.scroll_top = 0.0

    @contextmanager
    def _exclusive(self, operation: str) -> Iterator[None]:
        if self._busy is not None:
            raise ReentrancyError(
                f"{operation} called while {self._busy} is running", operation=operation
            )
        self._busy = operation
        try:
            yield
        finally:
            self._busy = None

    # ------------------------------------------------------------------ rebuilds

    def build_setting_list(self) -> List[ModuleGroup]:
        """Re-run discovery, then rebuild the filtered list."""
        entries, without = self.source.collect(self.show_debug)
        self.all_settings = list(entries)
        self.modules_without_settings = set(without)
        logger.debug("Discovered %d settings, %d modules without settings",
                     len(self.all_settings), len(self.modules_without_settings))
        return self.rebuild()

    def rebuild(self) -> List[ModuleGroup]:
        """Filter, group and re-apply collapse state without re-discovery."""
        with self._exclusive("rebuild"), LoggingTimer("rebuild"):
            filtered = filter_settings(self.all_settings, self.state)
            rebuilt = group_settings(
                filtered,
                sort_alphabetical=self.state.sort_alphabetical,
                website_lookup=self.website_lookup,
            )
            self.groups = self.collapse.carry_over(self.groups, rebuilt)
        return self.groups

    @property
    def search(self) -> str:
        return self.state.search

    def set_search(self, text: Optional[str]) -> None:
        text = text or ""
        if text == self.state.search:
            return
        self.state.search = text
        self.rebuild()

    def clear_search(self) -> None:
        self.set_search("")

    def set_filter(self, name: str, value: bool) -> None:
        if name not in FILTER_TOGGLES:
            raise KeyError(f"Unknown filter toggle: {name}")
        value = bool(value)
        if getattr(self.state, name) == value:
            return
        setattr(self.state, name, value)
        if hasattr(self.settings.filtering, name):
            setattr(self.settings.filtering, name, value)
            self._persist()
        self.rebuild()

    def set_sort_alphabetical(self, value: bool) -> None:
        value = bool(value)
        if self.state.sort_alphabetical == value:
            return
        self.state.sort_alphabetical = value
        self.settings.general.sort_categories_alphabetically = value
        self._persist()
        self.rebuild()

    def set_show_debug(self, value: bool) -> None:
        value = bool(value)
        if self.show_debug == value:
            return
        self.show_debug = value
        self.build_setting_list()

    # ------------------------------------------------------------------ collapse

    def toggle_collapsed(self, group: ModuleGroup) -> bool:
        self.header_was_clicked = True
        return self.collapse.toggle(group)

    def toggle_all(self) -> bool:
        """Expand all / collapse all; returns the new default."""
        new_default = self.collapse.toggle_all(self.groups)
        self.settings.general.plugin_collapsed_default = new_default
        self.header_was_clicked = True
        self._persist()
        return new_default

    @property
    def toggle_all_label(self) -> str:
        return "Expand All" if self.state.default_collapsed else "Collapse All"

    def reset_module(self, group: ModuleGroup) -> int:
        reset = 0
        for entry in group.entries():
            try:
                if entry.reset():
                    reset += 1
            except Exception as exc:
                logger.warning("Could not reset %s: %s", entry.name, exc)
        return reset

    # ------------------------------------------------------------------ frame hooks

    @property
    def tip(self) -> Optional[str]:
        if not self.header_was_clicked:
            return TIP_EXPAND
        if not self.window_was_moved:
            return TIP_DRAG
        return None

    @property
    def modules_without_settings_text(self) -> str:
        names = []
        for module_id in self.modules_without_settings:
            module = self.source.describe(module_id)
            names.append((module.name if module else module_id).lstrip(SORT_MARKER))
        return ", ".join(sorted(names))

    def move_window(self, x: int, y: int) -> None:
        g = self.geometry
        self.geometry = WindowGeometry(x, y, g.width, g.height, g.left_column_width, g.right_column_width)
        self.window_was_moved = True

    def scroll_to(self, top: float) -> None:
        self.scroll_top = max(0.0, float(top))

    def on_input(self, event: InputEvent) -> bool:
        """Input-phase hook: toggle hotkey and Escape. True if consumed."""
        if not self.override_hotkey and event.pressed and self.toggle_shortcut.is_down(event.pressed):
            self.toggle_display()
            return True
        if self._displaying and event.key == ESCAPE_KEY:
            self.close()
            return True
        return False

    def on_draw(self, surface: LayoutSurface, viewport: Optional[Viewport] = None) -> Optional[RenderPass]:
        """Draw-phase hook: render the visible part of the list.

        Without an explicit ``viewport`` the window height at the current
        scroll position is used.
        """
        if not self._displaying:
            return None
        options = RenderOptions(
            searching=self.state.is_searching,
            show_debug=self.show_debug,
            hide_single_section=self.settings.general.hide_single_section,
            left_column_width=self.geometry.left_column_width,
            tip=self.tip,
            modules_without_settings=self.modules_without_settings_text,
        )
        if viewport is None:
            viewport = Viewport(top=self.scroll_top, height=self.geometry.height)
        with self._exclusive("render"), LoggingTimer("render"):
            render_pass = self.renderer.render(surface, self.groups, viewport, options)
        self._apply_events(render_pass)
        return render_pass

    def _apply_events(self, render_pass: RenderPass) -> None:
        for event, group in render_pass.events:
            if event is PanelEvent.HEADER_CLICKED:
                self.toggle_collapsed(group)
            elif event is PanelEvent.RESET_ALL:
                self.reset_module(group)
            elif event is PanelEvent.OPEN_WEBSITE and group.website:
                try:
                    self.open_website(group.website)
                except Exception as exc:
                    logger.error("Failed to open %s: %s", group.website, exc)

    # ------------------------------------------------------------------ export / import

    @property
    def export_path(self) -> Path:
        return self.config_dir / EXPORT_FILE_NAME

    def export(self, path: Optional[Path] = None) -> ExportResult:
        return export_settings(self.groups, Path(path) if path else self.export_path, self.converters)

    def import_(self, path: Optional[Path] = None) -> ImportResult:
        result = import_settings(self.groups, Path(path) if path else self.export_path, self.converters)
        if result.ok:
            self.build_setting_list()
        return result

    # ------------------------------------------------------------------ persistence

    def _persist(self) -> None:
        if self.config_path is not None:
            save_panel_settings(self.settings, self.config_path)

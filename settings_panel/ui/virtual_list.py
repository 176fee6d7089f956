"""Height-cached virtualized rendering of the module group list.

Only groups intersecting the viewport are drawn; every other group is
replaced by a blank space of its cached height so the scrollable extent
stays correct. A group that has never been measured (height 0) is always
drawn, and its height is recorded on the first repaint.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from ..core.models import ModuleGroup, SettingEntry
from ..exceptions import LayoutMismatchError
from .drawers import DrawerRegistry
from .surface import LayoutSurface

logger = logging.getLogger(__name__)

TRAILING_SPACE = 70
DEBUG_FOOTER_GAP = 10
WEBSITE_BUTTON_WIDTH = 29
RESET_BUTTON_WIDTH = 40
SETTING_GAP = 2
FAILED_FIELD_TEXT = "Failed to draw this field, check log for details."
RESET_ALL_TEXT = "Reset all"
RESET_ALL_TOOLTIP = "Reset all settings for this plugin to their default values"
NO_OPTIONS_PREFIX = "Plugins with no options available: "


class DrawOutcome(str, enum.Enum):
    DRAWN = "drawn"
    SKIPPED = "skipped"
    PLACEHOLDER = "placeholder"


class PanelEvent(str, enum.Enum):
    HEADER_CLICKED = "header_clicked"
    RESET_ALL = "reset_all"
    OPEN_WEBSITE = "open_website"


@dataclass(frozen=True)
class Viewport:
    top: float
    height: float

    def intersects(self, offset: float, height: float) -> bool:
        return offset + height >= self.top and offset <= self.top + self.height


@dataclass(frozen=True)
class GroupDrawResult:
    module_id: str
    outcome: DrawOutcome
    offset: float
    height: int


@dataclass
class RenderOptions:
    searching: bool = False
    show_debug: bool = False
    hide_single_section: bool = False
    left_column_width: Optional[int] = None
    tip: Optional[str] = None
    modules_without_settings: str = ""


@dataclass
class RenderPass:
    results: List[GroupDrawResult] = field(default_factory=list)
    events: List[Tuple[PanelEvent, ModuleGroup]] = field(default_factory=list)
    content_height: float = 0.0

    def outcomes(self) -> List[DrawOutcome]:
        return [result.outcome for result in self.results]

    @property
    def drawn(self) -> List[str]:
        return [r.module_id for r in self.results if r.outcome is DrawOutcome.DRAWN]

    @property
    def skipped(self) -> List[str]:
        return [r.module_id for r in self.results if r.outcome is DrawOutcome.SKIPPED]


def is_group_visible(group: ModuleGroup, offset: float, viewport: Viewport) -> bool:
    return group.height == 0 or viewport.intersects(offset, group.height)


class VirtualListRenderer:
    """Draws module groups into a ``LayoutSurface`` one frame at a time.

    The renderer never mutates collapse state or the group list; clicks are
    returned as ``RenderPass.events`` for the owner to apply after the frame.
    """

    def __init__(self, drawers: Optional[DrawerRegistry] = None) -> None:
        self.drawers = drawers or DrawerRegistry()
        self.header_height = 0

    def reset(self) -> None:
        self.header_height = 0

    def render(
        self,
        surface: LayoutSurface,
        groups: Sequence[ModuleGroup],
        viewport: Viewport,
        options: Optional[RenderOptions] = None,
    ) -> RenderPass:
        options = options or RenderOptions()
        render_pass = RenderPass()

        surface.begin_vertical()
        offset = 0
        if not options.searching and options.tip:
            self._draw_tip(surface, options.tip)
            offset = self.header_height

        for group in groups:
            result = self.render_group(surface, group, offset, viewport, options, render_pass)
            render_pass.results.append(result)
            offset += group.height

        render_pass.content_height = offset

        if options.show_debug:
            surface.space(DEBUG_FOOTER_GAP)
            surface.label(NO_OPTIONS_PREFIX + options.modules_without_settings)
        else:
            surface.space(TRAILING_SPACE)
        surface.end_vertical()
        return render_pass

    def _draw_tip(self, surface: LayoutSurface, tip: str) -> None:
        surface.begin_horizontal()
        surface.label(tip)
        surface.end_horizontal()
        if self.header_height == 0 and surface.is_repaint:
            self.header_height = surface.last_rect_height()

    def render_group(
        self,
        surface: LayoutSurface,
        group: ModuleGroup,
        offset: float,
        viewport: Viewport,
        options: RenderOptions,
        render_pass: RenderPass,
    ) -> GroupDrawResult:
        module_id = group.module.module_id

        if not is_group_visible(group, offset, viewport):
            depth = surface.depth
            try:
                surface.space(group.height)
            except LayoutMismatchError as exc:
                logger.debug("Placeholder for %s hit a layout mismatch: %s", module_id, exc)
                surface.reset_to(depth)
            return GroupDrawResult(module_id, DrawOutcome.PLACEHOLDER, offset, group.height)

        depth = surface.depth
        try:
            self.draw_group(surface, group, options, render_pass)
        except LayoutMismatchError as exc:
            logger.debug("Skipping %s this frame: %s", module_id, exc)
            surface.reset_to(depth)
            return GroupDrawResult(module_id, DrawOutcome.SKIPPED, offset, group.height)

        if group.height == 0 and surface.is_repaint:
            group.height = surface.last_rect_height()
        return GroupDrawResult(module_id, DrawOutcome.DRAWN, offset, group.height)

    def draw_group(
        self,
        surface: LayoutSurface,
        group: ModuleGroup,
        options: RenderOptions,
        render_pass: RenderPass,
    ) -> None:
        module = group.module
        surface.begin_vertical("box")

        surface.begin_horizontal()
        if group.website:
            surface.space(WEBSITE_BUTTON_WIDTH)
        surface.space(RESET_BUTTON_WIDTH)

        header = f"{module.display_name} {module.version}".rstrip()
        tooltip = f"GUID: {module.module_id}" if options.show_debug else None
        if surface.button(header, tooltip) and not options.searching:
            render_pass.events.append((PanelEvent.HEADER_CLICKED, group))

        if group.website and surface.button("URL", group.website):
            render_pass.events.append((PanelEvent.OPEN_WEBSITE, group))

        if surface.button(RESET_ALL_TEXT, RESET_ALL_TOOLTIP):
            render_pass.events.append((PanelEvent.RESET_ALL, group))
        surface.end_horizontal()

        if options.searching or not group.collapsed:
            show_headers = len(group.categories) > 1 or not options.hide_single_section
            for category in group.categories:
                if category.name and show_headers:
                    surface.label(category.name)
                for entry in category.settings:
                    self.draw_setting(surface, entry, options)
                    surface.space(SETTING_GAP)

        surface.end_vertical()

    def draw_setting(self, surface: LayoutSurface, entry: SettingEntry, options: RenderOptions) -> None:
        surface.begin_horizontal()
        depth = surface.depth
        try:
            if not entry.hide_name:
                surface.label(entry.display_name, entry.description or None, options.left_column_width)
            self.drawers.resolve_for(entry)(entry, surface)
            if not entry.hide_default_button and (entry.has_default or entry.is_reference_type):
                surface.space(5)
                if surface.button("Reset"):
                    entry.set(entry.default_value)
        except LayoutMismatchError:
            raise
        except Exception as exc:
            logger.error("Failed to draw setting %s - %s", entry.name, exc)
            surface.reset_to(depth)
            surface.label(FAILED_FIELD_TEXT)
        surface.end_horizontal()

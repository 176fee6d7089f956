"""Tests for the height-cached virtualized renderer."""

from __future__ import annotations

import enum
from typing import List

import pytest

from settings_panel.core.grouping import group_settings
from settings_panel.core.models import KeyboardShortcut, ModuleDescriptor, ModuleGroup, SettingEntry
from settings_panel.exceptions import LayoutMismatchError
from settings_panel.ui.drawers import DrawerRegistry
from settings_panel.ui.surface import ROW_HEIGHT, RecordingSurface
from settings_panel.ui.virtual_list import (
    FAILED_FIELD_TEXT,
    NO_OPTIONS_PREFIX,
    TRAILING_SPACE,
    DrawOutcome,
    PanelEvent,
    RenderOptions,
    Viewport,
    VirtualListRenderer,
)

COLLAPSED_HEIGHT = ROW_HEIGHT
# header row + category label + one setting row + gap
EXPANDED_HEIGHT = ROW_HEIGHT * 3 + 2


class Level(enum.Enum):
    LOW = 1
    HIGH = 2


class Flaky:
    """Setting type whose drawer breaks the layout on its first frame."""


def _groups(make_entry, count: int, collapsed: bool = True) -> List[ModuleGroup]:
    entries = [
        make_entry("Value", i, default_value=0, module=ModuleDescriptor(f"Mod{i:02d}", f"m{i}", "1.0"))
        for i in range(count)
    ]
    groups = group_settings(entries)
    for group in groups:
        group.collapsed = collapsed
    return groups


def _render(renderer, groups, viewport=Viewport(0, 10_000), options=None, **surface_kwargs):
    surface = RecordingSurface(**surface_kwargs)
    render_pass = renderer.render(surface, groups, viewport, options or RenderOptions())
    assert surface.depth == 1
    return surface, render_pass


def test_first_frame_draws_and_measures_everything(make_entry) -> None:
    renderer = VirtualListRenderer()
    groups = _groups(make_entry, 3)
    groups[1].collapsed = False

    _, render_pass = _render(renderer, groups, Viewport(0, 10))

    assert render_pass.outcomes() == [DrawOutcome.DRAWN] * 3
    assert [group.height for group in groups] == [COLLAPSED_HEIGHT, EXPANDED_HEIGHT, COLLAPSED_HEIGHT]


def test_only_viewport_groups_are_drawn(make_entry) -> None:
    renderer = VirtualListRenderer()
    groups = _groups(make_entry, 10)
    _render(renderer, groups)

    surface, render_pass = _render(renderer, groups, Viewport(0, 50))
    assert render_pass.drawn == ["m0", "m1", "m2"]
    assert render_pass.outcomes().count(DrawOutcome.PLACEHOLDER) == 7
    assert ("space", COLLAPSED_HEIGHT) in surface.ops

    _, render_pass = _render(renderer, groups, Viewport(100, 50))
    assert render_pass.drawn == ["m4", "m5", "m6", "m7"]


def test_total_extent_is_independent_of_viewport(make_entry) -> None:
    renderer = VirtualListRenderer()
    groups = _groups(make_entry, 12)
    groups[3].collapsed = False
    groups[8].collapsed = False
    _render(renderer, groups)

    totals = set()
    for top in (0, 37, 120, 400, 5_000):
        _, render_pass = _render(renderer, groups, Viewport(top, 60))
        totals.add(render_pass.content_height)
    assert totals == {10 * COLLAPSED_HEIGHT + 2 * EXPANDED_HEIGHT}


def test_placeholder_offsets_follow_cached_heights(make_entry) -> None:
    renderer = VirtualListRenderer()
    groups = _groups(make_entry, 4)
    _render(renderer, groups)

    _, render_pass = _render(renderer, groups, Viewport(1_000, 50))
    assert [result.offset for result in render_pass.results] == [0, 21, 42, 63]
    assert render_pass.outcomes() == [DrawOutcome.PLACEHOLDER] * 4


def test_layout_fault_skips_group_and_remeasures_next_frame(make_entry) -> None:
    calls = {"count": 0}

    def flaky_drawer(entry: SettingEntry, surface) -> None:
        calls["count"] += 1
        surface.begin_horizontal()
        if calls["count"] == 1:
            raise LayoutMismatchError("Mismatched LayoutGroup.Repaint")
        surface.label("ok")
        surface.end_horizontal()

    drawers = DrawerRegistry()
    drawers.register(Flaky, flaky_drawer)
    renderer = VirtualListRenderer(drawers)

    groups = _groups(make_entry, 3, collapsed=False)
    flaky_module = ModuleDescriptor("Mod01", "m1", "1.0")
    groups[1] = group_settings([
        SettingEntry.from_value(flaky_module, "General", "Odd", Flaky(), setting_type=Flaky),
    ])[0]

    _, first = _render(renderer, groups)
    assert first.outcomes() == [DrawOutcome.DRAWN, DrawOutcome.SKIPPED, DrawOutcome.DRAWN]
    assert groups[1].height == 0
    assert first.content_height == 2 * EXPANDED_HEIGHT

    _, second = _render(renderer, groups)
    assert second.outcomes() == [DrawOutcome.DRAWN] * 3
    assert groups[1].height == EXPANDED_HEIGHT


def test_no_measurement_outside_repaint(make_entry) -> None:
    renderer = VirtualListRenderer()
    groups = _groups(make_entry, 2)

    _render(renderer, groups, is_repaint=False)
    assert [group.height for group in groups] == [0, 0]


def test_failing_drawer_shows_fallback_label(make_entry) -> None:
    def broken(entry, surface) -> None:
        raise RuntimeError("editor exploded")

    drawers = DrawerRegistry()
    drawers.register(Flaky, broken)
    renderer = VirtualListRenderer(drawers)
    module = ModuleDescriptor("Mod", "m", "1.0")
    groups = group_settings([SettingEntry.from_value(module, "General", "Odd", Flaky(), setting_type=Flaky)])
    groups[0].collapsed = False

    surface, render_pass = _render(renderer, groups)
    assert render_pass.outcomes() == [DrawOutcome.DRAWN]
    assert FAILED_FIELD_TEXT in surface.labels()


def test_trailing_space_or_debug_footer(make_entry) -> None:
    renderer = VirtualListRenderer()
    groups = _groups(make_entry, 1)

    surface, _ = _render(renderer, groups)
    assert surface.ops[-2] == ("space", TRAILING_SPACE)

    surface, _ = _render(renderer, groups, options=RenderOptions(show_debug=True, modules_without_settings="ModB"))
    assert surface.labels()[-1] == NO_OPTIONS_PREFIX + "ModB"
    assert ("space", TRAILING_SPACE) not in surface.ops


def test_tip_banner_offsets_first_group(make_entry) -> None:
    renderer = VirtualListRenderer()
    groups = _groups(make_entry, 2)

    _, render_pass = _render(renderer, groups, options=RenderOptions(tip="Tip: hello"))
    assert renderer.header_height == ROW_HEIGHT
    assert [result.offset for result in render_pass.results] == [ROW_HEIGHT, ROW_HEIGHT * 2]

    surface, render_pass = _render(renderer, groups, options=RenderOptions(tip="Tip: hello", searching=True))
    assert "Tip: hello" not in surface.labels()
    assert render_pass.results[0].offset == 0


@pytest.mark.parametrize("hide_single_section, expect_header", [(False, True), (True, False)])
def test_single_category_header_visibility(make_entry, hide_single_section, expect_header) -> None:
    renderer = VirtualListRenderer()
    groups = _groups(make_entry, 1, collapsed=False)

    surface, _ = _render(renderer, groups, options=RenderOptions(hide_single_section=hide_single_section))
    assert ("General" in surface.labels()) is expect_header


def test_multiple_categories_always_get_headers(make_entry) -> None:
    renderer = VirtualListRenderer()
    groups = group_settings([make_entry("A", 1, category="One"), make_entry("B", 2, category="Two")])
    groups[0].collapsed = False

    surface, _ = _render(renderer, groups, options=RenderOptions(hide_single_section=True))
    assert {"One", "Two"} <= set(surface.labels())


def test_searching_expands_and_ignores_header_clicks(make_entry) -> None:
    renderer = VirtualListRenderer()
    groups = _groups(make_entry, 1, collapsed=True)

    surface, render_pass = _render(renderer, groups, options=RenderOptions(searching=True), clicks={"Mod00 1.0"})
    assert "Value" in surface.labels()
    assert render_pass.events == []

    surface, render_pass = _render(renderer, groups, clicks={"Mod00 1.0"})
    assert "Value" not in surface.labels()
    assert render_pass.events == [(PanelEvent.HEADER_CLICKED, groups[0])]


def _draw_rows(entries, clicks=(), toggles=()):
    groups = group_settings(entries)
    for group in groups:
        group.collapsed = False
    surface, _ = _render(VirtualListRenderer(), groups, clicks=set(clicks), toggles=set(toggles))
    return surface


@pytest.mark.parametrize(
    "value, kwargs, expect_reset",
    [
        (3, {}, False),
        (3, {"default_value": 1}, True),
        ("bob", {}, True),
        ("bob", {"default_value": "", "hide_default_button": True}, False),
    ],
)
def test_reset_button_visibility(make_entry, value, kwargs, expect_reset) -> None:
    surface = _draw_rows([make_entry("Value", value, **kwargs)])
    assert ("Reset" in surface.buttons()) is expect_reset


def test_reset_button_restores_default(make_entry) -> None:
    volume = make_entry("Volume", 5, default_value=10)
    _draw_rows([volume], clicks={"Reset"})
    assert volume.get() == 10


def test_hide_name_omits_label(make_entry) -> None:
    surface = _draw_rows([make_entry("Secret", 1, hide_name=True), make_entry("Shown", 2)])
    assert "Secret" not in surface.labels()
    assert "Shown" in surface.labels()


def test_bool_toggle_sets_value(make_entry) -> None:
    muted = make_entry("Muted", False, default_value=False)
    _draw_rows([muted], toggles={"Disabled"})
    assert muted.get() is True


def test_choice_button_cycles_values(make_entry) -> None:
    device = make_entry("Device", "Default", acceptable_values=("Default", "Speakers", "Headphones"))
    _draw_rows([device], clicks={"Default"})
    assert device.get() == "Speakers"

    quality = make_entry("Quality", Level.HIGH)
    surface = _draw_rows([quality], clicks={"HIGH"})
    assert "HIGH" in surface.buttons()
    assert quality.get() is Level.LOW


def test_keybind_clear_button(make_entry) -> None:
    shortcut = make_entry("Mute key", KeyboardShortcut("M", ("LeftControl",)))
    surface = _draw_rows([shortcut], clicks={"Clear"})
    assert "M + LeftControl" in surface.labels()
    assert shortcut.get() == KeyboardShortcut()

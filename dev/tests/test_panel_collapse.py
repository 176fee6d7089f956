from __future__ import annotations

from settings_panel.core.collapse import CollapseTracker, collapse_exceptions
from settings_panel.core.grouping import group_settings
from settings_panel.core.models import FilterState, ModuleDescriptor


def _entries(make_entry):
    return [
        make_entry("One", 1, module=ModuleDescriptor("Alpha", "a")),
        make_entry("Two", 2, module=ModuleDescriptor("Beta", "b")),
        make_entry("Three", 3, module=ModuleDescriptor("Gamma", "g")),
    ]


def _rebuild(tracker, previous, entries):
    return tracker.carry_over(previous, group_settings(entries))


def _collapsed(groups):
    return {group.name: group.collapsed for group in groups}


def test_first_build_uses_default(make_entry) -> None:
    tracker = CollapseTracker(FilterState(default_collapsed=True))
    groups = _rebuild(tracker, [], _entries(make_entry))
    assert _collapsed(groups) == {"Alpha": True, "Beta": True, "Gamma": True}


def test_collapse_round_trip_survives_rebuild(make_entry) -> None:
    entries = _entries(make_entry)
    for default in (True, False):
        tracker = CollapseTracker(FilterState(default_collapsed=default))
        groups = _rebuild(tracker, [], entries)
        for desired in (True, False):
            groups[1].collapsed = desired
            groups = _rebuild(tracker, groups, entries)
            assert groups[1].name == "Beta"
            assert groups[1].collapsed is desired
            assert groups[0].collapsed is default


def test_exception_set_only_lists_deviating_modules(make_entry) -> None:
    tracker = CollapseTracker(FilterState(default_collapsed=True))
    groups = _rebuild(tracker, [], _entries(make_entry))
    tracker.toggle(groups[2])

    assert collapse_exceptions(groups, True) == {"Gamma"}


def test_toggle_resets_only_that_height(make_entry) -> None:
    tracker = CollapseTracker(FilterState(default_collapsed=True))
    groups = _rebuild(tracker, [], _entries(make_entry))
    for group in groups:
        group.height = 40

    assert tracker.toggle(groups[0]) is False
    assert [group.height for group in groups] == [0, 40, 40]


def test_toggle_all_flips_default_and_clears_exceptions(make_entry) -> None:
    state = FilterState(default_collapsed=True)
    tracker = CollapseTracker(state)
    entries = _entries(make_entry)
    groups = _rebuild(tracker, [], entries)
    tracker.toggle(groups[1])

    assert tracker.toggle_all(groups) is False
    assert state.default_collapsed is False
    assert _collapsed(groups) == {"Alpha": False, "Beta": False, "Gamma": False}

    groups = _rebuild(tracker, groups, entries)
    assert _collapsed(groups) == {"Alpha": False, "Beta": False, "Gamma": False}


def test_exception_for_hidden_module_is_not_retained(make_entry) -> None:
    tracker = CollapseTracker(FilterState(default_collapsed=True))
    entries = _entries(make_entry)
    groups = _rebuild(tracker, [], entries)
    tracker.toggle(groups[0])

    without_alpha = _rebuild(tracker, groups, entries[1:])
    restored = _rebuild(tracker, without_alpha, entries)
    assert restored[0].name == "Alpha"
    assert restored[0].collapsed is True

"""Carry per-module expand/collapse choices across list rebuilds."""

from __future__ import annotations

from typing import Iterable, List, Set

from .models import FilterState, ModuleGroup


def collapse_exceptions(groups: Iterable[ModuleGroup], default_collapsed: bool) -> Set[str]:
    """Names of modules whose collapsed flag differs from the default."""
    return {group.name for group in groups if group.collapsed != default_collapsed}


class CollapseTracker:
    """Applies the global default plus per-module exceptions to new groups.

    Module groups are recreated on every rebuild, so the tracker derives
    the exceptions from the outgoing list right before it is replaced.
    """

    def __init__(self, state: FilterState) -> None:
        self.state = state

    @property
    def default_collapsed(self) -> bool:
        return self.state.default_collapsed

    def carry_over(self, previous: Iterable[ModuleGroup], rebuilt: List[ModuleGroup]) -> List[ModuleGroup]:
        default = self.default_collapsed
        exceptions = collapse_exceptions(previous, default)
        for group in rebuilt:
            group.collapsed = (not default) if group.name in exceptions else default
        return rebuilt

    def toggle(self, group: ModuleGroup) -> bool:
        """Flip one module; only its cached height is invalidated."""
        group.collapsed = not group.collapsed
        return group.collapsed

    def toggle_all(self, groups: Iterable[ModuleGroup]) -> bool:
        """Flip the default and force it onto every visible group.

        Every visible group ends up equal to the new default, so no
        per-module exception survives a global expand/collapse.
        """
        new_default = not self.state.default_collapsed
        self.state.default_collapsed = new_default
        for group in groups:
            group.collapsed = new_default
        return new_default

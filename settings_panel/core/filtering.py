"""Search and toggle filtering over the discovered setting list."""

from __future__ import annotations

import logging
from typing import Iterable, List, Sequence

from .models import FilterState, SettingEntry

logger = logging.getLogger(__name__)


def _as_text(value: object) -> str:
    return "" if value is None else str(value)


def search_blob(entry: SettingEntry) -> str:
    """Text every search token is matched against, casefolded."""
    parts = (
        entry.module.name,
        entry.module.module_id,
        entry.name,
        entry.category,
        entry.description,
        _as_text(entry.default_value),
        _as_text(entry.get()),
    )
    return "\n".join(parts).casefold()


def matches_search(entry: SettingEntry, tokens: Sequence[str]) -> bool:
    blob = search_blob(entry)
    return all(token.casefold() in blob for token in tokens)


def passes_toggles(entry: SettingEntry, state: FilterState) -> bool:
    if not state.show_advanced and entry.is_advanced:
        return False
    if not state.show_keybinds and entry.is_keybind:
        return False
    if not state.show_settings and not (entry.is_advanced or entry.is_keybind):
        return False
    return True


def is_changed(entry: SettingEntry) -> bool:
    if entry.default_value is None:
        return False
    return entry.get() != entry.default_value


def _keep(entry: SettingEntry, state: FilterState, tokens: Sequence[str]) -> bool:
    if tokens:
        if not matches_search(entry, tokens):
            return False
    elif not passes_toggles(entry, state):
        return False
    if state.show_only_changed and not is_changed(entry):
        return False
    return True


def filter_settings(entries: Iterable[SettingEntry], state: FilterState) -> List[SettingEntry]:
    """Return the entries eligible for display, in their original order.

    With a non-empty search every whitespace-separated token must appear
    somewhere in the entry's searchable text; otherwise the show-* toggles
    apply. The only-changed filter applies in both modes. An entry whose
    accessor raises is left out of this pass only.
    """
    tokens = state.search_tokens()
    kept: List[SettingEntry] = []
    for entry in entries:
        try:
            if _keep(entry, state, tokens):
                kept.append(entry)
        except Exception as exc:
            logger.debug("Excluding %s from filter pass: %s", "|".join(entry.key), exc)
    return kept

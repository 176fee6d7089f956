"""Partition filtered settings into ordered module and category groups."""

from __future__ import annotations

from typing import Callable, Dict, Iterable, List, Optional, Tuple

from .models import CategoryGroup, ModuleDescriptor, ModuleGroup, SettingEntry

WebsiteLookup = Callable[[ModuleDescriptor], Optional[str]]


def default_website_lookup(module: ModuleDescriptor) -> Optional[str]:
    return module.website or None


def _entry_sort_key(entry: SettingEntry) -> Tuple[int, str]:
    return (-entry.order, entry.name)


def order_categories(entries: List[SettingEntry], *, sort_alphabetical: bool) -> List[CategoryGroup]:
    """Group one module's entries by category and order the categories.

    Categories sort by their smallest ``category_order`` first. Ties break
    on the name in alphabetical mode, or on first appearance (then name) in
    registration mode. Entries inside a category sort by descending
    ``order`` and then by name.
    """
    by_name: Dict[str, List[SettingEntry]] = {}
    first_seen: Dict[str, int] = {}
    for entry in entries:
        if entry.category not in by_name:
            by_name[entry.category] = []
            first_seen[entry.category] = len(first_seen)
        by_name[entry.category].append(entry)

    def category_key(name: str):
        min_order = min(item.category_order for item in by_name[name])
        if sort_alphabetical:
            return (min_order, name)
        return (min_order, first_seen[name], name)

    return [
        CategoryGroup(name=name, settings=sorted(by_name[name], key=_entry_sort_key))
        for name in sorted(by_name, key=category_key)
    ]


def group_settings(
    entries: Iterable[SettingEntry],
    *,
    sort_alphabetical: bool = True,
    website_lookup: Optional[WebsiteLookup] = None,
) -> List[ModuleGroup]:
    """Build module groups sorted by module name.

    Grouping is keyed on the module id, so two modules sharing a display
    name stay separate. The returned groups are expanded and unmeasured;
    collapse state is applied afterwards by the collapse tracker.
    """
    lookup = website_lookup or default_website_lookup
    modules: Dict[str, ModuleDescriptor] = {}
    per_module: Dict[str, List[SettingEntry]] = {}
    for entry in entries:
        module_id = entry.module.module_id
        if module_id not in per_module:
            modules[module_id] = entry.module
            per_module[module_id] = []
        per_module[module_id].append(entry)

    groups = [
        ModuleGroup(
            module=modules[module_id],
            categories=order_categories(module_entries, sort_alphabetical=sort_alphabetical),
            website=lookup(module_entries[0].module),
        )
        for module_id, module_entries in per_module.items()
    ]
    groups.sort(key=lambda group: group.module.name)
    return groups

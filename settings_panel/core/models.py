"""Setting, module and group records shared by the panel engines."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Callable, Iterator, List, Optional, Tuple

from ..exceptions import ReadOnlySettingError

Getter = Callable[[], Any]
Setter = Callable[[Any], None]
SettingKey = Tuple[str, str, str]

SORT_MARKER = "!"


class KeyCode(str):
    """A single key name, e.g. ``"F1"`` or ``"LeftControl"``."""


@dataclass(frozen=True)
class KeyboardShortcut:
    main_key: str = ""
    modifiers: Tuple[str, ...] = ()

    def __str__(self) -> str:
        if not self.main_key:
            return "Not set"
        return " + ".join((self.main_key,) + tuple(self.modifiers))

    @classmethod
    def parse(cls, text: str) -> "KeyboardShortcut":
        text = (text or "").strip()
        if not text or text == "Not set":
            return cls()
        parts = [part.strip() for part in text.split("+") if part.strip()]
        return cls(main_key=parts[0], modifiers=tuple(parts[1:]))

    def is_down(self, pressed: Any) -> bool:
        """True when the main key and every modifier are in ``pressed``."""
        if not self.main_key:
            return False
        keys = set(pressed or ())
        return self.main_key in keys and all(mod in keys for mod in self.modifiers)


KEYBIND_TYPES: Tuple[type, ...] = (KeyboardShortcut, KeyCode)


@dataclass(frozen=True)
class ModuleDescriptor:
    name: str
    module_id: str
    version: str = ""
    website: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.name.lstrip(SORT_MARKER)


class ValueCell:
    """Holds a setting value for modules that do not own storage themselves."""

    def __init__(self, value: Any = None) -> None:
        self.value = value

    def get(self) -> Any:
        return self.value

    def set(self, value: Any) -> None:
        self.value = value


@dataclass(frozen=True, eq=False)
class SettingEntry:
    """One configurable value exposed by a module.

    Identity and metadata never change after discovery; the current value is
    only reachable through ``get``/``set``, which call into the owning module.
    A ``default_value`` of ``None`` means no default is defined.
    """

    module: ModuleDescriptor
    category: str
    name: str
    setting_type: type
    getter: Getter
    setter: Setter
    description: str = ""
    default_value: Any = None
    order: int = 0
    category_order: int = 0
    is_advanced: bool = False
    hide_name: bool = False
    hide_default_button: bool = False
    browsable: bool = True
    read_only: bool = False
    acceptable_values: Tuple[Any, ...] = ()

    @classmethod
    def from_value(
        cls,
        module: ModuleDescriptor,
        category: str,
        name: str,
        value: Any,
        *,
        setting_type: Optional[type] = None,
        default_value: Any = None,
        **metadata: Any,
    ) -> "SettingEntry":
        cell = ValueCell(value)
        if setting_type is None:
            sample = default_value if default_value is not None else value
            setting_type = type(sample) if sample is not None else str
        return cls(
            module=module,
            category=category,
            name=name,
            setting_type=setting_type,
            getter=cell.get,
            setter=cell.set,
            default_value=default_value,
            **metadata,
        )

    @property
    def key(self) -> SettingKey:
        return (self.module.module_id, self.category, self.name)

    @property
    def display_name(self) -> str:
        return self.name.lstrip(SORT_MARKER)

    @property
    def is_keybind(self) -> bool:
        return self.setting_type in KEYBIND_TYPES

    @property
    def has_default(self) -> bool:
        return self.default_value is not None

    @property
    def is_reference_type(self) -> bool:
        """Mirrors nullable types: anything that is not a plain value type."""
        value_types = (bool, int, float, enum.Enum, KeyCode, KeyboardShortcut)
        return not (isinstance(self.setting_type, type) and issubclass(self.setting_type, value_types))

    def get(self) -> Any:
        return self.getter()

    def set(self, value: Any) -> None:
        if self.read_only:
            raise ReadOnlySettingError(
                f"Setting {self.name!r} is read-only",
                setting_key="|".join(self.key),
            )
        self.setter(value)

    def reset(self) -> bool:
        """Restore the default value; returns False if none is defined."""
        if self.default_value is None:
            return False
        self.set(self.default_value)
        return True


@dataclass
class CategoryGroup:
    name: str
    settings: List[SettingEntry] = field(default_factory=list)


class ModuleGroup:
    """Render unit for one module. Recreated on every rebuild."""

    def __init__(
        self,
        module: ModuleDescriptor,
        categories: List[CategoryGroup],
        collapsed: bool = False,
        website: Optional[str] = None,
    ) -> None:
        self.module = module
        self.categories = categories
        self.website = website
        self.height = 0
        self._collapsed = bool(collapsed)

    @property
    def collapsed(self) -> bool:
        return self._collapsed

    @collapsed.setter
    def collapsed(self, value: bool) -> None:
        self._collapsed = bool(value)
        self.height = 0

    @property
    def name(self) -> str:
        return self.module.name

    def entries(self) -> Iterator[SettingEntry]:
        for category in self.categories:
            yield from category.settings

    def __repr__(self) -> str:
        return (
            f"ModuleGroup({self.module.module_id!r}, categories={len(self.categories)}, "
            f"collapsed={self._collapsed}, height={self.height})"
        )


@dataclass
class FilterState:
    search: str = ""
    show_advanced: bool = False
    show_keybinds: bool = True
    show_settings: bool = True
    show_only_changed: bool = False
    default_collapsed: bool = True
    sort_alphabetical: bool = True

    def search_tokens(self) -> List[str]:
        return (self.search or "").split()

    @property
    def is_searching(self) -> bool:
        return bool(self.search_tokens())

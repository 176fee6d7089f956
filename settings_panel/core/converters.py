"""String <-> value converters keyed by declared setting type."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from ..exceptions import ConversionError
from .models import KeyboardShortcut, KeyCode

logger = logging.getLogger(__name__)

ToString = Callable[[Any], str]
FromString = Callable[[str, type], Any]


@dataclass(frozen=True)
class ValueConverter:
    to_string: ToString
    from_string: FromString


def _parse_bool(text: str, _type: type) -> bool:
    lowered = text.strip().lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    raise ValueError(f"not a boolean: {text!r}")


def _parse_enum(text: str, enum_type: type) -> enum.Enum:
    name = text.strip()
    try:
        return enum_type[name]
    except KeyError:
        for member in enum_type:
            if str(member.value) == name:
                return member
        raise ValueError(f"{name!r} is not a member of {enum_type.__name__}")


BUILTIN_CONVERTERS: Dict[type, ValueConverter] = {
    bool: ValueConverter(lambda v: "true" if v else "false", _parse_bool),
    int: ValueConverter(str, lambda text, _t: int(text.strip())),
    float: ValueConverter(repr, lambda text, _t: float(text.strip())),
    str: ValueConverter(str, lambda text, _t: text),
    KeyCode: ValueConverter(str, lambda text, _t: KeyCode(text.strip())),
    KeyboardShortcut: ValueConverter(str, lambda text, _t: KeyboardShortcut.parse(text)),
}

ENUM_CONVERTER = ValueConverter(lambda v: v.name, _parse_enum)


class ConverterRegistry:
    """Type-keyed converter map with an enum fallback.

    Lookup tries the exact type, then enum types, then the type's bases,
    so ``bool`` never resolves to the ``int`` converter.
    """

    def __init__(self, include_builtins: bool = True) -> None:
        self._converters: Dict[type, ValueConverter] = dict(BUILTIN_CONVERTERS) if include_builtins else {}

    def register(self, setting_type: type, converter: ValueConverter) -> None:
        if setting_type in self._converters:
            logger.debug("Replacing converter for %s", getattr(setting_type, "__name__", setting_type))
        self._converters[setting_type] = converter

    def resolve(self, setting_type: Any) -> Optional[ValueConverter]:
        converter = self._converters.get(setting_type)
        if converter is not None:
            return converter
        if not isinstance(setting_type, type):
            return None
        if issubclass(setting_type, enum.Enum):
            return ENUM_CONVERTER
        for base in setting_type.__mro__[1:]:
            converter = self._converters.get(base)
            if converter is not None:
                return converter
        return None

    def to_string(self, value: Any, setting_type: Any) -> str:
        converter = self.resolve(setting_type)
        if converter is None:
            return str(value)
        return converter.to_string(value)

    def from_string(self, text: str, setting_type: Any) -> Any:
        converter = self.resolve(setting_type)
        type_name = getattr(setting_type, "__name__", str(setting_type))
        if converter is None:
            raise ConversionError(f"No converter registered for {type_name}", type_name=type_name, raw_value=text)
        try:
            return converter.from_string(text, setting_type)
        except (ValueError, TypeError, KeyError) as exc:
            raise ConversionError(f"Cannot convert {text!r} to {type_name}: {exc}",
                                  type_name=type_name, raw_value=text) from exc

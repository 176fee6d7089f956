"""Plugin registry: loads extension modules and collects their settings."""

from __future__ import annotations

import importlib.util
import logging
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, Set, Tuple

import yaml

from ..core.models import KeyboardShortcut, KeyCode, ModuleDescriptor, SettingEntry
from ..exceptions import DiscoveryError

logger = logging.getLogger(__name__)

PLUGIN_PATHS_ENV = "SETTINGS_PANEL_PLUGIN_PATHS"
MANIFEST_SUFFIXES = (".yaml", ".yml")

MANIFEST_TYPES: Dict[str, type] = {
    "bool": bool,
    "int": int,
    "float": float,
    "str": str,
    "keycode": KeyCode,
    "shortcut": KeyboardShortcut,
}


@dataclass
class PluginRegistry:
    """Collects module descriptors and the settings each module exposes.

    Plugins call the ``register_*``/``add_setting`` helpers from their
    ``register(registry)`` hook; the panel only ever calls ``collect``.
    """

    modules: Dict[str, ModuleDescriptor] = field(default_factory=dict)
    settings: List[SettingEntry] = field(default_factory=list)

    def register_module(self, name: str, module_id: str, version: str = "",
                        website: Optional[str] = None) -> ModuleDescriptor:
        existing = self.modules.get(module_id)
        if existing is not None:
            logger.warning("Module id %s registered twice, keeping %s", module_id, existing.name)
            return existing
        module = ModuleDescriptor(name=name, module_id=module_id, version=str(version or ""), website=website)
        self.modules[module_id] = module
        return module

    def register_entry(self, entry: SettingEntry) -> SettingEntry:
        if entry.module.module_id not in self.modules:
            self.modules[entry.module.module_id] = entry.module
        self.settings.append(entry)
        return entry

    def add_setting(
        self,
        module: ModuleDescriptor,
        category: str,
        name: str,
        value: Any = None,
        *,
        getter: Optional[Callable[[], Any]] = None,
        setter: Optional[Callable[[Any], None]] = None,
        setting_type: Optional[type] = None,
        default: Any = None,
        **metadata: Any,
    ) -> SettingEntry:
        if (getter is None) != (setter is None):
            raise DiscoveryError(f"Setting {name!r} needs both a getter and a setter")
        if getter is not None and setter is not None:
            if setting_type is None:
                sample = default if default is not None else getter()
                setting_type = type(sample) if sample is not None else str
            entry = SettingEntry(
                module=module, category=category, name=name, setting_type=setting_type,
                getter=getter, setter=setter, default_value=default, **metadata,
            )
        else:
            if value is None:
                value = default
            entry = SettingEntry.from_value(
                module, category, name, value,
                setting_type=setting_type, default_value=default, **metadata,
            )
        return self.register_entry(entry)

    def describe(self, module_id: str) -> Optional[ModuleDescriptor]:
        return self.modules.get(module_id)

    def collect(self, include_debug: bool = False) -> Tuple[List[SettingEntry], Set[str]]:
        """Return (entries in registration order, ids of modules without any)."""
        entries = [entry for entry in self.settings if include_debug or entry.browsable]
        with_settings = {entry.module.module_id for entry in entries}
        without = {module_id for module_id in self.modules if module_id not in with_settings}
        return entries, without


def iter_plugin_paths(cfg: Optional[dict] = None) -> List[Path]:
    env_paths = os.environ.get(PLUGIN_PATHS_ENV, "").strip()
    if env_paths:
        return [Path(part.strip()) for part in env_paths.split(";") if part.strip()]

    cfg_paths: List[Path] = []
    if cfg:
        plugin_cfg = cfg.get("plugins") or {}
        raw_paths = plugin_cfg.get("paths") or []
        if isinstance(raw_paths, str):
            raw_paths = [raw_paths]
        cfg_paths = [Path(str(entry)) for entry in raw_paths if entry]

    if not cfg_paths:
        return [Path(__file__).resolve().parents[2] / "plugins"]
    return cfg_paths


def _load_module_from_path(path: Path) -> Optional[Any]:
    module_name = f"settings_panel_plugin_{path.stem}_{abs(hash(str(path)))}"
    try:
        spec = importlib.util.spec_from_file_location(module_name, str(path))
        if spec is None or spec.loader is None:
            return None
        module = importlib.util.module_from_spec(spec)
        sys.modules[module_name] = module
        spec.loader.exec_module(module)
        return module
    except Exception as exc:
        logger.warning("Plugin load failed for %s: %s", path, exc)
        return None


def register_manifest(registry: PluginRegistry, data: Any, source: str = "<manifest>") -> ModuleDescriptor:
    """Register a declarative module manifest (parsed YAML)."""
    if not isinstance(data, dict) or not isinstance(data.get("module"), dict):
        raise DiscoveryError("Manifest has no 'module' mapping", plugin_path=source)
    meta = data["module"]
    module_id = str(meta.get("id") or "").strip()
    if not module_id:
        raise DiscoveryError("Manifest module has no id", plugin_path=source)
    module = registry.register_module(
        name=str(meta.get("name") or module_id),
        module_id=module_id,
        version=str(meta.get("version") or ""),
        website=meta.get("website") or None,
    )

    for raw in data.get("settings") or []:
        if not isinstance(raw, dict) or not raw.get("name"):
            logger.warning("Skipping malformed setting in %s: %r", source, raw)
            continue
        type_name = str(raw.get("type") or "").strip().lower()
        setting_type = MANIFEST_TYPES.get(type_name) if type_name else None
        if type_name and setting_type is None:
            logger.warning("Unknown setting type %r in %s, treating as str", type_name, source)
            setting_type = str
        default = raw.get("default")
        value = raw.get("value", default)
        if setting_type is not None and setting_type in (KeyCode, KeyboardShortcut):
            default = _coerce_key(default, setting_type)
            value = _coerce_key(value, setting_type)
        registry.add_setting(
            module,
            str(raw.get("category") or ""),
            str(raw["name"]),
            value,
            setting_type=setting_type,
            default=default,
            description=str(raw.get("description") or ""),
            order=int(raw.get("order") or 0),
            category_order=int(raw.get("category_order") or 0),
            is_advanced=bool(raw.get("advanced", False)),
            hide_name=bool(raw.get("hide_name", False)),
            hide_default_button=bool(raw.get("hide_default_button", False)),
            browsable=bool(raw.get("browsable", True)),
            read_only=bool(raw.get("read_only", False)),
            acceptable_values=tuple(raw.get("acceptable_values") or ()),
        )
    return module


def _coerce_key(raw: Any, setting_type: type) -> Any:
    if raw is None:
        return None
    if setting_type is KeyboardShortcut:
        return KeyboardShortcut.parse(str(raw))
    return KeyCode(str(raw))


def _load_manifest(path: Path, registry: PluginRegistry) -> None:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
        register_manifest(registry, data, source=str(path))
    except (OSError, yaml.YAMLError, DiscoveryError, ValueError, TypeError) as exc:
        logger.warning("Manifest load failed for %s: %s", path, exc)


def load_plugin_registry(paths: Optional[Iterable[Path]] = None, cfg: Optional[dict] = None) -> PluginRegistry:
    """Build a fresh registry from ``*.py`` plugins and YAML manifests."""
    registry = PluginRegistry()

    if cfg is not None:
        plugin_cfg = cfg.get("plugins") or {}
        if not bool(plugin_cfg.get("enabled", True)):
            return registry

    roots = [Path(p) for p in paths] if paths is not None else iter_plugin_paths(cfg)
    for root in roots:
        if not root.exists() or not root.is_dir():
            logger.debug("Plugin path %s does not exist", root)
            continue
        for plugin_path in sorted(root.iterdir()):
            if plugin_path.name.startswith("_") or not plugin_path.is_file():
                continue
            suffix = plugin_path.suffix.lower()
            if suffix in MANIFEST_SUFFIXES:
                _load_manifest(plugin_path, registry)
                continue
            if suffix != ".py":
                continue
            module = _load_module_from_path(plugin_path)
            if module is None:
                continue
            register = getattr(module, "register", None)
            if callable(register):
                try:
                    register(registry)
                except Exception as exc:
                    logger.warning("Plugin register failed for %s: %s", plugin_path, exc)

    logger.info("Loaded %d modules with %d settings", len(registry.modules), len(registry.settings))
    return registry

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Callable, List, Optional

import pytest

# Ensure repo root on path
ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from settings_panel.core.models import ModuleDescriptor, SettingEntry  # noqa: E402
from settings_panel.plugins.registry import PluginRegistry  # noqa: E402


def pytest_configure() -> None:
    """Ensure pytest base temp directory exists for CI runs."""

    base_temp = ROOT / "temp" / "pytest"
    base_temp.mkdir(parents=True, exist_ok=True)


MakeEntry = Callable[..., SettingEntry]


@pytest.fixture
def mod_a() -> ModuleDescriptor:
    return ModuleDescriptor(name="ModA", module_id="a.b", version="1.0")


@pytest.fixture
def make_entry(mod_a: ModuleDescriptor) -> MakeEntry:
    """Build a value-backed entry; ``module`` defaults to ModA."""

    def _make(
        name: str,
        value: Any = None,
        *,
        module: Optional[ModuleDescriptor] = None,
        category: str = "General",
        **kwargs: Any,
    ) -> SettingEntry:
        return SettingEntry.from_value(module or mod_a, category, name, value, **kwargs)

    return _make


@pytest.fixture
def scenario_registry() -> PluginRegistry:
    """ModA exposes Volume (5, default 10); ModB exposes nothing."""
    registry = PluginRegistry()
    mod_a = registry.register_module("ModA", "a.b", version="1.0")
    registry.register_module("ModB", "c.d", version="2.0")
    registry.add_setting(mod_a, "General", "Volume", 5, default=10)
    return registry


class CountingSource:
    """Wraps a registry and counts discovery calls."""

    def __init__(self, registry: PluginRegistry) -> None:
        self.registry = registry
        self.calls: List[bool] = []

    def collect(self, include_debug: bool = False):
        self.calls.append(include_debug)
        return self.registry.collect(include_debug)

    def describe(self, module_id: str):
        return self.registry.describe(module_id)


@pytest.fixture
def counting_source(scenario_registry: PluginRegistry) -> CountingSource:
    return CountingSource(scenario_registry)

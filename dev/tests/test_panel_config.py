from __future__ import annotations

import json
from pathlib import Path

import pytest

from settings_panel.config import (
    PanelSettings,
    get_config_path,
    load_panel_settings,
    save_panel_settings,
    validate_config,
)
from settings_panel.config.io import CONFIG_DIR_ENV
from settings_panel.exceptions import ConfigurationError, ConversionError, ReadOnlySettingError, ValidationError
from settings_panel.core.models import ModuleDescriptor, SettingEntry


def test_missing_file_gives_defaults(tmp_path: Path) -> None:
    settings = load_panel_settings(tmp_path / "absent.json")

    assert settings.general.toggle_key == "F1"
    assert settings.general.plugin_collapsed_default is True
    assert settings.filtering.show_advanced is False


def test_save_then_load(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "settings_panel.json"
    settings = PanelSettings()
    settings.filtering.show_advanced = True
    settings.general.hide_single_section = True

    assert save_panel_settings(settings, path) is True
    loaded = load_panel_settings(path)
    assert loaded.filtering.show_advanced is True
    assert loaded.general.hide_single_section is True


@pytest.mark.parametrize("content", ["{not json", "[1, 2]", json.dumps({"general": {"toggle_key": ["F1"]}})])
def test_unusable_file_falls_back_to_defaults(tmp_path: Path, content: str) -> None:
    path = tmp_path / "settings_panel.json"
    path.write_text(content, encoding="utf-8")

    assert load_panel_settings(path) == PanelSettings()


def test_unknown_keys_are_kept() -> None:
    settings = validate_config({"general": {"toggle_key": "F2"}, "window": {"opacity": 0.5}})

    assert settings.general.toggle_key == "F2"
    assert settings.model_dump()["window"] == {"opacity": 0.5}


def test_config_dir_env_override(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(CONFIG_DIR_ENV, str(tmp_path))
    assert get_config_path() == tmp_path / "settings_panel.json"


def test_error_to_dict_carries_details() -> None:
    error = ConversionError("bad", type_name="int", raw_value="x")
    payload = error.to_dict()

    assert payload["error_code"] == "CONVERSION_ERROR"
    assert payload["details"] == {"type_name": "int", "raw_value": "x"}


def test_read_only_setting_refuses_writes() -> None:
    entry = SettingEntry.from_value(ModuleDescriptor("ModA", "a.b"), "General", "Build", "1.0", read_only=True)

    with pytest.raises(ReadOnlySettingError) as excinfo:
        entry.set("2.0")
    assert excinfo.value.details["setting_key"] == "a.b|General|Build"
    assert entry.get() == "1.0"


def test_strict_load_raises_project_errors(tmp_path: Path) -> None:
    path = tmp_path / "settings_panel.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(ConfigurationError):
        load_panel_settings(path, strict=True)

    path.write_text(json.dumps({"general": {"toggle_key": ["F1"]}}), encoding="utf-8")
    with pytest.raises(ValidationError) as excinfo:
        load_panel_settings(path, strict=True)
    assert excinfo.value.details["field_name"] == "general.toggle_key"
    assert excinfo.value.error_code == "VALIDATION_ERROR"

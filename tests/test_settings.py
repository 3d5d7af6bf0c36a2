from __future__ import annotations

import pytest
from pydantic import ValidationError

from objcatalog.settings import CatalogSettings, load_settings


def test_defaults():
    settings = load_settings()

    assert settings == CatalogSettings()
    assert settings.duplicate_fields == "error"
    assert settings.method_results == "capture"
    assert settings.include_properties is True
    assert settings.include_instance_attributes is True


def test_toml_env_and_overrides_precedence(tmp_path, monkeypatch):
    config = tmp_path / "catalog.toml"
    config.write_text(
        '[objcatalog]\nduplicate_fields = "override"\nmethod_results = "reinvoke"\ninclude_properties = false\n'
        '[other]\nignored = 1\n',
        encoding="utf-8",
    )
    monkeypatch.setenv("OBJCATALOG_METHOD_RESULTS", "capture")
    monkeypatch.setenv("OBJCATALOG_INCLUDE_INSTANCE_ATTRIBUTES", "false")

    settings = load_settings(config_path=config, overrides={"include_properties": True})

    assert settings.duplicate_fields == "override"
    assert settings.method_results == "capture"
    assert settings.include_instance_attributes is False
    assert settings.include_properties is True


def test_missing_config_path_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_settings(config_path=tmp_path / "absent.toml")


def test_invalid_value_is_rejected(monkeypatch):
    monkeypatch.setenv("OBJCATALOG_DUPLICATE_FIELDS", "merge")

    with pytest.raises(ValidationError):
        load_settings()


def test_unknown_keys_are_ignored():
    assert load_settings(overrides={"colour": "blue"}) == CatalogSettings()

"""Tests for the module-level functions backed by the default resolver."""

import pytest
from pydantic import BaseModel

import tieredsettings


class DatabaseSettings(BaseModel):
    host: str


@pytest.fixture
def default_root(tmp_path, monkeypatch):
    """Point a fresh default resolver at a temporary root."""
    monkeypatch.setenv("TIEREDSETTINGS_ROOT", str(tmp_path))
    monkeypatch.setattr(tieredsettings, "_default_resolver", None)
    return tmp_path


def test_default_resolver_is_shared(default_root):
    assert tieredsettings.default_resolver() is tieredsettings.default_resolver()


def test_get_uses_default_root(default_root, write_setting):
    write_setting(default_root / ".config" / "Common", "DatabaseSettings", {"host": "common"})

    assert tieredsettings.get(DatabaseSettings).host == "common"


def test_set_precedence_and_reset(default_root, write_setting):
    write_setting(default_root / ".config" / "Staging", "DatabaseSettings", {"host": "staging"})
    write_setting(default_root / ".config" / "Common", "DatabaseSettings", {"host": "common"})

    tieredsettings.set_precedence("Staging")
    assert tieredsettings.get_by_name("DatabaseSettings", DatabaseSettings).host == "staging"

    tieredsettings.set(DatabaseSettings(host="override"))
    assert tieredsettings.get(DatabaseSettings).host == "override"

    tieredsettings.reset()
    assert tieredsettings.default_resolver().precedence == ("Common",)
    assert tieredsettings.get(DatabaseSettings).host == "common"


def test_set_by_name(default_root):
    value = DatabaseSettings(host="named")
    tieredsettings.set_by_name("reports", value)
    assert tieredsettings.get_by_name("reports", DatabaseSettings) is value


def test_app_setting_prefers_environment(default_root, monkeypatch):
    (default_root / "appsettings.yml").write_text("RetryCount: 3\nMode: file\n")
    tieredsettings.reset()
    monkeypatch.setenv("Mode", "env")

    assert tieredsettings.app_setting("RetryCount") == "3"
    assert tieredsettings.app_setting("Mode") == "env"
    assert tieredsettings.app_setting("Missing") is None


def test_create_source_exported():
    source = tieredsettings.create_source(lambda key: "value", "inline")
    assert source.name == "inline"
    assert source.get_serialized_setting("anything") == "value"


def test_not_found_error_exported(default_root):
    with pytest.raises(tieredsettings.SettingNotFoundError):
        tieredsettings.get(DatabaseSettings)

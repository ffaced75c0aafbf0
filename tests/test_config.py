"""Tests for Settings."""

import pytest

from typemapper_core.config import DEFAULT_MAX_DEPTH, Settings
from typemapper_core.errors import ConfigError


def test_defaults():
    settings = Settings()
    assert settings.max_depth == DEFAULT_MAX_DEPTH == 10
    assert settings.indent == "  "
    assert settings.optional == "nullable"


def test_negative_depth_rejected():
    with pytest.raises(ConfigError):
        Settings(max_depth=-1)


def test_unknown_optional_mode_rejected():
    with pytest.raises(ConfigError, match="optional"):
        Settings(optional="sometimes")


def test_to_dict():
    assert Settings(indent="    ").to_dict() == {
        "max_depth": 10,
        "indent_width": 4,
        "optional": "nullable",
    }


# ---------------------------------------------------------------------------
# from_env
# ---------------------------------------------------------------------------

def test_from_env_defaults(monkeypatch):
    for name in ("TYPEMAPPER_MAX_DEPTH", "TYPEMAPPER_INDENT_WIDTH", "TYPEMAPPER_OPTIONAL_MODE"):
        monkeypatch.delenv(name, raising=False)
    assert Settings.from_env() == Settings()


def test_from_env_values(monkeypatch):
    monkeypatch.setenv("TYPEMAPPER_MAX_DEPTH", "3")
    monkeypatch.setenv("TYPEMAPPER_INDENT_WIDTH", "4")
    monkeypatch.setenv("TYPEMAPPER_OPTIONAL_MODE", "substring")
    assert Settings.from_env() == Settings(max_depth=3, indent="    ", optional="substring")


def test_from_env_bad_integer(monkeypatch):
    monkeypatch.setenv("TYPEMAPPER_MAX_DEPTH", "deep")
    with pytest.raises(ConfigError, match="TYPEMAPPER_MAX_DEPTH"):
        Settings.from_env()


def test_from_env_bad_mode(monkeypatch):
    monkeypatch.setenv("TYPEMAPPER_OPTIONAL_MODE", "never")
    with pytest.raises(ConfigError):
        Settings.from_env()

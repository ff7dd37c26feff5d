from __future__ import annotations

from dataclasses import fields
from pathlib import Path

import pytest

import shared.settings
from shared.protocol import ConfigError
from shared.settings import ENV_PREFIX, Settings, load_settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(shared.settings, "SETTINGS", Settings())
    for item in fields(Settings):
        key = f"{ENV_PREFIX}{item.name.upper()}"
        # setenv first so keys loaded from a .env file are undone too
        monkeypatch.setenv(key, "")
        monkeypatch.delenv(key)


def test_defaults():
    settings = load_settings()
    assert settings.peer_host == "127.0.0.1"
    assert settings.bind_host == "0.0.0.0"
    assert settings.port == 3939
    assert settings.accept_timeout == 10.0
    assert settings.download_dir == Path(".")
    assert settings.log_level == "WARNING"


def test_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("CHAT_PORT", "4040")
    monkeypatch.setenv("CHAT_PEER_HOST", "10.0.0.2")
    monkeypatch.setenv("CHAT_DOWNLOAD_DIR", str(tmp_path / "downloads"))
    monkeypatch.setenv("CHAT_LOG_LEVEL", "debug")

    settings = load_settings()
    assert settings.port == 4040
    assert settings.peer_host == "10.0.0.2"
    assert settings.log_level == "DEBUG"
    assert (tmp_path / "downloads").is_dir()


def test_dotenv_file(tmp_path):
    env_file = tmp_path / "chat.env"
    env_file.write_text("CHAT_PORT=5050\nCHAT_ACCEPT_TIMEOUT=2.5\n", encoding="utf-8")
    settings = load_settings(str(env_file))
    assert settings.port == 5050
    assert settings.accept_timeout == 2.5


def test_missing_dotenv_file_is_ignored():
    assert load_settings("does-not-exist.env").port == 3939


@pytest.mark.parametrize(
    "key, value, field",
    [
        ("CHAT_PORT", "70000", "port"),
        ("CHAT_PORT", "0", "port"),
        ("CHAT_ACCEPT_TIMEOUT", "0", "accept_timeout"),
        ("CHAT_LOG_LEVEL", "chatty", "log_level"),
    ],
)
def test_out_of_range_values(monkeypatch, key, value, field):
    monkeypatch.setenv(key, value)
    with pytest.raises(ConfigError) as excinfo:
        load_settings()
    assert field in excinfo.value.message


def test_non_numeric_port(monkeypatch):
    monkeypatch.setenv("CHAT_PORT", "forty")
    with pytest.raises(ConfigError):
        load_settings()

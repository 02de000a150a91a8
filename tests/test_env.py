"""Tests for configuration loading."""

import pytest
import yaml

from ghsteps import env
from ghsteps.env import (
    DEFAULT_SERVER_URL,
    create_default_config,
    get_credential,
    get_settings,
    get_token,
    load_credentials_file,
    save_credential,
    validate_required_credentials,
)


def write_config(data):
    env.ensure_config_dir()
    env.CONFIG_FILE.write_text(yaml.dump(data))


def test_defaults():
    settings = get_settings()

    assert settings.token == "test-token"
    assert settings.server_url == DEFAULT_SERVER_URL
    assert settings.timeout == 30.0
    assert settings.repo_owner == ""


def test_settings_are_cached():
    assert get_settings() is get_settings()


@pytest.mark.parametrize("key", ["GITHUB_TOKEN", "GH_TOKEN"])
def test_token_fallback_names(monkeypatch, key):
    monkeypatch.delenv("GITHUB_API_TOKEN")
    monkeypatch.setenv(key, "fallback")

    assert get_token() == "fallback"


def test_primary_token_name_wins(monkeypatch):
    monkeypatch.setenv("GITHUB_TOKEN", "other")

    assert get_token() == "test-token"


def test_token_from_credentials_file(monkeypatch):
    monkeypatch.delenv("GITHUB_API_TOKEN")
    save_credential("GITHUB_API_TOKEN", "from-file")

    assert get_token() == "from-file"
    assert get_settings().token == "from-file"


def test_environment_beats_credentials_file():
    save_credential("GITHUB_API_TOKEN", "from-file")

    assert get_credential("GITHUB_API_TOKEN") == "test-token"


def test_credentials_file_ignores_comments():
    env.ensure_config_dir()
    env.CREDENTIALS_FILE.write_text("# tokens\nGITHUB_API_TOKEN = abc\n\nnot a pair\n")

    assert load_credentials_file() == {"GITHUB_API_TOKEN": "abc"}


def test_config_file_values():
    write_config({"server_url": "https://ghe.local/api/v3", "repo_owner": "acme", "timeout": 5, "unknown": 1})

    settings = get_settings()

    assert settings.server_url == "https://ghe.local/api/v3"
    assert settings.repo_owner == "acme"
    assert settings.timeout == 5.0


def test_environment_beats_config_file(monkeypatch):
    write_config({"server_url": "https://from-file/api/v3", "repo_name": "file-repo"})
    monkeypatch.setenv("GITHUB_API_SERVER_URL", "https://from-env/api/v3")

    settings = get_settings()

    assert settings.server_url == "https://from-env/api/v3"
    assert settings.repo_name == "file-repo"


def test_create_default_config_keeps_existing():
    write_config({"repo_owner": "acme"})

    create_default_config()

    assert yaml.safe_load(env.CONFIG_FILE.read_text()) == {"repo_owner": "acme"}


def test_create_default_config():
    create_default_config()

    assert yaml.safe_load(env.CONFIG_FILE.read_text())["server_url"] == DEFAULT_SERVER_URL


def test_missing_token_reported(monkeypatch):
    monkeypatch.delenv("GITHUB_API_TOKEN")

    assert validate_required_credentials() == ["GITHUB_API_TOKEN"]

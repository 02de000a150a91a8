"""Shared fixtures: isolate every test from the real environment and ~/.ghsteps."""

import pytest

from ghsteps import env

TOKEN = "test-token"


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Point config at a temp dir and provide a known token."""
    for key in (
        "GITHUB_API_TOKEN",
        "GITHUB_TOKEN",
        "GH_TOKEN",
        "GITHUB_API_SERVER_URL",
        "GITHUB_API_REPO_OWNER",
        "GITHUB_API_REPO_NAME",
        "GITHUB_API_TIMEOUT",
        "GITHUB_API_USER_AGENT",
    ):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("GITHUB_API_TOKEN", TOKEN)

    config_dir = tmp_path / ".ghsteps"
    monkeypatch.setattr(env, "CONFIG_DIR", config_dir)
    monkeypatch.setattr(env, "CONFIG_FILE", config_dir / "config.yml")
    monkeypatch.setattr(env, "CREDENTIALS_FILE", config_dir / "credentials")

    env.get_settings.cache_clear()
    yield config_dir
    env.get_settings.cache_clear()

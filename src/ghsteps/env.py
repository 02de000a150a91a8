"""Configuration loading for ghsteps.

Follows the env → credentials file → config file chain.
"""

import os
from functools import lru_cache
from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env file if it exists
load_dotenv()

# Config directory
CONFIG_DIR = Path.home() / ".ghsteps"
CONFIG_FILE = CONFIG_DIR / "config.yml"
CREDENTIALS_FILE = CONFIG_DIR / "credentials"

DEFAULT_SERVER_URL = "https://api.github.com"

# Checked in order, first in the environment and then in the credentials file
TOKEN_KEYS = ("GITHUB_API_TOKEN", "GITHUB_TOKEN", "GH_TOKEN")

# Keys accepted from config.yml
CONFIG_KEYS = ("server_url", "timeout", "repo_owner", "repo_name", "user_agent")


class Settings(BaseSettings):
    """Main settings class.

    Every field can be set through a GITHUB_API_* environment variable,
    e.g. GITHUB_API_SERVER_URL for GitHub Enterprise.
    """

    model_config = SettingsConfigDict(
        env_prefix="GITHUB_API_",
        extra="ignore",
    )

    token: str = Field(default="", description="GitHub API token")
    server_url: str = Field(default=DEFAULT_SERVER_URL, description="GitHub API server URL")
    repo_owner: str = Field(default="", description="Default repository owner")
    repo_name: str = Field(default="", description="Default repository name")
    timeout: float = Field(default=30.0, gt=0, description="Request timeout in seconds")
    user_agent: str = Field(default="", description="User-Agent override")


def load_config_file() -> dict:
    """Load configuration from YAML file."""
    if not CONFIG_FILE.exists():
        return {}

    with open(CONFIG_FILE) as f:
        return yaml.safe_load(f) or {}


def load_credentials_file() -> dict[str, str]:
    """Load credentials from file."""
    if not CREDENTIALS_FILE.exists():
        return {}

    creds = {}
    with open(CREDENTIALS_FILE) as f:
        for line in f:
            line = line.strip()
            if line and not line.startswith("#") and "=" in line:
                key, value = line.split("=", 1)
                creds[key.strip()] = value.strip()
    return creds


def save_credential(key: str, value: str) -> None:
    """Store a credential in the credentials file with 600 permissions."""
    ensure_config_dir()
    creds = load_credentials_file()
    creds[key] = value

    with open(CREDENTIALS_FILE, "w") as f:
        for k, v in creds.items():
            f.write(f"{k}={v}\n")
    CREDENTIALS_FILE.chmod(0o600)


def get_credential(key: str) -> str:
    """Get a credential by key.

    Checks in order: environment variable → credentials file.
    """
    value = os.getenv(key)
    if value:
        return value

    creds = load_credentials_file()
    return creds.get(key, "")


def get_token() -> str:
    """Find the GitHub token under any of the supported names."""
    for key in TOKEN_KEYS:
        if os.getenv(key):
            return os.environ[key]

    creds = load_credentials_file()
    for key in TOKEN_KEYS:
        if creds.get(key):
            return creds[key]
    return ""


def ensure_config_dir() -> None:
    """Ensure config directory exists."""
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)


def create_default_config() -> None:
    """Create default config file if it doesn't exist."""
    ensure_config_dir()
    if CONFIG_FILE.exists():
        return

    default_config = {
        "server_url": DEFAULT_SERVER_URL,
        "timeout": 30.0,
    }

    with open(CONFIG_FILE, "w") as f:
        yaml.dump(default_config, f, default_flow_style=False)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Environment variables take precedence over the config file.
    """
    config_data = load_config_file()

    # Only use file values the environment doesn't already provide
    file_values = {
        key: value
        for key, value in config_data.items()
        if key in CONFIG_KEYS and value is not None and not os.getenv(f"GITHUB_API_{key.upper()}")
    }

    return Settings(token=get_token(), **file_values)


def validate_required_credentials() -> list[str]:
    """Check for required credentials and return list of missing ones."""
    settings = get_settings()
    missing = []

    if not settings.token:
        missing.append("GITHUB_API_TOKEN")

    return missing

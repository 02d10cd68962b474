"""Client configuration via environment variables and the user config file."""

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_BASE_URL = "https://app.bsub.io"
USER_CONFIG_PATH = Path("~/.config/bsubio/config.json")


class Settings(BaseSettings):
    # Credentials
    api_key: str = ""
    base_url: str = DEFAULT_BASE_URL

    # Polling
    poll_interval: float = 2.0

    # Transport
    request_timeout: float = 30.0

    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="BSUBIO_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


def load_user_config(path: Optional[Path] = None) -> Dict[str, Any]:
    """Read `api_key` / `base_url` from ~/.config/bsubio/config.json.

    Returns an empty dict when the file does not exist. A file that exists
    but is not valid JSON raises.
    """
    config_path = (path or USER_CONFIG_PATH).expanduser()
    if not config_path.exists():
        return {}
    with open(config_path, encoding="utf-8") as fh:
        data = json.load(fh)
    return {k: v for k, v in data.items() if k in ("api_key", "base_url") and v}


def get_settings(config_path: Optional[Path] = None) -> Settings:
    """Build settings from the user config file, overridden by the environment."""
    file_values = load_user_config(config_path)
    # Init kwargs would take precedence over env vars, so only pass
    # file values that the environment does not already set.
    overrides = {
        k: v for k, v in file_values.items()
        if f"BSUBIO_{k.upper()}" not in os.environ
    }
    return Settings(**overrides)

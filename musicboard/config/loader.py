"""YAML configuration loader with environment variable overrides.

Configuration is loaded in layers (later layers override earlier):

  1. config/config.yaml  static defaults checked into the repo
  2. .env file           local developer overrides (not committed)
  3. Environment vars    set at deploy time

Only non-secret tuning values live in YAML (result limits, feed sizes,
the chat system prompt override).  Credentials are never merged into the
returned dict; it carries a boolean ``configured`` map instead.
"""

from pathlib import Path

import yaml

from musicboard.config.settings import Settings


def load_config(path: str = "config/config.yaml", settings: Settings | None = None) -> dict:
    """Load YAML config and merge with environment-based Settings.

    Args:
        path: Path to the YAML configuration file.
        settings: Settings instance to merge; a fresh one is built if omitted.

    Returns:
        Fully resolved configuration dictionary.
    """
    config_path = Path(path)
    if config_path.exists():
        with open(config_path) as f:
            yaml_config = yaml.safe_load(f) or {}
    else:
        yaml_config = {}

    settings = settings or Settings()
    env_overrides = {
        "app": {
            "host": settings.app_host,
            "port": settings.app_port,
            "env": settings.app_env,
        },
        "upstream": {
            "timeout": settings.upstream_timeout,
            "token_cache_enabled": settings.token_cache_enabled,
            "token_cache_ttl": settings.token_cache_ttl,
            "configured": settings.get_configured_upstreams(),
        },
        "llm": {
            "base_url": settings.llm_base_url,
            "model": settings.llm_model,
        },
        "store": {
            "database_path": settings.database_path,
        },
        "logging": {
            "level": settings.log_level,
        },
    }

    _deep_merge(yaml_config, env_overrides)
    return yaml_config


def _deep_merge(base: dict, overrides: dict) -> None:
    """Recursively merge overrides into base dict, mutating base in place."""
    for key, value in overrides.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value

"""Configuration file loading and merging."""

import logging
import os
from pathlib import Path

import yaml

from sprout.config.schema import DEFAULT_CONFIG, SproutConfig

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "config.yaml"


def get_home_config_path() -> Path:
    """Get path to global config: ~/.sprout/config.yaml."""
    return Path.home() / ".sprout" / CONFIG_FILENAME


def get_local_config_path() -> Path:
    """Get path to local config: ./.sprout/config.yaml."""
    return Path.cwd() / ".sprout" / CONFIG_FILENAME


def load_yaml_config(path: Path) -> dict[str, object] | None:
    """Load a YAML config file, return None if not found or empty."""
    if not path.exists():
        return None
    try:
        with path.open(encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        logger.warning("Ignoring unreadable config %s: %s", path, e)
        return None
    if not isinstance(data, dict):
        return None
    result: dict[str, object] = data
    return result


def load_env_config() -> SproutConfig:
    """Build a config from environment variables.

    - GITHUB_TOKEN / GH_TOKEN: token for GitHub requests
    - SPROUT_TEMPLATE: default template
    - SPROUT_NO_UPDATE_CHECK: disable the update check when set
    """
    token = os.environ.get("GITHUB_TOKEN") or os.environ.get("GH_TOKEN") or ""
    token = token.strip()
    template = os.environ.get("SPROUT_TEMPLATE", "").strip()
    update_check = False if os.environ.get("SPROUT_NO_UPDATE_CHECK") else None
    return SproutConfig(
        template=template or None,
        github_token=token or None,
        update_check=update_check,
    )


def load_config() -> SproutConfig:
    """Load merged configuration.

    Precedence (lowest to highest):
    1. Built-in defaults
    2. Global config (~/.sprout/config.yaml)
    3. Local config (./.sprout/config.yaml)
    4. Environment variables

    Returns merged SproutConfig.
    """
    config = DEFAULT_CONFIG

    for path in (get_home_config_path(), get_local_config_path()):
        data = load_yaml_config(path)
        if data:
            config = config.merge(SproutConfig.from_dict(data))

    return config.merge(load_env_config())


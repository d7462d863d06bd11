"""Configuration loading."""

from sprout.config.loader import (
    get_home_config_path,
    get_local_config_path,
    load_config,
    load_env_config,
    load_yaml_config,
)
from sprout.config.schema import (
    DEFAULT_CONFIG,
    PACKAGE_MANAGERS,
    PackageManagerName,
    ProjectConfig,
    SproutConfig,
)

__all__ = [
    "DEFAULT_CONFIG",
    "PACKAGE_MANAGERS",
    "PackageManagerName",
    "ProjectConfig",
    "SproutConfig",
    "get_home_config_path",
    "get_local_config_path",
    "load_config",
    "load_env_config",
    "load_yaml_config",
]

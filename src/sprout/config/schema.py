"""Configuration schema for sprout."""

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Literal, cast

from sprout.templates.base import ResolvedTemplate, TemplateSource

PackageManagerName = Literal["bun", "npm", "pnpm", "yarn"]
PACKAGE_MANAGERS: tuple[str, ...] = ("bun", "npm", "pnpm", "yarn")


@dataclass
class SproutConfig:
    """Sprout configuration schema.

    Most fields correspond to CLI options of `sprout`.
    None values indicate "not set" and will use defaults or be inherited.
    """

    # Template settings
    template: str | None = None

    # Post-download steps
    package_manager: PackageManagerName | None = None
    skip_install: bool | None = None
    skip_git: bool | None = None

    # Output
    verbose: bool | None = None
    update_check: bool | None = None

    # GitHub access
    github_token: str | None = None
    api_url: str | None = None
    codeload_url: str | None = None

    def merge(self, other: SproutConfig) -> SproutConfig:
        """Merge another config into this one.

        Values from `other` take precedence when they are not None.
        Returns a new SproutConfig instance.
        """
        merged: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(other, f.name)
            merged[f.name] = value if value is not None else getattr(self, f.name)
        return SproutConfig(**merged)

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary, excluding None values."""
        result: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is not None:
                result[f.name] = value
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SproutConfig:
        """Create a SproutConfig from a dictionary.

        Unknown keys are ignored. Type validation is performed.
        """
        template = data.get("template")
        package_manager_raw = data.get("package_manager")
        package_manager: PackageManagerName | None = None
        if package_manager_raw in PACKAGE_MANAGERS:
            package_manager = cast(PackageManagerName, package_manager_raw)

        def _bool(key: str) -> bool | None:
            raw = data.get(key)
            return bool(raw) if raw is not None else None

        def _str(key: str) -> str | None:
            raw = data.get(key)
            return str(raw) if raw is not None else None

        return cls(
            template=str(template) if template is not None else None,
            package_manager=package_manager,
            skip_install=_bool("skip_install"),
            skip_git=_bool("skip_git"),
            verbose=_bool("verbose"),
            update_check=_bool("update_check"),
            github_token=_str("github_token"),
            api_url=_str("api_url"),
            codeload_url=_str("codeload_url"),
        )


@dataclass(frozen=True)
class ProjectConfig:
    """Everything needed to create one project."""

    project_name: str
    project_path: Path
    template: TemplateSource | ResolvedTemplate
    skip_install: bool = False
    skip_git: bool = False
    verbose: bool = False
    package_manager: PackageManagerName | None = None


# Default configuration values (used when not specified anywhere)
DEFAULT_CONFIG = SproutConfig(
    skip_install=False,
    skip_git=False,
    verbose=False,
    update_check=True,
    api_url="https://api.github.com",
    codeload_url="https://codeload.github.com",
)

"""Package manager detection and dependency installation."""

import logging
import os
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path

from sprout.config.schema import PackageManagerName
from sprout.console import console
from sprout.errors import PackageManagerError

logger = logging.getLogger(__name__)

USER_AGENT_ENV = "npm_config_user_agent"


def detect_package_manager(user_agent: str | None = None) -> PackageManagerName:
    """Detect the package manager from ``npm_config_user_agent``.

    npm, yarn, pnpm and bun all set the variable when running scripts.
    Falls back to npm when it is unset or unrecognized.
    """
    if user_agent is None:
        user_agent = os.environ.get(USER_AGENT_ENV, "")
    if user_agent.startswith("pnpm"):
        return "pnpm"
    if user_agent.startswith("yarn"):
        return "yarn"
    if user_agent.startswith("bun"):
        return "bun"
    return "npm"


@dataclass(frozen=True)
class PackageManager:
    """A JavaScript package manager CLI."""

    name: PackageManagerName

    def is_installed(self) -> bool:
        """Check if this package manager is available in PATH."""
        return shutil.which(self.name) is not None

    @property
    def dev_command(self) -> str:
        return f"{self.name} run dev"

    def install(self, project_path: Path) -> None:
        """Run ``<name> install`` in ``project_path`` with inherited output.

        Raises:
            PackageManagerError: If the command is missing or exits non-zero.
        """
        if not self.is_installed():
            raise PackageManagerError(
                f"{self.name} is not installed",
                hint=f"Make sure {self.name} is installed and on your PATH.",
            )

        console.print(f"Installing dependencies using [green]{self.name}[/green]\n")
        try:
            result = subprocess.run([self.name, "install"], cwd=project_path)
        except OSError as e:
            raise PackageManagerError(
                f"Failed to run {self.name} install",
                hint=f"Make sure {self.name} is installed and on your PATH.",
            ) from e

        if result.returncode != 0:
            raise PackageManagerError(
                f"{self.name} install exited with code {result.returncode}",
                hint=f"Run `{self.name} install` in {project_path} to retry.",
            )
        logger.debug("Dependencies installed with %s", self.name)
        console.print()


def get_package_manager(name: PackageManagerName | None = None) -> PackageManager:
    """Return the configured package manager, or the detected one."""
    return PackageManager(name=name or detect_package_manager())

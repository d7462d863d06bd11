"""Project creation: template download followed by local setup."""

import json
import logging
import re
from pathlib import Path

from sprout.config.schema import ProjectConfig
from sprout.console import console
from sprout.errors import ProjectCreationError
from sprout.git import initialize_git_repository
from sprout.package_manager import get_package_manager
from sprout.templates import MARKER_FILE, ResolvedTemplate, TemplateDownloader
from sprout.templates.github import GitHubClient

logger = logging.getLogger(__name__)

MAX_NAME_LENGTH = 214
PROJECT_NAME_RE = re.compile(r"^[a-z0-9~-][a-z0-9._~-]*$")


def validate_project_name(name: str) -> str:
    """Check that ``name`` is usable as a directory and package name.

    Returns the stripped name.

    Raises:
        ValueError: With a message describing the problem.
    """
    name = name.strip()
    if not name:
        raise ValueError("Project name cannot be empty")
    if name in (".", ".."):
        raise ValueError("Project name cannot be . or ..")
    if len(name) > MAX_NAME_LENGTH:
        raise ValueError(f"Project name cannot exceed {MAX_NAME_LENGTH} characters")
    if not PROJECT_NAME_RE.match(name):
        raise ValueError(
            "Project name may only contain lowercase letters, digits, "
            "'-', '.', '_' and '~', and cannot start with '.' or '_'"
        )
    return name


def check_project_path(project_path: Path) -> None:
    """Refuse to create a project over an existing non-empty path.

    Raises:
        ProjectCreationError: If the path is a file or a non-empty directory.
    """
    if not project_path.exists():
        return
    if not project_path.is_dir():
        raise ProjectCreationError(
            f"{project_path} already exists and is not a directory"
        )
    if any(project_path.iterdir()):
        raise ProjectCreationError(
            f"Directory {project_path} already exists and is not empty",
            hint="Choose a different project name or remove the directory.",
        )


def set_package_name(project_path: Path, project_name: str) -> None:
    """Rewrite the ``name`` field of the project's package.json.

    Raises:
        ProjectCreationError: If the manifest cannot be read or written.
    """
    manifest = project_path / MARKER_FILE
    try:
        data = json.loads(manifest.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise ProjectCreationError(f"Failed to read {manifest}") from e
    if not isinstance(data, dict):
        raise ProjectCreationError(f"{manifest} does not contain a JSON object")

    data["name"] = project_name
    try:
        manifest.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except OSError as e:
        raise ProjectCreationError(f"Failed to write {manifest}") from e
    logger.debug("Updated %s with project name: %s", MARKER_FILE, project_name)


def create_project(
    config: ProjectConfig, client: GitHubClient | None = None
) -> None:
    """Create a project from its template and prepare it for development.

    Raises:
        TemplateValidationError: If the template does not resolve.
        TemplateDownloadError: If the download or copy fails.
        ProjectCreationError: If package.json cannot be updated.
        PackageManagerError: If dependency installation fails.
    """
    if client is None:
        with GitHubClient() as owned:
            create_project(config, owned)
        return

    console.print(f"Creating a new project in [cyan]{config.project_path}[/cyan]")

    downloader = TemplateDownloader(client, verbose=config.verbose)
    template = config.template
    if not isinstance(template, ResolvedTemplate):
        template = downloader.validate(template)

    console.print(
        f"Initializing project with the [cyan]{template.display_name}[/cyan] template"
    )
    downloader.extract(template, config.project_path)
    logger.debug("Template download completed")

    set_package_name(config.project_path, config.project_name)

    package_manager = get_package_manager(config.package_manager)
    if not config.skip_install:
        package_manager.install(config.project_path)

    if not config.skip_git:
        if initialize_git_repository(config.project_path):
            console.print("Initialized a git repository.")
        else:
            console.print("[dim]Skipped git initialization.[/dim]")

    console.print(
        f"\n[bold green]Success![/bold green] Project created in: "
        f"{config.project_path}"
    )
    console.print("\nNext steps:")
    console.print(f"  cd {config.project_name}")
    if config.skip_install:
        console.print(f"  {package_manager.name} install")
    console.print(f"  {package_manager.dev_command}")

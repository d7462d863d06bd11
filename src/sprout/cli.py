"""Command-line interface for sprout."""

import logging
from pathlib import Path

import click

from sprout import __version__
from sprout.config import PACKAGE_MANAGERS, ProjectConfig, load_config
from sprout.console import configure_logging, console, err_console
from sprout.errors import SproutError
from sprout.project import check_project_path, create_project, validate_project_name
from sprout.templates import (
    ALIAS_LABELS,
    TEMPLATE_SOURCE,
    TemplateSource,
    parse_template_source,
)
from sprout.templates.github import (
    DEFAULT_API_URL,
    DEFAULT_CODELOAD_URL,
    GitHubClient,
)
from sprout.update_check import check_for_updates

logger = logging.getLogger(__name__)

DEFAULT_PROJECT_NAME = "my-opentui-project"
EXIT_INTERRUPTED = 130


def version_callback(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
    """Print version and exit."""
    if not value or ctx.resilient_parsing:
        return
    console.print(f"sprout [bold cyan]{__version__}[/bold cyan]")
    ctx.exit()


def _prompt_project_name_value(value: str) -> str:
    try:
        return validate_project_name(value)
    except ValueError as e:
        raise click.BadParameter(str(e)) from e


def _validate_project_name_arg(
    _ctx: click.Context, _param: click.Parameter, value: str | None
) -> str | None:
    if value is None:
        return None
    return _prompt_project_name_value(value)


def prompt_template() -> TemplateSource:
    """Ask which built-in template to use."""
    console.print("\n[bold]Which template do you want to use?[/bold]")
    for alias, label in ALIAS_LABELS.items():
        console.print(f"  [cyan]{alias}[/cyan] - {label}")
    alias = click.prompt(
        "Template",
        type=click.Choice(list(ALIAS_LABELS)),
        default=next(iter(ALIAS_LABELS)),
        show_choices=False,
    )
    return parse_template_source(alias)


def print_error(error: SproutError) -> None:
    """Print a sprout error, its hint and, in debug logging, its cause."""
    err_console.print(f"[red]Error:[/red] {error.message}")
    if error.__cause__ is not None:
        logger.debug("Caused by: %r", error.__cause__)
    if error.hint:
        err_console.print(f"[dim]{error.hint}[/dim]")


@click.command()
@click.argument("project_name", required=False, callback=_validate_project_name_arg)
@click.option(
    "--template",
    "-t",
    type=TEMPLATE_SOURCE,
    help="Template: an alias (core, react, solid), owner/repo[/path], "
    "or a github.com URL.",
)
@click.option(
    "--package-manager",
    type=click.Choice(PACKAGE_MANAGERS),
    help="Package manager to install dependencies with (default: detected).",
)
@click.option(
    "--skip-install",
    is_flag=True,
    default=False,
    help="Do not install dependencies.",
)
@click.option(
    "--skip-git",
    is_flag=True,
    default=False,
    help="Do not initialize a git repository.",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    default=False,
    help="Show detailed progress.",
)
@click.option(
    "--update-check/--no-update-check",
    default=True,
    help="Check PyPI for a newer sprout release (default: check).",
)
@click.option(
    "--version",
    is_flag=True,
    callback=version_callback,
    expose_value=False,
    is_eager=True,
    help="Show version and exit.",
)
@click.pass_context
def main(
    ctx: click.Context,
    project_name: str | None,
    template: TemplateSource | None,
    package_manager: str | None,
    skip_install: bool,
    skip_git: bool,
    verbose: bool,
    update_check: bool,
) -> None:
    """Create a new project from a template.

    PROJECT_NAME is the folder to bootstrap the project in.
    """
    config = load_config()

    def _from_cli(param_name: str) -> bool:
        """Check if a parameter was explicitly set on the command line."""
        source = ctx.get_parameter_source(param_name)
        return source == click.core.ParameterSource.COMMANDLINE

    # Override with config values if not explicitly set on CLI
    if not _from_cli("package_manager") and config.package_manager:
        package_manager = config.package_manager
    if not _from_cli("skip_install") and config.skip_install is not None:
        skip_install = config.skip_install
    if not _from_cli("skip_git") and config.skip_git is not None:
        skip_git = config.skip_git
    if not _from_cli("verbose") and config.verbose is not None:
        verbose = config.verbose
    if not _from_cli("update_check") and config.update_check is not None:
        update_check = config.update_check

    configure_logging(verbose)

    try:
        if project_name is None:
            project_name = click.prompt(
                "What is your project named?",
                default=DEFAULT_PROJECT_NAME,
                value_proc=_prompt_project_name_value,
            )

        project_path = Path(project_name).resolve()
        check_project_path(project_path)

        if template is None and config.template:
            template = parse_template_source(config.template)
        if template is None:
            template = prompt_template()

        project = ProjectConfig(
            project_name=project_name,
            project_path=project_path,
            template=template,
            skip_install=skip_install,
            skip_git=skip_git,
            verbose=verbose,
            package_manager=package_manager,  # type: ignore[arg-type]
        )

        with GitHubClient(
            token=config.github_token,
            api_url=config.api_url or DEFAULT_API_URL,
            codeload_url=config.codeload_url or DEFAULT_CODELOAD_URL,
        ) as client:
            create_project(project, client)
    except (click.Abort, KeyboardInterrupt):
        err_console.print("\n[red]Exiting...[/red]")
        ctx.exit(EXIT_INTERRUPTED)
    except SproutError as e:
        print_error(e)
        if update_check:
            check_for_updates()
        ctx.exit(1)

    if update_check:
        check_for_updates()

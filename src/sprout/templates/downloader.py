"""Template resolution, download and materialization."""

from __future__ import annotations

import logging
import shutil
import tarfile
import tempfile
import zlib
from pathlib import Path

import httpx

from sprout.console import console
from sprout.errors import TemplateDownloadError
from sprout.templates.archive import extract_archive
from sprout.templates.base import (
    MARKER_FILE,
    AliasTemplate,
    ResolvedTemplate,
    TemplateSource,
)
from sprout.templates.github import GitHubClient
from sprout.templates.parser import parse_template_source

logger = logging.getLogger(__name__)

STAGING_PREFIX = "sprout-"


def verify_staging(staging_dir: Path, template: ResolvedTemplate) -> None:
    """Check that extraction produced a usable template.

    Raises:
        TemplateDownloadError: If nothing was extracted or the marker file
            is missing from the template root.
    """
    try:
        entries = list(staging_dir.iterdir())
    except OSError as e:
        raise TemplateDownloadError("Failed to read extracted files") from e

    if not entries:
        raise TemplateDownloadError(
            f"No files extracted for template: {template.display_name}",
            hint="The template path may not exist at this revision.",
        )

    if not (staging_dir / MARKER_FILE).is_file():
        raise TemplateDownloadError(f"Invalid template: missing {MARKER_FILE}")


def materialize(staging_dir: Path, destination: Path) -> None:
    """Copy the verified staging directory into ``destination``.

    Raises:
        TemplateDownloadError: If the copy fails.
    """
    try:
        shutil.copytree(staging_dir, destination, dirs_exist_ok=True)
    except OSError as e:
        raise TemplateDownloadError(
            "Failed to copy template to project directory"
        ) from e


class TemplateDownloader:
    """Resolves, validates, downloads and extracts templates from GitHub."""

    def __init__(self, client: GitHubClient, verbose: bool = False) -> None:
        self._client = client
        self._verbose = verbose

    def _step(self, message: str) -> None:
        if self._verbose:
            console.print(f"[dim]{message}[/dim]")
        else:
            logger.debug(message)

    def validate(self, source: TemplateSource) -> ResolvedTemplate:
        """Resolve the revision of ``source`` and check that it exists.

        Built-in aliases are trusted and returned without network access.

        Raises:
            TemplateValidationError: If the template cannot be resolved or
                does not exist.
        """
        if isinstance(source, AliasTemplate):
            return source.target

        self._step(f"Validating GitHub repository: {source.repo_url}")
        resolved = self._client.resolve_revision(source)
        self._step(f"Using branch: {resolved.revision}")

        self._client.validate_exists(resolved)
        self._step("Repository validated successfully")
        return resolved

    def extract(self, template: ResolvedTemplate, destination: Path) -> None:
        """Download ``template`` and copy it into ``destination``.

        The archive is extracted into a private staging directory which is
        removed on every exit path. ``destination`` is only written once the
        staged template has been verified.

        Raises:
            TemplateDownloadError: On any download, extraction,
                verification or copy failure.
        """
        self._step(f"Downloading from: {template.archive_path}")

        try:
            staging = tempfile.TemporaryDirectory(prefix=STAGING_PREFIX)
        except OSError as e:
            raise TemplateDownloadError("Failed to create temporary directory") from e

        with staging as staging_name:
            staging_dir = Path(staging_name)
            self._step("Extracting to temporary directory...")
            count = self._download_into(template, staging_dir)
            self._step(f"Extracted {count} entries")

            verify_staging(staging_dir, template)

            self._step("Copying to project directory...")
            materialize(staging_dir, destination)

    def _download_into(self, template: ResolvedTemplate, staging_dir: Path) -> int:
        try:
            with self._client.stream_archive(template) as chunks:
                return extract_archive(chunks, template, staging_dir)
        except httpx.HTTPError as e:
            raise TemplateDownloadError(
                f"Failed to download: {template.display_name}"
            ) from e
        except (zlib.error, EOFError, tarfile.TarError, OSError) as e:
            raise TemplateDownloadError("Failed to extract archive") from e


def resolve_and_validate(
    raw_input: str,
    verbose: bool = False,
    *,
    client: GitHubClient | None = None,
) -> ResolvedTemplate:
    """Parse a template string and resolve it to a validated template.

    Raises:
        TemplateValidationError: If parsing, resolution or validation fails.
    """
    source = parse_template_source(raw_input)
    if client is not None:
        return TemplateDownloader(client, verbose).validate(source)
    with GitHubClient() as owned:
        return TemplateDownloader(owned, verbose).validate(source)


def retrieve_and_materialize(
    template: ResolvedTemplate,
    destination: Path,
    verbose: bool = False,
    *,
    client: GitHubClient | None = None,
) -> None:
    """Download a resolved template into ``destination``.

    Raises:
        TemplateDownloadError: If any step after validation fails.
    """
    if client is not None:
        TemplateDownloader(client, verbose).extract(template, destination)
        return
    with GitHubClient() as owned:
        TemplateDownloader(owned, verbose).extract(template, destination)

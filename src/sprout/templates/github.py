"""GitHub API and codeload access."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from types import TracebackType
from urllib.parse import quote

import httpx

from sprout import __version__
from sprout.errors import TemplateValidationError
from sprout.templates.base import (
    MARKER_FILE,
    AliasTemplate,
    ResolvedTemplate,
    TemplateSource,
)

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.github.com"
DEFAULT_CODELOAD_URL = "https://codeload.github.com"
CHUNK_SIZE = 64 * 1024


class GitHubClient:
    """Blocking client for the GitHub endpoints a template download needs.

    Talks to two hosts: the REST API (repository metadata, contents) and
    codeload (tarballs). An ``httpx.Client`` may be injected; otherwise one
    is created and closed with this object.
    """

    def __init__(
        self,
        http: httpx.Client | None = None,
        *,
        api_url: str = DEFAULT_API_URL,
        codeload_url: str = DEFAULT_CODELOAD_URL,
        token: str | None = None,
    ) -> None:
        self._owns_http = http is None
        self._http = http or httpx.Client(follow_redirects=True, timeout=None)
        self._api_url = api_url.rstrip("/")
        self._codeload_url = codeload_url.rstrip("/")
        self._headers = {"User-Agent": f"sprout/{__version__}"}
        if token:
            self._headers["Authorization"] = f"Bearer {token}"

    def __enter__(self) -> GitHubClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_http:
            self._http.close()

    def _api_get(
        self, path: str, params: dict[str, str] | None = None
    ) -> httpx.Response:
        return self._http.get(
            f"{self._api_url}{path}",
            params=params,
            headers={**self._headers, "Accept": "application/vnd.github+json"},
        )

    def resolve_revision(self, source: TemplateSource) -> ResolvedTemplate:
        """Pin a template source to a concrete revision.

        Aliases and templates with an explicit revision resolve without a
        network call. Otherwise the repository's default branch is used.

        Raises:
            TemplateValidationError: If the repository or its default branch
                cannot be determined.
        """
        if isinstance(source, AliasTemplate):
            return source.target
        if source.revision:
            return source.with_revision(source.revision)

        slug = f"{source.owner}/{source.repo}"
        try:
            response = self._api_get(
                f"/repos/{quote(source.owner)}/{quote(source.repo)}"
            )
        except httpx.TransportError as e:
            raise TemplateValidationError("Failed to connect to GitHub API") from e

        if not response.is_success:
            raise TemplateValidationError(
                f"Repository not found: {slug}",
                hint="Check the owner and repository name, and that it is public.",
            )

        try:
            data = response.json()
        except ValueError:
            data = None
        branch = data.get("default_branch") if isinstance(data, dict) else None
        if not isinstance(branch, str) or not branch:
            raise TemplateValidationError(
                f"Could not determine default branch for {slug}",
                hint=f"Specify a branch explicitly: {source.repo_url}/tree/<branch>",
            )

        logger.debug("Resolved default branch for %s: %s", slug, branch)
        return source.with_revision(branch)

    def validate_exists(self, template: ResolvedTemplate) -> None:
        """Check that the repository, revision and template path exist.

        Only metadata is fetched; no archive bytes are transferred.

        Raises:
            TemplateValidationError: If any check fails.
        """
        try:
            response = self._http.head(
                f"{self._codeload_url}{template.archive_path}",
                headers=self._headers,
            )
        except httpx.TransportError as e:
            raise TemplateValidationError("Failed to connect to GitHub") from e

        if not response.is_success:
            raise TemplateValidationError(
                "Repository or branch not found: "
                f"{template.owner}/{template.repo}@{template.revision}"
            )

        if template.path:
            self._validate_template_path(template)

    def _validate_template_path(self, template: ResolvedTemplate) -> None:
        contents_path = "/".join(quote(part) for part in template.path)
        try:
            response = self._api_get(
                f"/repos/{quote(template.owner)}/{quote(template.repo)}"
                f"/contents/{contents_path}",
                params={"ref": template.revision},
            )
        except httpx.TransportError as e:
            raise TemplateValidationError("Failed to connect to GitHub API") from e

        listing = None
        if response.is_success:
            try:
                listing = response.json()
            except ValueError:
                listing = None

        # A directory yields a list of entries; a file yields a single object
        if not isinstance(listing, list):
            raise TemplateValidationError(
                f"Template path not found: {template.display_name}",
                hint=f"Check that {template.sub_path} is a directory at "
                f"{template.revision}.",
            )

        has_marker = any(
            isinstance(entry, dict)
            and entry.get("name") == MARKER_FILE
            and entry.get("type") == "file"
            for entry in listing
        )
        if not has_marker:
            raise TemplateValidationError(
                f"Template path found but missing {MARKER_FILE}: "
                f"{template.display_name}"
            )

    @contextmanager
    def stream_archive(self, template: ResolvedTemplate) -> Iterator[Iterator[bytes]]:
        """Open the template tarball and yield its gzip byte chunks.

        Raises:
            httpx.HTTPError: On transport failure or a non-2xx response.
        """
        url = f"{self._codeload_url}{template.archive_path}"
        logger.debug("Streaming %s", url)
        with self._http.stream("GET", url, headers=self._headers) as response:
            response.raise_for_status()
            yield response.iter_bytes(chunk_size=CHUNK_SIZE)


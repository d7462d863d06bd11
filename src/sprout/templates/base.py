"""Template source definitions."""

from __future__ import annotations

from dataclasses import dataclass

GITHUB_URL = "https://github.com"

# Manifest whose presence at the template root marks a valid template
MARKER_FILE = "package.json"


@dataclass(frozen=True)
class ResolvedTemplate:
    """A GitHub template with a concrete revision.

    This is the only form that may be downloaded and extracted.
    """

    owner: str
    repo: str
    revision: str
    path: tuple[str, ...] = ()
    alias: str | None = None  # set when the template came from a built-in alias

    @property
    def sub_path(self) -> str:
        """Directory inside the repository holding the template."""
        return "/".join(self.path)

    @property
    def display_name(self) -> str:
        return _display_name(self.owner, self.repo, self.path, self.alias)

    @property
    def repo_url(self) -> str:
        return f"{GITHUB_URL}/{self.owner}/{self.repo}"

    @property
    def archive_path(self) -> str:
        """Path of the gzip tarball on the codeload host."""
        return f"/{self.owner}/{self.repo}/tar.gz/{self.revision}"

    @property
    def strip_count(self) -> int:
        """Leading segments to drop from every archive entry.

        GitHub wraps archives in a single ``<repo>-<revision>/`` directory,
        and every sub-path segment is one more layer above the template root.
        """
        return 1 + len(self.path)


@dataclass(frozen=True)
class GitHubTemplate:
    """A GitHub repository reference as written by the user.

    ``revision`` is None until resolved against the repository metadata.
    """

    owner: str
    repo: str
    revision: str | None = None
    path: tuple[str, ...] = ()

    @property
    def sub_path(self) -> str:
        return "/".join(self.path)

    @property
    def display_name(self) -> str:
        return _display_name(self.owner, self.repo, self.path, None)

    @property
    def repo_url(self) -> str:
        return f"{GITHUB_URL}/{self.owner}/{self.repo}"

    def with_revision(self, revision: str) -> ResolvedTemplate:
        """Return a resolved copy pinned to ``revision``."""
        return ResolvedTemplate(
            owner=self.owner,
            repo=self.repo,
            revision=revision,
            path=self.path,
        )


@dataclass(frozen=True)
class AliasTemplate:
    """A built-in template selected by a short name."""

    alias: str
    target: ResolvedTemplate

    @property
    def display_name(self) -> str:
        return self.alias

    @property
    def repo_url(self) -> str:
        return self.target.repo_url


TemplateSource = AliasTemplate | GitHubTemplate


def _display_name(
    owner: str, repo: str, path: tuple[str, ...], alias: str | None
) -> str:
    if alias:
        return alias
    if path:
        return f"{owner}/{repo}/{'/'.join(path)}"
    return f"{owner}/{repo}"

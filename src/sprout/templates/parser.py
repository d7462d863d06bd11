"""Parsing of user-supplied template sources."""

from __future__ import annotations

from urllib.parse import urlparse

import click

from sprout.errors import InvalidTemplateSourceError
from sprout.templates.base import (
    AliasTemplate,
    GitHubTemplate,
    ResolvedTemplate,
    TemplateSource,
)

GITHUB_HOST = "github.com"

# Built-in templates. Adding one is a matter of adding an entry here.
TEMPLATE_ALIASES: dict[str, str] = {
    "core": "https://github.com/msmps/create-tui/tree/main/packages/templates/core",
    "react": "https://github.com/msmps/create-tui/tree/main/packages/templates/react",
    "solid": "https://github.com/msmps/create-tui/tree/main/packages/templates/solid",
}

# Labels shown by the interactive template prompt
ALIAS_LABELS: dict[str, str] = {
    "core": "Core",
    "react": "React",
    "solid": "Solid",
}


def parse_github_url(value: str) -> GitHubTemplate | None:
    """Parse a github.com URL.

    Supports:
    - https://github.com/owner/repo
    - https://github.com/owner/repo/
    - https://github.com/owner/repo/tree/branch
    - https://github.com/owner/repo/tree/branch/path/to/template

    Returns None when ``value`` is not a github.com URL at all.

    Raises:
        InvalidTemplateSourceError: For github.com URLs of any other shape.
    """
    parsed = urlparse(value)
    try:
        port = parsed.port
    except ValueError:
        return None
    # hostname is lowercased; 443 is the https default port
    if (
        parsed.scheme != "https"
        or parsed.hostname != GITHUB_HOST
        or port not in (None, 443)
    ):
        return None

    segments = parsed.path.split("/")[1:]
    owner = segments[0] if segments else ""
    repo = segments[1] if len(segments) > 1 else ""
    rest = segments[2:]

    if owner and repo:
        # /owner/repo or /owner/repo/
        if not rest or rest == [""]:
            return GitHubTemplate(owner=owner, repo=repo)

        # /owner/repo/tree/<branch>[/path...]
        if rest[0] == "tree" and len(rest) > 1 and rest[1]:
            path = tuple(part for part in rest[2:] if part)
            return GitHubTemplate(
                owner=owner, repo=repo, revision=rest[1], path=path
            )

    raise InvalidTemplateSourceError(
        f'Unsupported GitHub URL: "{value}"',
        hint=(
            "Use https://github.com/owner/repo or "
            "https://github.com/owner/repo/tree/<branch>/<path>"
        ),
    )


def parse_shorthand(value: str) -> GitHubTemplate | None:
    """Parse ``owner/repo`` or ``owner/repo/path/to/template``.

    Returns None if ``value`` does not look like shorthand.
    """
    if "/" not in value or "://" in value:
        return None

    owner, repo, *path_parts = value.split("/")

    # Dots would let domain-like strings (example.com/foo) through
    if not owner or not repo or "." in owner or "." in repo:
        return None

    return GitHubTemplate(
        owner=owner,
        repo=repo,
        path=tuple(part for part in path_parts if part),
    )


def get_alias_template(alias: str) -> AliasTemplate:
    """Build the template for a built-in alias.

    Raises:
        KeyError: If ``alias`` is not a known alias.
    """
    url = TEMPLATE_ALIASES[alias]
    parsed = parse_github_url(url)
    if parsed is None or parsed.revision is None:
        raise ValueError(f"Alias {alias!r} must point at a github.com tree URL")
    target = ResolvedTemplate(
        owner=parsed.owner,
        repo=parsed.repo,
        revision=parsed.revision,
        path=parsed.path,
        alias=alias,
    )
    return AliasTemplate(alias=alias, target=target)


def parse_template_source(value: str) -> TemplateSource:
    """Parse a template string into a template source.

    Resolution order (first match wins):
    1. A built-in alias ("core", "react", "solid")
    2. A full GitHub URL
    3. Shorthand ("owner/repo", "owner/repo/path")

    Raises:
        InvalidTemplateSourceError: If nothing matches.
    """
    value = value.strip()

    if value in TEMPLATE_ALIASES:
        return get_alias_template(value)

    from_url = parse_github_url(value)
    if from_url is not None:
        return from_url

    from_shorthand = parse_shorthand(value)
    if from_shorthand is not None:
        return from_shorthand

    aliases = ", ".join(TEMPLATE_ALIASES)
    raise InvalidTemplateSourceError(
        f'Invalid template: "{value}". Use an alias ({aliases}), '
        "shorthand (owner/repo), or GitHub URL (https://github.com/owner/repo)"
    )


class TemplateSourceParamType(click.ParamType):
    """Click parameter type that parses template sources."""

    name = "template"

    def convert(
        self,
        value: object,
        param: click.Parameter | None,
        ctx: click.Context | None,
    ) -> TemplateSource:
        if isinstance(value, (AliasTemplate, GitHubTemplate)):
            return value
        try:
            return parse_template_source(str(value))
        except InvalidTemplateSourceError as e:
            self.fail(e.message, param, ctx)


TEMPLATE_SOURCE = TemplateSourceParamType()

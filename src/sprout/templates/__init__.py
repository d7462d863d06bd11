"""Template sources and the download pipeline."""

from sprout.templates.base import (
    MARKER_FILE,
    AliasTemplate,
    GitHubTemplate,
    ResolvedTemplate,
    TemplateSource,
)
from sprout.templates.downloader import (
    TemplateDownloader,
    resolve_and_validate,
    retrieve_and_materialize,
)
from sprout.templates.parser import (
    ALIAS_LABELS,
    TEMPLATE_ALIASES,
    TEMPLATE_SOURCE,
    parse_template_source,
)

__all__ = [
    "ALIAS_LABELS",
    "MARKER_FILE",
    "TEMPLATE_ALIASES",
    "TEMPLATE_SOURCE",
    "AliasTemplate",
    "GitHubTemplate",
    "ResolvedTemplate",
    "TemplateDownloader",
    "TemplateSource",
    "parse_template_source",
    "resolve_and_validate",
    "retrieve_and_materialize",
]

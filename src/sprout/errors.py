"""Exception hierarchy for sprout."""

from __future__ import annotations


class SproutError(Exception):
    """Base exception for sprout.

    Carries a human-readable message and an optional remediation hint.
    The underlying cause, when there is one, is chained with ``raise ... from``.
    """

    def __init__(self, message: str, hint: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.hint = hint


class TemplateValidationError(SproutError):
    """Raised when a template source, repository, branch or path is invalid.

    Always raised before any archive bytes are transferred.
    """


class InvalidTemplateSourceError(TemplateValidationError):
    """Raised when a template string matches none of the accepted grammars."""


class TemplateDownloadError(SproutError):
    """Raised when fetching, extracting, verifying or copying a template fails."""


class PackageManagerError(SproutError):
    """Raised when dependency installation fails."""


class ProjectCreationError(SproutError):
    """Raised when the project directory cannot be prepared."""

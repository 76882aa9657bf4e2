"""Markdown layer error hierarchy."""

from wren.errors import WrenError


class MarkdownError(WrenError):
    """Base for all wren.markdown errors."""


class MarkdownNotInstalledError(MarkdownError):
    """Raised when patitas is not installed."""

"""Markdown renderer wrapping patitas.

The docs tree builder depends only on the :class:`Renderer` protocol,
so any "text in, HTML out" callable-bearing object can stand in.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from wren.markdown.errors import MarkdownNotInstalledError

if TYPE_CHECKING:
    from patitas import Markdown


class Renderer(Protocol):
    """Anything that turns markdown source into an HTML string."""

    def render(self, source: str) -> str: ...


class MarkdownRenderer:
    """Render Markdown source to HTML via patitas.

    Args:
        plugins: Patitas plugins to enable (default: all).
        highlight: Enable syntax highlighting for fenced code blocks.
    """

    __slots__ = ("_md",)

    def __init__(
        self,
        *,
        plugins: list[str] | tuple[str, ...] | None = None,
        highlight: bool = False,
    ) -> None:
        self._md: Markdown = _get_markdown(plugins=plugins, highlight=highlight)

    def render(self, source: str) -> str:
        """Render Markdown source to an HTML string."""
        if not source:
            return ""
        return self._md(source)


def _get_markdown(
    *,
    plugins: list[str] | tuple[str, ...] | None,
    highlight: bool,
) -> Markdown:
    """Create a patitas Markdown instance, raising a clear error if missing."""
    try:
        from patitas import Markdown
    except ImportError:
        msg = (
            "wren.markdown requires 'patitas' for Markdown rendering. "
            "Install with: pip install patitas"
        )
        raise MarkdownNotInstalledError(msg) from None

    return Markdown(plugins=list(plugins) if plugins else ["all"], highlight=highlight)

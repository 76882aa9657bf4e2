"""Markdown rendering for wren via patitas.

Converts documentation source files to HTML while the page tree is
built. Text in, HTML string out::

    from wren.markdown import MarkdownRenderer

    html = MarkdownRenderer().render("# Getting started")
"""

from wren.markdown.errors import MarkdownError, MarkdownNotInstalledError
from wren.markdown.renderer import MarkdownRenderer, Renderer

__all__ = [
    "MarkdownError",
    "MarkdownNotInstalledError",
    "MarkdownRenderer",
    "Renderer",
]

"""Documentation site generation.

Turns a nested directory of markdown files into a tree of pages, then
installs one route per page::

    root = build_tree("docs", MarkdownRenderer())
    bind_docs(root, router, renderer=page_renderer, server_name="Wren")
"""

from wren.docs.binder import bind_docs, bind_sitemap, flatten_routes, render_sitemap
from wren.docs.builder import build_tree, camel_to_sentence
from wren.docs.page import Page

__all__ = [
    "Page",
    "bind_docs",
    "bind_sitemap",
    "build_tree",
    "camel_to_sentence",
    "flatten_routes",
    "render_sitemap",
]

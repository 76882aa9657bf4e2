"""Install one route per documentation page.

Walks the page tree pre-order (a section before its children) and
registers a GET handler at each page's path. The handler renders the
docs template with the page and its breadcrumb trail, captured once at
bind time.

Page paths are registered as literal routes, so braces in a file or
folder name are matched as plain text. Paths are not checked for
collisions: two pages whose titles produce the same path leave only
the later one reachable.
"""

from __future__ import annotations

import logging
from urllib.parse import quote
from xml.sax.saxutils import escape

from kida.template import Markup

from wren.docs.page import Page
from wren.http.request import Request
from wren.http.response import Response
from wren.routing.router import Router
from wren.templating.integration import PageRenderer

logger = logging.getLogger("wren.docs")

SITEMAP_PATH = "/sitemap.xml"


def bind_docs(
    page: Page,
    router: Router,
    *,
    renderer: PageRenderer,
    server_name: str,
    template: str = "docs.html",
) -> int:
    """Register *page* and all its descendants on *router*.

    Returns the number of routes registered.
    """
    logger.info("Bound: %s", page.path)

    breadcrumbs = page.breadcrumbs()
    title = f"{server_name} | {page.title}"

    def handler(request: Request, path_params: dict[str, str]) -> Response:
        return renderer.render_page(
            template,
            {
                "page": page,
                "breadcrumbs": breadcrumbs,
                "content": Markup(page.content),
            },
            200,
            title,
        )

    router.get(page.path, handler, name=page.path, literal=True)

    count = 1
    for child in page.children:
        count += bind_docs(
            child,
            router,
            renderer=renderer,
            server_name=server_name,
            template=template,
        )
    return count


def flatten_routes(page: Page) -> tuple[list[str], list[str]]:
    """Titles and paths of every page, as two parallel pre-order lists."""
    titles: list[str] = []
    paths: list[str] = []
    _fill_routes(page, titles, paths)
    return titles, paths


def _fill_routes(page: Page, titles: list[str], paths: list[str]) -> None:
    titles.append(page.title)
    paths.append(page.path)
    for child in page.children:
        _fill_routes(child, titles, paths)


def render_sitemap(page: Page, base_url: str) -> str:
    """A sitemaps.org XML document with one ``<url>`` per page.

    Page paths are percent-encoded, so non-ASCII titles give valid URLs.
    """
    _, paths = flatten_routes(page)
    base = base_url.rstrip("/")
    lines = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">',
    ]
    for path in paths:
        url = f"{base}/{quote(path, safe='/')}"
        lines.append(f"  <url><loc>{escape(url)}</loc></url>")
    lines.append("</urlset>")
    return "\n".join(lines) + "\n"


def bind_sitemap(page: Page, router: Router, *, base_url: str) -> None:
    """Serve :func:`render_sitemap` for *page* at ``/sitemap.xml``."""
    body = render_sitemap(page, base_url)

    def handler(request: Request, path_params: dict[str, str]) -> Response:
        return Response(body=body, content_type="application/xml")

    router.get(SITEMAP_PATH, handler, name="sitemap")

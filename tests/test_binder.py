"""Tests for wren.docs.binder — route binding, flattening, sitemap."""

import logging
from pathlib import Path

from kida import DictLoader, Environment

from wren.docs.binder import bind_docs, bind_sitemap, flatten_routes, render_sitemap
from wren.docs.builder import build_tree
from wren.docs.page import Page
from wren.http.request import Request
from wren.routing.router import Router
from wren.templating.integration import PageRenderer

_TEMPLATE = (
    "{{ title }}|"
    "{% for crumb in breadcrumbs %}{{ crumb.title }}>{% end %}|"
    "{{ content }}"
)


def _renderer() -> PageRenderer:
    return PageRenderer(Environment(loader=DictLoader({"docs.html": _TEMPLATE})))


def _bound(docs_dir: Path, fake_markdown) -> tuple[Page, Router, int]:
    root = build_tree(docs_dir, fake_markdown)
    router = Router()
    count = bind_docs(root, router, renderer=_renderer(), server_name="Wren")
    router.compile()
    return root, router, count


class TestBindDocs:
    def test_one_route_per_page(self, docs_dir: Path, fake_markdown) -> None:
        root, router, count = _bound(docs_dir, fake_markdown)
        assert count == 4
        assert len(router.routes) == 4
        assert {r.path for r in router.routes} == {p.path for p in root.walk()}

    def test_preorder_registration(self, docs_dir: Path, fake_markdown, caplog) -> None:
        root = build_tree(docs_dir, fake_markdown)
        with caplog.at_level(logging.INFO, logger="wren.docs"):
            bind_docs(root, Router(), renderer=_renderer(), server_name="Wren")
        bound = [r.getMessage() for r in caplog.records if r.getMessage().startswith("Bound: ")]
        assert bound == [
            "Bound: docs",
            "Bound: docs/intro",
            "Bound: docs/guides",
            "Bound: docs/guides/setup",
        ]

    async def test_handler_renders_page_with_breadcrumbs(
        self, docs_dir: Path, fake_markdown
    ) -> None:
        _, router, _ = _bound(docs_dir, fake_markdown)
        response = await router.match_route(Request("GET", "/docs/guides/setup"))

        assert response is not None
        assert response.status == 200
        assert response.text == "Wren | Setup|Docs>Guides>Setup>|<md>Install it</md>"

    async def test_page_content_not_escaped(self, tmp_path: Path) -> None:
        class Html:
            def render(self, source: str) -> str:
                return "<h1>Title</h1>"

        root_dir = tmp_path / "docs"
        root_dir.mkdir()
        (root_dir / "docs.md").write_text("# Title")
        router = Router()
        bind_docs(build_tree(root_dir, Html()), router, renderer=_renderer(), server_name="S")
        response = await router.match_route(Request("GET", "/docs"))
        assert response is not None
        assert "<h1>Title</h1>" in response.text

    async def test_colliding_paths_later_wins(self) -> None:
        root = Page("Docs", is_section=True)
        first = root.add_child(Page("Same Name", "first", root))
        second = root.add_child(Page("same name", "second", root))
        assert first.path == second.path

        router = Router()
        assert bind_docs(root, router, renderer=_renderer(), server_name="S") == 3
        response = await router.match_route(Request("GET", "/docs/same-name"))
        assert response is not None
        assert response.text.endswith("|second")


class TestFlattenRoutes:
    def test_parallel_preorder_lists(self, docs_dir: Path, fake_markdown) -> None:
        root = build_tree(docs_dir, fake_markdown)
        titles, paths = flatten_routes(root)
        assert titles == ["Docs", "Intro", "Guides", "Setup"]
        assert paths == ["docs", "docs/intro", "docs/guides", "docs/guides/setup"]

    def test_single_page(self) -> None:
        assert flatten_routes(Page("Only", is_section=True)) == (["Only"], ["only"])


class TestSitemap:
    def test_lists_every_page(self, docs_dir: Path, fake_markdown) -> None:
        root = build_tree(docs_dir, fake_markdown)
        xml = render_sitemap(root, "http://localhost:8080/")
        assert xml.startswith('<?xml version="1.0" encoding="UTF-8"?>')
        assert "<loc>http://localhost:8080/docs</loc>" in xml
        assert "<loc>http://localhost:8080/docs/guides/setup</loc>" in xml
        assert xml.count("<url>") == 4

    def test_paths_are_percent_encoded(self) -> None:
        root = Page("Q&A", is_section=True)
        root.add_child(Page("Café", parent=root))
        xml = render_sitemap(root, "http://x")

        assert "<loc>http://x/q%26a</loc>" in xml
        assert "<loc>http://x/q%26a/caf%C3%A9</loc>" in xml

    async def test_bound_route(self, docs_dir: Path, fake_markdown) -> None:
        root = build_tree(docs_dir, fake_markdown)
        router = Router()
        bind_sitemap(root, router, base_url="http://example.com/")
        response = await router.match_route(Request("GET", "/sitemap.xml"))
        assert response is not None
        assert response.content_type == "application/xml"
        assert "http://example.com/docs/intro" in response.text

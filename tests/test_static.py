"""Tests for wren.static — content root resolution and MIME table."""

from pathlib import Path

import pytest

from wren.http.request import Request
from wren.static import DEFAULT_CONTENT_TYPE, StaticResolver, content_type


@pytest.fixture
def wwwroot(tmp_path: Path) -> Path:
    root = tmp_path / "wwwroot"
    (root / "styles").mkdir(parents=True)
    (root / "styles" / "main.css").write_text("body { color: red; }")
    (root / "app.js").write_text("console.log('hi');")
    (root / "logo.PNG").write_bytes(b"\x89PNG\r\n\x1a\n")
    (root / "data.bin").write_bytes(b"\x00\x01\x02")
    (root / "notes.txt").write_text("plain notes")
    (tmp_path / "secret.txt").write_text("outside")
    return root


class TestContentType:
    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("index.html", "text/html"),
            ("main.css", "text/css"),
            ("app.js", "application/javascript"),
            ("data.json", "application/json"),
            ("logo.png", "image/png"),
            ("photo.jpg", "image/jpeg"),
            ("photo.jpeg", "image/jpeg"),
            ("anim.gif", "image/gif"),
            ("icon.svg", "image/svg+xml"),
            ("favicon.ico", "image/x-icon"),
            ("archive.tar.gz", DEFAULT_CONTENT_TYPE),
            ("README", DEFAULT_CONTENT_TYPE),
        ],
    )
    def test_table(self, name: str, expected: str) -> None:
        assert content_type(name) == expected

    def test_extension_case_insensitive(self) -> None:
        assert content_type("LOGO.PNG") == "image/png"


class TestResolve:
    def test_css(self, wwwroot: Path) -> None:
        response = StaticResolver(wwwroot).resolve("styles/main.css")
        assert response is not None
        assert response.content_type == "text/css"
        assert response.body == b"body { color: red; }"

    def test_leading_slash_ignored(self, wwwroot: Path) -> None:
        response = StaticResolver(wwwroot).resolve("/app.js")
        assert response is not None
        assert response.content_type == "application/javascript"

    def test_unknown_extension_is_binary(self, wwwroot: Path) -> None:
        response = StaticResolver(wwwroot).resolve("data.bin")
        assert response is not None
        assert response.content_type == "application/octet-stream"
        assert response.body == b"\x00\x01\x02"

    def test_missing(self, wwwroot: Path) -> None:
        assert StaticResolver(wwwroot).resolve("styles/missing.css") is None

    def test_directory_is_not_served(self, wwwroot: Path) -> None:
        assert StaticResolver(wwwroot).resolve("styles") is None
        assert StaticResolver(wwwroot).resolve("") is None

    def test_traversal_refused(self, wwwroot: Path) -> None:
        assert StaticResolver(wwwroot).resolve("../secret.txt") is None

    def test_nul_byte_is_a_miss(self, wwwroot: Path) -> None:
        static = StaticResolver(wwwroot)
        assert static.resolve("a\x00b.css") is None
        assert static.read_text("a\x00b.css") == static.read_text("missing.txt")

    def test_router_entry_point(self, wwwroot: Path) -> None:
        static = StaticResolver(wwwroot)
        response = static(Request("GET", "/styles/main.css"), {"path": "styles/main.css"})
        assert response is not None
        assert response.content_type == "text/css"


class TestHelpers:
    def test_read_text(self, wwwroot: Path) -> None:
        assert StaticResolver(wwwroot).read_text("notes.txt") == "plain notes"

    def test_read_text_missing_returns_error_page(self, wwwroot: Path) -> None:
        static = StaticResolver(wwwroot, error_page="<p>gone</p>")
        assert static.read_text("nope.txt") == "<p>gone</p>"

    def test_path_for_does_not_check_existence(self, wwwroot: Path) -> None:
        static = StaticResolver(wwwroot)
        assert static.path_for("later/file.css") == wwwroot.resolve() / "later" / "file.css"
        assert static.root == wwwroot.resolve()

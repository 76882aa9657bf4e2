"""Shared fixtures: a fake markdown renderer and an on-disk docs tree."""

from pathlib import Path

import pytest


class FakeMarkdown:
    """Wraps source in a marker so tests can compare exact HTML."""

    def __init__(self) -> None:
        self.calls: list[str] = []

    def render(self, source: str) -> str:
        self.calls.append(source)
        return f"<md>{source}</md>"


@pytest.fixture
def fake_markdown() -> FakeMarkdown:
    return FakeMarkdown()


@pytest.fixture
def docs_dir(tmp_path: Path) -> Path:
    """The documented example tree::

        docs/
          docs.md
          intro.md
          guides/
            guides.md
            setup.md
    """
    docs = tmp_path / "docs"
    docs.mkdir()
    (docs / "docs.md").write_text("Welcome")
    (docs / "intro.md").write_text("Intro text")

    guides = docs / "guides"
    guides.mkdir()
    (guides / "guides.md").write_text("All guides")
    (guides / "setup.md").write_text("Install it")
    return docs

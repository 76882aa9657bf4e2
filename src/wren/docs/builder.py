"""Build the documentation page tree from a directory of markdown files.

Layout::

    docs/
      docs.md            -> content of the root section "Docs"
      intro.md           -> leaf "Intro"            (docs/intro)
      guides/
        guides.md        -> content of section "Guides"
        setup.md         -> leaf "Setup"            (docs/guides/setup)

Every directory becomes a section page titled from its name. A file
named after its directory (``<folder>.md``) is that section's content;
every other file becomes a leaf page. Files come before subdirectories,
each group sorted by name.

The root index file is required: if ``<root>/<root>.md`` is missing,
the build fails. Nested sections without an index file simply have no
content.

Files are read as UTF-8; undecodable bytes become U+FFFD rather than
failing the build.
"""

from __future__ import annotations

import logging
from pathlib import Path

from wren.docs.page import Page
from wren.errors import DocsBuildError
from wren.markdown.renderer import Renderer

logger = logging.getLogger("wren.docs")

INDEX_SUFFIX = ".md"


def camel_to_sentence(text: str) -> str:
    """Turn a camelCase name into a sentence-case title.

    A space goes before each upper-case letter that follows a lower-case
    one, and everything after the first letter is lower-cased::

        camel_to_sentence("gettingStarted")  # "Getting started"
        camel_to_sentence("FAQPage")         # "Faqpage"
    """
    if not text:
        return text

    result = [text[0].upper()]
    for previous, char in zip(text, text[1:]):
        if char.isupper() and previous.islower():
            result.append(" ")
        result.append(char.lower())
    return "".join(result)


def build_tree(root_folder: str | Path, renderer: Renderer) -> Page:
    """Walk *root_folder* and return the root section page.

    Raises:
        DocsBuildError: The root index file is missing or unreadable, or
            any directory or file in the tree cannot be read.
    """
    root = Path(root_folder)
    files, subdirectories = _list_directory(root)

    folder_name = root.name
    root_page = Page(camel_to_sentence(folder_name), "", None, is_section=True)

    root_page.content = _render_file(root / f"{folder_name}{INDEX_SUFFIX}", renderer)

    _add_leaves(root_page, files, folder_name, renderer)
    for subdirectory in subdirectories:
        _build_section(subdirectory, root_page, renderer)

    logger.info("Built docs tree from %s: %d pages", root, sum(1 for _ in root_page.walk()))
    return root_page


def _build_section(folder: Path, parent: Page, renderer: Renderer) -> Page:
    """Build the section for *folder*, attach it to *parent*, and recurse."""
    files, subdirectories = _list_directory(folder)

    folder_name = folder.name
    section = parent.add_child(Page(camel_to_sentence(folder_name), "", parent, is_section=True))

    index_file = folder / f"{folder_name}{INDEX_SUFFIX}"
    if index_file.is_file():
        section.content = _render_file(index_file, renderer)

    _add_leaves(section, files, folder_name, renderer)
    for subdirectory in subdirectories:
        _build_section(subdirectory, section, renderer)
    return section


def _add_leaves(section: Page, files: list[Path], folder_name: str, renderer: Renderer) -> None:
    for file in files:
        if file.stem == folder_name:
            continue
        content = _render_file(file, renderer)
        section.add_child(Page(camel_to_sentence(file.stem), content, section))


def _list_directory(folder: Path) -> tuple[list[Path], list[Path]]:
    """Immediate files and subdirectories of *folder*, sorted, hidden entries skipped."""
    try:
        entries = sorted(item for item in folder.iterdir() if not item.name.startswith("."))
    except OSError as exc:
        msg = f"Cannot read docs directory {folder}: {exc}"
        raise DocsBuildError(msg) from exc

    files = [item for item in entries if item.is_file()]
    subdirectories = [item for item in entries if item.is_dir()]
    return files, subdirectories


def _render_file(file: Path, renderer: Renderer) -> str:
    try:
        source = file.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        msg = f"Cannot read docs file {file}: {exc}"
        raise DocsBuildError(msg) from exc
    return renderer.render(source)

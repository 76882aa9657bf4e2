"""Documentation page tree.

A :class:`Page` is one node of the tree built from a docs directory:
sections for directories, leaves for markdown files. Each page knows
its parent, so its URL path and breadcrumb trail are derived by walking
upward to the root.
"""

from __future__ import annotations

from wren.errors import PageFrozenError


def to_url_segment(title: str) -> str:
    """Lower-case *title* and turn spaces into hyphens."""
    return title.lower().replace(" ", "-")


class Page:
    """A node in the documentation tree.

    ``url_segment`` is derived once, from the raw title passed to the
    constructor. ``path`` is computed on first access and cached; after
    that the title is frozen and reassigning it raises
    :class:`~wren.errors.PageFrozenError`.

    A page created with a *parent* is not attached automatically. The
    builder calls ``parent.add_child(page)`` so children keep listing
    order.
    """

    __slots__ = ("_path", "_title", "children", "content", "is_section", "parent", "url_segment")

    def __init__(
        self,
        title: str,
        content: str = "",
        parent: Page | None = None,
        *,
        is_section: bool = False,
    ) -> None:
        self._title = title.strip(" ")
        self.url_segment = to_url_segment(title)
        self.content = content
        self.is_section = is_section
        self.parent = parent
        self.children: list[Page] = []
        self._path: str | None = None

    def __repr__(self) -> str:
        kind = "section" if self.is_section else "leaf"
        return f"<Page {kind} {self._title!r}>"

    @property
    def title(self) -> str:
        return self._title

    @title.setter
    def title(self, value: str) -> None:
        if self._path is not None:
            msg = f"Cannot retitle {self._title!r}: its path {self._path!r} is already in use."
            raise PageFrozenError(msg)
        self._title = value.strip(" ")

    @property
    def has_children(self) -> bool:
        return bool(self.children)

    @property
    def path(self) -> str:
        """Slash-joined url segments from the root down to this page.

        ``"My Docs" > "Getting Started" > "Quick Start"`` gives
        ``"my-docs/getting-started/quick-start"``.
        """
        if self._path is None:
            segments = [self.url_segment]
            current = self.parent
            while current is not None:
                segments.insert(0, current.url_segment)
                current = current.parent
            self._path = "/".join(segments).replace(" ", "")
        return self._path

    @property
    def depth(self) -> int:
        """Number of ancestors (0 for the root)."""
        depth = 0
        current = self.parent
        while current is not None:
            depth += 1
            current = current.parent
        return depth

    def add_child(self, child: Page) -> Page:
        """Append *child*, which must have been created with this page as parent."""
        if child.parent is not self:
            msg = f"{child!r} belongs to {child.parent!r}, not {self!r}."
            raise ValueError(msg)
        self.children.append(child)
        return child

    def breadcrumbs(self) -> list[Page]:
        """Pages from the root down to and including this one.

        Walked fresh on every call; nothing is cached.
        """
        trail: list[Page] = []
        current: Page | None = self
        while current is not None:
            trail.insert(0, current)
            current = current.parent
        return trail

    def walk(self):
        """Yield this page and every descendant, pre-order."""
        yield self
        for child in self.children:
            yield from child.walk()

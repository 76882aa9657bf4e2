"""Static file resolution under a fixed content root.

The router's wildcard fallback: any GET request that matches no page
route is looked up here by its relative path. Files are read whole into
memory and typed from a fixed extension table.
"""

import logging
from pathlib import Path

from wren.config import DEFAULT_ERROR_PAGE
from wren.http.request import Request
from wren.http.response import Response

logger = logging.getLogger("wren.static")

DEFAULT_CONTENT_TYPE = "application/octet-stream"

CONTENT_TYPES: dict[str, str] = {
    ".html": "text/html",
    ".css": "text/css",
    ".js": "application/javascript",
    ".json": "application/json",
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".svg": "image/svg+xml",
    ".ico": "image/x-icon",
}


def content_type(path: str | Path) -> str:
    """Content type for *path* from its extension. The file need not exist."""
    return CONTENT_TYPES.get(Path(path).suffix.lower(), DEFAULT_CONTENT_TYPE)


class StaticResolver:
    """Resolve relative URL paths to files under a content root.

    Security: resolves symlinks and verifies the final path is within
    the content root, so ``../`` segments never escape it.

    Usage::

        static = StaticResolver("./wwwroot")
        response = static.resolve("styles/main.css")  # Response | None

        router.static_handler = static
    """

    __slots__ = ("_error_page", "_root")

    def __init__(self, root: str | Path, *, error_page: str = DEFAULT_ERROR_PAGE) -> None:
        self._root = Path(root).resolve()
        self._error_page = error_page

    @property
    def root(self) -> Path:
        return self._root

    def path_for(self, relative_path: str) -> Path:
        """Absolute path for *relative_path* under the root. Existence is not checked."""
        return self._root / relative_path.lstrip("/")

    def resolve(self, relative_path: str) -> Response | None:
        """Read the file at *relative_path* and type it, or ``None`` if absent."""
        file_path = self._locate(relative_path)
        logger.debug("Looking for %s in %s (%s)", relative_path, self._root, file_path)
        if file_path is None:
            logger.debug("%s is not in %s", relative_path, self._root)
            return None

        body = file_path.read_bytes()
        return Response(body=body, content_type=content_type(file_path))

    def read_text(self, relative_path: str) -> str:
        """The file at *relative_path* as UTF-8 text, or the error page if absent."""
        file_path = self._locate(relative_path)
        if file_path is None:
            return self._error_page
        return file_path.read_text(encoding="utf-8")

    def __call__(self, request: Request, path_params: dict[str, str]) -> Response | None:
        """Router fallback entry point."""
        return self.resolve(path_params.get("path", request.path))

    def _locate(self, relative_path: str) -> Path | None:
        try:
            file_path = self.path_for(relative_path).resolve()
        except (OSError, ValueError):
            # NUL bytes and other names the OS cannot represent
            logger.debug("Unusable static path: %r", relative_path)
            return None
        if not file_path.is_relative_to(self._root):
            logger.warning("Refusing static path outside content root: %s", relative_path)
            return None
        if not file_path.is_file():
            return None
        return file_path

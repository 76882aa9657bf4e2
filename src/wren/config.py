"""Application configuration.

AppConfig is a frozen dataclass — immutable after creation, IDE-autocompletable,
no string-key dict lookups.
"""

from dataclasses import dataclass
from pathlib import Path
from urllib.parse import urlsplit

from wren.errors import ConfigurationError

DEFAULT_ERROR_PAGE = "<HTML><BODY>404 Not Found</BODY></HTML>"

_DEFAULT_PORTS = {"http": 80, "https": 443}


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = AppConfig(base_url="http://0.0.0.0:3000/", server_name="Handbook")
    """

    # Server
    base_url: str = "http://localhost:8080/"
    server_name: str = "Wren"
    debug: bool = False

    # Body sent when no route or static file matches
    error_page: str = DEFAULT_ERROR_PAGE

    # Static files (wildcard fallback route)
    static_dir: str | Path | None = "wwwroot"

    # Templates
    template_dir: str | Path = "templates"
    docs_template: str = "docs.html"
    autoescape: bool = True

    # Docs
    docs_sitemap: bool = False

    # Markdown
    markdown_plugins: tuple[str, ...] = ()  # Empty = every patitas plugin
    markdown_highlight: bool = False

    # Logging
    log_level: str = "info"
    traceback_style: str = "compact"  # compact | full | minimal

    @property
    def host(self) -> str:
        """Bind host parsed from ``base_url``."""
        hostname = self._split().hostname
        if not hostname:
            msg = f"base_url {self.base_url!r} has no host."
            raise ConfigurationError(msg)
        return hostname

    @property
    def port(self) -> int:
        """Bind port parsed from ``base_url``, defaulting by scheme."""
        parts = self._split()
        try:
            port = parts.port
        except ValueError as exc:
            msg = f"base_url {self.base_url!r} has an invalid port."
            raise ConfigurationError(msg) from exc
        if port is not None:
            return port
        if parts.scheme not in _DEFAULT_PORTS:
            msg = f"base_url {self.base_url!r} must use http or https."
            raise ConfigurationError(msg)
        return _DEFAULT_PORTS[parts.scheme]

    def _split(self):
        return urlsplit(self.base_url)

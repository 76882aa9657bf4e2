"""Wren — a small web framework for markdown documentation sites.

Builds a page tree from a directory of markdown files, routes every
page with a breadcrumb trail, and serves static assets from a content
root.

Basic usage::

    from wren import App, AppConfig

    app = App(AppConfig(server_name="Handbook"))
    app.mount_docs("docs")
    app.run()
"""

__version__ = "0.1.0.dev0"
__all__ = [
    "App",
    "AppConfig",
    "ConfigurationError",
    "DocsBuildError",
    "HTTPError",
    "MethodNotAllowed",
    "NotFound",
    "Page",
    "PageFrozenError",
    "Request",
    "Response",
    "WrenError",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import wren`` fast while providing a clean top-level API.
    """
    if name == "App":
        from wren.app import App

        return App

    if name == "AppConfig":
        from wren.config import AppConfig

        return AppConfig

    if name == "Page":
        from wren.docs.page import Page

        return Page

    if name == "Request":
        from wren.http.request import Request

        return Request

    if name == "Response":
        from wren.http.response import Response

        return Response

    if name in (
        "ConfigurationError",
        "DocsBuildError",
        "HTTPError",
        "MethodNotAllowed",
        "NotFound",
        "PageFrozenError",
        "WrenError",
    ):
        from wren import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)

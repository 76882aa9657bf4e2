"""Wren application class.

Mutable during setup (route registration, docs mounting).
Frozen at runtime when app.run() or __call__() is first invoked.
"""

import logging
import threading
from collections.abc import Callable
from pathlib import Path

from kida import Environment

from wren._internal.asgi import Receive, Scope, Send
from wren._internal.types import Handler
from wren.config import AppConfig
from wren.docs.binder import bind_docs, bind_sitemap
from wren.docs.builder import build_tree
from wren.docs.page import Page
from wren.markdown.renderer import MarkdownRenderer, Renderer
from wren.routing.route import Route
from wren.routing.router import Router
from wren.server.dispatcher import Dispatcher
from wren.static import StaticResolver
from wren.templating.integration import PageRenderer, create_environment

logger = logging.getLogger("wren.server")


class App:
    """The wren application.

    Usage::

        app = App(AppConfig(server_name="Handbook"))
        app.mount_docs("docs")

        @app.get("/health")
        def health(request, params):
            return Response("ok", content_type="text/plain")

        app.run()

    Setup is single-threaded. The freeze transition uses a Lock + double
    check so exactly one thread compiles the router, even if the server
    calls ``__call__()`` from several threads on the first request.
    """

    __slots__ = (
        "_dispatcher",
        "_docs",
        "_freeze_lock",
        "_frozen",
        "_kida_env",
        "_markdown",
        "_page_renderer",
        "_router",
        "_static",
        "config",
    )

    def __init__(
        self,
        config: AppConfig | None = None,
        *,
        markdown: Renderer | None = None,
        kida_env: Environment | None = None,
    ) -> None:
        self.config: AppConfig = config or AppConfig()
        self._router = Router()
        self._dispatcher = Dispatcher(
            self._router,
            error_page=self.config.error_page,
            traceback_style=self.config.traceback_style,
        )
        self._markdown: Renderer | None = markdown
        self._kida_env: Environment | None = kida_env
        self._page_renderer: PageRenderer | None = None
        self._static: StaticResolver | None = None
        self._docs: Page | None = None
        self._frozen = False
        self._freeze_lock = threading.Lock()
        _configure_logging(self.config.log_level)

    # -- Route registration --

    def route(
        self,
        path: str,
        *,
        methods: list[str] | None = None,
        name: str | None = None,
    ) -> Callable[[Handler], Handler]:
        """Register a route handler via decorator.

        The handler is called as ``handler(request, path_params)`` and
        returns a ``Response``, a ``(body, content_type)`` pair, or a body.
        A later registration for the same path and method replaces an
        earlier one.
        """

        def decorator(func: Handler) -> Handler:
            self._check_not_frozen()
            route_methods = frozenset(m.upper() for m in (methods or ["GET"]))
            self._router.add(Route(path=path, handler=func, methods=route_methods, name=name))
            return func

        return decorator

    def get(self, path: str, *, name: str | None = None) -> Callable[[Handler], Handler]:
        """Register a GET route handler via decorator."""
        return self.route(path, methods=["GET"], name=name)

    # -- Documentation --

    def mount_docs(self, docs_dir: str | Path) -> Page:
        """Build the page tree from *docs_dir* and route every page.

        Raises ``DocsBuildError`` if the tree cannot be built; there is
        no retry.
        """
        self._check_not_frozen()

        root = build_tree(docs_dir, self.markdown)
        count = bind_docs(
            root,
            self._router,
            renderer=self.page_renderer,
            server_name=self.config.server_name,
            template=self.config.docs_template,
        )
        if self.config.docs_sitemap:
            bind_sitemap(root, self._router, base_url=self.config.base_url)

        logger.info("Mounted %d docs routes from %s", count, docs_dir)
        self._docs = root
        return root

    @property
    def docs(self) -> Page:
        """Root of the mounted documentation tree."""
        if self._docs is None:
            msg = "No docs mounted. Call app.mount_docs() first."
            raise RuntimeError(msg)
        return self._docs

    @property
    def markdown(self) -> Renderer:
        if self._markdown is None:
            self._markdown = MarkdownRenderer(
                plugins=self.config.markdown_plugins or None,
                highlight=self.config.markdown_highlight,
            )
        return self._markdown

    @property
    def page_renderer(self) -> PageRenderer:
        if self._page_renderer is None:
            if self._kida_env is None:
                self._kida_env = create_environment(self.config)
            self._page_renderer = PageRenderer(self._kida_env)
        return self._page_renderer

    # -- Runtime state --

    @property
    def router(self) -> Router:
        return self._router

    @property
    def dispatcher(self) -> Dispatcher:
        return self._dispatcher

    @property
    def static(self) -> StaticResolver | None:
        """Static file resolver, once the app is frozen (``None`` if disabled)."""
        return self._static

    # -- Server --

    def run(self) -> None:
        """Start serving at ``config.base_url``.

        Compiles the app, then blocks in a single-worker pounce server.
        """
        self._ensure_frozen()

        from wren.server.serve import run_server

        run_server(self, self.config.host, self.config.port, base_url=self.config.base_url)

    def shutdown(self) -> None:
        """Signal the dispatcher to refuse further requests."""
        self._dispatcher.stop()

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point."""
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return

        self._ensure_frozen()
        await self._dispatcher(scope, receive, send)

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        """Freeze at startup; stop the dispatcher at shutdown."""
        while True:
            message = await receive()
            msg_type = message["type"]

            if msg_type == "lifespan.startup":
                try:
                    self._ensure_frozen()
                except Exception as exc:
                    await send({"type": "lifespan.startup.failed", "message": str(exc)})
                    return
                await send({"type": "lifespan.startup.complete"})

            elif msg_type == "lifespan.shutdown":
                self.shutdown()
                await send({"type": "lifespan.shutdown.complete"})
                return

    # -- Internal --

    def _ensure_frozen(self) -> None:
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._freeze()

    def _freeze(self) -> None:
        """Wire the static fallback and compile the router.

        MUST only be called while holding _freeze_lock.
        """
        if self.config.static_dir is not None:
            self._static = StaticResolver(self.config.static_dir, error_page=self.config.error_page)
            self._router.static_handler = self._static

        self._router.compile()
        self._frozen = True

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify the app after it has started serving requests. "
                "Register routes and mount docs before calling app.run()."
            )
            raise RuntimeError(msg)


def _configure_logging(level: str) -> None:
    """Send wren's log lines to stderr at *level*.

    Runs before any docs are mounted so the bind lines are not lost.
    A no-op when the root logger already has handlers.
    """
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

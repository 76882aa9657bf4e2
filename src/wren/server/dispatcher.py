"""Request dispatch — the only component that touches raw ASGI HTTP scopes.

Each request is matched against the router and the resulting payload is
written with its content type and an explicit length. Requests are
handled one at a time: a lock ensures a handler never starts before the
previous one has returned, whatever concurrency the server offers.

Failures never stop the server. An exception raised while handling a
request is logged and, if nothing has been sent yet, answered with a
500. If the response had already started, it is left as is.
"""

from __future__ import annotations

import logging
import threading
from typing import Any

import anyio

from wren._internal.asgi import Receive, Scope, Send
from wren.config import DEFAULT_ERROR_PAGE
from wren.errors import HTTPError
from wren.http.request import Request
from wren.http.response import Response
from wren.routing.router import Router
from wren.server.errors import log_error
from wren.server.sender import send_response

logger = logging.getLogger("wren.server")

ERROR_CONTENT_TYPE = "text/html"


class Dispatcher:
    """Serialized ASGI request handler.

    Usage::

        dispatcher = Dispatcher(router, error_page="<h1>Nope</h1>")
        await dispatcher(scope, receive, send)   # one HTTP request
        dispatcher.stop()                        # refuse further requests

    ``stop()`` is the cancellation signal. It may be called from any
    thread; every request checks it before matching and, once set, is
    answered with ``503`` and the error page.
    """

    __slots__ = ("_error_page", "_lock", "_router", "_stop_event", "_traceback_style")

    def __init__(
        self,
        router: Router,
        *,
        error_page: str = DEFAULT_ERROR_PAGE,
        traceback_style: str = "compact",
    ) -> None:
        self._router = router
        self._error_page = error_page
        self._traceback_style = traceback_style
        self._lock = anyio.Lock()
        self._stop_event = threading.Event()

    @property
    def router(self) -> Router:
        return self._router

    @property
    def stopped(self) -> bool:
        return self._stop_event.is_set()

    def stop(self) -> None:
        """Set the cancellation signal. Idempotent."""
        if not self._stop_event.is_set():
            logger.info("Dispatcher stopping; new requests will be refused")
        self._stop_event.set()

    def error_response(self, status: int = 404) -> Response:
        """The configured error page as an HTML response with *status*."""
        return Response(body=self._error_page, status=status, content_type=ERROR_CONTENT_TYPE)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            return
        async with self._lock:
            await self._handle(scope, send)

    async def _handle(self, scope: Scope, send: Send) -> None:
        response_started = False

        async def tracking_send(message: dict[str, Any]) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        request: Request | None = None
        try:
            request = Request.from_asgi(scope)
            logger.debug("Request %s %s", request.method, request.url)

            response = await self._dispatch(request)
            await send_response(response, tracking_send, head=request.method == "HEAD")
        except Exception as exc:
            log_error(exc, request, style=self._traceback_style)
            if response_started:
                return
            try:
                await send_response(self.error_response(500), send)
            except Exception as send_exc:
                logger.warning("Could not send error response: %s", send_exc)

    async def _dispatch(self, request: Request) -> Response:
        if self.stopped:
            return self.error_response(503).with_header("Connection", "close")

        try:
            response = await self._router.match_route(request)
        except HTTPError as exc:
            logger.debug("%d %s %s: %s", exc.status, request.method, request.path, exc.detail)
            response = self.error_response(exc.status)
            for name, value in exc.headers:
                response = response.with_header(name, value)
            return response

        if response is None:
            logger.debug("404 %s %s", request.method, request.path)
            return self.error_response(404)
        return _to_response(response)


def _to_response(value: Any) -> Response:
    """Accept a Response, a ``(body, content_type)`` pair, or a bare body."""
    if isinstance(value, Response):
        return value
    if isinstance(value, tuple):
        body, content_type = value
        return Response(body=body, content_type=content_type)
    if isinstance(value, str | bytes):
        return Response(body=value)
    msg = f"Handler returned {type(value).__name__}; expected Response, (body, content_type), str or bytes."
    raise TypeError(msg)

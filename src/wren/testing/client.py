"""In-process client for wren applications.

Calls the app's ASGI entry point directly. Docs pages and static files
are GET targets, so requests carry no body.
"""

from typing import Any

from wren.app import App
from wren.http.response import Response


class TestClient:
    """Drive an :class:`~wren.app.App` without a socket.

    Usage::

        async with TestClient(app) as client:
            response = await client.get("/docs")
            assert response.status == 200

    The returned :class:`Response` keeps ``content-length`` among its
    headers so tests can compare it against the body.
    """

    __test__ = False  # not a pytest test class
    __slots__ = ("app",)

    def __init__(self, app: App) -> None:
        self.app = app

    async def __aenter__(self) -> "TestClient":
        self.app._ensure_frozen()
        return self

    async def __aexit__(self, *args: object) -> None:
        return None

    async def get(self, path: str, *, headers: dict[str, str] | None = None) -> Response:
        return await self.request("GET", path, headers=headers)

    async def head(self, path: str, *, headers: dict[str, str] | None = None) -> Response:
        return await self.request("HEAD", path, headers=headers)

    async def request(
        self,
        method: str,
        path: str,
        *,
        headers: dict[str, str] | None = None,
    ) -> Response:
        """Send one request and collect the messages the app sends back."""
        path_part, _, query = path.partition("?")
        scope: dict[str, Any] = {
            "type": "http",
            "asgi": {"version": "3.0"},
            "http_version": "1.1",
            "method": method.upper(),
            "path": path_part,
            "query_string": query.encode("latin-1"),
            "headers": [
                (name.lower().encode("latin-1"), value.encode("latin-1"))
                for name, value in (headers or {}).items()
            ],
            "client": ("127.0.0.1", 0),
        }

        async def receive() -> dict[str, Any]:
            return {"type": "http.request", "body": b"", "more_body": False}

        messages: list[dict[str, Any]] = []

        async def send(message: dict[str, Any]) -> None:
            messages.append(message)

        await self.app(scope, receive, send)
        return _collect(messages)


def _collect(messages: list[dict[str, Any]]) -> Response:
    start = next(m for m in messages if m["type"] == "http.response.start")
    body = b"".join(m.get("body", b"") for m in messages if m["type"] == "http.response.body")

    content_type = ""
    extra: list[tuple[str, str]] = []
    for raw_name, raw_value in start.get("headers", []):
        name, value = raw_name.decode("latin-1"), raw_value.decode("latin-1")
        if name == "content-type":
            content_type = value
        else:
            extra.append((name, value))

    return Response(body=body, status=start["status"], content_type=content_type, headers=tuple(extra))

"""Single-worker server startup.

Wren handles one request at a time, so pounce always runs with one
worker and no reload. Pounce's ``run()`` takes an import string, but
wren has a live ``App`` object, so ``pounce.Server`` is used directly
with the ASGI callable.
"""

from __future__ import annotations

import logging

logger = logging.getLogger("wren.server")


def run_server(app: object, host: str, port: int, *, base_url: str | None = None) -> None:
    """Serve *app* on *host*:*port* until the process is interrupted.

    Args:
        app: ASGI callable (wren App instance).
        host: Bind host address.
        port: Bind port number.
        base_url: Public URL printed in the startup lines.
    """
    from pounce.config import ServerConfig
    from pounce.server import Server

    url = base_url or f"http://{host}:{port}/"
    logger.info("Starting server @ %s", url)

    config = ServerConfig(host=host, port=port, workers=1, reload=False)
    server = Server(config, app)
    server.run()
    logger.info("Server stopped @ %s", url)

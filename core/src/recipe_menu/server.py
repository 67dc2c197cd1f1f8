from __future__ import annotations

import logging
import socket

import uvicorn

from recipe_menu.app import create_app
from recipe_menu.config import AppConfig

logger = logging.getLogger(__name__)


def bind_socket(host: str, port: int, *, backlog: int = 2048) -> socket.socket:
    """Create a listening TCP socket; OSError (e.g. port in use) is left to the caller."""

    family = socket.AF_INET6 if ":" in host else socket.AF_INET
    sock = socket.socket(family, socket.SOCK_STREAM)
    try:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.bind((host, port))
        sock.listen(backlog)
    except OSError:
        sock.close()
        raise
    sock.set_inheritable(True)
    return sock


def serve(config: AppConfig) -> None:
    host = config.network.bind_host
    sock = bind_socket(host, config.network.port)
    port = sock.getsockname()[1]
    logger.info("Recipe app running at 'http://%s:%s'", host, port)

    server = uvicorn.Server(
        uvicorn.Config(create_app(config), host=host, port=port, log_config=None)
    )
    server.run(sockets=[sock])

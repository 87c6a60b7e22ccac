"""ASGI entrypoint, ``uvicorn central_publisher.main:app``."""

from __future__ import annotations

import uvicorn

from .factory import create_app
from .settings import get_settings

app = create_app()


def run() -> None:
    settings = get_settings()
    uvicorn.run(app, host=settings.server_host, port=settings.server_port, log_config=None)

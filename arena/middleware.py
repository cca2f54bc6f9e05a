import logging

from starlette.middleware.cors import CORSMiddleware

from .config import ALLOWED_ORIGINS

log = logging.getLogger(__name__)


def add_cors_middleware(app):
    return CORSMiddleware(
        app=app,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


def add_logging_middleware(app):
    async def middleware(scope, receive, send):
        if scope["type"] in ("http", "websocket"):
            log.debug(f"Request: {scope['type']} {scope['path']}")
        await app(scope, receive, send)

    return middleware

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from broadcaster import Broadcast

from .config import BROADCAST_URL, CARD_CATALOG_PATH
from .database import create_db_and_tables
from .dependencies import init_room_manager
from .game import load_catalog
from .middleware import add_cors_middleware, add_logging_middleware
from .routers import auth_router, users_router, rooms_router, cards_router, websocket_router

log = logging.getLogger(__name__)

broadcast = Broadcast(BROADCAST_URL)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # a bad catalog stops the server before any match can start
    catalog = load_catalog(CARD_CATALOG_PATH)
    create_db_and_tables()
    await broadcast.connect()
    manager = init_room_manager(broadcast, catalog)
    yield
    for match in manager.rooms.values():
        match.close()
    await broadcast.disconnect()
    log.info("shutting down")


app = FastAPI(title="Arena Round Server", lifespan=lifespan)
app.add_middleware(add_cors_middleware)
app.add_middleware(add_logging_middleware)

app.include_router(auth_router)
app.include_router(users_router)
app.include_router(rooms_router)
app.include_router(cards_router)
app.include_router(websocket_router)


@app.get("/health")
async def health():
    return {"status": "healthy"}

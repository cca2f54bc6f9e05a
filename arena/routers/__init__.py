from .auth import router as auth_router
from .users import router as users_router
from .rooms import router as rooms_router
from .cards import router as cards_router
from .websocket_router import router as websocket_router

__all__ = ["auth_router", "users_router", "rooms_router", "cards_router", "websocket_router"]

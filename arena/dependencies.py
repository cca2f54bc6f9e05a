from typing import Annotated
from broadcaster import Broadcast
from fastapi import Depends
from .game import CardCatalog, RoomManager

# singleton pattern
_manager_instance: RoomManager | None = None


def init_room_manager(broadcast: Broadcast, catalog: CardCatalog) -> RoomManager:
    """Create the process-wide RoomManager; called once from the app lifespan."""
    global _manager_instance
    _manager_instance = RoomManager(broadcast, catalog)
    return _manager_instance


def get_room_manager() -> RoomManager:
    if _manager_instance is None:
        raise RuntimeError("Room manager not initialized")
    return _manager_instance


def get_catalog(manager: Annotated[RoomManager, Depends(get_room_manager)]) -> CardCatalog:
    return manager.catalog


# convenience type aliases for dependency injection
RoomManagerDep = Annotated[RoomManager, Depends(get_room_manager)]
CatalogDep = Annotated[CardCatalog, Depends(get_catalog)]

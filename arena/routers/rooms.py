from fastapi import APIRouter, HTTPException, status
from sqlmodel import select

from ..auth import CurrentUser
from ..database import SessionDep
from ..dependencies import CatalogDep, RoomManagerDep
from ..models import Room
from ..schemas import RoomCreate, RoomPublic

import logging

log = logging.getLogger(__name__)

router = APIRouter(tags=["rooms"])


def _room_public(room: Room, manager) -> RoomPublic:
    match = manager.rooms.get(str(room.id))
    return RoomPublic(
        **room.model_dump(include=set(RoomPublic.model_fields) - {"players", "round"}),
        players=match.players if match else [],
        round=match.controller.snapshot() if match and match.controller.round_number else None,
    )


@router.post("/create-room", response_model=RoomPublic)
async def create_room(
    room: RoomCreate,
    session: SessionDep,
    current_user: CurrentUser,
    catalog: CatalogDep,
    manager: RoomManagerDep,
):
    if room.slot_count > len(catalog):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"slot_count {room.slot_count} exceeds catalog size {len(catalog)}",
        )

    db_room = Room(**room.model_dump(), created_by=current_user.id)
    session.add(db_room)
    session.commit()
    session.refresh(db_room)
    log.info(f"Room {db_room.id} created by {current_user.username}")
    return _room_public(db_room, manager)


@router.get("/rooms", response_model=list[RoomPublic])
async def get_rooms(session: SessionDep, manager: RoomManagerDep):
    rooms = session.exec(select(Room).where(Room.disabled == False)).all()  # noqa: E712
    return [_room_public(room, manager) for room in rooms]


@router.get("/room/{room_id}", response_model=RoomPublic)
async def get_room(room_id: int, session: SessionDep, manager: RoomManagerDep):
    room = session.get(Room, room_id)
    if not room:
        raise HTTPException(status_code=404, detail="Room not found")
    return _room_public(room, manager)

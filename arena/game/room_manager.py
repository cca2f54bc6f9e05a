from broadcaster import Broadcast
from sqlmodel import Session

from ..models import Room, User
from .events import PickRejected
from .catalog import CardCatalog
from .exceptions import RoomNotFound
from .match import Match
from .round_state import PickResult

import logging

log = logging.getLogger(__name__)


class RoomManager:
    def __init__(self, broadcast: Broadcast, catalog: CardCatalog):
        self.broadcast = broadcast
        self.catalog = catalog
        self.rooms: dict[str, Match] = {}

    def get_or_create_room(self, room_id: str, session: Session) -> Match:
        if room_id not in self.rooms:
            try:
                room = session.get(Room, int(room_id))
            except ValueError:
                room = None
            if not room or room.disabled:
                raise RoomNotFound(room_id)

            host = session.get(User, room.created_by) if room.created_by is not None else None
            self.rooms[room_id] = Match(
                room_id=room_id,
                catalog=self.catalog,
                broadcast=self.broadcast,
                config=room.match_config(),
                host=host.username if host else None,
                max_players=room.max_players,
            )
        return self.rooms[room_id]

    async def release_player(self, room_id: str, username: str) -> None:
        match = self.rooms.get(room_id)
        if not match:
            return

        await match.remove_player(username)
        if len(match) == 0:
            log.info(f"Room {room_id} is empty, dropping match state")
            match.close()
            del self.rooms[room_id]

    async def handle_start_round(self, room_id: str, username: str) -> bool:
        match = self.rooms.get(room_id)
        if not match:
            return False

        if not match.is_host(username):
            log.debug(f"{username} is not the host of room {room_id}, start_round ignored")
            return False

        await match.controller.start_round()
        return True

    async def handle_player_pick(
        self, room_id: str, username: str, slot_index: int
    ) -> PickResult | None:
        match = self.rooms.get(room_id)
        if not match:
            return None

        result = await match.controller.submit_pick(username, slot_index)
        if not result.accepted:
            await match.transport.send_to(
                username,
                PickRejected(
                    round=match.controller.round_number,
                    slot=slot_index,
                    reason=result.reason.value,
                ).model_dump(),
            )
        return result

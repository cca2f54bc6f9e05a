import json
import logging
from typing import Protocol

from broadcaster import Broadcast
from fastapi import WebSocket
from fastapi.websockets import WebSocketState

log = logging.getLogger(__name__)


class Transport(Protocol):
    """What the Round Controller needs from the network: one, or everyone."""

    async def broadcast(self, message: dict) -> None: ...

    async def send_to(self, player_id: str, message: dict) -> None: ...


def room_channel(room_id: str) -> str:
    return f"match_{room_id}"


class RoomTransport:
    """
    Broadcasts go through the broadcaster channel of the room, so every
    subscriber sees them in publish order. Private messages go straight to
    the player's websocket.
    """

    def __init__(self, room_id: str, broadcast: Broadcast):
        self.room_id = room_id
        self.channel = room_channel(room_id)
        self._broadcast = broadcast
        self._connections: dict[str, WebSocket] = {}

    def attach(self, player_id: str, websocket: WebSocket) -> None:
        self._connections[player_id] = websocket

    def detach(self, player_id: str) -> None:
        self._connections.pop(player_id, None)

    async def broadcast(self, message: dict) -> None:
        await self._broadcast.publish(channel=self.channel, message=json.dumps(message))

    async def send_to(self, player_id: str, message: dict) -> None:
        websocket = self._connections.get(player_id)
        if websocket is None:
            log.debug(f"No connection for {player_id} in room {self.room_id}, dropping {message.get('type')}")
            return
        if websocket.client_state == WebSocketState.CONNECTED:
            await websocket.send_json(message)

import json
import logging
from sqlmodel import Session
from fastapi import WebSocket
from fastapi.websockets import WebSocketState

from ..game import ArenaError, RoomManager
from ..game.transport import room_channel

log = logging.getLogger(__name__)


class WebSocketHandler:
    """Handles WebSocket message processing and communication"""

    @staticmethod
    async def handle_messages(
            websocket: WebSocket,
            room_id: str,
            username: str,
            session: Session,
            manager: RoomManager,
    ) -> None:
        """Main message handling loop for WebSocket connections"""
        try:
            match = manager.get_or_create_room(room_id, session)
            await match.add_player(username, websocket)
        except ArenaError as e:
            log.info(f"{username} cannot join room {room_id}: {e}")
            await websocket.send_json({"type": "error", "message": str(e)})
            await websocket.close(code=4004, reason=str(e))
            return

        try:
            async for message in websocket.iter_text():
                try:
                    msg_data = json.loads(message)
                    if not isinstance(msg_data, dict):
                        raise ValueError("message must be a JSON object")
                    await WebSocketHandler._process_message(
                        msg_data, websocket, room_id, username, manager
                    )
                except (json.JSONDecodeError, ValueError, TypeError, KeyError) as e:
                    log.warning(f"Error processing message from {username}: {e}")
                    await websocket.send_json(
                        {"type": "error", "message": "Invalid message format"}
                    )

        finally:
            await manager.release_player(room_id, username)

    @staticmethod
    async def _process_message(
            msg_data: dict,
            websocket: WebSocket,
            room_id: str,
            username: str,
            manager: RoomManager,
    ) -> None:
        """Process individual WebSocket messages based on type"""
        msg_type = msg_data.get("type")

        if msg_type == "pick":
            await WebSocketHandler._handle_pick(msg_data, room_id, username, manager)
        elif msg_type == "start_round":
            await WebSocketHandler._handle_start_round(websocket, room_id, username, manager)
        else:
            await websocket.send_json(
                {"type": "error", "message": f"Unknown message type: {msg_type}"}
            )

    @staticmethod
    async def _handle_pick(
            msg_data: dict, room_id: str, username: str, manager: RoomManager
    ) -> None:
        """Handle a card pick"""
        slot = msg_data["slot"]
        # 1.9 or "2" must not be read as a different slot
        if not isinstance(slot, int) or isinstance(slot, bool):
            raise ValueError(f"slot must be an integer, got {slot!r}")
        await manager.handle_player_pick(room_id, username, slot)

    @staticmethod
    async def _handle_start_round(
            websocket: WebSocket, room_id: str, username: str, manager: RoomManager
    ) -> None:
        """Handle round start requests, host only"""
        if not await manager.handle_start_round(room_id, username):
            await websocket.send_json(
                {"type": "error", "message": "Only the host can start a round"}
            )

    @staticmethod
    async def broadcast_to_client(
            websocket: WebSocket, room_id: str, manager: RoomManager
    ) -> None:
        """Relay the room channel to this client"""
        async with manager.broadcast.subscribe(channel=room_channel(room_id)) as subscriber:
            async for event in subscriber:
                if websocket.client_state == WebSocketState.CONNECTED:
                    await websocket.send_text(event.message)

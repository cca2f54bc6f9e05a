import logging
from sqlmodel import Session
import anyio

from ..database import get_session
from ..auth import decode_access_token, get_user_by_username
from ..dependencies import get_room_manager
from .websocket_handler import WebSocketHandler

from fastapi import APIRouter, Depends, Query, WebSocket, status

log = logging.getLogger(__name__)
router = APIRouter()


async def authenticate_websocket(
        websocket: WebSocket, token: str | None, session: Session
) -> str | None:
    """Authenticate WebSocket connection and return the username"""
    username = decode_access_token(token) if token else None
    if not username:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return None

    current_user = get_user_by_username(session, username=username)
    if not current_user or current_user.disabled:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return None

    return username


@router.websocket("/ws/{room_id}")
async def websocket_endpoint(
        websocket: WebSocket,
        room_id: str,
        token: str | None = Query(None),
        session: Session = Depends(get_session),
) -> None:
    """Main WebSocket endpoint for match connections"""
    manager = get_room_manager()

    username = await authenticate_websocket(websocket, token, session)
    if not username:
        return

    await websocket.accept()

    try:
        # Receive picks and relay the room channel concurrently
        async with anyio.create_task_group() as task_group:

            async def run_message_handler() -> None:
                """Task to handle incoming WebSocket messages"""
                await WebSocketHandler.handle_messages(
                    websocket=websocket,
                    room_id=room_id,
                    username=username,
                    session=session,
                    manager=manager,
                )
                task_group.cancel_scope.cancel()

            task_group.start_soon(run_message_handler)

            await WebSocketHandler.broadcast_to_client(
                websocket=websocket, room_id=room_id, manager=manager
            )

    except Exception as e:
        log.error(f"WebSocket error for user {username}: {e}")
        raise

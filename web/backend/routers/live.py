from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect

from playhead.service import PlayerService

from ..deps import get_player_service
from ..sync_manager import sync_manager

router = APIRouter()


@router.websocket("/ws/player")
async def player_websocket(
    websocket: WebSocket, service: PlayerService = Depends(get_player_service)
):
    """Push player state to renderers as it changes."""
    await sync_manager.connect(websocket)

    try:
        # Send current state immediately
        with service.lock:
            state = service.store.snapshot().to_dict()
        await websocket.send_json({"type": "player:state", "data": state})

        # Renderers only listen; incoming messages are ignored
        while True:
            await websocket.receive_text()

    except WebSocketDisconnect:
        sync_manager.disconnect(websocket)

import time
from typing import Any

from fastapi import WebSocket
from loguru import logger


class SyncManager:
    """Manages WebSocket connections and broadcasts player state updates."""

    def __init__(self):
        self.connections: list[WebSocket] = []

    async def connect(self, ws: WebSocket) -> None:
        """Accept and store a new WebSocket connection."""
        await ws.accept()
        self.connections.append(ws)

    def disconnect(self, ws: WebSocket) -> None:
        """Remove a WebSocket connection."""
        if ws in self.connections:
            self.connections.remove(ws)

    async def broadcast_state(self, state: dict[str, Any]) -> None:
        await self.broadcast("player:state", state)

    async def broadcast(self, event_type: str, data: Any) -> None:
        """Send a message to all connected clients."""
        message = {
            "type": event_type,
            "data": data,
            "ts": time.time(),
        }
        dead_connections: list[WebSocket] = []

        for conn in self.connections:
            try:
                await conn.send_json(message)
            except Exception as e:
                logger.debug(f"Dropping WebSocket after send failure: {e}")
                dead_connections.append(conn)

        for conn in dead_connections:
            self.connections.remove(conn)


# Singleton instance
sync_manager = SyncManager()

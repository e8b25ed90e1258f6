import threading
from typing import Optional

from playhead.core.config import load_config
from playhead.service import PlayerService

_service: Optional[PlayerService] = None
_service_lock = threading.Lock()


def get_player_service() -> PlayerService:
    """FastAPI dependency for the process-wide player service."""
    global _service
    with _service_lock:
        if _service is None:
            _service = PlayerService(load_config())
        return _service


def shutdown_player_service() -> None:
    global _service
    with _service_lock:
        if _service is not None:
            _service.shutdown()
            _service = None

from typing import Any

from fastapi import APIRouter, Depends, Query
from loguru import logger

from playhead.service import PlayerService

from ..deps import get_player_service
from ..sync_manager import sync_manager

router = APIRouter()


@router.get("/history")
async def get_history(
    limit: int = Query(100, ge=1, le=100),
    service: PlayerService = Depends(get_player_service),
) -> list[dict[str, Any]]:
    """Recently played tracks, most recent first."""
    with service.lock:
        return [entry.to_dict() for entry in service.store.history[:limit]]


@router.delete("/history")
async def clear_history(service: PlayerService = Depends(get_player_service)) -> dict[str, Any]:
    with service.lock:
        removed = len(service.store.history)
        service.store.clear_history()
    logger.info(f"Cleared {removed} history entries")
    await sync_manager.broadcast("history:cleared", {"removed": removed})
    return {"removed": removed}


@router.get("/resume")
async def get_resume(service: PlayerService = Depends(get_player_service)) -> list[dict[str, Any]]:
    """Partially played tracks for the "continue watching" row."""
    with service.lock:
        return [item.to_dict() for item in service.resume_items()]

"""Player router for queue and playback control.

Every mutating endpoint applies one store action under the service lock and
returns the resulting player state. Connected WebSocket clients receive the
same state as a ``player:state`` event.
"""

from typing import Any, Callable

from fastapi import APIRouter, Depends
from loguru import logger

from playhead.domain.playback.state import PlayerStore
from playhead.service import PlayerService

from ..deps import get_player_service
from ..schemas import (
    DurationRequest,
    LoadingRequest,
    PlayRequest,
    ProgressReport,
    ProgressReportResponse,
    SeekRequest,
    SetCurrentTrackRequest,
    SetQueueRequest,
    SpeedRequest,
    VideoModeRequest,
    VolumeRequest,
)
from ..sync_manager import sync_manager

router = APIRouter()


async def _apply(
    service: PlayerService, action: Callable[[PlayerStore], Any]
) -> dict[str, Any]:
    """Run ``action`` against the store and broadcast the new state."""
    with service.lock:
        action(service.store)
        state = service.store.snapshot().to_dict()
    await sync_manager.broadcast_state(state)
    return state


@router.get("/player/state")
async def get_state(service: PlayerService = Depends(get_player_service)) -> dict[str, Any]:
    """Current player state (history excluded, see /history)."""
    with service.lock:
        return service.store.snapshot().to_dict()


# Queue and track selection


@router.post("/player/play")
async def play(
    request: PlayRequest, service: PlayerService = Depends(get_player_service)
) -> dict[str, Any]:
    """Play a track, replacing the queue when one is given."""
    track = request.track.to_track()
    queue = [item.to_track() for item in request.queue] if request.queue is not None else None
    logger.info(f"Play requested: {track.id} (queue={len(queue) if queue is not None else 'kept'})")
    return await _apply(service, lambda store: store.play_track(track, queue))


@router.post("/player/queue")
async def set_queue(
    request: SetQueueRequest, service: PlayerService = Depends(get_player_service)
) -> dict[str, Any]:
    items = [item.to_track() for item in request.items]
    return await _apply(service, lambda store: store.set_queue(items, request.start_index))


@router.post("/player/current")
async def set_current_track(
    request: SetCurrentTrackRequest, service: PlayerService = Depends(get_player_service)
) -> dict[str, Any]:
    track = request.track.to_track() if request.track else None
    return await _apply(service, lambda store: store.set_current_track(track))


@router.post("/player/next")
async def play_next(service: PlayerService = Depends(get_player_service)) -> dict[str, Any]:
    return await _apply(service, PlayerStore.play_next)


@router.post("/player/previous")
async def play_previous(service: PlayerService = Depends(get_player_service)) -> dict[str, Any]:
    return await _apply(service, PlayerStore.play_previous)


@router.post("/player/ended")
async def track_ended(service: PlayerService = Depends(get_player_service)) -> dict[str, Any]:
    """Playback element reached the end of the current track."""
    return await _apply(service, PlayerStore.handle_ended)


@router.post("/player/close")
async def close_mini_player(service: PlayerService = Depends(get_player_service)) -> dict[str, Any]:
    return await _apply(service, PlayerStore.close_mini_player)


# Transport and preferences


@router.post("/player/toggle")
async def toggle_play(service: PlayerService = Depends(get_player_service)) -> dict[str, Any]:
    return await _apply(service, PlayerStore.toggle_play)


@router.post("/player/resume")
async def resume(service: PlayerService = Depends(get_player_service)) -> dict[str, Any]:
    return await _apply(service, PlayerStore.play)


@router.post("/player/pause")
async def pause(service: PlayerService = Depends(get_player_service)) -> dict[str, Any]:
    return await _apply(service, PlayerStore.pause)


@router.post("/player/volume")
async def set_volume(
    request: VolumeRequest, service: PlayerService = Depends(get_player_service)
) -> dict[str, Any]:
    return await _apply(service, lambda store: store.set_volume(request.volume))


@router.post("/player/mute")
async def toggle_mute(service: PlayerService = Depends(get_player_service)) -> dict[str, Any]:
    return await _apply(service, PlayerStore.toggle_mute)


@router.post("/player/shuffle")
async def toggle_shuffle(service: PlayerService = Depends(get_player_service)) -> dict[str, Any]:
    return await _apply(service, PlayerStore.toggle_shuffle)


@router.post("/player/repeat")
async def toggle_repeat(service: PlayerService = Depends(get_player_service)) -> dict[str, Any]:
    return await _apply(service, PlayerStore.toggle_repeat)


@router.post("/player/speed")
async def set_speed(
    request: SpeedRequest, service: PlayerService = Depends(get_player_service)
) -> dict[str, Any]:
    return await _apply(service, lambda store: store.set_playback_speed(request.speed))


@router.post("/player/video-mode")
async def set_video_mode(
    request: VideoModeRequest, service: PlayerService = Depends(get_player_service)
) -> dict[str, Any]:
    return await _apply(service, lambda store: store.set_video_mode(request.enabled))


# Playback element reports


@router.post("/player/progress", response_model=ProgressReportResponse)
async def report_progress(
    request: ProgressReport, service: PlayerService = Depends(get_player_service)
) -> ProgressReportResponse:
    """Periodic position report. Dropped (accepted=false) while seeking."""
    with service.lock:
        accepted = service.store.report_progress(
            request.played_seconds, request.duration, request.buffered
        )
        state = service.store.snapshot().to_dict()
    if accepted:
        await sync_manager.broadcast_state(state)
    return ProgressReportResponse(accepted=accepted, state=state)


@router.post("/player/seek/start")
async def begin_seek(service: PlayerService = Depends(get_player_service)) -> dict[str, Any]:
    return await _apply(service, PlayerStore.begin_seek)


@router.post("/player/seek/end")
async def end_seek(
    request: SeekRequest, service: PlayerService = Depends(get_player_service)
) -> dict[str, Any]:
    return await _apply(service, lambda store: store.end_seek(request.position))


@router.post("/player/duration")
async def set_duration(
    request: DurationRequest, service: PlayerService = Depends(get_player_service)
) -> dict[str, Any]:
    return await _apply(service, lambda store: store.set_duration(request.duration))


@router.post("/player/loading")
async def set_loading(
    request: LoadingRequest, service: PlayerService = Depends(get_player_service)
) -> dict[str, Any]:
    return await _apply(service, lambda store: store.set_loading(request.is_loading))


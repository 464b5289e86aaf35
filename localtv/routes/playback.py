import logging
from typing import Annotated

from fastapi import APIRouter, Depends

from localtv.configs import settings
from localtv.playback.ad_scheduler import AdBreakScheduler
from localtv.schemas import AdBreakConfig, AdBreakConfigUpdate, LoadItemsRequest, MediaItem, NextItemResponse, PlaybackStatus

logger = logging.getLogger(__name__)

playlist_router = APIRouter()
ads_router = APIRouter()

# One scheduler per process. Endpoints are all ``async def`` so calls are
# serialized on the event loop thread.
_scheduler: AdBreakScheduler[MediaItem] = AdBreakScheduler(config=settings.ad_break_config())


def get_scheduler() -> AdBreakScheduler[MediaItem]:
    return _scheduler


Scheduler = Annotated[AdBreakScheduler, Depends(get_scheduler)]


def _status(scheduler: AdBreakScheduler[MediaItem]) -> PlaybackStatus:
    return PlaybackStatus(
        total_items=len(scheduler.queue),
        total_ads=len(scheduler.ad_items),
        played_count=scheduler.queue.played_count,
        normal_items_played=scheduler.normal_items_played,
        in_break=scheduler.in_break,
        current=scheduler.queue.current,
        ads=scheduler.config,
    )


@playlist_router.post("/load", summary="Load the playlist", response_model=PlaybackStatus)
async def load_playlist(load_request: LoadItemsRequest, scheduler: Scheduler):
    scheduler.load(load_request.items)
    return _status(scheduler)


@playlist_router.post("/next", summary="Dispense the next item", response_model=NextItemResponse)
async def next_item(scheduler: Scheduler):
    """Next ad of a running break, or the next video of the rotation."""
    item = scheduler.next()
    if item is None:
        logger.info("No items available for playback")
        return NextItemResponse()
    return NextItemResponse(item=item, is_ad=scheduler.last_was_ad)


@playlist_router.post("/previous", summary="Go back one item", response_model=NextItemResponse)
async def previous_item(scheduler: Scheduler):
    return NextItemResponse(item=scheduler.previous())


@playlist_router.post("/clear", summary="Clear the playlist", response_model=PlaybackStatus)
async def clear_playlist(scheduler: Scheduler):
    scheduler.clear()
    return _status(scheduler)


@playlist_router.get("/status", summary="Playback state", response_model=PlaybackStatus)
async def playback_status(scheduler: Scheduler):
    return _status(scheduler)


@ads_router.post("/load", summary="Load the ad pool", response_model=PlaybackStatus)
async def load_ads(load_request: LoadItemsRequest, scheduler: Scheduler):
    scheduler.load_ads(load_request.items)
    return _status(scheduler)


@ads_router.post("/clear", summary="Remove all ads", response_model=PlaybackStatus)
async def clear_ads(scheduler: Scheduler):
    scheduler.clear_ads()
    return _status(scheduler)


@ads_router.post("/configure", summary="Configure ad breaks", response_model=AdBreakConfig)
async def configure_ads(update: AdBreakConfigUpdate, scheduler: Scheduler):
    """Omitted fields keep their value; out-of-range values are clamped rather than rejected."""
    return scheduler.configure(
        frequency=update.frequency,
        min_per_break=update.min_per_break,
        max_per_break=update.max_per_break,
        enabled=update.enabled,
    )

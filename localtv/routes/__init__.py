from .tracks import tracks_router
from .playback import playlist_router, ads_router

__all__ = ["tracks_router", "playlist_router", "ads_router"]

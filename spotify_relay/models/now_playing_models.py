# spotify_relay/models/now_playing_models.py
from pydantic import BaseModel


class NowPlayingResponse(BaseModel):
    """
    Simplified "currently playing" payload for the dashboard.

    Only ``isPlaying`` is always present; the track fields are left as None
    (and dropped from the JSON) when nothing is playing or the album has no
    artwork.
    """
    isPlaying: bool
    trackName: str | None = None
    artistName: str | None = None
    albumName: str | None = None
    albumArt: str | None = None
    trackUrl: str | None = None

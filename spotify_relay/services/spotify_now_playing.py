# spotify_relay/services/spotify_now_playing.py
import logging
from typing import Dict, Optional

import requests

from spotify_relay.config import settings
from spotify_relay.models.now_playing_models import NowPlayingResponse
from spotify_relay.services.spotify_errors import SpotifyApiError, SpotifyTokenExpiredError

logger = logging.getLogger(__name__)


def fetch_now_playing(access_token: str) -> Optional[Dict]:
    """
    呼叫 Spotify Currently Playing API。
    回傳：
    - dict：Spotify 原始 payload（is_playing / item ...）
    - None：沒有播放（204 或空 body）
    丟出：
    - SpotifyTokenExpiredError：401，需要重新登入
    - SpotifyApiError：其他錯誤
    """
    headers = {"Authorization": f"Bearer {access_token}"}

    try:
        r = requests.get(
            settings.SPOTIFY_NOW_PLAYING_URL,
            headers=headers,
            timeout=settings.SPOTIFY_HTTP_TIMEOUT,
        )
    except requests.exceptions.RequestException as e:
        raise SpotifyApiError(f"currently-playing request failed: {e}") from e

    logger.debug("Spotify currently-playing status: %s", r.status_code)

    # 204 -> No Content
    if r.status_code == 204:
        return None

    if not r.ok:
        logger.debug("Spotify currently-playing body: %s", r.text)

    # 401 -> Token 過期
    if r.status_code == 401:
        raise SpotifyTokenExpiredError(r.text)

    if not r.ok:
        raise SpotifyApiError(f"currently-playing returned {r.status_code}: {r.text}")

    # 沒內容 → 避免 json decode 錯誤
    if not r.text:
        return None

    # Spotify 可能回 HTML（proxy / rate limit / blocking）
    if not r.headers.get("content-type", "").startswith("application/json"):
        raise SpotifyApiError(f"non-JSON response: {r.text[:200]}")

    try:
        return r.json()
    except ValueError as e:
        raise SpotifyApiError(f"malformed JSON: {r.text[:200]}") from e


def to_now_playing(data: Optional[Dict]) -> NowPlayingResponse:
    if not data or not data.get("item"):
        return NowPlayingResponse(isPlaying=False)

    track = data["item"]
    album = track.get("album") or {}
    images = album.get("images") or []

    try:
        return NowPlayingResponse(
            isPlaying=bool(data.get("is_playing")),
            trackName=track.get("name"),
            artistName=", ".join(artist["name"] for artist in track.get("artists", [])),
            albumName=album.get("name"),
            # images[0] 是最大張
            albumArt=images[0].get("url") if images else None,
            trackUrl=(track.get("external_urls") or {}).get("spotify"),
        )
    except (KeyError, TypeError, AttributeError) as e:
        raise SpotifyApiError(f"unexpected track payload: {e}") from e

# spotify_relay/api/now_playing_api.py
import logging

from fastapi import APIRouter, Depends

from spotify_relay.api.api_errors import ApiError
from spotify_relay.config import settings
from spotify_relay.models.now_playing_models import NowPlayingResponse
from spotify_relay.models.spotify_auth_models import DebugTokenResponse, ErrorResponse, HealthResponse
from spotify_relay.services.session_store import SessionCredential, get_session
from spotify_relay.services.spotify_errors import (
    SpotifyApiError,
    SpotifyAuthError,
    SpotifyTokenExpiredError,
)
from spotify_relay.services.spotify_now_playing import fetch_now_playing, to_now_playing
from spotify_relay.services.spotify_oauth_service import refresh_access_token

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "/now-playing",
    response_model=NowPlayingResponse,
    response_model_exclude_none=True,
    responses={401: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def now_playing(session: SessionCredential = Depends(get_session)):
    access_token = session.access_token
    if not access_token:
        raise ApiError(401, "Not authenticated")

    try:
        data = fetch_now_playing(access_token)
        return to_now_playing(data)
    except SpotifyTokenExpiredError:
        # 不自動 refresh，也不清掉 token，使用者要重新登入
        raise ApiError(401, "Token expired, please login again")
    except SpotifyApiError as e:
        logger.error("Error fetching now playing: %s", e)
        raise ApiError(500, "Failed to fetch currently playing track")


@router.get("/health", response_model=HealthResponse)
def health(session: SessionCredential = Depends(get_session)):
    return {"status": "ok", "authenticated": session.is_authenticated}


@router.get(
    "/debug/token",
    response_model=DebugTokenResponse,
    responses={404: {"model": ErrorResponse}},
)
def debug_token(session: SessionCredential = Depends(get_session)):
    """Returns the raw access token. Only for local development."""
    if not settings.ENABLE_DEBUG_ENDPOINTS:
        raise ApiError(404, "Not found")

    snap = session.snapshot()
    return {
        "accessToken": snap["access_token"],
        "hasToken": bool(snap["access_token"]),
        "expiresAt": snap["expires_at"],
    }


@router.post(
    "/token/refresh",
    response_model=HealthResponse,
    responses={401: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)
def refresh_token(session: SessionCredential = Depends(get_session)):
    """
    手動用 refresh_token 換新的 access_token。
    /now-playing 不會自己呼叫這個。
    """
    current = session.refresh_token
    if not current:
        raise ApiError(401, "Not authenticated")

    try:
        token = refresh_access_token(current)
    except SpotifyAuthError as e:
        logger.error("Error refreshing access token: %s", e)
        raise ApiError(502, "Failed to refresh access token")

    session.store(token.access_token, token.refresh_token, token.expires_in)
    logger.info("Refreshed Spotify access token")

    return {"status": "ok", "authenticated": True}

# spotify_relay/api/spotify_auth_api.py
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import PlainTextResponse, RedirectResponse

from spotify_relay.config import settings
from spotify_relay.services.session_store import SessionCredential, get_session
from spotify_relay.services.spotify_errors import SpotifyAuthError
from spotify_relay.services.spotify_oauth_service import build_authorize_url, exchange_code

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "/login",
    summary="Spotify Login",
    description="Redirect 使用者到 Spotify 授權頁（authorization code flow）。",
    response_class=RedirectResponse,
    status_code=302,
)
def login():
    return RedirectResponse(url=build_authorize_url(), status_code=302)


@router.get(
    "/callback",
    summary="Spotify OAuth Callback",
    description=(
        "Spotify 授權完成後會 redirect 到此 endpoint 並附上 code，"
        "後端用 code 交換 access_token 後導向 dashboard。"
    ),
)
def callback(
    code: Optional[str] = Query(None, description="Spotify 回傳的授權 code"),
    error: Optional[str] = Query(None, description="使用者拒絕授權時 Spotify 回傳的錯誤"),
    session: SessionCredential = Depends(get_session),
):
    if not code:
        if error:
            logger.warning("Spotify authorization denied: %s", error)
        return PlainTextResponse("Error: No authorization code received", status_code=400)

    try:
        token = exchange_code(code)
    except SpotifyAuthError as e:
        logger.error("Error getting access token: %s", e)
        return PlainTextResponse("Error during authentication", status_code=502)

    session.store(token.access_token, token.refresh_token, token.expires_in)
    logger.info("Successfully authenticated with Spotify")

    return RedirectResponse(url=settings.DASHBOARD_PATH, status_code=302)

# spotify_relay/services/spotify_oauth_service.py
import base64
import logging
from typing import Dict
from urllib.parse import urlencode

import requests
from pydantic import ValidationError

from spotify_relay.config import settings
from spotify_relay.models.spotify_auth_models import SpotifyTokenResponse
from spotify_relay.services.spotify_errors import SpotifyAuthError

logger = logging.getLogger(__name__)


def build_authorize_url() -> str:
    query = urlencode({
        "response_type": "code",
        "client_id": settings.CLIENT_ID,
        "scope": settings.SCOPES,
        "redirect_uri": settings.REDIRECT_URI,
    })
    return f"{settings.SPOTIFY_AUTHORIZE_URL}?{query}"


def _basic_auth_header() -> str:
    raw = f"{settings.CLIENT_ID}:{settings.CLIENT_SECRET}".encode()
    return "Basic " + base64.b64encode(raw).decode()


def _request_token(payload: Dict) -> SpotifyTokenResponse:
    headers = {
        "Authorization": _basic_auth_header(),
        "Content-Type": "application/x-www-form-urlencoded",
    }

    try:
        r = requests.post(
            settings.SPOTIFY_TOKEN_URL,
            data=payload,
            headers=headers,
            timeout=settings.SPOTIFY_HTTP_TIMEOUT,
        )
    except requests.exceptions.RequestException as e:
        raise SpotifyAuthError(f"token request failed: {e}") from e

    if not r.ok:
        raise SpotifyAuthError(f"token endpoint returned {r.status_code}: {r.text}")

    try:
        body = r.json()
    except ValueError as e:
        raise SpotifyAuthError(f"token endpoint returned {r.status_code} with a non-JSON body") from e

    # body 裡可能有 access_token，只記 keys
    keys = sorted(body) if isinstance(body, dict) else type(body).__name__
    try:
        return SpotifyTokenResponse(**body)
    except (TypeError, ValidationError):
        # Spotify 回了 200 但沒有 access_token
        raise SpotifyAuthError(
            f"unexpected token response from {r.status_code}, keys: {keys}"
        ) from None


def exchange_code(code: str) -> SpotifyTokenResponse:
    """
    用 callback 拿到的 authorization code 跟 Spotify 交換 access_token / refresh_token。
    失敗或沒有 refresh_token 時丟出 SpotifyAuthError。
    """
    token = _request_token({
        "grant_type": "authorization_code",
        "code": code,
        "redirect_uri": settings.REDIRECT_URI,
    })

    # access_token / refresh_token 要一起存
    if not token.refresh_token:
        raise SpotifyAuthError("token response has no refresh_token")

    return token


def refresh_access_token(refresh_token: str) -> SpotifyTokenResponse:
    token = _request_token({
        "grant_type": "refresh_token",
        "refresh_token": refresh_token,
    })

    # Spotify 有時不會回 refresh token，要沿用舊的
    if not token.refresh_token:
        token.refresh_token = refresh_token

    return token

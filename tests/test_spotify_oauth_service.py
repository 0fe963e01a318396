import base64
import json
import unittest
from unittest.mock import MagicMock, patch
from urllib.parse import parse_qs, urlparse

import requests

from spotify_relay.config import settings
from spotify_relay.services.spotify_errors import SpotifyAuthError
from spotify_relay.services.spotify_oauth_service import (
    build_authorize_url,
    exchange_code,
    refresh_access_token,
)


def make_response(status_code, body=None):
    r = MagicMock()
    r.status_code = status_code
    r.ok = 200 <= status_code < 300
    r.text = json.dumps(body) if body is not None else ""
    if body is None:
        r.json.side_effect = ValueError("no JSON")
    else:
        r.json.return_value = body
    return r


@patch.object(settings, "CLIENT_ID", "client-id")
@patch.object(settings, "CLIENT_SECRET", "client-secret")
@patch.object(settings, "REDIRECT_URI", "http://127.0.0.1:3000/callback")
class TestSpotifyOAuthService(unittest.TestCase):
    def test_build_authorize_url(self):
        url = urlparse(build_authorize_url())
        self.assertEqual(f"{url.scheme}://{url.netloc}{url.path}", "https://accounts.spotify.com/authorize")

        query = parse_qs(url.query)
        self.assertEqual(query["response_type"], ["code"])
        self.assertEqual(query["client_id"], ["client-id"])
        self.assertEqual(query["redirect_uri"], ["http://127.0.0.1:3000/callback"])
        self.assertEqual(
            query["scope"][0].split(" "),
            [
                "user-read-currently-playing",
                "user-read-playback-state",
                "user-read-recently-played",
                "user-top-read",
            ],
        )

    @patch("spotify_relay.services.spotify_oauth_service.requests.post")
    def test_exchange_code_request_shape(self, mock_post):
        mock_post.return_value = make_response(200, {"access_token": "A", "refresh_token": "B", "expires_in": 3600})

        token = exchange_code("the-code")

        self.assertEqual(token.access_token, "A")
        self.assertEqual(token.refresh_token, "B")
        self.assertEqual(token.expires_in, 3600)

        args, kwargs = mock_post.call_args
        self.assertEqual(args[0], "https://accounts.spotify.com/api/token")
        self.assertEqual(
            kwargs["data"],
            {
                "grant_type": "authorization_code",
                "code": "the-code",
                "redirect_uri": "http://127.0.0.1:3000/callback",
            },
        )
        expected_auth = "Basic " + base64.b64encode(b"client-id:client-secret").decode()
        self.assertEqual(kwargs["headers"]["Authorization"], expected_auth)
        self.assertEqual(kwargs["headers"]["Content-Type"], "application/x-www-form-urlencoded")
        self.assertEqual(kwargs["timeout"], settings.SPOTIFY_HTTP_TIMEOUT)

    @patch("spotify_relay.services.spotify_oauth_service.requests.post")
    def test_exchange_code_rejected(self, mock_post):
        mock_post.return_value = make_response(400, {"error": "invalid_grant"})
        with self.assertRaises(SpotifyAuthError):
            exchange_code("bad-code")

    @patch("spotify_relay.services.spotify_oauth_service.requests.post")
    def test_exchange_code_without_access_token(self, mock_post):
        mock_post.return_value = make_response(200, {"token_type": "Bearer"})
        with self.assertRaises(SpotifyAuthError):
            exchange_code("the-code")

    @patch("spotify_relay.services.spotify_oauth_service.requests.post")
    def test_exchange_code_without_refresh_token(self, mock_post):
        mock_post.return_value = make_response(200, {"access_token": "A"})
        with self.assertRaises(SpotifyAuthError):
            exchange_code("the-code")

    @patch("spotify_relay.services.spotify_oauth_service.requests.post")
    def test_exchange_code_empty_access_token(self, mock_post):
        mock_post.return_value = make_response(200, {"access_token": "", "refresh_token": "B"})
        with self.assertRaises(SpotifyAuthError):
            exchange_code("the-code")

    @patch("spotify_relay.services.spotify_oauth_service.requests.post")
    def test_invalid_token_response_does_not_leak_token(self, mock_post):
        mock_post.return_value = make_response(
            200, {"access_token": "live-secret-token", "refresh_token": "B", "expires_in": "soon"}
        )
        with self.assertRaises(SpotifyAuthError) as ctx:
            exchange_code("the-code")

        message = str(ctx.exception)
        self.assertNotIn("live-secret-token", message)
        self.assertIn("access_token", message)
        self.assertIn("200", message)

    @patch("spotify_relay.services.spotify_oauth_service.requests.post")
    def test_exchange_code_non_json(self, mock_post):
        mock_post.return_value = make_response(200)
        with self.assertRaises(SpotifyAuthError):
            exchange_code("the-code")

    @patch("spotify_relay.services.spotify_oauth_service.requests.post")
    def test_exchange_code_network_error(self, mock_post):
        mock_post.side_effect = requests.exceptions.ConnectionError("down")
        with self.assertRaises(SpotifyAuthError):
            exchange_code("the-code")

    @patch("spotify_relay.services.spotify_oauth_service.requests.post")
    def test_refresh_keeps_old_refresh_token(self, mock_post):
        mock_post.return_value = make_response(200, {"access_token": "new-access", "expires_in": 3600})

        token = refresh_access_token("old-refresh")

        self.assertEqual(token.access_token, "new-access")
        self.assertEqual(token.refresh_token, "old-refresh")
        _, kwargs = mock_post.call_args
        self.assertEqual(kwargs["data"], {"grant_type": "refresh_token", "refresh_token": "old-refresh"})

    @patch("spotify_relay.services.spotify_oauth_service.requests.post")
    def test_refresh_uses_rotated_refresh_token(self, mock_post):
        mock_post.return_value = make_response(200, {"access_token": "new-access", "refresh_token": "new-refresh"})
        self.assertEqual(refresh_access_token("old-refresh").refresh_token, "new-refresh")


if __name__ == "__main__":
    unittest.main()

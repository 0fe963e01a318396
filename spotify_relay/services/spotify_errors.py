# spotify_relay/services/spotify_errors.py


class SpotifyError(Exception):
    """Base class for failures talking to Spotify."""


class SpotifyAuthError(SpotifyError):
    """Token exchange or refresh was rejected or could not be completed."""


class SpotifyTokenExpiredError(SpotifyError):
    """Spotify answered 401 to a data API call."""


class SpotifyApiError(SpotifyError):
    """Any other failure of a Spotify data API call."""

from pydantic import BaseModel, Field


# Spotify token endpoint response (authorization_code / refresh_token grants)
class SpotifyTokenResponse(BaseModel):
    access_token: str = Field(min_length=1)
    refresh_token: str | None = None
    expires_in: int | None = None
    token_type: str = "Bearer"
    scope: str | None = None


class HealthResponse(BaseModel):
    status: str
    authenticated: bool


class DebugTokenResponse(BaseModel):
    accessToken: str | None = None
    hasToken: bool
    expiresAt: int | None = None  # unix timestamp


class ErrorResponse(BaseModel):
    error: str

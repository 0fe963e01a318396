import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from spotify_relay.config import settings

# === Import Routers ===
from spotify_relay.api.api_errors import ApiError, api_error_handler
from spotify_relay.api.spotify_auth_api import router as spotify_auth_router
from spotify_relay.api.now_playing_api import router as now_playing_router

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

app = FastAPI(
    title="Spotify Now-Playing Relay",
    description=(
        "Single-user relay for: "
        "• Spotify OAuth (authorization code) "
        "• Currently playing track"
    ),
    version="1.0.0"
)

# === CORS Middleware ===
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(ApiError, api_error_handler)

# === Spotify OAuth（login / callback） ===
app.include_router(spotify_auth_router, tags=["Spotify OAuth"])

# === Now playing / health / debug ===
app.include_router(now_playing_router, prefix="/api", tags=["Now Playing"])

# === Dashboard (static)，要放在 routers 之後 ===
if os.path.isdir(settings.STATIC_DIR):
    app.mount("/", StaticFiles(directory=settings.STATIC_DIR, html=True), name="static")
else:
    logging.getLogger(__name__).warning("Static directory not found: %s", settings.STATIC_DIR)

from fastapi import FastAPI

from jukebox.api.errors import register_error_handlers
from jukebox.api.health import router as health_router
from jukebox.api.spotify.routes import router as spotify_router
from jukebox.config import JUKEBOX_LOG_LEVEL
from jukebox.core import configure_logging

configure_logging(JUKEBOX_LOG_LEVEL)

app = FastAPI(
    title="Party Jukebox API",
    version="0.1.0",
    description="Shared Spotify queue for guests, playback control for the admin.",
)

register_error_handlers(app)

app.include_router(health_router, prefix="/api", tags=["health"])
app.include_router(spotify_router, prefix="/api/spotify", tags=["spotify"])

from dotenv import load_dotenv
import os

load_dotenv()

# Spotify credentials (REQUIRED for token exchange)
SPOTIFY_CLIENT_ID = os.getenv("SPOTIFY_CLIENT_ID")
SPOTIFY_CLIENT_SECRET = os.getenv("SPOTIFY_CLIENT_SECRET")
SPOTIFY_REDIRECT_URI = os.getenv(
    "SPOTIFY_REDIRECT_URI", "http://127.0.0.1:8888/callback"
)

# Admin password for playback control / queue removal (REQUIRED for admin routes)
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD")

# Spotify API constants
SPOTIFY_AUTH_URL = "https://accounts.spotify.com/authorize"
SPOTIFY_TOKEN_URL = "https://accounts.spotify.com/api/token"
SPOTIFY_API_BASE = "https://api.spotify.com/v1"

SCOPES = [
    "user-modify-playback-state",
    "user-read-playback-state",
    "user-read-currently-playing",
    "playlist-modify-public",
    "playlist-modify-private",
    "playlist-read-private",
]

# Outbound HTTP timeout (seconds)
SPOTIFY_HTTP_TIMEOUT = float(os.getenv("SPOTIFY_HTTP_TIMEOUT", "15"))

# Token lifecycle
TOKEN_EXPIRY_MARGIN_SECONDS = 5 * 60
DEFAULT_EXPIRES_IN = 3600

# Managed "radio" playlist
PLAYLIST_NAME = os.getenv("JUKEBOX_PLAYLIST_NAME", "Party Jukebox Radio")
PLAYLIST_DESCRIPTION = os.getenv(
    "JUKEBOX_PLAYLIST_DESCRIPTION",
    "Shared party queue managed by the jukebox. Most recent requests first.",
)
PLAYLIST_PAGE_SIZE = 100
PLAYLIST_SCAN_LIMIT = 500

SEARCH_LIMIT_DEFAULT = 10
SEARCH_LIMIT_MAX = 20

# Pause between a mutation and its verification read (Spotify is eventually consistent)
CONSISTENCY_DELAY_SECONDS = 0.5

# Server
JUKEBOX_HOST = os.getenv("JUKEBOX_HOST", "127.0.0.1")
JUKEBOX_PORT = int(os.getenv("JUKEBOX_PORT", "8888"))
JUKEBOX_LOG_LEVEL = os.getenv("JUKEBOX_LOG_LEVEL", "INFO")

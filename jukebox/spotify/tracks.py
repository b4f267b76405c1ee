import re
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from jukebox.config import SEARCH_LIMIT_MAX
from jukebox.core import NotFoundError, Track

from .gateway import SpotifyGateway
from .responses import is_success, json_or_none

TRACK_URI_PREFIX = "spotify:track:"
_TRACK_URI_RE = re.compile(r"^spotify:track:([A-Za-z0-9]+)$")
_TRACK_URL_RE = re.compile(r"^https?://open\.spotify\.com/(?:intl-[a-z-]+/)?track/([A-Za-z0-9]+)")
_BARE_ID_RE = re.compile(r"^[A-Za-z0-9]{22}$")


def normalize_track_uri(value: Optional[str], allow_bare_id: bool = False) -> Optional[str]:
    """
    Turn a track URI, an open.spotify.com track link, or (optionally) a bare
    22-character track id into a canonical ``spotify:track:<id>`` URI.
    Returns None when the value is none of those.
    """
    if not value:
        return None
    value = value.strip()
    if _TRACK_URI_RE.match(value):
        return value
    m = _TRACK_URL_RE.match(value)
    if m:
        return f"{TRACK_URI_PREFIX}{m.group(1)}"
    if allow_bare_id and _BARE_ID_RE.match(value):
        return f"{TRACK_URI_PREFIX}{value}"
    return None


def track_id_from_uri(uri: str) -> str:
    return uri.rsplit(":", 1)[-1]


def search_tracks(
    gateway: SpotifyGateway, query: str, limit: int = 10
) -> Tuple[List[Track], int]:
    """Search tracks; returns (tracks, total). `limit` is clamped to 1..20."""
    limit = max(1, min(int(limit), SEARCH_LIMIT_MAX))
    data = gateway.request_json(
        "GET",
        "search",
        params={"q": query, "type": "track", "limit": limit},
        failure_message="Search failed",
    ) or {}
    tracks_page = data.get("tracks") or {}
    items = [i for i in tracks_page.get("items") or [] if i]
    return [Track.from_spotify(i) for i in items], tracks_page.get("total", len(items))


def search_first_track_uri(gateway: SpotifyGateway, song_name: str) -> str:
    tracks, _ = search_tracks(gateway, song_name, limit=1)
    if not tracks or not tracks[0].uri:
        raise NotFoundError(f"Song not found: {song_name}")
    return tracks[0].uri


@dataclass
class NowPlaying:
    is_playing: bool = False
    track: Optional[Track] = None


def get_currently_playing(gateway: SpotifyGateway) -> NowPlaying:
    """
    Read the currently playing item. 204 (nothing playing) and non-track
    items (podcast episodes) are reported as no track.
    """
    r = gateway.call("GET", "me/player/currently-playing")
    data = json_or_none(r) if is_success(r) else None
    if not data:
        return NowPlaying()
    item = data.get("item")
    track = Track.from_spotify(item) if item and item.get("uri") else None
    return NowPlaying(is_playing=bool(data.get("is_playing")), track=track)


@dataclass
class PlayerQueue:
    currently_playing: Optional[Track] = None
    queue: List[Track] = field(default_factory=list)


def get_player_queue(gateway: SpotifyGateway) -> PlayerQueue:
    """Read Spotify's immediate player queue, in the order Spotify reports it."""
    data = gateway.request_json(
        "GET", "me/player/queue", failure_message="Failed to read player queue"
    ) or {}
    current = data.get("currently_playing")
    return PlayerQueue(
        currently_playing=Track.from_spotify(current) if current else None,
        queue=[
            Track.from_spotify(item, source="queue")
            for item in data.get("queue") or []
            if item and item.get("uri")
        ],
    )

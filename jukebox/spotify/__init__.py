"""Public façade for the jukebox.spotify package.

This module exposes the Spotify Web API integration used by the jukebox:
token storage and exchange, the authenticated gateway, track and player
helpers, and the managed radio playlist. Callers should import these
symbols from this façade instead of the internal modules.
"""

from .gateway import SpotifyGateway
from .oauth import (
    SpotifyAuthError,
    build_spotify_auth_url,
    exchange_code_for_token,
    refresh_access_token,
)
from .player import (
    PlaybackAction,
    PlaybackState,
    add_to_player_queue,
    get_playback_state,
    pause_playback,
    resume_playback,
    set_volume,
    skip_to_next,
    start_playback,
)
from .playlists import (
    RadioPlaylistManager,
    add_track_to_playlist,
    find_playlist_track,
    get_playlist_tracks,
    remove_track_from_playlist,
)
from .responses import is_success, json_or_none, spotify_error_message
from .token_store import TokenRecord, TokenStore
from .tracks import (
    NowPlaying,
    PlayerQueue,
    get_currently_playing,
    get_player_queue,
    normalize_track_uri,
    search_first_track_uri,
    search_tracks,
    track_id_from_uri,
)

__all__ = [
    "TokenStore",
    "TokenRecord",
    "SpotifyGateway",
    "SpotifyAuthError",
    "build_spotify_auth_url",
    "exchange_code_for_token",
    "refresh_access_token",
    "spotify_error_message",
    "is_success",
    "json_or_none",
    "PlaybackAction",
    "PlaybackState",
    "get_playback_state",
    "add_to_player_queue",
    "resume_playback",
    "start_playback",
    "pause_playback",
    "skip_to_next",
    "set_volume",
    "RadioPlaylistManager",
    "get_playlist_tracks",
    "find_playlist_track",
    "add_track_to_playlist",
    "remove_track_from_playlist",
    "NowPlaying",
    "PlayerQueue",
    "get_currently_playing",
    "get_player_queue",
    "normalize_track_uri",
    "search_first_track_uri",
    "search_tracks",
    "track_id_from_uri",
]

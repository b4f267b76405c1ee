"""Managed "radio" playlist.

Spotify's player queue cannot be listed completely, reordered, or have an
arbitrary item removed, so every queued song is also written to a private
playlist owned by the shared account. That playlist is the enumerable,
removable copy of the queue.
"""

from typing import List, Optional

from jukebox.config import (
    PLAYLIST_DESCRIPTION,
    PLAYLIST_NAME,
    PLAYLIST_PAGE_SIZE,
    PLAYLIST_SCAN_LIMIT,
)
from jukebox.core import (
    Track,
    UpstreamError,
    log_info,
    log_step,
    log_success,
    log_warning,
)

from .gateway import SpotifyGateway
from .responses import is_success, json_or_none, spotify_error_message


class RadioPlaylistManager:
    def __init__(
        self,
        gateway: SpotifyGateway,
        name: str = PLAYLIST_NAME,
        description: str = PLAYLIST_DESCRIPTION,
    ) -> None:
        self.gateway = gateway
        self.name = name
        self.description = description
        self._playlist_id: Optional[str] = None
        self._owner_id: Optional[str] = None

    @property
    def playlist_id(self) -> Optional[str]:
        """Cached id, without verification (None until first created)."""
        return self._playlist_id

    @property
    def playlist_uri(self) -> Optional[str]:
        return f"spotify:playlist:{self._playlist_id}" if self._playlist_id else None

    def clear(self) -> None:
        self._playlist_id = None
        self._owner_id = None

    def get_or_create_playlist_id(self) -> str:
        """
        Return the cached playlist id if Spotify still serves it, otherwise
        create a fresh private playlist and cache its id.
        """
        if self._playlist_id:
            if self._verify(self._playlist_id):
                return self._playlist_id
            log_warning(
                f"Radio playlist {self._playlist_id} is no longer reachable, recreating it."
            )
            self.clear()

        return self._create()

    def _verify(self, playlist_id: str) -> bool:
        """
        False only when Spotify says the playlist is gone (404) or now belongs
        to someone else. Any other failure keeps the cached id and raises.
        """
        r = self.gateway.call(
            "GET",
            f"playlists/{playlist_id}",
            params={"fields": "id,owner(id)"},
            retry_on_401=False,
        )
        if r.status_code == 404:
            return False
        if not is_success(r):
            raise UpstreamError(
                spotify_error_message(r, "Failed to verify radio playlist"),
                status=r.status_code,
            )
        data = json_or_none(r) or {}
        owner_id = (data.get("owner") or {}).get("id")
        if self._owner_id and owner_id and owner_id != self._owner_id:
            return False
        return True

    def _create(self) -> str:
        log_step(f"Creating radio playlist '{self.name}'...")
        me = self.gateway.request_json(
            "GET", "me", failure_message="Failed to look up Spotify user"
        ) or {}
        user_id = me.get("id")
        if not user_id:
            raise UpstreamError("Spotify did not return a user id")

        playlist = self.gateway.request_json(
            "POST",
            f"users/{user_id}/playlists",
            json={
                "name": self.name,
                "public": False,
                "description": self.description,
            },
            failure_message="Failed to create radio playlist",
        ) or {}
        if not playlist.get("id"):
            raise UpstreamError("Spotify did not return a playlist id")

        self._playlist_id = playlist["id"]
        self._owner_id = user_id
        log_success(f"Radio playlist created: {self._playlist_id}")
        return self._playlist_id


def get_playlist_tracks(
    gateway: SpotifyGateway,
    playlist_id: str,
    max_tracks: Optional[int] = None,
) -> List[Track]:
    """
    Return the playlist's tracks in playlist order, 100 per page.
    Stops after `max_tracks` when given. Local files and removed tracks
    (null track objects) are skipped.
    """
    tracks: List[Track] = []
    url: Optional[str] = f"playlists/{playlist_id}/tracks"
    params = {"limit": PLAYLIST_PAGE_SIZE}

    while url:
        data = gateway.request_json(
            "GET", url, params=params, failure_message="Failed to read radio playlist"
        ) or {}
        for item in data.get("items", []):
            track = item.get("track")
            if track and track.get("uri"):
                tracks.append(Track.from_spotify(track, source="playlist"))
            if max_tracks is not None and len(tracks) >= max_tracks:
                return tracks
        url = data.get("next")
        params = None  # next URL already includes params

    return tracks


def find_playlist_track(
    gateway: SpotifyGateway,
    playlist_id: str,
    uri: str,
    track_id: Optional[str] = None,
    scan_limit: int = PLAYLIST_SCAN_LIMIT,
) -> Optional[Track]:
    """Find a playlist entry by URI or bare track id, scanning at most `scan_limit` items."""
    for track in get_playlist_tracks(gateway, playlist_id, max_tracks=scan_limit):
        if track.uri == uri or (track_id and track.id == track_id):
            return track
    return None


def add_track_to_playlist(
    gateway: SpotifyGateway, playlist_id: str, uri: str, position: int = 0
) -> None:
    gateway.request_json(
        "POST",
        f"playlists/{playlist_id}/tracks",
        json={"uris": [uri], "position": position},
        failure_message="Failed to add song to radio playlist",
    )
    log_info(f"Added {uri} to radio playlist at position {position}.")


def remove_track_from_playlist(gateway: SpotifyGateway, playlist_id: str, uri: str) -> None:
    """Remove every occurrence of `uri` from the playlist."""
    gateway.request_json(
        "DELETE",
        f"playlists/{playlist_id}/tracks",
        json={"tracks": [{"uri": uri}]},
        failure_message="Failed to remove song from radio playlist",
    )
    log_info(f"Removed {uri} from radio playlist.")

"""In-memory stand-in for the parts of the Spotify Web API the jukebox uses.

FakeSession plugs into SpotifyGateway in place of requests.Session, so
tests exercise the real gateway (token policy, URL building, pagination)
against FakeSpotify's state.
"""

import json
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import parse_qs, urlparse

import requests

API_BASE = "https://api.spotify.com/v1"


def make_track(track_id: str, name: Optional[str] = None, artist: str = "Test Artist") -> Dict:
    return {
        "id": track_id,
        "name": name or f"Track {track_id}",
        "artists": [{"name": artist}],
        "album": {"name": "Test Album", "images": [{"url": f"https://img/{track_id}"}]},
        "uri": f"spotify:track:{track_id}",
        "duration_ms": 180000,
    }


def make_response(status: int, body: Any = None) -> requests.Response:
    r = requests.Response()
    r.status_code = status
    if body is None:
        r._content = b""
    elif isinstance(body, str):
        r._content = body.encode("utf-8")
        r.headers["Content-Type"] = "text/plain"
    else:
        r._content = json.dumps(body).encode("utf-8")
        r.headers["Content-Type"] = "application/json"
    return r


def spotify_error(status: int, message: str) -> requests.Response:
    return make_response(status, {"error": {"status": status, "message": message}})


class FakeSpotify:
    def __init__(self) -> None:
        self.user_id = "party-host"
        self.catalog: Dict[str, Dict] = {}
        self.search_results: Dict[str, List[str]] = {}
        self.playlists: Dict[str, List[str]] = {}
        self.player_queue: List[str] = []
        self.currently_playing: Optional[str] = None
        self.is_playing = False
        self.session_active = True
        self.context_uri: Optional[str] = None
        self.volume: Optional[int] = None
        # Deletes swallowed per uri, to mimic Spotify's consistency lag.
        self.sticky_deletes: Dict[str, int] = {}
        # Forced responses keyed by (METHOD, path), consumed in order.
        self.forced: Dict[Tuple[str, str], List[requests.Response]] = {}
        self.calls: List[Tuple[str, str, Optional[Dict], Any]] = []
        self.tokens_seen: List[str] = []
        self._playlist_counter = 0

    # -- setup helpers ------------------------------------------------

    def add_tracks(self, *track_ids: str) -> List[str]:
        uris = []
        for tid in track_ids:
            track = make_track(tid)
            self.catalog[track["uri"]] = track
            uris.append(track["uri"])
        return uris

    def add_playlist(self, playlist_id: str, uris: List[str]) -> None:
        self.playlists[playlist_id] = list(uris)

    def force(self, method: str, path: str, *responses: requests.Response) -> None:
        self.forced.setdefault((method, path), []).extend(responses)

    def calls_to(self, method: str, path: str) -> List[Tuple[str, str, Optional[Dict], Any]]:
        return [c for c in self.calls if c[0] == method and c[1] == path]

    # -- dispatch -----------------------------------------------------

    def handle(
        self,
        method: str,
        url: str,
        headers: Dict[str, str],
        params: Optional[Dict],
        body: Any,
    ) -> requests.Response:
        parsed = urlparse(url)
        path = parsed.path.replace("/v1/", "", 1).lstrip("/")
        query = {k: v[0] for k, v in parse_qs(parsed.query).items()}
        if params:
            query.update({k: str(v) for k, v in params.items()})

        self.calls.append((method, path, query or None, body))
        self.tokens_seen.append(headers.get("Authorization", ""))

        forced = self.forced.get((method, path))
        if forced:
            return forced.pop(0)

        parts = path.split("/")
        if path == "search":
            return self._search(query)
        if path == "me":
            return make_response(200, {"id": self.user_id})
        if parts[0] == "me" and len(parts) > 1 and parts[1] == "player":
            return self._player(method, "/".join(parts[2:]), query, body)
        if parts[0] == "users" and len(parts) == 3 and method == "POST":
            return self._create_playlist(body)
        if parts[0] == "playlists":
            return self._playlist(method, parts[1], parts[2:], query, body)
        return spotify_error(404, f"Unknown endpoint {method} {path}")

    def _search(self, query: Dict[str, str]) -> requests.Response:
        uris = self.search_results.get(query.get("q", ""), [])
        limit = int(query.get("limit", 20))
        items = [self.catalog[u] for u in uris[:limit]]
        return make_response(200, {"tracks": {"items": items, "total": len(uris)}})

    def _player(self, method: str, sub: str, query: Dict, body: Any) -> requests.Response:
        no_device = spotify_error(404, "Player command failed: No active device found")
        if method == "GET" and sub == "":
            if not self.session_active:
                return make_response(204)
            context = {"uri": self.context_uri} if self.context_uri else None
            return make_response(
                200,
                {"is_playing": self.is_playing, "context": context, "device": {"id": "dev1"}},
            )
        if method == "GET" and sub == "currently-playing":
            if not self.currently_playing:
                return make_response(204)
            return make_response(
                200,
                {"is_playing": self.is_playing, "item": self.catalog[self.currently_playing]},
            )
        if method == "GET" and sub == "queue":
            current = self.catalog.get(self.currently_playing) if self.currently_playing else None
            return make_response(
                200,
                {
                    "currently_playing": current,
                    "queue": [self.catalog[u] for u in self.player_queue],
                },
            )
        if method == "POST" and sub == "queue":
            if not self.session_active:
                return no_device
            self.player_queue.append(query["uri"])
            return make_response(204)
        if method == "PUT" and sub == "play":
            if not self.session_active:
                return no_device
            if body and body.get("context_uri"):
                self.context_uri = body["context_uri"]
                self.player_queue = []
            self.is_playing = True
            return make_response(204)
        if method == "PUT" and sub == "pause":
            if not self.session_active:
                return no_device
            self.is_playing = False
            return make_response(204)
        if method == "POST" and sub == "next":
            if not self.session_active:
                return no_device
            self.currently_playing = self.player_queue.pop(0) if self.player_queue else None
            return make_response(204)
        if method == "PUT" and sub == "volume":
            if not self.session_active:
                return no_device
            self.volume = int(query["volume_percent"])
            return make_response(204)
        return spotify_error(404, "Unknown player endpoint")

    def _create_playlist(self, body: Dict) -> requests.Response:
        self._playlist_counter += 1
        playlist_id = f"radio{self._playlist_counter}"
        self.playlists[playlist_id] = []
        return make_response(201, {"id": playlist_id, "name": body["name"]})

    def _playlist(
        self, method: str, playlist_id: str, rest: List[str], query: Dict, body: Any
    ) -> requests.Response:
        if playlist_id not in self.playlists:
            return spotify_error(404, "Resource not found")
        uris = self.playlists[playlist_id]

        if not rest and method == "GET":
            return make_response(200, {"id": playlist_id, "owner": {"id": self.user_id}})

        if rest == ["tracks"] and method == "GET":
            offset = int(query.get("offset", 0))
            limit = int(query.get("limit", 100))
            page = uris[offset : offset + limit]
            next_url = None
            if offset + limit < len(uris):
                next_url = (
                    f"{API_BASE}/playlists/{playlist_id}/tracks"
                    f"?offset={offset + limit}&limit={limit}"
                )
            return make_response(
                200,
                {
                    "items": [{"track": self.catalog[u]} for u in page],
                    "next": next_url,
                    "total": len(uris),
                },
            )
        if rest == ["tracks"] and method == "POST":
            position = body.get("position", len(uris))
            for offset, uri in enumerate(body["uris"]):
                uris.insert(position + offset, uri)
            return make_response(201, {"snapshot_id": "snap"})
        if rest == ["tracks"] and method == "DELETE":
            for entry in body["tracks"]:
                uri = entry["uri"]
                if self.sticky_deletes.get(uri, 0) > 0:
                    self.sticky_deletes[uri] -= 1
                    continue
                self.playlists[playlist_id] = [u for u in uris if u != uri]
                uris = self.playlists[playlist_id]
            return make_response(200, {"snapshot_id": "snap"})
        return spotify_error(404, "Unknown playlist endpoint")


class FakeSession:
    """Quacks like requests.Session for SpotifyGateway."""

    def __init__(self, spotify: FakeSpotify) -> None:
        self.spotify = spotify

    def request(self, method, url, headers=None, params=None, json=None, timeout=None):
        return self.spotify.handle(method, url, headers or {}, params, json)

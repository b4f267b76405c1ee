"""Playback primitives (/me/player/*).

Each helper returns the raw response so callers decide whether a failure
is fatal (admin control) or best-effort (enqueue side effects).
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

import requests

from .gateway import SpotifyGateway
from .responses import is_success, json_or_none


class PlaybackAction(str, Enum):
    PLAY = "play"
    PAUSE = "pause"
    NEXT = "next"
    VOLUME = "volume"


@dataclass
class PlaybackState:
    is_playing: bool
    context_uri: Optional[str]
    device_id: Optional[str]


def get_playback_state(gateway: SpotifyGateway) -> Optional[PlaybackState]:
    """
    Current player session, or None when no session is active (Spotify
    answers 204 with an empty body).
    """
    r = gateway.call("GET", "me/player")
    data = json_or_none(r) if is_success(r) else None
    if not data:
        return None
    context = data.get("context") or {}
    device = data.get("device") or {}
    return PlaybackState(
        is_playing=bool(data.get("is_playing")),
        context_uri=context.get("uri"),
        device_id=device.get("id"),
    )


def add_to_player_queue(gateway: SpotifyGateway, uri: str) -> requests.Response:
    return gateway.call("POST", "me/player/queue", params={"uri": uri})


def resume_playback(gateway: SpotifyGateway) -> requests.Response:
    """Resume without a body, which keeps the current context and queue."""
    return gateway.call("PUT", "me/player/play")


def start_playback(
    gateway: SpotifyGateway, context_uri: Optional[str] = None
) -> requests.Response:
    body = {"context_uri": context_uri} if context_uri else None
    return gateway.call("PUT", "me/player/play", json=body)


def pause_playback(gateway: SpotifyGateway) -> requests.Response:
    return gateway.call("PUT", "me/player/pause")


def skip_to_next(gateway: SpotifyGateway) -> requests.Response:
    return gateway.call("POST", "me/player/next")


def set_volume(gateway: SpotifyGateway, volume_percent: int) -> requests.Response:
    return gateway.call(
        "PUT", "me/player/volume", params={"volume_percent": volume_percent}
    )

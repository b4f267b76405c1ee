"""Process-wide singletons and request dependencies.

One TokenStore, one gateway and one radio playlist reference exist per
process (exactly one shared Spotify identity). Tests swap them through
`app.dependency_overrides`.
"""

import hmac
from typing import Optional

from fastapi import Header

from jukebox.config import ADMIN_PASSWORD
from jukebox.core import AdminUnauthorized, ConfigurationError, log_error
from jukebox.queue import QueueReconciler
from jukebox.spotify import RadioPlaylistManager, SpotifyGateway, TokenStore

token_store = TokenStore()
gateway = SpotifyGateway(token_store)
radio_playlist = RadioPlaylistManager(gateway)
reconciler = QueueReconciler(gateway, radio_playlist)


def get_token_store() -> TokenStore:
    return token_store


def get_gateway() -> SpotifyGateway:
    return gateway


def get_reconciler() -> QueueReconciler:
    return reconciler


def require_admin(password: Optional[str] = Header(default=None)) -> None:
    """Admin gate on the `password` header; independent of Spotify auth."""
    if not ADMIN_PASSWORD:
        log_error("ADMIN_PASSWORD not configured")
        raise ConfigurationError("Server configuration error: Admin password not set")
    if password is None or not hmac.compare_digest(
        password.encode("utf-8"), ADMIN_PASSWORD.encode("utf-8")
    ):
        raise AdminUnauthorized()

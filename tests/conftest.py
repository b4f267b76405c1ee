from typing import Dict, List

import pytest
from fastapi.testclient import TestClient

from api_main import app
from fakes import FakeSession, FakeSpotify
from jukebox.api import dependencies
from jukebox.queue import QueueReconciler
from jukebox.spotify import RadioPlaylistManager, SpotifyGateway, TokenStore


class FakeClock:
    def __init__(self, now: float = 1_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeRefresher:
    """Records refresh calls and hands out numbered access tokens."""

    def __init__(self) -> None:
        self.calls: List[str] = []
        self.fail = False
        self.rotate_refresh_token = False

    def __call__(self, refresh_token: str) -> Dict:
        self.calls.append(refresh_token)
        if self.fail:
            raise RuntimeError("invalid_grant")
        token_info = {
            "access_token": f"access-{len(self.calls) + 1}",
            "expires_in": 3600,
        }
        if self.rotate_refresh_token:
            token_info["refresh_token"] = f"refresh-{len(self.calls) + 1}"
        return token_info


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def spotify() -> FakeSpotify:
    return FakeSpotify()


@pytest.fixture
def refresher() -> FakeRefresher:
    return FakeRefresher()


@pytest.fixture
def token_store(clock: FakeClock) -> TokenStore:
    store = TokenStore(clock=clock)
    store.set_tokens("access-1", "refresh-1", 3600)
    return store


@pytest.fixture
def gateway(token_store, refresher, spotify) -> SpotifyGateway:
    return SpotifyGateway(token_store, refresher=refresher, session=FakeSession(spotify))


@pytest.fixture
def radio(gateway) -> RadioPlaylistManager:
    return RadioPlaylistManager(gateway, name="Test Radio")


@pytest.fixture
def reconciler(gateway, radio) -> QueueReconciler:
    return QueueReconciler(gateway, radio, sleep=lambda _: None)


@pytest.fixture
def client(token_store, gateway, reconciler, monkeypatch):
    monkeypatch.setattr(dependencies, "ADMIN_PASSWORD", "letmein")
    app.dependency_overrides[dependencies.get_token_store] = lambda: token_store
    app.dependency_overrides[dependencies.get_gateway] = lambda: gateway
    app.dependency_overrides[dependencies.get_reconciler] = lambda: reconciler
    yield TestClient(app)
    app.dependency_overrides.clear()

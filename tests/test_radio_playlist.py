import pytest

from fakes import spotify_error
from jukebox.core import UpstreamError
from jukebox.spotify import get_playlist_tracks


def test_first_call_creates_private_playlist(radio, spotify) -> None:
    playlist_id = radio.get_or_create_playlist_id()

    assert playlist_id == "radio1"
    assert radio.playlist_uri == "spotify:playlist:radio1"
    create = spotify.calls_to("POST", "users/party-host/playlists")
    assert len(create) == 1
    assert create[0][3]["public"] is False
    assert create[0][3]["name"] == "Test Radio"


def test_valid_cached_id_is_verified_once_without_mutation(radio, spotify) -> None:
    radio.get_or_create_playlist_id()
    spotify.calls.clear()

    assert radio.get_or_create_playlist_id() == "radio1"

    assert [(c[0], c[1]) for c in spotify.calls] == [("GET", "playlists/radio1")]


def test_missing_playlist_is_recreated_and_reused(radio, spotify) -> None:
    radio.get_or_create_playlist_id()
    del spotify.playlists["radio1"]

    new_id = radio.get_or_create_playlist_id()

    assert new_id == "radio2"
    assert radio.get_or_create_playlist_id() == "radio2"
    assert len(spotify.calls_to("POST", "users/party-host/playlists")) == 2


def test_verification_does_not_retry_on_401(radio, spotify, refresher) -> None:
    radio.get_or_create_playlist_id()
    spotify.force("GET", "playlists/radio1", spotify_error(401, "expired"))

    with pytest.raises(UpstreamError, match="expired"):
        radio.get_or_create_playlist_id()

    assert refresher.calls == []
    assert radio.playlist_id == "radio1"
    assert len(spotify.calls_to("POST", "users/party-host/playlists")) == 1


@pytest.mark.parametrize("status", [429, 502])
def test_transient_verification_failure_keeps_cached_playlist(radio, spotify, status) -> None:
    radio.get_or_create_playlist_id()
    spotify.force("GET", "playlists/radio1", spotify_error(status, "Try again later"))

    with pytest.raises(UpstreamError, match="Try again later") as exc_info:
        radio.get_or_create_playlist_id()

    assert exc_info.value.status == status
    assert radio.playlist_id == "radio1"
    assert len(spotify.calls_to("POST", "users/party-host/playlists")) == 1
    # next lookup goes back to the same playlist
    assert radio.get_or_create_playlist_id() == "radio1"


def test_creation_failure_propagates(radio, spotify) -> None:
    spotify.force("POST", "users/party-host/playlists", spotify_error(403, "Insufficient client scope"))

    with pytest.raises(UpstreamError, match="Insufficient client scope"):
        radio.get_or_create_playlist_id()

    assert radio.playlist_id is None


def test_playlist_tracks_are_paginated(gateway, spotify) -> None:
    uris = spotify.add_tracks(*[f"t{i:03d}" for i in range(230)])
    spotify.add_playlist("big", uris)

    tracks = get_playlist_tracks(gateway, "big")

    assert [t.uri for t in tracks] == uris
    assert len(spotify.calls_to("GET", "playlists/big/tracks")) == 3
    assert all(t.source == "playlist" for t in tracks)


def test_playlist_scan_stops_at_limit(gateway, spotify) -> None:
    uris = spotify.add_tracks(*[f"t{i:03d}" for i in range(230)])
    spotify.add_playlist("big", uris)

    tracks = get_playlist_tracks(gateway, "big", max_tracks=150)

    assert len(tracks) == 150
    assert len(spotify.calls_to("GET", "playlists/big/tracks")) == 2

"""One-shot token exchanges against the Spotify accounts service.

Both grants authenticate with HTTP Basic auth built from the client
id/secret. The redirect URI is passed through exactly as the client sent it
(surrounding whitespace trimmed): Spotify compares it character for
character with the registered one.
"""

from typing import Dict, Optional
from urllib.parse import urlencode

import requests

from jukebox.config import (
    SCOPES,
    SPOTIFY_AUTH_URL,
    SPOTIFY_CLIENT_ID,
    SPOTIFY_CLIENT_SECRET,
    SPOTIFY_HTTP_TIMEOUT,
    SPOTIFY_REDIRECT_URI,
    SPOTIFY_TOKEN_URL,
)
from jukebox.core import ConfigurationError, UpstreamError

from .responses import spotify_error_message


class SpotifyAuthError(UpstreamError):
    """The accounts service rejected a code or refresh token."""

    default_message = "Token exchange failed"


def _client_auth() -> tuple[str, str]:
    if not SPOTIFY_CLIENT_ID or not SPOTIFY_CLIENT_SECRET:
        raise ConfigurationError(
            "Server configuration error: "
            "SPOTIFY_CLIENT_ID or SPOTIFY_CLIENT_SECRET not configured"
        )
    return SPOTIFY_CLIENT_ID, SPOTIFY_CLIENT_SECRET


def _post_token(data: Dict[str, str], failure_message: str) -> Dict:
    auth = _client_auth()
    try:
        r = requests.post(
            SPOTIFY_TOKEN_URL,
            data=data,
            auth=auth,
            timeout=SPOTIFY_HTTP_TIMEOUT,
        )
    except requests.RequestException as e:
        raise SpotifyAuthError(f"Could not reach Spotify accounts service: {e}") from e
    if not r.ok:
        raise SpotifyAuthError(
            spotify_error_message(r, failure_message), status=r.status_code
        )
    try:
        token_info = r.json()
    except ValueError as e:
        raise SpotifyAuthError(failure_message, status=r.status_code) from e
    if not isinstance(token_info, dict) or not token_info.get("access_token"):
        raise SpotifyAuthError(failure_message, status=r.status_code)
    return token_info


def exchange_code_for_token(code: str, redirect_uri: str) -> Dict:
    """
    Exchange an authorization code for {access_token, refresh_token, expires_in}.
    """
    return _post_token(
        {
            "grant_type": "authorization_code",
            "code": code,
            "redirect_uri": redirect_uri.strip(),
        },
        "Token exchange failed",
    )


def refresh_access_token(refresh_token: str) -> Dict:
    """
    Refresh an access token.

    Spotify does not always rotate refresh tokens: when the response has no
    refresh_token, the previous one is kept.
    """
    token_info = _post_token(
        {"grant_type": "refresh_token", "refresh_token": refresh_token},
        "Token refresh failed",
    )
    if not token_info.get("refresh_token"):
        token_info["refresh_token"] = refresh_token
    return token_info


def build_spotify_auth_url(redirect_uri: Optional[str] = None) -> str:
    if not SPOTIFY_CLIENT_ID:
        raise ConfigurationError(
            "Server configuration error: SPOTIFY_CLIENT_ID not configured"
        )
    auth_query_parameters = {
        "client_id": SPOTIFY_CLIENT_ID,
        "response_type": "code",
        "redirect_uri": (redirect_uri or SPOTIFY_REDIRECT_URI).strip(),
        "scope": " ".join(SCOPES),
        "show_dialog": "true",
    }
    return f"{SPOTIFY_AUTH_URL}?{urlencode(auth_query_parameters)}"

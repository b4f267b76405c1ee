"""Single choke point for Spotify Web API calls.

SpotifyGateway owns the token policy every other component relies on:
get a valid token (refreshing it first when it is inside the expiry
margin), send the request with a Bearer header, and on a 401 refresh and
replay the request exactly once. Callers receive the raw response and
decide what 200/204/4xx/5xx mean for them; `request_json` is the shortcut
for callers that just want a parsed body or an UpstreamError.
"""

import threading
from typing import Any, Callable, Dict, Optional

import requests

from jukebox.config import DEFAULT_EXPIRES_IN, SPOTIFY_API_BASE, SPOTIFY_HTTP_TIMEOUT
from jukebox.core import (
    AuthenticationError,
    UpstreamError,
    log_error,
    log_step,
    log_success,
)

from .oauth import refresh_access_token
from .responses import is_success, json_or_none, spotify_error_message
from .token_store import TokenStore


class SpotifyGateway:
    def __init__(
        self,
        token_store: TokenStore,
        refresher: Callable[[str], Dict] = refresh_access_token,
        session: Optional[requests.Session] = None,
        api_base: str = SPOTIFY_API_BASE,
        timeout: float = SPOTIFY_HTTP_TIMEOUT,
    ) -> None:
        self.token_store = token_store
        self._refresher = refresher
        self._session = session or requests.Session()
        self._api_base = api_base.rstrip("/")
        self._timeout = timeout
        # Serialises refreshes so concurrent requests that all see an expired
        # token produce a single refresh.
        self._refresh_lock = threading.Lock()

    # ------------------------------------------------------------------
    # Token policy
    # ------------------------------------------------------------------

    def get_valid_token(self) -> str:
        """
        Return a usable access token, refreshing it first if needed.

        Raises AuthenticationError when no token was ever set or when the
        refresh fails (the store is cleared in that case).
        """
        token = self.token_store.get_access_token()
        if token and not self.token_store.is_expired():
            return token

        with self._refresh_lock:
            token = self.token_store.get_access_token()
            if token and not self.token_store.is_expired():
                return token
            return self._refresh_locked()

    def _force_refresh(self, stale_token: str) -> str:
        with self._refresh_lock:
            current = self.token_store.get_access_token()
            if current and current != stale_token and not self.token_store.is_expired():
                # Another request already refreshed while we were waiting.
                return current
            return self._refresh_locked()

    def _refresh_locked(self) -> str:
        refresh_token = self.token_store.get_refresh_token()
        if not refresh_token:
            self.token_store.clear()
            raise AuthenticationError()

        log_step("Refreshing server Spotify token...")
        try:
            token_info = self._refresher(refresh_token)
        except Exception as e:  # noqa: BLE001
            log_error(f"Token refresh failed: {e}")
            self.token_store.clear()
            raise AuthenticationError(
                "Spotify token refresh failed. "
                "Please re-run the one-time server authentication."
            ) from e

        self.token_store.set_tokens(
            token_info["access_token"],
            token_info.get("refresh_token") or refresh_token,
            token_info.get("expires_in") or DEFAULT_EXPIRES_IN,
        )
        log_success("Server Spotify token refreshed.")
        return token_info["access_token"]

    # ------------------------------------------------------------------
    # HTTP
    # ------------------------------------------------------------------

    def _url(self, path: str) -> str:
        # Pagination "next" links are absolute
        if path.startswith("http://") or path.startswith("https://"):
            return path
        return f"{self._api_base}/{path.lstrip('/')}"

    def _send(
        self,
        method: str,
        url: str,
        token: str,
        params: Optional[Dict[str, Any]],
        json: Any,
    ) -> requests.Response:
        try:
            return self._session.request(
                method,
                url,
                headers={"Authorization": f"Bearer {token}"},
                params=params,
                json=json,
                timeout=self._timeout,
            )
        except requests.Timeout as e:
            raise UpstreamError("Spotify request timed out") from e
        except requests.ConnectionError as e:
            raise UpstreamError("Could not reach Spotify") from e

    def call(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
        retry_on_401: bool = True,
    ) -> requests.Response:
        """
        Issue one authenticated request and return the raw response.

        A 401 triggers exactly one refresh-and-replay when `retry_on_401`
        is set; whatever the replay returns is handed back unchanged.
        """
        url = self._url(path)
        token = self.get_valid_token()
        r = self._send(method, url, token, params, json)

        if r.status_code == 401 and retry_on_401:
            log_step(f"Spotify answered 401 for {method} {url}, retrying once...")
            token = self._force_refresh(token)
            r = self._send(method, url, token, params, json)

        return r

    def request_json(
        self,
        method: str,
        path: str,
        *,
        failure_message: str = "Spotify request failed",
        **kwargs: Any,
    ) -> Any:
        """
        Like `call`, but raise UpstreamError on a non-success status and
        return the parsed body (None for empty responses).
        """
        r = self.call(method, path, **kwargs)
        if not is_success(r):
            raise UpstreamError(
                spotify_error_message(r, failure_message), status=r.status_code
            )
        return json_or_none(r)

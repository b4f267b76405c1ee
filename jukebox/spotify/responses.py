from typing import Any

import requests


def spotify_error_message(response: requests.Response, default: str) -> str:
    """
    Normalise a Spotify error body into one message string.

    Spotify answers with either ``{"error": {"status", "message"}}`` (Web API)
    or ``{"error": "...", "error_description": "..."}`` (accounts service),
    and proxies occasionally return plain text or HTML. Falls back to the raw
    text, then to `default`.
    """
    try:
        data: Any = response.json()
    except ValueError:
        text = (response.text or "").strip()
        return text[:300] if text else default

    if isinstance(data, dict):
        error = data.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if data.get("error_description"):
            return str(data["error_description"])
        if isinstance(error, str) and error:
            return error
        if data.get("message"):
            return str(data["message"])
    return default


def is_success(response: requests.Response) -> bool:
    return response.status_code in (200, 201, 202, 204)


def json_or_none(response: requests.Response) -> Any:
    """Parse a JSON body; empty bodies (204) and non-JSON bodies give None."""
    if response.status_code == 204 or not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return None

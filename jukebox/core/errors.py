"""Error taxonomy for the jukebox.

Every error carries the HTTP status the API layer should answer with and a
human-readable message. The FastAPI exception handler renders them as
``{"error": message}``.
"""

from typing import Optional


class JukeboxError(Exception):
    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ConfigurationError(JukeboxError):
    """A required credential or secret is missing from the environment."""

    status_code = 500
    default_message = "Server configuration error"


class AuthenticationError(JukeboxError):
    """No usable Spotify token (never set, or refresh failed)."""

    status_code = 401
    default_message = (
        "Server not authenticated with Spotify. "
        "Please authenticate the server first."
    )


class AdminUnauthorized(JukeboxError):
    """Admin password header missing or wrong."""

    status_code = 401
    default_message = "Unauthorized"


class NotFoundError(JukeboxError):
    status_code = 404
    default_message = "Not found"


class BadRequestError(JukeboxError):
    status_code = 400
    default_message = "Bad request"


class InvalidActionError(BadRequestError):
    default_message = "Invalid action"


class UpstreamError(JukeboxError):
    """Spotify answered with a non-success status after the retry policy."""

    status_code = 500
    default_message = "Spotify request failed"

    def __init__(self, message: Optional[str] = None, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class ControlError(UpstreamError):
    default_message = "Control action failed"


class TransientConsistencyError(JukeboxError):
    """Track still present after deletion and the skip fallback did not help."""

    status_code = 500
    default_message = (
        "Track may not have been removed: Spotify still reports it in the queue."
    )

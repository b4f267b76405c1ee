"""Public façade for the jukebox.core package.

This module exposes logging helpers, the error taxonomy, the best-effort
combinator, and the track/queue DTOs. Callers should import these
cross-cutting concerns from this façade instead of the internal submodules.
"""

from .errors import (
    AdminUnauthorized,
    AuthenticationError,
    BadRequestError,
    ConfigurationError,
    ControlError,
    InvalidActionError,
    JukeboxError,
    NotFoundError,
    TransientConsistencyError,
    UpstreamError,
)
from .fallbacks import best_effort
from .logging_config import configure_logging
from .logging_utils import (
    log_error,
    log_info,
    log_section,
    log_step,
    log_success,
    log_warning,
    tagged_logger,
)
from .models import QueueView, Track

__all__ = [
    "configure_logging",
    "log_section",
    "log_info",
    "log_step",
    "log_success",
    "log_warning",
    "log_error",
    "tagged_logger",
    "best_effort",
    "JukeboxError",
    "ConfigurationError",
    "AuthenticationError",
    "AdminUnauthorized",
    "NotFoundError",
    "BadRequestError",
    "InvalidActionError",
    "UpstreamError",
    "ControlError",
    "TransientConsistencyError",
    "Track",
    "QueueView",
]

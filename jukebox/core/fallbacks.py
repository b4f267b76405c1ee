from typing import Callable, TypeVar

from .logging_utils import log_warning

T = TypeVar("T")


def best_effort(fn: Callable[[], T], default: T, label: str) -> T:
    """
    Run `fn` and return its result, or log and return `default` on any error.

    Used by read paths the UI polls (queue listing, now-playing, status),
    which must degrade to a neutral value instead of failing the response.
    """
    try:
        return fn()
    except Exception as e:  # noqa: BLE001
        log_warning(f"{label} failed, using fallback: {e}")
        return default

"""Public façade for the jukebox.queue package."""

from .merge import merge_queue
from .reconciler import EnqueueResult, QueueReconciler, RemoveResult

__all__ = [
    "merge_queue",
    "QueueReconciler",
    "EnqueueResult",
    "RemoveResult",
]

from typing import Iterable, List

from jukebox.core import Track


def merge_queue(immediate: Iterable[Track], playlist: Iterable[Track]) -> List[Track]:
    """
    Combine the immediate player queue and the radio playlist into one view.

    Immediate items come first, in Spotify's order, followed by playlist
    items whose URI is not already listed, in playlist order. A URI never
    appears twice in the result.
    """
    merged: List[Track] = []
    seen = set()
    for track in list(immediate) + list(playlist):
        if not track.uri or track.uri in seen:
            continue
        seen.add(track.uri)
        merged.append(track)
    return merged

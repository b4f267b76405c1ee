from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class Track:
    """
    Track DTO exchanged with clients. Always rebuilt from Spotify payloads.

    - artist : artist names joined with ", "
    - source : where a queue entry came from ("queue" or "playlist"),
               None outside of queue listings
    """

    id: str
    name: str
    artist: str
    album: str
    image: Optional[str]
    uri: str
    duration_ms: int
    source: Optional[str] = None

    @classmethod
    def from_spotify(cls, item: Dict[str, Any], source: Optional[str] = None) -> "Track":
        album = item.get("album") or {}
        images = album.get("images") or []
        return cls(
            id=item.get("id") or "",
            name=item.get("name") or "",
            artist=", ".join(a.get("name", "") for a in item.get("artists") or []),
            album=album.get("name") or "",
            image=images[0].get("url") if images else None,
            uri=item.get("uri") or "",
            duration_ms=item.get("duration_ms") or 0,
            source=source,
        )

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        if data["source"] is None:
            data.pop("source")
        return data


@dataclass
class QueueView:
    """Reconciled queue: immediate player-queue items first, then playlist items."""

    currently_playing: Optional[Track] = None
    queue: List[Track] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "queue": [t.to_dict() for t in self.queue],
            "currently_playing": (
                self.currently_playing.to_dict() if self.currently_playing else None
            ),
        }

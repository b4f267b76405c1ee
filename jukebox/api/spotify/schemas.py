from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class _Request(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class TokenExchangeRequest(_Request):
    code: Optional[str] = None
    redirect_uri: Optional[str] = Field(default=None, alias="redirectUri")


class QueueAddRequest(_Request):
    song_name: Optional[str] = Field(default=None, alias="songName")
    uri: Optional[str] = None


class QueueRemoveRequest(_Request):
    uri: Optional[str] = None
    track_id: Optional[str] = Field(default=None, alias="trackId")


class ControlRequest(_Request):
    action: Optional[str] = None
    volume: Optional[int] = None


class ActionResponse(BaseModel):
    success: bool
    message: str


class TokenExchangeResponse(ActionResponse):
    expires_in: Optional[int] = None


class StatusResponse(BaseModel):
    authenticated: bool
    hasToken: bool


class TrackOut(BaseModel):
    id: str
    name: str
    artist: str
    album: str
    image: Optional[str] = None
    uri: str
    duration_ms: int
    source: Optional[str] = None


class QueueResponse(BaseModel):
    queue: List[TrackOut]
    currently_playing: Optional[TrackOut] = None


class NowPlayingTrack(BaseModel):
    name: str
    artist: str
    image: Optional[str] = None


class NowPlayingResponse(BaseModel):
    playing: bool
    track: Optional[NowPlayingTrack] = None


class SearchResponse(BaseModel):
    tracks: List[TrackOut]
    total: int

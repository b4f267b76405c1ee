import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from jukebox.api.dependencies import (
    get_gateway,
    get_reconciler,
    get_token_store,
    require_admin,
)
from jukebox.config import DEFAULT_EXPIRES_IN, SEARCH_LIMIT_DEFAULT
from jukebox.core import (
    BadRequestError,
    ConfigurationError,
    JukeboxError,
    best_effort,
    tagged_logger,
)
from jukebox.queue import QueueReconciler
from jukebox.spotify import (
    SpotifyGateway,
    TokenStore,
    build_spotify_auth_url,
    exchange_code_for_token,
    get_currently_playing,
    search_tracks,
)

from .schemas import (
    ActionResponse,
    ControlRequest,
    NowPlayingResponse,
    QueueAddRequest,
    QueueRemoveRequest,
    QueueResponse,
    SearchResponse,
    StatusResponse,
    TokenExchangeRequest,
    TokenExchangeResponse,
)

router = APIRouter()

EMPTY_QUEUE = {"queue": [], "currently_playing": None}
NOTHING_PLAYING = {"playing": False, "track": None}


@router.get("/auth-url")
def get_auth_url(redirect_uri: Optional[str] = Query(default=None, alias="redirectUri")) -> dict:
    """
    Spotify authorize URL for the one-time admin setup.
    """
    return {"auth_url": build_spotify_auth_url(redirect_uri)}


@router.post("/token", response_model=TokenExchangeResponse)
def exchange_token(
    body: TokenExchangeRequest,
    token_store: TokenStore = Depends(get_token_store),
):
    """
    Exchange an authorization code for the server's token pair (one-time setup).

    The redirect URI must match the one registered with Spotify exactly, so
    it is only trimmed, never rewritten.
    """
    request_id = uuid.uuid4().hex[:7]
    log = tagged_logger(f"token-exchange {request_id}")
    log.info(
        "request received (has_code=%s, has_redirect_uri=%s)",
        bool(body.code),
        bool(body.redirect_uri),
    )

    if not body.code or not body.redirect_uri:
        raise BadRequestError("Missing code or redirectUri")

    redirect_uri = body.redirect_uri.strip()
    log.info("using redirect URI: %s", redirect_uri)

    try:
        tokens = exchange_code_for_token(body.code, redirect_uri)
    except ConfigurationError:
        raise
    except JukeboxError as e:
        log.error("%s", e.message)
        if "redirect" in e.message.lower():
            log.warning(
                f"Redirect URI mismatch: make sure '{redirect_uri}' is registered "
                "exactly in the Spotify Developer Dashboard."
            )
        return JSONResponse(
            {"error": e.message, "requestId": request_id}, status_code=500
        )

    expires_in = tokens.get("expires_in") or DEFAULT_EXPIRES_IN
    token_store.set_tokens(
        tokens["access_token"], tokens.get("refresh_token") or "", expires_in
    )
    log.info(
        "server Spotify tokens stored (has_refresh_token=%s, expires_in=%s)",
        bool(tokens.get("refresh_token")),
        expires_in,
    )
    return {
        "success": True,
        "message": "Server authenticated with Spotify successfully",
        "expires_in": tokens.get("expires_in"),
    }


@router.get("/status", response_model=StatusResponse)
def auth_status(gateway: SpotifyGateway = Depends(get_gateway)):
    """
    `authenticated` means a usable token exists, refreshing it if needed.
    """
    authenticated = best_effort(
        lambda: bool(gateway.get_valid_token()), False, "Token check"
    )
    return {
        "authenticated": authenticated,
        "hasToken": gateway.token_store.has_token(),
    }


@router.post("/queue", response_model=ActionResponse)
def add_to_queue(
    body: QueueAddRequest,
    reconciler: QueueReconciler = Depends(get_reconciler),
):
    if not body.song_name and not body.uri:
        raise BadRequestError("Missing songName or uri")

    reconciler.enqueue(song_name=body.song_name, uri=body.uri)
    return {"success": True, "message": "Song added to queue"}


@router.get("/queue", response_model=QueueResponse)
def list_queue(reconciler: QueueReconciler = Depends(get_reconciler)):
    """
    Reconciled queue. Polled by the UI, so it never fails: errors give an
    empty queue.
    """
    return best_effort(lambda: reconciler.view().to_dict(), EMPTY_QUEUE, "Queue listing")


@router.delete(
    "/queue", response_model=ActionResponse, dependencies=[Depends(require_admin)]
)
def remove_from_queue(
    body: QueueRemoveRequest,
    reconciler: QueueReconciler = Depends(get_reconciler),
):
    if not body.uri and not body.track_id:
        raise BadRequestError("Missing uri or trackId")

    result = reconciler.remove(uri=body.uri, track_id=body.track_id)
    return {"success": True, "message": result.message}


@router.post(
    "/control", response_model=ActionResponse, dependencies=[Depends(require_admin)]
)
def control_playback(
    body: ControlRequest,
    reconciler: QueueReconciler = Depends(get_reconciler),
):
    message = reconciler.control(body.action or "", volume=body.volume)
    return {"success": True, "message": message}


@router.get("/now-playing", response_model=NowPlayingResponse)
def now_playing(gateway: SpotifyGateway = Depends(get_gateway)):
    """
    Currently playing track. Never fails to the client.
    """
    if not gateway.token_store.has_token():
        return NOTHING_PLAYING

    def _read() -> dict:
        gateway.get_valid_token()
        current = get_currently_playing(gateway)
        if not current.track:
            return {"playing": current.is_playing, "track": None}
        return {
            "playing": current.is_playing,
            "track": {
                "name": current.track.name,
                "artist": current.track.artist,
                "image": current.track.image,
            },
        }

    return best_effort(_read, NOTHING_PLAYING, "Now playing")


@router.get("/search", response_model=SearchResponse)
def search(
    q: Optional[str] = Query(default=None),
    limit: int = Query(default=SEARCH_LIMIT_DEFAULT),
    gateway: SpotifyGateway = Depends(get_gateway),
):
    if not q or not q.strip():
        raise BadRequestError("Missing query parameter 'q'")

    tracks, total = search_tracks(gateway, q.strip(), limit=limit)
    return {"tracks": [t.to_dict() for t in tracks], "total": total}

"""Queue reconciliation between Spotify's player queue and the radio playlist.

Spotify's immediate player queue is append-only: it can be read but not
reordered, and the only way to get rid of an item in it is to skip past
it once it is playing. The radio playlist is fully editable. Every queued
song therefore goes to both, reads merge the two, and removals target the
playlist first and fall back to skipping only for what is already live.
"""

from dataclasses import dataclass
import time
from typing import Callable, List, Optional

from jukebox.config import CONSISTENCY_DELAY_SECONDS
from jukebox.core import (
    AuthenticationError,
    BadRequestError,
    ControlError,
    InvalidActionError,
    JukeboxError,
    NotFoundError,
    QueueView,
    Track,
    TransientConsistencyError,
    UpstreamError,
    best_effort,
    log_info,
    log_step,
    log_success,
    log_warning,
)
from jukebox.spotify import (
    PlaybackAction,
    RadioPlaylistManager,
    SpotifyGateway,
    add_to_player_queue,
    add_track_to_playlist,
    find_playlist_track,
    get_currently_playing,
    get_playback_state,
    get_player_queue,
    get_playlist_tracks,
    is_success,
    normalize_track_uri,
    pause_playback,
    remove_track_from_playlist,
    resume_playback,
    search_first_track_uri,
    set_volume,
    skip_to_next,
    spotify_error_message,
    start_playback,
    track_id_from_uri,
)

from .merge import merge_queue


@dataclass
class EnqueueResult:
    uri: str
    player_queued: bool
    playlist_added: bool


@dataclass
class RemoveResult:
    uri: str
    removed_from_playlist: bool
    skipped: bool

    @property
    def message(self) -> str:
        if self.removed_from_playlist:
            return "Removed from queue"
        return "Skipped track (it was already playing or next in the live queue)"


class QueueReconciler:
    def __init__(
        self,
        gateway: SpotifyGateway,
        playlists: RadioPlaylistManager,
        sleep: Callable[[float], None] = time.sleep,
        consistency_delay: float = CONSISTENCY_DELAY_SECONDS,
    ) -> None:
        self.gateway = gateway
        self.playlists = playlists
        self._sleep = sleep
        self._consistency_delay = consistency_delay

    # ------------------------------------------------------------------
    # Enqueue
    # ------------------------------------------------------------------

    def resolve_track_uri(
        self, song_name: Optional[str] = None, uri: Optional[str] = None
    ) -> str:
        """
        A given `uri` must be a track URI (or open.spotify.com track link) and
        is used as is. Only a `song_name` is searched, first result wins.
        """
        if uri and uri.strip():
            normalized = normalize_track_uri(uri)
            if not normalized:
                raise BadRequestError("Invalid track uri")
            return normalized
        name = (song_name or "").strip()
        if not name:
            raise BadRequestError("Missing songName or uri")
        return search_first_track_uri(self.gateway, name)

    def enqueue(
        self, song_name: Optional[str] = None, uri: Optional[str] = None
    ) -> EnqueueResult:
        # Fails fast with AuthenticationError when the server was never set up.
        self.gateway.get_valid_token()

        track_uri = self.resolve_track_uri(song_name=song_name, uri=uri)
        log_step(f"Queueing {track_uri}...")

        player_queued = self._attempt(
            lambda: self._add_to_player_queue(track_uri), "Player queue append"
        )
        playlist_added = self._attempt(
            lambda: add_track_to_playlist(
                self.gateway, self.playlists.get_or_create_playlist_id(), track_uri, 0
            ),
            "Radio playlist append",
        )

        if not player_queued and not playlist_added:
            raise UpstreamError("Failed to add song to queue")

        self._ensure_playback(player_queued)
        log_success(
            f"Queued {track_uri} (player queue: {player_queued}, playlist: {playlist_added})"
        )
        return EnqueueResult(
            uri=track_uri, player_queued=player_queued, playlist_added=playlist_added
        )

    def _add_to_player_queue(self, track_uri: str) -> None:
        r = add_to_player_queue(self.gateway, track_uri)
        if not is_success(r):
            raise UpstreamError(
                spotify_error_message(r, "Failed to add song to queue"),
                status=r.status_code,
            )

    @staticmethod
    def _attempt(fn: Callable[[], object], label: str) -> bool:
        """Run a best-effort mutation; auth failures still propagate."""
        try:
            fn()
            return True
        except AuthenticationError:
            raise
        except JukeboxError as e:
            log_warning(f"{label} failed: {e.message}")
            return False

    def _ensure_playback(self, player_queued: bool) -> None:
        """
        Make sure something is playing after an enqueue.

        A paused session is resumed without a body so its context (and the
        immediate queue hanging off it) survives. With no session at all,
        plain play consumes the immediate queue; the radio playlist is the
        fallback context.
        """
        try:
            state = get_playback_state(self.gateway)
            if state is not None:
                if not state.is_playing:
                    log_step("Resuming paused playback...")
                    r = resume_playback(self.gateway)
                    if not is_success(r):
                        log_warning(spotify_error_message(r, "Resume failed"))
                return

            if player_queued:
                r = start_playback(self.gateway)
                if is_success(r):
                    return
                log_warning(spotify_error_message(r, "Start playback failed"))

            context_uri = self.playlists.playlist_uri
            if context_uri:
                log_step("Starting playback of the radio playlist...")
                r = start_playback(self.gateway, context_uri=context_uri)
                if not is_success(r):
                    log_warning(spotify_error_message(r, "Start playback failed"))
        except AuthenticationError:
            raise
        except JukeboxError as e:
            log_warning(f"Could not ensure playback: {e.message}")

    # ------------------------------------------------------------------
    # View
    # ------------------------------------------------------------------

    def view(self) -> QueueView:
        """
        Reconciled queue view. Every sub-read is best-effort: a failing piece
        becomes an empty list or None instead of failing the whole view.
        Only a missing token (AuthenticationError) escapes.
        """
        self.gateway.get_valid_token()

        player_queue = best_effort(
            lambda: get_player_queue(self.gateway), None, "Player queue read"
        )
        immediate = player_queue.queue if player_queue else []
        playlist_tracks = best_effort(self._playlist_tracks, [], "Radio playlist read")
        now_playing = best_effort(
            lambda: get_currently_playing(self.gateway), None, "Currently playing read"
        )
        return QueueView(
            currently_playing=now_playing.track if now_playing else None,
            queue=merge_queue(immediate, playlist_tracks),
        )

    def _playlist_tracks(self) -> List[Track]:
        playlist_id = self.playlists.playlist_id
        if not playlist_id:
            return []
        return get_playlist_tracks(self.gateway, playlist_id)

    # ------------------------------------------------------------------
    # Remove
    # ------------------------------------------------------------------

    def remove(
        self, uri: Optional[str] = None, track_id: Optional[str] = None
    ) -> RemoveResult:
        """
        Remove a track from wherever it can actually be removed.

        The radio playlist is the addressable copy: a track found there is
        deleted, then skipped if Spotify already has it playing or next.
        A track only in the live session can only be skipped. Anything else
        is a NotFoundError.
        """
        target_uri = normalize_track_uri(uri, allow_bare_id=True) or normalize_track_uri(
            track_id, allow_bare_id=True
        )
        if not target_uri:
            raise BadRequestError("Missing uri or trackId")
        bare_id = track_id_from_uri(target_uri)

        self.gateway.get_valid_token()

        playlist_id = self.playlists.playlist_id
        found = self._find_in_playlist(playlist_id, target_uri, bare_id)

        if found is None:
            log_info(f"{target_uri} not in radio playlist, checking live session...")
            if self._skip_if_live(target_uri):
                return RemoveResult(uri=target_uri, removed_from_playlist=False, skipped=True)
            raise NotFoundError("Track not in playlist and not currently queued")

        log_step(f"Removing {found.uri} from radio playlist...")
        remove_track_from_playlist(self.gateway, playlist_id, found.uri)
        skipped = self._skip_if_live(found.uri)

        self._sleep(self._consistency_delay)
        if self._still_in_playlist(playlist_id, found.uri):
            log_warning(f"{found.uri} still listed after delete, retrying once...")
            remove_track_from_playlist(self.gateway, playlist_id, found.uri)
            skipped = self._skip_if_live(found.uri) or skipped
            self._sleep(self._consistency_delay)
            if self._still_in_playlist(playlist_id, found.uri):
                raise TransientConsistencyError()

        log_success(f"Removed {found.uri} from queue (skipped: {skipped}).")
        return RemoveResult(uri=found.uri, removed_from_playlist=True, skipped=skipped)

    def _find_in_playlist(
        self, playlist_id: Optional[str], uri: str, track_id: str
    ) -> Optional[Track]:
        if not playlist_id:
            return None
        try:
            return find_playlist_track(self.gateway, playlist_id, uri, track_id)
        except UpstreamError as e:
            if e.status != 404:
                raise
            log_warning(f"Radio playlist {playlist_id} no longer exists, forgetting it.")
            self.playlists.clear()
            return None

    def _still_in_playlist(self, playlist_id: str, uri: str) -> bool:
        return find_playlist_track(self.gateway, playlist_id, uri) is not None

    def _is_live(self, uri: str) -> tuple[bool, bool]:
        """(is currently playing, is next in the immediate queue)."""
        now_playing = get_currently_playing(self.gateway)
        if now_playing.track and now_playing.track.uri == uri:
            return True, False
        player_queue = best_effort(
            lambda: get_player_queue(self.gateway), None, "Player queue read"
        )
        is_next = bool(
            player_queue and player_queue.queue and player_queue.queue[0].uri == uri
        )
        return False, is_next

    def _skip_if_live(self, uri: str) -> bool:
        """
        Skip past `uri` if the live session has it playing or next.

        When it is next, the first skip makes it current, so it is skipped
        again once Spotify reports it as playing.
        """
        playing, is_next = self._is_live(uri)
        if not playing and not is_next:
            return False

        self._skip()
        if is_next:
            self._sleep(self._consistency_delay)
            now_playing = get_currently_playing(self.gateway)
            if now_playing.track and now_playing.track.uri == uri:
                self._skip()
        return True

    def _skip(self) -> None:
        r = skip_to_next(self.gateway)
        if not is_success(r):
            raise ControlError(
                spotify_error_message(r, "Failed to skip track"), status=r.status_code
            )

    # ------------------------------------------------------------------
    # Playback control
    # ------------------------------------------------------------------

    def control(self, action: str, volume: Optional[int] = None) -> str:
        try:
            playback_action = PlaybackAction(action)
        except ValueError:
            raise InvalidActionError("Invalid action")

        if playback_action is PlaybackAction.VOLUME:
            if volume is None:
                raise BadRequestError("Volume value required")
            if not 0 <= volume <= 100:
                raise BadRequestError("Volume must be between 0 and 100")

        self.gateway.get_valid_token()

        if playback_action is PlaybackAction.PLAY:
            r = self._play()
        elif playback_action is PlaybackAction.PAUSE:
            r = pause_playback(self.gateway)
        elif playback_action is PlaybackAction.NEXT:
            r = skip_to_next(self.gateway)
        else:
            r = set_volume(self.gateway, volume)

        if not is_success(r):
            raise ControlError(
                spotify_error_message(r, "Control action failed"), status=r.status_code
            )
        log_success(f"Action {playback_action.value} completed.")
        return f"Action {playback_action.value} completed"

    def _play(self):
        """Play the radio playlist when the session has no context, else resume."""
        state = best_effort(
            lambda: get_playback_state(self.gateway), None, "Playback state read"
        )
        if state is None or not state.context_uri:
            playlist_id = best_effort(
                self.playlists.get_or_create_playlist_id, None, "Radio playlist lookup"
            )
            if playlist_id:
                return start_playback(
                    self.gateway, context_uri=self.playlists.playlist_uri
                )
        return resume_playback(self.gateway)

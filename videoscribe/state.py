"""Per-session status state machine coordinating intake and transcription."""

import secrets
import time
from collections import OrderedDict
from typing import Callable

from .exceptions import InvalidTransitionError, IntakeError
from .intake import FileHandle, read_upload
from .logger import Log
from .models import ErrorInfo, ProcessStatus, TranscriptResult, UploadedFile
from .transcription import TranscriptionClient

ANALYSIS_FAILED_MESSAGE = (
    "An error occurred while analyzing the video. "
    "Please try again or check your internet connection."
)

SELECTABLE = (ProcessStatus.IDLE, ProcessStatus.ERROR)
BUSY = (ProcessStatus.UPLOADING, ProcessStatus.ANALYZING)


class TranscriptionSession:
    """Owns the process status of one browser session.

    Only this class mutates ``status``. Each analysis captures the current
    generation; a resolution arriving after a reset or a newer selection
    carries an old generation and is dropped.
    """

    def __init__(self, client: TranscriptionClient, max_upload_bytes: int) -> None:
        self.client = client
        self.max_upload_bytes = max_upload_bytes
        self.status = ProcessStatus.IDLE
        self.file: UploadedFile | None = None
        self.result: TranscriptResult | None = None
        self.error: ErrorInfo | None = None
        self.generation = 0

    async def select_file(self, handle: FileHandle) -> ProcessStatus:
        """Run intake for a new file and, on success, analyze it.

        Raises:
            InvalidTransitionError: if a file is being processed or a result is shown.
            IntakeError: if the file is rejected or unreadable; status is unchanged.
        """
        if self.status not in SELECTABLE:
            raise InvalidTransitionError(
                f"Cannot select a file while status is {self.status.value}"
            )

        self.generation += 1
        generation = self.generation
        previous = self.status
        self.status = ProcessStatus.UPLOADING
        try:
            uploaded = await read_upload(handle, self.max_upload_bytes)
        except IntakeError as exc:
            if not self._is_stale(generation):
                self.status = previous
            Log.info(f"Rejected file '{handle.filename}': {exc}")
            raise

        if self._is_stale(generation):
            return self.status
        self.file = uploaded
        self.result = None
        self.error = None
        self.status = ProcessStatus.ANALYZING
        Log.info(f"Analyzing '{uploaded.name}' ({uploaded.size_bytes} bytes)")

        try:
            text = await self.client.transcribe(uploaded.encoded_payload, uploaded.mime_type)
        except Exception as exc:  # any failed analysis ends in ERROR
            if self._is_stale(generation):
                return self.status
            Log.error(f"Failed to generate transcript for '{uploaded.name}': {exc}", exc_info=True)
            self.error = ErrorInfo(message=ANALYSIS_FAILED_MESSAGE)
            self.status = ProcessStatus.ERROR
            return self.status

        if self._is_stale(generation):
            return self.status
        self.result = TranscriptResult(text=text)
        self.status = ProcessStatus.COMPLETE
        Log.info(f"Transcript ready for '{uploaded.name}' ({len(text)} chars)")
        return self.status

    def reset(self) -> None:
        """Clear file, result and error and return to IDLE.

        Resetting while ANALYZING abandons the outstanding call.
        """
        if self.status == ProcessStatus.ANALYZING:
            Log.info("Reset while analyzing; pending result will be ignored")
        self.generation += 1
        self.file = None
        self.result = None
        self.error = None
        self.status = ProcessStatus.IDLE

    def _is_stale(self, generation: int) -> bool:
        if generation != self.generation:
            Log.debug(f"Ignoring stale resolution for analysis #{generation}")
            return True
        return False


def new_session_id(nbytes: int = 32) -> str:
    """Generate a URL-safe random session token."""
    return secrets.token_urlsafe(nbytes)


class SessionStore:
    """In-memory map of browser sessions to their state machines.

    Sessions idle for longer than ``ttl_seconds`` are dropped, and the store
    is trimmed to ``max_sessions`` starting with the least recently used.
    Sessions with work in flight are never evicted.
    """

    def __init__(
        self,
        client: TranscriptionClient,
        max_upload_bytes: int,
        ttl_seconds: float = 3600,
        max_sessions: int = 100,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.client = client
        self.max_upload_bytes = max_upload_bytes
        self.ttl_seconds = ttl_seconds
        self.max_sessions = max_sessions
        self._clock = clock
        self._sessions: OrderedDict[str, tuple[TranscriptionSession, float]] = OrderedDict()

    def peek(self, session_id: str | None) -> TranscriptionSession | None:
        """Return the stored session for an id without creating one."""
        self._evict()
        if not session_id or session_id not in self._sessions:
            return None
        session, _ = self._sessions[session_id]
        self._touch(session_id, session)
        return session

    def get(self, session_id: str) -> TranscriptionSession:
        """Return the session for an id, creating and storing it if needed."""
        session = self.peek(session_id)
        if session is None:
            session = TranscriptionSession(self.client, self.max_upload_bytes)
            self._touch(session_id, session)
            self._evict(keep=session_id)
        return session

    def _touch(self, session_id: str, session: TranscriptionSession) -> None:
        self._sessions[session_id] = (session, self._clock())
        self._sessions.move_to_end(session_id)

    def _evict(self, keep: str | None = None) -> None:
        now = self._clock()
        idle = [
            (session_id, last_seen)
            for session_id, (session, last_seen) in self._sessions.items()
            if session.status not in BUSY and session_id != keep
        ]
        expired = [session_id for session_id, last_seen in idle if now - last_seen > self.ttl_seconds]
        overflow = len(self._sessions) - len(expired) - self.max_sessions
        survivors = [session_id for session_id, _ in idle if session_id not in expired]
        for session_id in expired + survivors[:max(overflow, 0)]:
            del self._sessions[session_id]
        if expired or overflow > 0:
            Log.debug(f"Evicted sessions; {len(self._sessions)} remain")

    def __len__(self) -> int:
        return len(self._sessions)

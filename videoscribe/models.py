"""Status and data records shared by intake, the state machine and the page."""

from dataclasses import dataclass
from enum import Enum


class ProcessStatus(str, Enum):
    """Where a session is in the upload-analyze-display cycle."""

    IDLE = "IDLE"
    UPLOADING = "UPLOADING"  # reading and encoding the file
    ANALYZING = "ANALYZING"  # waiting on the remote model
    COMPLETE = "COMPLETE"
    ERROR = "ERROR"


@dataclass(frozen=True)
class UploadedFile:
    """A validated video held in memory as a base64 data URL."""

    name: str
    mime_type: str
    size_bytes: int
    encoded_payload: str


@dataclass(frozen=True)
class TranscriptResult:
    """Transcript text exactly as the model returned it."""

    text: str


@dataclass(frozen=True)
class ErrorInfo:
    """User-facing message for a failed analysis."""

    message: str

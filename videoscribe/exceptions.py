class VideoScribeError(Exception):
    """Base exception for all VideoScribe errors."""


class IntakeError(VideoScribeError):
    """Raised when a selected file cannot be turned into an upload."""


class FileValidationError(IntakeError):
    """Raised when a file has the wrong media type or is too large."""


class FileReadError(IntakeError):
    """Raised when the file contents cannot be read."""


class TranscriptionError(VideoScribeError):
    """Raised when the remote model does not produce a transcript."""


class EmptyTranscriptError(TranscriptionError):
    """Raised when the remote call succeeds but returns no text."""


class RemoteModelError(TranscriptionError):
    """Raised when the remote call fails due to network, auth or quota issues."""


class InvalidTransitionError(VideoScribeError):
    """Raised when an action is not allowed in the current process status."""

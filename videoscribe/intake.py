"""File intake: validates a selected video and encodes it in memory."""

import base64
from typing import Protocol

from .exceptions import FileReadError, FileValidationError
from .logger import Log
from .models import UploadedFile

VIDEO_TYPE_PREFIX = "video/"
INVALID_TYPE_MESSAGE = "Please upload a valid video file."
READ_FAILED_MESSAGE = "Failed to read file."


class FileHandle(Protocol):
    """The subset of Starlette's UploadFile that intake relies on."""

    filename: str | None
    content_type: str | None
    size: int | None

    async def read(self, size: int = -1) -> bytes: ...


def validate_file(mime_type: str | None, size_bytes: int | None, max_bytes: int) -> None:
    """Check the declared media type and size of a file.

    Raises:
        FileValidationError: if the type is not a video or the file is too large.
    """
    if not mime_type or not mime_type.startswith(VIDEO_TYPE_PREFIX):
        raise FileValidationError(INVALID_TYPE_MESSAGE)
    if size_bytes is not None and size_bytes > max_bytes:
        raise FileValidationError(
            f"File is too large. Maximum size is {max_bytes // (1024 * 1024)}MB."
        )


def to_data_url(mime_type: str, data: bytes) -> str:
    """Encode bytes the way a browser FileReader.readAsDataURL does."""
    encoded = base64.b64encode(data).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"


async def read_upload(handle: FileHandle, max_bytes: int) -> UploadedFile:
    """Validate a file handle, then read and encode its full contents.

    Raises:
        FileValidationError: on a non-video media type or an oversized file.
        FileReadError: if the contents cannot be read.
    """
    name = handle.filename or "video"
    validate_file(handle.content_type, handle.size, max_bytes)

    try:
        # Bounded read so an undeclared size cannot exhaust memory
        data = await handle.read(max_bytes + 1)
    except OSError as exc:
        Log.warning(f"Reading upload '{name}' failed: {exc}")
        raise FileReadError(READ_FAILED_MESSAGE) from exc
    validate_file(handle.content_type, len(data), max_bytes)

    return UploadedFile(
        name=name,
        mime_type=handle.content_type,
        size_bytes=len(data),
        encoded_payload=to_data_url(handle.content_type, data),
    )

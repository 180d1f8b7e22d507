"""View model and download helpers derived from a session's state."""

from typing import Any
from urllib.parse import quote

from .models import ProcessStatus
from .state import TranscriptionSession

TRANSCRIPT_SUFFIX = "_transcript.txt"


def transcript_filename(video_name: str) -> str:
    """Derive the download name: 'clip.mov' -> 'clip_transcript.txt'."""
    dot = video_name.rfind(".")
    base_name = video_name[:dot] if dot > 0 else video_name
    return f"{base_name}{TRANSCRIPT_SUFFIX}"


def content_disposition(filename: str) -> str:
    """Build an attachment header value that survives non-ASCII and quoted names."""
    quoted = quote(filename)
    if quoted != filename:
        return f"attachment; filename*=utf-8''{quoted}"
    return f'attachment; filename="{filename}"'


def render_view(session: TranscriptionSession) -> dict[str, Any]:
    """Return what the page should show for the session's current status."""
    status = session.status
    uploaded = session.file
    view: dict[str, Any] = {
        "status": status.value,
        "file": None,
        "transcript": None,
        "download_name": None,
        "error": None,
        "show_intro": status == ProcessStatus.IDLE,
        "show_dropzone": status in (ProcessStatus.IDLE, ProcessStatus.ERROR),
        "show_progress": status in (ProcessStatus.UPLOADING, ProcessStatus.ANALYZING),
        "show_result": False,
        "show_error": False,
        "input_disabled": status in (ProcessStatus.UPLOADING, ProcessStatus.ANALYZING),
    }
    if uploaded is not None:
        view["file"] = {
            "name": uploaded.name,
            "type": uploaded.mime_type,
            "size": uploaded.size_bytes,
        }

    if status == ProcessStatus.COMPLETE and session.result and uploaded:
        view["transcript"] = session.result.text
        view["download_name"] = transcript_filename(uploaded.name)
        view["show_result"] = True
    elif status == ProcessStatus.ERROR and session.error:
        view["error"] = session.error.message
        view["show_error"] = True
    return view

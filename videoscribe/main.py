"""FastAPI application exposing the transcription endpoints and the single-page UI."""

from pathlib import Path

from fastapi import Depends, FastAPI, File, HTTPException, Request, Response, UploadFile
from fastapi.responses import HTMLResponse, PlainTextResponse

from .config import Settings
from .exceptions import FileReadError, FileValidationError, InvalidTransitionError
from .logger import Log
from .models import ProcessStatus
from .presentation import content_disposition, render_view, transcript_filename
from .state import SessionStore, TranscriptionSession, new_session_id
from .transcription import TranscriptionClient

COOKIE_NAME = "videoscribe_session"
INDEX_HTML = Path(__file__).parent / "static" / "index.html"

settings = Settings()
Log.configure(settings.log_level)
if not settings.gemini_api_key:
    Log.warning("GEMINI_API_KEY is not defined in the environment variables.")

app = FastAPI(title="VideoScribe")
transcription_client = TranscriptionClient(settings)
sessions = SessionStore(
    transcription_client,
    settings.max_upload_bytes,
    ttl_seconds=settings.session_ttl_seconds,
    max_sessions=settings.max_sessions,
)
Log.info(f"VideoScribe started (env={settings.app_env}, model={settings.gemini_model_name})")


def get_session_id(request: Request, response: Response) -> str:
    """Read the caller's session id from its cookie, issuing a new one if missing."""
    session_id = request.cookies.get(COOKIE_NAME)
    if not session_id:
        session_id = new_session_id()
        response.set_cookie(COOKIE_NAME, session_id, httponly=True, samesite="lax")
    return session_id


def get_session(session_id: str = Depends(get_session_id)) -> TranscriptionSession:
    """Resolve the caller's session, creating and storing it if needed."""
    return sessions.get(session_id)


def peek_session(session_id: str = Depends(get_session_id)) -> TranscriptionSession:
    """Resolve the caller's session, or an unstored IDLE one if it has none."""
    session = sessions.peek(session_id)
    if session is None:
        session = TranscriptionSession(transcription_client, settings.max_upload_bytes)
    return session


@app.get("/")
async def get_index() -> HTMLResponse:
    """Serve the index.html single-page UI."""
    return HTMLResponse(INDEX_HTML.read_text(encoding="utf-8"))


@app.get("/healthz")
async def healthz() -> dict:
    """Report that the app is up."""
    return {"status": "ok"}


@app.get("/api/state")
async def get_state(session: TranscriptionSession = Depends(peek_session)) -> dict:
    """Return the view model for the caller's session."""
    return render_view(session)


@app.post("/api/transcribe")
async def transcribe_video(
    file: UploadFile = File(...),
    session: TranscriptionSession = Depends(get_session),
) -> dict:
    """Validate and encode the uploaded video, then generate its transcript."""
    try:
        await session.select_file(file)
    except FileValidationError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except FileReadError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except InvalidTransitionError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    finally:
        await file.close()
    return render_view(session)


@app.post("/api/reset")
async def reset_session(session: TranscriptionSession = Depends(peek_session)) -> dict:
    """Clear the session and return to the upload screen."""
    session.reset()
    return render_view(session)


@app.get("/api/transcript/download")
async def download_transcript(
    session: TranscriptionSession = Depends(peek_session),
) -> PlainTextResponse:
    """Send the transcript as a plain-text attachment named after the video."""
    if session.status != ProcessStatus.COMPLETE or session.result is None or session.file is None:
        raise HTTPException(status_code=404, detail="No transcript available.")
    filename = transcript_filename(session.file.name)
    return PlainTextResponse(
        session.result.text,
        headers={"Content-Disposition": content_disposition(filename)},
    )

"""This module contains the client that manages the Gemini communication"""

import asyncio
import base64
import binascii

import httpx
from google import genai
from google.genai import errors, types

from .config import Settings
from .exceptions import EmptyTranscriptError, RemoteModelError

DATA_URL_MARKER = "base64,"

TRANSCRIPT_PROMPT = (
    "Please provide a comprehensive transcript of the audio in this video. "
    "Format the output clearly with timestamps (e.g., [MM:SS]) at the beginning "
    "of each new speaker's turn or significant segment. If there are multiple "
    "speakers, try to identify them as Speaker 1, Speaker 2, etc."
)


def strip_data_url_prefix(payload: str) -> str:
    """Return the raw base64 part of a data URL, or the payload unchanged."""
    if DATA_URL_MARKER in payload:
        return payload.split(DATA_URL_MARKER, 1)[1]
    return payload


class TranscriptionClient:
    """Sends a video to the configured Gemini model and returns its transcript."""

    def __init__(self, settings: Settings, client: genai.Client | None = None) -> None:
        self.settings = settings
        self._client = client

    def _get_client(self) -> genai.Client:
        # Created on first use so a missing key only fails the call, not startup
        if self._client is None:
            self._client = genai.Client(api_key=self.settings.gemini_api_key)
        return self._client

    def build_contents(self, encoded_payload: str, mime_type: str) -> list[types.Part]:
        """Build the inline video part followed by the fixed instruction."""
        raw = strip_data_url_prefix(encoded_payload)
        video = types.Part(
            inline_data=types.Blob(
                mime_type=mime_type,
                data=base64.b64decode(raw, validate=True),
            )
        )
        return [video, types.Part(text=TRANSCRIPT_PROMPT)]

    async def transcribe(self, encoded_payload: str, mime_type: str) -> str:
        """Generate a timestamped transcript for an encoded video.

        Raises:
            EmptyTranscriptError: if the model answers without any text.
            RemoteModelError: if the call itself fails.
        """
        try:
            contents = self.build_contents(encoded_payload, mime_type)
            response = await self._get_client().aio.models.generate_content(
                model=self.settings.gemini_model_name,
                contents=contents,
                config=types.GenerateContentConfig(
                    temperature=self.settings.gemini_temperature,
                    max_output_tokens=self.settings.gemini_max_output_tokens,
                ),
            )
        except binascii.Error as exc:
            raise RemoteModelError(f"Video payload is not valid base64: {exc}") from exc
        except (errors.APIError, httpx.HTTPError) as exc:
            raise RemoteModelError(f"Gemini API error: {exc}") from exc
        except (OSError, asyncio.TimeoutError) as exc:
            # aiohttp transport failures surface as OSError or timeouts
            raise RemoteModelError(f"Gemini connection error: {exc!r}") from exc
        except ValueError as exc:
            # genai.Client raises ValueError when no API key is configured
            raise RemoteModelError(f"Gemini client error: {exc}") from exc

        if not response.text:
            raise EmptyTranscriptError("No transcript generated.")
        return response.text

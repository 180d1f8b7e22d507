import sys
import os

import pytest

# Ensure the project root is in sys.path so `from videoscribe.main import app` works
# without installing the package
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from videoscribe.config import Settings  # noqa: E402


class FakeUpload:
    """Stand-in for Starlette's UploadFile."""

    def __init__(self, filename="clip.mp4", content_type="video/mp4", data=b"fake-video-bytes",
                 size=None, read_error=None):
        self.filename = filename
        self.content_type = content_type
        self.data = data
        self.size = len(data) if size is None else size
        self.read_error = read_error
        self.read_calls = 0

    async def read(self, size=-1):
        self.read_calls += 1
        if self.read_error is not None:
            raise self.read_error
        return self.data if size < 0 else self.data[:size]


@pytest.fixture
def settings():
    return Settings(_env_file=None, gemini_api_key="test-key")


@pytest.fixture
def make_upload():
    return FakeUpload

"""
VideoScribe, a video-to-text app built with FastAPI, exposing
- an index.html UI,
- a video upload endpoint that validates and encodes the clip in memory,
- and a session state machine that sends the clip to Gemini
and returns a timestamped transcript.
"""

__version__ = "0.2.0"

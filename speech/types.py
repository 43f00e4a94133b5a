from dataclasses import dataclass
from typing import Optional


@dataclass
class Transcript:
    """Result of ASR transcription."""
    text: str
    language: Optional[str] = None


@dataclass
class AudioBlob:
    """Binary audio payload for TTS output."""
    data: bytes
    mime_type: str = "audio/mpeg"

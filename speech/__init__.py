"""Speech processing package: ASR (speech-to-text), TTS (text-to-speech), and the voice round-trip pipeline."""

from .types import Transcript, AudioBlob
from .asr_service import ASRService
from .tts_service import TTSService
from .pipeline import VoicePipeline

__all__ = [
    "Transcript",
    "AudioBlob",
    "ASRService",
    "TTSService",
    "VoicePipeline",
]

import logging
import os
from typing import BinaryIO

import openai

from ..asr_service import ASRService
from ..types import Transcript
from utils.errors import TranscriptionError

logger = logging.getLogger(__name__)


class OpenAIASR(ASRService):
    """OpenAI transcription wrapper (e.g., gpt-4o-mini-transcribe)."""

    def __init__(self, client, model: str = "gpt-4o-mini-transcribe"):
        self.client = client
        self.model = model

    def transcribe(self, audio_file: BinaryIO) -> Transcript:
        """Send the open file handle to OpenAI; the SDK streams it from disk."""
        name = os.path.basename(getattr(audio_file, 'name', '') or 'audio')
        logger.info(f"🎙️ Starting ASR transcription of {name} with model {self.model}")

        try:
            result = self.client.audio.transcriptions.create(
                model=self.model,
                file=audio_file,
            )
        except openai.OpenAIError as e:
            logger.error(f"❌ ASR error: {e}")
            raise TranscriptionError(f"Transcription failed: {e}")

        text = getattr(result, 'text', None)
        if text is None and isinstance(result, dict):
            text = result.get('text')
        if text is None:
            logger.error("❌ ASR response carried no text field")
            raise TranscriptionError("Transcription failed: response carried no text")

        cleaned_text = text.strip()
        logger.info(f"✅ ASR completed (OpenAI {self.model}): {len(cleaned_text)} chars")
        return Transcript(text=cleaned_text, language=getattr(result, 'language', None))

import logging
from typing import Optional

import openai

from ..tts_service import TTSService
from ..types import AudioBlob
from utils.errors import SynthesisError

logger = logging.getLogger(__name__)


class OpenAITTS(TTSService):
    """OpenAI TTS wrapper (e.g., gpt-4o-mini-tts)."""

    mime_type = "audio/mpeg"

    def __init__(self, client, model: str = "gpt-4o-mini-tts", default_voice: str = "alloy"):
        self.client = client
        self.model = model
        self.default_voice = default_voice

    def synthesize(self, text: str, voice: Optional[str] = None) -> AudioBlob:
        """Generate MP3 audio using OpenAI TTS."""
        voice_name = voice or self.default_voice

        try:
            result = self.client.audio.speech.create(
                model=self.model,
                voice=voice_name,
                input=text,
                response_format="mp3",
            )
        except openai.OpenAIError as e:
            logger.error(f"❌ TTS error: {e}")
            raise SynthesisError(f"Speech synthesis failed: {e}")

        # openai v1 returns bytes in .content or .read(); handle both
        audio_bytes = None
        if hasattr(result, 'content'):
            audio_bytes = result.content
        elif hasattr(result, 'read'):
            audio_bytes = result.read()

        if not audio_bytes:
            logger.error("❌ TTS produced no audio")
            raise SynthesisError("Speech synthesis returned no audio")

        logger.info(f"✅ TTS completed (OpenAI {self.model}, voice {voice_name}): {len(audio_bytes)} bytes")
        return AudioBlob(data=audio_bytes, mime_type=self.mime_type)

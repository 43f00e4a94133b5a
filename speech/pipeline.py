import logging
import uuid
from typing import Dict, Any, Iterable, Optional

from .types import Transcript
from .asr_service import ASRService
from .tts_service import TTSService
from storage.uploads import UploadSink, UploadedAudio
from storage.artifacts import ArtifactStore
from utils.errors import StorageError
from utils.helpers import has_wake_word, join_url
from utils.logging import traced_step

logger = logging.getLogger(__name__)

UNKNOWN_LABEL = 'unknown'


def new_request_id() -> str:
    return uuid.uuid4().hex[:8]


class VoicePipeline:
    """Coordinates upload → ASR → TTS → artifact for one uploaded clip."""

    def __init__(self, asr: ASRService, tts: TTSService, uploads: UploadSink,
                 artifacts: ArtifactStore, audio_url_prefix: str = 'audio',
                 classifier=None, wake_words: Iterable[str] = ()):
        self.asr = asr
        self.tts = tts
        self.uploads = uploads
        self.artifacts = artifacts
        self.audio_url_prefix = audio_url_prefix
        self.classifier = classifier
        self.wake_words = list(wake_words)

    def process(self, upload: UploadedAudio, base_url: str, voice: Optional[str] = None) -> Dict[str, Any]:
        """Run the round-trip for a stored upload and build the success envelope.

        The upload is removed on every exit path. Errors propagate as
        VoiceLoopError subclasses.
        """
        request_id = new_request_id()
        try:
            transcript = self.transcribe(upload, request_id)

            label = None
            if self.classifier is not None:
                label = self.classify(upload, transcript, request_id)

            audio_url = self.speak(transcript.text, base_url, voice=voice, request_id=request_id)

            response = {
                'success': True,
                'text': transcript.text,
                'audio_url': audio_url,
            }
            if label is not None:
                response['label'] = label
            return response

        finally:
            self.uploads.discard(upload)

    def transcribe(self, upload: UploadedAudio, request_id: str = '-') -> Transcript:
        """Stream the stored upload to the ASR gateway and log the transcript"""
        with traced_step(request_id, 'transcription') as trace:
            try:
                with open(upload.path, 'rb') as audio_file:
                    transcript = self.asr.transcribe(audio_file)
            except OSError as e:
                trace.detail = 'unreadable input'
                raise StorageError(f"Could not read uploaded audio: {e}")
            trace.detail = f'{len(transcript.text)} chars'

        # Transcript goes to stdout for operational visibility
        logger.info(f"🧠 Transcript [{request_id}]: {transcript.text}")
        return transcript

    def heard_wake_word(self, transcript: Transcript) -> bool:
        return has_wake_word(transcript.text, self.wake_words)

    def classify(self, upload: UploadedAudio, transcript: Transcript, request_id: str = '-') -> str:
        """Label the clip; only transcripts carrying a wake word reach the classifier"""
        if self.classifier is None or not self.heard_wake_word(transcript):
            return UNKNOWN_LABEL

        with traced_step(request_id, 'classification') as trace:
            label = self.classifier.classify(upload.path)
            trace.detail = label
        return label

    def speak(self, text: str, base_url: str, voice: Optional[str] = None, request_id: str = '-') -> str:
        """Synthesize text, persist it as an artifact and return its public URL"""
        with traced_step(request_id, 'synthesis') as trace:
            audio = self.tts.synthesize(text, voice=voice)
            trace.detail = f'{len(audio.data)} bytes'

        with traced_step(request_id, 'artifact') as trace:
            artifact = self.artifacts.save(audio.data)
            trace.detail = artifact.filename

        audio_url = join_url(base_url, self.audio_url_prefix, artifact.filename)
        logger.info(f"📢 Audio ready [{request_id}]: {audio_url}")
        return audio_url

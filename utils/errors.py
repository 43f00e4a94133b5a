"""Error types raised along the audio round-trip"""

from typing import Optional


class VoiceLoopError(Exception):
    """Base error carrying the HTTP status it maps to"""

    status_code = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self) -> dict:
        return {'success': False, 'error': self.message}


class InvalidAudioError(VoiceLoopError):
    """Malformed request: missing audio part, unreadable body, bad form fields"""

    status_code = 400


class StorageError(VoiceLoopError):
    """Local filesystem failure (create directory, write output, read input)"""


class ExternalServiceError(VoiceLoopError):
    """A remote speech service failed or returned an unusable response"""


class TranscriptionError(ExternalServiceError):
    pass


class SynthesisError(ExternalServiceError):
    pass

from abc import ABC, abstractmethod
from typing import BinaryIO
from .types import Transcript


class ASRService(ABC):
    """Abstract speech-to-text service."""

    @abstractmethod
    def transcribe(self, audio_file: BinaryIO) -> Transcript:
        """Transcribe the audio behind an open binary handle.

        Raises TranscriptionError when the remote service fails.
        """
        raise NotImplementedError

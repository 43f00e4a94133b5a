from abc import ABC, abstractmethod
from typing import Optional
from .types import AudioBlob


class TTSService(ABC):
    """Abstract text-to-speech service."""

    @abstractmethod
    def synthesize(self, text: str, voice: Optional[str] = None) -> AudioBlob:
        """Generate MPEG audio for the given text.

        Raises SynthesisError when the remote service fails.
        """
        raise NotImplementedError

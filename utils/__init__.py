"""Utility functions module"""

from .errors import (
    VoiceLoopError, InvalidAudioError, StorageError,
    ExternalServiceError, TranscriptionError, SynthesisError
)
from .helpers import (
    epoch_millis, random_suffix, sanitize_filename, with_counter,
    strip_diacritics, has_wake_word, join_url
)
from .logging import (
    ConsoleFormatter, setup_logging, traced_step
)

__all__ = [
    # Errors
    'VoiceLoopError', 'InvalidAudioError', 'StorageError',
    'ExternalServiceError', 'TranscriptionError', 'SynthesisError',

    # Helpers
    'epoch_millis', 'random_suffix', 'sanitize_filename', 'with_counter',
    'strip_diacritics', 'has_wake_word', 'join_url',

    # Logging
    'ConsoleFormatter', 'setup_logging', 'traced_step'
]

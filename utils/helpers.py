"""Helper utility functions"""

import os
import re
import time
import uuid
import logging
import unicodedata
from typing import Iterable, Optional

from werkzeug.utils import secure_filename

logger = logging.getLogger(__name__)


def epoch_millis() -> int:
    """Current wall-clock time in milliseconds"""
    return int(time.time() * 1000)


def random_suffix(length: int = 8) -> str:
    """Short random hex token for filename collision avoidance"""
    return uuid.uuid4().hex[:length]


def sanitize_filename(filename: Optional[str], fallback: str = 'audio') -> str:
    """Strip path components and unsafe characters from a client filename"""
    cleaned = secure_filename(filename or '')
    return cleaned or fallback


def with_counter(path: str, counter: int) -> str:
    """Insert -<counter> before the extension: a/b.wav -> a/b-1.wav"""
    root, ext = os.path.splitext(path)
    return f"{root}-{counter}{ext}"


def strip_diacritics(text: str) -> str:
    """Remove combining marks; also folds Vietnamese đ/Đ to d/D"""
    decomposed = unicodedata.normalize('NFD', text or '')
    stripped = ''.join(ch for ch in decomposed if not unicodedata.combining(ch))
    return stripped.replace('đ', 'd').replace('Đ', 'D')


def has_wake_word(text: str, wake_words: Iterable[str]) -> bool:
    """Check whether the transcript contains any wake word"""
    words = [strip_diacritics(w.lower()) for w in wake_words if w]
    if not words or not text:
        return False
    pattern = '|'.join(re.escape(w) for w in words)
    return re.search(f'({pattern})', strip_diacritics(text.lower())) is not None


def join_url(base_url: str, *parts: str) -> str:
    """Join URL segments with single slashes"""
    segments = [base_url.rstrip('/')] + [p.strip('/') for p in parts]
    return '/'.join(segments)

"""Concrete speech providers backed by remote services."""

from openai import OpenAI

from .openai_asr import OpenAIASR
from .openai_tts import OpenAITTS
from .label_classifier import LabelClassifier

__all__ = [
    "OpenAIASR",
    "OpenAITTS",
    "LabelClassifier",
    "create_openai_client",
]


def create_openai_client(config) -> OpenAI:
    """One client per process, shared by both gateways; retries are disabled."""
    return OpenAI(
        api_key=config.openai_api_key,
        timeout=config.openai_timeout,
        max_retries=0,
    )

import io
import os
import wave

import pytest

from app import create_flask_app
from config.settings import VoiceLoopConfig
from speech.asr_service import ASRService
from speech.tts_service import TTSService
from speech.types import Transcript, AudioBlob
from utils.errors import TranscriptionError, SynthesisError


def make_wav(seconds: float = 1.0, rate: int = 16000) -> bytes:
    """Silent mono 16-bit PCM WAV"""
    buf = io.BytesIO()
    with wave.open(buf, 'wb') as wav:
        wav.setnchannels(1)
        wav.setsampwidth(2)
        wav.setframerate(rate)
        wav.writeframes(b'\x00\x00' * int(seconds * rate))
    return buf.getvalue()


class StubASR(ASRService):
    def __init__(self, text: str = '', error: Exception = None):
        self.text = text
        self.error = error
        self.calls = []

    def transcribe(self, audio_file):
        self.calls.append(audio_file.name)
        if self.error is not None:
            raise self.error
        return Transcript(text=self.text)


class StubTTS(TTSService):
    def __init__(self, payload: bytes = b'\xff' * 1024, error: Exception = None, echo: bytes = None):
        self.payload = payload
        self.error = error
        self.echo = echo
        self.calls = []

    def synthesize(self, text, voice=None):
        self.calls.append((text, voice))
        if self.error is not None:
            raise self.error
        if self.echo is not None:
            return AudioBlob(data=self.echo * len(text))
        return AudioBlob(data=self.payload)


@pytest.fixture
def env(tmp_path):
    return {
        'OPENAI_API_KEY': 'sk-test-key-123456',
        'PORT': '3000',
        'UPLOAD_DIR': str(tmp_path / 'uploads'),
        'PUBLIC_DIR': str(tmp_path / 'public'),
    }


@pytest.fixture
def config(env):
    return VoiceLoopConfig(env=env)


@pytest.fixture
def upload_dir(config):
    return config.upload_dir


@pytest.fixture
def audio_dir(config):
    return config.audio_dir


@pytest.fixture
def wav_bytes():
    return make_wav()


@pytest.fixture
def make_client(config):
    def _make(asr=None, tts=None, classifier=None, cfg=None):
        app = create_flask_app(cfg or config, asr=asr or StubASR(), tts=tts or StubTTS(),
                               classifier=classifier)
        app.config['TESTING'] = True
        return app.test_client()
    return _make


def post_audio(client, data: bytes, filename: str = 'clip.wav', **fields):
    form = {'audio': (io.BytesIO(data), filename)}
    form.update(fields)
    return client.post('/api/audio', data=form, content_type='multipart/form-data',
                       headers={'Origin': 'http://example.com'})


def listdir(path):
    return sorted(os.listdir(path)) if os.path.isdir(path) else []

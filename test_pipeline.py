import io
import os

import pytest
from werkzeug.datastructures import FileStorage

from conftest import StubASR, StubTTS, listdir
from speech.pipeline import VoicePipeline
from storage import UploadSink, ArtifactStore
from utils.errors import TranscriptionError, SynthesisError, StorageError


class RecordingClassifier:
    def __init__(self, label='greeting'):
        self.label = label
        self.paths = []

    def classify(self, path):
        self.paths.append(path)
        assert os.path.exists(path)
        return self.label


@pytest.fixture
def sink(tmp_path):
    return UploadSink(str(tmp_path / 'uploads'))


@pytest.fixture
def store(tmp_path):
    return ArtifactStore(str(tmp_path / 'public' / 'audio'))


def stored_upload(sink, data=b'RIFFclip'):
    return sink.save(FileStorage(stream=io.BytesIO(data), filename='clip.wav'))


def test_round_trip_writes_artifact_and_removes_upload(sink, store):
    asr = StubASR('hello world')
    tts = StubTTS(payload=b'\xff' * 64)
    pipeline = VoicePipeline(asr, tts, sink, store)
    upload = stored_upload(sink)

    result = pipeline.process(upload, 'http://localhost:3000', voice='nova')

    assert set(result) == {'success', 'text', 'audio_url'}
    assert result['success'] is True
    assert result['text'] == 'hello world'
    filename = result['audio_url'].rsplit('/', 1)[1]
    assert result['audio_url'] == f'http://localhost:3000/audio/{filename}'
    with open(store.path_for(filename), 'rb') as fh:
        assert fh.read() == b'\xff' * 64
    assert asr.calls == [upload.path]
    assert tts.calls == [('hello world', 'nova')]
    assert not os.path.exists(upload.path)


def test_transcription_failure_skips_synthesis(sink, store):
    tts = StubTTS()
    pipeline = VoicePipeline(StubASR(error=TranscriptionError('network down')), tts, sink, store)
    upload = stored_upload(sink)

    with pytest.raises(TranscriptionError):
        pipeline.process(upload, 'http://localhost:3000')

    assert tts.calls == []
    assert listdir(store.root) == []
    assert not os.path.exists(upload.path)


def test_synthesis_failure_creates_no_artifact(sink, store):
    pipeline = VoicePipeline(StubASR('hi'), StubTTS(error=SynthesisError('tts down')), sink, store)
    upload = stored_upload(sink)

    with pytest.raises(SynthesisError):
        pipeline.process(upload, 'http://localhost:3000')

    assert listdir(store.root) == []
    assert not os.path.exists(upload.path)


def test_unreadable_upload_is_storage_error(sink, store):
    pipeline = VoicePipeline(StubASR('hi'), StubTTS(), sink, store)
    upload = stored_upload(sink)
    os.remove(upload.path)

    with pytest.raises(StorageError):
        pipeline.process(upload, 'http://localhost:3000')


def test_classifier_runs_only_on_wake_word(sink, store):
    classifier = RecordingClassifier('greeting')
    pipeline = VoicePipeline(StubASR('Xin chào robot'), StubTTS(), sink, store,
                             classifier=classifier, wake_words=['xin chao'])

    result = pipeline.process(stored_upload(sink), 'http://localhost:3000')

    assert result['label'] == 'greeting'
    assert len(classifier.paths) == 1


def test_classifier_skipped_without_wake_word(sink, store):
    classifier = RecordingClassifier('greeting')
    pipeline = VoicePipeline(StubASR('good morning'), StubTTS(), sink, store,
                             classifier=classifier, wake_words=['xin chao'])

    result = pipeline.process(stored_upload(sink), 'http://localhost:3000')

    assert result['label'] == 'unknown'
    assert classifier.paths == []

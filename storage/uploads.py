import io
import os
import shutil
import logging
from dataclasses import dataclass

from utils.errors import InvalidAudioError, StorageError
from utils.helpers import epoch_millis, sanitize_filename, with_counter

logger = logging.getLogger(__name__)

COPY_CHUNK_SIZE = 64 * 1024
MAX_NAME_ATTEMPTS = 100


@dataclass
class UploadedAudio:
    """Client audio persisted to a temporary location on disk."""
    path: str
    original_filename: str
    size_bytes: int


class UploadSink:
    """Persists the `audio` part of a multipart submission under the upload directory."""

    def __init__(self, upload_dir: str):
        self.upload_dir = os.path.abspath(upload_dir)

    def save(self, file_storage) -> UploadedAudio:
        """Write a werkzeug FileStorage to `<epoch-millis>-<sanitized-name>`."""
        if file_storage is None:
            raise InvalidAudioError("Missing 'audio' file field")
        if not file_storage.filename:
            raise InvalidAudioError("The 'audio' field has no filename")

        return self._store(file_storage.stream, file_storage.filename)

    def save_bytes(self, data: bytes, filename: str = 'recv.wav') -> UploadedAudio:
        """Persist an in-memory payload, e.g. one received from a message broker."""
        return self._store(io.BytesIO(data or b''), filename)

    def _store(self, stream, original: str) -> UploadedAudio:
        name = f"{epoch_millis()}-{sanitize_filename(original)}"

        try:
            os.makedirs(self.upload_dir, exist_ok=True)
            path, handle = self._open_unique(os.path.join(self.upload_dir, name))
            with handle:
                shutil.copyfileobj(stream, handle, COPY_CHUNK_SIZE)
        except OSError as e:
            logger.error(f"❌ Failed to store upload {original!r}: {e}")
            raise StorageError(f"Could not store uploaded audio: {e}")

        size = os.path.getsize(path)
        if size == 0:
            self._remove(path)
            raise InvalidAudioError("Uploaded audio is empty")

        logger.info(f"🎧 Audio received: {path} ({size} bytes)")
        return UploadedAudio(path=path, original_filename=original, size_bytes=size)

    def discard(self, upload: UploadedAudio):
        """Remove an uploaded input; removal failures are logged and ignored."""
        if upload is not None:
            self._remove(upload.path)

    @staticmethod
    def _open_unique(path: str):
        candidate = path
        for counter in range(1, MAX_NAME_ATTEMPTS + 1):
            try:
                return candidate, open(candidate, 'xb')
            except FileExistsError:
                candidate = with_counter(path, counter)
        raise StorageError(f"No free upload name for {os.path.basename(path)}")

    @staticmethod
    def _remove(path: str):
        try:
            os.remove(path)
            logger.debug(f"🧹 Removed upload {path}")
        except OSError as e:
            logger.warning(f"⚠️ Could not remove upload {path}: {e}")

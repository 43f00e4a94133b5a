import os
import logging
from dataclasses import dataclass

from utils.errors import StorageError
from utils.helpers import epoch_millis, random_suffix

logger = logging.getLogger(__name__)

MAX_NAME_ATTEMPTS = 20


@dataclass
class Artifact:
    """Synthesized audio persisted under the public audio directory."""
    filename: str
    path: str
    size_bytes: int


class ArtifactStore:
    """Directory of generated audio, served statically under /audio/.

    Files are never pruned.
    """

    def __init__(self, root: str, prefix: str = 'response', extension: str = '.mp3'):
        self.root = os.path.abspath(root)
        self.prefix = prefix
        self.extension = extension

    def ensure_directory(self):
        try:
            os.makedirs(self.root, exist_ok=True)
        except OSError as e:
            logger.error(f"❌ Cannot create artifact directory {self.root}: {e}")
            raise StorageError(f"Could not create audio directory: {e}")

    def new_filename(self) -> str:
        return f"{self.prefix}_{epoch_millis()}-{random_suffix()}{self.extension}"

    def save(self, data: bytes) -> Artifact:
        """Write synthesized bytes to a freshly named file"""
        self.ensure_directory()

        for _ in range(MAX_NAME_ATTEMPTS):
            filename = self.new_filename()
            path = os.path.join(self.root, filename)
            try:
                with open(path, 'xb') as handle:
                    handle.write(data)
                break
            except FileExistsError:
                # Same millisecond and same random token; draw again
                continue
            except OSError as e:
                logger.error(f"❌ Cannot write artifact {path}: {e}")
                raise StorageError(f"Could not write synthesized audio: {e}")
        else:
            raise StorageError("No free artifact name after repeated collisions")

        logger.info(f"💾 Saved artifact {filename} ({len(data)} bytes)")
        return Artifact(filename=filename, path=path, size_bytes=len(data))

    def path_for(self, filename: str) -> str:
        """Resolve an artifact name inside the store, rejecting traversal"""
        path = os.path.abspath(os.path.join(self.root, filename))
        if os.path.dirname(path) != self.root:
            raise StorageError(f"Invalid artifact name: {filename}")
        return path

    def exists(self, filename: str) -> bool:
        try:
            return os.path.isfile(self.path_for(filename))
        except StorageError:
            return False

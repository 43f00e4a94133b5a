"""Local disk storage: uploaded inputs and synthesized artifacts."""

from .uploads import UploadSink, UploadedAudio
from .artifacts import ArtifactStore, Artifact

__all__ = [
    "UploadSink",
    "UploadedAudio",
    "ArtifactStore",
    "Artifact",
]

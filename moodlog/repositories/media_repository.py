# moodlog/repositories/media_repository.py
from abc import ABC, abstractmethod
from moodlog.models.export import RelocationOutcome
from moodlog.models.sample import MediaHandle

class MediaRepository(ABC):
    """Private storage for captured clips"""

    @abstractmethod
    def open(self) -> None:
        pass

    @abstractmethod
    def close(self) -> None:
        pass

    @abstractmethod
    def ingest(self, handle: MediaHandle) -> str:
        """Move a raw capture into private storage and return its reference"""
        pass

    @abstractmethod
    def discard(self, handle: MediaHandle) -> None:
        pass

    @abstractmethod
    def exists(self, video_ref: str) -> bool:
        pass

    @abstractmethod
    def read_bytes(self, video_ref: str) -> bytes:
        pass

    @abstractmethod
    def relocate(self, video_ref: str, destination_dir: str, filename: str) -> RelocationOutcome:
        """Copy a clip to ``destination_dir`` and delete the original only once the copy is complete"""
        pass

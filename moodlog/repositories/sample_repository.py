# moodlog/repositories/sample_repository.py
from abc import ABC, abstractmethod
from typing import List
from moodlog.models.sample import Location, Sample

class SampleRepository(ABC):
    """Durable, append-only table of committed samples"""

    @abstractmethod
    def insert(self, timestamp: str, mood: int, video_ref: str, location: Location) -> Sample:
        pass

    @abstractmethod
    def list_all(self) -> List[Sample]:
        pass

    @abstractmethod
    def count(self) -> int:
        pass

# moodlog/models/sample.py
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

MIN_MOOD = 1
MAX_MOOD = 5

@dataclass(frozen=True)
class Location:
    """A coordinate fix"""
    lat: float
    lng: float


@dataclass
class Sample:
    """Committed mood sample, built by the record store from a durable row"""
    id: int
    timestamp: str  # ISO-8601, generated at commit time
    mood: int
    video_ref: str
    location: Location

    @property
    def lat(self) -> float:
        return self.location.lat

    @property
    def lng(self) -> float:
        return self.location.lng


@dataclass
class MediaHandle:
    """Raw clip produced by the capture device, before it enters private storage"""
    path: str
    captured_at: datetime
    duration_seconds: Optional[float] = None
    frame_count: Optional[int] = None

# moodlog/models/capture.py
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Union

from moodlog.models.sample import Location

@dataclass(frozen=True)
class Idle:
    """Nothing recorded and nothing staged"""
    name = "idle"


@dataclass(frozen=True)
class Staged:
    """A recorded clip and its fix, waiting for a mood rating"""
    video_ref: str
    location: Location
    captured_at: datetime
    name = "staged"


@dataclass(frozen=True)
class Recording:
    """A capture is in flight; ``previous`` is restored if it fails"""
    previous: Optional[Staged] = None
    name = "recording"


CaptureState = Union[Idle, Recording, Staged]

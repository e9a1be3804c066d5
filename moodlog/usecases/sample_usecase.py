# moodlog/usecases/sample_usecase.py
import asyncio
import logging
from datetime import datetime, timezone
from typing import Callable, List, Optional

from moodlog.errors import NoStagedCaptureError, ValidationError
from moodlog.helpers.timestamps import iso_timestamp
from moodlog.models.capture import CaptureState, Staged
from moodlog.models.sample import MAX_MOOD, MIN_MOOD, Sample
from moodlog.repositories.sample_repository import SampleRepository
from moodlog.usecases.capture_staging import CaptureStaging

logger = logging.getLogger(__name__)


def validate_mood(mood) -> int:
    if mood is None:
        raise ValidationError("Pick a mood first")
    if isinstance(mood, bool) or not isinstance(mood, int):
        raise ValidationError(f"Mood must be a whole number, got {mood!r}")
    if not MIN_MOOD <= mood <= MAX_MOOD:
        raise ValidationError(f"Mood must be between {MIN_MOOD} and {MAX_MOOD}, got {mood}")
    return mood


class SampleUseCase:
    """Capture -> staging -> commit"""

    def __init__(self, sample_repository: SampleRepository, staging: CaptureStaging,
                 clock: Optional[Callable[[], datetime]] = None):
        self.sample_repo = sample_repository
        self.staging = staging
        self.clock = clock or (lambda: datetime.now(timezone.utc))
        self._commit_lock = asyncio.Lock()

    @property
    def capture_state(self) -> CaptureState:
        return self.staging.state

    async def begin_capture(self) -> Staged:
        return await self.staging.begin_capture()

    def discard_capture(self):
        """Drop the staged capture without committing; its file stays in the media store"""
        self.staging.clear()

    async def commit(self, mood) -> Sample:
        """Persist the staged capture with a mood rating.

        The sample timestamp is taken now, at commit time, not when the clip
        was recorded.
        """
        validate_mood(mood)

        async with self._commit_lock:
            staged = self.staging.staged
            if staged is None:
                raise NoStagedCaptureError()

            timestamp = iso_timestamp(self.clock())
            try:
                sample = await asyncio.to_thread(
                    self.sample_repo.insert, timestamp, mood, staged.video_ref, staged.location
                )
            except Exception as e:
                logger.error(f"Error committing sample: {e}")
                raise

            self.staging.clear(expected=staged)

        logger.info(f"✅ Sample {sample.id} committed (mood={sample.mood}, ts={sample.timestamp})")
        return sample

    async def list_samples(self) -> List[Sample]:
        try:
            return await asyncio.to_thread(self.sample_repo.list_all)
        except Exception as e:
            logger.error(f"Error listing samples: {e}")
            raise

    async def count_samples(self) -> int:
        return await asyncio.to_thread(self.sample_repo.count)

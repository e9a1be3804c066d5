# moodlog/usecases/capture_staging.py
import asyncio
import logging
from typing import Optional

from moodlog.errors import CaptureInProgressError
from moodlog.models.capture import CaptureState, Idle, Recording, Staged
from moodlog.processors.capture_device import CaptureDevice
from moodlog.repositories.media_repository import MediaRepository
from moodlog.services.location_provider import LocationProvider

logger = logging.getLogger(__name__)

class CaptureStaging:
    """Holds the single clip that has been recorded but not yet committed.

    The state only moves through ``begin_capture`` and ``clear``:

        Idle/Staged --begin_capture--> Recording --ok--> Staged
                                                 --error--> previous state
        any --clear--> Idle (or Recording with nothing to fall back to)
    """

    def __init__(self, capture_device: CaptureDevice, location_provider: LocationProvider,
                 media_repository: MediaRepository, max_duration_seconds: float = 1.0):
        self.capture_device = capture_device
        self.location_provider = location_provider
        self.media_repo = media_repository
        self.max_duration_seconds = max_duration_seconds
        self._state: CaptureState = Idle()

    @property
    def state(self) -> CaptureState:
        return self._state

    @property
    def is_recording(self) -> bool:
        return isinstance(self._state, Recording)

    @property
    def staged(self) -> Optional[Staged]:
        """The committable capture, if any (kept visible while a new one is recording)"""
        if isinstance(self._state, Staged):
            return self._state
        if isinstance(self._state, Recording):
            return self._state.previous
        return None

    async def begin_capture(self) -> Staged:
        """Record a clip and take a fix; stage both only if both succeed"""
        if isinstance(self._state, Recording):
            raise CaptureInProgressError()

        previous = self._state if isinstance(self._state, Staged) else None
        self._state = Recording(previous=previous)

        handle = None
        staged = None
        try:
            handle = await self.capture_device.record(self.max_duration_seconds)
            location = await self.location_provider.get_fix()
            video_ref = await asyncio.to_thread(self.media_repo.ingest, handle)
            staged = Staged(video_ref=video_ref, location=location, captured_at=handle.captured_at)
        except Exception as e:
            logger.error(f"Capture failed: {e}")
            if handle is not None:
                self.media_repo.discard(handle)
            raise
        finally:
            if staged is None:
                self._restore_previous()

        self._state = staged
        logger.info(f"📼 Capture staged: {staged.video_ref} @ ({staged.location.lat}, {staged.location.lng})")
        return staged

    def clear(self, expected: Optional[Staged] = None):
        """Empty the staged slot.

        With ``expected``, only that capture is dropped; a newer one that was
        staged in the meantime is kept.
        """
        if isinstance(self._state, Recording):
            if expected is None or self._state.previous == expected:
                self._state = Recording(previous=None)
            return
        if expected is None or self._state == expected:
            self._state = Idle()

    def _restore_previous(self):
        if isinstance(self._state, Recording):
            previous = self._state.previous
            self._state = previous if previous is not None else Idle()

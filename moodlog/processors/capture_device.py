# moodlog/processors/capture_device.py
import asyncio
import logging
import os
import time
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from uuid import uuid4

import cv2

from moodlog.config import CaptureConfig
from moodlog.errors import CaptureDeviceError
from moodlog.models.sample import MediaHandle

logger = logging.getLogger(__name__)

class CaptureDevice(ABC):
    """Camera/microphone that records a short clip on request"""

    @abstractmethod
    async def record(self, max_duration_seconds: float) -> MediaHandle:
        pass


class OpenCVCaptureDevice(CaptureDevice):
    """Records clips from a local camera with OpenCV"""

    def __init__(self, config: CaptureConfig):
        self.config = config
        self.temp_dir = config.temp_dir
        os.makedirs(self.temp_dir, exist_ok=True)

    async def record(self, max_duration_seconds: float) -> MediaHandle:
        return await asyncio.to_thread(self._record_blocking, max_duration_seconds)

    def _record_blocking(self, max_duration_seconds: float) -> MediaHandle:
        captured_at = datetime.now(timezone.utc)
        file_path = os.path.join(self.temp_dir, f"capture_{uuid4().hex}.mp4")

        cap = cv2.VideoCapture(self.config.device_index)
        if not cap.isOpened():
            cap.release()
            raise CaptureDeviceError(f"Camera {self.config.device_index} could not be opened")

        out = None
        frames_written = 0
        try:
            # First frames of many webcams are black while exposure settles
            for _ in range(self.config.warmup_frames):
                cap.read()

            ret, frame = cap.read()
            if not ret or frame is None:
                raise CaptureDeviceError("Camera returned no frames")

            height, width = frame.shape[:2]
            fourcc = cv2.VideoWriter_fourcc(*self.config.codec)
            out = cv2.VideoWriter(file_path, fourcc, float(self.config.fps), (width, height))
            if not out.isOpened():
                raise CaptureDeviceError(f"Failed to create video writer with codec {self.config.codec}")

            start = time.monotonic()
            frame_interval = 1.0 / self.config.fps
            while True:
                out.write(frame)
                frames_written += 1
                if time.monotonic() - start >= max_duration_seconds:
                    break
                time.sleep(max(0.0, start + frames_written * frame_interval - time.monotonic()))
                ret, frame = cap.read()
                if not ret or frame is None:
                    logger.warning(f"Camera stopped after {frames_written} frames")
                    break

            duration = time.monotonic() - start
        except CaptureDeviceError:
            self._cleanup(file_path)
            raise
        except cv2.error as e:
            self._cleanup(file_path)
            raise CaptureDeviceError(f"OpenCV error while recording: {e}") from e
        finally:
            if out is not None:
                out.release()
            cap.release()

        if not os.path.exists(file_path) or os.path.getsize(file_path) == 0:
            self._cleanup(file_path)
            raise CaptureDeviceError(f"Video file was not created: {file_path}")

        logger.info(f"🎥 Recorded {frames_written} frames ({duration:.1f}s) to {file_path}")
        return MediaHandle(
            path=file_path,
            captured_at=captured_at,
            duration_seconds=duration,
            frame_count=frames_written
        )

    def _cleanup(self, file_path: str):
        if os.path.exists(file_path):
            os.remove(file_path)

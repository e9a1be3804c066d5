# moodlog/repositories/filesystem/media_repository_impl.py
import logging
import os
import shutil

from moodlog.errors import MediaIOError, MediaMissingError
from moodlog.helpers.timestamps import iso_timestamp, sample_media_name
from moodlog.models.export import CopyFailed, DeleteFailed, MediaMissing, Relocated, RelocationOutcome
from moodlog.models.sample import MediaHandle
from moodlog.repositories.media_repository import MediaRepository

logger = logging.getLogger(__name__)


def unique_path(directory: str, filename: str) -> str:
    """Return a path in ``directory`` that does not exist yet: name.ext, name (1).ext, ..."""
    candidate = os.path.join(directory, filename)
    stem, ext = os.path.splitext(filename)
    counter = 1
    while os.path.exists(candidate):
        candidate = os.path.join(directory, f"{stem} ({counter}){ext}")
        counter += 1
    return candidate


class MediaRepositoryImpl(MediaRepository):
    """Flat directory of sample_<timestamp>.mp4 files"""

    def __init__(self, media_dir: str):
        self.media_dir = os.path.abspath(media_dir)
        self._opened = False

    def open(self) -> None:
        os.makedirs(self.media_dir, exist_ok=True)
        self._opened = True
        logger.info(f"Media store opened: {self.media_dir}")

    def close(self) -> None:
        self._opened = False
        logger.info("Media store closed")

    def ingest(self, handle: MediaHandle) -> str:
        if not self._opened:
            raise RuntimeError("Media store not opened")

        destination = unique_path(self.media_dir, sample_media_name(iso_timestamp(handle.captured_at)))
        try:
            shutil.move(handle.path, destination)
        except OSError as e:
            logger.error(f"Error moving capture {handle.path} into media store: {e}")
            raise MediaIOError(f"Could not store the recorded clip: {e}") from e

        logger.debug(f"Stored capture as {destination}")
        return destination

    def discard(self, handle: MediaHandle) -> None:
        try:
            if os.path.exists(handle.path):
                os.remove(handle.path)
                logger.debug(f"Discarded raw capture: {handle.path}")
        except OSError as e:
            logger.warning(f"Could not discard raw capture {handle.path}: {e}")

    def exists(self, video_ref: str) -> bool:
        return bool(video_ref) and os.path.isfile(video_ref)

    def read_bytes(self, video_ref: str) -> bytes:
        if not self.exists(video_ref):
            raise MediaMissingError(f"Video not found: {video_ref}")
        try:
            with open(video_ref, 'rb') as f:
                return f.read()
        except OSError as e:
            raise MediaIOError(f"Could not read {video_ref}: {e}") from e

    def relocate(self, video_ref: str, destination_dir: str, filename: str) -> RelocationOutcome:
        # Phase 1: copy. The original is never touched if this fails.
        try:
            data = self.read_bytes(video_ref)
        except MediaMissingError:
            return MediaMissing(source=video_ref)
        except MediaIOError as e:
            return CopyFailed(source=video_ref, reason=str(e))

        destination = unique_path(destination_dir, filename)
        try:
            with open(destination, 'wb') as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            if os.path.getsize(destination) != len(data):
                raise OSError(f"short write ({os.path.getsize(destination)} of {len(data)} bytes)")
        except OSError as e:
            self._remove_partial(destination)
            return CopyFailed(source=video_ref, reason=f"Could not write {destination}: {e}")

        # Phase 2: delete. A crash between the phases leaves both copies.
        try:
            os.remove(video_ref)
        except FileNotFoundError:
            pass
        except OSError as e:
            return DeleteFailed(
                source=video_ref,
                destination=destination,
                reason=str(e),
                copy_still_present_at_destination=os.path.exists(destination)
            )

        return Relocated(destination=destination)

    def _remove_partial(self, path: str) -> None:
        try:
            if os.path.exists(path):
                os.remove(path)
        except OSError as e:
            logger.warning(f"Could not remove partial copy {path}: {e}")

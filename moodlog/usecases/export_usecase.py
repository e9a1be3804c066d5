# moodlog/usecases/export_usecase.py
import asyncio
import logging
import os
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, List, Optional

from moodlog.errors import ExportWriteError, NoDataError
from moodlog.helpers.csv_format import render_table
from moodlog.helpers.timestamps import export_table_name, iso_timestamp, sample_media_name
from moodlog.models.export import CopyFailed, DeleteFailed, ExportResult, MediaMissing, Relocated, RelocationOutcome
from moodlog.models.sample import Sample
from moodlog.repositories.filesystem.media_repository_impl import unique_path
from moodlog.repositories.media_repository import MediaRepository
from moodlog.repositories.sample_repository import SampleRepository
from moodlog.services.storage_access import DirectoryGrantor, ShareSurface

logger = logging.getLogger(__name__)

class ExportState(Enum):
    IDLE = "idle"
    READING_RECORDS = "reading_records"
    EMPTY_ABORT = "empty_abort"
    WRITING_TABLE = "writing_table"
    RELOCATING_MEDIA = "relocating_media"
    DONE = "done"
    FAILED = "failed"


class ExportUseCase:
    """Exports committed samples as a CSV table, optionally moving their clips out.

    Both modes read one snapshot of the record store up front. When clips are
    relocated, each row is handled on its own: a missing or unreadable clip is
    logged and skipped, and the remaining rows still go through.
    """

    def __init__(self, sample_repository: SampleRepository, media_repository: MediaRepository,
                 directory_grantor: DirectoryGrantor, share_surface: ShareSurface, export_dir: str,
                 clock: Optional[Callable[[], datetime]] = None):
        self.sample_repo = sample_repository
        self.media_repo = media_repository
        self.directory_grantor = directory_grantor
        self.share_surface = share_surface
        self.export_dir = export_dir
        self.clock = clock or (lambda: datetime.now(timezone.utc))
        self.state = ExportState.IDLE
        self._lock = asyncio.Lock()

    async def export_table(self) -> ExportResult:
        """Write the table to private storage and hand it to the share surface"""
        async with self._lock:
            try:
                samples = await self._read_snapshot()

                self.state = ExportState.WRITING_TABLE
                table_path = os.path.join(self.export_dir, export_table_name(iso_timestamp(self.clock())))
                await self._write_table(table_path, render_table(samples))

                shared = await self._share(table_path)
                self.state = ExportState.DONE
            except NoDataError:
                self.state = ExportState.EMPTY_ABORT
                raise
            except Exception:
                self.state = ExportState.FAILED
                raise

        logger.info(f"📄 Exported {len(samples)} samples to {table_path}")
        return ExportResult(mode="table", table_path=table_path, rows=len(samples), shared=shared)

    async def export_with_media(self) -> ExportResult:
        """Write the table into a granted directory, then relocate every clip to it"""
        async with self._lock:
            try:
                samples = await self._read_snapshot()
                destination = await self.directory_grantor.request_directory()

                self.state = ExportState.WRITING_TABLE
                table_name = export_table_name(iso_timestamp(self.clock()))
                table_path = await asyncio.to_thread(unique_path, destination, table_name)
                await self._write_table(table_path, render_table(samples))

                self.state = ExportState.RELOCATING_MEDIA
                relocated, skipped = await self._relocate_all(samples, destination)
                self.state = ExportState.DONE
            except NoDataError:
                self.state = ExportState.EMPTY_ABORT
                raise
            except Exception:
                self.state = ExportState.FAILED
                raise

        logger.info(f"📦 Exported {len(samples)} samples to {destination}: "
                    f"{relocated} videos moved, {skipped} skipped")
        return ExportResult(
            mode="media",
            table_path=table_path,
            rows=len(samples),
            relocated=relocated,
            skipped=skipped
        )

    async def _read_snapshot(self) -> List[Sample]:
        self.state = ExportState.READING_RECORDS
        samples = await asyncio.to_thread(self.sample_repo.list_all)
        if not samples:
            raise NoDataError()
        return samples

    async def _write_table(self, path: str, text: str):
        def _write():
            os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
            with open(path, 'w', encoding='utf-8', newline='') as f:
                f.write(text)

        try:
            await asyncio.to_thread(_write)
        except OSError as e:
            logger.error(f"Error writing export table {path}: {e}")
            raise ExportWriteError(f"Could not write {path}: {e}") from e

    async def _share(self, table_path: str) -> bool:
        if not await self.share_surface.is_available():
            logger.warning(f"Sharing is not available on this device, file location: {table_path}")
            return False
        try:
            await self.share_surface.share(table_path)
        except Exception as e:
            logger.error(f"Error sharing {table_path}: {e}")
            raise ExportWriteError(f"Table written to {table_path} but sharing failed: {e}") from e
        return True

    async def _relocate_all(self, samples: List[Sample], destination: str) -> tuple:
        relocated = 0
        skipped = 0
        # Sequential on purpose: row N's original is deleted before row N+1 starts
        for sample in samples:
            if not sample.video_ref:
                continue

            outcome = await self._relocate(sample, destination)
            if isinstance(outcome, Relocated):
                relocated += 1
            else:
                skipped += 1
        return relocated, skipped

    async def _relocate(self, sample: Sample, destination: str) -> RelocationOutcome:
        try:
            outcome = await asyncio.to_thread(
                self.media_repo.relocate, sample.video_ref, destination, sample_media_name(sample.timestamp)
            )
        except Exception as e:
            outcome = CopyFailed(source=sample.video_ref, reason=str(e))

        if isinstance(outcome, Relocated):
            logger.debug(f"Moved video of sample {sample.id} to {outcome.destination}")
        elif isinstance(outcome, MediaMissing):
            logger.warning(f"Video not found, skip id = {sample.id}: {outcome.source}")
        elif isinstance(outcome, CopyFailed):
            logger.warning(f"Skip video id = {sample.id} because: {outcome.reason}")
        elif isinstance(outcome, DeleteFailed):
            logger.warning(f"Video of sample {sample.id} copied to {outcome.destination} "
                           f"but the original could not be deleted: {outcome.reason}")
        return outcome

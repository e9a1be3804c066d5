"""
Pytest configuration and shared fixtures.

Provides fake collaborators (camera, location, notifications, directory access,
sharing), a ticking clock, and a dependency container wired to a temporary
SQLite database and media directory.
"""

import asyncio
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import List, Optional

import pytest

from moodlog.config import (
    AppConfig,
    CaptureConfig,
    DatabaseConfig,
    ExportConfig,
    LocationConfig,
    MediaConfig,
    ReminderConfig,
)
from moodlog.di.dependencies import DependencyContainer
from moodlog.errors import DirectoryAccessError
from moodlog.models.reminder import NotificationContent, ScheduledTrigger
from moodlog.models.sample import Location, MediaHandle
from moodlog.processors.capture_device import CaptureDevice
from moodlog.services.location_provider import LocationProvider
from moodlog.services.notification_host import NotificationHost
from moodlog.services.storage_access import DirectoryGrantor, ShareSurface

# ==============================================================================
# Fakes
# ==============================================================================


class TickingClock:
    """Returns a UTC instant that moves forward by ``step`` on every call."""

    def __init__(self, start: Optional[datetime] = None, step: timedelta = timedelta(seconds=1)):
        self.current = start or datetime(2025, 11, 26, 9, 35, 13, 123000, tzinfo=timezone.utc)
        self.step = step

    def __call__(self) -> datetime:
        now = self.current
        self.current = self.current + self.step
        return now


class FakeCaptureDevice(CaptureDevice):
    """Writes a small fake clip into ``temp_dir``.

    Set ``error`` to make the next recordings fail, or ``gate`` to hold a
    recording until the event is set.
    """

    def __init__(self, temp_dir: Path, clock: Optional[TickingClock] = None):
        self.temp_dir = temp_dir
        self.temp_dir.mkdir(parents=True, exist_ok=True)
        self.clock = clock or TickingClock()
        self.error: Optional[Exception] = None
        self.gate: Optional[asyncio.Event] = None
        self.recordings: List[MediaHandle] = []

    async def record(self, max_duration_seconds: float) -> MediaHandle:
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error

        index = len(self.recordings) + 1
        path = self.temp_dir / f"raw_{index}.mp4"
        path.write_bytes(f"clip {index}".encode() * 16)
        handle = MediaHandle(path=str(path), captured_at=self.clock(), duration_seconds=max_duration_seconds)
        self.recordings.append(handle)
        return handle


class FakeLocationProvider(LocationProvider):
    def __init__(self, lat: float = 25.033, lng: float = 121.5654):
        self.location = Location(lat=lat, lng=lng)
        self.error: Optional[Exception] = None
        self.calls = 0

    async def get_fix(self) -> Location:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.location


class FakeDirectoryGrantor(DirectoryGrantor):
    """Grants ``directory``, or refuses when it is None."""

    def __init__(self, directory: Optional[Path]):
        self.directory = directory

    async def request_directory(self) -> str:
        if self.directory is None:
            raise DirectoryAccessError("Export cancelled: no external directory was granted")
        self.directory.mkdir(parents=True, exist_ok=True)
        return str(self.directory)


class FakeShareSurface(ShareSurface):
    def __init__(self, available: bool = True):
        self.available = available
        self.error: Optional[Exception] = None
        self.shared: List[str] = []

    async def is_available(self) -> bool:
        return self.available

    async def share(self, file_path: str) -> str:
        if self.error is not None:
            raise self.error
        self.shared.append(file_path)
        return file_path


class FakeNotificationHost(NotificationHost):
    """Records every call; ``reject`` lists (hour, minute) triggers to refuse."""

    def __init__(self, granted: bool = True, reject=None):
        self.granted = granted
        self.reject = set(reject or [])
        self.requested = False
        self.calls: List[str] = []
        self.daily: List[tuple] = []
        self.once: List[float] = []

    async def request_permission(self) -> bool:
        self.requested = True
        self.calls.append("request_permission")
        return self.granted

    async def permission_status(self) -> str:
        if not self.requested:
            return "undetermined"
        return "granted" if self.granted else "denied"

    async def cancel_all(self) -> None:
        self.calls.append("cancel_all")
        self.daily.clear()
        self.once.clear()

    async def schedule_daily(self, hour: int, minute: int, content: NotificationContent) -> str:
        if (hour, minute) in self.reject:
            raise RuntimeError(f"trigger {hour}:{minute} rejected")
        self.calls.append(f"schedule_daily {hour:02d}:{minute:02d}")
        self.daily.append((hour, minute))
        return f"daily-{hour}-{minute}"

    async def schedule_once(self, delay_seconds: float, content: NotificationContent) -> str:
        self.calls.append(f"schedule_once {delay_seconds}")
        self.once.append(delay_seconds)
        return f"once-{len(self.once)}"

    def scheduled(self) -> List[ScheduledTrigger]:
        content = NotificationContent(title="t", body="b")
        triggers = [
            ScheduledTrigger(trigger_id=f"daily-{h}-{m}", kind="daily", content=content, hour=h, minute=m)
            for h, m in self.daily
        ]
        triggers.extend(
            ScheduledTrigger(trigger_id=f"once-{i}", kind="once", content=content, delay_seconds=delay)
            for i, delay in enumerate(self.once, 1)
        )
        return triggers


# ==============================================================================
# Configuration Fixtures
# ==============================================================================


@pytest.fixture
def reminder_config():
    return ReminderConfig()


@pytest.fixture
def app_config(tmp_path, reminder_config):
    """Configuration rooted in tmp_path, independent of the environment."""
    return AppConfig(
        database=DatabaseConfig(db_path=str(tmp_path / "data.db")),
        capture=CaptureConfig(temp_dir=str(tmp_path / "capture_tmp")),
        media=MediaConfig(media_dir=str(tmp_path / "videos")),
        location=LocationConfig(lat=25.033, lng=121.5654),
        export=ExportConfig(export_dir=str(tmp_path / "exports")),
        reminders=reminder_config,
        API_ENABLED=False
    )


# ==============================================================================
# Collaborator Fixtures
# ==============================================================================


@pytest.fixture
def clock():
    return TickingClock()


@pytest.fixture
def capture_device(tmp_path):
    return FakeCaptureDevice(tmp_path / "raw")


@pytest.fixture
def location_provider():
    return FakeLocationProvider()


@pytest.fixture
def external_dir(tmp_path):
    return tmp_path / "external"


@pytest.fixture
def directory_grantor(external_dir):
    return FakeDirectoryGrantor(external_dir)


@pytest.fixture
def share_surface():
    return FakeShareSurface()


@pytest.fixture
def notification_host():
    return FakeNotificationHost()


@pytest.fixture
async def container(app_config, capture_device, location_provider, directory_grantor,
                    share_surface, notification_host, clock):
    """Opened dependency container with fakes for every collaborator."""
    container = DependencyContainer(
        app_config,
        capture_device=capture_device,
        location_provider=location_provider,
        directory_grantor=directory_grantor,
        share_surface=share_surface,
        notification_host=notification_host,
        clock=clock
    )
    container.open()
    yield container
    await container.close()

# moodlog/api/fastapi_server.py
from fastapi import FastAPI, Body, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
import asyncio
import logging
from typing import Any, Dict, List, Optional
from dataclasses import dataclass
import uvicorn

from moodlog.di.dependencies import DependencyContainer
from moodlog.errors import (
    CaptureDeviceError,
    CaptureInProgressError,
    DirectoryAccessError,
    ExportWriteError,
    LocationUnavailableError,
    MediaIOError,
    MediaMissingError,
    MoodLogError,
    NoDataError,
    NoStagedCaptureError,
    PermissionDeniedError,
    PlatformScheduleError,
    RecordStoreError,
    ValidationError,
)
from moodlog.models.capture import CaptureState, Recording, Staged
from moodlog.models.export import ExportResult
from moodlog.models.reminder import ReminderSlot
from moodlog.models.sample import Sample

logger = logging.getLogger(__name__)

# Most specific class wins, looked up along the exception's MRO
ERROR_STATUS_CODES = {
    PermissionDeniedError: 403,
    DirectoryAccessError: 403,
    NoDataError: 404,
    MediaMissingError: 404,
    CaptureInProgressError: 409,
    NoStagedCaptureError: 409,
    ValidationError: 422,
    PlatformScheduleError: 502,
    CaptureDeviceError: 503,
    LocationUnavailableError: 503,
    RecordStoreError: 500,
    MediaIOError: 500,
    ExportWriteError: 500,
    MoodLogError: 500,
}


def status_code_for(error: MoodLogError) -> int:
    for cls in type(error).__mro__:
        if cls in ERROR_STATUS_CODES:
            return ERROR_STATUS_CODES[cls]
    return 500


@dataclass
class SampleResponse:
    """Committed sample, field names as in the export table"""
    id: int
    ts: str
    mood: int
    videoUri: str
    lat: float
    lng: float

    @classmethod
    def from_sample(cls, sample: Sample) -> 'SampleResponse':
        return cls(
            id=sample.id,
            ts=sample.timestamp,
            mood=sample.mood,
            videoUri=sample.video_ref,
            lat=sample.lat,
            lng=sample.lng
        )


@dataclass
class CaptureResponse:
    """Capture state plus the capture that is ready to commit, if any"""
    state: str
    video_ref: Optional[str] = None
    lat: Optional[float] = None
    lng: Optional[float] = None
    captured_at: Optional[str] = None

    @classmethod
    def from_state(cls, state: CaptureState) -> 'CaptureResponse':
        staged = state.previous if isinstance(state, Recording) else state
        if not isinstance(staged, Staged):
            return cls(state=state.name)
        return cls(
            state=state.name,
            video_ref=staged.video_ref,
            lat=staged.location.lat,
            lng=staged.location.lng,
            captured_at=staged.captured_at.isoformat()
        )


@dataclass
class ExportResponse:
    mode: str
    table_path: str
    rows: int
    relocated: int
    skipped: int
    partial: bool
    shared: Optional[bool] = None

    @classmethod
    def from_result(cls, result: ExportResult) -> 'ExportResponse':
        return cls(
            mode=result.mode,
            table_path=result.table_path,
            rows=result.rows,
            relocated=result.relocated,
            skipped=result.skipped,
            partial=result.is_partial,
            shared=result.shared
        )


@dataclass
class ReminderSlotResponse:
    index: int
    hour: Optional[int]
    minute: Optional[int]
    label: str

    @classmethod
    def from_slot(cls, index: int, slot: ReminderSlot) -> 'ReminderSlotResponse':
        return cls(index=index, hour=slot.hour, minute=slot.minute, label=slot.label())


@dataclass
class StatusResponse:
    capture_state: str
    sample_count: int
    notification_permission: str
    scheduled_reminders: int
    reminder_slots: List[str]


class MoodLogAPIServer:
    """FastAPI server exposing capture, commit, export and reminder operations"""

    def __init__(self, container: DependencyContainer, host: str = "0.0.0.0", port: int = 8765):
        self.container = container
        self.host = host
        self.port = port
        self.app = FastAPI(
            title="Mood Log API",
            description="Mood samples with a short video clip and a location fix",
            version="1.0.0"
        )

        # Server instance
        self.server = None
        self.server_task = None

        self._setup_exception_handlers()
        self._setup_routes()

    def _setup_exception_handlers(self):
        """Turn domain errors into {"error", "detail"} responses"""

        @self.app.exception_handler(MoodLogError)
        async def handle_domain_error(request: Request, exc: MoodLogError):
            status_code = status_code_for(exc)
            body = {"error": exc.kind, "detail": str(exc)}
            if isinstance(exc, PlatformScheduleError):
                body["installed"] = [f"{hour:02d}:{minute:02d}" for hour, minute in exc.installed]
            if status_code >= 500:
                logger.error(f"{request.method} {request.url.path} failed: {exc}")
            else:
                logger.info(f"{request.method} {request.url.path} rejected: {exc}")
            return JSONResponse(status_code=status_code, content=body)

        @self.app.exception_handler(RequestValidationError)
        async def handle_request_validation(request: Request, exc: RequestValidationError):
            return JSONResponse(
                status_code=422,
                content={"error": ValidationError.kind, "detail": str(exc.errors())}
            )

    def _setup_routes(self):
        """Setup FastAPI routes"""

        @self.app.get("/api/status", response_model=StatusResponse)
        async def get_status():
            """Capture state, sample count and reminder state"""
            sample_usecase = self.container.get_sample_usecase()
            reminders = await self.container.get_reminder_usecase().status()
            return StatusResponse(
                capture_state=sample_usecase.capture_state.name,
                sample_count=await sample_usecase.count_samples(),
                notification_permission=reminders["permission"],
                scheduled_reminders=reminders["scheduled_daily"],
                reminder_slots=reminders["slots"]
            )

        @self.app.post("/api/capture", response_model=CaptureResponse)
        async def begin_capture():
            """Record a clip and take a location fix"""
            staged = await self.container.get_sample_usecase().begin_capture()
            return CaptureResponse.from_state(staged)

        @self.app.get("/api/capture", response_model=CaptureResponse)
        async def get_capture():
            return CaptureResponse.from_state(self.container.get_sample_usecase().capture_state)

        @self.app.delete("/api/capture", response_model=CaptureResponse)
        async def discard_capture():
            """Drop the staged capture"""
            sample_usecase = self.container.get_sample_usecase()
            sample_usecase.discard_capture()
            return CaptureResponse.from_state(sample_usecase.capture_state)

        @self.app.post("/api/samples", response_model=SampleResponse, status_code=201)
        async def commit_sample(payload: Dict[str, Any] = Body(...)):
            """Commit the staged capture with a mood rating"""
            sample = await self.container.get_sample_usecase().commit(payload.get("mood"))
            return SampleResponse.from_sample(sample)

        @self.app.get("/api/samples", response_model=List[SampleResponse])
        async def list_samples():
            samples = await self.container.get_sample_usecase().list_samples()
            return [SampleResponse.from_sample(sample) for sample in samples]

        @self.app.post("/api/export/table", response_model=ExportResponse)
        async def export_table():
            """Export the table to private storage and share it"""
            result = await self.container.get_export_usecase().export_table()
            return ExportResponse.from_result(result)

        @self.app.post("/api/export/media", response_model=ExportResponse)
        async def export_with_media():
            """Export the table and move every video to the external directory"""
            result = await self.container.get_export_usecase().export_with_media()
            return ExportResponse.from_result(result)

        @self.app.get("/api/reminders", response_model=List[ReminderSlotResponse])
        async def get_reminders():
            slots = self.container.get_reminder_usecase().slots
            return [ReminderSlotResponse.from_slot(i, slot) for i, slot in enumerate(slots)]

        @self.app.put("/api/reminders/{index}", response_model=ReminderSlotResponse)
        async def update_reminder(index: int, payload: Dict[str, Any] = Body(...)):
            """Edit one slot; null clears a field, an absent key leaves it as is"""
            fields = {key: payload[key] for key in ("hour", "minute") if key in payload}
            slot = self.container.get_reminder_usecase().update_slot(index, **fields)
            return ReminderSlotResponse.from_slot(index, slot)

        @self.app.post("/api/reminders/apply", response_model=List[ReminderSlotResponse])
        async def apply_reminders():
            """Replace all scheduled notifications with the current slots"""
            usecase = self.container.get_reminder_usecase()
            await usecase.apply()
            return [ReminderSlotResponse.from_slot(i, slot) for i, slot in enumerate(usecase.slots) if slot.is_complete]

    async def start_server(self):
        """Start FastAPI server"""
        config = uvicorn.Config(
            app=self.app,
            host=self.host,
            port=self.port,
            log_level="info",
            access_log=False
        )

        self.server = uvicorn.Server(config)
        self.server_task = asyncio.create_task(self.server.serve())

        logger.info(f"FastAPI server started on http://{self.host}:{self.port}")

    async def stop_server(self):
        """Stop FastAPI server"""
        if self.server:
            self.server.should_exit = True
            if self.server_task:
                await self.server_task
        logger.info("FastAPI server stopped")

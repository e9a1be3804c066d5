# moodlog/errors.py
"""Domain errors raised by the use cases and their collaborators.

Every error carries a human-readable message; the HTTP layer turns each
class into a distinct response so no failure ends up as a silent no-op.
"""
from typing import List, Optional


class MoodLogError(Exception):
    """Base class for all moodlog errors"""
    kind = "error"


class PermissionDeniedError(MoodLogError):
    """Camera, microphone, location or notification permission was refused"""
    kind = "permission_denied"

    def __init__(self, resource: str, message: Optional[str] = None):
        self.resource = resource
        super().__init__(message or f"Permission denied: {resource}")


class CaptureInProgressError(MoodLogError):
    kind = "capture_in_progress"

    def __init__(self, message: str = "A capture is already in progress"):
        super().__init__(message)


class CaptureDeviceError(MoodLogError):
    kind = "capture_device_failure"


class LocationUnavailableError(MoodLogError):
    kind = "location_unavailable"


class ValidationError(MoodLogError):
    kind = "validation_error"


class NoStagedCaptureError(ValidationError):
    kind = "no_staged_capture"

    def __init__(self, message: str = "Nothing to commit: record a clip first"):
        super().__init__(message)


class RecordStoreError(MoodLogError):
    kind = "record_store_failure"


class NoDataError(MoodLogError):
    kind = "no_data"

    def __init__(self, message: str = "There are no samples to export"):
        super().__init__(message)


class DirectoryAccessError(MoodLogError):
    kind = "directory_access_denied"


class MediaMissingError(MoodLogError):
    kind = "media_missing"


class MediaIOError(MoodLogError):
    kind = "media_io_failure"


class ExportWriteError(MoodLogError):
    kind = "export_write_failure"


class PlatformScheduleError(MoodLogError):
    """A trigger was rejected while installing the reminder schedule.

    ``installed`` lists the (hour, minute) triggers that were already in
    place when the failure happened; the schedule is left partially applied.
    """
    kind = "platform_schedule_failure"

    def __init__(self, message: str, installed: Optional[List[tuple]] = None):
        self.installed = list(installed or [])
        super().__init__(message)

from datetime import datetime, timezone
from typing import Optional

UNSAFE_FILENAME_CHARS = (':', '.')


def iso_timestamp(instant: Optional[datetime] = None) -> str:
    """Render an instant as UTC ISO-8601 with milliseconds, e.g. 2025-11-26T09:35:13.123Z"""
    if instant is None:
        instant = datetime.now(timezone.utc)
    elif instant.tzinfo is None:
        instant = instant.astimezone()
    utc = instant.astimezone(timezone.utc)
    return utc.strftime('%Y-%m-%dT%H:%M:%S') + f".{utc.microsecond // 1000:03d}Z"


def filename_safe(timestamp: str) -> str:
    """Replace characters that are not allowed in file names: 2025-11-26T09-35-13-123Z"""
    for char in UNSAFE_FILENAME_CHARS:
        timestamp = timestamp.replace(char, '-')
    return timestamp


def sample_media_name(timestamp: str) -> str:
    return f"sample_{filename_safe(timestamp)}.mp4"


def export_table_name(timestamp: str) -> str:
    return f"samples_{filename_safe(timestamp)}.csv"

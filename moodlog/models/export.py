# moodlog/models/export.py
from dataclasses import dataclass
from typing import Optional, Union

@dataclass(frozen=True)
class Relocated:
    """Copy written to the destination and the private original deleted"""
    destination: str


@dataclass(frozen=True)
class MediaMissing:
    """The private original no longer exists; nothing was copied"""
    source: str


@dataclass(frozen=True)
class CopyFailed:
    """Reading the original or writing the copy failed; the original is untouched"""
    source: str
    reason: str


@dataclass(frozen=True)
class DeleteFailed:
    """The copy succeeded but the original could not be deleted.

    Both files exist afterwards when ``copy_still_present_at_destination`` is true.
    """
    source: str
    destination: str
    reason: str
    copy_still_present_at_destination: bool = True


RelocationOutcome = Union[Relocated, MediaMissing, CopyFailed, DeleteFailed]


@dataclass
class ExportResult:
    """Outcome of one export invocation"""
    mode: str  # table, media
    table_path: str
    rows: int
    relocated: int = 0
    skipped: int = 0
    shared: Optional[bool] = None

    @property
    def is_partial(self) -> bool:
        return self.skipped > 0

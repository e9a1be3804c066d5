# moodlog/models/reminder.py
from dataclasses import dataclass
from typing import Optional

@dataclass
class ReminderSlot:
    """One editable reminder time; incomplete slots are skipped when applied"""
    hour: Optional[int] = None
    minute: Optional[int] = None

    @property
    def is_complete(self) -> bool:
        return self.hour is not None and self.minute is not None

    def label(self) -> str:
        if not self.is_complete:
            return "--:--"
        return f"{self.hour:02d}:{self.minute:02d}"


@dataclass
class NotificationContent:
    title: str
    body: str


@dataclass
class ScheduledTrigger:
    """A trigger installed on the notification host"""
    trigger_id: str
    kind: str  # daily, once
    content: NotificationContent
    hour: Optional[int] = None
    minute: Optional[int] = None
    delay_seconds: Optional[float] = None

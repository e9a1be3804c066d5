# moodlog/config/reminders.py
from dataclasses import dataclass, field
from typing import List
import os
from .base import BaseConfig

DEFAULT_REMINDER_TIMES = ["16:00", "21:00", "22:00"]

@dataclass
class ReminderConfig(BaseConfig):
    """Daily reminder configuration"""
    reminder_times: List[str] = field(default_factory=lambda: list(DEFAULT_REMINDER_TIMES))
    notifications_allowed: bool = True
    notification_title: str = "Time to log a sample"
    notification_body: str = "Record your mood, a short vlog and your location"
    test_notification_title: str = "Test notification"
    test_notification_body: str = "If you can see this, notifications are working"
    test_notification_delay: int = 5

    @classmethod
    def from_env(cls) -> 'ReminderConfig':
        return cls(
            reminder_times=cls.get_env_list('REMINDER_TIMES', DEFAULT_REMINDER_TIMES),
            notifications_allowed=cls.get_env_bool('NOTIFICATIONS_ALLOWED', True),
            notification_title=os.getenv('NOTIFICATION_TITLE', cls.notification_title),
            notification_body=os.getenv('NOTIFICATION_BODY', cls.notification_body),
            test_notification_delay=cls.get_env_int('TEST_NOTIFICATION_DELAY', 5)
        )

    def parsed_times(self) -> List[tuple]:
        """Parse HH:MM entries into (hour, minute) tuples"""
        times = []
        for entry in self.reminder_times:
            hour, _, minute = entry.partition(':')
            times.append((int(hour), int(minute or 0)))
        return times

# moodlog/config/__init__.py
from .settings import AppConfig
from .database import DatabaseConfig
from .capture import CaptureConfig, MediaConfig
from .external import LocationConfig, ExportConfig
from .reminders import ReminderConfig

__all__ = [
    'AppConfig',
    'DatabaseConfig',
    'CaptureConfig',
    'MediaConfig',
    'LocationConfig',
    'ExportConfig',
    'ReminderConfig'
]

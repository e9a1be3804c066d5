# moodlog/config/settings.py
from dataclasses import dataclass
import logging
import os
from .base import BaseConfig
from .database import DatabaseConfig
from .capture import CaptureConfig, MediaConfig
from .external import LocationConfig, ExportConfig
from .reminders import ReminderConfig

logger = logging.getLogger(__name__)

@dataclass
class AppConfig(BaseConfig):
    """Main application configuration"""
    # Application settings
    log_level: str = "INFO"
    debug: bool = False

    # Component configurations
    database: DatabaseConfig = None
    capture: CaptureConfig = None
    media: MediaConfig = None
    location: LocationConfig = None
    export: ExportConfig = None
    reminders: ReminderConfig = None

    API_ENABLED: bool = True
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8765

    def __post_init__(self):
        if self.database is None:
            self.database = DatabaseConfig.from_env()
        if self.capture is None:
            self.capture = CaptureConfig.from_env()
        if self.media is None:
            self.media = MediaConfig.from_env()
        if self.location is None:
            self.location = LocationConfig.from_env()
        if self.export is None:
            self.export = ExportConfig.from_env()
        if self.reminders is None:
            self.reminders = ReminderConfig.from_env()

    @classmethod
    def from_env(cls) -> 'AppConfig':
        """Create complete configuration from environment variables"""
        return cls(
            log_level=os.getenv('LOG_LEVEL', 'INFO'),
            debug=cls.get_env_bool('DEBUG', False),

            API_ENABLED=cls.get_env_bool('API_ENABLED', True),
            API_HOST=os.getenv('API_HOST', '0.0.0.0'),
            API_PORT=cls.get_env_int('API_PORT', 8765),

            database=DatabaseConfig.from_env(),
            capture=CaptureConfig.from_env(),
            media=MediaConfig.from_env(),
            location=LocationConfig.from_env(),
            export=ExportConfig.from_env(),
            reminders=ReminderConfig.from_env()
        )

    def validate(self) -> bool:
        """Validate configuration settings"""
        errors = []

        if self.log_level.upper() not in ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'):
            errors.append(f"Unknown log level: {self.log_level}")

        if self.capture.max_duration_seconds <= 0:
            errors.append("Capture duration must be positive")

        if self.capture.fps <= 0 or self.capture.fps > 60:
            errors.append("Capture FPS must be between 1 and 60")

        if self.location.provider not in ('fixed', 'ip'):
            errors.append(f"Unknown location provider: {self.location.provider}")

        if (self.location.lat is None) != (self.location.lng is None):
            errors.append("LOCATION_LAT and LOCATION_LNG must be set together")

        try:
            for hour, minute in self.reminders.parsed_times():
                if not (0 <= hour <= 23 and 0 <= minute <= 59):
                    errors.append(f"Reminder time out of range: {hour:02d}:{minute:02d}")
        except ValueError:
            errors.append(f"Invalid REMINDER_TIMES: {self.reminders.reminder_times}")

        if self.reminders.test_notification_delay < 0:
            errors.append("Test notification delay must not be negative")

        if errors:
            logger.error("Configuration validation errors:")
            for error in errors:
                logger.error(f"  - {error}")
            return False

        return True

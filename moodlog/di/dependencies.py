# moodlog/di/dependencies.py
from contextlib import contextmanager
from datetime import datetime
from typing import Callable, Generator, Optional
import logging
import os

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from moodlog.config import AppConfig
from moodlog.db.models import Base
from moodlog.processors.capture_device import CaptureDevice, OpenCVCaptureDevice
from moodlog.repositories.filesystem.media_repository_impl import MediaRepositoryImpl
from moodlog.repositories.media_repository import MediaRepository
from moodlog.repositories.relational_db.sample_repository_impl import SampleRepositoryImpl
from moodlog.repositories.sample_repository import SampleRepository
from moodlog.services.location_provider import LocationProvider, create_location_provider
from moodlog.services.notification_host import AsyncioNotificationHost, NotificationHost
from moodlog.services.storage_access import (
    ConfiguredDirectoryGrantor,
    DirectoryGrantor,
    DirectoryShareSurface,
    ShareSurface,
)
from moodlog.usecases.capture_staging import CaptureStaging
from moodlog.usecases.export_usecase import ExportUseCase
from moodlog.usecases.reminder_usecase import ReminderUseCase
from moodlog.usecases.sample_usecase import SampleUseCase

logger = logging.getLogger(__name__)

class DatabaseManager:
    """Owns the SQLite engine of the record store"""

    def __init__(self, config: AppConfig):
        self.config: AppConfig = config
        self._engine = None
        self._session_factory = None

    def open(self):
        """Create the engine, the session factory and the samples table"""
        if self._engine is not None:
            return

        try:
            db_config = self.config.database
            logger.info(f"Initializing database at: {db_config.db_path}")

            engine_kwargs = {
                "echo": db_config.echo or self.config.debug,  # Log SQL queries in debug mode
                # Statements run on worker threads
                "connect_args": {"check_same_thread": False},
            }
            if db_config.db_path == ":memory:":
                engine_kwargs["poolclass"] = StaticPool
            else:
                os.makedirs(os.path.dirname(os.path.abspath(db_config.db_path)), exist_ok=True)

            self._engine = create_engine(db_config.connection_string, **engine_kwargs)
            Base.metadata.create_all(self._engine)

            self._session_factory = sessionmaker(
                bind=self._engine,
                autocommit=False,
                autoflush=False,
                expire_on_commit=False
            )

            logger.info("Database initialized successfully")

        except Exception as e:
            logger.error(f"Failed to initialize database: {e}")
            raise

    @property
    def engine(self):
        """Get database engine"""
        return self._engine

    def get_session(self) -> Session:
        """Get a new database session"""
        if not self._session_factory:
            raise RuntimeError("Database not initialized")
        return self._session_factory()

    @contextmanager
    def get_session_context(self) -> Generator[Session, None, None]:
        """Get database session with automatic cleanup"""
        session = self.get_session()
        try:
            yield session
            session.commit()
        except Exception as e:
            session.rollback()
            logger.error(f"Database session error: {e}")
            raise
        finally:
            session.close()

    def close(self):
        """Close database connections"""
        if self._engine:
            self._engine.dispose()
            self._engine = None
            self._session_factory = None
            logger.info("Database connections closed")


class DependencyContainer:
    """Builds the stores, collaborators and use cases from configuration.

    Collaborators can be passed in to replace the configured ones.
    """

    def __init__(self, config: AppConfig,
                 capture_device: Optional[CaptureDevice] = None,
                 location_provider: Optional[LocationProvider] = None,
                 directory_grantor: Optional[DirectoryGrantor] = None,
                 share_surface: Optional[ShareSurface] = None,
                 notification_host: Optional[NotificationHost] = None,
                 clock: Optional[Callable[[], datetime]] = None):
        self.config = config
        self.db_manager = DatabaseManager(config)
        self.media_repository: MediaRepository = MediaRepositoryImpl(config.media.media_dir)
        self.clock = clock

        self._capture_device = capture_device
        self._location_provider = location_provider
        self._directory_grantor = directory_grantor
        self._share_surface = share_surface
        self._notification_host = notification_host

        self._sample_repository: SampleRepository = None
        self._capture_staging: CaptureStaging = None
        self._sample_usecase: SampleUseCase = None
        self._export_usecase: ExportUseCase = None
        self._reminder_usecase: ReminderUseCase = None

        logger.info("Dependency container initialized")

    def open(self):
        """Open the record store and the media store"""
        self.db_manager.open()
        self.media_repository.open()

    async def close(self):
        """Close all resources"""
        if self._notification_host is not None and hasattr(self._notification_host, "close"):
            await self._notification_host.close()
        self.media_repository.close()
        self.db_manager.close()
        # Reset singletons
        self._sample_repository = None
        self._capture_staging = None
        self._sample_usecase = None
        self._export_usecase = None
        self._reminder_usecase = None

    def get_capture_device(self) -> CaptureDevice:
        if self._capture_device is None:
            self._capture_device = OpenCVCaptureDevice(self.config.capture)
        return self._capture_device

    def get_location_provider(self) -> LocationProvider:
        if self._location_provider is None:
            self._location_provider = create_location_provider(self.config.location)
        return self._location_provider

    def get_directory_grantor(self) -> DirectoryGrantor:
        if self._directory_grantor is None:
            self._directory_grantor = ConfiguredDirectoryGrantor(self.config.export)
        return self._directory_grantor

    def get_share_surface(self) -> ShareSurface:
        if self._share_surface is None:
            self._share_surface = DirectoryShareSurface(self.config.export)
        return self._share_surface

    def get_notification_host(self) -> NotificationHost:
        if self._notification_host is None:
            self._notification_host = AsyncioNotificationHost(self.config.reminders)
        return self._notification_host

    def get_sample_repository(self) -> SampleRepository:
        """Get sample repository instance (singleton)"""
        if self._sample_repository is None:
            self._sample_repository = SampleRepositoryImpl(self.db_manager.get_session)
        return self._sample_repository

    def get_capture_staging(self) -> CaptureStaging:
        if self._capture_staging is None:
            self._capture_staging = CaptureStaging(
                self.get_capture_device(),
                self.get_location_provider(),
                self.media_repository,
                max_duration_seconds=self.config.capture.max_duration_seconds
            )
        return self._capture_staging

    def get_sample_usecase(self) -> SampleUseCase:
        """Get sample use case instance (singleton)"""
        if self._sample_usecase is None:
            self._sample_usecase = SampleUseCase(
                self.get_sample_repository(), self.get_capture_staging(), clock=self.clock
            )
            logger.info("Sample usecase initialized")
        return self._sample_usecase

    def get_export_usecase(self) -> ExportUseCase:
        """Get export use case instance (singleton)"""
        if self._export_usecase is None:
            self._export_usecase = ExportUseCase(
                self.get_sample_repository(),
                self.media_repository,
                self.get_directory_grantor(),
                self.get_share_surface(),
                self.config.export.export_dir,
                clock=self.clock
            )
            logger.info("Export usecase initialized")
        return self._export_usecase

    def get_reminder_usecase(self) -> ReminderUseCase:
        """Get reminder use case instance (singleton)"""
        if self._reminder_usecase is None:
            self._reminder_usecase = ReminderUseCase(self.get_notification_host(), self.config.reminders)
            logger.info("Reminder usecase initialized")
        return self._reminder_usecase

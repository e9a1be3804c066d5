# moodlog/services/storage_access.py
import asyncio
import logging
import os
import shutil
from abc import ABC, abstractmethod

from moodlog.config import ExportConfig
from moodlog.errors import DirectoryAccessError

logger = logging.getLogger(__name__)

class DirectoryGrantor(ABC):
    """Grants access to a user-chosen external directory"""

    @abstractmethod
    async def request_directory(self) -> str:
        pass


class ShareSurface(ABC):
    """Hands an exported file to whatever the user shares files with"""

    @abstractmethod
    async def is_available(self) -> bool:
        pass

    @abstractmethod
    async def share(self, file_path: str) -> str:
        pass


class ConfiguredDirectoryGrantor(DirectoryGrantor):
    """Grants the EXPORT_EXTERNAL_DIR directory"""

    def __init__(self, config: ExportConfig):
        self.config = config

    async def request_directory(self) -> str:
        directory = self.config.external_dir
        if not directory:
            raise DirectoryAccessError("Export cancelled: no external directory was granted")

        def _prepare() -> str:
            os.makedirs(directory, exist_ok=True)
            if not os.access(directory, os.W_OK):
                raise DirectoryAccessError(f"External directory is not writable: {directory}")
            return os.path.abspath(directory)

        try:
            return await asyncio.to_thread(_prepare)
        except OSError as e:
            raise DirectoryAccessError(f"Cannot open external directory {directory}: {e}") from e


class DirectoryShareSurface(ShareSurface):
    """Shares a file by dropping a copy into SHARE_DIR"""

    def __init__(self, config: ExportConfig):
        self.config = config

    async def is_available(self) -> bool:
        return bool(self.config.share_dir)

    async def share(self, file_path: str) -> str:
        if not await self.is_available():
            raise RuntimeError("Sharing is not available")

        def _copy() -> str:
            os.makedirs(self.config.share_dir, exist_ok=True)
            return shutil.copy2(file_path, self.config.share_dir)

        shared_path = await asyncio.to_thread(_copy)
        logger.info(f"📤 Shared {file_path} -> {shared_path}")
        return shared_path

# moodlog/config/base.py
from abc import ABC, abstractmethod
from dataclasses import dataclass
import os
from typing import List, Optional

@dataclass
class BaseConfig(ABC):
    """Base configuration class with common functionality"""

    @classmethod
    @abstractmethod
    def from_env(cls) -> 'BaseConfig':
        """Create configuration from environment variables"""
        pass

    @staticmethod
    def get_env_bool(key: str, default: bool = False) -> bool:
        """Get boolean value from environment variable"""
        return os.getenv(key, str(default)).lower() in ('true', '1', 'yes', 'on')

    @staticmethod
    def get_env_int(key: str, default: int) -> int:
        """Get integer value from environment variable"""
        return int(os.getenv(key, str(default)))

    @staticmethod
    def get_env_float(key: str, default: float) -> float:
        """Get float value from environment variable"""
        return float(os.getenv(key, str(default)))

    @staticmethod
    def get_env_optional_float(key: str) -> Optional[float]:
        """Get float value from environment variable, None when unset or blank"""
        env_value = os.getenv(key, '').strip()
        if not env_value:
            return None
        return float(env_value)

    @staticmethod
    def get_env_list(key: str, default: List[str]) -> List[str]:
        """Get comma-separated list from environment variable"""
        env_value = os.getenv(key, '')
        if env_value:
            return [item.strip() for item in env_value.split(',') if item.strip()]
        return list(default)

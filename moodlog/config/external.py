# moodlog/config/external.py
from dataclasses import dataclass
from typing import Optional
import os
from .base import BaseConfig

@dataclass
class LocationConfig(BaseConfig):
    """Geolocation provider configuration"""
    provider: str = "fixed"  # fixed, ip
    lat: Optional[float] = None
    lng: Optional[float] = None
    url: str = "http://ip-api.com/json"
    timeout: int = 10

    @classmethod
    def from_env(cls) -> 'LocationConfig':
        return cls(
            provider=os.getenv('LOCATION_PROVIDER', 'fixed').lower(),
            lat=cls.get_env_optional_float('LOCATION_LAT'),
            lng=cls.get_env_optional_float('LOCATION_LNG'),
            url=os.getenv('LOCATION_URL', 'http://ip-api.com/json'),
            timeout=cls.get_env_int('LOCATION_TIMEOUT', 10)
        )


@dataclass
class ExportConfig(BaseConfig):
    """Export destinations configuration"""
    export_dir: str = "data/exports"
    external_dir: str = ""  # Empty means access to external storage is not granted
    share_dir: str = ""  # Empty means sharing is unavailable

    @classmethod
    def from_env(cls) -> 'ExportConfig':
        return cls(
            export_dir=os.getenv('EXPORT_DIR', 'data/exports'),
            external_dir=os.getenv('EXPORT_EXTERNAL_DIR', ''),
            share_dir=os.getenv('SHARE_DIR', '')
        )

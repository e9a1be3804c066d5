# moodlog/config/capture.py
from dataclasses import dataclass
import os
from .base import BaseConfig

@dataclass
class CaptureConfig(BaseConfig):
    """Camera capture configuration"""
    device_index: int = 0
    max_duration_seconds: float = 1.0  # Mood clips are one second long
    fps: int = 15
    codec: str = "mp4v"
    temp_dir: str = "data/capture_tmp"
    warmup_frames: int = 3

    @classmethod
    def from_env(cls) -> 'CaptureConfig':
        return cls(
            device_index=cls.get_env_int('CAPTURE_DEVICE_INDEX', 0),
            max_duration_seconds=cls.get_env_float('CAPTURE_MAX_DURATION_SECONDS', 1.0),
            fps=cls.get_env_int('CAPTURE_FPS', 15),
            codec=os.getenv('CAPTURE_CODEC', 'mp4v'),
            temp_dir=os.getenv('CAPTURE_TEMP_DIR', 'data/capture_tmp'),
            warmup_frames=cls.get_env_int('CAPTURE_WARMUP_FRAMES', 3)
        )


@dataclass
class MediaConfig(BaseConfig):
    """Private video storage configuration"""
    media_dir: str = "data/videos"

    @classmethod
    def from_env(cls) -> 'MediaConfig':
        return cls(
            media_dir=os.getenv('MEDIA_DIR', 'data/videos')
        )

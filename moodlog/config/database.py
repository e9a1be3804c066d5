# moodlog/config/database.py
import os
from dataclasses import dataclass
from moodlog.config.base import BaseConfig

@dataclass
class DatabaseConfig(BaseConfig):
    """SQLite record store configuration"""
    db_path: str = "data/data.db"
    echo: bool = False

    @classmethod
    def from_env(cls) -> 'DatabaseConfig':
        return cls(
            db_path=os.getenv('SAMPLES_DB_PATH', cls.db_path),
            echo=cls.get_env_bool('DB_ECHO', False)
        )

    @property
    def connection_string(self) -> str:
        """Generate SQLite connection string"""
        if self.db_path == ":memory:":
            return "sqlite://"
        return f"sqlite:///{self.db_path}"

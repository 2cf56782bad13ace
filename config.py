"""Configuration singleton for rentledger."""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


class Config:
    """Singleton configuration class."""

    _instance: Optional["Config"] = None

    def __new__(cls) -> "Config":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self) -> None:
        if self._initialized:
            return
        self._initialized = True
        load_dotenv()
        self._load_config()

    def _load_config(self) -> None:
        """Load configuration from environment variables."""
        # Database path
        default_db = Path.home() / ".rentledger" / "rentledger.db"
        db_path_str = os.getenv("DATABASE_PATH", str(default_db))
        self.database_path = Path(db_path_str).expanduser()

        # PostgreSQL takes over when set
        self.database_url = os.getenv("DATABASE_URL", "")

        # Log level
        self.log_level = os.getenv("LOG_LEVEL", "INFO").upper()

        # Display only
        self.currency_symbol = os.getenv("CURRENCY_SYMBOL", "$")

    @property
    def database_dir(self) -> Path:
        """Get the directory containing the database."""
        return self.database_path.parent

    def ensure_directories(self) -> None:
        """Ensure all required directories exist."""
        self.database_dir.mkdir(parents=True, exist_ok=True)


def get_config() -> Config:
    """Get the singleton config instance."""
    return Config()

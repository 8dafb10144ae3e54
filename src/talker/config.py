"""Configuration models for talker."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]


class StorageConfig(BaseModel):
    """Where the task file lives."""

    directory: str = "data"
    file_name: str = "talker.txt"

    @property
    def path(self) -> Path:
        return Path(self.directory) / self.file_name


class LoggingConfig(BaseModel):
    """Configuration for log output."""

    level: LogLevel = "INFO"
    console_level: LogLevel = "WARNING"
    file_name: str | None = "talker.log"
    """Log file, written next to the task file. None disables file logging."""


class TalkerConfig(BaseModel):
    """Main configuration for talker."""

    name: str = "Talker"
    storage: StorageConfig = Field(default_factory=StorageConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def load(cls, path: Path | None = None) -> TalkerConfig:
        """Load configuration from file or return defaults."""
        if path is None:
            path = CONFIG_FILE

        if not path.exists():
            return cls()

        with open(path) as f:
            data = json.load(f)

        return cls.model_validate(data)

    def save(self, path: Path | None = None) -> None:
        """Save configuration to file."""
        if path is None:
            path = CONFIG_FILE

        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w") as f:
            json.dump(self.model_dump(exclude_none=True), f, indent=2)

    def with_data_file(self, data_file: Path) -> TalkerConfig:
        """Return a copy pointing at a different task file."""
        storage = StorageConfig(directory=str(data_file.parent), file_name=data_file.name)
        return self.model_copy(update={"storage": storage})


# Default locations
TALKER_DIR = Path(".talker")
CONFIG_FILE = TALKER_DIR / "config.json"
DATA_DIR = Path("data")
DATA_FILE = DATA_DIR / "talker.txt"

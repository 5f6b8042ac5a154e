# cmdshell/config.py
"""
Configuration for cmdshell.

Values are loaded from environment variables (or a .env file in the working
directory) and validated with Pydantic. Host programs can also build a
ShellConfig directly and pass it to Shell.
"""

from __future__ import annotations

import logging

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings
import structlog


logger = structlog.get_logger(__name__)

_ENV_FILE = ".env"

MIN_RENDER_INTERVAL = 0.005
_VALID_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})


class ShellConfig(BaseSettings):
    """Prompt appearance, redraw cadence and logging for a shell session."""

    prompt: str = Field("> ", alias="CMDSHELL_PROMPT")
    render_interval: float = Field(0.1, alias="CMDSHELL_RENDER_INTERVAL")
    history_command: bool = Field(True, alias="CMDSHELL_HISTORY_COMMAND")
    log_level: str = Field("WARNING", alias="CMDSHELL_LOG_LEVEL")

    model_config = {
        "env_file": _ENV_FILE,
        "extra": "ignore",
        "populate_by_name": True,
        "env_ignore_empty": True,
    }

    @model_validator(mode="after")
    def normalize(self) -> "ShellConfig":
        self.render_interval = max(MIN_RENDER_INTERVAL, float(self.render_interval))
        level = str(self.log_level).strip().upper()
        if level not in _VALID_LOG_LEVELS:
            logger.warning("config.invalid_log_level", log_level=self.log_level)
            level = "WARNING"
        self.log_level = level
        return self

    @property
    def log_level_number(self) -> int:
        return logging.getLevelName(self.log_level)

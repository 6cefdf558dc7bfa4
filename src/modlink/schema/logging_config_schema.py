from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

LOG_LEVEL_MAP = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}


class LoggingConfig(BaseModel):
    """`logging:` section; CLI flags override individual fields."""

    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    level: str = "INFO"
    to_file: bool = False
    dir: str = "logs"
    base_filename: str = "modlink"
    when: str = "midnight"
    backup_count: int = Field(default=7, ge=0)
    pymodbus_level: str = "WARNING"
    poll_rate_limit_sec: float = Field(default=2.0, ge=0)

    @field_validator("level", "pymodbus_level", mode="before")
    @classmethod
    def _normalize_level(cls, v: Any) -> str:
        if isinstance(v, int):
            return logging.getLevelName(v)
        name = str(v).strip().upper()
        if name not in LOG_LEVEL_MAP:
            raise ValueError(f"unknown log level: {v!r}, expected one of {list(LOG_LEVEL_MAP)}")
        return name

    @property
    def level_no(self) -> int:
        return LOG_LEVEL_MAP[self.level]

    @property
    def pymodbus_level_no(self) -> int:
        return LOG_LEVEL_MAP[self.pymodbus_level]

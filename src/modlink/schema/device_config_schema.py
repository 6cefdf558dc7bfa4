from __future__ import annotations

import logging
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from modlink.model.device_constant import (
    DEFAULT_BAUDRATE,
    DEFAULT_CONNECTION_TIMEOUT_MILLIS,
    DEFAULT_HOST,
    DEFAULT_POLLING_INTERVAL_MILLIS,
    DEFAULT_TCP_PORT,
    DEFAULT_UNIT_ID,
    MAX_UNIT_ID,
)
from modlink.util.value_util import truncate_to_int

logger = logging.getLogger(__name__)


class DeviceConfig(BaseModel):
    """
    One Modbus device (one connection).

    `transport` selects the driver: "tcp" uses host/port, "rtu" uses the
    serial `path` and `baudrate`.
    """

    model_config = ConfigDict(extra="allow", str_strip_whitespace=True, populate_by_name=True)

    name: str = "modbus"
    transport: str = "tcp"

    host: str = DEFAULT_HOST
    port: int = Field(default=DEFAULT_TCP_PORT, ge=1, le=65535)

    path: str | None = None
    baudrate: int = DEFAULT_BAUDRATE

    unit_id: int = Field(
        default=DEFAULT_UNIT_ID, ge=0, le=MAX_UNIT_ID, validation_alias=AliasChoices("unit_id", "unitId")
    )
    polling_interval_millis: int = Field(
        default=DEFAULT_POLLING_INTERVAL_MILLIS,
        gt=0,
        validation_alias=AliasChoices("polling_interval_millis", "pollingInterval", "polling_interval"),
    )
    connection_timeout_millis: int = Field(
        default=DEFAULT_CONNECTION_TIMEOUT_MILLIS,
        gt=0,
        validation_alias=AliasChoices("connection_timeout_millis", "connectionTimeout", "connection_timeout"),
    )

    @field_validator("transport", mode="before")
    @classmethod
    def _normalize_transport(cls, v: Any) -> str:
        return str(v).strip().lower()

    @field_validator("unit_id", "polling_interval_millis", "connection_timeout_millis", "port", mode="before")
    @classmethod
    def _truncate_numeric(cls, v: Any) -> int:
        return truncate_to_int(v)

    @field_validator("baudrate", mode="before")
    @classmethod
    def _to_int_baudrate(cls, v: Any) -> int:
        try:
            return int(v)
        except Exception:
            logger.warning(f"[device_config] invalid baudrate={v!r}, fallback={DEFAULT_BAUDRATE}")
            return DEFAULT_BAUDRATE

    @property
    def timeout_seconds(self) -> float:
        return self.connection_timeout_millis / 1000.0

from __future__ import annotations

import logging
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from modlink.model.device_constant import MAX_ADDRESS, MAX_UNIT_ID
from modlink.model.enum.register_type_enum import RegisterType
from modlink.model.enum.value_encoding_enum import WRITE_VALUE_ENCODINGS, ValueEncoding
from modlink.util.value_util import truncate_to_int

logger = logging.getLogger(__name__)


class LinkConfig(BaseModel):
    """
    Mapping of one attribute onto a Modbus address.

    Accepts snake_case names as well as the host framework's camelCase keys
    (unitId, refresh, readType, readValueType, readAddress, writeType,
    writeAddress, writeValueType). Numeric fields given as floats are
    truncated toward zero.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True, str_strip_whitespace=True)

    unit_id: int | None = Field(
        default=None, ge=0, le=MAX_UNIT_ID, validation_alias=AliasChoices("unit_id", "unitId")
    )
    refresh_interval_millis: int | None = Field(
        default=None,
        gt=0,
        validation_alias=AliasChoices("refresh_interval_millis", "refreshIntervalMillis", "refresh"),
    )

    read_register_type: RegisterType = Field(
        ..., validation_alias=AliasChoices("read_register_type", "readRegisterSpace", "readType", "read_type")
    )
    read_value_encoding: ValueEncoding | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "read_value_encoding", "readValueEncoding", "readValueType", "read_value_type"
        ),
    )
    read_address: int = Field(
        ..., ge=0, le=MAX_ADDRESS, validation_alias=AliasChoices("read_address", "readAddress")
    )

    write_register_type: RegisterType | None = Field(
        default=None,
        validation_alias=AliasChoices("write_register_type", "writeRegisterSpace", "writeType", "write_type"),
    )
    write_address: int | None = Field(
        default=None, ge=0, le=MAX_ADDRESS, validation_alias=AliasChoices("write_address", "writeAddress")
    )
    write_value_encoding: ValueEncoding | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "write_value_encoding", "writeValueEncoding", "writeValueType", "write_value_type"
        ),
    )

    @field_validator("unit_id", "refresh_interval_millis", "read_address", "write_address", mode="before")
    @classmethod
    def _truncate_numeric(cls, v: Any) -> int | None:
        if v is None:
            return None
        return truncate_to_int(v)

    @field_validator("read_register_type", mode="before")
    @classmethod
    def _parse_read_register_type(cls, v: Any) -> RegisterType:
        register_type = RegisterType.from_string(v)
        if register_type is None:
            raise ValueError(f"unknown read register type: {v!r}")
        return register_type

    @field_validator("write_register_type", mode="before")
    @classmethod
    def _parse_write_register_type(cls, v: Any) -> RegisterType | None:
        if v is None:
            return None
        register_type = RegisterType.from_string(v)
        if register_type is None:
            raise ValueError(f"unknown write register type: {v!r}")
        if not register_type.is_writable:
            raise ValueError(f"register type {register_type} is read-only")
        return register_type

    @field_validator("read_value_encoding", mode="before")
    @classmethod
    def _parse_read_value_encoding(cls, v: Any) -> ValueEncoding | None:
        if v is None:
            return None
        encoding = ValueEncoding.from_string(v)
        if encoding is None:
            raise ValueError(f"unknown read value encoding: {v!r}")
        return encoding

    @field_validator("write_value_encoding", mode="before")
    @classmethod
    def _parse_write_value_encoding(cls, v: Any) -> ValueEncoding | None:
        if v is None:
            return None
        encoding = ValueEncoding.from_string(v)
        if encoding is None or encoding not in WRITE_VALUE_ENCODINGS:
            raise ValueError(f"unsupported write value encoding: {v!r}")
        return encoding

    @model_validator(mode="after")
    def _check_write_address(self) -> "LinkConfig":
        if self.write_register_type is not None and self.write_address is None:
            raise ValueError(f"write_address is required when write_register_type={self.write_register_type}")
        return self

    # ---- Derived / helper API ----

    @property
    def read_encoding(self) -> ValueEncoding:
        """Declared read encoding, or the natural one for the register type."""
        if self.read_value_encoding is not None:
            return self.read_value_encoding
        return ValueEncoding.BIT if self.read_register_type.is_bit else ValueEncoding.INT16

    @property
    def read_count(self) -> int:
        """Units fetched per poll: one bit, or as many words as the encoding needs."""
        if self.read_register_type.is_bit:
            return 1
        return self.read_encoding.word_count

    @property
    def is_writable(self) -> bool:
        return self.write_register_type is not None

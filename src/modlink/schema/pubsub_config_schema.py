from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from modlink.model.enum.overflow_policy_enum import OverflowPolicy


class PubSubConfig(BaseModel):
    """
    Attribute-update fan-out settings (`pubsub:` section).

    queue_maxsize:
      Bounded queue size per subscriber.

    overflow_policy:
      drop_newest discards the incoming update, drop_oldest evicts the
      oldest queued update to make room.

    keep_latest:
      Remember the last value per attribute for `InMemoryPubSub.latest()`.
    """

    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True, populate_by_name=True)

    queue_maxsize: int = Field(
        default=200, ge=1, le=100_000, validation_alias=AliasChoices("queue_maxsize", "maxsize")
    )
    overflow_policy: OverflowPolicy = Field(
        default=OverflowPolicy.DROP_OLDEST, validation_alias=AliasChoices("overflow_policy", "drop_policy")
    )
    keep_latest: bool = True

    @field_validator("overflow_policy", mode="before")
    @classmethod
    def _parse_overflow_policy(cls, v: Any) -> OverflowPolicy:
        policy = OverflowPolicy.from_string(v)
        if policy is None:
            raise ValueError(f"unknown overflow policy: {v!r}")
        return policy

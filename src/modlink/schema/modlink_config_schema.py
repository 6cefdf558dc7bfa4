from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from modlink.model.attribute_ref import AttributeRef
from modlink.model.enum.attribute_value_type_enum import AttributeValueType
from modlink.schema.device_config_schema import DeviceConfig
from modlink.schema.link_config_schema import LinkConfig
from modlink.schema.logging_config_schema import LoggingConfig
from modlink.schema.pubsub_config_schema import PubSubConfig


class AttributeLinkEntry(BaseModel):
    """One row in `links:`."""

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    owner_id: str
    attribute: str
    type: AttributeValueType | None = None
    link: LinkConfig

    @property
    def ref(self) -> AttributeRef:
        return AttributeRef(self.owner_id, self.attribute)

    @property
    def value_type(self) -> type | None:
        return self.type.python_type if self.type else None


class ModlinkFileConfig(BaseModel):
    """
    Root config for modlink.yml
    """

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    device: DeviceConfig = Field(default_factory=DeviceConfig)
    links: list[AttributeLinkEntry] = Field(default_factory=list)
    pubsub: PubSubConfig = Field(default_factory=PubSubConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

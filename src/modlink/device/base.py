from abc import ABC, abstractmethod
from typing import Any

from modlink.schema.device_config_schema import DeviceConfig


class DeviceDriver(ABC):
    """Capability interface implemented once per device family (TCP, RTU, ...)."""

    protocol_name: str = "Modbus"

    @abstractmethod
    def create_io_client(self, config: DeviceConfig) -> Any:
        """Build an unconnected client for `config`."""
        pass

    @abstractmethod
    def instance_uri(self, config: DeviceConfig) -> str:
        """Human-readable URI of the device connection, for logs and health output."""
        pass

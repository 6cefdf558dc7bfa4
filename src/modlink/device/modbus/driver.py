import logging

from pymodbus.client import AsyncModbusSerialClient, AsyncModbusTcpClient

from modlink.device.base import DeviceDriver
from modlink.exception import DeviceConfigError
from modlink.schema.device_config_schema import DeviceConfig

logger = logging.getLogger("ModbusDriver")


class ModbusTcpDriver(DeviceDriver):
    protocol_name = "Modbus TCP Client"

    def create_io_client(self, config: DeviceConfig) -> AsyncModbusTcpClient:
        if not config.host:
            raise DeviceConfigError("host not specified for Modbus TCP device", device_id=config.name)
        logger.info(f"[Driver] Modbus TCP client for {config.host}:{config.port} (timeout={config.timeout_seconds}s)")
        return AsyncModbusTcpClient(host=config.host, port=config.port, timeout=config.timeout_seconds)

    def instance_uri(self, config: DeviceConfig) -> str:
        return f"modbus-tcp://{config.host or 'unknown'}:{config.port}"


class ModbusRtuDriver(DeviceDriver):
    protocol_name = "Modbus RTU Client"

    def create_io_client(self, config: DeviceConfig) -> AsyncModbusSerialClient:
        if not config.path:
            raise DeviceConfigError("serial path not specified for Modbus RTU device", device_id=config.name)
        logger.info(f"[Driver] Modbus RTU client for {config.path} @ {config.baudrate} baud")
        return AsyncModbusSerialClient(port=config.path, baudrate=config.baudrate, timeout=config.timeout_seconds)

    def instance_uri(self, config: DeviceConfig) -> str:
        return f"modbus-rtu://{config.path or 'unknown'}"


DRIVER_REGISTRY: dict[str, type[DeviceDriver]] = {
    "tcp": ModbusTcpDriver,
    "rtu": ModbusRtuDriver,
}


def get_driver(transport: str) -> DeviceDriver:
    driver_cls = DRIVER_REGISTRY.get(str(transport).strip().lower())
    if driver_cls is None:
        raise DeviceConfigError(f"Unknown transport {transport!r}, expected one of {sorted(DRIVER_REGISTRY)}")
    return driver_cls()

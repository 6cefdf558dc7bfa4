import logging
from typing import Any

from modlink.device.base import DeviceDriver
from modlink.device.modbus.connection import ConnectionLifecycle
from modlink.device.modbus.driver import get_driver
from modlink.device.modbus.read_dispatcher import ModbusReadDispatcher
from modlink.device.modbus.write_dispatcher import ModbusWriteDispatcher
from modlink.exception import ModlinkError
from modlink.model.attribute_ref import AttributeRef
from modlink.model.enum.connection_status_enum import ConnectionStatus
from modlink.model.write_ack import WriteAck
from modlink.schema.device_config_schema import DeviceConfig
from modlink.schema.link_config_schema import LinkConfig
from modlink.schema.modlink_config_schema import AttributeLinkEntry
from modlink.task.polling_scheduler import PollingScheduler
from modlink.util.logging_noise import install_rate_limit
from modlink.util.pubsub.base import AttributeUpdateSink


class ModbusProtocol:
    """
    Host-facing entry point for one Modbus device.

    The host framework calls:
    - start() / stop() for the device lifecycle
    - on_link() / on_unlink() when attributes are bound to or removed from the device
    - on_write() when an application value must be pushed to the device

    Polled values are delivered to `sink.publish(ref, value)`.
    """

    def __init__(
        self,
        device_config: DeviceConfig,
        sink: AttributeUpdateSink,
        driver: DeviceDriver | None = None,
        logger: logging.Logger | None = None,
        poll_rate_limit_sec: float = 2.0,
    ):
        self.device_config = device_config
        self.sink = sink
        self.logger = logger or logging.getLogger(f"Modlink.{device_config.name}")
        self.driver = driver or get_driver(device_config.transport)

        self.connection = ConnectionLifecycle(self.driver, logger=self.logger)
        self.reader = ModbusReadDispatcher(self.connection, logger=self.logger)
        self.writer = ModbusWriteDispatcher(self.connection, logger=self.logger)

        # A dead device fails every poll; keep one line per distinct failure per period
        poll_logger: logging.Logger = install_rate_limit(self.logger.getChild("Poll"), poll_rate_limit_sec)
        self.scheduler = PollingScheduler(
            reader=self.reader,
            sink=sink,
            default_unit_id=device_config.unit_id,
            default_interval_millis=device_config.polling_interval_millis,
            logger=poll_logger,
        )

    # ==================== Properties ====================

    @property
    def protocol_name(self) -> str:
        return self.driver.protocol_name

    @property
    def protocol_instance_uri(self) -> str:
        return self.driver.instance_uri(self.device_config)

    @property
    def connection_status(self) -> ConnectionStatus:
        return self.connection.status

    # ==================== Lifecycle ====================

    async def start(self, device_config: DeviceConfig | None = None) -> ConnectionStatus:
        """
        Connect to the device.

        Raises:
            DeviceConnectionError: the connection could not be created; nothing is polled.
        """
        if device_config is not None:
            self.device_config = device_config
            self.scheduler.default_unit_id = device_config.unit_id
            self.scheduler.default_interval_millis = device_config.polling_interval_millis

        self.logger.info(f"[{self.protocol_name}] starting {self.protocol_instance_uri}")
        return await self.connection.start(self.device_config)

    async def stop(self) -> None:
        await self.scheduler.stop()
        await self.connection.stop()
        self.logger.info(f"[{self.protocol_name}] stopped {self.protocol_instance_uri}")

    # ==================== Link hooks ====================

    def on_link(self, ref: AttributeRef, config: LinkConfig, value_type: type | None = None) -> None:
        self.scheduler.link(ref, config, value_type)

    def on_unlink(self, ref: AttributeRef) -> None:
        self.scheduler.unlink(ref)

    def link_all(self, entries: list[AttributeLinkEntry]) -> None:
        for entry in entries:
            self.on_link(entry.ref, entry.link, entry.value_type)

    # ==================== Write hook ====================

    async def on_write(self, ref: AttributeRef, config: LinkConfig, value: Any) -> WriteAck | None:
        """
        Best-effort write of `value` through the link's write mapping.

        Returns:
            WriteAck on success, None when the write was dropped (no write
            mapping, rejected value, or transport failure; all logged).
        """
        if config.write_register_type is None:
            self.logger.warning(f"[Write] {ref}: no write type configured, write dropped")
            return None

        unit_id: int = config.unit_id if config.unit_id is not None else self.device_config.unit_id
        try:
            return await self.writer.write(
                unit_id,
                config.write_register_type,
                config.write_address,
                value,
                config.write_value_encoding,
            )
        except ModlinkError as e:
            self.logger.warning(f"[Write] {ref}: write of {value!r} dropped: {e}")
            return None

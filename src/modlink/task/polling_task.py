import logging
from typing import Any

from modlink.device.modbus.read_dispatcher import ModbusReadDispatcher
from modlink.exception import CoercionError, ModlinkError
from modlink.model.attribute_ref import AttributeRef
from modlink.schema.link_config_schema import LinkConfig
from modlink.task.async_job_base import AsyncRecurringJob
from modlink.util.pubsub.base import AttributeUpdateSink
from modlink.util.value_codec import ValueCodec
from modlink.util.value_util import coerce_value


class PollingTask(AsyncRecurringJob):
    """Periodically reads one linked attribute and publishes its decoded value."""

    def __init__(
        self,
        ref: AttributeRef,
        config: LinkConfig,
        unit_id: int,
        interval_millis: int,
        reader: ModbusReadDispatcher,
        sink: AttributeUpdateSink,
        value_type: type | None = None,
        logger: logging.Logger | None = None,
    ):
        super().__init__(interval_seconds=interval_millis / 1000.0, name=f"Poll {ref}", logger=logger)
        self.ref = ref
        self.config = config
        self.unit_id = unit_id
        self.reader = reader
        self.sink = sink
        self.value_type = value_type

    async def run_once(self) -> None:
        try:
            value: Any = await self.read_value()
        except CoercionError as e:
            self.logger.warning(f"[Poll] {self.ref}: update dropped: {e}")
            return
        except ModlinkError as e:
            self.logger.warning(f"[Poll] {self.ref}: {e}")
            return

        if self.is_stopping:
            self.logger.debug(f"[Poll] {self.ref}: unlinked during read, value {value!r} discarded")
            return
        await self.sink.publish(self.ref, value)

    async def read_value(self) -> Any:
        """One read → decode → coerce cycle, without publishing."""
        config = self.config
        raw = await self.reader.read(self.unit_id, config.read_register_type, config.read_address, config.read_count)
        decoded = ValueCodec.decode(raw, config.read_encoding)
        self.logger.debug(f"[Poll] {self.ref}: raw={raw!r} decoded={decoded!r}")
        return coerce_value(decoded, self.value_type)

import asyncio
import logging

from modlink.device.modbus.read_dispatcher import ModbusReadDispatcher
from modlink.model.attribute_ref import AttributeRef
from modlink.model.device_constant import DEFAULT_POLLING_INTERVAL_MILLIS, DEFAULT_UNIT_ID
from modlink.schema.link_config_schema import LinkConfig
from modlink.task.polling_task import PollingTask
from modlink.util.pubsub.base import AttributeUpdateSink


class PollingScheduler:
    """
    Owns the AttributeRef → PollingTask registry.

    At most one task exists per ref: linking an already linked ref cancels the
    previous task first. `link`/`unlink` are synchronous, so they are atomic
    with respect to the event loop that runs the tasks.
    """

    def __init__(
        self,
        reader: ModbusReadDispatcher,
        sink: AttributeUpdateSink,
        default_unit_id: int = DEFAULT_UNIT_ID,
        default_interval_millis: int = DEFAULT_POLLING_INTERVAL_MILLIS,
        logger: logging.Logger | None = None,
    ):
        self.reader = reader
        self.sink = sink
        self.default_unit_id = default_unit_id
        self.default_interval_millis = default_interval_millis
        self.logger = logger or logging.getLogger("PollingScheduler")
        self._tasks: dict[AttributeRef, PollingTask] = {}
        # retired tasks whose in-flight run has not finished yet
        self._draining: set[asyncio.Future] = set()

    def link(self, ref: AttributeRef, config: LinkConfig, value_type: type | None = None) -> PollingTask:
        """Schedule polling for `ref`; first read happens immediately."""
        previous: PollingTask | None = self._tasks.pop(ref, None)
        if previous is not None:
            self.logger.warning(f"[Scheduler] {ref} was already linked, cancelling previous task")
            self._retire(previous)

        unit_id: int = config.unit_id if config.unit_id is not None else self.default_unit_id
        interval_millis: int = config.refresh_interval_millis or self.default_interval_millis

        task = PollingTask(
            ref=ref,
            config=config,
            unit_id=unit_id,
            interval_millis=interval_millis,
            reader=self.reader,
            sink=self.sink,
            value_type=value_type,
            logger=self.logger,
        )
        self._tasks[ref] = task
        task.start()

        self.logger.info(
            f"[Scheduler] {ref}: polling {config.read_register_type}@{config.read_address} "
            f"({config.read_encoding}) unit={unit_id} every {interval_millis} ms"
        )
        return task

    def unlink(self, ref: AttributeRef) -> bool:
        """Cancel polling for `ref`. Unknown refs are ignored."""
        task: PollingTask | None = self._tasks.pop(ref, None)
        if task is None:
            return False

        self._retire(task)
        self.logger.info(f"[Scheduler] {ref}: polling cancelled")
        return True

    def is_linked(self, ref: AttributeRef) -> bool:
        return ref in self._tasks

    def linked_refs(self) -> list[AttributeRef]:
        return list(self._tasks)

    def __len__(self) -> int:
        return len(self._tasks)

    async def stop(self) -> None:
        """Cancel every task and wait for in-flight polls, including those of unlinked refs, to finish."""
        tasks: list[PollingTask] = list(self._tasks.values())
        self._tasks.clear()
        draining: list[asyncio.Future] = list(self._draining)
        if tasks or draining:
            await asyncio.gather(*(task.stop() for task in tasks), *draining, return_exceptions=True)
            self.logger.info(f"[Scheduler] stopped {len(tasks)} polling task(s)")

    def _retire(self, task: PollingTask) -> None:
        task.cancel()
        drain: asyncio.Future = asyncio.ensure_future(task.stop())
        self._draining.add(drain)
        drain.add_done_callback(self._draining.discard)

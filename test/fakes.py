import asyncio
from types import SimpleNamespace
from typing import Any

from modlink.device.base import DeviceDriver
from modlink.model.attribute_ref import AttributeRef
from modlink.util.pubsub.base import AttributeUpdateSink


def _ok(**fields):
    return SimpleNamespace(isError=lambda: False, **fields)


class FakeModbusClient:
    """pymodbus-like async client backed by dicts; records every call."""

    def __init__(
        self,
        holding: dict[int, int] | None = None,
        input_registers: dict[int, int] | None = None,
        coils: dict[int, bool] | None = None,
        discrete_inputs: dict[int, bool] | None = None,
    ):
        self.holding = dict(holding or {})
        self.input_registers = dict(input_registers or {})
        self.coils = dict(coils or {})
        self.discrete_inputs = dict(discrete_inputs or {})
        self.connected = False
        self.closed = False
        self.calls: list[tuple] = []
        self.errors: list[BaseException] = []

    async def connect(self):
        self.connected = True
        return True

    def close(self):
        self.closed = True
        self.connected = False

    def _record(self, name: str, *args: Any):
        self.calls.append((name, *args))
        if self.errors:
            raise self.errors.pop(0)

    @staticmethod
    def _bits(table: dict[int, bool], address: int, count: int) -> list[bool]:
        bits = [bool(table.get(address + i, False)) for i in range(count)]
        # pymodbus pads bit responses to a whole byte
        return bits + [False] * (-len(bits) % 8)

    async def read_coils(self, address, count=1, device_id=1):
        self._record("read_coils", address, count, device_id)
        return _ok(bits=self._bits(self.coils, address, count))

    async def read_discrete_inputs(self, address, count=1, device_id=1):
        self._record("read_discrete_inputs", address, count, device_id)
        return _ok(bits=self._bits(self.discrete_inputs, address, count))

    async def read_holding_registers(self, address, count=1, device_id=1):
        self._record("read_holding_registers", address, count, device_id)
        return _ok(registers=[self.holding.get(address + i, 0) for i in range(count)])

    async def read_input_registers(self, address, count=1, device_id=1):
        self._record("read_input_registers", address, count, device_id)
        return _ok(registers=[self.input_registers.get(address + i, 0) for i in range(count)])

    async def write_coil(self, address, value, device_id=1):
        self._record("write_coil", address, value, device_id)
        self.coils[address] = value
        return _ok(address=address, value=value)

    async def write_register(self, address, value, device_id=1):
        self._record("write_register", address, value, device_id)
        self.holding[address] = value
        return _ok(address=address, registers=[value])

    async def write_registers(self, address, values, device_id=1):
        self._record("write_registers", address, list(values), device_id)
        for i, v in enumerate(values):
            self.holding[address + i] = v
        return _ok(address=address, count=len(values))


class RecordingSink(AttributeUpdateSink):
    def __init__(self):
        self.updates: list[tuple[AttributeRef, Any]] = []

    async def publish(self, ref: AttributeRef, value: Any) -> None:
        self.updates.append((ref, value))

    def values_for(self, ref: AttributeRef) -> list[Any]:
        return [v for r, v in self.updates if r == ref]


async def wait_until(predicate, timeout: float = 1.0, step: float = 0.005) -> bool:
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while loop.time() < deadline:
        if predicate():
            return True
        await asyncio.sleep(step)
    return predicate()


class FakeDriver(DeviceDriver):
    """Hands out a FakeModbusClient; `connect_error` makes connect() raise."""

    protocol_name = "Fake Modbus"

    def __init__(self, client: FakeModbusClient | None = None, connect_error: Exception | None = None,
                 connects: bool = True):
        self.client = client or FakeModbusClient()
        self.connect_error = connect_error
        self.connects = connects

    def create_io_client(self, config):
        client = self.client

        async def connect():
            if self.connect_error is not None:
                raise self.connect_error
            client.connected = self.connects
            return self.connects

        client.connect = connect
        return client

    def instance_uri(self, config):
        return f"fake://{config.host}"

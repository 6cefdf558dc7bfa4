import logging
from typing import Any

from pymodbus.pdu.pdu import ModbusPDU

from modlink.device.modbus.modbus_call import invoke_modbus_call, require_client
from modlink.exception import TransportError, UnsupportedOperationError
from modlink.model.enum.function_code_enum import describe_function_code
from modlink.model.enum.register_type_enum import RegisterType
from modlink.util.value_codec import RawValue

_READ_METHODS: dict[RegisterType, str] = {
    RegisterType.COIL: "read_coils",
    RegisterType.DISCRETE_INPUT: "read_discrete_inputs",
    RegisterType.HOLDING: "read_holding_registers",
    RegisterType.INPUT: "read_input_registers",
}


class ModbusReadDispatcher:
    """
    Maps (register type, address, count) onto the matching pymodbus read call.

    Coils and discrete inputs come back as bool, holding and input registers
    as one int word; with count > 1 a list is returned instead.
    """

    def __init__(self, connection: Any, logger: logging.Logger | None = None):
        """
        Args:
            connection: holder of the shared client (ConnectionLifecycle);
                the client is borrowed per call, never cached
            logger: device-scoped logger
        """
        self.connection = connection
        self.logger = logger or logging.getLogger("ReadDispatcher")

    async def read(self, unit_id: int, register_type: RegisterType, address: int, count: int = 1) -> RawValue:
        method_name: str = self._read_method(register_type)
        client = require_client(self.connection)

        action = f"{describe_function_code(register_type.read_function_code)} unit={unit_id} address={address}"
        self.logger.debug(f"[Read] {action} count={count}")

        resp: ModbusPDU = await invoke_modbus_call(
            getattr(client, method_name), action, address=address, count=count, device_id=unit_id
        )
        return self._extract_value(resp, register_type, count, action)

    @staticmethod
    def _read_method(register_type: RegisterType) -> str:
        try:
            return _READ_METHODS[register_type]
        except KeyError:
            raise UnsupportedOperationError(
                f"Unsupported read register type: {register_type!r}", register_type=register_type
            ) from None

    @staticmethod
    def _extract_value(resp: ModbusPDU, register_type: RegisterType, count: int, action: str) -> RawValue:
        if register_type.is_bit:
            bits = getattr(resp, "bits", None)
            if not isinstance(bits, list) or len(bits) < count:
                raise TransportError(f"{action} malformed response: bits={bits!r}")
            # pymodbus pads bits up to a whole byte
            values = [bool(b) for b in bits[:count]]
        else:
            registers = getattr(resp, "registers", None)
            if not isinstance(registers, list) or len(registers) < count:
                raise TransportError(f"{action} malformed response: registers={registers!r}")
            values = [int(r) for r in registers[:count]]

        return values[0] if count == 1 else values

import logging
from typing import Any

from modlink.device.modbus.modbus_call import invoke_modbus_call, require_client
from modlink.exception import InvalidArgumentError, UnsupportedOperationError
from modlink.model.enum.function_code_enum import FunctionCode, describe_function_code
from modlink.model.enum.register_type_enum import RegisterType
from modlink.model.enum.value_encoding_enum import ValueEncoding
from modlink.model.write_ack import WriteAck
from modlink.util.value_codec import ValueCodec
from modlink.util.value_util import is_numeric, to_bool


class ModbusWriteDispatcher:
    """
    Maps (register type, address, value) onto the matching pymodbus write call.

    Only coils and holding registers are writable. Every validation happens
    before the client is touched, so a rejected write never reaches the wire.
    """

    def __init__(self, connection: Any, logger: logging.Logger | None = None):
        self.connection = connection
        self.logger = logger or logging.getLogger("WriteDispatcher")

    async def write(
        self,
        unit_id: int,
        register_type: RegisterType,
        address: int,
        value: Any,
        encoding: ValueEncoding | None = None,
    ) -> WriteAck:
        """
        Write one value.

        Args:
            unit_id: Modbus unit (slave) id
            register_type: coil or holding
            address: zero-based address
            value: bool/number for coils, number for holding registers
            encoding: holding register encoding (default int16)

        Returns:
            WriteAck with the values put on the wire

        Raises:
            UnsupportedOperationError: register type is read-only
            InvalidArgumentError: value cannot be written to that register type
            TransportError: the write call failed
        """
        match register_type:
            case RegisterType.COIL:
                return await self.write_coil(unit_id, address, value)
            case RegisterType.HOLDING:
                return await self.write_holding(unit_id, address, value, encoding or ValueEncoding.INT16)
            case _:
                raise UnsupportedOperationError(
                    f"Cannot write to register type: {register_type}", register_type=register_type
                )

    async def write_coil(self, unit_id: int, address: int, value: Any) -> WriteAck:
        try:
            state: bool = to_bool(value)
        except (TypeError, ValueError) as e:
            raise InvalidArgumentError(f"Cannot write {value!r} to a coil: {e}", value=value) from e

        client = require_client(self.connection)
        action = f"{describe_function_code(FunctionCode.WRITE_SINGLE_COIL)} unit={unit_id} address={address}"
        self.logger.info(f"[Write] {action} value={state}")

        await invoke_modbus_call(client.write_coil, action, address=address, value=state, device_id=unit_id)
        return WriteAck(RegisterType.COIL, address, (state,))

    async def write_holding(self, unit_id: int, address: int, value: Any, encoding: ValueEncoding) -> WriteAck:
        if not is_numeric(value):
            raise InvalidArgumentError(f"Cannot write non-numeric value to a register: {value!r}", value=value)

        words: list[int] = ValueCodec.encode(value, encoding)
        client = require_client(self.connection)

        if len(words) == 1:
            action = f"{describe_function_code(FunctionCode.WRITE_SINGLE_REGISTER)} unit={unit_id} address={address}"
            self.logger.info(f"[Write] {action} value={words[0]} ({encoding})")
            await invoke_modbus_call(
                client.write_register, action, address=address, value=words[0], device_id=unit_id
            )
        else:
            action = (
                f"{describe_function_code(FunctionCode.WRITE_MULTIPLE_REGISTERS)} unit={unit_id} address={address}"
            )
            self.logger.info(f"[Write] {action} values={words} ({encoding})")
            await invoke_modbus_call(
                client.write_registers, action, address=address, values=words, device_id=unit_id
            )

        return WriteAck(RegisterType.HOLDING, address, tuple(words))

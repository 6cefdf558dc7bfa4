from enum import StrEnum

from modlink.model.enum.function_code_enum import FunctionCode


class RegisterType(StrEnum):
    """The four Modbus address spaces."""

    COIL = "coil"
    DISCRETE_INPUT = "discrete_input"
    HOLDING = "holding"
    INPUT = "input"

    @property
    def is_writable(self) -> bool:
        return self in (RegisterType.COIL, RegisterType.HOLDING)

    @property
    def is_bit(self) -> bool:
        return self in (RegisterType.COIL, RegisterType.DISCRETE_INPUT)

    @property
    def read_function_code(self) -> FunctionCode:
        match self:
            case RegisterType.COIL:
                return FunctionCode.READ_COILS
            case RegisterType.DISCRETE_INPUT:
                return FunctionCode.READ_DISCRETE_INPUTS
            case RegisterType.HOLDING:
                return FunctionCode.READ_HOLDING_REGISTERS
            case RegisterType.INPUT:
                return FunctionCode.READ_INPUT_REGISTERS

    @property
    def write_function_code(self) -> FunctionCode | None:
        match self:
            case RegisterType.COIL:
                return FunctionCode.WRITE_SINGLE_COIL
            case RegisterType.HOLDING:
                return FunctionCode.WRITE_SINGLE_REGISTER
            case _:
                return None

    @classmethod
    def from_string(cls, s: str) -> "RegisterType | None":
        if isinstance(s, cls):
            return s
        key: str = str(s).lower().replace("-", "_").strip()
        alias_dict = {
            "discrete": "discrete_input",
            "discreteinput": "discrete_input",
            "discrete_inputs": "discrete_input",
            "coils": "coil",
            "holding_register": "holding",
            "holding_registers": "holding",
            "input_register": "input",
            "input_registers": "input",
        }
        key = alias_dict.get(key, key)
        try:
            return cls(key)
        except ValueError:
            return None

from enum import IntEnum


class FunctionCode(IntEnum):
    READ_COILS = 1
    READ_DISCRETE_INPUTS = 2
    READ_HOLDING_REGISTERS = 3
    READ_INPUT_REGISTERS = 4
    WRITE_SINGLE_COIL = 5
    WRITE_SINGLE_REGISTER = 6
    WRITE_MULTIPLE_COILS = 15
    WRITE_MULTIPLE_REGISTERS = 16


_DESCRIPTIONS: dict[FunctionCode, str] = {
    FunctionCode.READ_COILS: "Read Coils (FC01)",
    FunctionCode.READ_DISCRETE_INPUTS: "Read Discrete Inputs (FC02)",
    FunctionCode.READ_HOLDING_REGISTERS: "Read Holding Registers (FC03)",
    FunctionCode.READ_INPUT_REGISTERS: "Read Input Registers (FC04)",
    FunctionCode.WRITE_SINGLE_COIL: "Write Single Coil (FC05)",
    FunctionCode.WRITE_SINGLE_REGISTER: "Write Single Register (FC06)",
    FunctionCode.WRITE_MULTIPLE_COILS: "Write Multiple Coils (FC15)",
    FunctionCode.WRITE_MULTIPLE_REGISTERS: "Write Multiple Registers (FC16)",
}


def is_valid_function_code(code: int) -> bool:
    return code in FunctionCode._value2member_map_


def describe_function_code(code: int) -> str:
    if not is_valid_function_code(code):
        return f"Unknown function code: {code}"
    return _DESCRIPTIONS[FunctionCode(code)]

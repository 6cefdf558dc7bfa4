import pytest

from modlink.model.enum.attribute_value_type_enum import AttributeValueType
from modlink.model.enum.function_code_enum import FunctionCode, describe_function_code, is_valid_function_code
from modlink.model.enum.register_type_enum import RegisterType
from modlink.model.enum.value_encoding_enum import WRITE_VALUE_ENCODINGS, ValueEncoding


class TestRegisterType:
    @pytest.mark.parametrize(
        "text, expected",
        [
            ("coil", RegisterType.COIL),
            ("Coils", RegisterType.COIL),
            ("discrete", RegisterType.DISCRETE_INPUT),
            ("discrete-input", RegisterType.DISCRETE_INPUT),
            ("HOLDING", RegisterType.HOLDING),
            ("holding_registers", RegisterType.HOLDING),
            ("input_register", RegisterType.INPUT),
        ],
    )
    def test_from_string(self, text, expected):
        assert RegisterType.from_string(text) is expected

    def test_from_string_unknown_returns_none(self):
        assert RegisterType.from_string("bogus") is None

    def test_writability(self):
        assert RegisterType.COIL.is_writable
        assert RegisterType.HOLDING.is_writable
        assert not RegisterType.DISCRETE_INPUT.is_writable
        assert not RegisterType.INPUT.is_writable

    def test_function_codes(self):
        assert RegisterType.COIL.read_function_code == FunctionCode.READ_COILS
        assert RegisterType.INPUT.read_function_code == 4
        assert RegisterType.HOLDING.write_function_code == FunctionCode.WRITE_SINGLE_REGISTER
        assert RegisterType.DISCRETE_INPUT.write_function_code is None


class TestValueEncoding:
    @pytest.mark.parametrize(
        "encoding, words",
        [
            (ValueEncoding.BIT, 1),
            (ValueEncoding.INT8, 1),
            (ValueEncoding.UINT16, 1),
            (ValueEncoding.INT32_SWAP, 2),
            (ValueEncoding.FLOAT32, 2),
            (ValueEncoding.UINT64, 4),
        ],
    )
    def test_word_count(self, encoding, words):
        assert encoding.word_count == words

    def test_flags(self):
        assert ValueEncoding.FLOAT32_SWAP.is_swapped
        assert ValueEncoding.FLOAT32_SWAP.is_float
        assert not ValueEncoding.UINT32.is_signed
        assert ValueEncoding.INT64_SWAP.is_signed

    @pytest.mark.parametrize(
        "text, expected",
        [("i16", ValueEncoding.INT16), ("float", ValueEncoding.FLOAT32), ("bool", ValueEncoding.BIT),
         ("Int32-Swap", ValueEncoding.INT32_SWAP), ("uint64_swap", ValueEncoding.UINT64_SWAP)],
    )
    def test_from_string(self, text, expected):
        assert ValueEncoding.from_string(text) is expected

    def test_write_encodings_subset(self):
        assert ValueEncoding.UINT16 not in WRITE_VALUE_ENCODINGS
        assert ValueEncoding.FLOAT32_SWAP in WRITE_VALUE_ENCODINGS
        assert len(WRITE_VALUE_ENCODINGS) == 8


def test_function_code_helpers():
    assert is_valid_function_code(16)
    assert not is_valid_function_code(7)
    assert describe_function_code(3) == "Read Holding Registers (FC03)"
    assert describe_function_code(99) == "Unknown function code: 99"


def test_attribute_value_type_python_type():
    assert AttributeValueType.NUMBER.python_type is float
    assert AttributeValueType("integer").python_type is int
    assert AttributeValueType.BOOLEAN.python_type is bool
    assert AttributeValueType.TEXT.python_type is str

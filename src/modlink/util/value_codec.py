import logging
import struct
from typing import Any, Literal

from pymodbus.client.mixin import ModbusClientMixin
from pymodbus.exceptions import ModbusException

from modlink.exception import InvalidArgumentError
from modlink.model.device_constant import WORD_BITS, WORD_MASK
from modlink.model.enum.value_encoding_enum import ValueEncoding
from modlink.util.value_util import is_numeric, to_bool

logger = logging.getLogger("ValueCodec")

DATATYPE = ModbusClientMixin.DATATYPE

RawValue = bool | int | float | str | list[int] | list[bool]

_INT_DATATYPES: dict[tuple[int, bool], DATATYPE] = {
    (16, True): DATATYPE.INT16,
    (16, False): DATATYPE.UINT16,
    (32, True): DATATYPE.INT32,
    (32, False): DATATYPE.UINT32,
    (64, True): DATATYPE.INT64,
    (64, False): DATATYPE.UINT64,
}

_DECODE_ERRORS = (TypeError, ValueError, OverflowError, IndexError, struct.error, ModbusException)


def _word_order(encoding: ValueEncoding) -> Literal["big", "little"]:
    # "_swap" → low word first on the wire
    return "little" if encoding.is_swapped else "big"


class ValueCodec:
    """
    Conversion between raw coil/register values and typed attribute values.

    Raw values arrive in the shapes produced by the read dispatcher:
        - bool        → one coil / discrete input
        - int         → one register word, or an already assembled wire integer
        - list[int]   → consecutive register words in wire order
        - str         → numeric text (best effort)
    """

    @staticmethod
    def decode(raw: RawValue, encoding: ValueEncoding) -> Any:
        """
        Decode `raw` according to `encoding`.

        Never raises: on malformed input a warning is logged and `raw` is
        returned unchanged, so callers must treat the result as best effort.
        """
        try:
            return ValueCodec._decode(raw, encoding)
        except _DECODE_ERRORS as e:
            logger.warning(f"[Codec] cannot decode {raw!r} as {encoding}: {e}; keeping raw value")
            return raw

    @staticmethod
    def encode(value: Any, encoding: ValueEncoding) -> list[int]:
        """
        Encode a typed value into register words (wire order).

        Integer encodings truncate toward zero and wrap to the encoding width.

        Raises:
            InvalidArgumentError: if the value is not numeric or does not fit.
        """
        if isinstance(value, str):
            try:
                value = ValueCodec._parse_number(value, encoding)
            except ValueError:
                raise InvalidArgumentError(f"cannot encode text {value!r} as {encoding}", value=value) from None
        if not is_numeric(value):
            raise InvalidArgumentError(f"cannot encode non-numeric value {value!r} as {encoding}", value=value)

        try:
            match encoding:
                case ValueEncoding.BIT:
                    return [1 if to_bool(value) else 0]

                case ValueEncoding.FLOAT32 | ValueEncoding.FLOAT32_SWAP:
                    return ModbusClientMixin.convert_to_registers(
                        float(value), DATATYPE.FLOAT32, word_order=_word_order(encoding)
                    )

                case ValueEncoding.INT8 | ValueEncoding.UINT8:
                    return [int(value) & 0xFF]

                case _:
                    width: int = encoding.bit_width
                    unsigned: int = int(value) & ((1 << width) - 1)
                    return ModbusClientMixin.convert_to_registers(
                        unsigned, _INT_DATATYPES[(width, False)], word_order=_word_order(encoding)
                    )
        except (ValueError, OverflowError, struct.error, ModbusException) as e:
            raise InvalidArgumentError(f"cannot encode {value!r} as {encoding}: {e}", value=value) from e

    # ---------------------------------------------------------------------
    # Internals
    # ---------------------------------------------------------------------

    @staticmethod
    def _decode(raw: RawValue, encoding: ValueEncoding) -> Any:
        if encoding is ValueEncoding.BIT:
            return ValueCodec._decode_bit(raw)

        if isinstance(raw, str):
            raw = ValueCodec._parse_number(raw, encoding)

        if isinstance(raw, float):
            if encoding.is_float:
                return raw
            if not raw.is_integer():
                raise ValueError(f"fractional value {raw} for integer encoding")
            raw = int(raw)

        words: list[int] = ValueCodec.to_words(raw, encoding.word_count)

        match encoding:
            case ValueEncoding.INT8:
                low = words[0] & 0xFF
                return low - 0x100 if low & 0x80 else low

            case ValueEncoding.UINT8:
                return words[0] & 0xFF

            case ValueEncoding.FLOAT32 | ValueEncoding.FLOAT32_SWAP:
                return ModbusClientMixin.convert_from_registers(
                    words, DATATYPE.FLOAT32, word_order=_word_order(encoding)
                )

            case _:
                data_type = _INT_DATATYPES[(encoding.bit_width, encoding.is_signed)]
                return ModbusClientMixin.convert_from_registers(words, data_type, word_order=_word_order(encoding))

    @staticmethod
    def _decode_bit(raw: RawValue) -> bool:
        if isinstance(raw, (list, tuple)):
            if not raw:
                raise ValueError("empty bit sequence")
            raw = raw[0]
        return to_bool(raw)

    @staticmethod
    def _parse_number(text: str, encoding: ValueEncoding) -> int | float:
        text = text.strip()
        if encoding.is_float:
            return float(text)
        try:
            return int(text, 0)
        except ValueError:
            return float(text)

    @staticmethod
    def to_words(raw: bool | int | list[int] | tuple, count: int) -> list[int]:
        """
        Normalize a raw value into exactly `count` 16-bit words (wire order).

        An int is treated as the concatenation of `count` words, high word
        first. A sequence must hold at least `count` words; extra words are
        ignored.
        """
        if isinstance(raw, (list, tuple)):
            if len(raw) < count:
                raise ValueError(f"expected {count} words, got {len(raw)}")
            return [int(w) & WORD_MASK for w in raw[:count]]

        if isinstance(raw, int):
            value: int = int(raw) & ((1 << (WORD_BITS * count)) - 1)
            return [(value >> (WORD_BITS * (count - 1 - i))) & WORD_MASK for i in range(count)]

        raise TypeError(f"unsupported raw value type {type(raw).__name__}")

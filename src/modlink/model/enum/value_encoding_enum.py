from enum import StrEnum


class ValueEncoding(StrEnum):
    """
    How a raw coil/register value is interpreted.

    Notes:
        * "_swap" variants store their 16-bit words low word first; the words
          are reordered before the value is interpreted.
        * int8/uint8 use the low byte of a single register.
    """

    INT8 = "int8"
    UINT8 = "uint8"
    INT16 = "int16"
    UINT16 = "uint16"
    INT32 = "int32"
    INT32_SWAP = "int32_swap"
    UINT32 = "uint32"
    UINT32_SWAP = "uint32_swap"
    INT64 = "int64"
    INT64_SWAP = "int64_swap"
    UINT64 = "uint64"
    UINT64_SWAP = "uint64_swap"
    FLOAT32 = "float32"
    FLOAT32_SWAP = "float32_swap"
    BIT = "bit"

    @property
    def bit_width(self) -> int:
        match self:
            case ValueEncoding.BIT:
                return 1
            case ValueEncoding.INT8 | ValueEncoding.UINT8:
                return 8
            case ValueEncoding.INT16 | ValueEncoding.UINT16:
                return 16
            case (
                ValueEncoding.INT32
                | ValueEncoding.INT32_SWAP
                | ValueEncoding.UINT32
                | ValueEncoding.UINT32_SWAP
                | ValueEncoding.FLOAT32
                | ValueEncoding.FLOAT32_SWAP
            ):
                return 32
            case _:
                return 64

    @property
    def word_count(self) -> int:
        """Number of 16-bit registers consumed."""
        return max(1, self.bit_width // 16)

    @property
    def is_swapped(self) -> bool:
        return self.value.endswith("_swap")

    @property
    def is_float(self) -> bool:
        return self in (ValueEncoding.FLOAT32, ValueEncoding.FLOAT32_SWAP)

    @property
    def is_signed(self) -> bool:
        return self.value.startswith("int") or self.is_float

    @classmethod
    def from_string(cls, s: str) -> "ValueEncoding | None":
        if isinstance(s, cls):
            return s
        key: str = str(s).lower().replace("-", "_").strip()
        alias_dict = {
            "i8": "int8",
            "u8": "uint8",
            "i16": "int16",
            "u16": "uint16",
            "i32": "int32",
            "u32": "uint32",
            "i64": "int64",
            "u64": "uint64",
            "f32": "float32",
            "float": "float32",
            "int32swap": "int32_swap",
            "uint32swap": "uint32_swap",
            "int64swap": "int64_swap",
            "uint64swap": "uint64_swap",
            "float32swap": "float32_swap",
            "f32_swap": "float32_swap",
            "bool": "bit",
            "boolean": "bit",
        }
        key = alias_dict.get(key, key)
        try:
            return cls(key)
        except ValueError:
            return None


WRITE_VALUE_ENCODINGS: frozenset[ValueEncoding] = frozenset(
    {
        ValueEncoding.INT64,
        ValueEncoding.INT64_SWAP,
        ValueEncoding.FLOAT32,
        ValueEncoding.FLOAT32_SWAP,
        ValueEncoding.INT32,
        ValueEncoding.INT32_SWAP,
        ValueEncoding.INT16,
        ValueEncoding.BIT,
    }
)

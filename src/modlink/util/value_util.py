"""Utility functions for value conversion with proper error handling."""

import math
from typing import Any

from modlink.exception import CoercionError

_TRUE_STRINGS = frozenset({"true", "on", "yes", "1"})
_FALSE_STRINGS = frozenset({"false", "off", "no", "0", ""})


def truncate_to_int(x: Any) -> int:
    """
    Convert a config number to int, truncating toward zero.

    Host frameworks often store unit ids, intervals and addresses as floats;
    1.9 must become 1 and -1.9 must become -1.

    Raises:
        ValueError: if the value is not a finite number.

    Examples:
        >>> truncate_to_int(1000.0)
        1000
        >>> truncate_to_int("2.7")
        2
        >>> truncate_to_int(-1.9)
        -1
    """
    if isinstance(x, bool):
        return int(x)
    if isinstance(x, int):
        return x
    try:
        if isinstance(x, str):
            try:
                return int(x.strip())
            except ValueError:
                x = float(x)
        f = float(x)
    except (TypeError, ValueError):
        raise ValueError(f"not a number: {x!r}") from None
    if not math.isfinite(f):
        raise ValueError(f"not a finite number: {x!r}")
    return int(f)


def is_numeric(value: Any) -> bool:
    """True for int, float and bool (bool is an int subtype)."""
    return isinstance(value, (int, float))


def to_bool(value: Any) -> bool:
    """Coil semantics: True/nonzero → True, False/zero → False."""
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        key = value.strip().lower()
        if key in _TRUE_STRINGS:
            return True
        if key in _FALSE_STRINGS:
            return False
        raise ValueError(f"cannot interpret {value!r} as boolean")
    raise TypeError(f"cannot interpret {type(value).__name__} as boolean")


def _to_int(value: Any) -> int:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return int(float(value))
    raise TypeError(f"cannot interpret {type(value).__name__} as int")


def _to_float(value: Any) -> float:
    if isinstance(value, (bool, int, float)):
        return float(value)
    if isinstance(value, str):
        return float(value.strip())
    raise TypeError(f"cannot interpret {type(value).__name__} as float")


def _to_str(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def coerce_value(value: Any, target_type: type | None) -> Any:
    """
    Coerce a decoded value to the attribute's declared runtime type.

    Numeric widening/narrowing (float → int truncates toward zero) and
    boolean ↔ number conversions are supported. `target_type=None` means the
    attribute is untyped and the value passes through.

    Raises:
        CoercionError: if the value cannot be represented as `target_type`.
    """
    if target_type is None or value is None:
        return value

    converters = {bool: to_bool, int: _to_int, float: _to_float, str: _to_str}
    converter = converters.get(target_type)
    if converter is None:
        raise CoercionError(f"unsupported attribute type {target_type!r}", value=value, target_type=target_type)

    try:
        return converter(value)
    except (TypeError, ValueError, OverflowError) as e:
        raise CoercionError(
            f"cannot coerce {value!r} to {target_type.__name__}: {e}", value=value, target_type=target_type
        ) from e

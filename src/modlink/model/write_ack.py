from dataclasses import dataclass

from modlink.model.enum.register_type_enum import RegisterType


@dataclass(frozen=True, slots=True)
class WriteAck:
    """Acknowledgment of a completed coil/register write."""

    register_type: RegisterType
    address: int
    values: tuple[int | bool, ...]

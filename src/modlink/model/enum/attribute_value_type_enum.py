from enum import StrEnum


class AttributeValueType(StrEnum):
    """Declared runtime type of a linked attribute."""

    NUMBER = "number"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    TEXT = "text"

    @property
    def python_type(self) -> type:
        match self:
            case AttributeValueType.NUMBER:
                return float
            case AttributeValueType.INTEGER:
                return int
            case AttributeValueType.BOOLEAN:
                return bool
            case AttributeValueType.TEXT:
                return str

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class AttributeRef:
    """Stable identity of a linked attribute."""

    owner_id: str
    attribute_name: str

    def __str__(self) -> str:
        return f"{self.owner_id}:{self.attribute_name}"

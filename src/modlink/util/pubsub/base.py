from abc import ABC, abstractmethod
from typing import Any

from modlink.model.attribute_ref import AttributeRef


class AttributeUpdateSink(ABC):
    """Receives the typed values produced by polling."""

    @abstractmethod
    async def publish(self, ref: AttributeRef, value: Any) -> None:
        raise NotImplementedError

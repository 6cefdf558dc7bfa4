from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from modlink.model.attribute_ref import AttributeRef


@dataclass(frozen=True, slots=True)
class AttributeUpdate:
    ref: AttributeRef
    value: Any
    timestamp: datetime = field(default_factory=datetime.now)

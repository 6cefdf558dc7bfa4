from enum import StrEnum


class OverflowPolicy(StrEnum):
    """What a full subscriber queue does with the next update."""

    DROP_OLDEST = "drop_oldest"
    DROP_NEWEST = "drop_newest"

    @classmethod
    def from_string(cls, s: str) -> "OverflowPolicy | None":
        if isinstance(s, cls):
            return s
        key: str = str(s).lower().replace("-", "_").strip()
        alias_dict = {"oldest": "drop_oldest", "newest": "drop_newest"}
        key = alias_dict.get(key, key)
        try:
            return cls(key)
        except ValueError:
            return None

"""Tagged wrapper values for datastore-typed properties.

A plain ``7`` and a plain ``"7"`` are easy to tell apart, but a datastore
integer stored as text is not. These small wrappers carry an explicit type
marker so the type checkers can match on the class instead of guessing
from the shape of the value.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, ClassVar


class TaggedValue(ABC):
    """Base class for values that can be coerced to a primitive."""

    type_tag: ClassVar[str]

    @abstractmethod
    def to_primitive(self) -> Any:
        """Return the plain Python value this wrapper stands for.

        Raises:
            ValueError: If the raw representation cannot be converted
        """


@dataclass(frozen=True)
class IntegerValue(TaggedValue):
    """Integer wrapper; ``raw`` keeps the value as written."""

    raw: str | int
    type_tag: ClassVar[str] = "int"

    def to_primitive(self) -> int:
        return int(str(self.raw))

    def __str__(self) -> str:
        return str(self.raw)


@dataclass(frozen=True)
class DoubleValue(TaggedValue):
    """Double wrapper; ``raw`` keeps the value as written."""

    raw: str | float
    type_tag: ClassVar[str] = "double"

    def to_primitive(self) -> float:
        return float(str(self.raw))

    def __str__(self) -> str:
        return str(self.raw)


@dataclass(frozen=True)
class GeoPointValue(TaggedValue):
    """Geographic point wrapper."""

    latitude: float
    longitude: float
    type_tag: ClassVar[str] = "geoPoint"

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "GeoPointValue":
        """Build a point from a ``{"latitude": ..., "longitude": ...}`` mapping.

        Raises:
            KeyError: If either coordinate is missing
        """
        return cls(latitude=data["latitude"], longitude=data["longitude"])

    def to_primitive(self) -> dict[str, float]:
        return {"latitude": self.latitude, "longitude": self.longitude}

"""Error and result data structures for the validation engine.

This module defines the error codes callers branch on, the record of a
single violation, the aggregate ValidationError raised or returned for a
failed entity, and the ValidationResult handed back by every call.
"""

from collections.abc import Generator, Iterator
from dataclasses import dataclass
from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Stable identifiers for each kind of violation."""

    ERR_PROP_TYPE = "ERR_PROP_TYPE"
    ERR_PROP_VALUE = "ERR_PROP_VALUE"
    ERR_PROP_NOT_ALLOWED = "ERR_PROP_NOT_ALLOWED"
    ERR_PROP_REQUIRED = "ERR_PROP_REQUIRED"
    ERR_PROP_IN_RANGE = "ERR_PROP_IN_RANGE"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Violation:
    """Represents one rule or type failure for one property.

    Contains the code callers branch on plus a message and optional help
    text meant for humans.
    """

    code: ErrorCode
    property: str
    message: str
    entity: str | None = None
    help: str | None = None

    def __str__(self) -> str:
        """Return a formatted string representation of the violation."""
        parts = [f"{self.code}: {self.message}"]

        if self.entity:
            parts.append(f"(entity: {self.entity})")
        parts.append(f"(property: {self.property})")
        if self.help:
            parts.append(f"Help: {self.help}")

        return " ".join(parts)

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code.value,
            "property": self.property,
            "message": self.message,
            "entity": self.entity,
            "help": self.help,
        }


class ValidationError(Exception):
    """Aggregate error carrying every violation found for one entity."""

    name = "ValidationError"

    def __init__(self, errors: list[Violation], entity_kind: str | None = None):
        self.errors: tuple[Violation, ...] = tuple(errors)
        self.entity_kind = entity_kind
        super().__init__(self.message)

    @property
    def message(self) -> str:
        """Every violation message, one per line."""
        return "\n".join(error.message for error in self.errors)

    @property
    def error_count(self) -> int:
        """Number of violations."""
        return len(self.errors)

    @property
    def codes(self) -> list[ErrorCode]:
        """Violation codes in report order."""
        return [error.code for error in self.errors]

    def for_property(self, name: str) -> list[Violation]:
        """Violations recorded against one property."""
        return [error for error in self.errors if error.property == name]

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "entity_kind": self.entity_kind,
            "message": self.message,
            "errors": [error.to_dict() for error in self.errors],
        }


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of one validation call.

    ``value`` is always the caller's own data object. The result unpacks
    as ``error, value = result`` and can also be awaited, returning
    ``value`` or raising ``error``.
    """

    error: ValidationError | None
    value: Any

    @property
    def is_valid(self) -> bool:
        return self.error is None

    def __iter__(self) -> Iterator[Any]:
        yield self.error
        yield self.value

    def __await__(self) -> Generator[Any, None, Any]:
        return self._settle().__await__()

    async def _settle(self) -> Any:
        if self.error is not None:
            raise self.error
        return self.value

    def __str__(self) -> str:
        """Return a formatted string representation of the validation result."""
        if self.error is None:
            return "✅ Valid"

        lines = [f"❌ Invalid ({self.error.error_count} errors)", "\nErrors:"]
        for violation in self.error.errors:
            lines.append(f"  - {violation}")
        return "\n".join(lines)

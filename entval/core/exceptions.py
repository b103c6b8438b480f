"""Exception classes for schema handling.

These cover configuration defects only. Data violations are never raised
from here; they are collected into a ValidationError by the engine.
"""


class SchemaValidationError(Exception):
    """Raised when a schema definition is invalid."""

    def __init__(self, message: str, errors: list[str] | None = None):
        super().__init__(message)
        self.errors = errors or []


class UnknownRuleError(SchemaValidationError):
    """Raised when a schema references a rule the library does not provide."""

    pass


class SchemaLoadError(Exception):
    """Raised when schema loading fails."""

    pass

"""Entity validation components.

This package provides the layered validation engine that checks entity
data against a SchemaDescriptor and reports every violation it finds.
"""

from .engine import EntityValidator, validate
from .errors import ErrorCode, ValidationError, ValidationResult, Violation
from .layers import (
    ModelValidator,
    RequiredFieldValidator,
    RuleValidator,
    TypeValidator,
    UnknownPropertyValidator,
    ValueSetValidator,
    VirtualPropertyFilter,
    is_empty,
)
from .types import TYPE_CHECKERS, check_type

__all__ = [
    "TYPE_CHECKERS",
    "EntityValidator",
    "ErrorCode",
    "ModelValidator",
    "RequiredFieldValidator",
    "RuleValidator",
    "TypeValidator",
    "UnknownPropertyValidator",
    "ValidationError",
    "ValidationResult",
    "ValueSetValidator",
    "Violation",
    "VirtualPropertyFilter",
    "check_type",
    "is_empty",
    "validate",
]

"""Main validation engine that orchestrates all validation layers.

This module implements the EntityValidator class and the module-level
``validate`` function. One call is one synchronous pass over the data:
virtual properties are stripped, every layer runs, and all violations end
up in a single ValidationError.
"""

from collections.abc import Mapping, MutableMapping
from typing import Any

from ..core.logging import get_logger
from ..core.schema import SchemaDescriptor
from .errors import ValidationError, ValidationResult, Violation
from .layers import (
    ModelValidator,
    RequiredFieldValidator,
    RuleValidator,
    TypeValidator,
    UnknownPropertyValidator,
    ValueSetValidator,
    VirtualPropertyFilter,
)

logger = get_logger(__name__)


class EntityValidator:
    """Validator bound to one schema and entity kind.

    Holds no state between calls; the same instance may validate any
    number of data objects.
    """

    def __init__(
        self,
        schema: SchemaDescriptor | Mapping[str, Any],
        entity_kind: str | None = None,
    ):
        """Initialize the validator with a schema.

        Args:
            schema: A SchemaDescriptor, or a raw ``{name: definition}`` mapping
            entity_kind: Entity kind used in messages (defaults to the
                schema's kind)

        Raises:
            SchemaValidationError: If a raw mapping describes an invalid schema
        """
        self.schema = SchemaDescriptor.coerce(schema)
        self.entity_kind = entity_kind or self.schema.kind

        self.virtual_filter = VirtualPropertyFilter()
        self.layers = [
            UnknownPropertyValidator(),
            TypeValidator(),
            ValueSetValidator(),
            RuleValidator(),
            RequiredFieldValidator(),
        ]
        self.model_validator = ModelValidator()

    def validate(self, data: MutableMapping[str, Any]) -> ValidationResult:
        """
        Validate one data object.

        Virtual properties are removed from ``data`` in place before any
        check runs, and ``result.value`` is ``data`` itself.

        Args:
            data: The entity data to validate

        Returns:
            ValidationResult carrying every violation found

        Raises:
            TypeError: If ``data`` is not a mutable mapping
        """
        if not isinstance(data, MutableMapping):
            raise TypeError(
                f"Entity data must be a mutable mapping, got {type(data).__name__}"
            )

        self.virtual_filter.strip(data, self.schema.virtuals)

        errors: list[Violation] = []
        if self.schema.model is not None:
            errors.extend(
                self.model_validator.validate(data, self.schema.model, self.entity_kind)
            )
        else:
            for layer in self.layers:
                errors.extend(layer.validate(data, self.schema, self.entity_kind))

        logger.debug(
            "Entity validated",
            entity_kind=self.entity_kind,
            property_count=len(data),
            error_count=len(errors),
        )

        if not errors:
            return ValidationResult(error=None, value=data)
        return ValidationResult(
            error=ValidationError(errors, entity_kind=self.entity_kind), value=data
        )

    def get_validator_info(self) -> dict[str, Any]:
        """Get information about the validator configuration.

        Returns:
            Dictionary with validator configuration details
        """
        return {
            "entity_kind": self.entity_kind,
            "property_count": len(self.schema.properties),
            "explicit_only": self.schema.explicit_only,
            "virtuals": sorted(self.schema.virtuals),
            "model_backed": self.schema.model is not None,
        }


def validate(
    data: MutableMapping[str, Any],
    schema: SchemaDescriptor | Mapping[str, Any],
    entity_kind: str | None = None,
) -> ValidationResult:
    """Validate ``data`` against ``schema``.

    The result can be unpacked or awaited::

        error, value = validate(data, schema, "User")
        value = await validate(data, schema, "User")  # raises ValidationError

    Args:
        data: The entity data; virtual properties are removed from it in place
        schema: A SchemaDescriptor, or a raw ``{name: definition}`` mapping
        entity_kind: Entity kind used in messages

    Returns:
        ValidationResult whose ``value`` is ``data`` itself
    """
    return EntityValidator(schema, entity_kind).validate(data)

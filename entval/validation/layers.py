"""Individual validation layers for the entity validation pipeline.

Each layer inspects a data mapping against a SchemaDescriptor and returns
the violations it found; none of them raises for bad data and none of
them stops at the first problem. The engine runs them in order and
concatenates their output.
"""

from collections.abc import Iterable, MutableMapping
from typing import Any

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ..core.logging import get_logger
from ..core.rules import CustomRule
from ..core.schema import PropertyDefinition, SchemaDescriptor
from .errors import ErrorCode, Violation
from .types import check_type

logger = get_logger(__name__)


def is_empty(value: Any) -> bool:
    """Check whether a value counts as missing for required-ness purposes.

    None, the empty string and whitespace-only strings are empty; ``0`` and
    ``False`` are not.
    """
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


def _same_value(left: Any, right: Any) -> bool:
    # True == 1 in Python; an allow-list of [1] must not accept True
    if isinstance(left, bool) != isinstance(right, bool):
        return False
    return bool(left == right)


def _present_properties(
    data: MutableMapping[str, Any], schema: SchemaDescriptor
) -> Iterable[tuple[PropertyDefinition, Any]]:
    """Yield (definition, value) for declared, non-empty data properties."""
    for name, value in data.items():
        definition = schema.get(name)
        if definition is None or is_empty(value):
            continue
        yield definition, value


class VirtualPropertyFilter:
    """Removes virtual properties from the data (Layer 0).

    The removal happens in place: the mapping passed in is the mapping
    returned, and the caller sees the stripped object afterwards.
    """

    def strip(
        self, data: MutableMapping[str, Any], virtuals: Iterable[str]
    ) -> MutableMapping[str, Any]:
        for name in virtuals:
            data.pop(name, None)
        return data


class UnknownPropertyValidator:
    """Flags data keys the schema does not declare (Layer 1)."""

    def validate(
        self,
        data: MutableMapping[str, Any],
        schema: SchemaDescriptor,
        entity_kind: str | None = None,
    ) -> list[Violation]:
        if not schema.explicit_only:
            return []

        errors = []
        for name in data:
            if schema.get(name) is None:
                errors.append(
                    Violation(
                        code=ErrorCode.ERR_PROP_NOT_ALLOWED,
                        property=name,
                        entity=entity_kind,
                        message=f"Property not allowed {{ {name} }} for {entity_kind or 'this'} entity",
                        help="Declare the property in the schema or disable explicit_only",
                    )
                )
        return errors


class TypeValidator:
    """Checks present values against their declared type (Layer 2)."""

    def validate(
        self,
        data: MutableMapping[str, Any],
        schema: SchemaDescriptor,
        entity_kind: str | None = None,
    ) -> list[Violation]:
        errors = []
        for definition, value in _present_properties(data, schema):
            if not check_type(definition.type, value):
                errors.append(
                    Violation(
                        code=ErrorCode.ERR_PROP_TYPE,
                        property=definition.name,
                        entity=entity_kind,
                        message=f"Property {{ {definition.name} }} must be a {definition.type}",
                        help=f"Got a value of type {type(value).__name__}",
                    )
                )
        return errors


class ValueSetValidator:
    """Checks present values against the declared allow-list (Layer 3)."""

    def validate(
        self,
        data: MutableMapping[str, Any],
        schema: SchemaDescriptor,
        entity_kind: str | None = None,
    ) -> list[Violation]:
        errors = []
        for definition, value in _present_properties(data, schema):
            if definition.values is None:
                continue
            if not any(_same_value(value, allowed) for allowed in definition.values):
                allowed_text = ", ".join(repr(v) for v in definition.values)
                errors.append(
                    Violation(
                        code=ErrorCode.ERR_PROP_IN_RANGE,
                        property=definition.name,
                        entity=entity_kind,
                        message=f"Value not allowed for {{ {definition.name} }}. It must be one of: {allowed_text}",
                    )
                )
        return errors


class RuleValidator:
    """Runs library and custom rules on present values (Layer 4)."""

    def validate(
        self,
        data: MutableMapping[str, Any],
        schema: SchemaDescriptor,
        entity_kind: str | None = None,
    ) -> list[Violation]:
        errors = []
        for definition, value in _present_properties(data, schema):
            rule = definition.validate
            if rule is None:
                continue

            help_text = None
            try:
                passed = rule.evaluate(value)
            except Exception as e:
                # Custom predicates are caller code; their failure fails the property
                if not isinstance(rule, CustomRule):
                    raise
                logger.warning(
                    "Custom validation rule raised",
                    rule=rule.name,
                    property=definition.name,
                    entity_kind=entity_kind,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                passed = False
                help_text = f"Rule '{rule.name}' raised {type(e).__name__}: {e}"

            if not passed:
                errors.append(
                    Violation(
                        code=ErrorCode.ERR_PROP_VALUE,
                        property=definition.name,
                        entity=entity_kind,
                        message=f"Wrong format for property {{ {definition.name} }}",
                        help=help_text or f"Value rejected by rule '{rule.name}'",
                    )
                )
        return errors


class RequiredFieldValidator:
    """Checks that required properties are present and non-empty (Layer 5)."""

    def validate(
        self,
        data: MutableMapping[str, Any],
        schema: SchemaDescriptor,
        entity_kind: str | None = None,
    ) -> list[Violation]:
        errors = []
        for definition in schema.required_properties:
            if is_empty(data.get(definition.name)):
                errors.append(
                    Violation(
                        code=ErrorCode.ERR_PROP_REQUIRED,
                        property=definition.name,
                        entity=entity_kind,
                        message=f"Property {{ {definition.name} }} is required",
                        help="Provide a non-empty value",
                    )
                )
        return errors


class ModelValidator:
    """Delegates validation to a pydantic model attached to the schema.

    Pydantic error types are folded onto the engine's error codes so that
    callers can branch the same way whichever path validated the entity.
    """

    ERROR_TYPE_CODES: dict[str, ErrorCode] = {
        "missing": ErrorCode.ERR_PROP_REQUIRED,
        "extra_forbidden": ErrorCode.ERR_PROP_NOT_ALLOWED,
        "literal_error": ErrorCode.ERR_PROP_IN_RANGE,
        "enum": ErrorCode.ERR_PROP_IN_RANGE,
    }

    def validate(
        self,
        data: MutableMapping[str, Any],
        model: type[BaseModel],
        entity_kind: str | None = None,
    ) -> list[Violation]:
        try:
            model.model_validate(data)
        except PydanticValidationError as e:
            return [self._to_violation(detail, entity_kind) for detail in e.errors()]
        return []

    def _to_violation(
        self, detail: dict[str, Any], entity_kind: str | None
    ) -> Violation:
        location = detail.get("loc") or ()
        name = str(location[0]) if location else "__root__"
        error_type = detail.get("type", "")

        return Violation(
            code=self._code_for(error_type),
            property=name,
            entity=entity_kind,
            message=f"Property {{ {name} }}: {detail.get('msg', 'invalid value')}",
            help=f"pydantic error '{error_type}' at {'.'.join(str(p) for p in location)}",
        )

    def _code_for(self, error_type: str) -> ErrorCode:
        if error_type in self.ERROR_TYPE_CODES:
            return self.ERROR_TYPE_CODES[error_type]
        if error_type.endswith(("_type", "_parsing")):
            return ErrorCode.ERR_PROP_TYPE
        return ErrorCode.ERR_PROP_VALUE

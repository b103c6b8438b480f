"""Core schema data structures consumed by the validation engine.

This module defines the resolved form of an entity schema: one
PropertyDefinition per declared property plus the schema-wide options.
Raw schema mappings (as written by callers or loaded from YAML) are
normalised here so that misconfigured schemas fail at construction time
instead of silently passing validation.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

from .exceptions import SchemaValidationError, UnknownRuleError
from .rules import CustomRule, NamedRule, Rule

PROPERTY_TYPES = frozenset(
    {
        "string",
        "int",
        "double",
        "boolean",
        "buffer",
        "array",
        "object",
        "datetime",
        "geoPoint",
    }
)

# Python types accepted in place of the type names above
TYPE_ALIASES: dict[type, str] = {
    str: "string",
    int: "int",
    float: "double",
    bool: "boolean",
    bytes: "buffer",
    list: "array",
    dict: "object",
    datetime: "datetime",
    date: "datetime",
}

DEFINITION_KEYS = frozenset({"type", "required", "values", "validate", "default"})


@dataclass(frozen=True)
class PropertyDefinition:
    """Definition of a single schema property.

    ``type``, ``values`` and ``validate`` are checked independently of each
    other; ``default`` is only carried along for writers.
    """

    name: str
    type: str | None = None
    required: bool = False
    values: tuple[Any, ...] | None = None
    validate: Rule | None = None
    default: Any = None
    extras: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, name: str, raw: Mapping[str, Any]) -> "PropertyDefinition":
        """Build a definition from its raw mapping form.

        Args:
            name: Property name
            raw: Mapping with optional ``type``, ``required``, ``values``,
                ``validate`` and ``default`` keys

        Returns:
            The normalised PropertyDefinition

        Raises:
            SchemaValidationError: If the type, value set or rule is invalid
        """
        if not isinstance(raw, Mapping):
            raise SchemaValidationError(
                f"Definition of property '{name}' must be a mapping"
            )

        values = raw.get("values")
        if values is not None:
            if isinstance(values, str | bytes) or not isinstance(values, Iterable):
                raise SchemaValidationError(
                    f"'values' of property '{name}' must be a list of allowed values"
                )
            values = tuple(values)

        return cls(
            name=name,
            type=_resolve_type(name, raw.get("type")),
            required=bool(raw.get("required", False)),
            values=values,
            validate=_resolve_rule(name, raw.get("validate")),
            default=raw.get("default"),
            extras={k: v for k, v in raw.items() if k not in DEFINITION_KEYS},
        )


@dataclass(frozen=True)
class SchemaDescriptor:
    """Resolved entity schema handed to the validation engine.

    The engine never mutates or caches a descriptor; ``virtuals`` lists the
    computed properties that are removed from data before validation.
    """

    properties: dict[str, PropertyDefinition]
    explicit_only: bool = True
    virtuals: frozenset[str] = frozenset()
    kind: str | None = None
    model: Any | None = None  # optional pydantic model class

    @classmethod
    def from_dict(
        cls,
        properties: Mapping[str, Mapping[str, Any]],
        *,
        explicit_only: bool = True,
        virtuals: Iterable[str] = (),
        kind: str | None = None,
        model: Any | None = None,
    ) -> "SchemaDescriptor":
        """Build a descriptor from a raw ``{name: definition}`` mapping.

        Raises:
            SchemaValidationError: If any property definition is invalid
        """
        errors: list[str] = []
        failures: list[SchemaValidationError] = []
        resolved: dict[str, PropertyDefinition] = {}

        for name, raw in properties.items():
            try:
                resolved[name] = PropertyDefinition.from_dict(name, raw)
            except SchemaValidationError as e:
                errors.append(str(e))
                failures.append(e)

        if errors:
            # A lone unknown rule keeps its own class so callers can catch it
            if len(failures) == 1 and isinstance(failures[0], UnknownRuleError):
                raise failures[0]
            raise SchemaValidationError(
                f"Invalid schema{f' for {kind}' if kind else ''}: {'; '.join(errors)}",
                errors,
            )

        return cls(
            properties=resolved,
            explicit_only=explicit_only,
            virtuals=frozenset(virtuals),
            kind=kind,
            model=model,
        )

    @classmethod
    def coerce(cls, schema: "SchemaDescriptor | Mapping[str, Any]") -> "SchemaDescriptor":
        """Return ``schema`` as a descriptor, normalising raw mappings."""
        if isinstance(schema, SchemaDescriptor):
            return schema
        if isinstance(schema, Mapping):
            return cls.from_dict(schema)
        raise TypeError(
            f"Expected a SchemaDescriptor or a mapping, got {type(schema).__name__}"
        )

    def get(self, name: str) -> PropertyDefinition | None:
        """Get the definition of a property, if declared."""
        return self.properties.get(name)

    @property
    def required_properties(self) -> list[PropertyDefinition]:
        """Definitions flagged as required, in declaration order."""
        return [p for p in self.properties.values() if p.required]


def _resolve_type(name: str, raw_type: Any) -> str | None:
    if raw_type is None:
        return None
    if isinstance(raw_type, type) and raw_type in TYPE_ALIASES:
        return TYPE_ALIASES[raw_type]
    if isinstance(raw_type, str) and raw_type in PROPERTY_TYPES:
        return raw_type
    raise SchemaValidationError(
        f"Unknown type {raw_type!r} for property '{name}'",
        [f"Supported types: {', '.join(sorted(PROPERTY_TYPES))}"],
    )


def _resolve_rule(name: str, raw_rule: Any) -> Rule | None:
    if raw_rule is None:
        return None

    args: Iterable[Any] = ()
    if isinstance(raw_rule, Mapping):
        if "rule" not in raw_rule:
            raise SchemaValidationError(
                f"'validate' of property '{name}' is missing its 'rule'"
            )
        args = raw_rule.get("args") or ()
        if not isinstance(args, list | tuple):
            args = (args,)
        raw_rule = raw_rule["rule"]

    if isinstance(raw_rule, NamedRule | CustomRule):
        return raw_rule
    if isinstance(raw_rule, str):
        try:
            return NamedRule(raw_rule, tuple(args))
        except UnknownRuleError as e:
            raise UnknownRuleError(f"{e} (property '{name}')") from e
    if callable(raw_rule):
        return CustomRule(raw_rule, tuple(args))

    raise SchemaValidationError(
        f"'validate' of property '{name}' must be a rule name or a callable"
    )

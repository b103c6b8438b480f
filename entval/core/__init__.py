"""Core functionality for the entity validator."""

from .config import ValidatorSettings, settings
from .data_loader import DataLoadError, load_data_file, parse_data
from .exceptions import SchemaLoadError, SchemaValidationError, UnknownRuleError
from .logging import (
    ValidationOperationLogger,
    bind_context,
    clear_context,
    configure_library_logging,
    configure_logging,
    get_logger,
)
from .rules import CustomRule, NamedRule, Rule, RuleLibrary, validator
from .schema import PropertyDefinition, SchemaDescriptor
from .schema_loader import FileSchemaLoader, SchemaLoader
from .values import DoubleValue, GeoPointValue, IntegerValue, TaggedValue

# Export all components
__all__ = [
    # Configuration
    "ValidatorSettings",
    "settings",
    # Data files
    "DataLoadError",
    "load_data_file",
    "parse_data",
    # Schema and rule components
    "CustomRule",
    "FileSchemaLoader",
    "NamedRule",
    "PropertyDefinition",
    "Rule",
    "RuleLibrary",
    "SchemaDescriptor",
    "SchemaLoadError",
    "SchemaLoader",
    "SchemaValidationError",
    "UnknownRuleError",
    "validator",
    # Tagged values
    "DoubleValue",
    "GeoPointValue",
    "IntegerValue",
    "TaggedValue",
    # Logging
    "ValidationOperationLogger",
    "bind_context",
    "clear_context",
    "configure_library_logging",
    "configure_logging",
    "get_logger",
]

"""Schema loader implementation for entity schemas stored as YAML files.

This module provides the schema loading interface and a file-based
implementation that reads YAML schema documents and turns them into
SchemaDescriptor objects ready for the validation engine.

A schema document looks like::

    kind: User
    explicit_only: true
    virtuals: [fullname]
    properties:
      name: {type: string, required: true}
      ip: {validate: {rule: isIP, args: [4]}}
"""

from abc import ABC, abstractmethod
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, ClassVar

import yaml

from .config import settings
from .exceptions import SchemaLoadError, SchemaValidationError
from .logging import get_logger
from .schema import SchemaDescriptor

logger = get_logger(__name__)


class SchemaLoader(ABC):
    """Interface for loading and managing schemas."""

    @abstractmethod
    async def load_schemas(self, schema_dir: str) -> dict[str, SchemaDescriptor]:
        """Load all schemas from directory."""
        pass

    @abstractmethod
    async def reload_schemas(self) -> dict[str, SchemaDescriptor]:
        """Reload schemas from disk."""
        pass

    @abstractmethod
    async def get_entity_schema(self, kind: str) -> SchemaDescriptor | None:
        """Get schema for specific entity kind."""
        pass


class FileSchemaLoader(SchemaLoader):
    """File-based schema loader implementation.

    Loads every ``*.yaml``/``*.yml`` file of a directory as one entity
    schema keyed by its ``kind``.
    """

    ALLOWED_KEYS: ClassVar[set[str]] = {
        "kind",
        "description",
        "explicit_only",
        "virtuals",
        "properties",
    }

    def __init__(self, schema_dir: str | None = None, explicit_only: bool | None = None):
        """Initialize with schema directory path.

        Args:
            schema_dir: Path to directory containing schema YAML files
            explicit_only: Default for schema files that do not set it;
                falls back to the configured default
        """
        self.schema_dir = Path(schema_dir or settings.schema_dir)
        self.explicit_only = (
            settings.explicit_only if explicit_only is None else explicit_only
        )
        self.schemas: dict[str, SchemaDescriptor] = {}
        self.last_loaded: datetime | None = None

    async def load_schemas(
        self, schema_dir: str | None = None
    ) -> dict[str, SchemaDescriptor]:
        """Load all schema files from directory.

        Args:
            schema_dir: Optional override for schema directory

        Returns:
            Dictionary mapping entity kinds to their schemas

        Raises:
            SchemaLoadError: If schema loading fails
            SchemaValidationError: If a schema is invalid
        """
        schema_path = Path(schema_dir) if schema_dir else self.schema_dir

        if not schema_path.is_dir():
            raise SchemaLoadError(f"Schema directory does not exist: {schema_path}")

        schemas: dict[str, SchemaDescriptor] = {}
        files = sorted([*schema_path.glob("*.yaml"), *schema_path.glob("*.yml")])

        for schema_file in files:
            descriptor = self.load_schema_file(schema_file)
            kind = descriptor.kind or schema_file.stem
            if kind in schemas:
                raise SchemaValidationError(
                    f"Duplicate schema kind '{kind}' in {schema_file.name}"
                )
            schemas[kind] = descriptor

        self.schemas = schemas
        self.last_loaded = datetime.now(UTC)
        logger.info(
            "Schemas loaded",
            schema_dir=str(schema_path),
            schema_count=len(schemas),
        )

        return self.schemas

    async def reload_schemas(self) -> dict[str, SchemaDescriptor]:
        """Reload schemas from disk.

        Returns:
            Updated schemas dictionary
        """
        return await self.load_schemas()

    async def get_entity_schema(self, kind: str) -> SchemaDescriptor | None:
        """Get schema for specific entity kind.

        Args:
            kind: The entity kind to get schema for

        Returns:
            SchemaDescriptor if found, None otherwise
        """
        return self.schemas.get(kind)

    def load_schema_file(self, path: str | Path) -> SchemaDescriptor:
        """Load a single schema document.

        Raises:
            SchemaLoadError: If the file cannot be read or parsed
            SchemaValidationError: If the document is not a valid schema
        """
        file_path = Path(path)
        try:
            with file_path.open(encoding="utf-8") as f:
                schema_data = yaml.safe_load(f)
        except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
            raise SchemaLoadError(
                f"Failed to load schema '{file_path.name}': {e}"
            ) from e

        return self.parse_schema(schema_data, default_kind=file_path.stem)

    def parse_schema(
        self, schema_data: Any, default_kind: str | None = None
    ) -> SchemaDescriptor:
        """Turn a parsed schema document into a SchemaDescriptor.

        Args:
            schema_data: The parsed YAML document
            default_kind: Kind to use when the document does not name one

        Raises:
            SchemaValidationError: If the document structure is invalid
        """
        errors = self._check_structure(schema_data)
        if errors:
            raise SchemaValidationError(
                f"Invalid schema document{f' {default_kind}' if default_kind else ''}: {'; '.join(errors)}",
                errors,
            )

        kind = schema_data.get("kind", default_kind)
        properties = schema_data.get("properties") or {}
        virtuals = schema_data.get("virtuals") or []

        return SchemaDescriptor.from_dict(
            properties,
            explicit_only=schema_data.get("explicit_only", self.explicit_only),
            virtuals=virtuals,
            kind=kind,
        )

    def _check_structure(self, schema_data: Any) -> list[str]:
        """Validate document structure and return error messages."""
        if not isinstance(schema_data, dict):
            return ["Schema document must be a mapping"]

        errors = []

        unknown_keys = set(schema_data) - self.ALLOWED_KEYS
        if unknown_keys:
            errors.append(f"Unknown top-level keys: {', '.join(sorted(unknown_keys))}")

        if "kind" in schema_data and not isinstance(schema_data["kind"], str):
            errors.append("'kind' must be a string")

        if "explicit_only" in schema_data and not isinstance(
            schema_data["explicit_only"], bool
        ):
            errors.append("'explicit_only' must be a boolean")

        properties = schema_data.get("properties")
        if properties is not None and not isinstance(properties, dict):
            errors.append("'properties' must be a mapping")
            properties = None

        virtuals = schema_data.get("virtuals")
        if virtuals is not None:
            if not isinstance(virtuals, list) or not all(
                isinstance(v, str) for v in virtuals
            ):
                errors.append("'virtuals' must be a list of property names")
            elif properties:
                # Virtual names must not shadow declared properties
                for conflict_name in sorted(set(virtuals) & set(properties)):
                    errors.append(
                        f"'{conflict_name}' is declared both as a property and a virtual"
                    )

        return errors

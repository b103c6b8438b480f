"""Loading of entity data files for validation.

Data files are YAML or JSON. A top-level mapping is one entity and a
top-level list is several. In YAML, the tags ``!int``, ``!double`` and
``!geopoint`` build the tagged wrapper values so datastore-typed data can
be written by hand::

    age: !int "7"
    price: !double "1.2"
    location: !geopoint {latitude: 40.68, longitude: -74.04}
"""

import json
from pathlib import Path
from typing import Any

import yaml
from yaml.constructor import ConstructorError

from .values import DoubleValue, GeoPointValue, IntegerValue


class DataLoadError(Exception):
    """Raised when a data file cannot be read or has the wrong shape."""

    pass


class EntityDataLoader(yaml.SafeLoader):
    """Safe YAML loader that also understands the tagged value tags."""

    pass


def _construct_int(loader: yaml.SafeLoader, node: yaml.Node) -> IntegerValue:
    return IntegerValue(loader.construct_scalar(node))


def _construct_double(loader: yaml.SafeLoader, node: yaml.Node) -> DoubleValue:
    return DoubleValue(loader.construct_scalar(node))


def _construct_geo_point(loader: yaml.SafeLoader, node: yaml.Node) -> GeoPointValue:
    if not isinstance(node, yaml.MappingNode):
        raise ConstructorError(
            None, None, "!geopoint expects a mapping", node.start_mark
        )
    mapping = loader.construct_mapping(node, deep=True)
    try:
        return GeoPointValue.from_mapping(mapping)
    except KeyError as e:
        raise ConstructorError(
            None, None, f"!geopoint is missing {e}", node.start_mark
        ) from e


EntityDataLoader.add_constructor("!int", _construct_int)
EntityDataLoader.add_constructor("!double", _construct_double)
EntityDataLoader.add_constructor("!geopoint", _construct_geo_point)


def parse_data(content: str, fmt: str = "yaml") -> list[dict[str, Any]]:
    """Parse data file content into a list of entity mappings.

    Args:
        content: The raw file content
        fmt: ``yaml`` or ``json``

    Returns:
        One mapping per entity

    Raises:
        DataLoadError: If the content cannot be parsed or is not entity data
    """
    try:
        if fmt == "json":
            data = json.loads(content)
        else:
            data = yaml.load(content, Loader=EntityDataLoader)  # noqa: S506
    except (ValueError, yaml.YAMLError) as e:
        raise DataLoadError(f"Invalid {fmt.upper()} content: {e}") from e

    if isinstance(data, dict):
        return [data]
    if isinstance(data, list) and all(isinstance(item, dict) for item in data):
        return data
    raise DataLoadError("Data must be a mapping or a list of mappings")


def load_data_file(path: str | Path) -> list[dict[str, Any]]:
    """Load a YAML or JSON data file (chosen by extension).

    Raises:
        DataLoadError: If the file cannot be read or parsed
    """
    file_path = Path(path)
    try:
        content = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise DataLoadError(f"Cannot read data file '{file_path}': {e}") from e

    fmt = "json" if file_path.suffix.lower() == ".json" else "yaml"
    return parse_data(content, fmt)

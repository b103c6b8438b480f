"""Integration tests for the validation engine with real schema files.

This module tests the complete validation pipeline using the schema files
shipped in the repository and realistic YAML data, going from files on
disk through the loaders to the engine.
"""

from pathlib import Path

import pytest
import pytest_asyncio

from entval.core import FileSchemaLoader, GeoPointValue, parse_data
from entval.validation import EntityValidator, ErrorCode, ValidationError


class TestValidationIntegration:
    """Integration tests using real schema files."""

    @pytest_asyncio.fixture
    async def loaded_schemas(self):
        """Load the schemas from the repository schema directory."""
        schema_path = Path(__file__).parent.parent.parent / "schemas"
        loader = FileSchemaLoader(str(schema_path))

        schemas = await loader.load_schemas()
        return schemas

    @pytest.mark.asyncio
    async def test_schemas_load(self, loaded_schemas):
        """Test that every shipped schema loads."""
        assert {"User", "Media"} <= set(loaded_schemas)
        assert loaded_schemas["User"].virtuals == frozenset({"fullname"})

    @pytest.mark.asyncio
    async def test_valid_users(self, loaded_schemas):
        """Test validation of valid user data."""
        validator = EntityValidator(loaded_schemas["User"])

        users = parse_data(
            """
- name: John
  lastname: Snow
  fullname: John Snow
  email: john@snow.com
  age: !int "30"
  birthday: "1990-05-17"
  website: https://thewall.org
  ip: 10.0.0.7
  role: admin
  tags: [nights-watch]
  prefs: {theme: dark}
- name: Arya
  email: arya@stark.com
"""
        )

        results = [validator.validate(user) for user in users]

        assert all(result.error is None for result in results)
        assert "fullname" not in users[0]
        assert results[0].value is users[0]

    @pytest.mark.asyncio
    async def test_invalid_user_reports_everything(self, loaded_schemas):
        """Test that one pass reports each broken property."""
        validator = EntityValidator(loaded_schemas["User"])
        (user,) = parse_data(
            """
name: "   "
email: arya@stark
age: 12.5
birthday: 17/05/1990
ip: "::1"
role: owner
house: Stark
"""
        )

        error, value = validator.validate(user)

        assert value is user
        assert {(v.property, v.code) for v in error.errors} == {
            ("house", ErrorCode.ERR_PROP_NOT_ALLOWED),
            ("age", ErrorCode.ERR_PROP_TYPE),
            ("birthday", ErrorCode.ERR_PROP_TYPE),
            ("role", ErrorCode.ERR_PROP_IN_RANGE),
            ("email", ErrorCode.ERR_PROP_VALUE),
            ("ip", ErrorCode.ERR_PROP_VALUE),
            ("name", ErrorCode.ERR_PROP_REQUIRED),
        }
        assert error.entity_kind == "User"

    @pytest.mark.asyncio
    async def test_media_tagged_values(self, loaded_schemas):
        """Test tagged YAML values against the media schema."""
        validator = EntityValidator(loaded_schemas["Media"])
        (media,) = parse_data(
            """
title: Sunset
type: image
price: !double "9.99"
location: !geopoint {latitude: 40.6894, longitude: -74.0447}
color: "#ff8800"
slug: sunset-over-the-bay
published: true
"""
        )

        value = await validator.validate(media)

        assert value is media
        assert media["location"] == GeoPointValue(40.6894, -74.0447)

    @pytest.mark.asyncio
    async def test_media_invalid_values(self, loaded_schemas):
        """Test awaiting an invalid media entity."""
        validator = EntityValidator(loaded_schemas["Media"])
        media = {
            "title": "Sunset",
            "type": "audio",
            "price": "9.99",
            "location": {"latitude": 95, "longitude": 0},
            "slug": "Not A Slug",
            "icon": b"\x89PNG",
        }

        with pytest.raises(ValidationError) as exc_info:
            await validator.validate(media)

        assert sorted(exc_info.value.codes) == sorted(
            [
                ErrorCode.ERR_PROP_TYPE,
                ErrorCode.ERR_PROP_TYPE,
                ErrorCode.ERR_PROP_IN_RANGE,
                ErrorCode.ERR_PROP_VALUE,
            ]
        )

    @pytest.mark.asyncio
    async def test_validator_is_reusable(self, loaded_schemas):
        """Test that one validator keeps no state between calls."""
        validator = EntityValidator(loaded_schemas["User"])

        first = validator.validate({"name": "John"})
        second = validator.validate({"name": "John", "email": "john@snow.com"})
        third = validator.validate({"name": "John"})

        assert first.error.codes == [ErrorCode.ERR_PROP_REQUIRED]
        assert second.error is None
        assert third.error.codes == first.error.codes
        assert third.error is not first.error

"""Unit tests for pydantic model-backed schemas."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, field_validator
import pytest

from entval.core import SchemaDescriptor
from entval.validation import ErrorCode, ModelValidator, ValidationError, validate


class User(BaseModel):
    """Test model with strict extra handling."""

    model_config = ConfigDict(extra="forbid")

    name: str
    age: int | None = None
    role: Literal["admin", "member"] = "member"
    email: str | None = None

    @field_validator("email")
    @classmethod
    def check_email(cls, value: str | None) -> str | None:
        if value is not None and "@" not in value:
            raise ValueError("not an email address")
        return value


@pytest.fixture
def schema():
    return SchemaDescriptor.from_dict(
        {}, virtuals=["fullname"], kind="User", model=User
    )


class TestModelBackedValidation:
    """Test the engine delegating to a pydantic model."""

    def test_valid_data(self, schema):
        entity_data = {"name": "John", "age": 7, "fullname": "John Snow"}

        error, value = validate(entity_data, schema)

        assert error is None
        assert value is entity_data
        assert "fullname" not in entity_data

    def test_value_is_not_replaced_by_the_model(self, schema):
        entity_data = {"name": "John", "age": "7"}

        _, value = validate(entity_data, schema)

        assert value is entity_data
        assert value["age"] == "7"

    def test_missing_field(self, schema):
        error, _ = validate({}, schema)

        assert error.codes == [ErrorCode.ERR_PROP_REQUIRED]
        assert error.errors[0].property == "name"
        assert error.entity_kind == "User"

    def test_extra_field(self, schema):
        error, _ = validate({"name": "John", "nickname": "Jon"}, schema)

        assert error.codes == [ErrorCode.ERR_PROP_NOT_ALLOWED]
        assert error.errors[0].property == "nickname"

    def test_type_errors(self, schema):
        error, _ = validate({"name": 12, "age": "seven"}, schema)

        assert {v.property: v.code for v in error.errors} == {
            "name": ErrorCode.ERR_PROP_TYPE,
            "age": ErrorCode.ERR_PROP_TYPE,
        }

    def test_literal_error(self, schema):
        error, _ = validate({"name": "John", "role": "owner"}, schema)

        assert error.codes == [ErrorCode.ERR_PROP_IN_RANGE]

    def test_custom_validator_error(self, schema):
        error, _ = validate({"name": "John", "email": "nope"}, schema)

        assert error.codes == [ErrorCode.ERR_PROP_VALUE]
        assert "value_error" in error.errors[0].help

    @pytest.mark.asyncio
    async def test_await_raises(self, schema):
        with pytest.raises(ValidationError):
            await validate({}, schema)


class TestModelValidator:
    """Test the pydantic error mapping."""

    def test_code_mapping(self):
        validator = ModelValidator()

        assert validator._code_for("missing") == ErrorCode.ERR_PROP_REQUIRED
        assert validator._code_for("extra_forbidden") == ErrorCode.ERR_PROP_NOT_ALLOWED
        assert validator._code_for("enum") == ErrorCode.ERR_PROP_IN_RANGE
        assert validator._code_for("bool_parsing") == ErrorCode.ERR_PROP_TYPE
        assert validator._code_for("dict_type") == ErrorCode.ERR_PROP_TYPE
        assert validator._code_for("greater_than") == ErrorCode.ERR_PROP_VALUE

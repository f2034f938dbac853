"""Named validators, one per input shape.

Each returns a ValidationResult holding either the parsed value or a list of
field-level errors. Nothing here touches the store or the cache.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from src.um_common.enums import Gender, Role

T = TypeVar("T")


@dataclass
class FieldError:
    field: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"field": self.field, "message": self.message}


@dataclass
class ValidationResult(Generic[T]):
    value: T | None = None
    errors: list[FieldError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


_DECIMAL_ID = re.compile(r"[0-9]+")


def _digits_to_int(raw: Any) -> Any:
    """Turn an ASCII decimal string into an int; anything else passes through."""
    if isinstance(raw, str) and _DECIMAL_ID.fullmatch(raw):
        return int(raw)
    return raw


# ---------------------------------------------------------------------------
# Input shapes
# ---------------------------------------------------------------------------


class CreateUserInput(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    name: str = Field(..., min_length=2, max_length=100)
    email: EmailStr
    gender: Gender | None = None
    role: Role | None = None


class UpdateUserInput(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    name: str | None = Field(None, min_length=2, max_length=100)
    email: EmailStr | None = None
    gender: Gender | None = None
    role: Role | None = None

    @model_validator(mode="after")
    def check_fields(self) -> "UpdateUserInput":
        if not self.model_fields_set:
            raise ValueError("At least one field must be provided for update")
        # gender may be cleared with null; the other columns are NOT NULL
        for name in ("name", "email", "role"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} must not be null")
        return self

    def changes(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_unset=True)


class ListUsersQuery(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    page: int = Field(1, ge=1)
    limit: int = Field(10, ge=1, le=100)
    gender: Gender | None = None
    role: Role | None = None
    search: str | None = Field(None, min_length=1, max_length=100)


class UserIdInput(BaseModel):
    user_id: int = Field(..., ge=1, strict=True)

    @field_validator("user_id", mode="before")
    @classmethod
    def parse_decimal_id(cls, v: Any) -> Any:
        return _digits_to_int(v)


class TokenRequestInput(BaseModel):
    model_config = ConfigDict(extra="forbid")

    # "userId" is accepted for clients of the previous API
    user_id: int = Field(..., ge=1, strict=True, validation_alias=AliasChoices("user_id", "userId"))

    @field_validator("user_id", mode="before")
    @classmethod
    def parse_decimal_id(cls, v: Any) -> Any:
        return _digits_to_int(v)


# ---------------------------------------------------------------------------
# Validators
# ---------------------------------------------------------------------------


def _field_errors(exc: ValidationError) -> list[FieldError]:
    errors = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err["loc"]) or "body"
        message = err["msg"].removeprefix("Value error, ")
        errors.append(FieldError(field=loc, message=message))
    return errors


def _validate(model: type[BaseModel], data: Any) -> ValidationResult[Any]:
    try:
        return ValidationResult(value=model.model_validate(data))
    except ValidationError as exc:
        return ValidationResult(errors=_field_errors(exc))


def validate_create_user(data: Any) -> ValidationResult[CreateUserInput]:
    return _validate(CreateUserInput, data)


def validate_update_user(data: Any) -> ValidationResult[UpdateUserInput]:
    return _validate(UpdateUserInput, data)


def validate_list_query(data: Any) -> ValidationResult[ListUsersQuery]:
    return _validate(ListUsersQuery, data)


def validate_token_request(data: Any) -> ValidationResult[TokenRequestInput]:
    return _validate(TokenRequestInput, data)


def validate_user_id(raw: Any) -> ValidationResult[int]:
    """Path ids arrive as strings; only positive ASCII decimal integers pass."""
    result = _validate(UserIdInput, {"user_id": raw})
    if not result.ok:
        return ValidationResult(errors=[FieldError("id", "Invalid user ID")])
    return ValidationResult(value=result.value.user_id)

"""User Schemas — request bodies for /api/v1/users.

Invariants:
    - first_name: 1-25 chars, stripped, non-empty
    - email: valid address, at most 100 chars
    - UserUpdate: every field optional (emptiness checked by the service)
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class UserCreate(_CamelModel):
    """User creation — validates name, email and phone lengths."""
    first_name: str = Field(min_length=1, max_length=25)
    last_name: str | None = Field(None, max_length=25)
    email: EmailStr
    phone: str | None = Field(None, max_length=25)
    is_active: bool = True

    @field_validator("first_name")
    @classmethod
    def strip_first_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("first name cannot be empty or whitespace")
        return v

    @field_validator("email")
    @classmethod
    def check_email_length(cls, v: str) -> str:
        if len(v) > 100:
            raise ValueError("email must be at most 100 characters long")
        return v


class UserUpdate(_CamelModel):
    first_name: str | None = Field(None, min_length=1, max_length=25)
    last_name: str | None = Field(None, max_length=25)
    email: EmailStr | None = None
    phone: str | None = Field(None, max_length=25)
    is_active: bool | None = None


class UserOut(_CamelModel):
    """Public user document as it appears in the envelope data."""
    id: str = Field(alias="_id")
    first_name: str
    last_name: str | None = None
    email: str
    phone: str | None = None
    is_active: bool
    created_at: str
    updated_at: str

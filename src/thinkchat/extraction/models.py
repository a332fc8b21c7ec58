"""Schema for records produced by structured extraction."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"
PHONE_PATTERN = r"^1[3-9][0-9]{9}$"


class Address(BaseModel):
    """Postal address of the described person."""

    model_config = ConfigDict(frozen=True)

    city: str = Field(strict=True, min_length=1, description="City")
    district: str = Field(strict=True, min_length=1, description="District or county")
    street: str = Field(strict=True, min_length=1, description="Street address")


class ExtractedRecord(BaseModel):
    """Personal details extracted from free-form text.

    Only ever built from a successful validation; there is no partial record.
    Unknown keys in the model output are ignored.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(strict=True, min_length=1, description="Full name")
    age: int = Field(ge=0, le=150, description="Age in years")
    email: str = Field(strict=True, pattern=EMAIL_PATTERN, description="Email address")
    phone: str = Field(strict=True, pattern=PHONE_PATTERN, description="11-digit mobile number")
    address: Address = Field(description="Postal address")
    occupation: str | None = Field(default=None, strict=True, description="Occupation (omitted if unknown)")
    hobbies: list[str] = Field(description="Hobbies and interests")

    @field_validator("age", mode="before")
    @classmethod
    def validate_age_is_number(cls, v: Any) -> Any:
        """Accept JSON numbers only; integral floats such as 30.0 pass."""
        if isinstance(v, (str, bool)):
            raise ValueError("age must be a number")
        return v

    @field_validator("occupation", mode="before")
    @classmethod
    def validate_occupation_not_null(cls, v: Any) -> Any:
        """An unknown occupation is left out, never sent as null."""
        if v is None:
            raise ValueError("occupation must be omitted rather than null")
        return v

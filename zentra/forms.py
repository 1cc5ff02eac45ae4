from __future__ import annotations

from datetime import date
from typing import Any, Dict, Optional

from email_validator import EmailNotValidError, validate_email as _validate_email
from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from zentra.db.models import GalleryCategory, ServiceCategory


BOOKING_SERVICES = [
    "Lawn Mowing",
    "Landscape Design",
    "Tree Trimming",
    "Garden Installation",
    "Seasonal Cleanup",
    "Irrigation Services",
    "Other",
]

TIME_SLOTS = [
    "8:00 AM - 10:00 AM",
    "10:00 AM - 12:00 PM",
    "12:00 PM - 2:00 PM",
    "2:00 PM - 4:00 PM",
    "4:00 PM - 6:00 PM",
]


# ----------------- VALIDATORS ------------------------

def validate_email(email: str) -> bool:
    try:
        _validate_email(email, check_deliverability=False)
        return True
    except EmailNotValidError:
        return False


def first_error(exc: ValidationError) -> str:
    """Message of the first failing field, for a toast."""
    errors = exc.errors()
    if not errors:
        return "Invalid input"
    err = errors[0]
    msg = err.get("msg", "Invalid input")
    # custom ValueError messages come through as "Value error, <message>"
    if msg.startswith("Value error, "):
        msg = msg[len("Value error, "):]
    loc = [str(part) for part in err.get("loc", ())]
    if not loc:
        return msg
    return f"{loc[-1].replace('_', ' ').capitalize()}: {msg}"


class _Form(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, populate_by_name=True, use_enum_values=True)

    def to_record(self) -> Dict[str, Any]:
        return self.model_dump()


# ----------------- PUBLIC FORMS ------------------------

class BookingForm(_Form):
    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=1)
    address: str = Field(..., min_length=1)
    service: str = Field(..., min_length=1)
    preferred_date: str = Field(
        ..., min_length=1, validation_alias=AliasChoices("preferred_date", "preferredDate")
    )
    preferred_time: str = Field(
        ..., min_length=1, validation_alias=AliasChoices("preferred_time", "preferredTime")
    )
    message: str = ""

    @field_validator("email")
    @classmethod
    def _email(cls, v: str) -> str:
        if not validate_email(v):
            raise ValueError("Invalid email")
        return v

    @field_validator("preferred_date", mode="before")
    @classmethod
    def _date(cls, v: Any) -> Any:
        if isinstance(v, date):
            return v.isoformat()
        return v

    @field_validator("message", mode="before")
    @classmethod
    def _message(cls, v: Any) -> Any:
        return v or ""


class ReviewForm(_Form):
    client_name: str = Field(..., min_length=1)
    review_text: str = Field(..., min_length=10)
    rating: int = Field(..., ge=1, le=5)


# ----------------- ADMIN FORMS ------------------------

class ServiceForm(_Form):
    title: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    category: ServiceCategory
    image: Optional[str] = None


class ProjectForm(_Form):
    title: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    client_name: Optional[str] = None
    before_image: Optional[str] = None
    after_image: Optional[str] = None


class GalleryForm(_Form):
    image: str = Field(..., min_length=1)
    caption: str = Field(..., min_length=1)
    category: GalleryCategory = Field(GalleryCategory.GENERAL, validate_default=True)

    @field_validator("category", mode="before")
    @classmethod
    def _category(cls, v: Any) -> Any:
        # older gallery records carry no category
        return v or GalleryCategory.GENERAL


class SliderForm(_Form):
    image: str = Field(..., min_length=1)
    caption: str = Field(..., min_length=1)


class LoginForm(_Form):
    # credentials are compared exactly, never trimmed
    model_config = ConfigDict(str_strip_whitespace=False)

    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class CredentialsForm(_Form):
    model_config = ConfigDict(str_strip_whitespace=False)

    current_password: str = Field(..., min_length=1)
    new_username: str = Field(..., min_length=3)
    new_password: str = Field(..., min_length=6)
    confirm_password: str = Field(..., min_length=1)

    @model_validator(mode="after")
    def _passwords_match(self) -> "CredentialsForm":
        if self.new_password != self.confirm_password:
            raise ValueError("Passwords must match")
        return self

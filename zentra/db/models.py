# db/models.py
"""
Record schemas for the seven collections.

Every record is a flat JSON object. ``id`` and ``created_at`` are stamped by
the data-access layer on insert; callers own every other field. Records are
kept as plain dicts inside the stores; these models describe their shape and
are used to parse them where typed access is wanted.

Table: services
- id, title, description, image (url or data uri), category, created_at

Table: projects
- id, title, description, before_image, after_image, client_name, created_at

Table: gallery
- id, image, caption, category, created_at

Table: testimonials
- id, client_name, review_text, rating (1-5), status, created_at

Table: slider_images
- id, image, caption, created_at

Table: admin_credentials
- id, username, password (plaintext), updated_at

Table: bookings
- id, name, email, phone, address, service, preferred_date, preferred_time,
  message, status, created_at
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional, Type, Union

from pydantic import BaseModel, ConfigDict, Field

from .errors import UnknownTableError


STORAGE_PREFIX = "zentra_"


class ServiceCategory(str, Enum):
    MAINTENANCE = "maintenance"
    DESIGN = "design"
    INSTALLATION = "installation"
    GENERAL = "general"


class GalleryCategory(str, Enum):
    LAWN_CARE = "lawn-care"
    LANDSCAPING = "landscaping"
    TREE_CARE = "tree-care"
    GARDEN = "garden"
    MAINTENANCE = "maintenance"
    IRRIGATION = "irrigation"
    GENERAL = "general"


GALLERY_CATEGORY_LABELS = {
    GalleryCategory.LAWN_CARE: "Lawn Care",
    GalleryCategory.LANDSCAPING: "Landscaping",
    GalleryCategory.TREE_CARE: "Tree Care",
    GalleryCategory.GARDEN: "Garden Installation",
    GalleryCategory.MAINTENANCE: "Maintenance",
    GalleryCategory.IRRIGATION: "Irrigation",
    GalleryCategory.GENERAL: "General",
}


class TestimonialStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


# ---------------------- RECORD SCHEMAS ----------------------

class Record(BaseModel):
    model_config = ConfigDict(extra="allow", use_enum_values=True)

    id: str = Field(..., description="Unique id assigned on insert")
    created_at: Optional[str] = Field(None, description="ISO-8601 creation timestamp")


class Service(Record):
    title: str
    description: str = ""
    image: Optional[str] = Field(None, description="Image URL or data URI")
    category: ServiceCategory = ServiceCategory.GENERAL


class Project(Record):
    title: str
    description: str = ""
    before_image: Optional[str] = None
    after_image: Optional[str] = None
    client_name: Optional[str] = None


class GalleryImage(Record):
    image: str
    caption: str = ""
    category: Optional[GalleryCategory] = None


class Testimonial(Record):
    client_name: str
    review_text: str
    rating: int = Field(..., ge=1, le=5)
    status: TestimonialStatus = TestimonialStatus.PENDING


class SliderImage(Record):
    image: str
    caption: str = ""


class AdminCredentials(Record):
    username: str
    password: str
    updated_at: Optional[str] = None


class Booking(Record):
    name: str
    email: str
    phone: str
    address: str
    service: str
    preferred_date: str
    preferred_time: str
    message: Optional[str] = None
    status: BookingStatus = BookingStatus.PENDING


# ---------------------- TABLES ----------------------

class Table(str, Enum):
    SERVICES = "services"
    PROJECTS = "projects"
    GALLERY = "gallery"
    TESTIMONIALS = "testimonials"
    SLIDER_IMAGES = "slider_images"
    ADMIN_CREDENTIALS = "admin_credentials"
    BOOKINGS = "bookings"

    @property
    def storage_key(self) -> str:
        return f"{STORAGE_PREFIX}{self.value}"

    @property
    def model(self) -> Type[Record]:
        return _TABLE_MODELS[self]

    def parse(self, record: Dict[str, Any]) -> Record:
        return self.model.model_validate(record)

    @classmethod
    def coerce(cls, value: Union["Table", str]) -> "Table":
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise UnknownTableError(f"Unknown table: {value!r}") from None


_TABLE_MODELS: Dict[Table, Type[Record]] = {
    Table.SERVICES: Service,
    Table.PROJECTS: Project,
    Table.GALLERY: GalleryImage,
    Table.TESTIMONIALS: Testimonial,
    Table.SLIDER_IMAGES: SliderImage,
    Table.ADMIN_CREDENTIALS: AdminCredentials,
    Table.BOOKINGS: Booking,
}


# ---------------------- LIFECYCLES ----------------------

BOOKING_TRANSITIONS = {
    BookingStatus.PENDING: {BookingStatus.CONFIRMED, BookingStatus.CANCELLED},
    BookingStatus.CONFIRMED: {BookingStatus.COMPLETED, BookingStatus.CANCELLED},
    BookingStatus.COMPLETED: set(),
    BookingStatus.CANCELLED: set(),
}

# approved/rejected -> pending is the admin "reset" action
TESTIMONIAL_TRANSITIONS = {
    TestimonialStatus.PENDING: {TestimonialStatus.APPROVED, TestimonialStatus.REJECTED},
    TestimonialStatus.APPROVED: {TestimonialStatus.PENDING, TestimonialStatus.REJECTED},
    TestimonialStatus.REJECTED: {TestimonialStatus.PENDING, TestimonialStatus.APPROVED},
}


def can_transition(transitions: Dict[Any, set], current: Any, target: Any) -> bool:
    return target in transitions.get(current, set())

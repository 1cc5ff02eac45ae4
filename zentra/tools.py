from __future__ import annotations

import logging
from concurrent.futures import Future
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Union

from zentra.db.access import DataAccess, WriteResult
from zentra.db.errors import InvalidTransitionError, RecordNotFoundError
from zentra.db.models import (
    BOOKING_TRANSITIONS,
    TESTIMONIAL_TRANSITIONS,
    BookingStatus,
    Table,
    TestimonialStatus,
    can_transition,
)
from zentra.forms import BookingForm, ReviewForm
from zentra.notifications import Notifier

log = logging.getLogger("zentra.app")


@dataclass(frozen=True)
class Submission:
    result: WriteResult
    # detached notification future; callers are not expected to wait on it
    notification: Optional[Future] = None

    @property
    def record(self) -> Optional[Dict[str, Any]]:
        return self.result.record


def _fire(notify, payload: Mapping[str, Any]):
    try:
        return notify(payload)
    except Exception as e:
        log.error("Notification could not be scheduled: %s", e)
        return None


# --- SUBMISSION TOOLS -------------------------------------------------------

def submit_booking(access: DataAccess, notifier: Optional[Notifier], data: Mapping[str, Any]) -> Submission:
    """
    Validate a contact-page booking, save it as pending and notify the admin.

    Raises pydantic ``ValidationError`` for bad input and ``InsertError`` if the
    booking could not be stored. Notification problems are only logged.
    """
    form = BookingForm.model_validate(dict(data))
    booking = form.to_record()
    booking["status"] = BookingStatus.PENDING.value

    result = access.insert(Table.BOOKINGS, booking)

    future = _fire(notifier.notify_booking, booking) if notifier else None
    return Submission(result=result, notification=future)


def submit_testimonial(access: DataAccess, notifier: Optional[Notifier], data: Mapping[str, Any]) -> Submission:
    """Reviews always enter moderation as pending, whatever status the caller sent."""
    form = ReviewForm.model_validate(dict(data))
    review = form.to_record()
    review["status"] = TestimonialStatus.PENDING.value

    result = access.insert(Table.TESTIMONIALS, review)

    future = _fire(notifier.notify_review, review) if notifier else None
    return Submission(result=result, notification=future)


# --- STATUS TOOLS -----------------------------------------------------------

def _find(access: DataAccess, table: Table, record_id: str) -> Dict[str, Any]:
    for record in access.fetch(table):
        if record.get("id") == record_id:
            return record
    raise RecordNotFoundError(f"No {table.value} record with id {record_id}")


def set_booking_status(
    access: DataAccess,
    booking_id: str,
    status: Union[BookingStatus, str],
    force: bool = False,
) -> WriteResult:
    """
    Move a booking along pending -> confirmed -> completed (or cancelled).

    ``force`` is the admin override for leaving a terminal state.
    """
    target = BookingStatus(status)
    booking = _find(access, Table.BOOKINGS, booking_id)
    current = BookingStatus(booking.get("status") or BookingStatus.PENDING.value)

    if current == target:
        return WriteResult(success=True, source="noop", matched=0)
    if not force and not can_transition(BOOKING_TRANSITIONS, current, target):
        raise InvalidTransitionError(f"Cannot move booking from {current.value} to {target.value}")

    return access.update(Table.BOOKINGS, booking_id, {"status": target.value})


def set_testimonial_status(
    access: DataAccess,
    testimonial_id: str,
    status: Union[TestimonialStatus, str],
) -> WriteResult:
    target = TestimonialStatus(status)
    review = _find(access, Table.TESTIMONIALS, testimonial_id)
    current = TestimonialStatus(review.get("status") or TestimonialStatus.PENDING.value)

    if current == target:
        return WriteResult(success=True, source="noop", matched=0)
    if not can_transition(TESTIMONIAL_TRANSITIONS, current, target):
        raise InvalidTransitionError(f"Cannot move testimonial from {current.value} to {target.value}")

    return access.update(Table.TESTIMONIALS, testimonial_id, {"status": target.value})


# --- PUBLIC QUERIES ---------------------------------------------------------

def approved_testimonials(access: DataAccess):
    return [t for t in access.fetch(Table.TESTIMONIALS) if t.get("status") == TestimonialStatus.APPROVED.value]


def gallery_by_category(access: DataAccess, category: Optional[str] = None):
    images = access.fetch(Table.GALLERY)
    if not category or category == "all":
        return images
    return [img for img in images if img.get("category") == category]

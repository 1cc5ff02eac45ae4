import pytest
from pydantic import ValidationError

from zentra.db import models
from zentra.db.errors import UnknownTableError
from zentra.db.models import BOOKING_TRANSITIONS, BookingStatus, Table, can_transition


def test_table_coerce():
    assert Table.coerce("slider_images") is Table.SLIDER_IMAGES
    assert Table.coerce(Table.BOOKINGS) is Table.BOOKINGS
    with pytest.raises(UnknownTableError):
        Table.coerce("blog_posts")


def test_storage_keys():
    assert Table.ADMIN_CREDENTIALS.storage_key == "zentra_admin_credentials"


def test_seeded_records_parse(store):
    for table in Table:
        for record in store.read(table):
            assert table.parse(record).id == record["id"]


def test_testimonial_rating_is_bounded():
    with pytest.raises(ValidationError):
        models.Testimonial(id="t", client_name="A", review_text="Nice work overall", rating=7)


def test_booking_transitions():
    assert can_transition(BOOKING_TRANSITIONS, BookingStatus.PENDING, BookingStatus.CONFIRMED)
    assert not can_transition(BOOKING_TRANSITIONS, BookingStatus.COMPLETED, BookingStatus.PENDING)
    assert not can_transition(BOOKING_TRANSITIONS, BookingStatus.PENDING, BookingStatus.COMPLETED)

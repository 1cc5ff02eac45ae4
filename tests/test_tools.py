import pytest
from pydantic import ValidationError

from zentra.db.errors import InvalidTransitionError, RecordNotFoundError
from zentra.db.models import Table
from zentra.tools import (
    approved_testimonials,
    gallery_by_category,
    set_booking_status,
    set_testimonial_status,
    submit_booking,
    submit_testimonial,
)

from .fakes import FakeResponse, FakeSession

BOOKING = {
    "name": "Dana Whitfield",
    "email": "dana@whitfieldfamily.org",
    "phone": "555-0102",
    "address": "12 Elm Street",
    "service": "Lawn Mowing",
    "preferredDate": "2026-11-03",
    "preferredTime": "8:00 AM - 10:00 AM",
    "message": "Back gate is unlocked.",
    "status": "completed",
}


def test_submit_booking_saves_pending_and_notifies(local_access, notifier, http_session):
    sub = submit_booking(local_access, notifier, BOOKING)

    assert sub.result.success
    assert sub.record["status"] == "pending"
    assert sub.record["preferred_date"] == "2026-11-03"
    assert local_access.fetch(Table.BOOKINGS)[0]["id"] == sub.record["id"]

    sent = sub.notification.result(timeout=5)
    assert sent.success
    assert len(http_session.posts) == 1


def test_invalid_booking_is_not_saved(local_access, notifier, http_session):
    with pytest.raises(ValidationError):
        submit_booking(local_access, notifier, {**BOOKING, "email": "not-an-email"})

    assert local_access.fetch(Table.BOOKINGS) == []
    assert http_session.posts == []


def test_notification_failure_does_not_affect_submission(local_access, notifier, http_session):
    http_session.response = FakeResponse(500, text="upstream down")

    sub = submit_booking(local_access, notifier, BOOKING)

    assert sub.result.success
    assert sub.notification.result(timeout=5).success is False
    assert len(local_access.fetch(Table.BOOKINGS)) == 1


def test_notification_exception_does_not_affect_submission(local_access, email_cfg):
    from zentra.notifications import Notifier

    n = Notifier(email_cfg, session=FakeSession(exc=ConnectionError("no route")))
    try:
        sub = submit_booking(local_access, n, BOOKING)
        assert sub.result.success
        assert sub.notification.result(timeout=5).error == "no route"
    finally:
        n.shutdown()


def test_submit_without_notifier(local_access):
    sub = submit_booking(local_access, None, BOOKING)
    assert sub.notification is None
    assert sub.record["status"] == "pending"


def test_testimonial_always_enters_pending(local_access, notifier):
    sub = submit_testimonial(
        local_access,
        notifier,
        {"client_name": "Omar", "review_text": "Tidy work and on time.", "rating": 4, "status": "approved"},
    )

    stored = local_access.fetch(Table.TESTIMONIALS)[0]
    assert stored["id"] == sub.record["id"]
    assert stored["status"] == "pending"
    assert stored["rating"] == 4
    assert sub.notification.result(timeout=5).success


def test_short_review_is_rejected(local_access):
    with pytest.raises(ValidationError):
        submit_testimonial(local_access, None, {"client_name": "Omar", "review_text": "ok", "rating": 4})


def _new_booking(access):
    return submit_booking(access, None, BOOKING).record


def test_booking_status_transitions(local_access):
    booking = _new_booking(local_access)

    assert set_booking_status(local_access, booking["id"], "confirmed").matched == 1
    assert set_booking_status(local_access, booking["id"], "completed").matched == 1

    with pytest.raises(InvalidTransitionError):
        set_booking_status(local_access, booking["id"], "pending")

    # admin override
    set_booking_status(local_access, booking["id"], "pending", force=True)
    assert local_access.fetch(Table.BOOKINGS)[0]["status"] == "pending"


def test_booking_cannot_skip_confirmation(local_access):
    booking = _new_booking(local_access)
    with pytest.raises(InvalidTransitionError):
        set_booking_status(local_access, booking["id"], "completed")


def test_same_status_is_noop(local_access):
    booking = _new_booking(local_access)
    result = set_booking_status(local_access, booking["id"], "pending")
    assert (result.source, result.matched) == ("noop", 0)


def test_unknown_status_and_record(local_access):
    booking = _new_booking(local_access)
    with pytest.raises(ValueError):
        set_booking_status(local_access, booking["id"], "archived")
    with pytest.raises(RecordNotFoundError):
        set_booking_status(local_access, "missing", "confirmed")


def test_testimonial_moderation(local_access):
    pending = [t for t in local_access.fetch(Table.TESTIMONIALS) if t["status"] == "pending"][0]

    set_testimonial_status(local_access, pending["id"], "approved")
    assert len(approved_testimonials(local_access)) == 3

    set_testimonial_status(local_access, pending["id"], "rejected")
    set_testimonial_status(local_access, pending["id"], "pending")
    assert len(approved_testimonials(local_access)) == 2


def test_public_page_sees_only_approved(local_access):
    names = {t["client_name"] for t in approved_testimonials(local_access)}
    assert names == {"Sarah Johnson", "Mike Davis"}


def test_gallery_by_category(local_access):
    local_access.insert(Table.GALLERY, {"image": "x", "caption": "Oak", "category": "tree-care"})

    assert len(gallery_by_category(local_access)) == 4
    assert len(gallery_by_category(local_access, "all")) == 4
    assert [g["caption"] for g in gallery_by_category(local_access, "tree-care")] == ["Oak"]
    assert gallery_by_category(local_access, "irrigation") == []

from __future__ import annotations

import json
import logging
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, Mapping, Optional

import requests
from jinja2 import DictLoader, Environment, select_autoescape

from zentra.config import EmailConfig

log = logging.getLogger("zentra.notifications")


class MailConfigError(Exception):
    pass


@dataclass(frozen=True)
class NotificationResult:
    success: bool
    id: Optional[str] = None
    error: Optional[str] = None


# ---------------------- TEMPLATES ----------------------

_BOOKING_HTML = """\
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
  <h2 style="color: #006400;">New Service Booking Request</h2>
  <div style="background-color: #f9f9f9; padding: 20px; border-radius: 8px; margin: 20px 0;">
    <h3 style="color: #333; margin-top: 0;">Customer Information</h3>
    <p><strong>Name:</strong> {{ b.name }}</p>
    <p><strong>Email:</strong> {{ b.email }}</p>
    <p><strong>Phone:</strong> {{ b.phone }}</p>
    <p><strong>Address:</strong> {{ b.address }}</p>
  </div>
  <div style="background-color: #f0f8f0; padding: 20px; border-radius: 8px; margin: 20px 0;">
    <h3 style="color: #333; margin-top: 0;">Service Details</h3>
    <p><strong>Service:</strong> {{ b.service }}</p>
    <p><strong>Preferred Date:</strong> {{ preferred_date }}</p>
    <p><strong>Preferred Time:</strong> {{ b.preferred_time }}</p>
    {% if b.message %}<p><strong>Message:</strong> {{ b.message }}</p>{% endif %}
  </div>
  <div style="background-color: #e8f4f8; padding: 20px; border-radius: 8px; margin: 20px 0;">
    <p style="margin: 0;"><strong>Submitted:</strong> {{ submitted }}</p>
  </div>
  <p style="color: #666; font-size: 14px;">
    Please respond to this booking request as soon as possible to provide excellent customer service.
  </p>
</div>
"""

_REVIEW_HTML = """\
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
  <h2 style="color: #006400;">New Customer Review</h2>
  <div style="background-color: #f9f9f9; padding: 20px; border-radius: 8px; margin: 20px 0;">
    <h3 style="color: #333; margin-top: 0;">Review Details</h3>
    <p><strong>Customer:</strong> {{ r.client_name }}</p>
    <p><strong>Rating:</strong> {{ r.rating }}/5 stars</p>
    <div style="margin: 15px 0;">
      <strong>Review:</strong>
      <div style="background-color: white; padding: 15px; border-radius: 5px; margin-top: 5px;">
        "{{ r.review_text }}"
      </div>
    </div>
  </div>
  <div style="background-color: #e8f4f8; padding: 20px; border-radius: 8px; margin: 20px 0;">
    <p style="margin: 0;"><strong>Submitted:</strong> {{ submitted }}</p>
  </div>
  <p style="color: #666; font-size: 14px;">
    Please review and approve this testimonial in your admin panel.
  </p>
</div>
"""

_env = Environment(
    loader=DictLoader({"booking.html": _BOOKING_HTML, "review.html": _REVIEW_HTML}),
    autoescape=select_autoescape(default=True, default_for_string=True),
)

BOOKING_SUBJECT = "New Service Booking Request"
REVIEW_SUBJECT = "New Customer Review Submitted"


def _format_preferred_date(value: Any) -> str:
    if not value:
        return "Not specified"
    if isinstance(value, (date, datetime)):
        return value.strftime("%B %d, %Y")
    try:
        return date.fromisoformat(str(value)[:10]).strftime("%B %d, %Y")
    except ValueError:
        return str(value)


def _submitted(now: Optional[datetime] = None) -> str:
    return (now or datetime.now()).strftime("%Y-%m-%d %H:%M")


def render_booking_html(booking: Mapping[str, Any], now: Optional[datetime] = None) -> str:
    return _env.get_template("booking.html").render(
        b=booking,
        preferred_date=_format_preferred_date(booking.get("preferred_date")),
        submitted=_submitted(now),
    )


def render_review_html(review: Mapping[str, Any], now: Optional[datetime] = None) -> str:
    return _env.get_template("review.html").render(r=review, submitted=_submitted(now))


# ---------------------- SENDER ----------------------

class Notifier:
    """
    Sends admin notification emails through the Resend HTTP API.

    ``send`` makes exactly one attempt and never raises. The ``notify_*``
    helpers run ``send`` on the notifier's own thread pool and hand back the
    future; nobody is expected to wait on it.
    """

    def __init__(
        self,
        cfg: EmailConfig,
        session: Optional[requests.Session] = None,
        executor: Optional[ThreadPoolExecutor] = None,
    ):
        self.cfg = cfg
        self.session = session or requests.Session()
        self.executor = executor or ThreadPoolExecutor(max_workers=2, thread_name_prefix="notify")

    def build_message(self, subject: str, html: str) -> Dict[str, Any]:
        return {
            "from": f"{self.cfg.from_name} <{self.cfg.from_email}>",
            "to": [self.cfg.to_email],
            "subject": subject,
            "html": html,
        }

    def booking_message(self, booking: Mapping[str, Any]) -> Dict[str, Any]:
        return self.build_message(BOOKING_SUBJECT, render_booking_html(booking))

    def review_message(self, review: Mapping[str, Any]) -> Dict[str, Any]:
        return self.build_message(REVIEW_SUBJECT, render_review_html(review))

    def _post(self, message: Dict[str, Any]) -> Optional[str]:
        if not self.cfg.api_key:
            raise MailConfigError("Resend API key not configured")

        resp = self.session.post(
            self.cfg.api_url,
            headers={
                "Authorization": f"Bearer {self.cfg.api_key}",
                "Content-Type": "application/json",
            },
            data=json.dumps(message),
            timeout=self.cfg.timeout,
        )
        if resp.status_code >= 400:
            raise MailConfigError(f"Email API error {resp.status_code}: {resp.text[:300]}")
        try:
            return resp.json().get("id")
        except ValueError:
            return None

    def send(self, message: Dict[str, Any]) -> NotificationResult:
        try:
            msg_id = self._post(message)
        except MailConfigError as e:
            if not self.cfg.api_key:
                log.warning("Skipping notification email: %s", e)
            else:
                log.error("Error sending email: %s", e)
            return NotificationResult(success=False, error=str(e))
        except Exception as e:
            log.error("Error sending email: %s", e)
            return NotificationResult(success=False, error=str(e))

        log.info("Email sent successfully: %s", msg_id or "(no id)")
        return NotificationResult(success=True, id=msg_id)

    # ---------------------- FIRE AND FORGET ----------------------

    def notify_in_background(self, message: Dict[str, Any]) -> Future:
        future = self.executor.submit(self.send, message)
        future.add_done_callback(_log_outcome)
        return future

    def notify_booking(self, booking: Mapping[str, Any]) -> Future:
        return self.notify_in_background(self.booking_message(booking))

    def notify_review(self, review: Mapping[str, Any]) -> Future:
        return self.notify_in_background(self.review_message(review))

    def shutdown(self, wait: bool = True) -> None:
        self.executor.shutdown(wait=wait)


def _log_outcome(future: Future) -> None:
    exc = future.exception()
    if exc is not None:
        log.error("Notification task failed: %s", exc)
        return
    result = future.result()
    if not result.success:
        log.warning("Notification not delivered: %s", result.error)

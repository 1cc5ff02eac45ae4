from __future__ import annotations

import logging
from datetime import date
from typing import Any, Dict, Optional

import streamlit as st
from pydantic import ValidationError

from zentra.admin_dashboard import render_admin_dashboard
from zentra.auth import AdminSession
from zentra.config import load_config
from zentra.db.access import DataAccess, build_data_access
from zentra.db.errors import DataAccessError, InvalidCredentialsError
from zentra.db.models import GALLERY_CATEGORY_LABELS, Table
from zentra.db.storage import FileStorage, MemoryStorage
from zentra.forms import BOOKING_SERVICES, TIME_SLOTS, first_error
from zentra.notifications import Notifier
from zentra.tools import approved_testimonials, gallery_by_category, submit_booking, submit_testimonial

log = logging.getLogger("zentra.app")

PAGES = ["Home", "Services", "Projects", "Gallery", "Contact", "Admin"]


def _streamlit_secrets() -> Optional[Dict[str, Any]]:
    try:
        return st.secrets.to_dict()
    except Exception as e:
        # no secrets.toml: settings come from the environment
        log.debug("No Streamlit secrets: %s", e)
        return None


@st.cache_resource
def _shared_resources():
    """One data-access shim and notifier per server process."""
    cfg = load_config(_streamlit_secrets())
    access = build_data_access(cfg, FileStorage(cfg.storage.data_dir))
    notifier = Notifier(cfg.email)
    return access, notifier


def _init_app_state(access: DataAccess):
    # login state is per browser session, not shared between visitors
    if "session_storage" not in st.session_state:
        st.session_state.session_storage = MemoryStorage()
    if "admin_session" not in st.session_state:
        st.session_state.admin_session = AdminSession(access, st.session_state.session_storage)


def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    st.set_page_config(
        page_title="Zentra Holdings | Lawn Care & Landscaping",
        page_icon="🌿",
        layout="wide",
    )

    access, notifier = _shared_resources()
    _init_app_state(access)

    with st.sidebar:
        st.title("Zentra Holdings")
        page = st.radio("Go to", PAGES)
        if not access.remote_enabled:
            st.caption("Running on the local demo store.")

    if page == "Home":
        render_home(access, notifier)
    elif page == "Services":
        render_services(access)
    elif page == "Projects":
        render_projects(access)
    elif page == "Gallery":
        render_gallery(access)
    elif page == "Contact":
        render_contact(access, notifier)
    else:
        render_admin(access)


# ---------------------- PUBLIC PAGES ----------------------

def render_home(access: DataAccess, notifier: Notifier):
    slides = access.fetch(Table.SLIDER_IMAGES)
    if slides:
        idx = st.session_state.get("slide_idx", 0) % len(slides)
        st.image(slides[idx]["image"], caption=slides[idx].get("caption"), width="stretch")
        if len(slides) > 1:
            prev_col, _, next_col = st.columns([1, 6, 1])
            if prev_col.button("◀"):
                st.session_state.slide_idx = (idx - 1) % len(slides)
                st.rerun()
            if next_col.button("▶"):
                st.session_state.slide_idx = (idx + 1) % len(slides)
                st.rerun()

    st.header("What Our Clients Say")
    for t in approved_testimonials(access):
        with st.container(border=True):
            st.write("⭐" * int(t.get("rating", 0)))
            st.write(f"“{t.get('review_text', '')}”")
            st.caption(t.get("client_name", ""))

    st.subheader("Leave a Review")
    with st.form("review-form", clear_on_submit=True):
        client_name = st.text_input("Your name")
        rating = st.slider("Rating", 1, 5, 5)
        review_text = st.text_area("Your review")
        if st.form_submit_button("Submit Review"):
            try:
                submit_testimonial(access, notifier, {
                    "client_name": client_name,
                    "review_text": review_text,
                    "rating": rating,
                })
                st.toast("Thank you! Your review will appear once approved.")
            except ValidationError as e:
                st.toast(f"⚠️ {first_error(e)}")
            except DataAccessError:
                st.toast("⚠️ Failed to submit review. Please try again.")


def render_services(access: DataAccess):
    st.title("Our Services")
    for svc in access.fetch(Table.SERVICES):
        with st.container(border=True):
            c1, c2 = st.columns([1, 2])
            if svc.get("image"):
                c1.image(svc["image"], width="stretch")
            c2.subheader(svc.get("title", ""))
            c2.caption(svc.get("category", "general").capitalize())
            c2.write(svc.get("description", ""))


def render_projects(access: DataAccess):
    st.title("Our Projects")
    for proj in access.fetch(Table.PROJECTS):
        with st.container(border=True):
            st.subheader(proj.get("title", ""))
            before, after = st.columns(2)
            if proj.get("before_image"):
                before.image(proj["before_image"], caption="Before", width="stretch")
            if proj.get("after_image"):
                after.image(proj["after_image"], caption="After", width="stretch")
            st.write(proj.get("description", ""))
            if proj.get("client_name"):
                st.caption(f"Client: {proj['client_name']}")


def render_gallery(access: DataAccess):
    st.title("Gallery")
    options = ["all"] + [c.value for c in GALLERY_CATEGORY_LABELS]
    labels = {"all": "All Categories", **{c.value: label for c, label in GALLERY_CATEGORY_LABELS.items()}}
    category = st.selectbox("Category", options, format_func=lambda c: labels[c])
    images = gallery_by_category(access, category)
    if not images:
        st.info("No images in this category yet.")
        return
    cols = st.columns(3)
    for i, img in enumerate(images):
        cols[i % 3].image(img["image"], caption=img.get("caption"), width="stretch")


def render_contact(access: DataAccess, notifier: Notifier):
    st.title("Book a Service")
    with st.form("booking-form", clear_on_submit=True):
        c1, c2 = st.columns(2)
        name = c1.text_input("Full Name *")
        email = c2.text_input("Email *")
        phone = c1.text_input("Phone *")
        service = c2.selectbox("Service *", [""] + BOOKING_SERVICES)
        address = st.text_input("Property Address *", placeholder="123 Main St, City, State 12345")
        c3, c4 = st.columns(2)
        preferred_date = c3.date_input("Preferred Date *", min_value=date.today())
        preferred_time = c4.selectbox("Preferred Time *", [""] + TIME_SLOTS)
        message = st.text_area("Additional Notes")
        if st.form_submit_button("Submit Booking"):
            try:
                submit_booking(access, notifier, {
                    "name": name,
                    "email": email,
                    "phone": phone,
                    "address": address,
                    "service": service,
                    "preferred_date": preferred_date,
                    "preferred_time": preferred_time,
                    "message": message,
                })
                st.toast("Booking request submitted! We'll contact you soon.")
            except ValidationError as e:
                st.toast(f"⚠️ {first_error(e)}")
            except DataAccessError:
                st.toast("⚠️ Failed to submit booking. Please try again.")


# ---------------------- ADMIN ----------------------

def render_admin(access: DataAccess):
    session: AdminSession = st.session_state.admin_session
    if session.is_logged_in:
        render_admin_dashboard(access, session)
        return

    st.title("Admin Login")
    with st.form("login-form"):
        username = st.text_input("Username")
        password = st.text_input("Password", type="password")
        if st.form_submit_button("Log in"):
            try:
                session.login(username, password)
                st.toast("Login successful!")
                st.rerun()
            except ValidationError as e:
                st.toast(f"⚠️ {first_error(e)}")
            except InvalidCredentialsError:
                st.toast("⚠️ Invalid username or password")


if __name__ == "__main__":
    main()

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Iterable, Optional, Sequence

import pandas as pd
import plotly.express as px
import streamlit as st
from pydantic import ValidationError

from zentra.auth import AdminSession, NotAuthenticatedError
from zentra.db.access import DataAccess
from zentra.db.errors import DataAccessError
from zentra.db.models import (
    GALLERY_CATEGORY_LABELS,
    BookingStatus,
    GalleryCategory,
    ServiceCategory,
    Table,
    TestimonialStatus,
)
from zentra.forms import GalleryForm, ProjectForm, ServiceForm, SliderForm, first_error
from zentra.images import uploaded_file_to_data_url
from zentra.tools import set_booking_status, set_testimonial_status

BOOKING_COLUMNS = [
    "name", "email", "phone", "address", "service",
    "preferred_date", "preferred_time", "status", "created_at", "id",
]
TESTIMONIAL_COLUMNS = ["client_name", "rating", "review_text", "status", "created_at", "id"]


# ---------------------- STATS ----------------------

@dataclass(frozen=True)
class DashboardStats:
    total_services: int
    total_projects: int
    total_bookings: int
    pending_bookings: int
    total_testimonials: int
    pending_testimonials: int
    approved_testimonials: int
    total_gallery_images: int
    total_slider_images: int


def compute_stats(access: DataAccess) -> DashboardStats:
    bookings = access.fetch(Table.BOOKINGS)
    testimonials = access.fetch(Table.TESTIMONIALS)
    return DashboardStats(
        total_services=len(access.fetch(Table.SERVICES)),
        total_projects=len(access.fetch(Table.PROJECTS)),
        total_bookings=len(bookings),
        pending_bookings=sum(1 for b in bookings if b.get("status") == BookingStatus.PENDING.value),
        total_testimonials=len(testimonials),
        pending_testimonials=sum(1 for t in testimonials if t.get("status") == TestimonialStatus.PENDING.value),
        approved_testimonials=sum(1 for t in testimonials if t.get("status") == TestimonialStatus.APPROVED.value),
        total_gallery_images=len(access.fetch(Table.GALLERY)),
        total_slider_images=len(access.fetch(Table.SLIDER_IMAGES)),
    )


# ---------------------- FRAMES ----------------------

def records_frame(records: Iterable[Dict[str, Any]], columns: Sequence[str]) -> pd.DataFrame:
    """DataFrame with exactly ``columns``, in order; missing fields become empty."""
    df = pd.DataFrame(list(records))
    for col in columns:
        if col not in df.columns:
            df[col] = None
    return df[list(columns)]


def status_counts(df: pd.DataFrame, statuses: Iterable[str]) -> Dict[str, int]:
    counts = {"total": len(df)}
    for status in statuses:
        counts[status] = int((df["status"] == status).sum()) if "status" in df.columns else 0
    return counts


def filter_by_status(df: pd.DataFrame, statuses: Optional[Iterable[str]]) -> pd.DataFrame:
    statuses = list(statuses or [])
    if not statuses or "status" not in df.columns:
        return df
    return df[df["status"].isin(statuses)]


def to_csv(df: pd.DataFrame) -> bytes:
    return df.to_csv(index=False).encode("utf-8")


# ---------------------- RENDERING ----------------------

def render_admin_dashboard(access: DataAccess, session: AdminSession):
    st.title("🌿 Zentra Admin")

    user = session.current_user or {}
    with st.sidebar:
        st.caption(f"Signed in as **{user.get('username', '?')}**")
        st.caption("Backend: " + ("Supabase" if access.remote_enabled else "Local demo store"))
        if st.button("Log out"):
            session.logout()
            st.rerun()

    tabs = st.tabs(["Overview", "Bookings", "Testimonials", "Services", "Projects", "Gallery", "Slider", "Settings"])
    with tabs[0]:
        _render_overview(access)
    with tabs[1]:
        _render_bookings(access)
    with tabs[2]:
        _render_testimonials(access)
    with tabs[3]:
        _render_services(access)
    with tabs[4]:
        _render_projects(access)
    with tabs[5]:
        _render_gallery(access)
    with tabs[6]:
        _render_slider(access)
    with tabs[7]:
        _render_settings(session)


def _render_overview(access: DataAccess):
    stats = asdict(compute_stats(access))
    col1, col2, col3 = st.columns(3)
    col1.metric("Total Bookings", stats["total_bookings"], f"{stats['pending_bookings']} pending")
    col2.metric("Testimonials", stats["total_testimonials"], f"{stats['pending_testimonials']} pending")
    col3.metric("Services", stats["total_services"])

    col4, col5, col6 = st.columns(3)
    col4.metric("Projects", stats["total_projects"])
    col5.metric("Gallery Images", stats["total_gallery_images"])
    col6.metric("Slider Images", stats["total_slider_images"])

    df = records_frame(access.fetch(Table.BOOKINGS), BOOKING_COLUMNS)
    if not df.empty:
        counts = status_counts(df, [s.value for s in BookingStatus])
        counts.pop("total")
        fig = px.bar(x=list(counts.keys()), y=list(counts.values()), labels={"x": "Status", "y": "Bookings"})
        st.plotly_chart(fig, width="stretch")


def _render_bookings(access: DataAccess):
    st.subheader("Booking Management")
    df = records_frame(access.fetch(Table.BOOKINGS), BOOKING_COLUMNS)
    if df.empty:
        st.info("No bookings yet.")
        return

    all_statuses = [s.value for s in BookingStatus]
    counts = status_counts(df, all_statuses)
    cols = st.columns(len(counts))
    for col, (label, value) in zip(cols, counts.items()):
        col.metric(label.capitalize(), value)

    status_filter = st.multiselect("Filter by Status", options=all_statuses, default=[])
    filtered_df = filter_by_status(df, status_filter)
    st.dataframe(filtered_df, width="stretch")

    st.download_button(
        "📥 Download as CSV",
        to_csv(filtered_df),
        "zentra_bookings.csv",
        "text/csv",
        key="download-bookings-csv",
    )

    st.write("### Actions")
    c1, c2, c3 = st.columns([2, 1, 1])
    booking_id = c1.selectbox("Booking", options=df["id"].tolist(), format_func=_booking_label(df))
    new_status = c2.selectbox("New status", options=all_statuses)
    force = c3.checkbox("Override", help="Allow leaving completed/cancelled")
    b1, b2 = st.columns(2)
    if b1.button("Update Status"):
        try:
            set_booking_status(access, booking_id, new_status, force=force)
            st.toast(f"Booking marked {new_status}")
            st.rerun()
        except DataAccessError as e:
            st.toast(f"⚠️ {e}")
    if b2.button("Delete Booking"):
        access.delete(Table.BOOKINGS, booking_id)
        st.toast("Booking deleted successfully")
        st.rerun()


def _booking_label(df: pd.DataFrame):
    labels = {row["id"]: f"{row['name']} · {row['service']} · {row['status']}" for _, row in df.iterrows()}
    return lambda booking_id: labels.get(booking_id, booking_id)


def _render_testimonials(access: DataAccess):
    st.subheader("Testimonials")
    df = records_frame(access.fetch(Table.TESTIMONIALS), TESTIMONIAL_COLUMNS)
    if df.empty:
        st.info("No testimonials yet.")
        return

    all_statuses = [s.value for s in TestimonialStatus]
    status_filter = st.multiselect("Filter by Status", options=all_statuses, default=[], key="testimonial-filter")
    st.dataframe(filter_by_status(df, status_filter), width="stretch")

    for _, row in filter_by_status(df, status_filter).iterrows():
        with st.expander(f"{row['client_name']} · {'⭐' * int(row['rating'] or 0)} · {row['status']}"):
            st.write(row["review_text"])
            c1, c2, c3, c4 = st.columns(4)
            for col, status in zip((c1, c2, c3), all_statuses):
                if col.button(status.capitalize(), key=f"t-{row['id']}-{status}", disabled=row["status"] == status):
                    try:
                        set_testimonial_status(access, row["id"], status)
                        st.toast(f"Testimonial {status}")
                        st.rerun()
                    except DataAccessError as e:
                        st.toast(f"⚠️ {e}")
            if c4.button("Delete", key=f"t-{row['id']}-delete"):
                access.delete(Table.TESTIMONIALS, row["id"])
                st.toast("Testimonial deleted")
                st.rerun()


# ---------------------- CONTENT ----------------------

def edited_record(form_cls, record: Dict[str, Any], changes: Dict[str, Any]) -> Dict[str, Any]:
    """Validate ``record`` with ``changes`` applied; returns only the fields the form owns."""
    return form_cls.model_validate({**record, **changes}).to_record()


def _save(access: DataAccess, table: Table, form_cls, data: Dict[str, Any], record: Optional[Dict[str, Any]] = None):
    try:
        payload = edited_record(form_cls, record or {}, data)
    except ValidationError as e:
        st.toast(f"⚠️ {first_error(e)}")
        return
    try:
        if record:
            access.update(table, record["id"], payload)
            st.toast("Updated successfully!")
        else:
            access.insert(table, payload)
            st.toast("Created successfully!")
        st.rerun()
    except DataAccessError as e:
        st.toast(f"⚠️ {e}")


def _image_input(label: str, key: str, current: Optional[str] = None) -> Optional[str]:
    upload = st.file_uploader(label, type=["png", "jpg", "jpeg", "webp"], key=f"{key}-file")
    # data: URLs are too long for a text box; leaving it blank keeps the current image
    shown = current if current and not current.startswith("data:") else ""
    url = st.text_input(f"{label} URL", value=shown, key=f"{key}-url")
    if upload is not None:
        return uploaded_file_to_data_url(upload)
    return url or current or None


def _choice(label: str, options: Sequence[str], current: Optional[str], key: str, default: str, **kwargs) -> str:
    index = options.index(current) if current in options else options.index(default)
    return st.selectbox(label, options=options, index=index, key=key, **kwargs)


def _service_fields(key: str, record: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    record = record or {}
    return {
        "title": st.text_input("Title", value=record.get("title") or "", key=f"{key}-title"),
        "description": st.text_area("Description", value=record.get("description") or "", key=f"{key}-description"),
        "category": _choice(
            "Category",
            [c.value for c in ServiceCategory],
            record.get("category"),
            f"{key}-category",
            ServiceCategory.GENERAL.value,
        ),
        "image": _image_input("Image", f"{key}-image", record.get("image")),
    }


def _project_fields(key: str, record: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    record = record or {}
    client_name = st.text_input("Client name (optional)", value=record.get("client_name") or "", key=f"{key}-client")
    return {
        "title": st.text_input("Title", value=record.get("title") or "", key=f"{key}-title"),
        "description": st.text_area("Description", value=record.get("description") or "", key=f"{key}-description"),
        "client_name": client_name or None,
        "before_image": _image_input("Before image", f"{key}-before", record.get("before_image")),
        "after_image": _image_input("After image", f"{key}-after", record.get("after_image")),
    }


def _gallery_fields(key: str, record: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    record = record or {}
    return {
        "caption": st.text_input("Caption", value=record.get("caption") or "", key=f"{key}-caption"),
        "category": _choice(
            "Category",
            [c.value for c in GALLERY_CATEGORY_LABELS],
            record.get("category"),
            f"{key}-category",
            GalleryCategory.GENERAL.value,
            format_func=lambda c: GALLERY_CATEGORY_LABELS[GalleryCategory(c)],
        ),
        "image": _image_input("Image", f"{key}-image", record.get("image")),
    }


def _slider_fields(key: str, record: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    record = record or {}
    return {
        "caption": st.text_input("Caption", value=record.get("caption") or "", key=f"{key}-caption"),
        "image": _image_input("Image", f"{key}-image", record.get("image")),
    }


def _render_content(
    access: DataAccess,
    table: Table,
    form_cls,
    fields,
    title: str,
    add_label: str,
    label_field: str,
    image_field: str,
):
    st.subheader(title)
    with st.form(f"{table.value}-form", clear_on_submit=True):
        data = fields(f"{table.value}-new")
        if st.form_submit_button(add_label):
            _save(access, table, form_cls, data)

    for record in access.fetch(table):
        _record_row(access, table, form_cls, fields, record, label_field, image_field)


def _record_row(access: DataAccess, table: Table, form_cls, fields, record: Dict[str, Any], label_field: str, image_field: str):
    key = f"{table.value}-{record['id']}"
    c1, c2, c3 = st.columns([1, 4, 1])
    if record.get(image_field):
        c1.image(record[image_field], width="stretch")
    with c2.expander(record.get(label_field) or "(untitled)"):
        with st.form(f"{key}-edit"):
            data = fields(key, record)
            if st.form_submit_button("Save"):
                _save(access, table, form_cls, data, record=record)
    if c3.button("Delete", key=f"{key}-delete"):
        access.delete(table, record["id"])
        st.toast("Deleted successfully")
        st.rerun()


def _render_services(access: DataAccess):
    _render_content(access, Table.SERVICES, ServiceForm, _service_fields, "Services", "Add Service", "title", "image")


def _render_projects(access: DataAccess):
    _render_content(access, Table.PROJECTS, ProjectForm, _project_fields, "Projects", "Add Project", "title", "after_image")


def _render_gallery(access: DataAccess):
    _render_content(access, Table.GALLERY, GalleryForm, _gallery_fields, "Gallery", "Add Image", "caption", "image")


def _render_slider(access: DataAccess):
    _render_content(
        access, Table.SLIDER_IMAGES, SliderForm, _slider_fields, "Homepage Slider", "Add Slide", "caption", "image"
    )


def _render_settings(session: AdminSession):
    st.subheader("Admin Settings")
    with st.form("credentials-form", clear_on_submit=True):
        current_password = st.text_input("Current password", type="password")
        new_username = st.text_input("New username", value=(session.current_user or {}).get("username", ""))
        new_password = st.text_input("New password", type="password")
        confirm_password = st.text_input("Confirm new password", type="password")
        if st.form_submit_button("Update Credentials"):
            try:
                session.change_credentials(current_password, new_username, new_password, confirm_password)
                st.toast("Admin credentials updated successfully!")
            except ValidationError as e:
                st.toast(f"⚠️ {first_error(e)}")
            except (DataAccessError, NotAuthenticatedError) as e:
                st.toast(f"⚠️ {e}")

"""
Data access layer.

Design rules:
- Views call ONLY DataAccess (and the helpers in zentra.tools / zentra.auth).
- Remote calls are wrapped so every read and write can fall back to the
  local store.
- No env var reads here (config-only).
"""

from .access import AuthResult, DataAccess, WriteResult, build_data_access
from .errors import (
    DataAccessError,
    InsertError,
    InvalidCredentialsError,
    InvalidTransitionError,
    RecordNotFoundError,
    RemoteError,
    StorageError,
    UnknownTableError,
)
from .models import BookingStatus, Table, TestimonialStatus

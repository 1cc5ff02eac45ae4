"""
Data access shim.

Views call only this class. Every operation tries the primary (remote)
repository first and degrades to the local fallback store when the primary
is not configured or fails:

- ``fetch``, ``update`` and ``delete`` never surface failures.
- ``insert`` raises :class:`InsertError` when neither tier persisted the record.
- ``authenticate`` consults both tiers and raises
  :class:`InvalidCredentialsError` when neither has a match.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, TypeVar, Union

from zentra.config import AppConfig

from .database import get_supabase_client
from .errors import InsertError, InvalidCredentialsError
from .local_store import LocalStore
from .models import Table
from .repository import LocalRepository, Repository, SupabaseRepository
from .stamps import stamp, strip_reserved
from .storage import KeyValueStorage

log = logging.getLogger("zentra.db")

T = TypeVar("T")

TableRef = Union[Table, str]


@dataclass(frozen=True)
class WriteResult:
    success: bool
    source: str  # "remote" | "local"
    record: Optional[Dict[str, Any]] = None
    # rows touched; None when the remote backend did not report it
    matched: Optional[int] = None


@dataclass(frozen=True)
class AuthResult:
    user: Dict[str, Any]
    source: str

    @property
    def success(self) -> bool:
        return True


class DataAccess:
    def __init__(self, fallback: LocalRepository, primary: Optional[Repository] = None):
        self.primary = primary
        self.fallback = fallback

    @property
    def remote_enabled(self) -> bool:
        return self.primary is not None

    def _with_fallback(self, action: str, table: Table, fn_primary: Callable[[], T], fn_fallback: Callable[[], T]):
        """Run ``fn_primary`` if a primary exists; on any failure run ``fn_fallback``."""
        if self.primary is not None:
            try:
                return fn_primary(), self.primary.name
            except Exception as e:
                log.warning("%s %s fell back to local store: %s", action, table.value, e)
        return fn_fallback(), self.fallback.name

    # ---------------------- READ ----------------------

    def fetch(self, table: TableRef) -> List[Dict[str, Any]]:
        try:
            t = Table.coerce(table)
            records, _source = self._with_fallback(
                "fetch",
                t,
                lambda: self.primary.fetch(t),
                lambda: self.fallback.fetch(t),
            )
            return records
        except Exception as e:
            log.error("Error fetching %s: %s", table, e)
            return []

    # ---------------------- WRITE ----------------------

    def insert(self, table: TableRef, payload: Mapping[str, Any]) -> WriteResult:
        t = Table.coerce(table)
        record = stamp(payload)

        if self.primary is not None:
            try:
                self.primary.insert(t, dict(record))
                return WriteResult(success=True, source=self.primary.name, record=record, matched=1)
            except Exception as e:
                log.warning("insert %s fell back to local store: %s", t.value, e)

        try:
            self.fallback.insert(t, record)
        except Exception as e:
            log.error("Error inserting into %s: %s", t.value, e)
            raise InsertError(f"Could not save record to {t.value}") from e
        return WriteResult(success=True, source=self.fallback.name, record=record, matched=1)

    def update(self, table: TableRef, record_id: str, patch: Mapping[str, Any]) -> WriteResult:
        t = Table.coerce(table)
        clean = strip_reserved(patch)
        try:
            matched, source = self._with_fallback(
                "update",
                t,
                lambda: self.primary.update(t, record_id, clean),
                lambda: self.fallback.update(t, record_id, clean),
            )
        except Exception as e:
            log.error("Error updating %s/%s: %s", t.value, record_id, e)
            return WriteResult(success=True, source=self.fallback.name, matched=0)
        if matched == 0:
            log.info("update %s/%s matched no record", t.value, record_id)
        return WriteResult(success=True, source=source, matched=matched)

    def delete(self, table: TableRef, record_id: str) -> WriteResult:
        t = Table.coerce(table)
        try:
            matched, source = self._with_fallback(
                "delete",
                t,
                lambda: self.primary.delete(t, record_id),
                lambda: self.fallback.delete(t, record_id),
            )
        except Exception as e:
            log.error("Error deleting %s/%s: %s", t.value, record_id, e)
            return WriteResult(success=True, source=self.fallback.name, matched=0)
        if matched == 0:
            log.info("delete %s/%s matched no record", t.value, record_id)
        return WriteResult(success=True, source=source, matched=matched)

    # ---------------------- AUTH ----------------------

    def authenticate(self, username: str, password: str) -> AuthResult:
        if self.primary is not None:
            try:
                user = self.primary.find_credentials(username, password)
                if user:
                    return AuthResult(user=user, source=self.primary.name)
            except Exception as e:
                log.warning("Remote credential lookup failed: %s", e)

        try:
            user = self.fallback.find_credentials(username, password)
        except Exception as e:
            log.error("Local credential lookup failed: %s", e)
            user = None
        if user:
            return AuthResult(user=user, source=self.fallback.name)

        raise InvalidCredentialsError("Invalid username or password")


def build_data_access(cfg: AppConfig, storage: KeyValueStorage) -> DataAccess:
    """Wire the local store (seeded on construction) and, if configured, Supabase."""
    fallback = LocalRepository(LocalStore(storage))
    client = get_supabase_client(cfg.supabase)
    primary = SupabaseRepository(client) if client is not None else None
    return DataAccess(fallback=fallback, primary=primary)


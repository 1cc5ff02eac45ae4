"""
The two tiers behind the data-access shim.

Both implement :class:`Repository`. The remote tier wraps every failure in
:class:`RemoteError`; the local tier never raises for bad data, only for a
storage backend that cannot be written.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Protocol

from .errors import RemoteError
from .local_store import LocalStore
from .models import Table


class Repository(Protocol):
    name: str

    def fetch(self, table: Table) -> List[Dict[str, Any]]: ...

    def insert(self, table: Table, record: Dict[str, Any]) -> Dict[str, Any]: ...

    def update(self, table: Table, record_id: str, patch: Mapping[str, Any]) -> Optional[int]: ...

    def delete(self, table: Table, record_id: str) -> Optional[int]: ...

    def find_credentials(self, username: str, password: str) -> Optional[Dict[str, Any]]: ...


# ---------------------- REMOTE (SUPABASE) ----------------------

def _error_message(e: Exception) -> str:
    # postgrest APIError carries message/details attributes
    for attr in ("message", "details"):
        value = getattr(e, attr, None)
        if value:
            return str(value)
    return str(e) or type(e).__name__


class SupabaseRepository:
    name = "remote"

    def __init__(self, client: Any):
        self.client = client

    def _execute(self, action: str, table: Table, build):
        try:
            return build(self.client.table(table.value)).execute()
        except Exception as e:
            raise RemoteError(f"{action} on {table.value} failed: {_error_message(e)}") from e

    def fetch(self, table: Table) -> List[Dict[str, Any]]:
        res = self._execute(
            "select",
            table,
            lambda q: q.select("*").order("created_at", desc=True),
        )
        if res.data is None:
            raise RemoteError(f"select on {table.value} returned no data")
        return list(res.data)

    def insert(self, table: Table, record: Dict[str, Any]) -> Dict[str, Any]:
        res = self._execute("insert", table, lambda q: q.insert(record))
        if res.data:
            return dict(res.data[0])
        return record

    def update(self, table: Table, record_id: str, patch: Mapping[str, Any]) -> Optional[int]:
        res = self._execute(
            "update",
            table,
            lambda q: q.update(dict(patch)).eq("id", record_id),
        )
        return len(res.data) if res.data is not None else None

    def delete(self, table: Table, record_id: str) -> Optional[int]:
        res = self._execute("delete", table, lambda q: q.delete().eq("id", record_id))
        return len(res.data) if res.data is not None else None

    def find_credentials(self, username: str, password: str) -> Optional[Dict[str, Any]]:
        res = self._execute(
            "select",
            Table.ADMIN_CREDENTIALS,
            lambda q: q.select("*").eq("username", username).eq("password", password).limit(1),
        )
        if res.data:
            return dict(res.data[0])
        return None


# ---------------------- LOCAL ----------------------

class LocalRepository:
    name = "local"

    def __init__(self, store: LocalStore):
        self.store = store

    def fetch(self, table: Table) -> List[Dict[str, Any]]:
        return self.store.read(table)

    def insert(self, table: Table, record: Dict[str, Any]) -> Dict[str, Any]:
        return self.store.insert(table, record)

    def update(self, table: Table, record_id: str, patch: Mapping[str, Any]) -> int:
        return self.store.update(table, record_id, patch)

    def delete(self, table: Table, record_id: str) -> int:
        return self.store.delete(table, record_id)

    def find_credentials(self, username: str, password: str) -> Optional[Dict[str, Any]]:
        # exact, case-sensitive plaintext comparison
        return self.store.find(Table.ADMIN_CREDENTIALS, username=username, password=password)

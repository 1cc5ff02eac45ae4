"""
Local fallback store: one JSON array per table in a key/value backend.

Reads are forgiving (missing or malformed data reads as an empty list);
writes replace the whole collection. New records go to the front so the
collection stays newest-first like the remote query.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Mapping, Optional

from .models import Table
from .seed import build_fixtures
from .stamps import now_iso
from .storage import KeyValueStorage

log = logging.getLogger("zentra.db")


class LocalStore:
    def __init__(self, storage: KeyValueStorage, seed: bool = True):
        self.storage = storage
        if seed:
            self.seed()

    # ---------------------- SEEDING ----------------------

    def seed(self) -> List[Table]:
        """Write fixtures for every table that has no stored value. Returns the tables seeded."""
        seeded = []
        seeded_at = now_iso()
        for table in Table:
            if self.storage.get(table.storage_key) is not None:
                continue
            self.write(table, build_fixtures(table, seeded_at))
            seeded.append(table)
        if seeded:
            log.info("Seeded local store: %s", ", ".join(t.value for t in seeded))
        return seeded

    # ---------------------- COLLECTIONS ----------------------

    def read(self, table: Table) -> List[Dict[str, Any]]:
        raw = self.storage.get(table.storage_key)
        if raw is None:
            return []
        try:
            data = json.loads(raw)
        except (ValueError, TypeError):
            log.warning("Malformed local data for %s, treating as empty", table.value)
            return []
        if not isinstance(data, list):
            log.warning("Local data for %s is not a list, treating as empty", table.value)
            return []
        return [item for item in data if isinstance(item, dict)]

    def write(self, table: Table, records: List[Dict[str, Any]]) -> None:
        self.storage.set(table.storage_key, json.dumps(records).encode("utf-8"))

    # ---------------------- RECORD OPS ----------------------

    def insert(self, table: Table, record: Dict[str, Any]) -> Dict[str, Any]:
        records = self.read(table)
        records.insert(0, record)
        self.write(table, records)
        return record

    def update(self, table: Table, record_id: str, patch: Mapping[str, Any]) -> int:
        records = self.read(table)
        matched = 0
        for i, item in enumerate(records):
            if item.get("id") == record_id:
                records[i] = {**item, **patch}
                matched += 1
        if matched:
            self.write(table, records)
        return matched

    def delete(self, table: Table, record_id: str) -> int:
        records = self.read(table)
        kept = [item for item in records if item.get("id") != record_id]
        matched = len(records) - len(kept)
        if matched:
            self.write(table, kept)
        return matched

    def find(self, table: Table, **fields: Any) -> Optional[Dict[str, Any]]:
        for item in self.read(table):
            if all(item.get(k) == v for k, v in fields.items()):
                return item
        return None

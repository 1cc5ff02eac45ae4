from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Mapping

# keys owned by the access layer; callers cannot set or patch them
RESERVED_KEYS = ("id", "created_at")


def new_id() -> str:
    return str(uuid.uuid4())


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def stamp(payload: Mapping[str, Any]) -> Dict[str, Any]:
    """Copy ``payload`` and give it a fresh id and creation timestamp."""
    record = {k: v for k, v in dict(payload).items() if k not in RESERVED_KEYS}
    record["id"] = new_id()
    record["created_at"] = now_iso()
    return record


def strip_reserved(patch: Mapping[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in dict(patch).items() if k not in RESERVED_KEYS}

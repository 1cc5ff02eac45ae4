# db/database.py

from __future__ import annotations

import logging
from typing import Optional

from supabase import Client, create_client

from zentra.config import SupabaseConfig

log = logging.getLogger("zentra.db")


def get_supabase_client(cfg: SupabaseConfig) -> Optional[Client]:
    """
    Returns a Supabase client, or None when the backend is not configured.

    A missing URL or key is not an error: the app runs on the local store.
    A client that cannot be built (malformed URL or key) is logged and treated
    the same way.
    """
    if not cfg.enabled:
        log.warning("Supabase settings not found. Using local demo mode.")
        return None

    try:
        return create_client(cfg.url, cfg.anon_key)
    except Exception as e:
        log.warning("Could not create Supabase client, using local demo mode: %s", e)
        return None

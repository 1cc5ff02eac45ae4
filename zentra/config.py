from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from dotenv import load_dotenv


DEFAULT_FROM_EMAIL = "noreply@zentraholdings.com"
DEFAULT_TO_EMAIL = "admin@zentraholdings.com"
DEFAULT_RESEND_API_URL = "https://api.resend.com/emails"
DEFAULT_DATA_DIR = ".zentra_data"


# ---------------------- DATA CLASSES ----------------------

@dataclass
class SupabaseConfig:
    url: Optional[str]
    anon_key: Optional[str]

    @property
    def enabled(self) -> bool:
        return bool(self.url and self.anon_key)


@dataclass
class EmailConfig:
    api_key: Optional[str]
    from_email: str
    to_email: str
    api_url: str = DEFAULT_RESEND_API_URL
    from_name: str = "Zentra Holdings"
    timeout: float = 20.0


@dataclass
class StorageConfig:
    data_dir: str


@dataclass
class AppConfig:
    supabase: SupabaseConfig
    email: EmailConfig
    storage: StorageConfig


# ---------------------- LOADING ----------------------

def _clean(value: Any) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value if value else None


def _getenv(name: str, default: Optional[str] = None) -> Optional[str]:
    return _clean(os.getenv(name, default))


def _section(secrets: Optional[Mapping[str, Any]], name: str) -> Mapping[str, Any]:
    if not secrets or name not in secrets:
        return {}
    return secrets[name] or {}


def load_config(secrets: Optional[Mapping[str, Any]] = None) -> AppConfig:
    """
    Single place where settings are read.

    A secrets mapping (the shape of ``.streamlit/secrets.toml``) wins over the
    environment; the environment is read after loading ``.env`` if present.
    Blank values count as unset.
    """
    load_dotenv(override=False)

    supabase = _section(secrets, "supabase")
    resend = _section(secrets, "resend")
    storage = _section(secrets, "storage")

    supabase_cfg = SupabaseConfig(
        url=_clean(supabase.get("url")) or _getenv("SUPABASE_URL"),
        anon_key=_clean(supabase.get("anon_key")) or _getenv("SUPABASE_ANON_KEY"),
    )

    email_cfg = EmailConfig(
        api_key=_clean(resend.get("api_key")) or _getenv("RESEND_API_KEY"),
        from_email=_clean(resend.get("from_email"))
        or _getenv("RESEND_FROM_EMAIL", DEFAULT_FROM_EMAIL)
        or DEFAULT_FROM_EMAIL,
        to_email=_clean(resend.get("to_email"))
        or _getenv("RESEND_TO_EMAIL", DEFAULT_TO_EMAIL)
        or DEFAULT_TO_EMAIL,
        api_url=_clean(resend.get("api_url"))
        or _getenv("RESEND_API_URL", DEFAULT_RESEND_API_URL)
        or DEFAULT_RESEND_API_URL,
        timeout=float(_clean(resend.get("timeout")) or _getenv("RESEND_TIMEOUT", "20") or "20"),
    )

    storage_cfg = StorageConfig(
        data_dir=_clean(storage.get("data_dir"))
        or _getenv("ZENTRA_DATA_DIR", DEFAULT_DATA_DIR)
        or DEFAULT_DATA_DIR,
    )

    return AppConfig(
        supabase=supabase_cfg,
        email=email_cfg,
        storage=storage_cfg,
    )

import pytest

from zentra.config import DEFAULT_DATA_DIR, DEFAULT_FROM_EMAIL, DEFAULT_RESEND_API_URL, load_config

ENV_VARS = [
    "SUPABASE_URL",
    "SUPABASE_ANON_KEY",
    "RESEND_API_KEY",
    "RESEND_FROM_EMAIL",
    "RESEND_TO_EMAIL",
    "RESEND_API_URL",
    "RESEND_TIMEOUT",
    "ZENTRA_DATA_DIR",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    # a developer .env must not leak into these tests
    monkeypatch.setattr("zentra.config.load_dotenv", lambda **kwargs: False)


def test_defaults():
    cfg = load_config()

    assert not cfg.supabase.enabled
    assert cfg.email.api_key is None
    assert cfg.email.from_email == DEFAULT_FROM_EMAIL
    assert cfg.email.api_url == DEFAULT_RESEND_API_URL
    assert cfg.storage.data_dir == DEFAULT_DATA_DIR


def test_environment(monkeypatch):
    monkeypatch.setenv("SUPABASE_URL", "https://abc.supabase.co")
    monkeypatch.setenv("SUPABASE_ANON_KEY", "anon")
    monkeypatch.setenv("RESEND_API_KEY", "re_123")
    monkeypatch.setenv("RESEND_TIMEOUT", "5")
    monkeypatch.setenv("ZENTRA_DATA_DIR", "/var/lib/zentra")

    cfg = load_config()

    assert cfg.supabase.enabled
    assert cfg.email.api_key == "re_123"
    assert cfg.email.timeout == 5.0
    assert cfg.storage.data_dir == "/var/lib/zentra"


def test_blank_values_count_as_unset(monkeypatch):
    monkeypatch.setenv("SUPABASE_URL", "   ")
    monkeypatch.setenv("SUPABASE_ANON_KEY", "anon")
    monkeypatch.setenv("RESEND_FROM_EMAIL", "")

    cfg = load_config()

    assert not cfg.supabase.enabled
    assert cfg.email.from_email == DEFAULT_FROM_EMAIL


def test_secrets_win_over_environment(monkeypatch):
    monkeypatch.setenv("RESEND_API_KEY", "from-env")
    monkeypatch.setenv("RESEND_TO_EMAIL", "env@zentraholdings.com")

    cfg = load_config(
        {
            "supabase": {"url": "https://x.supabase.co", "anon_key": "k"},
            "resend": {"api_key": "from-secrets", "to_email": ""},
        }
    )

    assert cfg.supabase.url == "https://x.supabase.co"
    assert cfg.email.api_key == "from-secrets"
    # blank secret falls through to the environment
    assert cfg.email.to_email == "env@zentraholdings.com"

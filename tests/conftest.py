from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import pytest

from zentra.config import EmailConfig
from zentra.db.access import DataAccess
from zentra.db.local_store import LocalStore
from zentra.db.repository import LocalRepository
from zentra.db.storage import MemoryStorage
from zentra.notifications import Notifier

from .fakes import FakeRemote, FakeSession


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def store(storage):
    return LocalStore(storage)


@pytest.fixture
def local_access(store):
    return DataAccess(fallback=LocalRepository(store))


@pytest.fixture
def remote():
    return FakeRemote()


@pytest.fixture
def remote_access(store, remote):
    return DataAccess(fallback=LocalRepository(store), primary=remote)


@pytest.fixture
def email_cfg():
    return EmailConfig(
        api_key="re_test_key",
        from_email="noreply@zentraholdings.com",
        to_email="admin@zentraholdings.com",
        api_url="https://api.resend.test/emails",
    )


@pytest.fixture
def http_session():
    return FakeSession()


@pytest.fixture
def notifier(email_cfg, http_session):
    executor = ThreadPoolExecutor(max_workers=1)
    n = Notifier(email_cfg, session=http_session, executor=executor)
    yield n
    n.shutdown(wait=True)

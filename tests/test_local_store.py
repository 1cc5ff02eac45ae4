import json

from zentra.db.local_store import LocalStore
from zentra.db.models import Table
from zentra.db.seed import FIXTURES
from zentra.db.storage import MemoryStorage


def test_seed_writes_every_table(store, storage):
    for table in Table:
        raw = storage.get(table.storage_key)
        assert raw is not None
        assert len(json.loads(raw)) == len(FIXTURES[table])


def test_seed_is_idempotent(storage):
    first = LocalStore(storage)
    before = first.read(Table.SERVICES)

    second = LocalStore(storage)
    assert second.seed() == []
    assert second.read(Table.SERVICES) == before


def test_seed_does_not_refill_an_emptied_table(storage):
    s = LocalStore(storage)
    s.write(Table.SERVICES, [])

    LocalStore(storage)
    assert s.read(Table.SERVICES) == []


def test_seeded_records_have_unique_ids(store):
    for table in Table:
        ids = [r["id"] for r in store.read(table)]
        assert len(ids) == len(set(ids))


def test_seeded_credentials_are_stamped_with_updated_at(store):
    creds = store.read(Table.ADMIN_CREDENTIALS)
    assert creds[0]["username"] == "admin123"
    assert "updated_at" in creds[0]
    assert "created_at" not in creds[0]


def test_malformed_data_reads_as_empty():
    storage = MemoryStorage({Table.SERVICES.storage_key: b"{not json"})
    s = LocalStore(storage)
    assert s.read(Table.SERVICES) == []


def test_non_list_data_reads_as_empty():
    storage = MemoryStorage({Table.GALLERY.storage_key: b'{"id": "x"}'})
    s = LocalStore(storage)
    assert s.read(Table.GALLERY) == []


def test_non_object_items_are_skipped():
    storage = MemoryStorage({Table.GALLERY.storage_key: b'[1, "two", {"id": "a"}]'})
    s = LocalStore(storage)
    assert s.read(Table.GALLERY) == [{"id": "a"}]


def test_insert_goes_to_front(store):
    store.insert(Table.SLIDER_IMAGES, {"id": "new", "image": "x", "caption": "y"})
    assert store.read(Table.SLIDER_IMAGES)[0]["id"] == "new"


def test_update_merges_and_keeps_position(store):
    records = store.read(Table.SERVICES)
    target = records[1]

    matched = store.update(Table.SERVICES, target["id"], {"title": "Edging"})

    assert matched == 1
    after = store.read(Table.SERVICES)
    assert after[1]["title"] == "Edging"
    assert after[1]["description"] == target["description"]
    assert [r["id"] for r in after] == [r["id"] for r in records]


def test_update_missing_id_changes_nothing(store, storage):
    before = storage.get(Table.SERVICES.storage_key)
    assert store.update(Table.SERVICES, "missing", {"title": "x"}) == 0
    assert storage.get(Table.SERVICES.storage_key) == before


def test_delete_keeps_order_of_remaining(store):
    ids = [r["id"] for r in store.read(Table.TESTIMONIALS)]

    assert store.delete(Table.TESTIMONIALS, ids[1]) == 1
    assert [r["id"] for r in store.read(Table.TESTIMONIALS)] == [ids[0], ids[2]]


def test_find_matches_all_fields(store):
    assert store.find(Table.ADMIN_CREDENTIALS, username="admin123", password="admin123")
    assert store.find(Table.ADMIN_CREDENTIALS, username="admin123", password="Admin123") is None

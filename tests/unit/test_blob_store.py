"""Tests for the blob-value storage strategy."""

from datetime import datetime, timedelta

import pytest
from sqlalchemy import text

from customvalues import CustomValuesDB
from customvalues.core.compat import UTC
from customvalues.exceptions import DeserializationError, NotFoundError, SerializationError
from customvalues.storage.blob import BlobValueStore


class TestCreate:
    def test_copies_initial_values(self, blob_store: BlobValueStore) -> None:
        initial = {"Name": "Khalid"}
        entity = blob_store.create(initial)
        initial["Name"] = "Changed"
        assert entity.values == {"Name": "Khalid"}

    def test_defaults(self, blob_store: BlobValueStore) -> None:
        before = datetime.now(UTC)
        entity = blob_store.create()
        assert entity.id is None
        assert entity.values == {}
        assert before <= entity.created_at <= datetime.now(UTC)

    def test_no_validation_until_save(self, blob_store: BlobValueStore) -> None:
        """Bad values are accepted in memory and rejected by the codec on write."""
        entity = blob_store.create({"count": 3})  # type: ignore[dict-item]
        with pytest.raises(SerializationError):
            blob_store.save(entity)


class TestSaveAndLoad:
    def test_example_scenario(self, blob_store: BlobValueStore) -> None:
        entity = blob_store.create({"Name": "Khalid", "Status": "Awesome"})
        blob_store.save(entity)

        latest = blob_store.load_latest()
        assert latest.values == {"Name": "Khalid", "Status": "Awesome"}

    def test_save_assigns_id(self, blob_store: BlobValueStore) -> None:
        entity = blob_store.save(blob_store.create({"a": "1"}))
        assert entity.id is not None

    def test_keys_stay_case_sensitive(self, blob_store: BlobValueStore) -> None:
        blob_store.save(blob_store.create({"name": "lower", "Name": "upper"}))
        assert blob_store.load_latest().values == {"name": "lower", "Name": "upper"}

    def test_latest_wins(self, blob_store: BlobValueStore) -> None:
        base = datetime(2024, 1, 1, tzinfo=UTC)
        # Saved out of order so insertion order cannot stand in for created_at
        for offset, label in [(1, "middle"), (2, "newest"), (0, "oldest")]:
            entity = blob_store.create({"label": label})
            entity.created_at = base + timedelta(days=offset)
            blob_store.save(entity)

        assert blob_store.load_latest().values == {"label": "newest"}

    def test_equal_timestamps_prefer_highest_id(self, blob_store: BlobValueStore) -> None:
        stamp = datetime(2024, 1, 1, tzinfo=UTC)
        first = blob_store.create({"n": "1"})
        second = blob_store.create({"n": "2"})
        first.created_at = second.created_at = stamp
        blob_store.save(first)
        blob_store.save(second)

        assert blob_store.load_latest().id == second.id

    def test_load_latest_empty(self, blob_store: BlobValueStore) -> None:
        with pytest.raises(NotFoundError) as exc_info:
            blob_store.load_latest()
        assert exc_info.value.entity_name == "BlobEntity"

    def test_in_place_mutation_is_saved(self, blob_store: BlobValueStore) -> None:
        entity = blob_store.save(blob_store.create({"Status": "Awesome"}))
        entity.values["Status"] = "Changed"
        entity.values["New"] = "Key"
        blob_store.save(entity)

        assert blob_store.get(entity.id).values == {"Status": "Changed", "New": "Key"}

    def test_reassignment_is_saved(self, blob_store: BlobValueStore) -> None:
        entity = blob_store.save(blob_store.create({"Status": "Awesome"}))
        entity.values = {"Only": "This"}
        blob_store.save(entity)

        assert blob_store.get(entity.id).values == {"Only": "This"}


class TestErrors:
    def test_serialization_error_is_not_wrapped(self, blob_store: BlobValueStore) -> None:
        with pytest.raises(SerializationError) as exc_info:
            blob_store.save(blob_store.create({"broken": "\ud800"}))
        assert exc_info.value.context["codec"] == "json"

    def test_failed_save_leaves_store_usable(self, blob_store: BlobValueStore) -> None:
        with pytest.raises(SerializationError):
            blob_store.save(blob_store.create({"count": 3}))  # type: ignore[dict-item]

        blob_store.save(blob_store.create({"ok": "yes"}))
        assert blob_store.count() == 1
        assert blob_store.load_latest().values == {"ok": "yes"}

    def test_corrupt_column_aborts_read(self, memory_db: CustomValuesDB) -> None:
        memory_db.blobs.save(memory_db.blobs.create({"Name": "Khalid"}))
        with memory_db.gateway.connection.engine.begin() as conn:
            conn.execute(text('UPDATE cv_blob_entities SET "values" = :v'), {"v": "not json"})

        with pytest.raises(DeserializationError):
            memory_db.blobs.load_latest()

    def test_wrong_shape_aborts_read(self, memory_db: CustomValuesDB) -> None:
        memory_db.blobs.save(memory_db.blobs.create({"Name": "Khalid"}))
        with memory_db.gateway.connection.engine.begin() as conn:
            conn.execute(text('UPDATE cv_blob_entities SET "values" = :v'), {"v": '{"n": 1}'})

        with pytest.raises(DeserializationError):
            memory_db.blobs.load_latest()


class TestLookupAndDelete:
    def test_get_missing(self, blob_store: BlobValueStore) -> None:
        with pytest.raises(NotFoundError) as exc_info:
            blob_store.get(999)
        assert exc_info.value.entity_id == 999

    def test_list_recent_newest_first(self, blob_store: BlobValueStore) -> None:
        base = datetime(2024, 1, 1, tzinfo=UTC)
        for day in range(3):
            entity = blob_store.create({"day": str(day)})
            entity.created_at = base + timedelta(days=day)
            blob_store.save(entity)

        assert [e.values["day"] for e in blob_store.list_recent()] == ["2", "1", "0"]
        assert len(blob_store.list_recent(limit=2)) == 2

    def test_delete(self, blob_store: BlobValueStore) -> None:
        keep = blob_store.save(blob_store.create({"keep": "me"}))
        drop = blob_store.save(blob_store.create({"drop": "me"}))

        blob_store.delete(drop)

        assert blob_store.count() == 1
        assert blob_store.get(keep.id).values == {"keep": "me"}
        with pytest.raises(NotFoundError):
            blob_store.get(drop.id)

    def test_delete_by_id(self, blob_store: BlobValueStore) -> None:
        entity = blob_store.save(blob_store.create({"a": "b"}))
        blob_store.delete(entity.id)
        assert blob_store.count() == 0

    def test_delete_missing(self, blob_store: BlobValueStore) -> None:
        with pytest.raises(NotFoundError):
            blob_store.delete(42)

    def test_delete_unsaved(self, blob_store: BlobValueStore) -> None:
        with pytest.raises(NotFoundError):
            blob_store.delete(blob_store.create())

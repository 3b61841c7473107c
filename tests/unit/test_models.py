"""Tests for ORM models and their serialization."""

from datetime import datetime

from customvalues.core.compat import UTC
from customvalues.exceptions import NotFoundError, PersistenceError
from customvalues.schema.models import BlobEntity, InvertedEntity, ValueRow


class TestBlobEntity:
    def test_created_at_set_on_construction(self):
        entity = BlobEntity()
        assert entity.created_at is not None
        assert entity.created_at.tzinfo is not None

    def test_explicit_created_at_kept(self):
        stamp = datetime(2022, 4, 21, tzinfo=UTC)
        assert BlobEntity(created_at=stamp).created_at == stamp

    def test_to_dict(self):
        stamp = datetime(2022, 4, 21, tzinfo=UTC)
        entity = BlobEntity(values={"Name": "Khalid"}, created_at=stamp)
        assert entity.to_dict() == {
            "id": None,
            "created_at": stamp.isoformat(),
            "values": {"Name": "Khalid"},
        }


class TestInvertedEntity:
    def test_to_dict(self):
        entity = InvertedEntity().add_value("Name", "Khalid")
        data = entity.to_dict()
        assert data["values"] == [
            {"id": None, "parent_id": None, "name": "Name", "value": "Khalid"}
        ]

    def test_add_value_folds_with_lower(self):
        entity = InvertedEntity().add_value("STRASSE", "a").add_value("straße", "b")
        assert [(v.name, v.value) for v in entity.values] == [("STRASSE", "a"), ("straße", "b")]
        assert entity.get_value("strasse") == "a"

        entity.add_value("Strasse", "c")
        assert len(entity.values) == 2
        assert entity.get_value("STRASSE") == "c"

    def test_rows_link_to_parent(self):
        entity = InvertedEntity().add_value("Name", "Khalid")
        assert isinstance(entity.values[0], ValueRow)
        assert entity.values[0].parent is entity

    def test_repr(self):
        assert "2 rows" in repr(InvertedEntity().add_value("a", "1").add_value("b", "2"))


class TestErrors:
    def test_not_found_latest_message(self):
        error = NotFoundError("BlobEntity")
        assert "No BlobEntity rows exist yet" in str(error)
        assert error.context == {"entity_name": "BlobEntity", "entity_id": None}

    def test_not_found_by_id_message(self):
        assert str(NotFoundError("InvertedEntity", 7)) == "InvertedEntity '7' not found."

    def test_persistence_error_to_dict(self):
        error = PersistenceError("boom", {"statement": "INSERT"})
        assert error.to_dict() == {
            "error": "PersistenceError",
            "message": "boom",
            "context": {"statement": "INSERT"},
        }

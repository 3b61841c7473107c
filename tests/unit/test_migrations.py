"""Tests for schema migrations."""

from collections.abc import Generator

import pytest
from sqlalchemy import Engine, create_engine, inspect

from customvalues.exceptions import PersistenceError
from customvalues.schema import migrations
from customvalues.schema.migrations import (
    CURRENT_VERSION,
    MIGRATIONS,
    get_schema_version,
    index_exists,
    run_migrations,
)


@pytest.fixture
def engine() -> Generator[Engine, None, None]:
    engine = create_engine("sqlite:///:memory:")
    yield engine
    engine.dispose()


class TestRunMigrations:
    def test_fresh_database_is_version_zero(self, engine: Engine) -> None:
        assert get_schema_version(engine) == 0

    def test_applies_all_migrations(self, engine: Engine) -> None:
        applied = run_migrations(engine)

        assert len(applied) == len(MIGRATIONS)
        assert applied[0].startswith("v1:")
        assert get_schema_version(engine) == CURRENT_VERSION

    def test_is_idempotent(self, engine: Engine) -> None:
        run_migrations(engine)
        assert run_migrations(engine) == []
        assert get_schema_version(engine) == CURRENT_VERSION

    def test_creates_tables(self, engine: Engine) -> None:
        run_migrations(engine)
        tables = set(inspect(engine).get_table_names())
        assert {
            "cv_schema_version",
            "cv_blob_entities",
            "cv_inverted_entities",
            "cv_value_rows",
        } <= tables


class TestValueRowSchema:
    """Child table layout: FK with cascade, plain index, no uniqueness."""

    def test_foreign_key_cascades(self, engine: Engine) -> None:
        run_migrations(engine)
        (fk,) = inspect(engine).get_foreign_keys("cv_value_rows")

        assert fk["referred_table"] == "cv_inverted_entities"
        assert fk["constrained_columns"] == ["parent_id"]
        assert fk["options"].get("ondelete") == "CASCADE"

    def test_parent_index_is_not_unique(self, engine: Engine) -> None:
        run_migrations(engine)
        assert index_exists(engine, "cv_value_rows", "ix_cv_value_rows_parent_id")

        indexes = inspect(engine).get_indexes("cv_value_rows")
        assert not any(idx["unique"] for idx in indexes)

    def test_index_check_on_missing_table(self, engine: Engine) -> None:
        assert index_exists(engine, "cv_value_rows", "ix_cv_value_rows_parent_id") is False

    def test_missing_index_is_persistence_error(
        self, engine: Engine, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr(migrations, "index_exists", lambda *args: False)

        with pytest.raises(PersistenceError, match="ix_cv_value_rows_parent_id"):
            run_migrations(engine)
        assert get_schema_version(engine) == 0

"""Tests for index declarations and their PostgreSQL DDL."""

import pytest

from pgdocstore.exceptions import InvalidArgumentError, InvalidFieldError, UnsupportedIndexError
from pgdocstore.index import (
    Column,
    FieldIndex,
    Index,
    MetadataColumnIndex,
    MultiFieldIndex,
    RawSqlIndex,
    index_from_dict,
)
from pgdocstore.querydsl.compilers.index import PostgresIndexCompiler, postgres_index

TABLE = "em_ds_animals"


class PartialIndex(Index):
    pass


class TestDeclarations:
    def test_field_index_defaults(self):
        index = FieldIndex.for_field("name")
        assert index.sort == "ASC"
        assert index.unique is False
        assert index.name is None

    def test_named_field_index(self):
        index = FieldIndex.named_index_for_field("idx_name", "name", "desc", True)
        assert (index.name, index.field, index.sort, index.unique) == ("idx_name", "name", "DESC", True)

    def test_multi_field_index_accepts_names(self):
        index = MultiFieldIndex.for_fields(["name", FieldIndex("age", "DESC")], unique=True)
        assert [f.field for f in index.field_indexes] == ["name", "age"]
        assert [f.sort for f in index.field_indexes] == ["ASC", "DESC"]

    def test_multi_field_index_needs_fields(self):
        with pytest.raises(InvalidArgumentError):
            MultiFieldIndex([])

    def test_index_name_must_be_identifier(self):
        with pytest.raises(InvalidFieldError):
            FieldIndex("name", name="drop table;")

    def test_column_type_rejects_statement_separator(self):
        with pytest.raises(InvalidArgumentError):
            Column("version", "INT; DROP TABLE x")

    def test_metadata_index_needs_columns(self):
        with pytest.raises(InvalidArgumentError):
            MetadataColumnIndex(FieldIndex("metadata.version"))

    def test_metadata_index_name_comes_from_wrapped_index(self):
        index = MetadataColumnIndex(FieldIndex("metadata.version", name="idx_version"), Column("version", "INT"))
        assert index.name == "idx_version"


class TestDictRoundTrip:
    @pytest.mark.parametrize(
        "index",
        [
            FieldIndex("name", "DESC", True, "idx_name"),
            MultiFieldIndex(["name", FieldIndex("age", "DESC")], True, "idx_multi"),
            RawSqlIndex("CREATE INDEX idx_raw ON em_ds_animals ((doc->'x'))", "idx_raw"),
            MetadataColumnIndex(
                MultiFieldIndex(["metadata.version", "metadata.kind"], name="idx_meta"),
                Column("version", "INT"),
                Column("kind", "VARCHAR(20)"),
            ),
        ],
    )
    def test_round_trip(self, index):
        assert index_from_dict(index.to_dict()) == index

    def test_missing_key(self):
        with pytest.raises(InvalidArgumentError) as exc:
            index_from_dict({"type": "field"})
        assert exc.value.details["key"] == "field"

    def test_missing_type(self):
        with pytest.raises(InvalidArgumentError):
            index_from_dict({"field": "name"})

    def test_missing_column_key(self):
        with pytest.raises(InvalidArgumentError):
            index_from_dict({"type": "metadata_column", "index": {"type": "field", "field": "x"}, "columns": [{}]})

    def test_unknown_type(self):
        with pytest.raises(UnsupportedIndexError):
            index_from_dict({"type": "gin"})


class TestCreateStatements:
    def test_field_index(self):
        assert postgres_index.create_statements(TABLE, FieldIndex("name")) == [
            "CREATE INDEX ON em_ds_animals ((doc->'name'))"
        ]

    def test_unique_desc_named_field_index(self):
        index = FieldIndex.named_index_for_field("idx_age", "character.age", "DESC", unique=True)
        assert postgres_index.create_statements(TABLE, index) == [
            "CREATE UNIQUE INDEX idx_age ON em_ds_animals ((doc->'character'->'age') DESC)"
        ]

    def test_multi_field_index(self):
        index = MultiFieldIndex([FieldIndex("name"), FieldIndex("age", "DESC")], unique=True)
        assert postgres_index.create_statements(TABLE, index) == [
            "CREATE UNIQUE INDEX ON em_ds_animals ((doc->'name'), (doc->'age') DESC)"
        ]

    def test_raw_sql_passthrough(self):
        sql = "CREATE INDEX idx_gin ON em_ds_animals USING gin (doc)"
        assert postgres_index.create_statements(TABLE, RawSqlIndex(sql, "idx_gin")) == [sql]

    def test_metadata_column_index_adds_columns_first(self):
        index = MetadataColumnIndex(
            FieldIndex("metadata.version", name="idx_version"),
            Column("version", "INT"),
            Column("kind", "TEXT"),
        )
        assert postgres_index.create_statements(TABLE, index) == [
            "ALTER TABLE em_ds_animals ADD COLUMN version INT, ADD COLUMN kind TEXT",
            "CREATE INDEX idx_version ON em_ds_animals ((version))",
        ]

    def test_metadata_paths_resolve_to_columns_when_enabled(self):
        compiler = PostgresIndexCompiler(use_metadata_columns=True)
        assert compiler.create_statements(TABLE, FieldIndex("metadata.version")) == [
            "CREATE INDEX ON em_ds_animals ((version))"
        ]

    def test_unsupported_index(self):
        with pytest.raises(UnsupportedIndexError):
            postgres_index.create_statements(TABLE, PartialIndex())


class TestDropStatements:
    def test_drop_by_name(self):
        assert postgres_index.drop_statements(TABLE, "public", "idx_name") == ["DROP INDEX public.idx_name"]

    def test_drop_by_declaration(self):
        index = FieldIndex("name", name="idx_name")
        assert postgres_index.drop_statements(TABLE, "public", index) == ["DROP INDEX public.idx_name"]

    def test_drop_metadata_index_drops_columns(self):
        index = MetadataColumnIndex(
            FieldIndex("metadata.version", name="idx_version"), Column("version", "INT"), Column("kind", "TEXT")
        )
        assert postgres_index.drop_statements("app.em_ds_animals", "app", index) == [
            "DROP INDEX app.idx_version",
            "ALTER TABLE app.em_ds_animals DROP COLUMN version, DROP COLUMN kind",
        ]

    def test_unnamed_index_cannot_be_dropped(self):
        with pytest.raises(InvalidArgumentError):
            postgres_index.drop_statements(TABLE, "public", FieldIndex("name"))

    def test_invalid_name_rejected(self):
        with pytest.raises(InvalidFieldError):
            postgres_index.drop_statements(TABLE, "public", "idx; DROP TABLE x")

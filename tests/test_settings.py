"""Tests for configuration loading."""

import pytest

from pgdocstore.dbs.postgres import PostgresDocumentStore
from pgdocstore.settings import DocStoreSettings


def test_defaults(monkeypatch):
    for key in ("DOCSTORE_TABLE_PREFIX", "DOCSTORE_TRANSACTIONAL", "DOCSTORE_USE_METADATA_COLUMNS"):
        monkeypatch.delenv(key, raising=False)
    config = DocStoreSettings(_env_file=None)
    assert config.DOCSTORE_TABLE_PREFIX == "em_ds_"
    assert config.DOCSTORE_DOC_ID_SCHEMA == "UUID NOT NULL"
    assert config.DOCSTORE_TRANSACTIONAL is True
    assert config.DOCSTORE_USE_METADATA_COLUMNS is False
    assert config.DOCSTORE_CURSOR_ITERSIZE == 2000


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("DOCSTORE_TABLE_PREFIX", "app_")
    monkeypatch.setenv("DOCSTORE_TRANSACTIONAL", "false")
    monkeypatch.setenv("DOCSTORE_CURSOR_ITERSIZE", "50")
    config = DocStoreSettings(_env_file=None)
    assert config.DOCSTORE_TABLE_PREFIX == "app_"
    assert config.DOCSTORE_TRANSACTIONAL is False
    assert config.DOCSTORE_CURSOR_ITERSIZE == 50


def test_unknown_keys_are_ignored(monkeypatch, tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("UNRELATED_KEY=1\nPG_DBNAME=events\n")
    monkeypatch.delenv("PG_DBNAME", raising=False)
    config = DocStoreSettings(_env_file=env_file)
    assert config.PG_DBNAME == "events"


def test_store_reads_settings(monkeypatch, fake_conn):
    from pgdocstore.settings import settings

    monkeypatch.setattr(settings, "DOCSTORE_TABLE_PREFIX", "app_")
    monkeypatch.setattr(settings, "DOCSTORE_USE_METADATA_COLUMNS", True)
    store = PostgresDocumentStore(connection=fake_conn)
    assert store.table_prefix == "app_"
    assert store.use_metadata_columns is True
    assert store.filter_compiler.use_metadata_columns is True


@pytest.mark.parametrize("prefix", ["", "custom_"])
def test_constructor_overrides_settings(fake_conn, prefix):
    store = PostgresDocumentStore(connection=fake_conn, table_prefix=prefix, transactional=False)
    assert store.table_prefix == prefix
    assert store.transactional is False

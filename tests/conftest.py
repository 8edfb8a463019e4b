"""Pytest configuration and fixtures for document store tests."""

import os

import pytest
from dotenv import load_dotenv
from mock.fake_pg import FakeConnection

from pgdocstore.dbs.postgres import PostgresDocumentStore

# Load environment variables
load_dotenv()


@pytest.fixture
def fake_conn():
    """Fake psycopg2 connection recording statements."""
    return FakeConnection()


@pytest.fixture
def store(fake_conn):
    """Transactional store on the fake connection, metadata columns off."""
    return PostgresDocumentStore(
        connection=fake_conn,
        table_prefix="em_ds_",
        doc_id_schema="UUID NOT NULL",
        transactional=True,
        use_metadata_columns=False,
    )


@pytest.fixture
def metadata_store(fake_conn):
    """Transactional store on the fake connection, metadata columns on."""
    return PostgresDocumentStore(
        connection=fake_conn,
        table_prefix="em_ds_",
        transactional=True,
        use_metadata_columns=True,
    )


@pytest.fixture(scope="session")
def sample_docs():
    """Documents used by ordering and pagination scenarios."""
    return {
        "b0a2d5b1-5d7a-4bd1-9f4f-1b2f1c2d3e01": {"name": "Jack", "age": 5, "animal": "cat"},
        "b0a2d5b1-5d7a-4bd1-9f4f-1b2f1c2d3e02": {"name": "Tiger", "age": 5, "animal": "dog"},
        "b0a2d5b1-5d7a-4bd1-9f4f-1b2f1c2d3e03": {"name": "Gini", "age": 3, "animal": "cat"},
    }


@pytest.fixture(scope="session")
def postgres_credentials():
    """PostgreSQL credentials from environment."""
    host = os.getenv("PG_HOST")
    if not host:
        pytest.skip("PG_HOST not set")
    return {
        "host": host,
        "port": os.getenv("PG_PORT", "5432"),
        "dbname": os.getenv("PG_DBNAME", "docstore"),
        "user": os.getenv("PG_USER", "postgres"),
        "password": os.getenv("PG_PASSWORD", "postgres"),
    }

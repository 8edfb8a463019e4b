"""Test doubles for the PostgreSQL driver."""

"""Integration tests against a real PostgreSQL server.

These tests are skipped unless PG_HOST is set and the server is reachable.
"""

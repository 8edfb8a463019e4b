"""Utility functions for pgdocstore.

Shared helpers used by the compilers and the PostgreSQL store.
"""

import json
import re
from typing import Any, Dict, Mapping, Tuple

from .constants import DEFAULT_SCHEMA, SORT_DIRECTION_MAP
from .exceptions import InvalidArgumentError, InvalidFieldError

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


# ===========================================================================
# JSON helpers
# ===========================================================================


def json_dumps(value: Any) -> str:
    """Serialize a value the way documents are stored in the JSONB column."""
    return json.dumps(value, ensure_ascii=False)


def decode_json(value: Any) -> Any:
    """Decode a JSON value coming back from the driver.

    psycopg2 already decodes ``jsonb`` columns; text-cast JSON expressions
    arrive as ``str`` and are decoded here. ``None`` stays ``None``.
    """
    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8")
    if isinstance(value, str):
        return json.loads(value)
    return value


def ensure_document(doc: Any) -> Dict[str, Any]:
    """Return a plain dict copy of a document mapping.

    An empty document is always the empty object ``{}``, never a list.
    """
    if not isinstance(doc, Mapping):
        raise InvalidFieldError(
            "Document must be a mapping of string keys", expected_type="dict", got=type(doc).__name__
        )
    return dict(doc)


# ===========================================================================
# SQL naming helpers
# ===========================================================================


def is_identifier(name: str) -> bool:
    return bool(_IDENTIFIER_RE.match(name or ""))


def ensure_identifier(name: str, **context: Any) -> str:
    """Validate a name that is embedded into SQL as a bare identifier."""
    if not is_identifier(name):
        raise InvalidFieldError("Invalid SQL identifier", field=name, **context)
    return name


def quote_literal(value: str) -> str:
    """Quote a string as a SQL literal, doubling embedded single quotes."""
    return "'" + str(value).replace("'", "''") + "'"


def quote_alias(alias: str) -> str:
    """Quote a column alias with double quotes."""
    return '"' + alias.replace('"', '""') + '"'


def escape_like(value: str) -> str:
    """Escape LIKE wildcards so the value matches literally."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def normalize_direction(direction: str) -> str:
    """Normalize a sort direction to ``ASC`` or ``DESC``."""
    normalized = SORT_DIRECTION_MAP.get(str(direction).lower())
    if normalized is None:
        raise InvalidArgumentError("Invalid sort direction", direction=direction, expected="ASC|DESC")
    return normalized


def split_collection_name(collection_name: str) -> Tuple[str, str]:
    """Split ``schema.collection`` into ``(schema, collection)``.

    Names without a separator live in the default schema. Both parts are
    lower-cased to match PostgreSQL identifier folding.
    """
    if "." in collection_name:
        schema, table = collection_name.split(".", 1)
        return schema.lower(), table.lower()
    return DEFAULT_SCHEMA, collection_name.lower()


def table_name(collection_name: str, table_prefix: str) -> str:
    """Physical (possibly schema qualified) table name of a collection."""
    if "." in collection_name:
        schema, table = collection_name.split(".", 1)
        return f"{schema}.{table_prefix}{table}".lower()
    return f"{table_prefix}{collection_name}".lower()


def bare_table_name(collection_name: str, table_prefix: str) -> str:
    """Physical table name without schema, as listed in information_schema."""
    _, table = split_collection_name(collection_name)
    return f"{table_prefix}{table}".lower()


def schema_name(collection_name: str) -> str:
    return split_collection_name(collection_name)[0]


def validate_page_value(value: Any, name: str) -> int | None:
    """Validate ``skip``/``limit`` values."""
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise InvalidArgumentError(f"'{name}' must be a non-negative integer", **{name: value})
    return value

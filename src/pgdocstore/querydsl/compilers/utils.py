"""Compiler utility functions.

Provides the path resolver that turns dotted field paths into PostgreSQL
JSONB accessors (or promoted metadata columns) and the value preparation
rules shared by the filter, order, projection and index compilers.
"""

from typing import Any, List, Tuple

from ...constants import DOC_COLUMN, METADATA_PREFIX
from ...exceptions import InvalidArgumentError
from ...utils import ensure_identifier, json_dumps, quote_literal

__all__ = ("PathResolver",)


class PathResolver:
    """Resolve dotted document paths to SQL expressions.

    - `a.b.c` becomes `doc->'a'->'b'->'c'` (JSONB typed).
    - For text comparisons the last hop uses `->>`: `doc->'a'->'b'->>'c'`.
    - With metadata columns enabled, `metadata.version` becomes the bare
      physical column `version` and values are bound natively.
    """

    def __init__(self, use_metadata_columns: bool = False, doc_column: str = DOC_COLUMN) -> None:
        self.use_metadata_columns = use_metadata_columns
        self.doc_column = doc_column

    def is_metadata_column(self, prop: str) -> bool:
        return self.use_metadata_columns and prop.startswith(METADATA_PREFIX)

    def column_name(self, prop: str) -> str:
        """Physical column name of a promoted `metadata.<name>` path."""
        return ensure_identifier(prop[len(METADATA_PREFIX) :], path=prop)

    def segments(self, prop: str) -> List[str]:
        if not prop:
            raise InvalidArgumentError("Field path must not be empty")
        parts = prop.split(".")
        if any(part == "" for part in parts):
            raise InvalidArgumentError("Field path contains an empty segment", path=prop)
        return parts

    def resolve(self, prop: str) -> str:
        """JSONB accessor for `prop`, or the column for promoted metadata."""
        if self.is_metadata_column(prop):
            return self.column_name(prop)
        hops = "".join(f"->{quote_literal(part)}" for part in self.segments(prop))
        return f"{self.doc_column}{hops}"

    def resolve_text(self, prop: str) -> str:
        """Text accessor for `prop`: the last hop extracts text with `->>`."""
        if self.is_metadata_column(prop):
            return f"{self.column_name(prop)}::text"
        parent, last = self.split_parent(prop)
        return f"{parent}->>{quote_literal(last)}"

    def split_parent(self, prop: str) -> Tuple[str, str]:
        """Return `(parent accessor, last key)` for a JSON path."""
        parts = self.segments(prop)
        parent = self.doc_column + "".join(f"->{quote_literal(part)}" for part in parts[:-1])
        return parent, parts[-1]

    def should_json_encode(self, prop: str) -> bool:
        return not self.is_metadata_column(prop)

    def prepare_value(self, value: Any, prop: str) -> Any:
        """JSON-encode `value` unless it targets a promoted metadata column."""
        if not self.should_json_encode(prop):
            return value
        return json_dumps(value)

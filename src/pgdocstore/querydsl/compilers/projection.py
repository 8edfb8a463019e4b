"""PostgreSQL projection (partial select) compiler.

Forward: a `PartialSelect` becomes a SELECT list. The document id is always
selected first under a reserved alias, then one expression per entry under a
positional column alias, so caller aliases never reach the SQL text. JSON
paths are cast to text so values are decoded uniformly; promoted metadata
columns are selected as-is.

Inverse: a result row is reassembled into a nested document. Dotted aliases
build nested objects, `$merge` entries splice an object into the top level,
and missing source fields come back as `None` instead of being omitted.
"""

from typing import Any, Dict, List, Mapping, Tuple

from ...constants import ID_COLUMN, PARTIAL_SELECT_DOC_ID, PARTIAL_SELECT_FIELD, PARTIAL_SELECT_MERGE
from ...exceptions import ConfigurationError, InvalidFieldError
from ...utils import decode_json, quote_alias
from ..select import PartialSelect
from .utils import PathResolver

__all__ = (
    "PostgresProjectionCompiler",
    "postgres_projection",
)


class PostgresProjectionCompiler:
    def __init__(self, use_metadata_columns: bool = False) -> None:
        self.use_metadata_columns = use_metadata_columns
        self.paths = PathResolver(use_metadata_columns)

    def compile(self, partial_select: PartialSelect) -> str:
        """Build the SELECT list for `partial_select`.

        Raises:
            ConfigurationError: If a caller alias collides with a reserved alias
        """
        parts = [f"{ID_COLUMN} AS {quote_alias(PARTIAL_SELECT_DOC_ID)}"]
        for _, field, column_alias in self._columns(partial_select):
            parts.append(f"{self._select_expr(field)} AS {quote_alias(column_alias)}")
        return ", ".join(parts)

    def doc_id(self, row: Mapping[str, Any]) -> Any:
        return row[PARTIAL_SELECT_DOC_ID]

    def reassemble(self, partial_select: PartialSelect, row: Mapping[str, Any]) -> Dict[str, Any]:
        """Rebuild the partial document described by `partial_select` from `row`."""
        doc: Dict[str, Any] = {}
        for alias, field, column_alias in self._columns(partial_select):
            value = row.get(column_alias)
            if not self.paths.is_metadata_column(field):
                value = decode_json(value)

            if alias == PartialSelect.MERGE_ALIAS:
                if value is None:
                    continue
                if not isinstance(value, dict):
                    raise InvalidFieldError(
                        "Merge not possible, selected value is not an object", field=field, value=value
                    )
                doc.update(value)
                continue

            self._set_path(doc, alias.split("."), value)
        return doc

    def _columns(self, partial_select: PartialSelect) -> List[Tuple[str, str, str]]:
        columns: List[Tuple[str, str, str]] = []
        for position, (alias, field) in enumerate(partial_select.items()):
            if alias == PARTIAL_SELECT_DOC_ID or alias.startswith((PARTIAL_SELECT_MERGE, PARTIAL_SELECT_FIELD)):
                raise ConfigurationError("Alias is reserved for internal use", alias=alias, field=field)
            if alias == PartialSelect.MERGE_ALIAS:
                columns.append((alias, field, f"{PARTIAL_SELECT_MERGE}{position}"))
            else:
                columns.append((alias, field, f"{PARTIAL_SELECT_FIELD}{position}"))
        return columns

    def _select_expr(self, field: str) -> str:
        if self.paths.is_metadata_column(field):
            return self.paths.resolve(field)
        return f"({self.paths.resolve(field)})::text"

    @staticmethod
    def _set_path(doc: Dict[str, Any], keys: List[str], value: Any) -> None:
        node = doc
        for key in keys[:-1]:
            child = node.get(key)
            if not isinstance(child, dict):
                child = {}
                node[key] = child
            node = child
        node[keys[-1]] = value


postgres_projection = PostgresProjectionCompiler()

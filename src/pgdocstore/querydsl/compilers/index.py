"""PostgreSQL index compiler.

Lowers index declarations into DDL statements. Field paths are resolved with
the same `PathResolver` the filter and order compilers use, so an index on
`character.age` covers exactly the expression a filter on `character.age`
produces. Metadata-column indexes always address promoted columns, whatever
the store-wide metadata setting is.
"""

from typing import List, Optional, Union

from ...constants import SORT_DESC
from ...exceptions import InvalidArgumentError, UnsupportedIndexError
from ...index import FieldIndex, Index, MetadataColumnIndex, MultiFieldIndex, RawSqlIndex
from ...utils import ensure_identifier
from .utils import PathResolver

__all__ = (
    "PostgresIndexCompiler",
    "postgres_index",
)


class PostgresIndexCompiler:
    def __init__(self, use_metadata_columns: bool = False) -> None:
        self.use_metadata_columns = use_metadata_columns
        self.paths = PathResolver(use_metadata_columns)
        self._metadata_paths = PathResolver(True)

    def create_statements(self, table: str, index: Index) -> List[str]:
        """Statements that create `index` on `table`, in execution order.

        Raises:
            UnsupportedIndexError: If the declaration type is unknown
        """
        if isinstance(index, MetadataColumnIndex):
            add_columns = ", ".join(f"ADD COLUMN {column.sql}" for column in index.columns)
            return [f"ALTER TABLE {table} {add_columns}"] + self._create(table, index.index, self._metadata_paths)
        return self._create(table, index, self.paths)

    def drop_statements(self, table: str, schema: str, index: Union[Index, str]) -> List[str]:
        """Statements that drop `index` (and promoted columns it owns).

        Raises:
            InvalidArgumentError: If no index name can be resolved
        """
        name = self.index_name(index)
        if name is None:
            raise InvalidArgumentError(
                "Cannot drop an index without a name", index_type=type(index).__name__, table=table
            )

        statements = [f"DROP INDEX {schema}.{name}"]
        if isinstance(index, MetadataColumnIndex):
            drop_columns = ", ".join(f"DROP COLUMN {column.name}" for column in index.columns)
            statements.append(f"ALTER TABLE {table} {drop_columns}")
        return statements

    def index_name(self, index: Union[Index, str, None]) -> Optional[str]:
        if index is None:
            return None
        if isinstance(index, str):
            return ensure_identifier(index, kind="index name")
        return getattr(index, "name", None)

    def _create(self, table: str, index: Index, paths: PathResolver) -> List[str]:
        if isinstance(index, RawSqlIndex):
            return [index.sql]

        if isinstance(index, FieldIndex):
            parts = [self._field_part(index, paths)]
        elif isinstance(index, MultiFieldIndex):
            parts = [self._field_part(field_index, paths) for field_index in index.field_indexes]
        else:
            raise UnsupportedIndexError("Unsupported index type", index_type=type(index).__name__)

        kind = "UNIQUE INDEX" if index.unique else "INDEX"
        name = f" {index.name}" if index.name else ""
        return [f"CREATE {kind}{name} ON {table} ({', '.join(parts)})"]

    @staticmethod
    def _field_part(index: FieldIndex, paths: PathResolver) -> str:
        part = f"({paths.resolve(index.field)})"
        if index.sort == SORT_DESC:
            part += f" {SORT_DESC}"
        return part


postgres_index = PostgresIndexCompiler()

"""Document store on PostgreSQL JSONB.

This module provides the PostgreSQL implementation of the DocumentStore
interface. Each collection is one table with an `id` primary key and a JSONB
`doc` column; filters, order-by trees, partial selects and index declarations
are compiled by `pgdocstore.querydsl.compilers` into parameterized SQL.

Key Features:
    - Lazy connection initialization, or an injected psycopg2 connection
    - Scoped transactions around every mutation (commit, or rollback and re-raise)
    - Shallow-merge updates with `to_jsonb(doc) || patch`
    - Lazy reads streamed through server-side cursors
    - Optional promotion of the `metadata` sub-object to physical columns
"""

from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple, Union
from uuid import uuid4

import psycopg2
import psycopg2.extras

from pgdocstore.abc import DocumentStore
from pgdocstore.constants import DEFAULT_SCHEMA, DOC_COLUMN, ID_COLUMN, METADATA_KEY
from pgdocstore.exceptions import ConnectionError, InvalidFieldError, MissingConfigError
from pgdocstore.index import Index
from pgdocstore.logger import Logger
from pgdocstore.querydsl.compilers import (
    PostgresFilterCompiler,
    PostgresIndexCompiler,
    PostgresOrderByCompiler,
    PostgresProjectionCompiler,
)
from pgdocstore.querydsl.filters import Filter
from pgdocstore.querydsl.order import OrderBy
from pgdocstore.querydsl.select import PartialSelect
from pgdocstore.settings import settings as api_settings
from pgdocstore.types import Doc, DocWithId, Params
from pgdocstore.utils import (
    bare_table_name,
    decode_json,
    ensure_document,
    ensure_identifier,
    escape_like,
    json_dumps,
    split_collection_name,
    table_name,
    validate_page_value,
)


class PostgresDocumentStore(DocumentStore):
    """Document store backed by PostgreSQL JSONB tables.

    Attributes:
        table_prefix: Prefix of every physical collection table
        doc_id_schema: Column definition of the `id` column
        transactional: Whether mutations are wrapped in a commit/rollback scope.
            Disable it when the caller manages an ambient transaction.
        use_metadata_columns: Whether `metadata.<name>` addresses physical columns
        cursor_itersize: Rows fetched per round trip by lazy reads
    """

    _client: Any = None
    _cursor: Any = None

    def __init__(
        self,
        connection: Any = None,
        table_prefix: str | None = None,
        doc_id_schema: str | None = None,
        transactional: bool | None = None,
        use_metadata_columns: bool | None = None,
        cursor_itersize: int | None = None,
        logger: Logger | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(logger=logger, **kwargs)
        self._client = connection
        self.table_prefix = table_prefix if table_prefix is not None else api_settings.DOCSTORE_TABLE_PREFIX
        self.doc_id_schema = doc_id_schema or api_settings.DOCSTORE_DOC_ID_SCHEMA
        self.transactional = transactional if transactional is not None else api_settings.DOCSTORE_TRANSACTIONAL
        self.use_metadata_columns = (
            use_metadata_columns if use_metadata_columns is not None else api_settings.DOCSTORE_USE_METADATA_COLUMNS
        )
        self.cursor_itersize = cursor_itersize or api_settings.DOCSTORE_CURSOR_ITERSIZE

        self.filter_compiler = PostgresFilterCompiler(self.use_metadata_columns)
        self.order_by_compiler = PostgresOrderByCompiler(self.use_metadata_columns)
        self.projection_compiler = PostgresProjectionCompiler(self.use_metadata_columns)
        self.index_compiler = PostgresIndexCompiler(self.use_metadata_columns)

    @property
    def client(self) -> Any:
        """Lazily initialize and return the PostgreSQL connection.

        Returns:
            Active psycopg2 connection instance

        Raises:
            MissingConfigError: If PG_DBNAME is empty
            ConnectionError: If the connection cannot be established
        """
        if self._client is None:
            target_db = api_settings.PG_DBNAME
            if not target_db:
                raise MissingConfigError(
                    "PG_DBNAME is not set. Set it via environment variable or .env file.",
                    config_key="PG_DBNAME",
                )
            host = api_settings.PG_HOST or "localhost"
            port = api_settings.PG_PORT or "5432"
            user = api_settings.PG_USER or "postgres"
            try:
                self._client = psycopg2.connect(
                    dbname=target_db,
                    user=user,
                    password=api_settings.PG_PASSWORD,
                    host=host,
                    port=port,
                )
            except psycopg2.OperationalError as e:
                raise ConnectionError(
                    "PostgreSQL connection failed",
                    database=target_db,
                    host=host,
                    port=port,
                    user=user,
                    original_error=str(e),
                ) from e
            self.logger.message("PostgreSQL connection established (db=%s).", target_db)
        return self._client

    @property
    def cursor(self) -> Any:
        """Lazily initialize and return a RealDictCursor."""
        if self._cursor is None:
            self._cursor = self.client.cursor(cursor_factory=psycopg2.extras.RealDictCursor)
        return self._cursor

    def close(self) -> None:
        """Close the cached cursor and the connection."""
        if self._cursor is not None:
            self._cursor.close()
            self._cursor = None
        if self._client is not None:
            self._client.close()
            self._client = None

    # ------------------------------------------------------------------
    # Collection Management
    # ------------------------------------------------------------------

    def list_collections(self) -> List[str]:
        return self._collections_like(escape_like(self.table_prefix.lower()) + "%")

    def filter_collections_by_prefix(self, prefix: str) -> List[str]:
        if "." in prefix:
            schema, name_prefix = split_collection_name(prefix)
            pattern = escape_like(f"{self.table_prefix}{name_prefix}".lower()) + "%"
            return self._collections_like(pattern, schema)
        return self._collections_like(escape_like(f"{self.table_prefix}{prefix}".lower()) + "%")

    def has_collection(self, collection_name: str) -> bool:
        schema, _ = split_collection_name(collection_name)
        rows = self._fetch_all(
            "SELECT table_name FROM information_schema.tables "
            "WHERE table_schema = %(schema)s AND table_name = %(table)s",
            {"schema": schema, "table": bare_table_name(collection_name, self.table_prefix)},
        )
        return bool(rows)

    def add_collection(self, collection_name: str, *indexes: Index) -> None:
        """Create the collection table and its indexes in one transaction.

        Index declarations are compiled before anything is executed, so an
        invalid declaration leaves the database untouched.
        """
        table = table_name(collection_name, self.table_prefix)
        statements: List[str] = []
        if "." in collection_name:
            statements.append(f"CREATE SCHEMA IF NOT EXISTS {split_collection_name(collection_name)[0]}")
        statements.append(
            f"CREATE TABLE {table} ("
            f"{ID_COLUMN} {self.doc_id_schema}, "
            f"{DOC_COLUMN} JSONB NOT NULL, "
            f"PRIMARY KEY ({ID_COLUMN}))"
        )
        for index in indexes:
            statements.extend(self.index_compiler.create_statements(table, index))

        with self._transaction():
            for sql in statements:
                self._execute(sql)
        self.logger.message("Collection '%s' created with %d index(es).", collection_name, len(indexes))

    def drop_collection(self, collection_name: str) -> None:
        with self._transaction():
            self._execute(f"DROP TABLE {table_name(collection_name, self.table_prefix)}")
        self.logger.message("Collection '%s' dropped.", collection_name)

    def has_collection_index(self, collection_name: str, index_name: str) -> bool:
        schema, _ = split_collection_name(collection_name)
        rows = self._fetch_all(
            "SELECT indexname FROM pg_indexes "
            "WHERE schemaname = %(schema)s AND tablename = %(table)s AND indexname = %(index)s",
            {
                "schema": schema,
                "table": bare_table_name(collection_name, self.table_prefix),
                "index": index_name.lower(),
            },
        )
        return bool(rows)

    def add_collection_index(self, collection_name: str, index: Index) -> None:
        statements = self.index_compiler.create_statements(table_name(collection_name, self.table_prefix), index)
        with self._transaction():
            for sql in statements:
                self._execute(sql)
        self.logger.message("Index %s added to collection '%s'.", type(index).__name__, collection_name)

    def drop_collection_index(self, collection_name: str, index: Union[Index, str]) -> None:
        schema, _ = split_collection_name(collection_name)
        statements = self.index_compiler.drop_statements(
            table_name(collection_name, self.table_prefix), schema, index
        )
        with self._transaction():
            for sql in statements:
                self._execute(sql)
        self.logger.message(
            "Index '%s' dropped from collection '%s'.", self.index_compiler.index_name(index), collection_name
        )

    # ------------------------------------------------------------------
    # Document Mutations
    # ------------------------------------------------------------------

    def add_doc(self, collection_name: str, doc_id: str, doc: Doc) -> None:
        """Insert a document.

        Raises:
            InvalidFieldError: If `doc` is not a mapping
            psycopg2.IntegrityError: If the id or a unique-indexed field already exists
        """
        body, metadata = self._split_metadata(doc)
        columns = [ID_COLUMN, DOC_COLUMN]
        values = ["%(id)s", "%(doc)s"]
        params: Params = {"id": doc_id, "doc": json_dumps(body)}
        for column, param in self._metadata_params(metadata, params):
            columns.append(column)
            values.append(f"%({param})s")

        sql = (
            f"INSERT INTO {table_name(collection_name, self.table_prefix)} "
            f"({', '.join(columns)}) VALUES ({', '.join(values)})"
        )
        with self._transaction():
            self._execute(sql, params)
        self.logger.message("Added document '%s' to '%s'.", doc_id, collection_name)

    def update_doc(self, collection_name: str, doc_id: str, doc_or_subset: Doc) -> None:
        """Shallow-merge `doc_or_subset` into the stored document.

        Top level keys of the subset overwrite stored keys, other keys stay
        untouched. Updating a missing id affects no rows and is not an error.
        """
        params: Params = {"id": doc_id}
        set_clause = self._set_clause(doc_or_subset, params, merge=True)
        sql = f"UPDATE {table_name(collection_name, self.table_prefix)} SET {set_clause} WHERE {ID_COLUMN} = %(id)s"
        with self._transaction():
            self._execute(sql, params)
        self.logger.message("Updated document '%s' in '%s'.", doc_id, collection_name)

    def upsert_doc(self, collection_name: str, doc_id: str, doc_or_subset: Doc) -> None:
        # Read, then write: the two steps are not atomic under concurrent writers
        if self.get_doc(collection_name, doc_id) is not None:
            self.update_doc(collection_name, doc_id, doc_or_subset)
        else:
            self.add_doc(collection_name, doc_id, doc_or_subset)

    def replace_doc(self, collection_name: str, doc_id: str, doc: Doc) -> None:
        params: Params = {"id": doc_id}
        set_clause = self._set_clause(doc, params, merge=False)
        sql = f"UPDATE {table_name(collection_name, self.table_prefix)} SET {set_clause} WHERE {ID_COLUMN} = %(id)s"
        with self._transaction():
            self._execute(sql, params)
        self.logger.message("Replaced document '%s' in '%s'.", doc_id, collection_name)

    def update_many(self, collection_name: str, filter: Filter, set: Doc) -> None:
        self._write_many(collection_name, filter, set, merge=True)

    def replace_many(self, collection_name: str, filter: Filter, set: Doc) -> None:
        self._write_many(collection_name, filter, set, merge=False)

    def delete_doc(self, collection_name: str, doc_id: str) -> None:
        sql = f"DELETE FROM {table_name(collection_name, self.table_prefix)} WHERE {ID_COLUMN} = %(id)s"
        with self._transaction():
            self._execute(sql, {"id": doc_id})
        self.logger.message("Deleted document '%s' from '%s'.", doc_id, collection_name)

    def delete_many(self, collection_name: str, filter: Filter) -> None:
        where, params = self.filter_compiler.to_where(filter)
        sql = self._join(f"DELETE FROM {table_name(collection_name, self.table_prefix)}", where)
        with self._transaction():
            rowcount = self._execute(sql, params)
        self.logger.message("Deleted %s document(s) from '%s'.", rowcount, collection_name)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_doc(self, collection_name: str, doc_id: str) -> Optional[Dict[str, Any]]:
        rows = self._fetch_all(
            f"SELECT {DOC_COLUMN} FROM {table_name(collection_name, self.table_prefix)} "
            f"WHERE {ID_COLUMN} = %(id)s",
            {"id": doc_id},
        )
        if not rows:
            return None
        return decode_json(rows[0][DOC_COLUMN])

    def get_partial_doc(
        self, collection_name: str, partial_select: PartialSelect, doc_id: str
    ) -> Optional[Dict[str, Any]]:
        select = self.projection_compiler.compile(partial_select)
        rows = self._fetch_all(
            f"SELECT {select} FROM {table_name(collection_name, self.table_prefix)} WHERE {ID_COLUMN} = %(id)s",
            {"id": doc_id},
        )
        if not rows:
            return None
        return self.projection_compiler.reassemble(partial_select, rows[0])

    def filter_docs(
        self,
        collection_name: str,
        filter: Filter,
        skip: int | None = None,
        limit: int | None = None,
        order_by: OrderBy | None = None,
    ) -> Iterator[Dict[str, Any]]:
        """Lazily iterate the documents matching `filter`.

        The query is compiled immediately, so malformed filters raise here;
        rows are fetched on iteration through a server-side cursor that is
        closed once the iterator is exhausted or closed.
        """
        sql, params = self._select_query(collection_name, DOC_COLUMN, filter, skip, limit, order_by)
        return self._stream(sql, params, lambda row: decode_json(row[DOC_COLUMN]))

    def find_docs(
        self,
        collection_name: str,
        filter: Filter,
        skip: int | None = None,
        limit: int | None = None,
        order_by: OrderBy | None = None,
    ) -> Iterator[DocWithId]:
        sql, params = self._select_query(
            collection_name, f"{ID_COLUMN}, {DOC_COLUMN}", filter, skip, limit, order_by
        )
        return self._stream(sql, params, lambda row: (row[ID_COLUMN], decode_json(row[DOC_COLUMN])))

    def find_partial_docs(
        self,
        collection_name: str,
        partial_select: PartialSelect,
        filter: Filter,
        skip: int | None = None,
        limit: int | None = None,
        order_by: OrderBy | None = None,
    ) -> Iterator[DocWithId]:
        projection = self.projection_compiler
        sql, params = self._select_query(
            collection_name, projection.compile(partial_select), filter, skip, limit, order_by
        )
        return self._stream(
            sql, params, lambda row: (projection.doc_id(row), projection.reassemble(partial_select, row))
        )

    def filter_doc_ids(self, collection_name: str, filter: Filter) -> List[str]:
        where, params = self.filter_compiler.to_where(filter)
        sql = self._join(f"SELECT {ID_COLUMN} FROM {table_name(collection_name, self.table_prefix)}", where)
        return [row[ID_COLUMN] for row in self._fetch_all(sql, params)]

    def count_docs(self, collection_name: str, filter: Filter) -> int:
        where, params = self.filter_compiler.to_where(filter)
        sql = self._join(f"SELECT COUNT(*) AS count FROM {table_name(collection_name, self.table_prefix)}", where)
        rows = self._fetch_all(sql, params)
        return int(rows[0]["count"]) if rows else 0

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @contextmanager
    def _transaction(self) -> Iterator[None]:
        """Commit on success; roll back and re-raise on any error.

        Does nothing when the store is not transactional.
        """
        if not self.transactional:
            yield
            return
        try:
            yield
        except Exception:
            self.logger.warning("Rolling back transaction after error.")
            self.client.rollback()
            raise
        self.client.commit()

    def _execute(self, sql: str, params: Params | None = None) -> int:
        self.logger.sql(sql, params)
        self.cursor.execute(sql, params)
        return self.cursor.rowcount

    def _fetch_all(self, sql: str, params: Params | None = None) -> List[Dict[str, Any]]:
        try:
            self._execute(sql, params)
            return self.cursor.fetchall()
        except psycopg2.Error:
            # An aborted transaction would reject every later statement
            if self.transactional:
                self.client.rollback()
            raise

    def _stream(self, sql: str, params: Params, transform: Callable[[Dict[str, Any]], Any]) -> Iterator[Any]:
        self.logger.sql(sql, params)
        cursor = self.client.cursor(
            name=f"pgdocstore_{uuid4().hex}", cursor_factory=psycopg2.extras.RealDictCursor
        )
        cursor.itersize = self.cursor_itersize
        try:
            cursor.execute(sql, params)
            for row in cursor:
                yield transform(row)
        except psycopg2.Error:
            if self.transactional:
                self.client.rollback()
            raise
        finally:
            cursor.close()

    def _select_query(
        self,
        collection_name: str,
        select: str,
        filter: Filter,
        skip: int | None,
        limit: int | None,
        order_by: OrderBy | None,
    ) -> Tuple[str, Params]:
        skip = validate_page_value(skip, "skip")
        limit = validate_page_value(limit, "limit")
        where, params = self.filter_compiler.to_where(filter)

        parts = [
            f"SELECT {select} FROM {table_name(collection_name, self.table_prefix)}",
            where,
            self.order_by_compiler.to_order_by(order_by),
        ]
        if limit is not None:
            parts.append("LIMIT %(limit)s")
            params["limit"] = limit
        if skip is not None:
            parts.append("OFFSET %(offset)s")
            params["offset"] = skip
        return self._join(*parts), params

    def _write_many(self, collection_name: str, filter: Filter, set: Doc, merge: bool) -> None:
        where, params = self.filter_compiler.to_where(filter)
        set_clause = self._set_clause(set, params, merge=merge)
        sql = self._join(f"UPDATE {table_name(collection_name, self.table_prefix)} SET {set_clause}", where)
        with self._transaction():
            rowcount = self._execute(sql, params)
        self.logger.message(
            "%s %s document(s) in '%s'.", "Updated" if merge else "Replaced", rowcount, collection_name
        )

    def _set_clause(self, doc: Doc, params: Params, merge: bool) -> str:
        body, metadata = self._split_metadata(doc)
        params["doc"] = json_dumps(body)
        if merge:
            assignments = [f"{DOC_COLUMN} = (to_jsonb({DOC_COLUMN}) || CAST(%(doc)s AS JSONB))"]
        else:
            assignments = [f"{DOC_COLUMN} = %(doc)s"]
        for column, param in self._metadata_params(metadata, params):
            assignments.append(f"{column} = %({param})s")
        return ", ".join(assignments)

    def _split_metadata(self, doc: Doc) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        """Separate the promoted `metadata` sub-object from the JSON body."""
        body = ensure_document(doc)
        if not self.use_metadata_columns or METADATA_KEY not in body:
            return body, {}
        metadata = body.pop(METADATA_KEY)
        if metadata is None:
            return body, {}
        if not isinstance(metadata, dict):
            raise InvalidFieldError(
                "Metadata must be an object", field=METADATA_KEY, got=type(metadata).__name__
            )
        return body, metadata

    @staticmethod
    def _metadata_params(metadata: Dict[str, Any], params: Params) -> List[Tuple[str, str]]:
        pairs = []
        for key, value in metadata.items():
            column = ensure_identifier(key, kind="metadata column")
            param = f"meta_{column}"
            params[param] = value
            pairs.append((column, param))
        return pairs

    def _collections_like(self, pattern: str, schema: str | None = None) -> List[str]:
        sql = "SELECT table_schema, table_name FROM information_schema.tables WHERE table_name LIKE %(pattern)s"
        params: Params = {"pattern": pattern}
        if schema is not None:
            sql += " AND table_schema = %(schema)s"
            params["schema"] = schema

        prefix = self.table_prefix.lower()
        collections = []
        for row in self._fetch_all(sql, params):
            name = row["table_name"][len(prefix) :]
            if row["table_schema"] != DEFAULT_SCHEMA:
                name = f"{row['table_schema']}.{name}"
            collections.append(name)
        return collections

    @staticmethod
    def _join(*parts: str) -> str:
        return " ".join(part for part in parts if part)

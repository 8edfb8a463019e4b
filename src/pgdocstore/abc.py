"""Abstract document store contract.

`DocumentStore` is the engine-neutral API application code programs against:
collection and index management, document CRUD, bulk update/delete by
filter, and filtered, ordered, paginated reads. `PostgresDocumentStore` in
`pgdocstore.dbs.postgres` is the PostgreSQL implementation.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Iterator, List, Optional, Union

from .index import Index
from .logger import Logger
from .querydsl.filters import Filter
from .querydsl.order import OrderBy
from .querydsl.select import PartialSelect
from .types import Doc, DocWithId

__all__ = ("DocumentStore",)


class DocumentStore(ABC):
    """Abstract base class for document stores."""

    def __init__(self, logger: Logger | None = None, **kwargs: Any) -> None:
        self._logger = logger if isinstance(logger, Logger) else Logger(self.__class__.__name__)

    @property
    def logger(self) -> Logger:
        return self._logger

    # ------------------------------------------------------------------
    # Collection Management
    # ------------------------------------------------------------------

    @abstractmethod
    def list_collections(self) -> List[str]:
        """Return the names of all collections."""
        raise NotImplementedError

    @abstractmethod
    def filter_collections_by_prefix(self, prefix: str) -> List[str]:
        """Return the names of collections starting with `prefix`."""
        raise NotImplementedError

    @abstractmethod
    def has_collection(self, collection_name: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    def add_collection(self, collection_name: str, *indexes: Index) -> None:
        """Create a collection together with its declared indexes.

        Args:
            collection_name: Name of the collection, optionally `schema.name`
            *indexes: Index declarations created with the collection
        """
        raise NotImplementedError

    @abstractmethod
    def drop_collection(self, collection_name: str) -> None:
        """Remove a collection and every document in it."""
        raise NotImplementedError

    @abstractmethod
    def has_collection_index(self, collection_name: str, index_name: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    def add_collection_index(self, collection_name: str, index: Index) -> None:
        raise NotImplementedError

    @abstractmethod
    def drop_collection_index(self, collection_name: str, index: Union[Index, str]) -> None:
        """Drop an index by declaration or by name.

        Raises:
            InvalidArgumentError: If the declaration has no name
        """
        raise NotImplementedError

    # ------------------------------------------------------------------
    # Document Mutations
    # ------------------------------------------------------------------

    @abstractmethod
    def add_doc(self, collection_name: str, doc_id: str, doc: Doc) -> None:
        """Insert a new document. A duplicate id is an engine error."""
        raise NotImplementedError

    @abstractmethod
    def update_doc(self, collection_name: str, doc_id: str, doc_or_subset: Doc) -> None:
        """Shallow-merge `doc_or_subset` into the stored document."""
        raise NotImplementedError

    @abstractmethod
    def upsert_doc(self, collection_name: str, doc_id: str, doc_or_subset: Doc) -> None:
        """Update the document if it exists, otherwise add it."""
        raise NotImplementedError

    @abstractmethod
    def replace_doc(self, collection_name: str, doc_id: str, doc: Doc) -> None:
        """Replace the stored document as a whole."""
        raise NotImplementedError

    @abstractmethod
    def update_many(self, collection_name: str, filter: Filter, set: Doc) -> None:
        raise NotImplementedError

    @abstractmethod
    def replace_many(self, collection_name: str, filter: Filter, set: Doc) -> None:
        raise NotImplementedError

    @abstractmethod
    def delete_doc(self, collection_name: str, doc_id: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def delete_many(self, collection_name: str, filter: Filter) -> None:
        raise NotImplementedError

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @abstractmethod
    def get_doc(self, collection_name: str, doc_id: str) -> Optional[Dict[str, Any]]:
        """Return the document, or None if there is none with that id."""
        raise NotImplementedError

    @abstractmethod
    def get_partial_doc(
        self, collection_name: str, partial_select: PartialSelect, doc_id: str
    ) -> Optional[Dict[str, Any]]:
        raise NotImplementedError

    @abstractmethod
    def filter_docs(
        self,
        collection_name: str,
        filter: Filter,
        skip: int | None = None,
        limit: int | None = None,
        order_by: OrderBy | None = None,
    ) -> Iterator[Dict[str, Any]]:
        """Lazily iterate the documents matching `filter`."""
        raise NotImplementedError

    @abstractmethod
    def find_docs(
        self,
        collection_name: str,
        filter: Filter,
        skip: int | None = None,
        limit: int | None = None,
        order_by: OrderBy | None = None,
    ) -> Iterator[DocWithId]:
        """Like `filter_docs` but yields `(doc_id, doc)` pairs."""
        raise NotImplementedError

    @abstractmethod
    def find_partial_docs(
        self,
        collection_name: str,
        partial_select: PartialSelect,
        filter: Filter,
        skip: int | None = None,
        limit: int | None = None,
        order_by: OrderBy | None = None,
    ) -> Iterator[DocWithId]:
        raise NotImplementedError

    @abstractmethod
    def filter_doc_ids(self, collection_name: str, filter: Filter) -> List[str]:
        raise NotImplementedError

    @abstractmethod
    def count_docs(self, collection_name: str, filter: Filter) -> int:
        raise NotImplementedError

from .base import BaseFilterCompiler, BaseOrderByCompiler, FilterClause
from .filter import PostgresFilterCompiler, postgres_filter
from .index import PostgresIndexCompiler, postgres_index
from .order import PostgresOrderByCompiler, postgres_order_by
from .projection import PostgresProjectionCompiler, postgres_projection
from .utils import PathResolver

__all__ = (
    "FilterClause",
    "BaseFilterCompiler",
    "BaseOrderByCompiler",
    "PathResolver",
    "PostgresFilterCompiler",
    "postgres_filter",
    "PostgresOrderByCompiler",
    "postgres_order_by",
    "PostgresProjectionCompiler",
    "postgres_projection",
    "PostgresIndexCompiler",
    "postgres_index",
)

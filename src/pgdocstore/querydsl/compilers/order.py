"""PostgreSQL order-by compiler.

Field paths are caller code, not end-user input, so they are embedded into
the clause (quoted as JSON keys) and no parameters are produced. Callers that
sort by end-user supplied field names must allow-list them first.
"""

from typing import List

from ...constants import ID_COLUMN, SORT_ASC, SORT_DESC
from ...exceptions import UnsupportedOrderByError
from ..order import AndOrder, Asc, Desc, DocIdOrder, OrderBy
from .base import BaseOrderByCompiler
from .utils import PathResolver

__all__ = (
    "PostgresOrderByCompiler",
    "postgres_order_by",
)


class PostgresOrderByCompiler(BaseOrderByCompiler):
    def __init__(self, use_metadata_columns: bool = False) -> None:
        self.use_metadata_columns = use_metadata_columns
        self.paths = PathResolver(use_metadata_columns)

    def compile(self, order_by: OrderBy) -> List[str]:
        """Flatten an order-by tree into sort fragments, primary key first."""
        if isinstance(order_by, AndOrder):
            return self.compile(order_by.a) + self.compile(order_by.b)
        if isinstance(order_by, DocIdOrder):
            return [f"{ID_COLUMN} {order_by.direction}"]
        if isinstance(order_by, Asc):
            return [f"{self.paths.resolve(order_by.prop)} {SORT_ASC}"]
        if isinstance(order_by, Desc):
            return [f"{self.paths.resolve(order_by.prop)} {SORT_DESC}"]
        raise UnsupportedOrderByError("Unsupported order by type", order_by_type=type(order_by).__name__)


postgres_order_by = PostgresOrderByCompiler()

"""Base compiler interface.

Defines the abstract contract the PostgreSQL compilers follow and the
result type of filter compilation.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, NamedTuple, Optional, Tuple

__all__ = ("FilterClause", "BaseFilterCompiler", "BaseOrderByCompiler")


class FilterClause(NamedTuple):
    """Compiled filter: boolean SQL expression and its bound parameters.

    `clause` is None for `AnyFilter` (no WHERE clause at all).
    """

    clause: Optional[str]
    params: Dict[str, Any]


class BaseFilterCompiler(ABC):
    """Abstract base class for filter compilers."""

    @abstractmethod
    def compile(self, filter: Any) -> FilterClause:
        """Convert a filter tree into a SQL boolean expression and parameters."""
        raise NotImplementedError

    def to_where(self, filter: Any) -> Tuple[str, Dict[str, Any]]:
        """Return `("WHERE <clause>", params)`, or `("", {})` for AnyFilter."""
        compiled = self.compile(filter)
        if compiled.clause is None:
            return "", dict(compiled.params)
        return f"WHERE {compiled.clause}", dict(compiled.params)


class BaseOrderByCompiler(ABC):
    """Abstract base class for order-by compilers."""

    @abstractmethod
    def compile(self, order_by: Any) -> List[str]:
        """Convert an order-by tree into `<expr> ASC|DESC` fragments."""
        raise NotImplementedError

    def to_order_by(self, order_by: Any) -> str:
        """Return `ORDER BY ...`, or an empty string when `order_by` is None."""
        if order_by is None:
            return ""
        return "ORDER BY " + ", ".join(self.compile(order_by))

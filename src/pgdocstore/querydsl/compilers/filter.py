"""PostgreSQL filter compiler.

Transforms filter trees into SQL WHERE expressions over the JSONB `doc`
column, with every value bound as a named psycopg2 parameter.

PostgreSQL JSONB supports:
- Comparison: =, >, >=, <, <= between JSONB values
- Pattern: ILIKE on the text extracted with ->>
- Containment: @> for arrays and arrays of objects
- Key existence: JSONB_EXISTS(parent, 'key')

Placeholders are numbered with a counter threaded through the whole tree
(`a0`, `a1`, ...), so sibling branches never collide.
"""

from typing import Any, Dict, List, Optional, Tuple

from ...constants import ID_COLUMN
from ...exceptions import ConfigurationError, UnsupportedFilterError
from ...utils import json_dumps, quote_literal
from ..filters import (
    AndFilter,
    AnyFilter,
    AnyOfDocIdFilter,
    AnyOfFilter,
    DocIdFilter,
    EqFilter,
    ExistsFilter,
    Filter,
    GteFilter,
    GtFilter,
    InArrayFilter,
    LikeFilter,
    LteFilter,
    LtFilter,
    NotFilter,
    OrFilter,
)
from .base import BaseFilterCompiler, FilterClause
from .utils import PathResolver

__all__ = (
    "PostgresFilterCompiler",
    "postgres_filter",
)

_Compiled = Tuple[Optional[str], Dict[str, Any], int]

ALWAYS_FALSE = "1 != 1"
ALWAYS_TRUE = "1 = 1"


class PostgresFilterCompiler(BaseFilterCompiler):
    """Compile filter trees into PostgreSQL WHERE clauses."""

    _OP_MAP = {
        EqFilter: "=",
        GtFilter: ">",
        GteFilter: ">=",
        LtFilter: "<",
        LteFilter: "<=",
    }

    def __init__(self, use_metadata_columns: bool = False) -> None:
        self.use_metadata_columns = use_metadata_columns
        self.paths = PathResolver(use_metadata_columns)

    def compile(self, filter: Filter) -> FilterClause:
        """Compile `filter` into a `FilterClause`.

        Raises:
            TypeError: If `filter` is not a Filter node
            ConfigurationError: If AnyFilter is nested or NotFilter wraps a composite
            UnsupportedFilterError: If a node type is unknown
        """
        if not isinstance(filter, Filter):
            raise TypeError(f"filter must be a Filter node, got {type(filter).__name__}")
        clause, params, _ = self._compile(filter, 0, root=True)
        return FilterClause(clause, params)

    def _compile(self, node: Filter, count: int, root: bool = False) -> _Compiled:
        if isinstance(node, AnyFilter):
            if not root or count > 0:
                raise ConfigurationError("AnyFilter cannot be used together with other filters.")
            return None, {}, count

        if isinstance(node, (AndFilter, OrFilter)):
            connector = "AND" if isinstance(node, AndFilter) else "OR"
            clause_a, params_a, count = self._compile(node.a, count)
            clause_b, params_b, count = self._compile(node.b, count)
            return f"({clause_a} {connector} {clause_b})", {**params_a, **params_b}, count

        if isinstance(node, NotFilter):
            return self._compile_not(node, count)

        return self._compile_predicate(node, count)

    def _compile_not(self, node: NotFilter, count: int) -> _Compiled:
        inner = node.inner
        if isinstance(inner, (AndFilter, OrFilter, NotFilter)):
            raise ConfigurationError(
                "Not filter cannot be combined with a non prop filter!", inner_type=type(inner).__name__
            )
        if isinstance(inner, (AnyOfFilter, AnyOfDocIdFilter)):
            return self._compile_predicate(inner, count, negate=True)

        clause, params, count = self._compile(inner, count)
        return f"NOT {clause}", params, count

    def _compile_predicate(self, node: Filter, count: int, negate: bool = False) -> _Compiled:
        if isinstance(node, DocIdFilter):
            param = f"a{count}"
            return f"{ID_COLUMN} = %({param})s", {param: node.val}, count + 1

        if isinstance(node, AnyOfDocIdFilter):
            return self._in_clause(ID_COLUMN, node.val_list, count, json_encode=False, negate=negate)

        if isinstance(node, AnyOfFilter):
            return self._in_clause(
                self.paths.resolve(node.prop),
                node.val_list,
                count,
                json_encode=self.paths.should_json_encode(node.prop),
                negate=negate,
            )

        op = self._lookup_op(node)
        if op is not None:
            param = f"a{count}"
            prop = self.paths.resolve(node.prop)
            return f"{prop} {op} %({param})s", {param: self.paths.prepare_value(node.val, node.prop)}, count + 1

        if isinstance(node, LikeFilter):
            param = f"a{count}"
            prop = self.paths.resolve_text(node.prop)
            return f"{prop} ILIKE %({param})s", {param: node.val}, count + 1

        if isinstance(node, InArrayFilter):
            # Containment needs a JSON array on the right hand side
            param = f"a{count}"
            prop = self.paths.resolve(node.prop)
            return f"{prop} @> %({param})s", {param: json_dumps([node.val])}, count + 1

        if isinstance(node, ExistsFilter):
            if self.paths.is_metadata_column(node.prop):
                return f"{self.paths.column_name(node.prop)} IS NOT NULL", {}, count
            parent, key = self.paths.split_parent(node.prop)
            return f"JSONB_EXISTS({parent}, {quote_literal(key)})", {}, count

        raise UnsupportedFilterError("Unsupported filter type", filter_type=type(node).__name__)

    def _lookup_op(self, node: Filter) -> Optional[str]:
        for filter_cls, op in self._OP_MAP.items():
            if isinstance(node, filter_cls):
                return op
        return None

    def _in_clause(
        self, expr: str, values: List[Any], count: int, json_encode: bool = False, negate: bool = False
    ) -> _Compiled:
        if not values:
            return (ALWAYS_TRUE if negate else ALWAYS_FALSE), {}, count

        placeholders: List[str] = []
        params: Dict[str, Any] = {}
        for value in values:
            param = f"a{count}"
            placeholders.append(f"%({param})s")
            params[param] = json_dumps(value) if json_encode else value
            count += 1

        keyword = "NOT IN" if negate else "IN"
        return f"{expr} {keyword}({', '.join(placeholders)})", params, count


postgres_filter = PostgresFilterCompiler()

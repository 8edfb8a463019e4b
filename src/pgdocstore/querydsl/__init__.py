"""Query DSL module.

Exports the filter, order-by and partial-select trees used to describe
queries. Their SQL translation is handled by the `compilers` subpackage.
"""

from .filters import (
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
from .order import AndOrder, Asc, Desc, DocIdOrder, OrderBy
from .select import PartialSelect

__all__ = (
    "Filter",
    "AnyFilter",
    "AndFilter",
    "OrFilter",
    "NotFilter",
    "EqFilter",
    "GtFilter",
    "GteFilter",
    "LtFilter",
    "LteFilter",
    "LikeFilter",
    "ExistsFilter",
    "InArrayFilter",
    "DocIdFilter",
    "AnyOfDocIdFilter",
    "AnyOfFilter",
    "OrderBy",
    "Asc",
    "Desc",
    "DocIdOrder",
    "AndOrder",
    "PartialSelect",
)

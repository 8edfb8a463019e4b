"""
This __init__.py file makes the pgdocstore directory a Python package
and exposes the document store contract, the query DSL and the index
declarations for easy access.
"""

from .abc import DocumentStore
from .index import Column, FieldIndex, MetadataColumnIndex, MultiFieldIndex, RawSqlIndex, index_from_dict
from .querydsl import (
    AndFilter,
    AndOrder,
    AnyFilter,
    AnyOfDocIdFilter,
    AnyOfFilter,
    Asc,
    Desc,
    DocIdFilter,
    DocIdOrder,
    EqFilter,
    ExistsFilter,
    GteFilter,
    GtFilter,
    InArrayFilter,
    LikeFilter,
    LteFilter,
    LtFilter,
    NotFilter,
    OrFilter,
    PartialSelect,
)
from .types import Doc, DocId, DocIds

__version__ = "0.1.0"

__all__ = [
    "DocumentStore",
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
    "Asc",
    "Desc",
    "DocIdOrder",
    "AndOrder",
    "PartialSelect",
    "FieldIndex",
    "MultiFieldIndex",
    "RawSqlIndex",
    "Column",
    "MetadataColumnIndex",
    "index_from_dict",
    "Doc",
    "DocId",
    "DocIds",
]

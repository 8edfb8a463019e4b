"""Filter expression tree.

Filters are immutable nodes composed into a boolean expression over
document fields. They are backend agnostic; the PostgreSQL translation lives
in `pgdocstore.querydsl.compilers.filter`.

Typical usage:

- Leaf predicates: `EqFilter("animal", "cat")`, `GteFilter("age", 3)`
- Combine: `EqFilter("pet", True) & InArrayFilter("color", "black")`
- Either: `EqFilter("animal", "cat") | EqFilter("animal", "dog")`
- Negate a single predicate: `~ExistsFilter("pet")`

Field paths are dotted (`character.friendly`). When metadata columns are
enabled, paths starting with `metadata.` address promoted physical columns.
"""

from __future__ import annotations

from typing import Any, List
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_validator

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
)


class Filter(BaseModel):
    """Base class of all filter nodes.

    - Use `&` to combine with logical AND.
    - Use `|` to combine with logical OR.
    - Use `~` to negate a node.
    """

    model_config = ConfigDict(frozen=True)

    def __and__(self, other: "Filter") -> "AndFilter":
        return AndFilter(self, other)

    def __or__(self, other: "Filter") -> "OrFilter":
        return OrFilter(self, other)

    def __invert__(self) -> "NotFilter":
        return NotFilter(self)


class AnyFilter(Filter):
    """Matches every document. Only valid as the whole filter."""


class AndFilter(Filter):
    a: Filter
    b: Filter

    def __init__(self, a: Filter, b: Filter, **kwargs: Any) -> None:
        super().__init__(a=a, b=b, **kwargs)


class OrFilter(Filter):
    a: Filter
    b: Filter

    def __init__(self, a: Filter, b: Filter, **kwargs: Any) -> None:
        super().__init__(a=a, b=b, **kwargs)


class NotFilter(Filter):
    """Negates a single field predicate or set-membership filter."""

    inner: Filter

    def __init__(self, inner: Filter, **kwargs: Any) -> None:
        super().__init__(inner=inner, **kwargs)


class _PropValFilter(Filter):
    prop: str
    val: Any = None

    def __init__(self, prop: str, val: Any, **kwargs: Any) -> None:
        super().__init__(prop=prop, val=val, **kwargs)


class EqFilter(_PropValFilter):
    pass


class GtFilter(_PropValFilter):
    pass


class GteFilter(_PropValFilter):
    pass


class LtFilter(_PropValFilter):
    pass


class LteFilter(_PropValFilter):
    pass


class LikeFilter(_PropValFilter):
    """Case-insensitive pattern match (`%` and `_` wildcards) on the text value."""


class InArrayFilter(_PropValFilter):
    """The field is an array containing `val`.

    For arrays of objects `val` may be a partial object; every key given must
    match the corresponding element.
    """


class ExistsFilter(Filter):
    prop: str

    def __init__(self, prop: str, **kwargs: Any) -> None:
        super().__init__(prop=prop, **kwargs)


def _id_text(value: Any) -> Any:
    return str(value) if isinstance(value, UUID) else value


class DocIdFilter(Filter):
    """Matches the document with id `val`. `uuid.UUID` ids are bound as text."""

    val: str

    def __init__(self, val: str | UUID, **kwargs: Any) -> None:
        super().__init__(val=val, **kwargs)

    @field_validator("val", mode="before")
    @classmethod
    def _coerce_uuid(cls, v: Any) -> Any:
        return _id_text(v)


class AnyOfDocIdFilter(Filter):
    val_list: List[str]

    def __init__(self, val_list: List[str | UUID], **kwargs: Any) -> None:
        super().__init__(val_list=val_list, **kwargs)

    @field_validator("val_list", mode="before")
    @classmethod
    def _coerce_uuids(cls, v: Any) -> Any:
        return [_id_text(item) for item in v] if isinstance(v, (list, tuple)) else v


class AnyOfFilter(Filter):
    prop: str
    val_list: List[Any]

    def __init__(self, prop: str, val_list: List[Any], **kwargs: Any) -> None:
        super().__init__(prop=prop, val_list=val_list, **kwargs)

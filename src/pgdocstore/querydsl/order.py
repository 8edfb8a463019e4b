"""Order-by expression tree.

`AndOrder(a, b)` sorts by `a` first and uses `b` to break ties; chain it for
any number of sort keys:

    Desc.by_prop("age") & Asc.by_prop("name") & DocIdOrder()
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

from ..constants import SORT_ASC
from ..utils import normalize_direction

__all__ = ("OrderBy", "Asc", "Desc", "DocIdOrder", "AndOrder")


class OrderBy(BaseModel):
    model_config = ConfigDict(frozen=True)

    def __and__(self, other: "OrderBy") -> "AndOrder":
        return AndOrder(self, other)

    def then(self, other: "OrderBy") -> "AndOrder":
        """Use `other` as the next sort key."""
        return AndOrder(self, other)


class Asc(OrderBy):
    prop: str

    def __init__(self, prop: str, **kwargs: Any) -> None:
        super().__init__(prop=prop, **kwargs)

    @classmethod
    def by_prop(cls, prop: str) -> "Asc":
        return cls(prop)


class Desc(OrderBy):
    prop: str

    def __init__(self, prop: str, **kwargs: Any) -> None:
        super().__init__(prop=prop, **kwargs)

    @classmethod
    def by_prop(cls, prop: str) -> "Desc":
        return cls(prop)


class DocIdOrder(OrderBy):
    direction: str = SORT_ASC

    def __init__(self, direction: str = SORT_ASC, **kwargs: Any) -> None:
        super().__init__(direction=direction, **kwargs)

    @field_validator("direction")
    @classmethod
    def _check_direction(cls, value: str) -> str:
        return normalize_direction(value)


class AndOrder(OrderBy):
    a: OrderBy
    b: OrderBy

    def __init__(self, a: OrderBy, b: OrderBy, **kwargs: Any) -> None:
        super().__init__(a=a, b=b, **kwargs)

    @classmethod
    def by(cls, a: OrderBy, b: OrderBy) -> "AndOrder":
        return cls(a, b)

"""Partial select (projection) declaration.

Maps aliases in the output document to field paths in the stored document:

    PartialSelect({"some.alias": "some.prop", "magicNumber": "some.other.nested"})

Aliases are dot paths too and build nested objects. The `$merge` alias
splices the keys of the selected object into the top level of the output.
Use the pair form to merge more than one object:

    PartialSelect([("$merge", "state"), ("$merge", "meta"), ("id", "docId")])
"""

from __future__ import annotations

from typing import Any, ClassVar, Iterable, Iterator, Mapping, Tuple, Union

from pydantic import BaseModel, ConfigDict, field_validator

__all__ = ("PartialSelect",)

SelectInput = Union[Mapping[str, str], Iterable[Tuple[str, str]]]


class PartialSelect(BaseModel):
    MERGE_ALIAS: ClassVar[str] = "$merge"

    model_config = ConfigDict(frozen=True)

    entries: Tuple[Tuple[str, str], ...] = ()

    def __init__(self, select: SelectInput = (), **kwargs: Any) -> None:
        if isinstance(select, Mapping):
            select = tuple(select.items())
        super().__init__(entries=tuple(tuple(pair) for pair in select), **kwargs)

    @field_validator("entries")
    @classmethod
    def _check_fields(cls, value: Tuple[Tuple[str, str], ...]) -> Tuple[Tuple[str, str], ...]:
        for alias, field in value:
            if not alias or not field:
                raise ValueError(f"Alias and field must be non-empty, got alias={alias!r} field={field!r}")
        return value

    def select(self, field: str, alias: str) -> "PartialSelect":
        """Return a copy with one more `field AS alias` entry."""
        return PartialSelect(self.entries + ((alias, field),))

    def merge(self, field: str) -> "PartialSelect":
        return self.select(field, self.MERGE_ALIAS)

    def items(self) -> Iterator[Tuple[str, str]]:
        """Iterate `(alias, field)` pairs in declaration order."""
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

"""Index declarations for collections.

- `FieldIndex`: one document field, ASC or DESC, optionally unique.
- `MultiFieldIndex`: composite key over several fields.
- `RawSqlIndex`: a verbatim CREATE INDEX statement for anything else.
- `MetadataColumnIndex`: promotes `metadata.<name>` fields to physical
  columns and indexes them with a wrapped declaration.

Every declaration converts to and from a plain dict so index definitions can
live in configuration files.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, field_validator

from .constants import SORT_ASC
from .exceptions import InvalidArgumentError, UnsupportedIndexError
from .utils import ensure_identifier, normalize_direction

__all__ = (
    "Index",
    "FieldIndex",
    "MultiFieldIndex",
    "RawSqlIndex",
    "Column",
    "MetadataColumnIndex",
    "index_from_dict",
)


def _require(data: Dict[str, Any], *keys: str) -> None:
    for key in keys:
        if key not in data:
            raise InvalidArgumentError("Missing key in index data", key=key, index_type=data.get("type"))


def _check_name(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return ensure_identifier(value, kind="index name")


class Index(BaseModel):
    model_config = ConfigDict(frozen=True)

    def to_dict(self) -> Dict[str, Any]:
        raise NotImplementedError


class FieldIndex(Index):
    field: str
    sort: str = SORT_ASC
    unique: bool = False
    name: Optional[str] = None

    def __init__(
        self, field: str, sort: str = SORT_ASC, unique: bool = False, name: Optional[str] = None, **kwargs: Any
    ) -> None:
        super().__init__(field=field, sort=sort, unique=unique, name=name, **kwargs)

    @field_validator("sort")
    @classmethod
    def _check_sort(cls, value: str) -> str:
        return normalize_direction(value)

    @field_validator("name")
    @classmethod
    def _check_index_name(cls, value: Optional[str]) -> Optional[str]:
        return _check_name(value)

    @classmethod
    def for_field(cls, field: str, sort: str = SORT_ASC, unique: bool = False) -> "FieldIndex":
        return cls(field, sort, unique)

    @classmethod
    def named_index_for_field(
        cls, name: str, field: str, sort: str = SORT_ASC, unique: bool = False
    ) -> "FieldIndex":
        return cls(field, sort, unique, name)

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "field", "field": self.field, "sort": self.sort, "unique": self.unique, "name": self.name}


class MultiFieldIndex(Index):
    field_indexes: Tuple[FieldIndex, ...]
    unique: bool = False
    name: Optional[str] = None

    def __init__(self, fields: Any, unique: bool = False, name: Optional[str] = None, **kwargs: Any) -> None:
        field_indexes = tuple(f if isinstance(f, FieldIndex) else FieldIndex(f) for f in fields)
        super().__init__(field_indexes=field_indexes, unique=unique, name=name, **kwargs)

    @field_validator("field_indexes")
    @classmethod
    def _check_fields(cls, value: Tuple[FieldIndex, ...]) -> Tuple[FieldIndex, ...]:
        if not value:
            raise InvalidArgumentError("MultiFieldIndex needs at least one field")
        return value

    @field_validator("name")
    @classmethod
    def _check_index_name(cls, value: Optional[str]) -> Optional[str]:
        return _check_name(value)

    @classmethod
    def for_fields(cls, fields: Any, unique: bool = False) -> "MultiFieldIndex":
        return cls(fields, unique)

    @classmethod
    def named_index_for_fields(cls, name: str, fields: Any, unique: bool = False) -> "MultiFieldIndex":
        return cls(fields, unique, name)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "multi_field",
            "fields": [f.to_dict() for f in self.field_indexes],
            "unique": self.unique,
            "name": self.name,
        }


class RawSqlIndex(Index):
    sql: str
    name: Optional[str] = None

    def __init__(self, sql: str, name: Optional[str] = None, **kwargs: Any) -> None:
        super().__init__(sql=sql, name=name, **kwargs)

    @field_validator("name")
    @classmethod
    def _check_index_name(cls, value: Optional[str]) -> Optional[str]:
        return _check_name(value)

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "raw_sql", "sql": self.sql, "name": self.name}


class Column(BaseModel):
    """Physical column promoted from the `metadata` sub-object."""

    model_config = ConfigDict(frozen=True)

    name: str
    sql_type: str

    def __init__(self, name: str, sql_type: str, **kwargs: Any) -> None:
        super().__init__(name=name, sql_type=sql_type, **kwargs)

    @field_validator("name")
    @classmethod
    def _check_column_name(cls, value: str) -> str:
        return ensure_identifier(value, kind="metadata column")

    @field_validator("sql_type")
    @classmethod
    def _check_sql_type(cls, value: str) -> str:
        if not value.strip() or ";" in value:
            raise InvalidArgumentError("Invalid column type", sql_type=value)
        return value.strip()

    @property
    def sql(self) -> str:
        return f"{self.name} {self.sql_type}"

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "sql_type": self.sql_type}


class MetadataColumnIndex(Index):
    index: Index
    columns: Tuple[Column, ...]

    def __init__(self, index: Index, *columns: Column, **kwargs: Any) -> None:
        super().__init__(index=index, columns=tuple(columns), **kwargs)

    @field_validator("index")
    @classmethod
    def _check_index(cls, value: Index) -> Index:
        if isinstance(value, MetadataColumnIndex):
            raise InvalidArgumentError("MetadataColumnIndex cannot wrap another MetadataColumnIndex")
        return value

    @field_validator("columns")
    @classmethod
    def _check_columns(cls, value: Tuple[Column, ...]) -> Tuple[Column, ...]:
        if not value:
            raise InvalidArgumentError("MetadataColumnIndex needs at least one column")
        return value

    @property
    def name(self) -> Optional[str]:
        return getattr(self.index, "name", None)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "metadata_column",
            "index": self.index.to_dict(),
            "columns": [c.to_dict() for c in self.columns],
        }


def index_from_dict(data: Dict[str, Any]) -> Index:
    """Rebuild an index declaration from its `to_dict()` form.

    Raises:
        InvalidArgumentError: If required keys are missing
        UnsupportedIndexError: If the `type` is unknown
    """
    _require(data, "type")
    index_type = data["type"]

    if index_type == "field":
        _require(data, "field")
        return FieldIndex(
            data["field"], data.get("sort", SORT_ASC), bool(data.get("unique", False)), data.get("name")
        )
    if index_type == "multi_field":
        _require(data, "fields")
        fields = [f if isinstance(f, str) else index_from_dict({"type": "field", **f}) for f in data["fields"]]
        return MultiFieldIndex(fields, bool(data.get("unique", False)), data.get("name"))
    if index_type == "raw_sql":
        _require(data, "sql")
        return RawSqlIndex(data["sql"], data.get("name"))
    if index_type == "metadata_column":
        _require(data, "index", "columns")
        columns = []
        for column in data["columns"]:
            _require(column, "name", "sql_type")
            columns.append(Column(column["name"], column["sql_type"]))
        return MetadataColumnIndex(index_from_dict(data["index"]), *columns)

    raise UnsupportedIndexError("Unsupported index type", index_type=index_type)

"""Table marshalling between Python rows and the platform's table format.

The platform's table services exchange column definitions as a JSON array
of column objects and cell data column-major (one array per column).
Callers work with row tuples; this module transposes in both directions.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Mapping, Sequence

from gxclient.core.envelope import advisory_message
from gxclient.core.errors import InternalError


class ColumnType(str, Enum):
    """Declared value kinds of table columns."""

    TEXT = "Text"
    INTEGER = "Integer"
    FLOAT = "Float"
    BOOLEAN = "Boolean"
    SET = "Set"


@dataclass(frozen=True)
class ColumnDef:
    """
    Definition of one table column.

    Attributes:
        name: Column name, unique within the table.
        type: Declared value kind.
        nullable: Whether cells may be empty.
        role: Optional semantic role understood by the platform.
        attributes: Further platform-specific attributes, sent as-is.
    """

    name: str
    type: ColumnType = ColumnType.TEXT
    nullable: bool = True
    role: str | None = None
    attributes: Mapping[str, Any] = field(default_factory=dict)

    def to_wire(self) -> dict[str, Any]:
        """Return the column object sent to the create-table service."""
        wire: dict[str, Any] = dict(self.attributes)
        wire["name"] = self.name
        wire["type"] = ColumnType(self.type).value
        wire["nullable"] = self.nullable
        if self.role:
            wire["role"] = self.role
        return wire

    @classmethod
    def from_wire(cls, item: Mapping[str, Any]) -> ColumnDef:
        """Build a column from a platform column object; unknown types read as text."""
        raw_type = str(item.get("type") or item.get("valueClass") or "")
        try:
            col_type = ColumnType(raw_type)
        except ValueError:
            col_type = ColumnType.TEXT
        known = {"name", "type", "nullable", "role"}
        return cls(
            name=str(item.get("name") or item.get("jsName") or ""),
            type=col_type,
            nullable=bool(item.get("nullable", True)),
            role=item.get("role"),
            attributes={k: v for k, v in item.items() if k not in known},
        )


@dataclass(frozen=True)
class Table:
    """Decoded table: column definitions plus row tuples."""

    columns: tuple[ColumnDef, ...]
    rows: tuple[tuple[Any, ...], ...]

    @property
    def column_names(self) -> list[str]:
        return [c.name for c in self.columns]

    def as_dicts(self) -> list[dict[str, Any]]:
        """Return rows as dictionaries keyed by column name."""
        names = self.column_names
        return [dict(zip(names, row)) for row in self.rows]


def _validate_columns(columns: Sequence[ColumnDef]) -> None:
    if not columns:
        raise InternalError("At least one column definition is required")
    seen: set[str] = set()
    for col in columns:
        if not col.name or not col.name.strip():
            raise InternalError("Column names must be non-empty")
        if col.name in seen:
            raise InternalError(f"Duplicate column name: {col.name!r}")
        seen.add(col.name)


def encode_put_table(
    path: str,
    rows: Iterable[Sequence[Any]],
    columns: Sequence[ColumnDef],
) -> dict[str, str]:
    """
    Build the create-table request form.

    Args:
        path: Platform path of the table to create.
        rows: Row data; every row must have one cell per column.
        columns: Column definitions in table order.

    Returns:
        Form fields `de`, `columns` and `data` (column-major JSON).

    Raises:
        InternalError: On empty or duplicate column names or ragged rows.
    """
    if not path:
        raise InternalError("A table path is required")
    _validate_columns(columns)

    width = len(columns)
    data: list[list[Any]] = [[] for _ in range(width)]
    for index, row in enumerate(rows):
        if len(row) != width:
            raise InternalError(
                f"Row {index} has {len(row)} cells, expected {width}"
            )
        for col_index, cell in enumerate(row):
            data[col_index].append(cell)

    return {
        "de": path,
        "columns": json.dumps([c.to_wire() for c in columns]),
        "data": json.dumps(data),
    }


def decode_columns(response: Any) -> list[ColumnDef] | None:
    """Decode a table-columns response; None if it is an advisory."""
    if advisory_message(response) is not None:
        return None
    values = response.get("values")
    if not isinstance(values, list):
        return None
    return [ColumnDef.from_wire(item) for item in values if isinstance(item, Mapping)]


def decode_table(
    data_response: Any,
    columns_response: Any = None,
) -> Table | None:
    """
    Decode a table-rawdata response into rows.

    Column names come from `columns_response` when given, otherwise they are
    numbered. Returns None if either response is an advisory or the data
    is not column-major.
    """
    if advisory_message(data_response) is not None:
        return None
    values = data_response.get("values")
    if not isinstance(values, list) or not all(isinstance(v, list) for v in values):
        return None

    columns: list[ColumnDef] | None
    if columns_response is not None:
        columns = decode_columns(columns_response)
        if columns is None:
            return None
    else:
        columns = [ColumnDef(name=f"column{i + 1}") for i in range(len(values))]

    if len(columns) != len(values):
        return None

    height = max((len(v) for v in values), default=0)
    rows = tuple(
        tuple(col[i] if i < len(col) else None for col in values) for i in range(height)
    )
    return Table(columns=tuple(columns), rows=rows)

"""
Schema Snapshot data models.

An immutable description of the tables, columns and keys of a relational
database, read once per mapping run. Engines only ever read these objects.

Models:
- Column: Column name, SQL type, nullability, default and max length
- ForeignKey: Edge from a local column to a target table/column
- Table: Ordered columns, primary-key column names and foreign keys
- SchemaSnapshot: Ordered tables plus the database name
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from ...core.exceptions import SchemaAccessError


def _parse_nullable(value: Any) -> bool:
    """Accept booleans and information_schema style "YES"/"NO" strings."""
    if isinstance(value, str):
        return value.strip().upper() in ("YES", "TRUE", "Y", "1")
    if value is None:
        return True
    return bool(value)


@dataclass(frozen=True)
class Column:
    """A table column."""
    name: str
    data_type: str = "text"
    nullable: bool = True
    default: Optional[str] = None
    max_length: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Column":
        name = data.get("column_name", data.get("name"))
        if not name:
            raise ValueError(f"Column definition without a name: {data!r}")
        max_length = data.get("character_maximum_length", data.get("max_length"))
        return cls(
            name=str(name),
            data_type=str(data.get("data_type", data.get("sql_type", "text")) or "text"),
            nullable=_parse_nullable(data.get("is_nullable", data.get("nullable", True))),
            default=data.get("column_default", data.get("default")),
            max_length=int(max_length) if max_length is not None else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "column_name": self.name,
            "data_type": self.data_type,
            "is_nullable": "YES" if self.nullable else "NO",
            "column_default": self.default,
            "character_maximum_length": self.max_length,
        }


@dataclass(frozen=True)
class ForeignKey:
    """A foreign-key edge ``column -> target_table.target_column``."""
    column: str
    target_table: str
    target_column: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ForeignKey":
        return cls(
            column=str(data.get("column_name", data.get("column"))),
            target_table=str(data.get("foreign_table_name", data.get("target_table"))),
            target_column=str(data.get("foreign_column_name", data.get("target_column"))),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "column_name": self.column,
            "foreign_table_name": self.target_table,
            "foreign_column_name": self.target_column,
        }


@dataclass(frozen=True)
class Table:
    """
    A relational table.

    Attributes:
        name: Table name as it appears in the database.
        columns: Columns in ordinal order.
        primary_keys: Primary-key column names in key order.
        foreign_keys: Foreign-key edges declared on this table.
        row_count: Expected number of rows, when known from the snapshot.
    """
    name: str
    columns: Tuple[Column, ...] = ()
    primary_keys: Tuple[str, ...] = ()
    foreign_keys: Tuple[ForeignKey, ...] = ()
    row_count: Optional[int] = None

    @property
    def primary_key(self) -> Optional[str]:
        """The single primary-key column, or None when absent or composite."""
        if len(self.primary_keys) == 1:
            return self.primary_keys[0]
        return None

    @property
    def has_composite_key(self) -> bool:
        return len(self.primary_keys) > 1

    @property
    def column_names(self) -> List[str]:
        return [c.name for c in self.columns]

    def get_column(self, name: str) -> Optional[Column]:
        for column in self.columns:
            if column.name == name:
                return column
        return None

    def foreign_key_for(self, column_name: str) -> Optional[ForeignKey]:
        for fk in self.foreign_keys:
            if fk.column == column_name:
                return fk
        return None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Table":
        name = data.get("name", data.get("table_name"))
        if not name:
            raise ValueError(f"Table definition without a name: {data!r}")
        row_count = data.get("row_count", data.get("rowCount"))
        return cls(
            name=str(name),
            columns=tuple(Column.from_dict(c) for c in data.get("columns", [])),
            primary_keys=tuple(data.get("primaryKeys", data.get("primary_keys", [])) or ()),
            foreign_keys=tuple(
                ForeignKey.from_dict(fk)
                for fk in data.get("foreignKeys", data.get("foreign_keys", [])) or ()
            ),
            row_count=int(row_count) if row_count is not None else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "name": self.name,
            "columns": [c.to_dict() for c in self.columns],
            "primaryKeys": list(self.primary_keys),
            "foreignKeys": [fk.to_dict() for fk in self.foreign_keys],
        }
        if self.row_count is not None:
            result["row_count"] = self.row_count
        return result


@dataclass(frozen=True)
class SchemaSnapshot:
    """Ordered collection of tables read from one database."""
    tables: Tuple[Table, ...] = ()
    database: Optional[str] = None

    @property
    def total_tables(self) -> int:
        return len(self.tables)

    @property
    def table_names(self) -> List[str]:
        return [t.name for t in self.tables]

    def get_table(self, name: str) -> Table:
        """Return the named table.

        Raises:
            SchemaAccessError: If the snapshot has no such table.
        """
        for table in self.tables:
            if table.name == name:
                return table
        raise SchemaAccessError(f"Table '{name}' not found in schema", table=name)

    def has_table(self, name: str) -> bool:
        return any(t.name == name for t in self.tables)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SchemaSnapshot":
        tables = data.get("tables")
        if tables is None or not isinstance(tables, list):
            raise ValueError("Schema snapshot must contain a 'tables' list")
        return cls(
            tables=tuple(Table.from_dict(t) for t in tables),
            database=data.get("database"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "database": self.database,
            "tables": [t.to_dict() for t in self.tables],
            "totalTables": self.total_tables,
        }


def load_schema_snapshot(path: Union[str, Path]) -> SchemaSnapshot:
    """
    Load a schema snapshot from a JSON file.

    The file may contain the snapshot itself or wrap it under a ``schema`` key.

    Raises:
        SchemaAccessError: If the file cannot be read or is not a valid snapshot.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        raise SchemaAccessError(f"Schema snapshot not found: {path}")
    except json.JSONDecodeError as e:
        raise SchemaAccessError(
            f"Invalid JSON in schema snapshot {path} at line {e.lineno}, column {e.colno}: {e.msg}"
        )
    except OSError as e:
        raise SchemaAccessError(f"Error reading schema snapshot {path}: {e}")

    if isinstance(data, dict) and isinstance(data.get("schema"), dict):
        data = data["schema"]
    try:
        return SchemaSnapshot.from_dict(data)
    except (ValueError, TypeError, AttributeError) as e:
        raise SchemaAccessError(f"Invalid schema snapshot {path}: {e}")

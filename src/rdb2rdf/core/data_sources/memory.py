"""
In-memory data source.

Serves a schema snapshot and rows held in Python structures. Used by tests
and by CLI runs that read a JSON export instead of a live database.

JSON file layout::

    {
      "schema": {"tables": [...]},
      "rows": {"users": [{"id": 1, "name": "Ana"}]}
    }

A bare schema snapshot (``{"tables": [...]}``) is accepted as well; tables
then have no rows.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from ..exceptions import SchemaAccessError
from ...shared.models.schema import SchemaSnapshot
from .protocols import Row

logger = logging.getLogger(__name__)


class InMemoryDataSource:
    """SchemaProvider and RowSource backed by in-memory rows."""

    def __init__(
        self,
        schema: SchemaSnapshot,
        rows: Optional[Mapping[str, Sequence[Row]]] = None,
    ):
        self.schema = schema
        self._rows: Dict[str, List[Row]] = {
            name: [dict(r) for r in table_rows] for name, table_rows in (rows or {}).items()
        }

    def get_schema(self) -> SchemaSnapshot:
        return self.schema

    def _table_rows(self, table: str) -> List[Row]:
        if not self.schema.has_table(table) and table not in self._rows:
            raise SchemaAccessError(f"Table '{table}' not found in data source", table=table)
        return self._rows.get(table, [])

    def read_rows(self, table: str, limit: Optional[int] = None) -> List[Row]:
        rows = self._table_rows(table)
        if limit is not None:
            rows = rows[:limit]
        return [dict(r) for r in rows]

    def count_rows(self, table: str) -> int:
        return len(self._table_rows(table))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "InMemoryDataSource":
        schema_data = data.get("schema", data)
        rows = data.get("rows", {})
        if not isinstance(rows, dict):
            raise ValueError("'rows' must map table names to lists of rows")
        return cls(SchemaSnapshot.from_dict(schema_data), rows)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "InMemoryDataSource":
        """
        Load schema and rows from a JSON file.

        Raises:
            SchemaAccessError: If the file cannot be read or parsed.
        """
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            raise SchemaAccessError(f"Data file not found: {path}")
        except json.JSONDecodeError as e:
            raise SchemaAccessError(
                f"Invalid JSON in data file {path} at line {e.lineno}, column {e.colno}: {e.msg}"
            )
        except OSError as e:
            raise SchemaAccessError(f"Error reading data file {path}: {e}")

        try:
            source = cls.from_dict(data)
        except (ValueError, TypeError, AttributeError) as e:
            raise SchemaAccessError(f"Invalid data file {path}: {e}")
        logger.info(
            f"Loaded {source.schema.total_tables} tables and "
            f"{sum(len(r) for r in source._rows.values())} rows from {path}"
        )
        return source

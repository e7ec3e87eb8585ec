"""
Protocol Definitions for Relational Data Sources.

The mapping engines never open database connections themselves; they are
handed objects that satisfy these protocols. Using protocols allows for duck
typing while still providing type hints and documentation.

Protocols:
    SchemaProvider: Produce a SchemaSnapshot
    RowSource: Read bounded rows and row counts per table
    QueryRowSource: RowSource that can also run an arbitrary SELECT
"""

from typing import Any, Dict, List, Optional, Protocol, runtime_checkable

from ...shared.models.schema import SchemaSnapshot

Row = Dict[str, Any]

__all__ = [
    "Row",
    "SchemaProvider",
    "RowSource",
    "QueryRowSource",
    "supports_queries",
]


@runtime_checkable
class SchemaProvider(Protocol):
    """Protocol for reading the schema of a relational database."""

    def get_schema(self) -> SchemaSnapshot:
        """
        Read the current schema.

        Raises:
            SchemaAccessError: If the schema cannot be read.
        """
        ...


@runtime_checkable
class RowSource(Protocol):
    """
    Protocol for reading table rows.

    Rows are plain dicts keyed by column name. Missing keys and ``None``
    values are both treated as SQL NULL by the engines.
    """

    def read_rows(self, table: str, limit: Optional[int] = None) -> List[Row]:
        """
        Read at most ``limit`` rows of ``table`` (all rows when ``limit`` is None).

        Raises:
            SchemaAccessError: If the table does not exist or cannot be read.
        """
        ...

    def count_rows(self, table: str) -> int:
        """
        Count the rows of ``table``.

        Raises:
            SchemaAccessError: If the table does not exist or cannot be read.
        """
        ...


@runtime_checkable
class QueryRowSource(RowSource, Protocol):
    """RowSource that can evaluate SQL-query logical tables."""

    def execute_query(self, sql: str, limit: Optional[int] = None) -> List[Row]:
        ...


def supports_queries(source: Any) -> bool:
    """Check whether a row source can evaluate SQL queries."""
    return callable(getattr(source, "execute_query", None))

"""
Relational data sources.

The mapping engines read schema and rows only through the protocols defined
here; concrete sources are constructed by the caller and passed in.
"""

from .protocols import QueryRowSource, Row, RowSource, SchemaProvider, supports_queries
from .memory import InMemoryDataSource
from .sqlalchemy_source import SqlAlchemyDataSource

__all__ = [
    "Row",
    "SchemaProvider",
    "RowSource",
    "QueryRowSource",
    "supports_queries",
    "InMemoryDataSource",
    "SqlAlchemyDataSource",
]

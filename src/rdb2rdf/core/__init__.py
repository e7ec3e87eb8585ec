"""
Core infrastructure shared by the mapping and validation engines.

- Exception hierarchy (SchemaAccessError, MappingConfigError, RdfSyntaxError, ...)
- Relational data sources (InMemoryDataSource, SqlAlchemyDataSource)
- Bounded in-memory log buffer (MemoryLogHandler)
"""

from .exceptions import (
    MappingConfigError,
    Rdb2RdfError,
    RdfSyntaxError,
    RowProcessingError,
    SchemaAccessError,
    TemplateResolutionError,
)
from .log_buffer import MemoryLogHandler

__all__ = [
    "Rdb2RdfError",
    "SchemaAccessError",
    "MappingConfigError",
    "RdfSyntaxError",
    "RowProcessingError",
    "TemplateResolutionError",
    "MemoryLogHandler",
]

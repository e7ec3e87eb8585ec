"""
Shared data models for the mapping engines.

Usage:
    from rdb2rdf.shared.models import SchemaSnapshot, Table, Column
    from rdb2rdf.shared.models import MappingResult, SkippedItem
"""

from .schema import (
    Column,
    ForeignKey,
    SchemaSnapshot,
    Table,
    load_schema_snapshot,
)
from .results import (
    MappingResult,
    MappingValidationResult,
    SchemaStatistics,
    SkippedItem,
    TableStatistics,
)

__all__ = [
    # Schema snapshot
    "Column",
    "ForeignKey",
    "Table",
    "SchemaSnapshot",
    "load_schema_snapshot",
    # Results
    "MappingResult",
    "MappingValidationResult",
    "SkippedItem",
    "TableStatistics",
    "SchemaStatistics",
]

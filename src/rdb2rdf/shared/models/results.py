"""
Result models shared by the mapping engines.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List

from rdflib import Graph


@dataclass
class SkippedItem:
    """A table or row that was not mapped, with the reason."""
    item_type: str  # "table" or "row"
    name: str
    reason: str
    code: str = "SKIPPED"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.item_type,
            "name": self.name,
            "reason": self.reason,
            "code": self.code,
        }


@dataclass
class MappingResult:
    """Triples produced by a mapping run plus what was skipped on the way.

    Runs are best-effort: ``graph`` holds everything that could be produced,
    ``skipped_items`` explains everything that could not.
    """
    graph: Graph
    skipped_items: List[SkippedItem] = field(default_factory=list)
    metrics: Dict[str, Any] = field(default_factory=dict)

    @property
    def triple_count(self) -> int:
        return len(self.graph)

    @property
    def warnings(self) -> List[str]:
        return [f"{item.code}: {item.reason}" for item in self.skipped_items]

    def add_skipped(self, item_type: str, name: str, reason: str, code: str = "SKIPPED") -> None:
        self.skipped_items.append(SkippedItem(item_type=item_type, name=name, reason=reason, code=code))

    def get_summary(self) -> str:
        lines = [f"Triples generated: {self.triple_count}"]
        for key, value in self.metrics.items():
            lines.append(f"  {key}: {value}")
        if self.skipped_items:
            lines.append(f"Skipped items: {len(self.skipped_items)}")
            for item in self.skipped_items[:10]:
                lines.append(f"  - [{item.item_type}] {item.name}: {item.reason}")
            if len(self.skipped_items) > 10:
                lines.append(f"  ... and {len(self.skipped_items) - 10} more")
        return "\n".join(lines)


@dataclass
class MappingValidationResult:
    """Outcome of structural validation of a mapping configuration."""
    errors: List[str] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors

    def to_dict(self) -> Dict[str, Any]:
        return {"valid": self.valid, "errors": list(self.errors)}


@dataclass
class TableStatistics:
    table: str
    rows: int
    columns: int

    @property
    def estimated_triples(self) -> int:
        return self.rows * self.columns

    def to_dict(self) -> Dict[str, Any]:
        return {
            "table": self.table,
            "rows": self.rows,
            "columns": self.columns,
            "estimatedTriples": self.estimated_triples,
        }


@dataclass
class SchemaStatistics:
    tables: List[TableStatistics] = field(default_factory=list)
    unreadable_tables: List[str] = field(default_factory=list)

    @property
    def total_tables(self) -> int:
        return len(self.tables) + len(self.unreadable_tables)

    @property
    def total_rows(self) -> int:
        return sum(t.rows for t in self.tables)

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "totalTables": self.total_tables,
            "totalRows": self.total_rows,
            "tables": [t.to_dict() for t in self.tables],
        }
        if self.unreadable_tables:
            result["unreadableTables"] = list(self.unreadable_tables)
        return result

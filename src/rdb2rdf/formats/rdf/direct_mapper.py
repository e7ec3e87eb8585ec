"""
Direct Mapping Engine

Derives RDF from a relational schema and its rows with a fixed,
deterministic algorithm (no user configuration):

1. Every table becomes an ``rdfs:Class`` labelled with its capitalized name.
2. Every row with a non-null primary key becomes an instance of that class.
3. Every non-null column value becomes a property of the instance: a named
   node pointing at the referenced row for foreign-key columns, a typed
   literal otherwise.

Limitations:
- Only single-column primary keys are supported. Tables with no key or a
  composite key keep their class triples but their rows are skipped with a
  warning.
- Foreign-key targets are not checked for existence; dangling references are
  reported by the quality validator instead.
- Tables are scanned sequentially, one bounded row read per table.
"""

import logging
import time
from typing import Callable, List, Optional

from rdflib import Graph, Literal
from rdflib.namespace import RDF, RDFS

from ...constants import DirectMappingLimits, Namespaces
from ...core.data_sources.protocols import Row, RowSource
from ...core.exceptions import RowProcessingError, SchemaAccessError
from ...shared.models.results import MappingResult, SchemaStatistics, TableStatistics
from ...shared.models.schema import SchemaSnapshot, Table
from .rdf_io import create_graph, serialize_graph
from .type_mapper import TypeMapper
from .uri_utils import URIUtils

logger = logging.getLogger(__name__)

Triple = tuple
ProgressCallback = Callable[[str], None]


class DirectMapper:
    """
    Direct Mapping of a relational schema to RDF.

    Example:
        mapper = DirectMapper("http://example.org/")
        result = mapper.map(schema, data_source)
        print(result.get_summary())
        turtle = mapper.execute(schema, data_source)
    """

    def __init__(
        self,
        base_namespace: str = Namespaces.DEFAULT_BASE,
        row_limit: int = DirectMappingLimits.ROW_SCAN_CAP,
    ):
        """
        Initialize the mapper.

        Args:
            base_namespace: Namespace prefixed to every generated URI.
            row_limit: Maximum rows read per table.
        """
        if row_limit <= 0:
            raise ValueError(f"row_limit must be positive, got {row_limit}")
        self.base_namespace = base_namespace
        self.row_limit = row_limit
        self.uris = URIUtils(base_namespace)

    def map(
        self,
        schema: SchemaSnapshot,
        row_source: RowSource,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> MappingResult:
        """
        Map every table of ``schema`` using rows read from ``row_source``.

        The run is best-effort: a table or row that fails is skipped and
        recorded in ``skipped_items``; triples of all other tables are kept.

        Args:
            schema: Schema snapshot to map.
            row_source: Source of table rows.
            progress_callback: Called with each table name once it is done.

        Returns:
            MappingResult with the graph, skipped items and run metrics.
        """
        start = time.perf_counter()
        result = MappingResult(graph=create_graph(self.base_namespace))
        metrics = {
            "tables_processed": 0,
            "tables_skipped": 0,
            "rows_mapped": 0,
            "rows_skipped": 0,
            "truncated_tables": [],
            "row_limit": self.row_limit,
        }
        result.metrics = metrics

        logger.info(f"Starting Direct Mapping of {schema.total_tables} tables")

        for table in schema.tables:
            self._add_class_triples(result.graph, table)
            try:
                if self._check_key(table, result):
                    self._map_table(table, row_source, result)
                    metrics["tables_processed"] += 1
                else:
                    metrics["tables_skipped"] += 1
            except RowProcessingError as e:
                logger.warning(f"Skipping table {table.name}: {e.message}")
                result.add_skipped("table", table.name, e.message, code="TABLE_ERROR")
                metrics["tables_skipped"] += 1
            if progress_callback is not None:
                progress_callback(table.name)

        metrics["triple_count"] = len(result.graph)
        metrics["processing_time"] = f"{time.perf_counter() - start:.2f}s"
        logger.info(
            f"Direct Mapping completed: {metrics['triple_count']} triples, "
            f"{metrics['rows_mapped']} rows mapped, {metrics['rows_skipped']} rows skipped"
        )
        return result

    def execute(
        self,
        schema: SchemaSnapshot,
        row_source: RowSource,
        rdf_format: str = "turtle",
    ) -> str:
        """Run the mapping and return serialized RDF text."""
        result = self.map(schema, row_source)
        return serialize_graph(result.graph, rdf_format)

    def generate_statistics(self, schema: SchemaSnapshot, row_source: RowSource) -> SchemaStatistics:
        """
        Count rows per table and estimate the triples a full mapping would produce.

        Tables whose rows cannot be counted are listed as unreadable.
        """
        stats = SchemaStatistics()
        for table in schema.tables:
            try:
                rows = row_source.count_rows(table.name)
            except SchemaAccessError as e:
                logger.warning(f"Could not count rows of {table.name}: {e}")
                stats.unreadable_tables.append(table.name)
                continue
            stats.tables.append(TableStatistics(table=table.name, rows=rows, columns=len(table.columns)))
        return stats

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _add_class_triples(self, graph: Graph, table: Table) -> None:
        class_uri = self.uris.class_uri(table.name)
        graph.add((class_uri, RDF.type, RDFS.Class))
        graph.add((class_uri, RDFS.label, Literal(self.uris.capitalize(table.name))))

    def _check_key(self, table: Table, result: MappingResult) -> bool:
        """Return True when the table's rows can be identified."""
        if not table.primary_keys:
            reason = f"Table {table.name} has no primary key; rows skipped"
            logger.warning(reason)
            result.add_skipped("table", table.name, reason, code="NO_PRIMARY_KEY")
            return False
        if table.has_composite_key:
            reason = (
                f"Table {table.name} has a composite primary key "
                f"({', '.join(table.primary_keys)}); composite keys are not supported, rows skipped"
            )
            logger.warning(reason)
            result.add_skipped("table", table.name, reason, code="COMPOSITE_PRIMARY_KEY")
            return False
        return True

    def _read_rows(self, table: Table, row_source: RowSource) -> List[Row]:
        try:
            return row_source.read_rows(table.name, limit=self.row_limit + 1)
        except Exception as e:
            raise RowProcessingError(f"Could not read rows: {e}", table=table.name) from e

    def _map_table(self, table: Table, row_source: RowSource, result: MappingResult) -> None:
        rows = self._read_rows(table, row_source)
        if len(rows) > self.row_limit:
            logger.info(f"Table {table.name} exceeds the row limit; mapping first {self.row_limit} rows")
            result.metrics["truncated_tables"].append(table.name)
            rows = rows[:self.row_limit]

        logger.debug(f"Processing table {table.name}: {len(rows)} rows")
        pk_column = table.primary_key
        for index, row in enumerate(rows):
            key_value = row.get(pk_column)
            if key_value is None:
                result.metrics["rows_skipped"] += 1
                continue
            try:
                triples = self._map_row(table, pk_column, row)
            except Exception as e:
                error = RowProcessingError(str(e), table=table.name, row_key=key_value)
                logger.warning(f"Skipping row {key_value} of {table.name}: {error.message}")
                result.add_skipped("row", f"{table.name}/{key_value}", error.message, code="ROW_ERROR")
                result.metrics["rows_skipped"] += 1
                continue
            for triple in triples:
                result.graph.add(triple)
            result.metrics["rows_mapped"] += 1

    def _map_row(self, table: Table, pk_column: str, row: Row) -> List[Triple]:
        """Build all triples for one row; nothing is added if any column fails."""
        instance = self.uris.instance_uri(table.name, row[pk_column])
        triples: List[Triple] = [(instance, RDF.type, self.uris.class_uri(table.name))]

        for column in table.columns:
            value = row.get(column.name)
            if value is None:
                continue
            predicate = self.uris.property_uri(table.name, column.name)
            fk = table.foreign_key_for(column.name)
            if fk is not None:
                triples.append((instance, predicate, self.uris.instance_uri(fk.target_table, value)))
            else:
                triples.append((instance, predicate, TypeMapper.to_literal(value, column.data_type)))
        return triples

"""
R2RML Materializer

Applies a mapping configuration to relational rows and produces the data
triples it describes.

Per TriplesMap and row:
- subject from the subject map template (IRI) or column (IRI, resolved
  against the base namespace when relative)
- one rdf:type triple per subject map class
- one triple per predicate-object map whose object can be resolved:
  column -> literal (datatype or language when given, natural type otherwise),
  template -> IRI, constant -> literal, parentTriplesMap -> the parent's
  subject (joined on the join condition when given, same row otherwise)

NULL columns yield no triple. Rows whose subject cannot be resolved are
skipped with a warning, as are object templates naming a column the row
does not have.
"""

import logging
import time
from collections import defaultdict
from typing import Any, Dict, List, Optional, Tuple

from rdflib import Literal, URIRef
from rdflib.namespace import RDF

from ...constants import Namespaces
from ...core.data_sources.protocols import Row, RowSource, supports_queries
from ...core.exceptions import MappingConfigError, SchemaAccessError, TemplateResolutionError
from ...shared.models.results import MappingResult
from ..rdf.rdf_io import create_graph
from ..rdf.type_mapper import TypeMapper
from ..rdf.uri_utils import URIUtils
from .generator import R2RMLGenerator, constant_literal
from .models import (
    ColumnObjectMap,
    ConstantObjectMap,
    MappingConfiguration,
    ReferenceObjectMap,
    SubjectMap,
    TemplateObjectMap,
    TriplesMap,
)
from .template import RRTemplate

logger = logging.getLogger(__name__)


class _SkipRow(Exception):
    """Internal signal: the current row has no resolvable subject."""


class R2RMLMaterializer:
    """
    Executes mapping configurations against a RowSource.

    Example:
        materializer = R2RMLMaterializer("http://ex.org/")
        result = materializer.materialize(config, data_source)
        print(result.triple_count)
    """

    def __init__(self, base_namespace: str = Namespaces.DEFAULT_BASE, row_limit: Optional[int] = None):
        """
        Args:
            base_namespace: Base for relative IRIs from column-valued subjects.
            row_limit: Maximum rows read per logical table (all when None).
        """
        self.base_namespace = base_namespace
        self.row_limit = row_limit
        self._templates: Dict[str, RRTemplate] = {}

    def materialize(self, config: MappingConfiguration, row_source: RowSource) -> MappingResult:
        """
        Produce the data graph described by ``config``.

        Raises:
            MappingConfigError: If the configuration is invalid or references
                an unknown parentTriplesMap.
        """
        start = time.perf_counter()
        generator = R2RMLGenerator(self.base_namespace)
        validation = generator.validate(config)
        if not validation.valid:
            raise MappingConfigError(validation.errors)
        missing = sorted({
            pom.object_map.parent_triples_map
            for tm in config.triples_maps
            for pom in tm.predicate_object_maps
            if isinstance(pom.object_map, ReferenceObjectMap)
            and config.get_triples_map(pom.object_map.parent_triples_map) is None
        })
        if missing:
            raise MappingConfigError([f"parentTriplesMap '{m}' does not resolve to a TriplesMap" for m in missing])

        result = MappingResult(graph=create_graph(self.base_namespace))
        result.metrics = {"triples_maps": len(config.triples_maps), "rows_mapped": 0, "rows_skipped": 0}
        row_cache: Dict[str, Optional[List[Row]]] = {}
        join_index: Dict[Tuple[str, str], Dict[str, List[URIRef]]] = {}

        for tm in config.triples_maps:
            rows = self._logical_rows(tm, row_source, row_cache, result)
            if rows is None:
                continue
            logger.debug(f"Materializing {tm.id}: {len(rows)} rows")
            for row in rows:
                try:
                    self._map_row(config, tm, row, row_source, row_cache, join_index, result)
                    result.metrics["rows_mapped"] += 1
                except _SkipRow as e:
                    result.add_skipped("row", tm.id, str(e), code="UNRESOLVED_SUBJECT")
                    result.metrics["rows_skipped"] += 1

        result.metrics["triple_count"] = len(result.graph)
        result.metrics["processing_time"] = f"{time.perf_counter() - start:.2f}s"
        logger.info(f"Materialization completed: {len(result.graph)} triples")
        return result

    # ------------------------------------------------------------------
    # Rows
    # ------------------------------------------------------------------

    def _logical_rows(
        self,
        tm: TriplesMap,
        row_source: RowSource,
        cache: Dict[str, Optional[List[Row]]],
        result: MappingResult,
    ) -> Optional[List[Row]]:
        if tm.id in cache:
            return cache[tm.id]

        rows: Optional[List[Row]] = None
        lt = tm.logical_table
        if lt.is_query and not supports_queries(row_source):
            reason = f"TriplesMap {tm.id}: row source cannot evaluate SQL queries"
            logger.warning(reason)
            result.add_skipped("table", tm.id, reason, code="QUERY_UNSUPPORTED")
        else:
            try:
                if lt.is_query:
                    rows = row_source.execute_query(lt.sql_query, limit=self.row_limit)
                else:
                    rows = row_source.read_rows(lt.table_name, limit=self.row_limit)
            except SchemaAccessError as e:
                logger.warning(f"Skipping TriplesMap {tm.id}: {e.message}")
                result.add_skipped("table", tm.id, e.message, code="TABLE_ERROR")
        cache[tm.id] = rows
        return rows

    def _template(self, template: str) -> RRTemplate:
        parsed = self._templates.get(template)
        if parsed is None:
            parsed = self._templates[template] = RRTemplate(template)
        return parsed

    # ------------------------------------------------------------------
    # Terms
    # ------------------------------------------------------------------

    def _subject(self, subject_map: SubjectMap, row: Row) -> Optional[URIRef]:
        if subject_map.template is not None:
            try:
                return URIRef(self._template(subject_map.template).expand(row))
            except TemplateResolutionError:
                return None
        value = row.get(subject_map.column)
        if value is None:
            return None
        return self._column_iri(value)

    def _column_iri(self, value: Any) -> URIRef:
        lexical = TypeMapper.lexical_form(value)
        if "://" in lexical:
            return URIRef(lexical)
        return URIRef(f"{self.base_namespace}{URIUtils.encode_key(value)}")

    def _parent_subjects(
        self,
        config: MappingConfiguration,
        om: ReferenceObjectMap,
        row: Row,
        row_source: RowSource,
        row_cache: Dict[str, Optional[List[Row]]],
        join_index: Dict[Tuple[str, str], Dict[str, List[URIRef]]],
        result: MappingResult,
    ) -> List[URIRef]:
        parent = config.get_triples_map(om.parent_triples_map)
        if om.join_condition is None:
            subject = self._subject(parent.subject_map, row)
            return [subject] if subject is not None else []

        child_value = row.get(om.join_condition.child)
        if child_value is None:
            return []

        key = (parent.id, om.join_condition.parent)
        index = join_index.get(key)
        if index is None:
            index = defaultdict(list)
            for parent_row in self._logical_rows(parent, row_source, row_cache, result) or []:
                parent_value = parent_row.get(om.join_condition.parent)
                subject = self._subject(parent.subject_map, parent_row)
                if parent_value is not None and subject is not None:
                    index[TypeMapper.lexical_form(parent_value)].append(subject)
            join_index[key] = index
        return index.get(TypeMapper.lexical_form(child_value), [])

    def _map_row(
        self,
        config: MappingConfiguration,
        tm: TriplesMap,
        row: Row,
        row_source: RowSource,
        row_cache: Dict[str, Optional[List[Row]]],
        join_index: Dict[Tuple[str, str], Dict[str, List[URIRef]]],
        result: MappingResult,
    ) -> None:
        subject = self._subject(tm.subject_map, row)
        if subject is None:
            raise _SkipRow(f"Subject of {tm.id} could not be resolved for row {row}")

        graph = result.graph
        for cls in tm.subject_map.classes:
            graph.add((subject, RDF.type, URIRef(cls)))

        for pom in tm.predicate_object_maps:
            predicate = URIRef(pom.predicate)
            om = pom.object_map
            if isinstance(om, ColumnObjectMap):
                value = row.get(om.column)
                if value is None:
                    continue
                if om.language:
                    obj = Literal(TypeMapper.lexical_form(value), lang=om.language)
                elif om.datatype:
                    obj = Literal(TypeMapper.lexical_form(value), datatype=URIRef(om.datatype))
                else:
                    obj = Literal(value)
                graph.add((subject, predicate, obj))
            elif isinstance(om, TemplateObjectMap):
                try:
                    graph.add((subject, predicate, URIRef(self._template(om.template).expand(row))))
                except TemplateResolutionError as e:
                    if e.placeholder in row:
                        continue
                    logger.warning(f"{tm.id}: {e.message}")
                    result.add_skipped("row", tm.id, e.message, code="UNRESOLVED_OBJECT")
            elif isinstance(om, ConstantObjectMap):
                graph.add((subject, predicate, constant_literal(om.constant)))
            elif isinstance(om, ReferenceObjectMap):
                for parent_subject in self._parent_subjects(
                    config, om, row, row_source, row_cache, join_index, result
                ):
                    graph.add((subject, predicate, parent_subject))
            else:
                raise TypeError(f"Unsupported object map type: {type(om).__name__}")

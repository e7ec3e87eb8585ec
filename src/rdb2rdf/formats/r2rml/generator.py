"""
Mapping Document Generator

Renders a MappingConfiguration as an R2RML mapping graph and as Turtle text.

Every generated node is a named node in the mapping namespace
(``base_namespace + "mapping/"``), named after its TriplesMap id:

    <id>                    the TriplesMap
    <id>_LogicalTable       its logical table
    <id>_SubjectMap         its subject map
    <id>_POM_<i>            i-th predicate-object map (0-based)
    <id>_ObjectMap_<i>      object map of the i-th predicate-object map
    <id>_Join_<i>           join condition of the i-th predicate-object map

Stable names mean an unchanged configuration always produces an identical
graph and byte-identical text.
"""

import logging
from typing import Any, Dict, List, Sequence, Tuple, Union
from urllib.parse import quote

from rdflib import Graph, Literal, URIRef
from rdflib.namespace import RDF, XSD
from rdflib.term import Node

from ...constants import Namespaces
from ...core.exceptions import MappingConfigError
from ...shared.models.results import MappingValidationResult
from ..rdf.rdf_io import RR, create_graph
from .models import (
    ColumnObjectMap,
    ConstantObjectMap,
    MappingConfiguration,
    ObjectMap,
    ReferenceObjectMap,
    TemplateObjectMap,
    TriplesMap,
)
from .turtle_writer import Block, TurtleWriter
from .validator import validate_mapping_dict

logger = logging.getLogger(__name__)

ConfigInput = Union[MappingConfiguration, Dict[str, Any]]


def _as_dict(config: ConfigInput) -> Any:
    if isinstance(config, MappingConfiguration):
        return config.to_dict()
    return config


class R2RMLGenerator:
    """
    Validates mapping configurations and renders them as R2RML.

    Example:
        generator = R2RMLGenerator("http://ex.org/")
        result = generator.validate(config)
        if result.valid:
            turtle = generator.generate_turtle(config)
    """

    def __init__(self, base_namespace: str = Namespaces.DEFAULT_BASE):
        self.base_namespace = base_namespace
        self.mapping_namespace = f"{base_namespace}{Namespaces.MAPPING_SUFFIX}"
        self.writer = TurtleWriter([
            ("", self.mapping_namespace),
            ("rr", Namespaces.R2RML),
            ("ex", self.base_namespace),
            ("xsd", Namespaces.XSD),
            ("rdf", Namespaces.RDF),
        ])

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def validate(self, config: ConfigInput) -> MappingValidationResult:
        """Collect every structural problem of ``config``."""
        return MappingValidationResult(errors=validate_mapping_dict(_as_dict(config)))

    def _require_valid(self, config: ConfigInput) -> MappingConfiguration:
        if isinstance(config, MappingConfiguration):
            result = self.validate(config)
            if not result.valid:
                raise MappingConfigError(result.errors)
            return config
        return MappingConfiguration.from_dict(config)

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------

    def generate(
        self,
        config: ConfigInput,
        linked: Sequence[MappingConfiguration] = (),
    ) -> Graph:
        """
        Build the mapping graph.

        Args:
            config: Configuration to render.
            linked: Other configurations whose TriplesMaps may be referenced
                as ``parentTriplesMap``.

        Raises:
            MappingConfigError: If the configuration is invalid or a
                ``parentTriplesMap`` does not resolve.
        """
        graph = create_graph(self.base_namespace)
        graph.bind("", self.mapping_namespace)
        for subject, pairs in self._build_blocks(config, linked):
            for predicate, obj in pairs:
                graph.add((subject, predicate, obj))
        return graph

    def generate_turtle(
        self,
        config: ConfigInput,
        linked: Sequence[MappingConfiguration] = (),
    ) -> str:
        """Render the mapping graph as deterministic Turtle text."""
        return self.writer.render(self._build_blocks(config, linked))

    def statistics(self, config: ConfigInput) -> Dict[str, int]:
        mapping = self._require_valid(config)
        return {
            "triplesMaps": len(mapping.triples_maps),
            "totalPredicates": mapping.total_predicates,
        }

    def node(self, name: str) -> URIRef:
        """Named node for a mapping element."""
        return URIRef(f"{self.mapping_namespace}{quote(name, safe='-._~')}")

    def _build_blocks(self, config: ConfigInput, linked: Sequence[MappingConfiguration]) -> List[Block]:
        mapping = self._require_valid(config)

        known_ids = {tm.id for tm in mapping.triples_maps}
        for other in linked:
            known_ids.update(tm.id for tm in other.triples_maps)

        unresolved = [
            f"TriplesMap {tm.id} POM {i}: parentTriplesMap '{pom.object_map.parent_triples_map}' "
            f"does not resolve to a TriplesMap"
            for tm in mapping.triples_maps
            for i, pom in enumerate(tm.predicate_object_maps)
            if isinstance(pom.object_map, ReferenceObjectMap)
            and pom.object_map.parent_triples_map not in known_ids
        ]
        if unresolved:
            raise MappingConfigError(unresolved)

        blocks: List[Block] = []
        for tm in mapping.triples_maps:
            blocks.extend(self._triples_map_blocks(tm))
        logger.debug(f"Generated {len(blocks)} mapping nodes for {len(mapping.triples_maps)} TriplesMaps")
        return blocks

    def _triples_map_blocks(self, tm: TriplesMap) -> List[Block]:
        tm_node = self.node(tm.id)
        lt_node = self.node(f"{tm.id}_LogicalTable")
        sm_node = self.node(f"{tm.id}_SubjectMap")

        head: List[Tuple[URIRef, Node]] = [
            (RDF.type, RR.TriplesMap),
            (RR.logicalTable, lt_node),
            (RR.subjectMap, sm_node),
        ]
        for i in range(len(tm.predicate_object_maps)):
            head.append((RR.predicateObjectMap, self.node(f"{tm.id}_POM_{i}")))
        blocks: List[Block] = [(tm_node, head)]

        lt = tm.logical_table
        if lt.is_query:
            blocks.append((lt_node, [(RR.sqlQuery, Literal(lt.sql_query))]))
        else:
            blocks.append((lt_node, [(RR.tableName, Literal(lt.table_name))]))

        sm = tm.subject_map
        sm_pairs: List[Tuple[URIRef, Node]] = []
        if sm.template is not None:
            sm_pairs.append((RR.template, Literal(sm.template)))
        else:
            sm_pairs.append((RR.column, Literal(sm.column)))
        for cls in sm.classes:
            sm_pairs.append((RR["class"], URIRef(cls)))
        blocks.append((sm_node, sm_pairs))

        for i, pom in enumerate(tm.predicate_object_maps):
            pom_node = self.node(f"{tm.id}_POM_{i}")
            om_node = self.node(f"{tm.id}_ObjectMap_{i}")
            blocks.append((pom_node, [
                (RR.predicate, URIRef(pom.predicate)),
                (RR.objectMap, om_node),
            ]))
            blocks.extend(self._object_map_blocks(tm.id, i, om_node, pom.object_map))
        return blocks

    def _object_map_blocks(self, tm_id: str, index: int, om_node: URIRef, om: ObjectMap) -> List[Block]:
        if isinstance(om, ColumnObjectMap):
            pairs: List[Tuple[URIRef, Node]] = [(RR.column, Literal(om.column))]
            if om.datatype:
                pairs.append((RR.datatype, URIRef(om.datatype)))
            if om.language:
                pairs.append((RR.language, Literal(om.language)))
            return [(om_node, pairs)]

        if isinstance(om, TemplateObjectMap):
            return [(om_node, [(RR.template, Literal(om.template))])]

        if isinstance(om, ConstantObjectMap):
            return [(om_node, [(RR.constant, constant_literal(om.constant))])]

        if isinstance(om, ReferenceObjectMap):
            pairs = [(RR.parentTriplesMap, self.node(om.parent_triples_map))]
            if om.join_condition is None:
                return [(om_node, pairs)]
            join_node = self.node(f"{tm_id}_Join_{index}")
            pairs.append((RR.joinCondition, join_node))
            return [
                (om_node, pairs),
                (join_node, [
                    (RR.child, Literal(om.join_condition.child)),
                    (RR.parent, Literal(om.join_condition.parent)),
                ]),
            ]

        raise TypeError(f"Unsupported object map type: {type(om).__name__}")


def constant_literal(value: Any) -> Literal:
    """Literal for an rr:constant value; booleans become xsd:boolean."""
    if isinstance(value, bool):
        return Literal("true" if value else "false", datatype=XSD.boolean)
    return Literal(str(value))

"""
RDF Parser and Serializer Module

This module is the boundary between in-memory triples (rdflib graphs) and
RDF text.

Components:
- create_graph: New graph with the standard prefix bindings
- RDFGraphParser: Format resolution and parsing with syntax error reporting
- serialize_graph: Graph to text in any rdflib serialization
"""

import logging
from pathlib import Path
from typing import Optional, Union

from rdflib import Dataset, Graph, Namespace
from rdflib.namespace import RDF, RDFS, XSD

from ...constants import FileExtensions, Namespaces
from ...core.exceptions import RdfSyntaxError

logger = logging.getLogger(__name__)

RR = Namespace(Namespaces.R2RML)

_FORMAT_ALIASES = {
    "turtle": "turtle",
    "ttl": "turtle",
    "n3": "n3",
    "nt": "nt",
    "ntriples": "nt",
    "n-triples": "nt",
    "nquads": "nquads",
    "nq": "nquads",
    "n-quads": "nquads",
    "trig": "trig",
    "xml": "xml",
    "rdf": "xml",
    "rdf/xml": "xml",
    "json-ld": "json-ld",
    "jsonld": "json-ld",
}

QUAD_FORMATS = frozenset({"nquads", "trig"})


def create_graph(base_namespace: Optional[str] = None) -> Graph:
    """
    Create an empty graph with the standard prefixes bound.

    Args:
        base_namespace: Bound to the ``ex`` prefix when given.
    """
    graph = Graph()
    if base_namespace:
        graph.bind("ex", Namespace(base_namespace))
    graph.bind("rdf", RDF)
    graph.bind("rdfs", RDFS)
    graph.bind("xsd", XSD)
    graph.bind("rr", RR)
    return graph


class RDFGraphParser:
    """
    Handles RDF text parsing with format resolution and validation.

    Quad serializations are parsed into a Dataset and flattened into a
    single triple graph; the graph component of each quad is dropped.
    """

    DEFAULT_FORMAT = "turtle"

    @staticmethod
    def infer_format_from_path(path: Union[str, Path, None]) -> Optional[str]:
        """Infer an rdflib format name from a file extension."""
        if not path:
            return None
        suffix = Path(str(path)).suffix.lower()
        return FileExtensions.FORMAT_BY_EXTENSION.get(suffix)

    @classmethod
    def resolve_format(
        cls,
        rdf_format: Optional[str] = None,
        source_path: Union[str, Path, None] = None,
    ) -> str:
        """
        Resolve an explicit format name or a file extension to an rdflib format.

        Raises:
            ValueError: If an explicit format name is not supported.
        """
        if rdf_format:
            resolved = _FORMAT_ALIASES.get(rdf_format.strip().lower())
            if resolved is None:
                raise ValueError(
                    f"Unsupported RDF format '{rdf_format}'. "
                    f"Supported: {', '.join(sorted(set(_FORMAT_ALIASES.values())))}"
                )
            return resolved
        return cls.infer_format_from_path(source_path) or cls.DEFAULT_FORMAT

    @classmethod
    def parse(cls, content: str, rdf_format: Optional[str] = None) -> Graph:
        """
        Parse RDF text into a triple graph.

        Args:
            content: RDF text. Empty or blank text yields an empty graph.
            rdf_format: Serialization name; Turtle when omitted.

        Returns:
            Parsed Graph.

        Raises:
            RdfSyntaxError: If the text is not valid in the given format.
        """
        try:
            format_name = cls.resolve_format(rdf_format)
        except ValueError as e:
            raise RdfSyntaxError(str(e), rdf_format=rdf_format)

        graph = create_graph()
        if content is None or not content.strip():
            logger.debug("Empty RDF content; returning empty graph")
            return graph

        try:
            if format_name in QUAD_FORMATS:
                dataset = Dataset()
                dataset.parse(data=content, format=format_name)
                for s, p, o, _ in dataset.quads((None, None, None, None)):
                    graph.add((s, p, o))
                for prefix, namespace in dataset.namespaces():
                    graph.bind(prefix, namespace, override=False)
            else:
                graph.parse(data=content, format=format_name)
        except Exception as e:
            logger.debug(f"Failed to parse {format_name} content: {e}")
            raise RdfSyntaxError(f"Invalid {format_name} syntax: {e}", rdf_format=format_name)

        logger.debug(f"Parsed {len(graph)} triples ({format_name})")
        return graph

    @classmethod
    def parse_file(cls, file_path: Union[str, Path], rdf_format: Optional[str] = None) -> Graph:
        """
        Parse an RDF file, inferring the format from its extension.

        Raises:
            FileNotFoundError: If the file doesn't exist.
            RdfSyntaxError: If the file has invalid syntax.
        """
        path = Path(file_path)
        if not path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")
        content = path.read_text(encoding="utf-8")
        return cls.parse(content, cls.resolve_format(rdf_format, path))


def serialize_graph(graph: Graph, rdf_format: str = "turtle") -> str:
    """
    Serialize a graph to text.

    Raises:
        ValueError: If the format is not supported.
    """
    format_name = RDFGraphParser.resolve_format(rdf_format)
    if format_name in QUAD_FORMATS:
        dataset = Dataset()
        for prefix, namespace in graph.namespaces():
            dataset.bind(prefix, namespace)
        for triple in graph:
            dataset.add(triple)
        return dataset.serialize(format=format_name)
    return graph.serialize(format=format_name)

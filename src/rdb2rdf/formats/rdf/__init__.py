"""
RDF side of the mapping engines.

- rdf_io: graph creation, parsing and serialization
- type_mapper: SQL type -> XSD datatype, Python value -> literal
- uri_utils: class / instance / property URI construction
- direct_mapper: Direct Mapping of schema + rows to RDF
- quality_validator: scored quality report over RDF text
"""

from .direct_mapper import DirectMapper
from .quality_validator import (
    RDFQualityValidator,
    ValidationEntry,
    ValidationReport,
    calculate_quality_score,
    validate_rdf_content,
    validate_rdf_file,
)
from .rdf_io import RR, RDFGraphParser, create_graph, serialize_graph
from .type_mapper import SQL_TO_XSD_TYPE, TypeMapper
from .uri_utils import URIUtils

__all__ = [
    "DirectMapper",
    "RDFQualityValidator",
    "ValidationEntry",
    "ValidationReport",
    "calculate_quality_score",
    "validate_rdf_content",
    "validate_rdf_file",
    "RR",
    "RDFGraphParser",
    "create_graph",
    "serialize_graph",
    "SQL_TO_XSD_TYPE",
    "TypeMapper",
    "URIUtils",
]

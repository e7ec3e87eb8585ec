"""
rdb2rdf - relational databases to RDF.

Two mapping strategies over one schema snapshot:
- DirectMapper: fixed, deterministic Direct Mapping of tables and rows
- R2RMLGenerator / R2RMLMaterializer: user-authored mapping configurations

and an RDFQualityValidator that scores the resulting linked data.

Usage:
    from rdb2rdf import DirectMapper, InMemoryDataSource, RDFQualityValidator

    source = InMemoryDataSource.from_file("export.json")
    mapper = DirectMapper("http://example.org/")
    turtle = mapper.execute(source.get_schema(), source)
    report = RDFQualityValidator().validate(turtle, schema=source.get_schema(), row_source=source)
"""

from .config import MapperConfig
from .core import (
    MappingConfigError,
    MemoryLogHandler,
    Rdb2RdfError,
    RdfSyntaxError,
    RowProcessingError,
    SchemaAccessError,
    TemplateResolutionError,
)
from .core.data_sources import InMemoryDataSource, SqlAlchemyDataSource
from .formats.r2rml import (
    MappingConfiguration,
    R2RMLGenerator,
    R2RMLMaterializer,
    TemplateGenerator,
)
from .formats.rdf import DirectMapper, RDFGraphParser, RDFQualityValidator, ValidationReport
from .shared.models import Column, ForeignKey, SchemaSnapshot, Table

__version__ = "0.1.0"

__all__ = [
    "MapperConfig",
    "Rdb2RdfError",
    "SchemaAccessError",
    "MappingConfigError",
    "RdfSyntaxError",
    "RowProcessingError",
    "TemplateResolutionError",
    "MemoryLogHandler",
    "InMemoryDataSource",
    "SqlAlchemyDataSource",
    "DirectMapper",
    "RDFGraphParser",
    "RDFQualityValidator",
    "ValidationReport",
    "MappingConfiguration",
    "R2RMLGenerator",
    "R2RMLMaterializer",
    "TemplateGenerator",
    "Column",
    "ForeignKey",
    "Table",
    "SchemaSnapshot",
]

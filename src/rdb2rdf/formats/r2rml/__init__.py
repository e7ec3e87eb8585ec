"""
R2RML-style mapping configurations.

- models: configuration data types (TriplesMap, ObjectMap variants, ...)
- validator: structural validation collecting every error
- generator: configuration -> R2RML graph / deterministic Turtle
- template_generator: default TriplesMaps from a schema
- template: ``{column}`` template parsing and expansion
- materializer: configuration + rows -> data triples
"""

from .generator import R2RMLGenerator
from .materializer import R2RMLMaterializer
from .models import (
    ColumnObjectMap,
    ConstantObjectMap,
    JoinCondition,
    LogicalTable,
    MappingConfiguration,
    ObjectMap,
    PredicateObjectMap,
    ReferenceObjectMap,
    SubjectMap,
    TemplateObjectMap,
    TriplesMap,
    load_mapping_configuration,
    save_mapping_configuration,
)
from .template import RRTemplate
from .template_generator import TemplateGenerator
from .turtle_writer import TurtleWriter, escape_literal
from .validator import validate_mapping_dict

__all__ = [
    "R2RMLGenerator",
    "R2RMLMaterializer",
    "TemplateGenerator",
    "RRTemplate",
    "TurtleWriter",
    "escape_literal",
    "validate_mapping_dict",
    "MappingConfiguration",
    "TriplesMap",
    "LogicalTable",
    "SubjectMap",
    "PredicateObjectMap",
    "ObjectMap",
    "ColumnObjectMap",
    "TemplateObjectMap",
    "ConstantObjectMap",
    "ReferenceObjectMap",
    "JoinCondition",
    "load_mapping_configuration",
    "save_mapping_configuration",
]

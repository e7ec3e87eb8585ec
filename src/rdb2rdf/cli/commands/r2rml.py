"""
Mapping configuration commands: template, generate, validate-mapping, materialize.
"""

import argparse
import json
import logging
import sys

from ...constants import ExitCode
from ...formats.r2rml import (
    MappingConfiguration,
    R2RMLGenerator,
    R2RMLMaterializer,
    TemplateGenerator,
    load_mapping_configuration,
)
from ...formats.r2rml.validator import validate_mapping_dict
from ...formats.rdf import serialize_graph
from ..helpers import write_output
from .base import BaseCommand, handle_errors

logger = logging.getLogger(__name__)


class TemplateCommand(BaseCommand):
    """
    Generate default TriplesMaps from the database schema.

    Usage:
        template (--database URL | --data FILE) [--table NAME ...] [--output FILE]
    """

    @handle_errors
    def execute(self, args: argparse.Namespace) -> int:
        self.prepare(args)
        generator = TemplateGenerator(self.base_namespace(args))

        source = self.acquire_data_source(args)
        try:
            schema = source.get_schema()
        finally:
            self.release_data_source(source)

        config = generator.template_configuration(schema, table_names=getattr(args, "tables", None))
        if not config.triples_maps:
            print("✗ No table could be templated", file=sys.stderr)
            return ExitCode.VALIDATION_ERROR

        write_output(json.dumps(config.to_dict(), indent=2), args.output)
        return ExitCode.SUCCESS


class GenerateCommand(BaseCommand):
    """
    Render a mapping configuration as R2RML Turtle.

    Usage:
        generate MAPPING.json [--output FILE]
    """

    @handle_errors
    def execute(self, args: argparse.Namespace) -> int:
        self.prepare(args)
        config = load_mapping_configuration(args.mapping)
        generator = R2RMLGenerator(self.base_namespace(args))

        turtle = generator.generate_turtle(config)
        write_output(turtle, args.output)

        stats = generator.statistics(config)
        print(
            f"✓ Generated {stats['triplesMaps']} TriplesMaps with {stats['totalPredicates']} predicates",
            file=sys.stderr,
        )
        return ExitCode.SUCCESS


class ValidateMappingCommand(BaseCommand):
    """
    Report every structural problem of a mapping configuration.

    Usage:
        validate-mapping MAPPING.json
    """

    @handle_errors
    def execute(self, args: argparse.Namespace) -> int:
        self.prepare(args)
        try:
            with open(args.mapping, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            print(f"✗ Invalid JSON in {args.mapping}: {e}")
            return ExitCode.VALIDATION_ERROR

        if isinstance(data, dict) and isinstance(data.get("mappingConfig"), dict):
            data = data["mappingConfig"]

        errors = validate_mapping_dict(data)
        if errors:
            print(f"✗ {len(errors)} error(s) found:")
            for error in errors:
                print(f"  - {error}")
            return ExitCode.VALIDATION_ERROR

        config = MappingConfiguration.from_dict(data)
        print(
            f"✓ Mapping configuration is valid "
            f"({len(config.triples_maps)} TriplesMaps, {config.total_predicates} predicates)"
        )
        return ExitCode.SUCCESS


class MaterializeCommand(BaseCommand):
    """
    Apply a mapping configuration to database rows.

    Usage:
        materialize MAPPING.json (--database URL | --data FILE) [--output FILE]
    """

    @handle_errors
    def execute(self, args: argparse.Namespace) -> int:
        self.prepare(args)
        config = load_mapping_configuration(args.mapping)
        materializer = R2RMLMaterializer(
            self.base_namespace(args), row_limit=getattr(args, "row_limit", None)
        )

        source = self.acquire_data_source(args)
        try:
            result = materializer.materialize(config, source)
        finally:
            self.release_data_source(source)

        write_output(serialize_graph(result.graph, args.rdf_format), args.output)
        print(result.get_summary(), file=sys.stderr)
        return ExitCode.SUCCESS

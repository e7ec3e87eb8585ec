"""
Quality validation command.
"""

import argparse
import logging
from pathlib import Path

from ...constants import ExitCode
from ...formats.r2rml import load_mapping_configuration
from ...formats.rdf import RDFGraphParser, RDFQualityValidator
from .base import BaseCommand, handle_errors

logger = logging.getLogger(__name__)


class ValidateCommand(BaseCommand):
    """
    Assess the quality of an RDF file.

    Usage:
        validate PATH [--quick] [--schema (--database URL | --data FILE)]
                      [--mapping FILE] [--output REPORT.json] [--verbose]

    Exit code is 0 when the report has no errors, 2 otherwise.
    """

    @handle_errors
    def execute(self, args: argparse.Namespace) -> int:
        self.prepare(args)
        path = Path(args.path)
        if not path.is_file():
            raise FileNotFoundError(f"File not found: {path}")
        rdf_text = path.read_text(encoding="utf-8")
        rdf_format = RDFGraphParser.resolve_format(getattr(args, "rdf_format", None), path)

        validator = RDFQualityValidator(known_vocabularies=self.config.known_vocabularies)
        if args.quick:
            report = validator.quick_validate(rdf_text, rdf_format=rdf_format)
        else:
            mapping = load_mapping_configuration(args.mapping) if getattr(args, "mapping", None) else None
            if args.schema:
                source = self.acquire_data_source(args)
                try:
                    report = validator.validate(
                        rdf_text,
                        mapping_config=mapping,
                        schema=source.get_schema(),
                        row_source=source,
                        rdf_format=rdf_format,
                    )
                finally:
                    self.release_data_source(source)
            else:
                report = validator.validate(rdf_text, mapping_config=mapping, rdf_format=rdf_format)

        if args.verbose:
            print(report.get_human_readable_summary())
        else:
            verdict = "✓ Valid" if report.valid else "✗ Invalid"
            print(
                f"{verdict} - score {report.score}/100 "
                f"({len(report.errors)} errors, {len(report.warnings)} warnings)"
            )
            for entry in report.errors + report.warnings:
                print(f"  [{entry.code}] {entry.message}")

        if args.output:
            report.save_to_file(args.output)
            print(f"Report saved to: {args.output}")

        return ExitCode.SUCCESS if report.valid else ExitCode.VALIDATION_ERROR

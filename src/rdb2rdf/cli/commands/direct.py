"""
Direct Mapping commands: direct, stats.
"""

import argparse
import json
import logging
import sys

from tqdm import tqdm

from ...constants import ExitCode
from ...formats.rdf import DirectMapper, serialize_graph
from ..helpers import write_output
from .base import BaseCommand, handle_errors

logger = logging.getLogger(__name__)


class DirectCommand(BaseCommand):
    """
    Convert a whole database to RDF with the Direct Mapping.

    Usage:
        direct (--database URL | --data FILE) [--output FILE] [--rdf-format FMT]
    """

    @handle_errors
    def execute(self, args: argparse.Namespace) -> int:
        self.prepare(args)
        row_limit = getattr(args, "row_limit", None) or self.config.row_limit
        mapper = DirectMapper(self.base_namespace(args), row_limit=row_limit)

        source = self.acquire_data_source(args)
        try:
            schema = source.get_schema()
            show_progress = not getattr(args, "no_progress", False)
            with tqdm(
                total=schema.total_tables,
                desc="Mapping tables",
                unit="table",
                file=sys.stderr,
                disable=not show_progress or schema.total_tables < 2,
            ) as pbar:
                result = mapper.map(schema, source, progress_callback=lambda _name: pbar.update(1))
        finally:
            self.release_data_source(source)

        write_output(serialize_graph(result.graph, args.rdf_format), args.output)

        print(result.get_summary(), file=sys.stderr)
        for item in result.skipped_items:
            logger.warning(f"[{item.code}] {item.reason}")
        return ExitCode.SUCCESS


class StatsCommand(BaseCommand):
    """
    Report per-table row counts and estimated triples.

    Usage:
        stats (--database URL | --data FILE) [--output FILE]
    """

    @handle_errors
    def execute(self, args: argparse.Namespace) -> int:
        self.prepare(args)
        mapper = DirectMapper(self.config.base_namespace, row_limit=self.config.row_limit)

        source = self.acquire_data_source(args)
        try:
            stats = mapper.generate_statistics(source.get_schema(), source)
        finally:
            self.release_data_source(source)

        write_output(json.dumps(stats.to_dict(), indent=2), args.output)
        return ExitCode.SUCCESS

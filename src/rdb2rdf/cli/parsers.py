"""
CLI argument parser configuration.

This module defines the argument parser structure for all CLI commands.

Command Structure:
    - direct            Direct Mapping of a database to RDF
    - stats             Row counts and triple estimates per table
    - template          Default mapping configuration for one or all tables
    - generate          Mapping configuration -> R2RML Turtle
    - validate-mapping  Structural validation of a mapping configuration
    - materialize       Mapping configuration + rows -> RDF
    - validate          Quality report for an RDF file
"""

import argparse


# ============================================================================
# Shared Flag Group Builders
# ============================================================================

def add_config_flag(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        '--config', '-c',
        help='Path to configuration file (JSON)'
    )


def add_source_flags(parser: argparse.ArgumentParser) -> None:
    """Add flags selecting the relational input."""
    group = parser.add_mutually_exclusive_group()
    group.add_argument(
        '--database',
        help='SQLAlchemy database URL (default: DATABASE_URL / config)'
    )
    group.add_argument(
        '--data',
        help='JSON file with {"schema": ..., "rows": ...} instead of a live database'
    )
    parser.add_argument(
        '--db-schema',
        help='Database schema to inspect (default: the connection default)'
    )


def add_namespace_flag(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        '--base-namespace', '-b',
        help='Base namespace for generated URIs (default: BASE_NAMESPACE / config)'
    )


def add_output_flags(parser: argparse.ArgumentParser, with_format: bool = True) -> None:
    parser.add_argument(
        '--output', '-o',
        help='Output file path (default: stdout)'
    )
    if with_format:
        parser.add_argument(
            '--rdf-format',
            default='turtle',
            help='RDF serialization: turtle, nt, nquads, trig, xml, json-ld (default: turtle)'
        )


# ============================================================================
# Main Parser Factory
# ============================================================================

def create_argument_parser() -> argparse.ArgumentParser:
    """
    Create and configure the main argument parser.

    Returns:
        Configured ArgumentParser with all subcommands.
    """
    parser = argparse.ArgumentParser(
        prog='rdb2rdf',
        description="Relational database to RDF mapper and linked-data quality validator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Direct Mapping
    %(prog)s direct --database sqlite:///shop.db --output shop.ttl
    %(prog)s direct --data export.json --base-namespace http://ex.org/

    # Mapping configurations
    %(prog)s template --data export.json --table users --output users.mapping.json
    %(prog)s validate-mapping users.mapping.json
    %(prog)s generate users.mapping.json --output users.r2rml.ttl
    %(prog)s materialize users.mapping.json --database sqlite:///shop.db

    # Quality validation
    %(prog)s validate shop.ttl --verbose
    %(prog)s validate shop.ttl --schema --data export.json --output report.json
        """,
    )
    parser.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        help='Override the configured log level'
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    _add_direct_parser(subparsers)
    _add_stats_parser(subparsers)
    _add_template_parser(subparsers)
    _add_generate_parser(subparsers)
    _add_validate_mapping_parser(subparsers)
    _add_materialize_parser(subparsers)
    _add_validate_parser(subparsers)

    return parser


# ============================================================================
# Command Parsers
# ============================================================================

def _add_direct_parser(subparsers: argparse._SubParsersAction) -> None:
    parser = subparsers.add_parser(
        'direct',
        help='Convert a database to RDF with the Direct Mapping'
    )
    add_source_flags(parser)
    add_namespace_flag(parser)
    add_output_flags(parser)
    add_config_flag(parser)
    parser.add_argument(
        '--row-limit',
        type=int,
        help='Maximum rows read per table (default: 1000)'
    )
    parser.add_argument(
        '--no-progress',
        action='store_true',
        help='Disable the progress bar'
    )


def _add_stats_parser(subparsers: argparse._SubParsersAction) -> None:
    parser = subparsers.add_parser(
        'stats',
        help='Show row counts and estimated triples per table'
    )
    add_source_flags(parser)
    add_output_flags(parser, with_format=False)
    add_config_flag(parser)


def _add_template_parser(subparsers: argparse._SubParsersAction) -> None:
    parser = subparsers.add_parser(
        'template',
        help='Generate a default mapping configuration from the schema'
    )
    add_source_flags(parser)
    add_namespace_flag(parser)
    add_output_flags(parser, with_format=False)
    add_config_flag(parser)
    parser.add_argument(
        '--table', '-t',
        action='append',
        dest='tables',
        help='Table to template (repeatable; default: all tables)'
    )


def _add_generate_parser(subparsers: argparse._SubParsersAction) -> None:
    parser = subparsers.add_parser(
        'generate',
        help='Render a mapping configuration as R2RML Turtle'
    )
    parser.add_argument('mapping', help='Mapping configuration JSON file')
    add_namespace_flag(parser)
    add_output_flags(parser, with_format=False)
    add_config_flag(parser)


def _add_validate_mapping_parser(subparsers: argparse._SubParsersAction) -> None:
    parser = subparsers.add_parser(
        'validate-mapping',
        help='Check a mapping configuration for structural errors'
    )
    parser.add_argument('mapping', help='Mapping configuration JSON file')
    add_config_flag(parser)


def _add_materialize_parser(subparsers: argparse._SubParsersAction) -> None:
    parser = subparsers.add_parser(
        'materialize',
        help='Apply a mapping configuration to the database rows'
    )
    parser.add_argument('mapping', help='Mapping configuration JSON file')
    add_source_flags(parser)
    add_namespace_flag(parser)
    add_output_flags(parser)
    add_config_flag(parser)
    parser.add_argument(
        '--row-limit',
        type=int,
        help='Maximum rows read per logical table (default: all)'
    )


def _add_validate_parser(subparsers: argparse._SubParsersAction) -> None:
    parser = subparsers.add_parser(
        'validate',
        help='Assess the quality of an RDF file'
    )
    parser.add_argument('path', help='RDF file to validate')
    parser.add_argument(
        '--rdf-format',
        help='RDF serialization (default: inferred from the file extension)'
    )
    parser.add_argument(
        '--quick',
        action='store_true',
        help='Only check syntax and structure'
    )
    parser.add_argument(
        '--schema',
        action='store_true',
        help='Also check completeness against the database schema (needs --database or --data)'
    )
    parser.add_argument(
        '--mapping',
        help='Mapping configuration the RDF was produced from'
    )
    add_source_flags(parser)
    add_config_flag(parser)
    parser.add_argument(
        '--output', '-o',
        help='Save the JSON report to this path'
    )
    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Show detailed human-readable report'
    )

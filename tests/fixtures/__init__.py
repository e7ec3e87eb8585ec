"""
Centralized test fixtures for the rdb2rdf test suite.

This package provides reusable fixtures for testing, including:
- Schema snapshots and rows
- Mapping configurations
- RDF sample content

Usage:
    from fixtures import USERS_DEPARTMENTS_SCHEMA, CLEAN_TTL

Or use the pytest fixtures in conftest.py which import from here.
"""

from .schema_fixtures import (
    USERS_DEPARTMENTS_SCHEMA,
    USERS_DEPARTMENTS_ROWS,
    PRODUCTS_SCHEMA,
    UNKEYED_SCHEMA,
    UNKEYED_ROWS,
    USERS_MAPPING_CONFIG,
)

from .rdf_fixtures import (
    CLEAN_TTL,
    BROKEN_REFERENCE_TTL,
    DATATYPE_MISMATCH_TTL,
    INCONSISTENT_TTL,
    SUSPICIOUS_URI_NT,
    RELATIVE_URI_NT,
    INVALID_SYNTAX_TTL,
    QUADS_NQ,
    generate_subjects_ttl,
)

__all__ = [
    # Schema and rows
    'USERS_DEPARTMENTS_SCHEMA',
    'USERS_DEPARTMENTS_ROWS',
    'PRODUCTS_SCHEMA',
    'UNKEYED_SCHEMA',
    'UNKEYED_ROWS',
    # Mapping configurations
    'USERS_MAPPING_CONFIG',
    # RDF content
    'CLEAN_TTL',
    'BROKEN_REFERENCE_TTL',
    'DATATYPE_MISMATCH_TTL',
    'INCONSISTENT_TTL',
    'SUSPICIOUS_URI_NT',
    'RELATIVE_URI_NT',
    'INVALID_SYNTAX_TTL',
    'QUADS_NQ',
    'generate_subjects_ttl',
]

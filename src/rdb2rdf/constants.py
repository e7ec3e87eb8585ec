"""
Centralized configuration constants for the relational-to-RDF mapper.

This module provides a single source of truth for namespaces, default values,
limits and scoring weights used throughout the application.
"""

from enum import IntEnum
from typing import Final, Tuple

# ============================================================================
# Exit Codes
# ============================================================================

class ExitCode(IntEnum):
    """Standard exit codes for CLI commands.

    Following Unix conventions:
    - 0: Success
    - 1: General error
    - 2: Validation/syntax error
    - 3+: Specific error categories
    """
    SUCCESS = 0
    ERROR = 1
    VALIDATION_ERROR = 2
    CONFIG_ERROR = 3
    DATA_SOURCE_ERROR = 4
    FILE_NOT_FOUND = 5


# ============================================================================
# Namespaces
# ============================================================================

class Namespaces:
    """Well-known vocabulary namespaces."""

    RDF: Final[str] = "http://www.w3.org/1999/02/22-rdf-syntax-ns#"
    RDFS: Final[str] = "http://www.w3.org/2000/01/rdf-schema#"
    XSD: Final[str] = "http://www.w3.org/2001/XMLSchema#"
    R2RML: Final[str] = "http://www.w3.org/ns/r2rml#"

    DEFAULT_BASE: Final[str] = "http://example.org/"
    """Base namespace used when none is configured."""

    MAPPING_SUFFIX: Final[str] = "mapping/"
    """Appended to the base namespace to name generated mapping nodes."""


# ============================================================================
# Direct Mapping
# ============================================================================

class DirectMappingLimits:
    """Row scanning limits for the Direct Mapping engine."""

    ROW_SCAN_CAP: Final[int] = 1000
    """Maximum rows read per table in a single mapping run."""


# ============================================================================
# Quality Validation
# ============================================================================

class ValidationConfig:
    """Thresholds and scoring weights for RDF quality validation."""

    KNOWN_VOCABULARIES: Final[Tuple[str, ...]] = (
        "http://www.w3.org/",
        "http://xmlns.com/",
    )
    """Object namespaces that are never treated as dangling references."""

    VALID_XSD_TYPES: Final[Tuple[str, ...]] = (
        "string", "integer", "decimal", "float", "double", "boolean",
        "date", "dateTime", "time", "gYear", "gMonth", "gDay",
    )
    """XSD local names accepted without an UNKNOWN_DATATYPE warning."""

    BOOLEAN_LEXICAL_FORMS: Final[Tuple[str, ...]] = ("true", "false", "0", "1")

    MIN_SUBJECT_DIVERSITY: Final[float] = 0.1
    """Subjects-to-triples ratio below which LOW_DIVERSITY is reported."""

    COMPLETENESS_THRESHOLD: Final[float] = 90.0
    """Completeness percentage required to pass (inclusive)."""

    BASE_SCORE: Final[int] = 100
    ERROR_PENALTY: Final[int] = 15
    WARNING_PENALTY: Final[int] = 5
    PASSED_BONUS: Final[int] = 2
    MAX_PASSED_BONUS: Final[int] = 20

    MAX_EXAMPLES: Final[int] = 3
    """Number of offending values quoted in aggregated messages."""


# ============================================================================
# Data Sources
# ============================================================================

class DataSourceConfig:
    """Relational data source defaults."""

    RETRY_ATTEMPTS: Final[int] = 3
    """Attempts for transient database errors."""

    RETRY_MIN_WAIT: Final[float] = 0.5
    RETRY_MAX_WAIT: Final[float] = 4.0


# ============================================================================
# Logging
# ============================================================================

class LoggingConfig:
    """Logging configuration."""

    DEFAULT_LOG_LEVEL: Final[str] = "INFO"
    """Default logging level."""

    LOG_FORMAT: Final[str] = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    """Default log format string."""

    DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"
    """Default date format for logs."""

    DEFAULT_FORMAT_STYLE: Final[str] = "text"
    """Human-readable formatter style."""

    JSON_DATE_FORMAT: Final[str] = "%Y-%m-%dT%H:%M:%S.%fZ"
    """ISO-8601 timestamp format for structured logs."""

    SUPPORTED_FORMATS: Final[Tuple[str, ...]] = ("text", "json")
    """Supported formatter styles."""

    MAX_LOG_FILE_MB: Final[int] = 10
    """Maximum log file size before rotation (MB)."""

    LOG_BACKUP_COUNT: Final[int] = 5
    """Number of backup log files to keep."""

    ROTATION_ENABLED: Final[bool] = True
    """Enable log rotation by default when a file handler is configured."""

    MEMORY_BUFFER_CAPACITY: Final[int] = 1000
    """Records retained by the in-memory log buffer (oldest evicted first)."""


# ============================================================================
# File Extensions
# ============================================================================

class FileExtensions:
    """RDF serialization file extensions."""

    FORMAT_BY_EXTENSION: Final[dict] = {
        ".ttl": "turtle",
        ".turtle": "turtle",
        ".n3": "n3",
        ".nt": "nt",
        ".nq": "nquads",
        ".trig": "trig",
        ".rdf": "xml",
        ".owl": "xml",
        ".xml": "xml",
        ".jsonld": "json-ld",
    }

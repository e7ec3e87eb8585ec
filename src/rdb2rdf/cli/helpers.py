"""
CLI helper utilities.

This module provides shared utilities for CLI commands including:
- Logging setup (console, rotating file, JSON formatting, in-memory buffer)
- Configuration loading
- Data source construction from command-line arguments
- Output writing
"""

import json
import logging
import os
import sys
import tempfile
from datetime import datetime, timezone
from logging import Handler
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from ..config import MapperConfig
from ..constants import LoggingConfig
from ..core.data_sources import InMemoryDataSource, SqlAlchemyDataSource
from ..core.log_buffer import MemoryLogHandler

logger = logging.getLogger(__name__)


class JSONFormatter(logging.Formatter):
    """A lightweight JSON formatter for structured logging."""

    _RESERVED_FIELDS = {
        "name",
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "process",
        "processName",
        "taskName",
    }

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created, tz=timezone.utc).strftime(
            LoggingConfig.JSON_DATE_FORMAT
        )
        payload: Dict[str, Any] = {
            "timestamp": timestamp,
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        # Extra fields supplied via LoggerAdapter/extra
        for key, value in record.__dict__.items():
            if key in self._RESERVED_FIELDS or key.startswith("_") or key in payload:
                continue
            try:
                json.dumps(value)
                payload[key] = value
            except TypeError:
                payload[key] = str(value)

        return json.dumps(payload, ensure_ascii=False)


_MANAGED_HANDLERS: List[Handler] = []
_MEMORY_HANDLER: Optional[MemoryLogHandler] = None


def get_memory_handler() -> Optional[MemoryLogHandler]:
    """The in-memory log buffer attached by the last ``setup_logging`` call."""
    return _MEMORY_HANDLER


def _clear_managed_handlers() -> None:
    """Remove handlers that were added by this module."""
    global _MANAGED_HANDLERS
    root_logger = logging.getLogger()
    for handler in _MANAGED_HANDLERS:
        root_logger.removeHandler(handler)
        handler.close()
    _MANAGED_HANDLERS = []


def _coerce_positive_int(value: Any, default: int) -> int:
    """Convert config-provided values to positive integers."""
    try:
        numeric = int(value)
        return numeric if numeric > 0 else default
    except (TypeError, ValueError):
        return default


def _create_file_handler(path: str, rotation_enabled: bool, max_bytes: int, backup_count: int) -> Handler:
    """Create a file or rotating file handler."""
    if rotation_enabled and max_bytes > 0:
        return RotatingFileHandler(
            path,
            maxBytes=max_bytes,
            backupCount=max(backup_count, 1),
            encoding="utf-8",
        )
    return logging.FileHandler(path, encoding="utf-8")


def _open_log_file(
    file_path: str,
    formatter: logging.Formatter,
    rotation: Tuple[bool, int, int],
) -> Tuple[Optional[Handler], Optional[str]]:
    """
    Open the log file, falling back to the temp and home directories when
    the requested location is not writable.
    """
    log_filename = os.path.basename(file_path) or "rdb2rdf.log"
    fallback_locations = [
        file_path,
        os.path.join(tempfile.gettempdir(), log_filename),
        os.path.join(Path.home(), log_filename),
    ]
    rotation_enabled, max_bytes, backup_count = rotation
    for location in fallback_locations:
        try:
            log_dir = os.path.dirname(location)
            if log_dir:
                os.makedirs(log_dir, exist_ok=True)
            handler = _create_file_handler(location, rotation_enabled, max_bytes, backup_count)
        except OSError as exc:
            print(f"  Could not create log at {location}: {exc}", file=sys.stderr)
            continue
        handler.setFormatter(formatter)
        if location != file_path:
            print(f"Note: Using fallback log file: {location}", file=sys.stderr)
        return handler, location

    print("Warning: Could not write log file to any location; logging to console only", file=sys.stderr)
    return None, None


def setup_logging(
    level: Optional[str] = None,
    log_file: Optional[str] = None,
    *,
    config: Optional[Dict[str, Any]] = None,
    include_console: bool = True,
) -> Optional[str]:
    """
    Configure the root logger.

    Console output goes to stderr so that RDF written to stdout stays clean.
    A MemoryLogHandler is always attached and can be fetched with
    ``get_memory_handler()``.

    Args:
        level: Log level override.
        log_file: Log file override.
        config: Logging section of the configuration (``level``, ``format``
            "text"/"json", ``file``, ``rotation`` {enabled, max_mb,
            backup_count}, ``buffer_capacity``).
        include_console: If False, skip adding a console handler.

    Returns:
        The actual log file path used, or None if not logging to a file.
    """
    global _MEMORY_HANDLER

    config_dict = dict(config or {})
    resolved_level = str(level or config_dict.get("level", LoggingConfig.DEFAULT_LOG_LEVEL))
    log_level = getattr(logging, resolved_level.upper(), logging.INFO)
    file_path = log_file if log_file is not None else config_dict.get("file")

    format_style = str(config_dict.get("format", LoggingConfig.DEFAULT_FORMAT_STYLE)).lower()
    if format_style not in LoggingConfig.SUPPORTED_FORMATS:
        format_style = LoggingConfig.DEFAULT_FORMAT_STYLE

    formatter: logging.Formatter
    if format_style == "json":
        formatter = JSONFormatter()
    else:
        formatter = logging.Formatter(
            fmt=config_dict.get("pattern") or LoggingConfig.LOG_FORMAT,
            datefmt=config_dict.get("date_format", LoggingConfig.DATE_FORMAT),
        )

    rotation_cfg = config_dict.get("rotation") if isinstance(config_dict.get("rotation"), dict) else {}
    rotation_enabled = rotation_cfg.get("enabled")
    if rotation_enabled is None:
        rotation_enabled = LoggingConfig.ROTATION_ENABLED
    max_bytes = _coerce_positive_int(
        rotation_cfg.get("max_mb", LoggingConfig.MAX_LOG_FILE_MB), LoggingConfig.MAX_LOG_FILE_MB
    ) * 1024 * 1024
    backup_count = _coerce_positive_int(
        rotation_cfg.get("backup_count", LoggingConfig.LOG_BACKUP_COUNT), LoggingConfig.LOG_BACKUP_COUNT
    )

    handlers: List[Handler] = []
    if include_console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    actual_log_file = None
    if file_path:
        file_handler, actual_log_file = _open_log_file(
            file_path, formatter, (bool(rotation_enabled), max_bytes, backup_count)
        )
        if file_handler is not None:
            handlers.append(file_handler)

    capacity = _coerce_positive_int(
        config_dict.get("buffer_capacity"), LoggingConfig.MEMORY_BUFFER_CAPACITY
    )
    memory_handler = MemoryLogHandler(capacity=capacity)
    handlers.append(memory_handler)

    _clear_managed_handlers()
    root_logger = logging.getLogger()
    logging.captureWarnings(True)
    root_logger.setLevel(log_level)
    for handler in handlers:
        root_logger.addHandler(handler)
        _MANAGED_HANDLERS.append(handler)
    _MEMORY_HANDLER = memory_handler

    if actual_log_file:
        logger.info(f"Logging to: {actual_log_file}")
    return actual_log_file


def load_config(config_path: Optional[str]) -> MapperConfig:
    """
    Load the mapper configuration.

    Without a path the defaults are used (environment overrides still apply).

    Raises:
        FileNotFoundError: If the configuration file doesn't exist.
        ValueError: If the file is not valid configuration JSON.
    """
    if not config_path:
        return MapperConfig.from_dict({})
    return MapperConfig.from_file(config_path)


def open_data_source(args: Any, config: MapperConfig):
    """
    Build the data source selected on the command line.

    ``--data file.json`` yields an InMemoryDataSource; ``--database URL`` (or
    the configured database URL) yields an opened SqlAlchemyDataSource that
    the caller must close.

    Raises:
        ValueError: If neither input is available.
        SchemaAccessError: If the data file or database cannot be read.
    """
    data_file = getattr(args, "data", None)
    if data_file:
        return InMemoryDataSource.from_file(data_file)

    url = getattr(args, "database", None) or config.database_url
    if not url:
        raise ValueError("No input: pass --data FILE or --database URL (or set DATABASE_URL)")
    schema_name = getattr(args, "db_schema", None) or config.database_schema
    return SqlAlchemyDataSource(url, schema_name=schema_name).open()


def close_data_source(source: Any) -> None:
    close = getattr(source, "close", None)
    if callable(close):
        close()


def write_output(content: str, output_path: Optional[str]) -> None:
    """Write text to a file, or to stdout when no path is given."""
    if not output_path:
        sys.stdout.write(content)
        if not content.endswith("\n"):
            sys.stdout.write("\n")
        return
    path = Path(output_path)
    if path.parent and not path.parent.exists():
        path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    print(f"✓ Written to: {path}", file=sys.stderr)

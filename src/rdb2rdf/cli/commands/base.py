"""
Base command class.

All CLI commands inherit from BaseCommand and implement ``execute(args)``,
returning an exit code. Library exceptions are turned into a one-line
message and an ExitCode by the ``handle_errors`` decorator, so users never
see a traceback for expected failures.
"""

import argparse
import functools
import logging
import sys
from abc import ABC, abstractmethod
from typing import Any, Callable, Optional

from ...config import MapperConfig
from ...constants import ExitCode
from ...core.exceptions import (
    MappingConfigError,
    RdfSyntaxError,
    SchemaAccessError,
    TemplateResolutionError,
)
from ..helpers import close_data_source, load_config, open_data_source, setup_logging

logger = logging.getLogger(__name__)


def exit_code_for(exc: BaseException) -> int:
    """Map an exception to the CLI exit code."""
    if isinstance(exc, FileNotFoundError):
        return ExitCode.FILE_NOT_FOUND
    if isinstance(exc, (MappingConfigError, RdfSyntaxError, TemplateResolutionError)):
        return ExitCode.VALIDATION_ERROR
    if isinstance(exc, SchemaAccessError):
        return ExitCode.DATA_SOURCE_ERROR
    if isinstance(exc, ValueError):
        return ExitCode.CONFIG_ERROR
    return ExitCode.ERROR


def handle_errors(execute: Callable[..., int]) -> Callable[..., int]:
    """Print expected failures as structured messages instead of tracebacks."""

    @functools.wraps(execute)
    def wrapper(self: "BaseCommand", args: argparse.Namespace) -> int:
        try:
            return execute(self, args)
        except MappingConfigError as e:
            print(f"✗ Invalid mapping configuration ({len(e.errors)} errors):", file=sys.stderr)
            for error in e.errors:
                print(f"  - {error}", file=sys.stderr)
            return exit_code_for(e)
        except (FileNotFoundError, RdfSyntaxError, SchemaAccessError, TemplateResolutionError, ValueError) as e:
            message = getattr(e, "message", None) or str(e)
            logger.debug(f"{type(e).__name__}: {message}")
            print(f"✗ {message}", file=sys.stderr)
            return exit_code_for(e)

    return wrapper


class BaseCommand(ABC):
    """
    Base class for CLI commands.

    Provides configuration loading, logging setup and data source handling.
    Subclasses implement ``execute()``.
    """

    def __init__(self, config_path: Optional[str] = None, data_source: Any = None):
        """
        Args:
            config_path: Path to the configuration file.
            data_source: Pre-built data source (for dependency injection);
                when given, ``--data`` / ``--database`` are ignored.
        """
        self.config_path = config_path
        self._data_source = data_source
        self._config: Optional[MapperConfig] = None

    @property
    def config(self) -> MapperConfig:
        """Lazy-load configuration."""
        if self._config is None:
            self._config = load_config(self.config_path)
        return self._config

    def prepare(self, args: argparse.Namespace) -> None:
        """Resolve the configuration file from the arguments and set up logging."""
        if getattr(args, "config", None):
            self.config_path = args.config
            self._config = None
        setup_logging(level=getattr(args, "log_level", None), config=self.config.logging)

    def base_namespace(self, args: argparse.Namespace) -> str:
        return getattr(args, "base_namespace", None) or self.config.base_namespace

    def acquire_data_source(self, args: argparse.Namespace) -> Any:
        if self._data_source is not None:
            return self._data_source
        return open_data_source(args, self.config)

    def release_data_source(self, source: Any) -> None:
        if source is not self._data_source:
            close_data_source(source)

    @abstractmethod
    def execute(self, args: argparse.Namespace) -> int:
        """
        Execute the command.

        Args:
            args: Parsed command-line arguments.

        Returns:
            Exit code (0 for success, non-zero for error).
        """

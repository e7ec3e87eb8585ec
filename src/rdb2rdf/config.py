"""
Runtime configuration.

Configuration is read from a JSON file (all sections optional)::

    {
      "base_namespace": "http://example.org/",
      "database": {"url": "postgresql://user@localhost/shop", "schema": "public"},
      "direct_mapping": {"row_limit": 1000},
      "validation": {"known_vocabularies": ["http://www.w3.org/", "http://xmlns.com/"]},
      "logging": {"level": "INFO", "format": "text", "file": "logs/rdb2rdf.log"}
    }

The environment variables ``BASE_NAMESPACE`` and ``DATABASE_URL`` override
the corresponding file values.
"""

import json
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from .constants import DirectMappingLimits, Namespaces, ValidationConfig

ENV_BASE_NAMESPACE = "BASE_NAMESPACE"
ENV_DATABASE_URL = "DATABASE_URL"


@dataclass
class MapperConfig:
    """Settings shared by the CLI commands."""
    base_namespace: str = Namespaces.DEFAULT_BASE
    database_url: Optional[str] = None
    database_schema: Optional[str] = None
    row_limit: int = DirectMappingLimits.ROW_SCAN_CAP
    known_vocabularies: List[str] = field(
        default_factory=lambda: list(ValidationConfig.KNOWN_VOCABULARIES)
    )
    logging: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(
        cls,
        config_dict: Dict[str, Any],
        environ: Optional[Mapping[str, str]] = None,
    ) -> "MapperConfig":
        """
        Create a MapperConfig from a dictionary.

        Args:
            config_dict: Parsed configuration file contents.
            environ: Environment used for overrides (``os.environ`` by default).

        Raises:
            ValueError: If a value has the wrong type or range.
        """
        env = os.environ if environ is None else environ
        database = config_dict.get("database") or {}
        direct = config_dict.get("direct_mapping") or {}
        validation = config_dict.get("validation") or {}

        base_namespace = env.get(ENV_BASE_NAMESPACE) or config_dict.get(
            "base_namespace", Namespaces.DEFAULT_BASE
        )
        if not isinstance(base_namespace, str) or not base_namespace:
            raise ValueError("base_namespace must be a non-empty string")

        try:
            row_limit = int(direct.get("row_limit", DirectMappingLimits.ROW_SCAN_CAP))
        except (TypeError, ValueError):
            raise ValueError(f"direct_mapping.row_limit must be an integer, got {direct.get('row_limit')!r}")
        if row_limit <= 0:
            raise ValueError(f"direct_mapping.row_limit must be positive, got {row_limit}")

        known = validation.get("known_vocabularies", list(ValidationConfig.KNOWN_VOCABULARIES))
        if not isinstance(known, list) or not all(isinstance(v, str) for v in known):
            raise ValueError("validation.known_vocabularies must be a list of strings")

        logging_config = config_dict.get("logging") or {}
        if not isinstance(logging_config, dict):
            raise ValueError("logging must be an object")

        return cls(
            base_namespace=base_namespace,
            database_url=env.get(ENV_DATABASE_URL) or database.get("url"),
            database_schema=database.get("schema"),
            row_limit=row_limit,
            known_vocabularies=list(known),
            logging=dict(logging_config),
        )

    @classmethod
    def from_file(cls, config_path: str, environ: Optional[Mapping[str, str]] = None) -> "MapperConfig":
        """Load configuration from a JSON file."""
        if not config_path:
            raise ValueError("config_path cannot be empty")

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                config_dict = json.load(f)
        except FileNotFoundError:
            raise FileNotFoundError(f"Configuration file not found: {config_path}")
        except json.JSONDecodeError as e:
            raise ValueError(
                f"Invalid JSON in configuration file {config_path} at line {e.lineno}, column {e.colno}: {e.msg}"
            )
        except UnicodeDecodeError as e:
            raise ValueError(f"Encoding error reading {config_path}: {e}")

        if not isinstance(config_dict, dict):
            raise ValueError(f"Configuration file must contain a JSON object, got {type(config_dict)}")

        return cls.from_dict(config_dict, environ=environ)

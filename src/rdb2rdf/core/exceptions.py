"""
Exception hierarchy for the mapping and validation engines.

- SchemaAccessError: schema snapshot unreachable or a table is absent
- MappingConfigError: a mapping configuration failed structural validation
- RdfSyntaxError: RDF text could not be parsed
- RowProcessingError: a table or row failed during Direct Mapping
- TemplateResolutionError: a template placeholder could not be resolved
"""

from typing import Iterable, List, Optional


class Rdb2RdfError(Exception):
    """Base class for all errors raised by this package."""

    def __init__(self, message: str = ""):
        self.message = message
        super().__init__(message)


class SchemaAccessError(Rdb2RdfError):
    """The schema snapshot or a table in it could not be read."""

    def __init__(self, message: str, table: Optional[str] = None):
        self.table = table
        super().__init__(message)


class MappingConfigError(Rdb2RdfError):
    """A mapping configuration is structurally invalid.

    Carries every validation message, never just the first one.
    """

    def __init__(self, errors: Iterable[str], message: Optional[str] = None):
        self.errors: List[str] = list(errors)
        if message is None:
            count = len(self.errors)
            message = f"Invalid mapping configuration ({count} error{'s' if count != 1 else ''})"
            if self.errors:
                message += ": " + "; ".join(self.errors)
        super().__init__(message)


class RdfSyntaxError(Rdb2RdfError):
    """RDF text is not valid in the requested serialization."""

    def __init__(self, message: str, rdf_format: Optional[str] = None):
        self.rdf_format = rdf_format
        super().__init__(message)


class RowProcessingError(Rdb2RdfError):
    """A table or row could not be mapped."""

    def __init__(self, message: str, table: str, row_key: Optional[object] = None):
        self.table = table
        self.row_key = row_key
        super().__init__(message)


class TemplateResolutionError(Rdb2RdfError):
    """A `{column}` placeholder had no value in the current row."""

    def __init__(self, template: str, placeholder: str):
        self.template = template
        self.placeholder = placeholder
        super().__init__(
            f"Template '{template}' references '{placeholder}' which has no value in the row"
        )

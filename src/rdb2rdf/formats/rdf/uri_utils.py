"""
URI construction for the Direct Mapping and template generators.

All identifiers are derived deterministically from the base namespace and
the table/column names:

    ClassURI(t)          = base + Capitalize(t)
    InstanceURI(t, pk)   = base + t + "/" + pk
    PropertyURI(t, col)  = base + t + "#" + col
"""

from typing import Any
from urllib.parse import quote

from rdflib import URIRef

from .type_mapper import TypeMapper

# Characters left unescaped inside key values embedded in URIs
_KEY_SAFE_CHARS = "-._~"


class URIUtils:
    """Deterministic URI builders bound to one base namespace."""

    def __init__(self, base_namespace: str):
        if not base_namespace:
            raise ValueError("base_namespace cannot be empty")
        self.base_namespace = base_namespace

    @staticmethod
    def capitalize(name: str) -> str:
        """Upper-case the first character only (``order_items`` -> ``Order_items``)."""
        return name[:1].upper() + name[1:]

    @staticmethod
    def encode_key(value: Any) -> str:
        """Percent-encode a key value for use as a URI path segment."""
        return quote(TypeMapper.lexical_form(value), safe=_KEY_SAFE_CHARS)

    def class_uri(self, table_name: str) -> URIRef:
        return URIRef(f"{self.base_namespace}{self.capitalize(table_name)}")

    def instance_uri(self, table_name: str, key_value: Any) -> URIRef:
        return URIRef(f"{self.base_namespace}{table_name}/{self.encode_key(key_value)}")

    def property_uri(self, table_name: str, column_name: str) -> URIRef:
        return URIRef(f"{self.base_namespace}{table_name}#{column_name}")

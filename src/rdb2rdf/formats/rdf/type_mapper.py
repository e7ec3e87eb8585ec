"""
SQL Type Mapper.

Maps SQL column types to XSD datatypes and converts Python row values to
RDF literals.

Usage:
    from rdb2rdf.formats.rdf.type_mapper import TypeMapper

    TypeMapper.to_xsd("character varying")   # XSD.string
    TypeMapper.to_literal(True, "boolean")     # Literal("true", datatype=XSD.boolean)
"""

import datetime
import decimal
import logging
import re
from typing import Any, Dict

from rdflib import Literal, URIRef
from rdflib.namespace import XSD

logger = logging.getLogger(__name__)


# =============================================================================
# SQL -> XSD Mappings
# =============================================================================

SQL_TO_XSD_TYPE: Dict[str, URIRef] = {
    # Integer family
    "integer": XSD.integer,
    "int": XSD.integer,
    "int2": XSD.integer,
    "int4": XSD.integer,
    "int8": XSD.integer,
    "bigint": XSD.integer,
    "smallint": XSD.integer,
    "tinyint": XSD.integer,
    "mediumint": XSD.integer,
    "serial": XSD.integer,
    "bigserial": XSD.integer,
    "smallserial": XSD.integer,

    # Exact numerics
    "numeric": XSD.decimal,
    "decimal": XSD.decimal,
    "money": XSD.decimal,

    # Approximate numerics
    "real": XSD.float,
    "float4": XSD.float,
    "float": XSD.double,
    "float8": XSD.double,
    "double": XSD.double,
    "double precision": XSD.double,

    # Character types
    "character varying": XSD.string,
    "varchar": XSD.string,
    "nvarchar": XSD.string,
    "character": XSD.string,
    "char": XSD.string,
    "nchar": XSD.string,
    "text": XSD.string,
    "clob": XSD.string,
    "uuid": XSD.string,

    # Boolean
    "boolean": XSD.boolean,
    "bool": XSD.boolean,

    # Date/time family
    "date": XSD.date,
    "timestamp": XSD.dateTime,
    "timestamp without time zone": XSD.dateTime,
    "timestamp with time zone": XSD.dateTime,
    "timestamptz": XSD.dateTime,
    "datetime": XSD.dateTime,
    "time": XSD.time,
    "time without time zone": XSD.time,
    "time with time zone": XSD.time,
}

DEFAULT_XSD_TYPE: URIRef = XSD.string

# "VARCHAR(255)" -> "varchar", "NUMERIC(10, 2)" -> "numeric"
_TYPE_ARGS_PATTERN = re.compile(r"\s*\(.*?\)")


class TypeMapper:
    """Static SQL-to-XSD lookup and literal construction."""

    @staticmethod
    def normalize_sql_type(sql_type: str) -> str:
        """Lower-case a SQL type name and drop length/precision arguments."""
        if not sql_type:
            return ""
        normalized = _TYPE_ARGS_PATTERN.sub("", str(sql_type)).strip().lower()
        return " ".join(normalized.split())

    @classmethod
    def to_xsd(cls, sql_type: str) -> URIRef:
        """Return the XSD datatype for a SQL type; unknown types map to xsd:string."""
        normalized = cls.normalize_sql_type(sql_type)
        xsd_type = SQL_TO_XSD_TYPE.get(normalized)
        if xsd_type is None:
            logger.debug(f"Unknown SQL type '{sql_type}', defaulting to xsd:string")
            return DEFAULT_XSD_TYPE
        return xsd_type

    @staticmethod
    def lexical_form(value: Any) -> str:
        """Render a Python value as an XSD lexical form."""
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, (datetime.datetime, datetime.date, datetime.time)):
            return value.isoformat()
        if isinstance(value, decimal.Decimal):
            return format(value, "f")
        if isinstance(value, (bytes, bytearray, memoryview)):
            return bytes(value).hex()
        return str(value)

    @classmethod
    def to_literal(cls, value: Any, sql_type: str) -> Literal:
        """Build a typed literal for a column value."""
        return Literal(cls.lexical_form(value), datatype=cls.to_xsd(sql_type))

"""
Deterministic Turtle rendering.

rdflib's serializer orders subjects and predicates by its own rules; mapping
documents need output that depends only on the configuration order, so the
same configuration always renders to the same bytes. This writer renders a
list of subject blocks exactly in the order given.

URIs under a bound namespace are abbreviated to ``prefix:local`` only when
``local`` is a valid Turtle local name; anything else is written in full
``<...>`` form, so the text always parses back to the same triples.
"""

import re
from typing import List, Sequence, Tuple

from rdflib import Literal, URIRef
from rdflib.namespace import RDF
from rdflib.term import Node

Block = Tuple[URIRef, List[Tuple[URIRef, Node]]]

_LOCAL_NAME_PATTERN = re.compile(r"^(?:[A-Za-z0-9_](?:[A-Za-z0-9_.\-]*[A-Za-z0-9_\-])?)?$")

# Characters that cannot appear unescaped inside <...>
_IRI_FORBIDDEN = set('<>"{}|^`\\')

_STRING_ESCAPES = (
    ("\\", "\\\\"),
    ('"', '\\"'),
    ("\n", "\\n"),
    ("\r", "\\r"),
    ("\t", "\\t"),
)


def escape_literal(value: str) -> str:
    """Escape backslash, quote, newline, carriage return and tab."""
    for raw, escaped in _STRING_ESCAPES:
        value = value.replace(raw, escaped)
    return value


def _escape_iri(uri: str) -> str:
    return "".join(
        f"\\u{ord(ch):04X}" if ch in _IRI_FORBIDDEN or ord(ch) <= 0x20 else ch for ch in uri
    )


class TurtleWriter:
    """
    Renders ordered subject blocks as Turtle.

    Args:
        prefixes: ``(prefix, namespace)`` pairs, written in the given order.
            When several namespaces match a URI the longest one wins.
    """

    def __init__(self, prefixes: Sequence[Tuple[str, str]]):
        self.prefixes = list(prefixes)
        self._by_length = sorted(self.prefixes, key=lambda p: len(p[1]), reverse=True)

    def format_uri(self, uri: str) -> str:
        for prefix, namespace in self._by_length:
            if uri.startswith(namespace):
                local = uri[len(namespace):]
                if _LOCAL_NAME_PATTERN.match(local):
                    return f"{prefix}:{local}"
        return f"<{_escape_iri(uri)}>"

    def format_literal(self, literal: Literal) -> str:
        text = f'"{escape_literal(str(literal))}"'
        if literal.language:
            return f"{text}@{literal.language}"
        if literal.datatype is not None:
            return f"{text}^^{self.format_uri(str(literal.datatype))}"
        return text

    def format_node(self, node: Node) -> str:
        if isinstance(node, Literal):
            return self.format_literal(node)
        return self.format_uri(str(node))

    def format_predicate(self, predicate: URIRef) -> str:
        if predicate == RDF.type:
            return "a"
        return self.format_uri(str(predicate))

    def render(self, blocks: Sequence[Block]) -> str:
        lines = [f"@prefix {prefix}: <{_escape_iri(namespace)}> ." for prefix, namespace in self.prefixes]
        for subject, pairs in blocks:
            if not pairs:
                continue
            lines.append("")
            rendered = [f"{self.format_predicate(p)} {self.format_node(o)}" for p, o in pairs]
            if len(rendered) == 1:
                lines.append(f"{self.format_uri(str(subject))} {rendered[0]} .")
                continue
            lines.append(f"{self.format_uri(str(subject))} {rendered[0]} ;")
            for item in rendered[1:-1]:
                lines.append(f"    {item} ;")
            lines.append(f"    {rendered[-1]} .")
        return "\n".join(lines) + "\n"

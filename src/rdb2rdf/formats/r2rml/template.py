"""
String templates with ``{column}`` placeholders.

Grammar::

    template    := (text | placeholder)*
    placeholder := "{" name "}"        name is any non-empty run without braces
    text        := any character, with "\\{", "\\}" and "\\\\" as escapes

Expanding a template substitutes each placeholder with the URL-encoded value
of the named column. A missing or NULL column is an error, never an empty
string.
"""

from typing import Any, List, Mapping, Tuple
from urllib.parse import quote

from ...core.exceptions import TemplateResolutionError
from ..rdf.type_mapper import TypeMapper

# Characters left unescaped in substituted values (RFC 3986 unreserved)
IRI_SAFE_CHARS = "-._~"

_ESCAPABLE = "{}\\"


class RRTemplate:
    """
    A parsed template.

    Example:
        >>> t = RRTemplate("http://ex.org/users/{id}")
        >>> t.placeholders
        ['id']
        >>> t.expand({"id": 7})
        'http://ex.org/users/7'
    """

    def __init__(self, template: str):
        """
        Raises:
            ValueError: If braces are unbalanced, nested or empty.
        """
        self.template = template
        self.segments: List[Tuple[bool, str]] = self._parse(template)

    def __repr__(self) -> str:
        return f"RRTemplate({self.template!r})"

    @staticmethod
    def _parse(template: str) -> List[Tuple[bool, str]]:
        segments: List[Tuple[bool, str]] = []
        text: List[str] = []
        name: List[str] = []
        in_placeholder = False
        i = 0
        while i < len(template):
            ch = template[i]
            if ch == "\\" and i + 1 < len(template) and template[i + 1] in _ESCAPABLE:
                (name if in_placeholder else text).append(template[i + 1])
                i += 2
                continue
            if ch == "{":
                if in_placeholder:
                    raise ValueError(f"Nested '{{' at position {i} in template '{template}'")
                if text:
                    segments.append((False, "".join(text)))
                    text = []
                in_placeholder = True
            elif ch == "}":
                if not in_placeholder:
                    raise ValueError(f"Unmatched '}}' at position {i} in template '{template}'")
                if not name:
                    raise ValueError(f"Empty placeholder at position {i} in template '{template}'")
                segments.append((True, "".join(name)))
                name = []
                in_placeholder = False
            else:
                (name if in_placeholder else text).append(ch)
            i += 1

        if in_placeholder:
            raise ValueError(f"Unclosed '{{' in template '{template}'")
        if text:
            segments.append((False, "".join(text)))
        return segments

    @property
    def placeholders(self) -> List[str]:
        return [value for is_placeholder, value in self.segments if is_placeholder]

    def expand(self, row: Mapping[str, Any], encode: bool = True) -> str:
        """
        Substitute every placeholder with the row's column value.

        Args:
            row: Column values keyed by column name.
            encode: Percent-encode substituted values for use inside an IRI.

        Raises:
            TemplateResolutionError: If a referenced column is missing or NULL.
        """
        parts = []
        for is_placeholder, value in self.segments:
            if not is_placeholder:
                parts.append(value)
                continue
            column_value = row.get(value)
            if column_value is None:
                raise TemplateResolutionError(self.template, value)
            lexical = TypeMapper.lexical_form(column_value)
            parts.append(quote(lexical, safe=IRI_SAFE_CHARS) if encode else lexical)
        return "".join(parts)

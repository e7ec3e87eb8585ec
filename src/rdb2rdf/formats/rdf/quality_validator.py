"""
Linked Data Quality Validation

This module assesses the quality of arbitrary RDF text (typically the output
of the Direct Mapping or R2RML engines) and produces a scored report.

The pipeline runs in a fixed order:
 1. Syntax                 (unparsable input aborts with score 0)
 2. Structural analysis    (NO_DATA, LOW_DIVERSITY)
 3. URI well-formedness    (INVALID_URI, SUSPICIOUS_URI)
 4. Referential integrity  (BROKEN_REFERENCE)
 5. Datatypes              (UNKNOWN_DATATYPE, DATATYPE_MISMATCH)
 6. Consistency            (DUPLICATE_PROPERTIES, MISSING_TYPE)
 7. Completeness           (LOW_COMPLETENESS, only when a schema is given)
 8. Quality metrics

Score = 100 - 15 per error - 5 per warning + 2 per passed check (bonus capped
at 20), clamped to [0, 100].
"""

import json
import logging
import re
import time
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence, Set, Tuple

from rdflib import Graph, Literal, URIRef
from rdflib.namespace import RDF, XSD

from ...constants import ValidationConfig
from ...core.data_sources.protocols import RowSource
from ...core.exceptions import RdfSyntaxError, SchemaAccessError
from ...shared.models.schema import SchemaSnapshot
from .rdf_io import RDFGraphParser

logger = logging.getLogger(__name__)

ABSOLUTE_URI_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*://.+")
SUSPICIOUS_URI_PATTERN = re.compile(r"[\s<>{}|\\^`]")
INTEGER_PATTERN = re.compile(r"^-?\d+$")

XSD_NAMESPACE = str(XSD)


@dataclass
class ValidationEntry:
    """A single passed check, warning or error."""
    code: str
    message: str

    def to_dict(self) -> Dict[str, str]:
        return {"code": self.code, "message": self.message}


@dataclass
class ValidationReport:
    """Quality report for one validation run."""
    passed: List[ValidationEntry] = field(default_factory=list)
    warnings: List[ValidationEntry] = field(default_factory=list)
    errors: List[ValidationEntry] = field(default_factory=list)
    metrics: Dict[str, Any] = field(default_factory=dict)
    aborted: bool = False

    @property
    def valid(self) -> bool:
        return not self.errors

    @property
    def score(self) -> int:
        if self.aborted:
            return 0
        return calculate_quality_score(len(self.errors), len(self.warnings), len(self.passed))

    def add_passed(self, code: str, message: str) -> None:
        self.passed.append(ValidationEntry(code, message))

    def add_warning(self, code: str, message: str) -> None:
        self.warnings.append(ValidationEntry(code, message))

    def add_error(self, code: str, message: str) -> None:
        self.errors.append(ValidationEntry(code, message))

    def codes(self) -> Set[str]:
        return {e.code for e in self.passed + self.warnings + self.errors}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "valid": self.valid,
            "score": self.score,
            "passed": [e.to_dict() for e in self.passed],
            "warnings": [e.to_dict() for e in self.warnings],
            "errors": [e.to_dict() for e in self.errors],
            "metrics": dict(self.metrics),
        }

    def save_to_file(self, output_path: str) -> None:
        """Save the report to a JSON file."""
        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2)

    def get_human_readable_summary(self) -> str:
        """Generate a human-readable summary of the report."""
        lines = []
        lines.append("=" * 70)
        lines.append("RDF QUALITY REPORT")
        lines.append("=" * 70)
        verdict = "VALID" if self.valid else "INVALID"
        lines.append(f"Result: {verdict}   Score: {self.score}/100")
        lines.append(
            f"Passed: {len(self.passed)}   Warnings: {len(self.warnings)}   Errors: {len(self.errors)}"
        )

        for title, icon, entries in (
            ("ERRORS", "✗", self.errors),
            ("WARNINGS", "⚠", self.warnings),
            ("PASSED", "✓", self.passed),
        ):
            if not entries:
                continue
            lines.append("")
            lines.append(f"{title}:")
            for entry in entries:
                lines.append(f"  {icon} [{entry.code}] {entry.message}")

        if self.metrics:
            lines.append("")
            lines.append("METRICS:")
            for key, value in self.metrics.items():
                lines.append(f"  {key}: {value}")

        lines.append("=" * 70)
        return "\n".join(lines)


def calculate_quality_score(error_count: int, warning_count: int, passed_count: int) -> int:
    """Score in [0, 100] from result counts."""
    score = ValidationConfig.BASE_SCORE
    score -= error_count * ValidationConfig.ERROR_PENALTY
    score -= warning_count * ValidationConfig.WARNING_PENALTY
    score += min(passed_count * ValidationConfig.PASSED_BONUS, ValidationConfig.MAX_PASSED_BONUS)
    return max(0, min(100, score))


def _examples(values: Iterable[Any]) -> str:
    return ", ".join(str(v) for v in sorted(values, key=str)[:ValidationConfig.MAX_EXAMPLES])


def _percentage(part: int, whole: int) -> str:
    if whole == 0:
        return "0.0%"
    return f"{part / whole * 100:.1f}%"


class RDFQualityValidator:
    """
    Validates the quality of linked data.

    The report accumulator is reset at the start of every ``validate`` call,
    so an instance can be reused sequentially. It must not be shared by
    concurrent calls; construct one validator per thread.

    Example:
        validator = RDFQualityValidator()
        report = validator.validate(turtle_text, schema=schema, row_source=source)
        print(report.score)
    """

    def __init__(self, known_vocabularies: Sequence[str] = ValidationConfig.KNOWN_VOCABULARIES):
        """
        Args:
            known_vocabularies: Namespace prefixes whose URIs are never
                treated as dangling references.
        """
        self.known_vocabularies = tuple(known_vocabularies)
        self.report = ValidationReport()

    def reset(self) -> None:
        self.report = ValidationReport()

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def validate(
        self,
        rdf_text: str,
        mapping_config: Any = None,
        schema: Optional[SchemaSnapshot] = None,
        row_source: Optional[RowSource] = None,
        rdf_format: Optional[str] = None,
    ) -> ValidationReport:
        """
        Run the full validation pipeline.

        Args:
            rdf_text: RDF text to validate.
            mapping_config: Mapping configuration the RDF was generated from
                (recorded in the metrics only).
            schema: Enables the completeness check when given.
            row_source: Source of expected row counts; falls back to each
                table's ``row_count`` when omitted.
            rdf_format: Serialization of ``rdf_text`` (Turtle by default).

        Returns:
            ValidationReport for this call.
        """
        self.reset()
        start = time.perf_counter()

        graph = self.validate_syntax(rdf_text, rdf_format)
        if graph is None:
            return self.report

        self.analyze_triples(graph)
        self.validate_uris(graph)
        self.validate_referential_integrity(graph)
        self.validate_datatypes(graph)
        self.detect_inconsistencies(graph)
        if schema is not None:
            self.validate_completeness(graph, schema, row_source)
        self.calculate_quality_metrics(graph)

        if mapping_config is not None:
            triples_maps = getattr(mapping_config, "triples_maps", None)
            if triples_maps is None and isinstance(mapping_config, dict):
                triples_maps = mapping_config.get("triplesMaps")
            if triples_maps is not None:
                self.report.metrics["triplesMaps"] = len(triples_maps)

        self.report.metrics["validationTime"] = f"{time.perf_counter() - start:.2f}s"
        logger.info(
            f"Validation finished: score {self.report.score}, "
            f"{len(self.report.errors)} errors, {len(self.report.warnings)} warnings"
        )
        return self.report

    def quick_validate(self, rdf_text: str, rdf_format: Optional[str] = None) -> ValidationReport:
        """Syntax and structural analysis only."""
        self.reset()
        graph = self.validate_syntax(rdf_text, rdf_format)
        if graph is not None:
            self.analyze_triples(graph)
        return self.report

    def check_completeness(
        self,
        rdf_text: str,
        schema: SchemaSnapshot,
        row_source: Optional[RowSource] = None,
        rdf_format: Optional[str] = None,
    ) -> ValidationReport:
        """Syntax plus completeness against the schema's expected row counts."""
        self.reset()
        graph = self.validate_syntax(rdf_text, rdf_format)
        if graph is not None:
            self.validate_completeness(graph, schema, row_source)
        return self.report

    # ------------------------------------------------------------------
    # Pipeline steps
    # ------------------------------------------------------------------

    def validate_syntax(self, rdf_text: str, rdf_format: Optional[str] = None) -> Optional[Graph]:
        """Parse the text; on failure record SYNTAX and abort the run."""
        try:
            graph = RDFGraphParser.parse(rdf_text, rdf_format)
        except RdfSyntaxError as e:
            self.report.add_error("SYNTAX", f"RDF syntax error: {e.message}")
            self.report.aborted = True
            return None
        self.report.add_passed("SYNTAX", f"Valid RDF syntax: {len(graph)} triples parsed")
        return graph

    def analyze_triples(self, graph: Graph) -> None:
        subjects = set()
        predicates = set()
        objects = set()
        for s, p, o in graph:
            subjects.add(s)
            predicates.add(p)
            if isinstance(o, URIRef):
                objects.add(o)

        total = len(graph)
        metrics = self.report.metrics
        metrics["totalTriples"] = total
        metrics["uniqueSubjects"] = len(subjects)
        metrics["uniquePredicates"] = len(predicates)
        metrics["uniqueObjects"] = len(objects)

        if total == 0:
            self.report.add_error("NO_DATA", "No RDF triples found")
            return

        ratio = len(subjects) / total
        if ratio < ValidationConfig.MIN_SUBJECT_DIVERSITY:
            self.report.add_warning(
                "LOW_DIVERSITY",
                f"Low subject diversity ({ratio * 100:.1f}%). Possible duplicated data.",
            )
        self.report.add_passed("STRUCTURE", f"Structure analyzed: {len(subjects)} unique resources")

    def validate_uris(self, graph: Graph) -> None:
        invalid: Set[str] = set()
        suspicious: Set[str] = set()
        for s, _, o in graph:
            for node in (s, o):
                if not isinstance(node, URIRef):
                    continue
                uri = str(node)
                if not ABSOLUTE_URI_PATTERN.match(uri):
                    invalid.add(uri)
                if SUSPICIOUS_URI_PATTERN.search(uri):
                    suspicious.add(uri)

        if invalid:
            self.report.add_error(
                "INVALID_URI",
                f"{len(invalid)} invalid URIs found. Examples: {_examples(invalid)}",
            )
        if suspicious:
            self.report.add_warning(
                "SUSPICIOUS_URI",
                f"{len(suspicious)} suspicious URIs (unencoded characters). Examples: {_examples(suspicious)}",
            )
        if not invalid and not suspicious:
            self.report.add_passed("URI_VALIDATION", "All URIs are valid")

    def _is_known_vocabulary(self, uri: str) -> bool:
        return any(uri.startswith(prefix) for prefix in self.known_vocabularies)

    def validate_referential_integrity(self, graph: Graph) -> None:
        defined: Set[URIRef] = set()
        referenced: Set[URIRef] = set()
        for s, _, o in graph:
            if isinstance(s, URIRef):
                defined.add(s)
            if isinstance(o, URIRef) and not self._is_known_vocabulary(str(o)):
                referenced.add(o)

        broken = referenced - defined
        metrics = self.report.metrics
        metrics["definedResources"] = len(defined)
        metrics["externalReferences"] = len(referenced)
        metrics["brokenReferences"] = len(broken)

        if broken:
            self.report.add_warning(
                "BROKEN_REFERENCE",
                f"{len(broken)} broken references found. Examples: {_examples(broken)}",
            )
        else:
            self.report.add_passed("REFERENTIAL_INTEGRITY", "Referential integrity is correct")

    def validate_datatypes(self, graph: Graph) -> None:
        unknown: Set[str] = set()
        mismatches: List[Tuple[str, str, Any]] = []

        for s, _, o in graph:
            if not isinstance(o, Literal) or o.datatype is None:
                continue
            datatype = str(o.datatype)
            if not datatype.startswith(XSD_NAMESPACE):
                continue
            local_type = datatype[len(XSD_NAMESPACE):]
            if local_type not in ValidationConfig.VALID_XSD_TYPES:
                unknown.add(datatype)

            value = str(o)
            if local_type == "integer" and not INTEGER_PATTERN.match(value):
                mismatches.append((local_type, value, s))
            elif local_type == "boolean" and value not in ValidationConfig.BOOLEAN_LEXICAL_FORMS:
                mismatches.append((local_type, value, s))

        # one warning per offending literal
        for local_type, value, s in sorted(mismatches, key=lambda m: (m[0], str(m[2]), m[1])):
            self.report.add_warning(
                "DATATYPE_MISMATCH",
                f'Value "{value}" at <{s}> does not match type {local_type}',
            )

        if unknown:
            self.report.add_warning(
                "UNKNOWN_DATATYPE",
                f"{len(unknown)} non-standard datatypes found: {_examples(unknown)}",
            )
        else:
            self.report.add_passed("DATATYPES", "All datatypes are valid")

    def detect_inconsistencies(self, graph: Graph) -> None:
        predicates_by_subject: Dict[Any, List[Any]] = defaultdict(list)
        for s, p, _ in graph:
            predicates_by_subject[s].append(p)

        duplicated = [
            s for s, preds in predicates_by_subject.items() if len(preds) != len(set(preds))
        ]
        untyped = [s for s, preds in predicates_by_subject.items() if RDF.type not in preds]

        if duplicated:
            self.report.add_warning(
                "DUPLICATE_PROPERTIES",
                f"{len(duplicated)} resources with duplicated properties",
            )
        if untyped:
            self.report.add_warning(
                "MISSING_TYPE",
                f"{len(untyped)} resources without rdf:type",
            )
        if not duplicated and not untyped:
            self.report.add_passed("CONSISTENCY", "No inconsistencies detected")

    def _expected_rows(self, schema: SchemaSnapshot, row_source: Optional[RowSource]) -> int:
        expected = 0
        for table in schema.tables:
            if row_source is not None:
                try:
                    expected += row_source.count_rows(table.name)
                except SchemaAccessError as e:
                    logger.debug(f"Ignoring unreadable table {table.name}: {e}")
            elif table.row_count is not None:
                expected += table.row_count
        return expected

    def validate_completeness(
        self,
        graph: Graph,
        schema: SchemaSnapshot,
        row_source: Optional[RowSource] = None,
    ) -> None:
        found = len(set(graph.subjects()))
        expected = self._expected_rows(schema, row_source)
        # compared at the one-decimal precision it is reported with
        completeness = round(found / expected * 100, 1) if expected > 0 else 100.0

        self.report.metrics["expectedResources"] = expected
        self.report.metrics["completeness"] = f"{completeness:.1f}%"

        if completeness < ValidationConfig.COMPLETENESS_THRESHOLD:
            self.report.add_warning(
                "LOW_COMPLETENESS",
                f"Low completeness: only {completeness:.1f}% of expected resources",
            )
        else:
            self.report.add_passed("COMPLETENESS", f"Completeness: {completeness:.1f}%")

    def calculate_quality_metrics(self, graph: Graph) -> None:
        total = len(graph)
        subjects = set(graph.subjects())
        literal_count = sum(1 for o in graph.objects() if isinstance(o, Literal))
        reference_count = sum(1 for o in graph.objects() if isinstance(o, URIRef))

        density = total / len(subjects) if subjects else 0.0
        self.report.metrics["informationDensity"] = f"{density:.2f}"
        self.report.metrics["literalPercentage"] = _percentage(literal_count, total)
        self.report.metrics["referencePercentage"] = _percentage(reference_count, total)


def validate_rdf_content(
    rdf_text: str,
    mapping_config: Any = None,
    schema: Optional[SchemaSnapshot] = None,
    row_source: Optional[RowSource] = None,
    rdf_format: Optional[str] = None,
) -> ValidationReport:
    """Validate RDF text with a fresh validator."""
    return RDFQualityValidator().validate(
        rdf_text,
        mapping_config=mapping_config,
        schema=schema,
        row_source=row_source,
        rdf_format=rdf_format,
    )


def validate_rdf_file(
    file_path: str,
    schema: Optional[SchemaSnapshot] = None,
    row_source: Optional[RowSource] = None,
    rdf_format: Optional[str] = None,
) -> ValidationReport:
    """
    Validate an RDF file, inferring the format from its extension.

    Raises:
        FileNotFoundError: If the file doesn't exist.
    """
    with open(file_path, "r", encoding="utf-8") as f:
        content = f.read()
    return validate_rdf_content(
        content,
        schema=schema,
        row_source=row_source,
        rdf_format=RDFGraphParser.resolve_format(rdf_format, file_path),
    )

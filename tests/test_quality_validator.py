"""
Tests for the RDF quality validator and its scoring.
"""

import json

import pytest
from rdflib import Graph, Literal, URIRef
from rdflib.namespace import XSD

from fixtures import (
    BROKEN_REFERENCE_TTL,
    DATATYPE_MISMATCH_TTL,
    INCONSISTENT_TTL,
    INVALID_SYNTAX_TTL,
    RELATIVE_URI_NT,
    SUSPICIOUS_URI_NT,
    generate_subjects_ttl,
)

from rdb2rdf.core.exceptions import SchemaAccessError
from rdb2rdf.formats.r2rml import MappingConfiguration
from rdb2rdf.formats.rdf import (
    RDFQualityValidator,
    ValidationReport,
    calculate_quality_score,
    validate_rdf_content,
    validate_rdf_file,
)
from rdb2rdf.shared.models import SchemaSnapshot


def single_table_schema(row_count):
    return SchemaSnapshot.from_dict({
        "tables": [{
            "name": "items",
            "columns": [{"column_name": "id", "data_type": "integer"}],
            "primaryKeys": ["id"],
            "row_count": row_count,
        }],
    })


def codes_of(entries):
    return [e.code for e in entries]


@pytest.mark.unit
class TestQualityScore:

    def test_formula(self):
        assert calculate_quality_score(0, 0, 0) == 100
        assert calculate_quality_score(1, 0, 0) == 85
        assert calculate_quality_score(0, 2, 0) == 90
        assert calculate_quality_score(1, 1, 3) == 86

    def test_bonus_is_capped(self):
        assert calculate_quality_score(2, 0, 50) == 90

    def test_clamped_to_range(self):
        assert calculate_quality_score(10, 0, 0) == 0
        assert calculate_quality_score(0, 0, 10) == 100

    @pytest.mark.parametrize("errors,warnings,passed", [(0, 0, 3), (1, 2, 4), (3, 1, 0)])
    def test_more_problems_never_increase_score(self, errors, warnings, passed):
        base = calculate_quality_score(errors, warnings, passed)
        assert calculate_quality_score(errors + 1, warnings, passed) <= base
        assert calculate_quality_score(errors, warnings + 1, passed) <= base

    def test_aborted_report_scores_zero(self):
        report = ValidationReport()
        report.add_passed("STRUCTURE", "fine")
        report.aborted = True
        assert report.score == 0


@pytest.mark.unit
class TestRDFQualityValidator:

    def test_clean_graph_is_valid_and_perfect(self, clean_ttl):
        report = RDFQualityValidator().validate(clean_ttl)

        assert report.valid
        assert report.score == 100
        assert report.errors == []
        assert report.warnings == []
        assert codes_of(report.passed) == [
            "SYNTAX", "STRUCTURE", "URI_VALIDATION",
            "REFERENTIAL_INTEGRITY", "DATATYPES", "CONSISTENCY",
        ]
        assert report.passed[0].message == "Valid RDF syntax: 11 triples parsed"

    def test_clean_graph_metrics(self, clean_ttl):
        metrics = RDFQualityValidator().validate(clean_ttl).metrics

        assert metrics["totalTriples"] == 11
        assert metrics["uniqueSubjects"] == 4
        assert metrics["brokenReferences"] == 0
        assert metrics["informationDensity"] == "2.75"
        assert "validationTime" in metrics
        assert "completeness" not in metrics

    def test_syntax_error_aborts_with_zero_score(self):
        report = RDFQualityValidator().validate(INVALID_SYNTAX_TTL)

        assert not report.valid
        assert report.score == 0
        assert codes_of(report.errors) == ["SYNTAX"]
        assert report.passed == []
        assert report.errors[0].message.startswith("RDF syntax error:")

    def test_empty_input_reports_no_data(self):
        report = RDFQualityValidator().validate("")

        assert "NO_DATA" in codes_of(report.errors)
        assert report.metrics["totalTriples"] == 0
        assert not report.valid

    def test_broken_reference_is_a_warning(self):
        report = RDFQualityValidator().validate(BROKEN_REFERENCE_TTL)

        assert report.valid
        assert codes_of(report.warnings) == ["BROKEN_REFERENCE"]
        assert "http://ex.org/departments/99" in report.warnings[0].message
        assert report.metrics["brokenReferences"] == 1

    def test_known_vocabularies_are_not_broken(self):
        ttl = (
            "@prefix ex: <http://ex.org/> .\n"
            "ex:a a ex:Thing ; ex:seeAlso <http://xmlns.com/foaf/0.1/Person> .\n"
            "ex:Thing a <http://www.w3.org/2000/01/rdf-schema#Class> .\n"
        )
        report = RDFQualityValidator().validate(ttl)
        assert "BROKEN_REFERENCE" not in report.codes()

    def test_custom_known_vocabularies(self):
        validator = RDFQualityValidator(known_vocabularies=("http://www.w3.org/", "http://ex.org/departments/"))
        report = validator.validate(BROKEN_REFERENCE_TTL)
        assert "REFERENTIAL_INTEGRITY" in codes_of(report.passed)

    def test_each_integer_mismatch_is_a_warning(self):
        report = RDFQualityValidator().validate(DATATYPE_MISMATCH_TTL)

        integer = [w.message for w in report.warnings if w.code == "DATATYPE_MISMATCH" and "type integer" in w.message]
        assert integer == [
            'Value "thirty" at <http://ex.org/a> does not match type integer',
            'Value "4.5" at <http://ex.org/b> does not match type integer',
        ]

    def test_mismatches_lower_the_score(self):
        ttl = "@prefix ex: <http://ex.org/> .\n@prefix xsd: <http://www.w3.org/2001/XMLSchema#> .\n"
        ttl += "ex:Thing a <http://www.w3.org/2000/01/rdf-schema#Class> .\n"
        for i in range(4):
            ttl += f'ex:r{i} a ex:Thing ; ex:age "x{i}"^^xsd:integer .\n'

        report = RDFQualityValidator().validate(ttl)

        assert codes_of(report.warnings) == ["DATATYPE_MISMATCH"] * 4
        assert len(report.passed) == 6
        assert report.score == 92

    def test_non_standard_datatype(self):
        report = RDFQualityValidator().validate(DATATYPE_MISMATCH_TTL)

        unknown = [w for w in report.warnings if w.code == "UNKNOWN_DATATYPE"]
        assert len(unknown) == 1
        assert "unsignedShort" in unknown[0].message
        assert "DATATYPES" not in codes_of(report.passed)

    def test_boolean_lexical_forms(self):
        graph = Graph()
        subject = URIRef("http://ex.org/a")
        flag = URIRef("http://ex.org/flag")
        for value in ("true", "0", "yes", "maybe"):
            graph.add((subject, flag, Literal(value, datatype=XSD.boolean, normalize=False)))

        validator = RDFQualityValidator()
        validator.validate_datatypes(graph)

        assert codes_of(validator.report.warnings) == ["DATATYPE_MISMATCH", "DATATYPE_MISMATCH"]
        assert [w.message for w in validator.report.warnings] == [
            'Value "maybe" at <http://ex.org/a> does not match type boolean',
            'Value "yes" at <http://ex.org/a> does not match type boolean',
        ]
        assert codes_of(validator.report.passed) == ["DATATYPES"]

    def test_inconsistencies(self):
        report = RDFQualityValidator().validate(INCONSISTENT_TTL)
        warnings = {w.code: w.message for w in report.warnings}

        assert warnings["DUPLICATE_PROPERTIES"] == "1 resources with duplicated properties"
        assert warnings["MISSING_TYPE"] == "1 resources without rdf:type"
        assert "CONSISTENCY" not in report.codes()

    def test_suspicious_uri_is_a_warning(self):
        report = RDFQualityValidator().validate(SUSPICIOUS_URI_NT, rdf_format="nt")

        assert "SUSPICIOUS_URI" in codes_of(report.warnings)
        assert "INVALID_URI" not in report.codes()

    def test_uri_without_authority_is_invalid(self):
        report = RDFQualityValidator().validate(RELATIVE_URI_NT, rdf_format="nt")

        assert codes_of(report.errors) == ["INVALID_URI"]
        assert "urn:isbn:12345" in report.errors[0].message
        assert not report.valid

    def test_blank_nodes_are_not_uris(self):
        ttl = (
            "@prefix ex: <http://ex.org/> .\n"
            "ex:a a ex:Thing ; ex:address [ a ex:Address ; ex:city \"Oslo\" ] .\n"
        )
        report = RDFQualityValidator().validate(ttl)
        assert "INVALID_URI" not in report.codes()
        assert "URI_VALIDATION" in codes_of(report.passed)

    def test_low_diversity(self):
        lines = ["@prefix ex: <http://ex.org/> .", "ex:a a ex:Thing ."]
        lines += [f'ex:a ex:p{i} "{i}" .' for i in range(20)]
        report = RDFQualityValidator().validate("\n".join(lines))
        assert "LOW_DIVERSITY" in codes_of(report.warnings)

    def test_mapping_config_recorded_in_metrics(self, clean_ttl, mapping_dict):
        validator = RDFQualityValidator()

        assert validator.validate(clean_ttl, mapping_config=mapping_dict).metrics["triplesMaps"] == 2
        config = MappingConfiguration.from_dict(mapping_dict)
        assert validator.validate(clean_ttl, mapping_config=config).metrics["triplesMaps"] == 2

    def test_reused_validator_starts_fresh(self, clean_ttl):
        validator = RDFQualityValidator()
        first = validator.validate(INVALID_SYNTAX_TTL)
        second = validator.validate(clean_ttl)

        assert first.score == 0
        assert second.score == 100
        assert second.errors == []
        assert not second.aborted

    def test_quads_are_flattened(self):
        nq = (
            '<http://ex.org/a> <http://www.w3.org/1999/02/22-rdf-syntax-ns#type> '
            '<http://www.w3.org/2000/01/rdf-schema#Class> <http://ex.org/g> .\n'
        )
        report = RDFQualityValidator().validate(nq, rdf_format="nquads")
        assert report.metrics["totalTriples"] == 1


@pytest.mark.unit
class TestCompleteness:

    def test_threshold_is_inclusive(self):
        report = RDFQualityValidator().validate(generate_subjects_ttl(90), schema=single_table_schema(100))

        assert report.metrics["completeness"] == "90.0%"
        assert report.metrics["expectedResources"] == 100
        assert "COMPLETENESS" in codes_of(report.passed)

    def test_below_threshold_warns(self):
        report = RDFQualityValidator().validate(generate_subjects_ttl(89), schema=single_table_schema(100))

        assert report.metrics["completeness"] == "89.0%"
        assert "LOW_COMPLETENESS" in codes_of(report.warnings)

    def test_threshold_compares_reported_precision(self):
        report = RDFQualityValidator().check_completeness(generate_subjects_ttl(8999), single_table_schema(10000))

        assert report.metrics["completeness"] == "90.0%"
        assert "COMPLETENESS" in codes_of(report.passed)
        assert "LOW_COMPLETENESS" not in codes_of(report.warnings)

    def test_no_expected_rows_is_complete(self):
        report = RDFQualityValidator().validate(generate_subjects_ttl(3), schema=single_table_schema(0))
        assert report.metrics["completeness"] == "100.0%"
        assert "COMPLETENESS" in codes_of(report.passed)

    def test_row_source_counts_take_precedence(self, users_schema, users_source, clean_ttl):
        report = RDFQualityValidator().validate(clean_ttl, schema=users_schema, row_source=users_source)
        assert report.metrics["expectedResources"] == 2

    def test_unreadable_tables_are_ignored(self, users_schema, users_source):
        class PartialSource:
            def read_rows(self, table, limit=None):
                return users_source.read_rows(table, limit)

            def count_rows(self, table):
                if table == "users":
                    raise SchemaAccessError("permission denied", table=table)
                return 10

        report = RDFQualityValidator().check_completeness(
            generate_subjects_ttl(5), users_schema, row_source=PartialSource()
        )
        assert report.metrics["expectedResources"] == 10
        assert report.metrics["completeness"] == "50.0%"
        assert "LOW_COMPLETENESS" in codes_of(report.warnings)

    def test_check_completeness_runs_only_syntax_and_completeness(self):
        report = RDFQualityValidator().check_completeness(generate_subjects_ttl(10), single_table_schema(10))
        assert codes_of(report.passed) == ["SYNTAX", "COMPLETENESS"]


@pytest.mark.unit
class TestQuickValidate:

    def test_only_syntax_and_structure(self, clean_ttl):
        report = RDFQualityValidator().quick_validate(clean_ttl)
        assert codes_of(report.passed) == ["SYNTAX", "STRUCTURE"]
        assert "brokenReferences" not in report.metrics

    def test_syntax_error(self):
        report = RDFQualityValidator().quick_validate(INVALID_SYNTAX_TTL)
        assert report.aborted
        assert report.score == 0


@pytest.mark.unit
class TestValidationReport:

    def test_to_dict(self, clean_ttl):
        data = validate_rdf_content(clean_ttl).to_dict()

        assert set(data) == {"valid", "score", "passed", "warnings", "errors", "metrics"}
        assert data["valid"] is True
        assert data["passed"][0] == {"code": "SYNTAX", "message": "Valid RDF syntax: 11 triples parsed"}

    def test_save_to_file(self, tmp_path):
        output = tmp_path / "report.json"
        validate_rdf_content(INCONSISTENT_TTL).save_to_file(str(output))

        saved = json.loads(output.read_text())
        assert {w["code"] for w in saved["warnings"]} == {"DUPLICATE_PROPERTIES", "MISSING_TYPE"}

    def test_human_readable_summary(self):
        summary = validate_rdf_content(RELATIVE_URI_NT, rdf_format="nt").get_human_readable_summary()

        assert "RDF QUALITY REPORT" in summary
        assert "INVALID" in summary
        assert "[INVALID_URI]" in summary
        assert "METRICS:" in summary


@pytest.mark.integration
class TestValidateFile:

    def test_format_from_extension(self, tmp_path):
        path = tmp_path / "data.nt"
        path.write_text(RELATIVE_URI_NT)

        report = validate_rdf_file(str(path))
        assert codes_of(report.errors) == ["INVALID_URI"]

    def test_clean_file(self, clean_ttl_file):
        assert validate_rdf_file(clean_ttl_file).score == 100

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            validate_rdf_file(str(tmp_path / "absent.ttl"))

    def test_completeness_from_snapshot_row_counts(self, clean_ttl_file):
        report = validate_rdf_file(clean_ttl_file, schema=single_table_schema(4))
        assert report.metrics["completeness"] == "100.0%"

"""
Tests for executing mapping configurations against rows.
"""

import pytest
from rdflib import Literal, URIRef
from rdflib.namespace import RDF, XSD

from rdb2rdf.core.data_sources import InMemoryDataSource
from rdb2rdf.core.exceptions import MappingConfigError
from rdb2rdf.formats.r2rml import MappingConfiguration, R2RMLMaterializer, TriplesMap
from rdb2rdf.shared.models import SchemaSnapshot

BASE = "http://ex.org/"
EX = "http://ex.org/"


class QuerySource(InMemoryDataSource):
    """In-memory source that answers every query with fixed rows."""

    def __init__(self, schema, rows, query_rows):
        super().__init__(schema, rows)
        self.query_rows = query_rows
        self.queries = []

    def execute_query(self, sql, limit=None):
        self.queries.append(sql)
        return list(self.query_rows)


def items_source(rows):
    schema = SchemaSnapshot.from_dict({"tables": [{
        "name": "items",
        "columns": [{"column_name": "id"}, {"column_name": "label"}, {"column_name": "iri"}],
        "primaryKeys": ["id"],
    }]})
    return InMemoryDataSource(schema, {"items": rows})


def items_config(*poms, subject_map=None, logical_table=None):
    return MappingConfiguration.from_dict({"triplesMaps": [{
        "id": "TM_items",
        "logicalTable": logical_table or {"tableName": "items"},
        "subjectMap": subject_map or {"template": "http://ex.org/items/{id}", "classes": ["http://ex.org/Item"]},
        "predicateObjectMaps": list(poms) or [
            {"predicate": "http://ex.org/label", "objectMap": {"column": "label"}},
        ],
    }]})


@pytest.mark.unit
class TestR2RMLMaterializer:

    def test_users_mapping(self, mapping_dict, users_source):
        config = MappingConfiguration.from_dict(mapping_dict)
        result = R2RMLMaterializer(BASE).materialize(config, users_source)
        graph = result.graph

        user = URIRef(EX + "users/1")
        department = URIRef(EX + "departments/7")
        assert (department, RDF.type, URIRef(EX + "Departments")) in graph
        assert (department, URIRef(EX + "name"), Literal("Engineering", datatype=XSD.string)) in graph
        assert (user, RDF.type, URIRef(EX + "Users")) in graph
        assert (user, URIRef(EX + "name"), Literal("Ana", lang="es")) in graph
        assert (user, URIRef(EX + "department"), department) in graph
        assert (user, URIRef(EX + "profile"), URIRef(EX + "profiles/Ana")) in graph
        assert (user, URIRef(EX + "source"), Literal('HR "export"\n\tv2')) in graph
        assert len(graph) == 7
        assert result.metrics["rows_mapped"] == 2
        assert result.skipped_items == []

    def test_join_without_match_emits_nothing(self, mapping_dict, users_schema):
        source = InMemoryDataSource(users_schema, {
            "departments": [{"id": 7, "name": "Engineering"}],
            "users": [{"id": 1, "name": "Ana", "dept_id": 8}],
        })
        graph = R2RMLMaterializer(BASE).materialize(MappingConfiguration.from_dict(mapping_dict), source).graph
        assert not list(graph.triples((URIRef(EX + "users/1"), URIRef(EX + "department"), None)))

    def test_join_compares_lexical_forms(self, mapping_dict, users_schema):
        source = InMemoryDataSource(users_schema, {
            "departments": [{"id": 7, "name": "Engineering"}],
            "users": [{"id": 1, "name": "Ana", "dept_id": "7"}],
        })
        graph = R2RMLMaterializer(BASE).materialize(MappingConfiguration.from_dict(mapping_dict), source).graph
        assert (URIRef(EX + "users/1"), URIRef(EX + "department"), URIRef(EX + "departments/7")) in graph

    def test_reference_without_join_uses_same_row(self):
        config = MappingConfiguration.from_dict({"triplesMaps": [
            {
                "id": "TM_items",
                "logicalTable": {"tableName": "items"},
                "subjectMap": {"template": "http://ex.org/items/{id}"},
                "predicateObjectMaps": [
                    {"predicate": "http://ex.org/labelNode", "objectMap": {"parentTriplesMap": "TM_labels"}},
                ],
            },
            {
                "id": "TM_labels",
                "logicalTable": {"tableName": "items"},
                "subjectMap": {"template": "http://ex.org/labels/{label}"},
                "predicateObjectMaps": [
                    {"predicate": "http://ex.org/text", "objectMap": {"column": "label"}},
                ],
            },
        ]})
        graph = R2RMLMaterializer(BASE).materialize(config, items_source([{"id": 1, "label": "red"}])).graph
        assert (URIRef(EX + "items/1"), URIRef(EX + "labelNode"), URIRef(EX + "labels/red")) in graph

    def test_null_columns_yield_no_triples(self, mapping_dict, users_schema):
        source = InMemoryDataSource(users_schema, {"users": [{"id": 2, "name": None, "dept_id": None}]})
        graph = R2RMLMaterializer(BASE).materialize(MappingConfiguration.from_dict(mapping_dict), source).graph
        user = URIRef(EX + "users/2")

        predicates = set(graph.predicates(user))
        assert predicates == {RDF.type, URIRef(EX + "source")}

    def test_unresolved_subject_skips_row(self):
        source = items_source([{"id": None, "label": "ghost"}, {"id": 2, "label": "ok"}])
        result = R2RMLMaterializer(BASE).materialize(items_config(), source)

        assert result.metrics["rows_skipped"] == 1
        assert [item.code for item in result.skipped_items] == ["UNRESOLVED_SUBJECT"]
        assert (URIRef(EX + "items/2"), URIRef(EX + "label"), Literal("ok")) in result.graph

    def test_column_values_without_datatype_keep_natural_type(self):
        source = items_source([{"id": 1, "label": 42}])
        graph = R2RMLMaterializer(BASE).materialize(items_config(), source).graph
        label = graph.value(URIRef(EX + "items/1"), URIRef(EX + "label"))
        assert label.datatype == XSD.integer

    def test_column_valued_subjects(self):
        source = items_source([
            {"id": 1, "iri": "http://other.org/thing"},
            {"id": 2, "iri": "local key"},
        ])
        config = items_config(
            {"predicate": "http://ex.org/id", "objectMap": {"column": "id"}},
            subject_map={"column": "iri"},
        )
        graph = R2RMLMaterializer(BASE).materialize(config, source).graph

        assert set(graph.subjects()) == {URIRef("http://other.org/thing"), URIRef(EX + "local%20key")}

    def test_constant_and_template_objects(self):
        source = items_source([{"id": "a/b", "label": "x"}])
        config = items_config(
            {"predicate": "http://ex.org/kind", "objectMap": {"constant": "item"}},
            {"predicate": "http://ex.org/page", "objectMap": {"template": "http://ex.org/pages/{id}"}},
        )
        graph = R2RMLMaterializer(BASE).materialize(config, source).graph
        subject = URIRef(EX + "items/a%2Fb")

        assert (subject, URIRef(EX + "kind"), Literal("item")) in graph
        assert (subject, URIRef(EX + "page"), URIRef(EX + "pages/a%2Fb")) in graph

    def test_template_naming_absent_column_is_recorded(self):
        source = items_source([{"id": 1, "label": "x"}])
        config = items_config(
            {"predicate": "http://ex.org/page", "objectMap": {"template": "http://ex.org/pages/{lable}"}},
        )
        result = R2RMLMaterializer(BASE).materialize(config, source)

        assert list(result.graph.objects(URIRef(EX + "items/1"), URIRef(EX + "page"))) == []
        assert [item.code for item in result.skipped_items] == ["UNRESOLVED_OBJECT"]
        assert "lable" in result.skipped_items[0].reason

    def test_template_with_null_column_emits_nothing(self):
        source = items_source([{"id": 1, "label": None}])
        config = items_config(
            {"predicate": "http://ex.org/page", "objectMap": {"template": "http://ex.org/pages/{label}"}},
        )
        result = R2RMLMaterializer(BASE).materialize(config, source)

        assert list(result.graph.objects(URIRef(EX + "items/1"), URIRef(EX + "page"))) == []
        assert result.skipped_items == []

    def test_boolean_constant_matches_generated_mapping(self):
        config = items_config({"predicate": "http://ex.org/active", "objectMap": {"constant": True}})
        graph = R2RMLMaterializer(BASE).materialize(config, items_source([{"id": 1}])).graph

        assert graph.value(URIRef(EX + "items/1"), URIRef(EX + "active")) == Literal("true", datatype=XSD.boolean)

    def test_query_logical_table_needs_query_support(self):
        config = items_config(logical_table={"sqlQuery": "SELECT id, label FROM items"})
        result = R2RMLMaterializer(BASE).materialize(config, items_source([{"id": 1, "label": "x"}]))

        assert len(result.graph) == 0
        assert [item.code for item in result.skipped_items] == ["QUERY_UNSUPPORTED"]

    def test_query_logical_table(self):
        base_source = items_source([])
        source = QuerySource(base_source.schema, {}, [{"id": 5, "label": "from query"}])
        config = items_config(logical_table={"sqlQuery": "SELECT id, label FROM items"})

        graph = R2RMLMaterializer(BASE).materialize(config, source).graph

        assert source.queries == ["SELECT id, label FROM items"]
        assert (URIRef(EX + "items/5"), URIRef(EX + "label"), Literal("from query")) in graph

    def test_missing_table_is_skipped(self):
        config = items_config(logical_table={"tableName": "absent"})
        result = R2RMLMaterializer(BASE).materialize(config, items_source([]))
        assert [item.code for item in result.skipped_items] == ["TABLE_ERROR"]

    def test_row_limit(self):
        source = items_source([{"id": i, "label": str(i)} for i in range(10)])
        result = R2RMLMaterializer(BASE, row_limit=4).materialize(items_config(), source)
        assert result.metrics["rows_mapped"] == 4

    def test_unknown_parent_is_rejected(self):
        config = items_config({"predicate": "http://ex.org/p", "objectMap": {"parentTriplesMap": "TM_missing"}})
        with pytest.raises(MappingConfigError, match="TM_missing"):
            R2RMLMaterializer(BASE).materialize(config, items_source([]))

    def test_invalid_configuration_is_rejected(self):
        config = items_config()
        config.triples_maps.append(TriplesMap(
            id="TM_items",
            logical_table=config.triples_maps[0].logical_table,
            subject_map=config.triples_maps[0].subject_map,
            predicate_object_maps=config.triples_maps[0].predicate_object_maps,
        ))
        with pytest.raises(MappingConfigError, match="duplicate id"):
            R2RMLMaterializer(BASE).materialize(config, items_source([]))

"""
Mapping configuration data types.

These classes model user-defined R2RML-style mapping rules. They map
directly to the JSON shape exchanged with mapping editors::

    {
      "triplesMaps": [{
        "id": "TriplesMap_users",
        "logicalTable": {"type": "table", "tableName": "users"},
        "subjectMap": {"template": "http://ex.org/users/{id}",
                       "classes": ["http://ex.org/Users"]},
        "predicateObjectMaps": [{
          "predicate": "http://ex.org/name",
          "objectMap": {"column": "name",
                        "datatype": "http://www.w3.org/2001/XMLSchema#string"}
        }]
      }]
    }

The object map is an explicit tagged union; exactly one variant is set.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ...core.exceptions import MappingConfigError
from .validator import validate_mapping_dict


@dataclass
class LogicalTable:
    """
    The rows a TriplesMap iterates over: a table or an SQL query.

    Attributes:
        table_name: Name of a base table or view.
        sql_query: SELECT statement (mutually exclusive with table_name).
    """
    table_name: Optional[str] = None
    sql_query: Optional[str] = None

    @property
    def is_query(self) -> bool:
        return self.sql_query is not None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LogicalTable":
        return cls(table_name=data.get("tableName") or None, sql_query=data.get("sqlQuery") or None)

    def to_dict(self) -> Dict[str, Any]:
        if self.is_query:
            return {"type": "query", "sqlQuery": self.sql_query}
        return {"type": "table", "tableName": self.table_name}


@dataclass
class SubjectMap:
    """
    How the subject IRI of each row is built, plus its rdf:type classes.

    Attributes:
        template: IRI template with ``{column}`` placeholders.
        column: Column whose value is the subject IRI.
        classes: Class IRIs asserted for every subject.
    """
    template: Optional[str] = None
    column: Optional[str] = None
    classes: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SubjectMap":
        return cls(
            template=data.get("template") or None,
            column=data.get("column") or None,
            classes=list(data.get("classes") or []),
        )

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {}
        if self.template is not None:
            result["template"] = self.template
        else:
            result["column"] = self.column
        result["classes"] = list(self.classes)
        return result


@dataclass
class JoinCondition:
    """Child column (this map) equals parent column (referenced map)."""
    child: str
    parent: str

    def to_dict(self) -> Dict[str, Any]:
        return {"child": self.child, "parent": self.parent}


@dataclass
class ColumnObjectMap:
    """Literal from a column value, optionally typed or language-tagged."""
    column: str
    datatype: Optional[str] = None
    language: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"column": self.column}
        if self.datatype:
            result["datatype"] = self.datatype
        if self.language:
            result["language"] = self.language
        return result


@dataclass
class TemplateObjectMap:
    """IRI built from a template."""
    template: str

    def to_dict(self) -> Dict[str, Any]:
        return {"template": self.template}


@dataclass
class ConstantObjectMap:
    """Fixed literal value."""
    constant: Any

    def to_dict(self) -> Dict[str, Any]:
        return {"constant": self.constant}


@dataclass
class ReferenceObjectMap:
    """Subject of another TriplesMap, optionally joined on a column pair."""
    parent_triples_map: str
    join_condition: Optional[JoinCondition] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"parentTriplesMap": self.parent_triples_map}
        if self.join_condition is not None:
            result["joinCondition"] = self.join_condition.to_dict()
        return result


ObjectMap = Union[ColumnObjectMap, TemplateObjectMap, ConstantObjectMap, ReferenceObjectMap]


def object_map_from_dict(data: Dict[str, Any]) -> ObjectMap:
    """
    Build the object map variant present in ``data``.

    Raises:
        MappingConfigError: If no variant is set.
    """
    if data.get("column"):
        return ColumnObjectMap(
            column=data["column"],
            datatype=data.get("datatype") or None,
            language=data.get("language") or None,
        )
    if data.get("template"):
        return TemplateObjectMap(template=data["template"])
    if data.get("constant") not in (None, ""):
        return ConstantObjectMap(constant=data["constant"])
    if data.get("parentTriplesMap"):
        join = data.get("joinCondition")
        return ReferenceObjectMap(
            parent_triples_map=data["parentTriplesMap"],
            join_condition=JoinCondition(join["child"], join["parent"]) if join else None,
        )
    raise MappingConfigError([f"Object map has no variant: {data}"])


@dataclass
class PredicateObjectMap:
    predicate: str
    object_map: ObjectMap

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PredicateObjectMap":
        return cls(predicate=data["predicate"], object_map=object_map_from_dict(data["objectMap"]))

    def to_dict(self) -> Dict[str, Any]:
        return {"predicate": self.predicate, "objectMap": self.object_map.to_dict()}


@dataclass
class TriplesMap:
    """
    One mapping rule: rows of a logical table to subjects and their properties.

    Attributes:
        id: Unique identifier within the configuration.
        logical_table: Rows to iterate.
        subject_map: Subject IRI and classes per row.
        predicate_object_maps: Properties emitted for each subject, in order.
    """
    id: str
    logical_table: LogicalTable
    subject_map: SubjectMap
    predicate_object_maps: List[PredicateObjectMap] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TriplesMap":
        return cls(
            id=data["id"],
            logical_table=LogicalTable.from_dict(data["logicalTable"]),
            subject_map=SubjectMap.from_dict(data["subjectMap"]),
            predicate_object_maps=[
                PredicateObjectMap.from_dict(pom) for pom in data.get("predicateObjectMaps") or []
            ],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "logicalTable": self.logical_table.to_dict(),
            "subjectMap": self.subject_map.to_dict(),
            "predicateObjectMaps": [pom.to_dict() for pom in self.predicate_object_maps],
        }


@dataclass
class MappingConfiguration:
    """Ordered set of TriplesMaps."""
    triples_maps: List[TriplesMap] = field(default_factory=list)

    def get_triples_map(self, triples_map_id: str) -> Optional[TriplesMap]:
        for tm in self.triples_maps:
            if tm.id == triples_map_id:
                return tm
        return None

    @property
    def total_predicates(self) -> int:
        return sum(len(tm.predicate_object_maps) for tm in self.triples_maps)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MappingConfiguration":
        """
        Validate and build a configuration.

        Raises:
            MappingConfigError: Carrying every validation message.
        """
        errors = validate_mapping_dict(data)
        if errors:
            raise MappingConfigError(errors)
        return cls(triples_maps=[TriplesMap.from_dict(tm) for tm in data["triplesMaps"]])

    def to_dict(self) -> Dict[str, Any]:
        return {"triplesMaps": [tm.to_dict() for tm in self.triples_maps]}


def load_mapping_configuration(path: Union[str, Path]) -> MappingConfiguration:
    """
    Load a configuration from a JSON file.

    Accepts either the bare configuration or a saved-mapping document that
    wraps it under ``mappingConfig``.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        MappingConfigError: If the JSON is malformed or the configuration invalid.
    """
    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"Mapping file not found: {path}")
    try:
        with open(file_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise MappingConfigError([f"Invalid JSON in {path}: {e}"])

    if isinstance(data, dict) and isinstance(data.get("mappingConfig"), dict):
        data = data["mappingConfig"]
    return MappingConfiguration.from_dict(data)


def save_mapping_configuration(config: MappingConfiguration, path: Union[str, Path]) -> None:
    """Write a configuration as indented JSON."""
    with open(path, "w", encoding="utf-8") as f:
        json.dump(config.to_dict(), f, indent=2)

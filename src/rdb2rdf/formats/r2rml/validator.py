"""
Structural validation of mapping configurations.

Works on the JSON-like dict form so that configurations can be checked
before any model object is built. Every rule is evaluated and every
violation is collected; validation never stops at the first problem.

Rules:
- at least one TriplesMap, every id non-empty and unique
- logical table: exactly one of tableName / sqlQuery (and a legacy ``type``
  that agrees with it)
- subject map: exactly one of template / column, well-formed template
- at least one predicate-object map, each with a predicate and an object map
- object map: exactly one of column / template / constant / parentTriplesMap;
  datatype and language are exclusive; join conditions need child and parent
"""

from typing import Any, Dict, List

from .template import RRTemplate

OBJECT_MAP_VARIANTS = ("column", "template", "constant", "parentTriplesMap")

_LOGICAL_TABLE_TYPES = {"table": "tableName", "query": "sqlQuery"}


def _present(value: Any) -> bool:
    return value is not None and value != ""


def _check_template(template: Any, where: str, errors: List[str]) -> None:
    if not isinstance(template, str):
        errors.append(f"{where}: template must be a string")
        return
    try:
        RRTemplate(template)
    except ValueError as e:
        errors.append(f"{where}: {e}")


def _validate_logical_table(label: str, logical_table: Any, errors: List[str]) -> None:
    if not isinstance(logical_table, dict):
        errors.append(f"TriplesMap {label}: logical table is required")
        return

    supplied = [key for key in ("tableName", "sqlQuery") if _present(logical_table.get(key))]
    if len(supplied) != 1:
        errors.append(
            f"TriplesMap {label}: logical table must specify exactly one of tableName or sqlQuery"
        )

    legacy_type = logical_table.get("type")
    if legacy_type is None:
        return
    expected_key = _LOGICAL_TABLE_TYPES.get(legacy_type)
    if expected_key is None:
        errors.append(f"TriplesMap {label}: unknown logical table type '{legacy_type}'")
    elif len(supplied) == 1 and supplied[0] != expected_key:
        errors.append(
            f"TriplesMap {label}: logical table type '{legacy_type}' requires {expected_key}"
        )


def _validate_subject_map(label: str, subject_map: Any, errors: List[str]) -> None:
    if not isinstance(subject_map, dict):
        errors.append(f"TriplesMap {label}: subject map is required")
        return

    supplied = [key for key in ("template", "column") if _present(subject_map.get(key))]
    if len(supplied) != 1:
        errors.append(f"TriplesMap {label}: subject map must specify exactly one of template or column")
    elif supplied[0] == "template":
        _check_template(subject_map["template"], f"TriplesMap {label} subject map", errors)

    classes = subject_map.get("classes")
    if classes is not None and (
        not isinstance(classes, list) or not all(isinstance(c, str) and c for c in classes)
    ):
        errors.append(f"TriplesMap {label}: subject map classes must be a list of URIs")


def _validate_object_map(where: str, object_map: Dict[str, Any], errors: List[str]) -> None:
    variants = [key for key in OBJECT_MAP_VARIANTS if _present(object_map.get(key))]
    if not variants:
        errors.append(
            f"{where}: object map must specify one of {', '.join(OBJECT_MAP_VARIANTS)}"
        )
        return
    if len(variants) > 1:
        errors.append(f"{where}: object map specifies several variants ({', '.join(variants)})")
        return

    variant = variants[0]
    if variant == "column":
        if _present(object_map.get("datatype")) and _present(object_map.get("language")):
            errors.append(f"{where}: object map cannot have both datatype and language")
    elif variant == "template":
        _check_template(object_map["template"], where, errors)
    elif variant == "parentTriplesMap":
        join = object_map.get("joinCondition")
        if join is not None:
            if not isinstance(join, dict) or not _present(join.get("child")) or not _present(join.get("parent")):
                errors.append(f"{where}: join condition requires both child and parent")


def _validate_triples_map(index: int, tm: Any, seen_ids: Dict[str, int], errors: List[str]) -> None:
    if not isinstance(tm, dict):
        errors.append(f"TriplesMap {index}: must be an object")
        return

    tm_id = tm.get("id")
    if not isinstance(tm_id, str) or not tm_id.strip():
        errors.append(f"TriplesMap {index}: id is required")
        label = str(index)
    else:
        label = tm_id
        if tm_id in seen_ids:
            errors.append(f"TriplesMap {tm_id}: duplicate id (also used by TriplesMap {seen_ids[tm_id]})")
        else:
            seen_ids[tm_id] = index

    _validate_logical_table(label, tm.get("logicalTable"), errors)
    _validate_subject_map(label, tm.get("subjectMap"), errors)

    poms = tm.get("predicateObjectMaps")
    if not isinstance(poms, list) or not poms:
        errors.append(f"TriplesMap {label}: must have at least one predicate-object map")
        return

    for pom_index, pom in enumerate(poms):
        where = f"TriplesMap {label} POM {pom_index}"
        if not isinstance(pom, dict):
            errors.append(f"{where}: must be an object")
            continue
        if not _present(pom.get("predicate")):
            errors.append(f"{where}: predicate is required")
        object_map = pom.get("objectMap")
        if not isinstance(object_map, dict):
            errors.append(f"{where}: object map is required")
        else:
            _validate_object_map(where, object_map, errors)


def validate_mapping_dict(data: Any) -> List[str]:
    """
    Validate a mapping configuration in dict form.

    Returns:
        Every violation found; empty when the configuration is valid.
    """
    if not isinstance(data, dict):
        return ["Mapping configuration must be an object"]

    errors: List[str] = []
    triples_maps = data.get("triplesMaps")
    if not isinstance(triples_maps, list) or not triples_maps:
        errors.append("Mapping configuration must contain at least one TriplesMap")
        return errors

    seen_ids: Dict[str, int] = {}
    for index, tm in enumerate(triples_maps):
        _validate_triples_map(index, tm, seen_ids, errors)
    return errors

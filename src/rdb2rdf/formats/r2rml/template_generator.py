"""
Default mapping configurations derived from a schema.

Given a table, produce a TriplesMap that a user can then edit:

- id:         TriplesMap_<table>
- logical:    the table itself
- subject:    base + table + "/{pk}", class base + Capitalize(table)
- properties: one column object map per non-key column, predicate
              base + column, datatype from the column's SQL type
"""

import logging
from typing import List, Optional, Sequence

from ...constants import Namespaces
from ...core.exceptions import MappingConfigError
from ...shared.models.schema import Column, SchemaSnapshot, Table
from ..rdf.type_mapper import TypeMapper
from ..rdf.uri_utils import URIUtils
from .models import (
    ColumnObjectMap,
    LogicalTable,
    MappingConfiguration,
    PredicateObjectMap,
    SubjectMap,
    TriplesMap,
)

logger = logging.getLogger(__name__)


class TemplateGenerator:
    """Builds editable default TriplesMaps."""

    def __init__(self, base_namespace: str = Namespaces.DEFAULT_BASE):
        self.base_namespace = base_namespace

    def template(self, table_name: str, columns: Sequence[Column], primary_key: str) -> TriplesMap:
        """Build the default TriplesMap for one table. Pure, no I/O."""
        return TriplesMap(
            id=f"TriplesMap_{table_name}",
            logical_table=LogicalTable(table_name=table_name),
            subject_map=SubjectMap(
                template=f"{self.base_namespace}{table_name}/{{{primary_key}}}",
                classes=[f"{self.base_namespace}{URIUtils.capitalize(table_name)}"],
            ),
            predicate_object_maps=[
                PredicateObjectMap(
                    predicate=f"{self.base_namespace}{column.name}",
                    object_map=ColumnObjectMap(
                        column=column.name,
                        datatype=str(TypeMapper.to_xsd(column.data_type)),
                    ),
                )
                for column in columns
                if column.name != primary_key
            ],
        )

    @staticmethod
    def subject_key(table: Table) -> str:
        """
        Column used in the subject template: the primary key, or the first
        column when the table has none.

        Raises:
            MappingConfigError: If the key is composite or the table has no columns.
        """
        if table.has_composite_key:
            raise MappingConfigError([
                f"Table {table.name}: composite primary key ({', '.join(table.primary_keys)}) "
                f"cannot be expressed as a single-column template"
            ])
        if table.primary_key:
            return table.primary_key
        if not table.columns:
            raise MappingConfigError([f"Table {table.name}: has no columns"])
        logger.info(f"Table {table.name} has no primary key; using column {table.columns[0].name}")
        return table.columns[0].name

    def template_for_table(self, table: Table) -> TriplesMap:
        return self.template(table.name, table.columns, self.subject_key(table))

    def template_configuration(
        self,
        schema: SchemaSnapshot,
        table_names: Optional[Sequence[str]] = None,
    ) -> MappingConfiguration:
        """
        Build one TriplesMap per table.

        Tables that cannot be templated (composite key, no columns, or no
        column besides the key) are skipped with a warning.

        Raises:
            SchemaAccessError: If a requested table does not exist.
        """
        tables: List[Table]
        if table_names:
            tables = [schema.get_table(name) for name in table_names]
        else:
            tables = list(schema.tables)

        triples_maps = []
        for table in tables:
            try:
                tm = self.template_for_table(table)
            except MappingConfigError as e:
                logger.warning(f"Skipping table {table.name}: {e.message}")
                continue
            if not tm.predicate_object_maps:
                logger.warning(f"Skipping table {table.name}: no columns besides the key")
                continue
            triples_maps.append(tm)
        return MappingConfiguration(triples_maps=triples_maps)

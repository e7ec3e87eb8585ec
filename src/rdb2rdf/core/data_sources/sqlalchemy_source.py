"""
SQLAlchemy-backed relational data source.

Implements SchemaProvider, RowSource and QueryRowSource on top of an
SQLAlchemy engine. The engine (and its connection pool) is created by
``open()`` and disposed by ``close()``; the object is also a context manager::

    with SqlAlchemyDataSource("postgresql://user:pw@localhost/shop") as source:
        schema = source.get_schema()
        rows = source.read_rows("users", limit=1000)

Transient ``OperationalError``s (dropped connections, lock timeouts) are
retried with exponential backoff before being surfaced as SchemaAccessError.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import create_engine, func, inspect, literal_column, select, table, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import CompileError, OperationalError, SQLAlchemyError
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from ...constants import DataSourceConfig
from ...shared.models.schema import Column, ForeignKey, SchemaSnapshot, Table
from ..exceptions import SchemaAccessError
from .protocols import Row

logger = logging.getLogger(__name__)

_retry_transient = retry(
    stop=stop_after_attempt(DataSourceConfig.RETRY_ATTEMPTS),
    wait=wait_exponential(
        multiplier=1,
        min=DataSourceConfig.RETRY_MIN_WAIT,
        max=DataSourceConfig.RETRY_MAX_WAIT,
    ),
    retry=retry_if_exception_type(OperationalError),
    before_sleep=before_sleep_log(logger, logging.WARNING),
    reraise=True,
)


def _type_name(column_type: Any) -> str:
    """Render an SQLAlchemy column type as its SQL name."""
    try:
        return str(column_type)
    except CompileError:
        return type(column_type).__name__


class SqlAlchemyDataSource:
    """
    Relational data source using an SQLAlchemy engine.

    Attributes:
        url: SQLAlchemy database URL.
        schema_name: Database schema to inspect (None for the default schema).
    """

    def __init__(
        self,
        url: str,
        schema_name: Optional[str] = None,
        engine_options: Optional[Dict[str, Any]] = None,
    ):
        if not url:
            raise ValueError("A database URL is required")
        self.url = url
        self.schema_name = schema_name
        self.engine_options = dict(engine_options or {})
        self._engine: Optional[Engine] = None
        self._table_names: Optional[List[str]] = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def open(self) -> "SqlAlchemyDataSource":
        if self._engine is None:
            options = {"pool_pre_ping": True}
            options.update(self.engine_options)
            try:
                self._engine = create_engine(self.url, **options)
            except (SQLAlchemyError, ImportError, ValueError) as e:
                raise SchemaAccessError(f"Could not create database engine: {e}")
            logger.info(f"Opened data source {self._engine.url.render_as_string(hide_password=True)}")
        return self

    def close(self) -> None:
        if self._engine is not None:
            self._engine.dispose()
            logger.debug("Disposed database engine")
        self._engine = None
        self._table_names = None

    @property
    def is_open(self) -> bool:
        return self._engine is not None

    def __enter__(self) -> "SqlAlchemyDataSource":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            raise SchemaAccessError("Data source is not open; call open() first")
        return self._engine

    # ------------------------------------------------------------------
    # SchemaProvider
    # ------------------------------------------------------------------

    def get_schema(self) -> SchemaSnapshot:
        try:
            return self._inspect_schema()
        except SQLAlchemyError as e:
            raise SchemaAccessError(f"Could not read database schema: {e}")

    @_retry_transient
    def _inspect_schema(self) -> SchemaSnapshot:
        inspector = inspect(self.engine)
        table_names = sorted(inspector.get_table_names(schema=self.schema_name))
        self._table_names = table_names

        tables = []
        for name in table_names:
            columns = tuple(
                Column(
                    name=col["name"],
                    data_type=_type_name(col["type"]),
                    nullable=col.get("nullable", True),
                    default=str(col["default"]) if col.get("default") is not None else None,
                    max_length=getattr(col["type"], "length", None),
                )
                for col in inspector.get_columns(name, schema=self.schema_name)
            )
            pk_constraint = inspector.get_pk_constraint(name, schema=self.schema_name) or {}
            primary_keys = tuple(pk_constraint.get("constrained_columns") or ())

            foreign_keys = []
            for fk in inspector.get_foreign_keys(name, schema=self.schema_name):
                for src, ref in zip(fk["constrained_columns"], fk["referred_columns"]):
                    foreign_keys.append(
                        ForeignKey(column=src, target_table=fk["referred_table"], target_column=ref)
                    )

            tables.append(Table(
                name=name,
                columns=columns,
                primary_keys=primary_keys,
                foreign_keys=tuple(foreign_keys),
            ))

        logger.info(f"Read schema with {len(tables)} tables")
        return SchemaSnapshot(tables=tuple(tables), database=self.engine.url.database)

    # ------------------------------------------------------------------
    # RowSource
    # ------------------------------------------------------------------

    def _ensure_table(self, name: str) -> None:
        if self._table_names is None:
            try:
                self._table_names = inspect(self.engine).get_table_names(schema=self.schema_name)
            except SQLAlchemyError as e:
                raise SchemaAccessError(f"Could not list tables: {e}")
        if name not in self._table_names:
            raise SchemaAccessError(f"Table '{name}' not found in database", table=name)

    @_retry_transient
    def _fetch_all(
        self,
        statement: Any,
        params: Optional[Dict[str, Any]] = None,
        limit: Optional[int] = None,
    ) -> List[Row]:
        with self.engine.connect() as conn:
            result = conn.execute(statement, params or {})
            fetched = result.fetchmany(limit) if limit is not None else result.fetchall()
            return [dict(row._mapping) for row in fetched]

    @_retry_transient
    def _fetch_scalar(self, statement: Any) -> Any:
        with self.engine.connect() as conn:
            return conn.execute(statement).scalar()

    def read_rows(self, table_name: str, limit: Optional[int] = None) -> List[Row]:
        self._ensure_table(table_name)
        statement = select(literal_column("*")).select_from(table(table_name, schema=self.schema_name))
        if limit is not None:
            statement = statement.limit(limit)
        try:
            rows = self._fetch_all(statement)
        except SQLAlchemyError as e:
            raise SchemaAccessError(f"Could not read rows of '{table_name}': {e}", table=table_name)
        logger.debug(f"Read {len(rows)} rows from {table_name}")
        return rows

    def count_rows(self, table_name: str) -> int:
        self._ensure_table(table_name)
        statement = select(func.count()).select_from(table(table_name, schema=self.schema_name))
        try:
            return int(self._fetch_scalar(statement) or 0)
        except SQLAlchemyError as e:
            raise SchemaAccessError(f"Could not count rows of '{table_name}': {e}", table=table_name)

    def execute_query(self, sql: str, limit: Optional[int] = None) -> List[Row]:
        """Run a SELECT used as an R2RML logical table."""
        try:
            return self._fetch_all(text(sql), limit=limit)
        except SQLAlchemyError as e:
            raise SchemaAccessError(f"Could not execute logical table query: {e}")

"""Document table columns of a model through SQLAlchemy schema reflection.

:class:`SchemaExtractor` reflects the columns of a model's backing table and
registers, per column, a readable property and a ``where<Column>`` query
method on the model's :class:`~modelhint.registry.ModelSchema`.

The extractor is optional: :meth:`SchemaExtractor.from_config` returns
``None`` when no database URL is configured or the engine cannot be built,
and the driver then documents models from their methods only.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from sqlalchemy import create_engine, inspect as sa_inspect
from sqlalchemy.engine import Engine
from sqlalchemy.exc import ArgumentError, NoSuchModuleError, NoSuchTableError, SQLAlchemyError

from modelhint.conventions import date_columns, table_name
from modelhint.exceptions import IntrospectionError
from modelhint.models import ColumnDoc, HintConfig, Parameter
from modelhint.naming import qualified_name, studly
from modelhint.registry import ModelSchema
from modelhint.schema.types import TypeRegistry

logger = logging.getLogger(__name__)


class SchemaExtractor:
    """Reflect table columns and turn them into properties and ``where`` methods.

    Args:
        engine: Engine connected to the application database.
        custom_types: Per-dialect type overrides from
            :attr:`~modelhint.models.DatabaseConfig.custom_types`; only the
            entry for ``engine.dialect.name`` is used.
        table_prefix: Prefix prepended to every table name.
        datetime_type: Type documented for columns the model lists as dates.
        query_builder_type: Type returned by the ``where`` methods.
    """

    def __init__(
        self,
        engine: Engine,
        custom_types: Optional[dict[str, dict[str, str]]] = None,
        table_prefix: str = "",
        datetime_type: str = "datetime.datetime",
        query_builder_type: str = "orator.orm.Builder",
    ) -> None:
        self.engine = engine
        self.table_prefix = table_prefix
        self.datetime_type = datetime_type
        self.query_builder_type = query_builder_type
        platform = engine.dialect.name
        self.types = TypeRegistry(platform, (custom_types or {}).get(platform))
        self._inspector = None

    @classmethod
    def from_config(cls, config: HintConfig) -> Optional["SchemaExtractor"]:
        """Build an extractor from the database settings, or ``None`` when unavailable."""
        url = config.database.url
        if not url:
            return None
        try:
            engine = create_engine(url)
        except (ArgumentError, NoSuchModuleError, ImportError) as exc:
            logger.debug("Cannot create engine for %s: %s", url, exc)
            return None
        return cls(
            engine,
            custom_types=config.database.custom_types,
            table_prefix=config.database.table_prefix,
            datetime_type=config.orm.datetime_type,
            query_builder_type=config.orm.query_builder_type,
        )

    def dispose(self) -> None:
        self.engine.dispose()

    def read_columns(self, model: Any) -> dict[str, ColumnDoc]:
        """Return column name to :class:`~modelhint.models.ColumnDoc` for *model*'s table.

        A ``schema.table`` name is split and reflected inside ``schema``.
        A table that does not exist yields an empty mapping.

        Raises:
            IntrospectionError: If reflection fails for another reason
                (connection refused, permission denied ...).
        """
        table = self.table_prefix + table_name(model)
        schema: Optional[str] = None
        if table.find(".") > 0:
            schema, table = table.split(".", 1)

        try:
            if self._inspector is None:
                self._inspector = sa_inspect(self.engine)
            columns = self._inspector.get_columns(table, schema=schema)
        except NoSuchTableError:
            logger.debug("Table %s not found", table)
            return {}
        except SQLAlchemyError as exc:
            raise IntrospectionError(f"Cannot reflect table {table}: {exc}") from exc

        dates = set(date_columns(model))
        result: dict[str, ColumnDoc] = {}
        for column in columns:
            name = column["name"]
            if name in dates:
                doc_type = self.datetime_type
            else:
                doc_type = self.types.doc_type(column["type"], self.engine.dialect)
            result[name] = ColumnDoc(name=name, type=doc_type, comment=column.get("comment") or "")
        return result

    def extract_from_table(self, model: Any, schema: ModelSchema) -> dict[str, ColumnDoc]:
        """Register every column of *model* on *schema* and return the columns."""
        columns = self.read_columns(model)
        builder = f"{self.query_builder_type}|{qualified_name(type(model))}"
        for column in columns.values():
            schema.set_property(column.name, column.type, read=True, comment=column.comment)
            schema.set_method(f"where{studly(column.name)}", builder, [Parameter(name="value")])
        return columns

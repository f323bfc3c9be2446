"""Column type naming: SQLAlchemy types to native names to documentation types.

Resolution happens in two layers:

1. :class:`TypeRegistry` turns a reflected SQLAlchemy type into a *native*
   type name (``string``, ``bigint``, ``datetimetz`` ...). Registered
   mappings, the built-in ``enum -> string`` plus the user's per-dialect
   ``custom_types``, take precedence over the built-in classification.
2. :func:`doc_type` maps the native name onto the small set of types used in
   annotations (``string``, ``integer``, ``float``, ``boolean``, ``mixed``).
"""

from __future__ import annotations

from typing import Mapping, Optional

from sqlalchemy import types as sqltypes
from sqlalchemy.engine import Dialect
from sqlalchemy.exc import CompileError

DOC_TYPES: dict[str, str] = {
    "string": "string",
    "text": "string",
    "date": "string",
    "time": "string",
    "guid": "string",
    "datetimetz": "string",
    "datetime": "string",
    "integer": "integer",
    "bigint": "integer",
    "smallint": "integer",
    "decimal": "float",
    "float": "float",
    "boolean": "boolean",
}
"""Native type name to documentation type. Anything missing documents as ``mixed``."""

BUILTIN_MAPPINGS: dict[str, str] = {"enum": "string"}

# Order matters: subclasses are checked before their bases
# (Text before String, Float before Numeric, BigInteger before Integer).
_CLASSIFICATION: tuple[tuple[type, str], ...] = (
    (sqltypes.Date, "date"),
    (sqltypes.Time, "time"),
    (sqltypes.Uuid, "guid"),
    (sqltypes.Enum, "enum"),
    (sqltypes.Text, "text"),
    (sqltypes.String, "string"),
    (sqltypes.BigInteger, "bigint"),
    (sqltypes.SmallInteger, "smallint"),
    (sqltypes.Integer, "integer"),
    (sqltypes.Float, "float"),
    (sqltypes.Numeric, "decimal"),
    (sqltypes.Boolean, "boolean"),
    (sqltypes.JSON, "json"),
    (sqltypes.LargeBinary, "blob"),
)


def doc_type(native: str) -> str:
    return DOC_TYPES.get(native, "mixed")


def classify(column_type: sqltypes.TypeEngine) -> str:
    """Built-in native name for a SQLAlchemy type instance."""
    if isinstance(column_type, sqltypes.DateTime):
        return "datetimetz" if getattr(column_type, "timezone", False) else "datetime"
    for sql_type, name in _CLASSIFICATION:
        if isinstance(column_type, sql_type):
            return name
    return str(getattr(column_type, "__visit_name__", "mixed")).lower()


class TypeRegistry:
    """Native type resolution for one database platform.

    Args:
        platform: Dialect name (``sqlite``, ``postgresql``, ``mysql`` ...).
        custom_types: Database type name to native type name, applied
            before the built-in classification.
    """

    def __init__(self, platform: str, custom_types: Optional[Mapping[str, str]] = None) -> None:
        self.platform = platform
        self._mappings: dict[str, str] = dict(BUILTIN_MAPPINGS)
        for db_type, native in (custom_types or {}).items():
            self.register(db_type, native)

    def register(self, db_type: str, native: str) -> None:
        self._mappings[db_type.lower()] = native.lower()

    def native_name(self, column_type: sqltypes.TypeEngine, dialect: Optional[Dialect] = None) -> str:
        raw = _compiled_name(column_type, dialect)
        if raw is not None and raw in self._mappings:
            return self._mappings[raw]
        name = classify(column_type)
        return self._mappings.get(name, name)

    def doc_type(self, column_type: sqltypes.TypeEngine, dialect: Optional[Dialect] = None) -> str:
        return doc_type(self.native_name(column_type, dialect))


def _compiled_name(column_type: sqltypes.TypeEngine, dialect: Optional[Dialect]) -> Optional[str]:
    """The database's own name for a type, lowercased and without arguments (``VARCHAR(20)`` -> ``varchar``)."""
    try:
        compiled = column_type.compile(dialect=dialect)
    except (CompileError, NotImplementedError):
        return None
    return compiled.split("(", 1)[0].strip().lower() or None

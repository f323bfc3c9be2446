"""Accessors for the ORM conventions a model instance is expected to follow.

The engine only needs a handful of facts from a model: its table name, the
columns it treats as dates, its collection class, and the related model of a
relation object. Active-record ORMs expose these as ``get_table()``,
``get_dates()``, ``new_collection()`` and ``Relation.get_related()``; class
attributes are used as fallbacks for models that only declare them.
"""

from __future__ import annotations

import inspect
from typing import Any, Optional

from modelhint.naming import qualified_name, snake


def table_name(model: Any) -> str:
    getter = getattr(model, "get_table", None)
    if callable(getter):
        return str(getter())
    for attr in ("__table__", "__tablename__"):
        value = getattr(model, attr, None)
        if isinstance(value, str) and value:
            return value
    return snake(type(model).__name__) + "s"


def date_columns(model: Any) -> list[str]:
    getter = getattr(model, "get_dates", None)
    if callable(getter):
        return list(getter())
    return list(getattr(model, "__dates__", None) or [])


def related_class(relation: Any) -> Optional[type]:
    """The related model class of a relation object, or ``None`` if *relation* is not one."""
    getter = getattr(relation, "get_related", None)
    if not callable(getter):
        return None
    related = getter()
    if related is None:
        return None
    return related if inspect.isclass(related) else type(related)


def collection_type(related: type, default: str) -> str:
    """Type expression of the collection *related* models are returned in."""
    if not hasattr(related, "new_collection"):
        return default
    return qualified_name(type(related().new_collection()))

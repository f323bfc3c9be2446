"""Classify a model's methods into accessors, mutators, scopes and relations.

:class:`MethodPatternAnalyzer` walks every public method of a model class and
registers what each one implies on the model's
:class:`~modelhint.registry.ModelSchema`:

=========================================  =====================================
Method                                     Registers
=========================================  =====================================
``getFullNameAttribute`` /                 readable property ``full_name``
``get_full_name_attribute``
``setPasswordAttribute`` /                 writable property ``password``
``set_password_attribute``
``scopeOfType(query, kind)`` /             method ``ofType($kind)`` returning
``scope_of_type(query, kind)``             the query builder
``comments`` calling ``self.has_many(``    property ``comments`` typed
                                           ``<Collection>|<Comment>[]``
=========================================  =====================================

and, for every model, a ``find($id)`` method returning the model or ``null``.

Relation methods are found lexically (:mod:`modelhint.analysis.relations`)
and then called on a live instance, because only the returned relation
object knows which model it points to.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

from modelhint.analysis.relations import detect_relations, is_many
from modelhint.conventions import collection_type, related_class
from modelhint.introspection.base import ClassIntrospector
from modelhint.models import OrmConfig, Parameter
from modelhint.naming import camel, qualified_name, snake
from modelhint.registry import ModelSchema

logger = logging.getLogger(__name__)

_GENERIC_ACCESSORS = frozenset({"getAttribute", "get_attribute"})
_GENERIC_MUTATORS = frozenset({"setAttribute", "set_attribute"})
_GENERIC_SCOPES = frozenset({"scopeQuery", "scope_query"})


def accessor_name(method: str, prefix: str) -> Optional[str]:
    """Attribute name of a ``<prefix>XAttribute`` / ``<prefix>_x_attribute`` method.

    Returns ``None`` when *method* does not have that shape or the name part
    is empty.
    """
    if method.startswith(prefix) and method.endswith("Attribute"):
        core = method[len(prefix):-len("Attribute")]
    elif method.startswith(f"{prefix}_") and method.endswith("_attribute"):
        core = method[len(prefix) + 1:-len("_attribute")]
    else:
        return None
    return snake(core) or None


def scope_name(method: str) -> Optional[str]:
    """Query method name of a ``scopeX`` / ``scope_x`` method."""
    if not method.startswith("scope") or method in _GENERIC_SCOPES:
        return None
    return camel(method[len("scope"):]) or None


class MethodPatternAnalyzer:
    """Derive properties and methods of a model from its declared methods.

    Args:
        introspector: Reflection backend used for parameters and sources.
        orm: ORM type names used in the registered type expressions.
        base_methods: Names defined on the model base class. These are never
            inspected for relation calls.
    """

    def __init__(
        self,
        introspector: ClassIntrospector,
        orm: OrmConfig,
        base_methods: Iterable[str] = (),
    ) -> None:
        self.introspector = introspector
        self.orm = orm
        self.base_methods = frozenset(base_methods)

    def analyze(self, model_cls: type, instance: Any, schema: ModelSchema) -> ModelSchema:
        for method in self.introspector.list_methods(model_cls):
            if method not in _GENERIC_ACCESSORS and (name := accessor_name(method, "get")):
                schema.set_property(name, read=True)
            elif method not in _GENERIC_MUTATORS and (name := accessor_name(method, "set")):
                schema.set_property(name, write=True)
            elif method.startswith("scope") and method not in _GENERIC_SCOPES:
                name = scope_name(method)
                if name:
                    self._register_scope(model_cls, method, name, schema)
            elif method not in self.base_methods and not method.startswith("get"):
                self._register_relations(model_cls, instance, method, schema)

        schema.set_method("find", f"{qualified_name(model_cls)}|null", [Parameter(name="id")])
        return schema

    def _register_scope(
        self, model_cls: type, method: str, name: str, schema: ModelSchema
    ) -> None:
        params = self.introspector.get_parameters(model_cls, method)
        # The leading parameter receives the query being built.
        params = params[1:]
        owner = self.introspector.declaring_class(model_cls, method)
        schema.set_method(name, f"{self.orm.query_builder_type}|{qualified_name(owner)}", params)

    def _register_relations(
        self, model_cls: type, instance: Any, method: str, schema: ModelSchema
    ) -> None:
        if self.introspector.is_abstract_method(model_cls, method):
            return
        span = self.introspector.get_source_span(model_cls, method)
        if span is None:
            logger.debug("No source for %s.%s, skipping relation detection", model_cls.__name__, method)
            return

        kinds = detect_relations(span.text)
        if not kinds:
            return

        related = related_class(getattr(instance, method)())
        if related is None:
            logger.debug("%s.%s did not return a relation", model_cls.__name__, method)
            return

        related_type = qualified_name(related)
        for kind in kinds:
            if is_many(kind):
                collection = collection_type(related, self.orm.collection_type)
                schema.set_property(method, f"{collection}|{related_type}[]", read=True)
            else:
                schema.set_property(method, related_type, read=True)

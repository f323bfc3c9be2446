"""Class reflection: the :class:`ClassIntrospector` contract and its runtime backend."""

from modelhint.introspection.base import ClassIntrospector, SourceSpan
from modelhint.introspection.runtime import RuntimeIntrospector

__all__ = ["ClassIntrospector", "RuntimeIntrospector", "SourceSpan"]

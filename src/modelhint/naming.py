"""Identifier case conversions used to name dynamic properties and methods.

The conversions mirror what active-record ORMs do when they map method names
onto attribute names: ``getFullNameAttribute`` documents ``full_name`` and
``scopeOfType`` documents ``ofType``. Both camelCase and snake_case spellings
of the same name convert to the same result.
"""

from __future__ import annotations

import re

_WORD_SPLIT = re.compile(r"[-_\s]+")
_BEFORE_UPPER = re.compile(r"(.)(?=[A-Z])")


def studly(value: str) -> str:
    """``created_at`` -> ``CreatedAt``; ``full-name`` -> ``FullName``."""
    return "".join(word[:1].upper() + word[1:] for word in _WORD_SPLIT.split(value) if word)


def camel(value: str) -> str:
    """``of_type`` -> ``ofType``; ``Active`` -> ``active``."""
    result = studly(value)
    return result[:1].lower() + result[1:]


def snake(value: str) -> str:
    """``FullName`` -> ``full_name``; values without capitals are returned unchanged."""
    if not any(char.isupper() for char in value):
        return value
    value = "".join(word[:1].upper() + word[1:] for word in value.split())
    return _BEFORE_UPPER.sub(r"\1_", value).lower()


def qualified_name(cls: type) -> str:
    """Fully qualified dotted name of *cls*, used as its type expression."""
    return f"{cls.__module__}.{cls.__qualname__}"

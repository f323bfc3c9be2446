"""Lexical detection of relation declarations inside method bodies.

A relation method is an ordinary method whose body calls one of the ORM's
relation factories on ``self``::

    def comments(self):
        return self.has_many(Comment)

There is no declarative schema to read, so the detection is a best-effort
text search: whitespace runs in the source are collapsed and the result is
searched, case-insensitively, for ``self.<factory>(``. It does not parse the
code. A factory name in a comment or a string literal matches too, and a call
split across a line break inside the parentheses still matches because only
the text up to the opening parenthesis is compared.
"""

from __future__ import annotations

import re

RELATION_KINDS: tuple[str, ...] = (
    "hasMany",
    "belongsToMany",
    "hasOne",
    "belongsTo",
    "morphTo",
    "morphMany",
    "morphToMany",
)
"""Relation factory names in detection order."""

MANY_KINDS: frozenset[str] = frozenset({"belongsToMany", "hasMany", "morphMany", "morphToMany"})
"""Relations that resolve to a collection of related models."""

_SPELLINGS: dict[str, tuple[str, ...]] = {
    kind: (kind, re.sub(r"(?<!^)(?=[A-Z])", "_", kind).lower()) for kind in RELATION_KINDS
}

_WHITESPACE_RUN = re.compile(r"\s\s+")


def normalize_source(source: str) -> str:
    """Strip runs of two or more whitespace characters and trim the ends."""
    return _WHITESPACE_RUN.sub("", source).strip()


def detect_relations(source: str, receiver: str = "self") -> list[str]:
    """Relation kinds called on *receiver* in *source*, in :data:`RELATION_KINDS` order.

    Both spellings of a factory are recognised: ``self.hasMany(`` and
    ``self.has_many(`` report ``hasMany``.
    """
    code = normalize_source(source).lower()
    found: list[str] = []
    for kind in RELATION_KINDS:
        for spelling in _SPELLINGS[kind]:
            if f"{receiver}.{spelling}(".lower() in code:
                found.append(kind)
                break
    return found


def is_many(kind: str) -> bool:
    return kind in MANY_KINDS

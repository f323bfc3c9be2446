"""Parsed representation of an annotated class docstring.

A docstring is split into a free-text *summary* and a list of *tags*::

    User account.

    Owns posts and comments.

    @property-read integer $id
    @property string $name Display name
    @method static orator.orm.Builder|app.models.user.User whereName($value)

The summary is every line before the first line that starts with ``@``.
Each ``@kind content`` line starts a new tag; any following line that does
not start with ``@`` continues the previous tag and is kept verbatim, so
hand-written multi-line tag descriptions survive a parse/render cycle.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Optional

PROPERTY_KINDS = frozenset({"property", "property-read", "property-write"})

_TAG_LINE = re.compile(r"^@([\w-]+)\s*(.*)$", re.DOTALL)
_VARIABLE = re.compile(r"\$(\w+)")


@dataclass
class Tag:
    """One ``@kind content`` entry of an annotation block."""

    kind: str
    content: str = ""

    @property
    def variable_name(self) -> Optional[str]:
        """Name of the first ``$variable`` in the content, without the ``$``."""
        match = _VARIABLE.search(self.content)
        return match.group(1) if match else None

    @property
    def method_name(self) -> Optional[str]:
        """Identifier directly before the first ``(`` of a method signature."""
        head, paren, _ = self.content.partition("(")
        if not paren:
            return None
        words = head.split()
        return words[-1] if words else None

    def render(self) -> str:
        return f"@{self.kind} {self.content}" if self.content else f"@{self.kind}"


@dataclass
class AnnotationBlock:
    """Summary text followed by an ordered list of :class:`Tag` entries."""

    summary: str = ""
    tags: list[Tag] = field(default_factory=list)

    @classmethod
    def parse(cls, text: Optional[str]) -> AnnotationBlock:
        """Build a block from cleaned docstring text (``None`` gives an empty block)."""
        block = cls()
        if not text:
            return block

        summary_lines: list[str] = []
        for line in text.splitlines():
            match = _TAG_LINE.match(line.strip())
            if match:
                block.tags.append(Tag(kind=match.group(1), content=match.group(2).strip()))
            elif block.tags:
                if line.strip():
                    block.tags[-1].content += "\n" + line.rstrip()
            else:
                summary_lines.append(line.rstrip())

        block.summary = "\n".join(summary_lines).strip("\n")
        return block

    def declared_properties(self) -> set[str]:
        return {
            tag.variable_name
            for tag in self.tags
            if tag.kind in PROPERTY_KINDS and tag.variable_name
        }

    def declared_methods(self) -> set[str]:
        return {tag.method_name for tag in self.tags if tag.kind == "method" and tag.method_name}

    def append(self, kind: str, content: str) -> Tag:
        tag = Tag(kind=kind, content=content)
        self.tags.append(tag)
        return tag

    def render(self) -> str:
        """Summary, a blank line, then one line per tag."""
        parts: list[str] = []
        if self.summary:
            parts.append(self.summary)
        if self.tags:
            parts.append("\n".join(tag.render() for tag in self.tags))
        return "\n\n".join(parts)

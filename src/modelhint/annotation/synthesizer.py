"""Merge a model's collected schema into its existing docstring."""

from __future__ import annotations

import logging

from modelhint.annotation.block import AnnotationBlock
from modelhint.models import ModelDescriptor
from modelhint.registry import ModelSchema

logger = logging.getLogger(__name__)


def synthesize(
    descriptor: ModelDescriptor, schema: ModelSchema, reset: bool = False
) -> AnnotationBlock:
    """Return the annotation block for *descriptor* extended with *schema*.

    Existing tags are kept in their original order and new tags are appended
    after them. A property or method that is already declared in the
    docstring, matched by exact name, is never added a second time, so
    running the synthesizer on its own output changes nothing.

    Args:
        descriptor: The model whose docstring is extended.
        schema: Properties and methods collected for the model.
        reset: Ignore the existing docstring and start from an empty block.

    Returns:
        The merged :class:`AnnotationBlock`. Its summary falls back to the
        class short name when empty.
    """
    if reset or not descriptor.docstring:
        block = AnnotationBlock()
    else:
        block = AnnotationBlock.parse(descriptor.docstring)

    if not block.summary:
        block.summary = descriptor.short_name

    declared_properties = block.declared_properties()
    declared_methods = block.declared_methods()

    for entry in schema.properties.values():
        if entry.name in declared_properties:
            continue
        block.append(entry.tag_kind, f"{entry.type} ${entry.name} {entry.comment}".strip())

    for entry in schema.methods.values():
        if entry.name in declared_methods:
            continue
        block.append("method", f"static {entry.return_type} {entry.name}({entry.render_arguments()})")

    logger.debug(
        "Synthesized %d tags for %s (%d already declared)",
        len(block.tags),
        descriptor.name,
        len(declared_properties) + len(declared_methods),
    )
    return block

"""Emit synthesized annotation blocks.

Two destinations are supported:

* :class:`InPlaceWriter` rewrites each model's source file, replacing the
  class docstring or inserting one when the class has none.
* :class:`AggregateWriter` collects one stub class per model and renders
  them into a single hints file from the ``model_hints.py.j2`` template.

The text operations (:func:`render_docstring`, :func:`replace_span` and
:func:`insert_docstring`) are pure functions over strings. File access is
confined to the writer classes.
"""

from __future__ import annotations

import ast
import logging
from dataclasses import dataclass
from pathlib import Path

from jinja2 import Environment, FileSystemLoader

from modelhint.annotation.block import AnnotationBlock
from modelhint.config import atomic_write
from modelhint.exceptions import AnnotationError, WriteError
from modelhint.introspection.source import body_insert_position, find_class_node
from modelhint.models import ModelDescriptor

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent / "templates"
"""Directory holding the hints file template."""

STUB_INDENT = 4


def render_docstring(text: str, indent: int) -> str:
    """Render *text* as a triple-quoted docstring literal.

    Lines after the first are indented by *indent* spaces and, for
    multi-line text, the closing quotes go on their own line. Backslashes
    and embedded triple quotes are escaped so the literal evaluates back to
    *text* once :func:`inspect.cleandoc` has removed the indentation.
    """
    body = text.replace("\\", "\\\\").replace('"""', '\\"\\"\\"')
    lines = body.split("\n")
    if len(lines) == 1:
        if body.endswith('"'):
            body = body[:-1] + '\\"'
        return f'"""{body}"""'

    pad = " " * indent
    rendered = [lines[0], *(f"{pad}{line}" if line else "" for line in lines[1:])]
    return '"""' + "\n".join(rendered) + f"\n{pad}" + '"""'


def replace_span(contents: str, old: str, new: str) -> str:
    """Replace the first exact occurrence of *old* in *contents* with *new*.

    Raises:
        AnnotationError: If *old* does not occur in *contents*.
    """
    index = contents.find(old)
    if index < 0:
        raise AnnotationError("The existing docstring was not found in the source file")
    return contents[:index] + new + contents[index + len(old):]


def insert_docstring(contents: str, qualname: str, literal: str) -> str:
    """Insert *literal* as the first statement of class *qualname*.

    The docstring is placed above the decorators of the first member of the
    class body, at that member's indentation. A blank line separates it
    from a following ``def`` or ``class``.

    Raises:
        AnnotationError: If the class cannot be found, or its body starts on
            the same line as the ``class`` statement.
    """
    try:
        tree = ast.parse(contents)
    except SyntaxError as exc:
        raise AnnotationError(f"Cannot parse source: {exc}") from exc

    node = find_class_node(tree, qualname)
    if node is None:
        raise AnnotationError(f"Class {qualname} not found in source")

    line, column = body_insert_position(node)
    lines = contents.splitlines(keepends=True)
    target = lines[line - 1]
    if target[:column].strip():
        raise AnnotationError(f"Class {qualname} has its body on the class line")

    newline = "\r\n" if target.endswith("\r\n") else "\n"
    literal = literal.replace("\n", newline)
    inserted = target[:column] + literal + newline
    if isinstance(node.body[0], (ast.FunctionDef, ast.AsyncFunctionDef, ast.ClassDef)):
        inserted += newline
    lines.insert(line - 1, inserted)
    return "".join(lines)


class InPlaceWriter:
    """Write each model's docstring back into its source file."""

    def write(self, descriptor: ModelDescriptor, block: AnnotationBlock) -> bool:
        """Replace or insert the docstring of *descriptor*'s class.

        Returns:
            ``True`` if the file was rewritten, ``False`` if it already
            carried the docstring.

        Raises:
            AnnotationError: If the docstring cannot be placed.
            WriteError: If the file cannot be read or written.
        """
        if not descriptor.source_file:
            raise AnnotationError(f"No source file for {descriptor.name}")
        path = Path(descriptor.source_file)

        try:
            with open(path, encoding="utf-8", newline="") as fh:
                contents = fh.read()
        except OSError as exc:
            raise WriteError(f"Cannot read {path}: {exc}") from exc

        literal = render_docstring(block.render(), descriptor.docstring_indent)
        if descriptor.raw_docstring:
            old = descriptor.raw_docstring
            if "\r\n" in contents:
                old, literal = old.replace("\n", "\r\n"), literal.replace("\n", "\r\n")
            updated = replace_span(contents, old, literal)
        else:
            updated = insert_docstring(contents, descriptor.qualname, literal)

        if updated == contents:
            return False

        try:
            atomic_write(path, updated)
        except OSError as exc:
            raise WriteError(f"Cannot write {path}: {exc}") from exc
        return True


@dataclass
class ModelStub:
    """One class entry of the hints file."""

    namespace: str
    class_name: str
    docstring: str


class AggregateWriter:
    """Collect stubs for all models and render them into one hints file."""

    def __init__(self) -> None:
        self.stubs: list[ModelStub] = []
        self._env = _create_jinja_env()

    def write(self, descriptor: ModelDescriptor, block: AnnotationBlock) -> None:
        self.stubs.append(
            ModelStub(
                namespace=descriptor.namespace,
                class_name=descriptor.short_name,
                docstring=render_docstring(block.render(), STUB_INDENT),
            )
        )

    def render(self) -> str:
        template = self._env.get_template("model_hints.py.j2")
        return template.render(stubs=self.stubs)

    def save(self, path: Path) -> None:
        """Render the hints file and write it atomically to *path*.

        Raises:
            WriteError: If the file cannot be written.
        """
        try:
            atomic_write(path, self.render())
        except OSError as exc:
            raise WriteError(f"Cannot write {path}: {exc}") from exc


def _create_jinja_env() -> Environment:
    """Jinja2 environment for the hints template.

    Autoescape stays off because the output is Python source, not HTML.
    """
    return Environment(
        loader=FileSystemLoader(str(TEMPLATE_DIR)),
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )

"""AST helpers for locating class definitions and their docstrings in source text."""

from __future__ import annotations

import ast
from typing import Optional


def find_class_node(tree: ast.Module, qualname: str) -> Optional[ast.ClassDef]:
    """Return the class definition for a dotted *qualname* such as ``Outer.Inner``.

    Only module-level classes and classes nested directly inside other
    classes are found. When a name is defined more than once at the same
    level, the first definition in source order wins.
    """
    body: list[ast.stmt] = tree.body
    node: Optional[ast.ClassDef] = None
    for part in qualname.split("."):
        node = next(
            (stmt for stmt in body if isinstance(stmt, ast.ClassDef) and stmt.name == part),
            None,
        )
        if node is None:
            return None
        body = node.body
    return node


def docstring_node(node: ast.ClassDef) -> Optional[ast.Expr]:
    """The statement holding the class docstring, if the class has one."""
    if not node.body:
        return None
    first = node.body[0]
    if (
        isinstance(first, ast.Expr)
        and isinstance(first.value, ast.Constant)
        and isinstance(first.value.value, str)
    ):
        return first
    return None


def body_insert_position(node: ast.ClassDef) -> tuple[int, int]:
    """``(line, column)`` where a new first statement of *node*'s body goes.

    The line is 1-based and accounts for decorators of the first body member.
    """
    first = node.body[0]
    decorators = getattr(first, "decorator_list", [])
    line = min([first.lineno, *(dec.lineno for dec in decorators)])
    return line, first.col_offset


def find_method_node(
    node: ast.ClassDef, name: str
) -> Optional[ast.FunctionDef | ast.AsyncFunctionDef]:
    """The last definition of method *name* directly in *node*'s body.

    The last one is returned because a later ``def`` rebinds the name.
    """
    found = None
    for stmt in node.body:
        if isinstance(stmt, (ast.FunctionDef, ast.AsyncFunctionDef)) and stmt.name == name:
            found = stmt
    return found

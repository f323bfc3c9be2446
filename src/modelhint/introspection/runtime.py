"""Runtime class reflection built on :mod:`inspect`, :mod:`importlib` and :mod:`ast`."""

from __future__ import annotations

import ast
import importlib
import inspect
import logging
import sys
from pathlib import Path
from typing import Any, Optional

from modelhint.exceptions import AnalysisError
from modelhint.introspection.base import ClassIntrospector, SourceSpan
from modelhint.introspection.source import docstring_node, find_class_node, find_method_node
from modelhint.models import ModelDescriptor, Parameter

logger = logging.getLogger(__name__)


class RuntimeIntrospector(ClassIntrospector):
    """Reflect on live classes imported from the project under analysis.

    Args:
        search_paths: Directories prepended to :data:`sys.path` so that the
            project's modules can be imported by their dotted names.
    """

    def __init__(self, search_paths: tuple[str, ...] = ()) -> None:
        for path in search_paths:
            self.add_search_path(path)

    @staticmethod
    def add_search_path(path: str) -> None:
        resolved = str(Path(path).resolve())
        if resolved not in sys.path:
            sys.path.insert(0, resolved)

    # ------------------------------------------------------------------
    # Classes
    # ------------------------------------------------------------------

    def load(self, name: str) -> type:
        parts = name.split(".")
        for split in range(len(parts) - 1, 0, -1):
            module_name = ".".join(parts[:split])
            try:
                module = importlib.import_module(module_name)
            except ModuleNotFoundError as exc:
                if exc.name and (module_name == exc.name or module_name.startswith(exc.name + ".")):
                    continue
                raise AnalysisError(f"Cannot import {module_name}: {exc}") from exc
            except Exception as exc:
                raise AnalysisError(f"Cannot import {module_name}: {exc}") from exc

            obj: Any = module
            for attr in parts[split:]:
                obj = getattr(obj, attr, None)
                if obj is None:
                    break
            if inspect.isclass(obj):
                return obj
            raise AnalysisError(f"{name} is not a class")
        raise AnalysisError(f"Cannot resolve {name}")

    def is_subtype_of(self, cls: type, base: type) -> bool:
        return inspect.isclass(cls) and cls is not base and issubclass(cls, base)

    def is_instantiable(self, cls: type) -> bool:
        return not inspect.isabstract(cls)

    def instantiate(self, cls: type) -> Any:
        try:
            return cls()
        except Exception as exc:
            raise AnalysisError(f"{cls.__qualname__} could not be instantiated: {exc}") from exc

    def describe(self, cls: type) -> ModelDescriptor:
        descriptor = ModelDescriptor(
            name=f"{cls.__module__}.{cls.__qualname__}",
            namespace=cls.__module__,
            short_name=cls.__name__,
            qualname=cls.__qualname__,
        )
        try:
            source_file = inspect.getsourcefile(cls)
        except (OSError, TypeError):
            source_file = None

        if source_file and Path(source_file).is_file():
            source = Path(source_file).read_text(encoding="utf-8")
            node = find_class_node(ast.parse(source, filename=source_file), cls.__qualname__)
            if node is not None:
                descriptor.source_file = source_file
                doc = docstring_node(node)
                descriptor.docstring_indent = node.body[0].col_offset
                if doc is not None:
                    descriptor.docstring = ast.get_docstring(node)
                    descriptor.raw_docstring = ast.get_source_segment(source, doc)
                return descriptor
            logger.debug("Class %s not found in %s", cls.__qualname__, source_file)

        own_doc = vars(cls).get("__doc__")
        if isinstance(own_doc, str):
            descriptor.docstring = inspect.cleandoc(own_doc)
        return descriptor

    # ------------------------------------------------------------------
    # Methods
    # ------------------------------------------------------------------

    def list_methods(self, cls: type) -> list[str]:
        seen: set[str] = set()
        names: list[str] = []
        for klass in cls.__mro__:
            if klass is object:
                continue
            for name, raw in vars(klass).items():
                if name.startswith("_") or name in seen:
                    continue
                seen.add(name)
                if isinstance(raw, (staticmethod, classmethod)) or inspect.isfunction(raw):
                    names.append(name)
        return names

    def declaring_class(self, cls: type, method: str) -> type:
        for klass in cls.__mro__:
            if method in vars(klass):
                return klass
        raise AnalysisError(f"{cls.__qualname__} has no method {method}")

    def _function(self, cls: type, method: str) -> tuple[Any, int]:
        """The underlying function of *method* and how many leading parameters are bound."""
        raw = vars(self.declaring_class(cls, method))[method]
        if isinstance(raw, staticmethod):
            return raw.__func__, 0
        if isinstance(raw, classmethod):
            return raw.__func__, 1
        return raw, 1

    def get_parameters(self, cls: type, method: str) -> list[Parameter]:
        func, bound = self._function(cls, method)
        try:
            signature = inspect.signature(func)
        except (TypeError, ValueError):
            return []
        params: list[Parameter] = []
        for param in list(signature.parameters.values())[bound:]:
            if param.default is inspect.Parameter.empty:
                params.append(Parameter(name=param.name))
            else:
                params.append(Parameter(name=param.name, has_default=True, default=param.default))
        return params

    def get_source_span(self, cls: type, method: str) -> Optional[SourceSpan]:
        """Source of *method* as it currently reads in its file.

        Line numbers recorded at import time go stale once the in-place
        writer has inserted a docstring earlier in the same module, so the
        span is located by parsing the file again. Classes that cannot be
        found that way (defined inside functions, or without a file) fall
        back to :func:`inspect.getsourcelines`.
        """
        func, _ = self._function(cls, method)
        try:
            file = inspect.getsourcefile(func)
        except (OSError, TypeError):
            file = None

        if file and Path(file).is_file():
            owner = self.declaring_class(cls, method)
            source = Path(file).read_text(encoding="utf-8")
            try:
                tree = ast.parse(source, filename=file)
            except SyntaxError:
                tree = None
            class_node = find_class_node(tree, owner.__qualname__) if tree else None
            node = find_method_node(class_node, method) if class_node else None
            if node is not None:
                start = min([node.lineno, *(dec.lineno for dec in node.decorator_list)])
                lines = source.splitlines(keepends=True)[start - 1:node.end_lineno]
                return SourceSpan(
                    file=file, start_line=start, end_line=node.end_lineno, text="".join(lines)
                )

        try:
            lines, start = inspect.getsourcelines(func)
        except (OSError, TypeError):
            return None
        return SourceSpan(
            file=file,
            start_line=start,
            end_line=start + len(lines) - 1,
            text="".join(lines),
        )

    def is_abstract_method(self, cls: type, method: str) -> bool:
        func, _ = self._function(cls, method)
        return bool(getattr(func, "__isabstractmethod__", False))

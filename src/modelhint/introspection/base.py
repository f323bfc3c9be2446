"""Abstract class-reflection interface consumed by the analyzer and the driver.

Every question the engine asks about a model class goes through a
:class:`ClassIntrospector`: which methods it has, where they are declared,
what their parameters and source text are, whether the class can be
instantiated, and what its current docstring looks like in the source file.
Keeping these questions behind one interface lets the analysis be tested
against hand-built fakes and keeps :mod:`inspect` details in one module
(:mod:`modelhint.introspection.runtime`).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional

from modelhint.models import ModelDescriptor, Parameter


@dataclass
class SourceSpan:
    """Location and text of a method's source code."""

    file: Optional[str]
    start_line: int
    end_line: int
    text: str


class ClassIntrospector(ABC):
    """Contract for class-reflection backends."""

    @abstractmethod
    def load(self, name: str) -> type:
        """Resolve a fully qualified class name to the class object.

        Raises:
            AnalysisError: If the module cannot be imported or the attribute
                is not a class.
        """

    @abstractmethod
    def is_subtype_of(self, cls: type, base: type) -> bool:
        """Return True when *cls* is a proper subclass of *base*."""

    @abstractmethod
    def is_instantiable(self, cls: type) -> bool:
        """Return False for abstract classes."""

    @abstractmethod
    def instantiate(self, cls: type) -> Any:
        """Create an instance of *cls* with no arguments."""

    @abstractmethod
    def list_methods(self, cls: type) -> list[str]:
        """Public method names of *cls*, own definitions first, then inherited ones in MRO order."""

    @abstractmethod
    def declaring_class(self, cls: type, method: str) -> type:
        """The class in *cls*'s MRO that defines *method*."""

    @abstractmethod
    def get_parameters(self, cls: type, method: str) -> list[Parameter]:
        """Declared parameters of *method* without the bound ``self``/``cls``."""

    @abstractmethod
    def get_source_span(self, cls: type, method: str) -> Optional[SourceSpan]:
        """Source of *method*, or ``None`` when it cannot be located."""

    @abstractmethod
    def is_abstract_method(self, cls: type, method: str) -> bool:
        """Return True when *method* is declared abstract."""

    @abstractmethod
    def describe(self, cls: type) -> ModelDescriptor:
        """Build the :class:`~modelhint.models.ModelDescriptor` for *cls*."""

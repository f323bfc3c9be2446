"""Per-model accumulator for discovered properties and methods.

A :class:`ModelSchema` is created for every model the driver processes and
passed by reference to each analysis phase: first the table columns from
:mod:`modelhint.schema`, then the method patterns from
:mod:`modelhint.analysis`. The synthesizer reads it once and it is discarded.

Merge rules:

* **Properties** -- the first registration creates the entry with defaults
  (``mixed``, not readable, not writable, empty comment). Each later
  registration overwrites only the fields it supplies; ``None`` never clears
  a value. The comment is fixed when the entry is created.
* **Methods** -- add-only. A name that is already registered, compared
  case-insensitively, is dropped entirely together with its return type and
  parameters. The stored name keeps the casing of the first registration.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from modelhint.models import MethodEntry, Parameter, PropertyEntry

logger = logging.getLogger(__name__)


class ModelSchema:
    """Ordered property and method mappings for a single model."""

    def __init__(self) -> None:
        self.properties: dict[str, PropertyEntry] = {}
        self.methods: dict[str, MethodEntry] = {}
        self._method_keys: set[str] = set()

    def set_property(
        self,
        name: str,
        type: Optional[str] = None,
        read: Optional[bool] = None,
        write: Optional[bool] = None,
        comment: Optional[str] = "",
    ) -> PropertyEntry:
        entry = self.properties.get(name)
        if entry is None:
            entry = PropertyEntry(name=name, comment=comment or "")
            self.properties[name] = entry
        if type is not None:
            entry.type = type
        if read is not None:
            entry.read = read
        if write is not None:
            entry.write = write
        return entry

    def set_method(
        self,
        name: str,
        return_type: str = "",
        parameters: Iterable[Parameter] = (),
    ) -> bool:
        """Register a method unless one with the same name already exists.

        Returns:
            ``True`` if the method was added, ``False`` if it was dropped.
        """
        key = name.lower()
        if key in self._method_keys:
            logger.debug("Method '%s' already registered, keeping the first definition", name)
            return False
        self._method_keys.add(key)
        self.methods[name] = MethodEntry(
            name=name, return_type=return_type, parameters=list(parameters)
        )
        return True

    def has_method(self, name: str) -> bool:
        return name.lower() in self._method_keys

"""Built-in CLI sub-commands for modelhint.

* :mod:`~modelhint.commands.models` -- generate annotations for ORM models.
* :mod:`~modelhint.commands.list` -- list the classes found in the model
  directories.
* :mod:`~modelhint.commands.config` -- view and modify global settings.

``models`` and ``list`` are plain callback functions registered directly on
the root app; ``config`` is a :class:`typer.Typer` sub-application.
"""

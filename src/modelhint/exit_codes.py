"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~modelhint.exceptions.ModelhintError` subclass.
Shell wrappers and CI jobs can inspect the exit code to tell a broken
configuration apart from a failed write without parsing stderr.

Example::

    $ modelhint models --nowrite
    $ echo $?
    6   # EXIT_WRITE_FAILURE -- the hints file could not be written
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments."""

EXIT_DISCOVERY_FAILURE = 3
"""Candidate model classes could not be enumerated."""

EXIT_INTROSPECTION_FAILURE = 4
"""The database schema could not be reflected."""

EXIT_ANALYSIS_FAILURE = 5
"""A model could not be analyzed or annotated."""

EXIT_WRITE_FAILURE = 6
"""The hints file or a model source file could not be written."""

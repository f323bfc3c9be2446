"""Exception hierarchy for modelhint.

All exceptions inherit from :class:`ModelhintError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`modelhint.exit_codes`.
The top-level error handler in :func:`modelhint.app.main` catches
``ModelhintError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

Per-model failures (:class:`AnalysisError`, :class:`AnnotationError` and any
other exception raised while a single model is processed) never reach the
entry point: the driver reports them and moves on to the next model.

Subclass hierarchy::

    ModelhintError (exit 1)
    +-- InvalidUsageError   (exit 2)
    +-- ConfigError         (exit 1)
    +-- DiscoveryError      (exit 3)
    +-- IntrospectionError  (exit 4)
    +-- AnalysisError       (exit 5)
    +-- AnnotationError     (exit 5)
    +-- WriteError          (exit 6)
"""

from modelhint.exit_codes import (
    EXIT_ANALYSIS_FAILURE,
    EXIT_DISCOVERY_FAILURE,
    EXIT_GENERIC_FAILURE,
    EXIT_INTROSPECTION_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_WRITE_FAILURE,
)


class ModelhintError(Exception):
    """Base exception for all modelhint errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`modelhint.exit_codes`. The entry point catches
    this exception type and calls ``sys.exit(exc.exit_code)``.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(ModelhintError):
    """Raised for invalid CLI arguments."""

    exit_code = EXIT_INVALID_USAGE


class ConfigError(ModelhintError):
    """Raised for configuration problems (invalid JSON, failed validation, bad keys)."""

    exit_code = EXIT_GENERIC_FAILURE


class DiscoveryError(ModelhintError):
    """Raised when candidate classes cannot be enumerated or the model base class cannot be resolved."""

    exit_code = EXIT_DISCOVERY_FAILURE


class IntrospectionError(ModelhintError):
    """Raised when the database schema of a model cannot be reflected."""

    exit_code = EXIT_INTROSPECTION_FAILURE


class AnalysisError(ModelhintError):
    """Raised when a single model cannot be loaded, instantiated, or analyzed."""

    exit_code = EXIT_ANALYSIS_FAILURE


class AnnotationError(ModelhintError):
    """Raised when a docstring cannot be located or placed in a model's source."""

    exit_code = EXIT_ANALYSIS_FAILURE


class WriteError(ModelhintError):
    """Raised when the hints file or a model source file cannot be persisted."""

    exit_code = EXIT_WRITE_FAILURE

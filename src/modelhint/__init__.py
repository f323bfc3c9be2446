"""modelhint -- Generate annotation docstrings for active-record ORM models.

ORM models get most of their members at runtime: table columns, attribute
accessors and mutators, query scopes and relation methods. None of these are
visible to static tooling. This package introspects the model classes of a
project and writes class docstrings that declare those members with
``@property`` / ``@property-read`` / ``@property-write`` / ``@method`` tags.

Typical workflow::

    modelhint models --nowrite          # write _model_hints.py
    modelhint models --write            # rewrite docstrings in the model files
    modelhint models User,Post --reset  # rebuild two models from scratch

Modules:
    app: Typer application factory and CLI entry point.
    models: Pydantic models shared across the entire package.
    config: XDG-aware configuration with project-local overrides.
    generator: The driver that runs discovery, analysis and emission.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.3.0"

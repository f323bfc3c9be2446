"""Models command: generate docstring annotations for ORM models.

Implements ``modelhint models``. By default the annotations are collected
into a single hints file (``_model_hints.py``). With ``--write`` they are
written into the model source files instead, extending each class
docstring in place.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from modelhint.output import debug, error, info, success


def models_command(
    ctx: typer.Context,
    models: Optional[list[str]] = typer.Argument(
        None, help="Comma separated names of models to include."
    ),
    dirs: Optional[str] = typer.Option(
        None, "--dir", "-D", help="Comma separated model directories, added to the configured ones."
    ),
    filename: Optional[str] = typer.Option(
        None, "--filename", "-F", help="Path of the hints file."
    ),
    ignore: Optional[str] = typer.Option(
        None, "--ignore", "-I", help="Comma separated names of models to ignore."
    ),
    write: bool = typer.Option(
        False, "--write", "-W", help="Write to the model files."
    ),
    nowrite: bool = typer.Option(
        False, "--nowrite", "-N", help="Don't write to the model files."
    ),
    reset: bool = typer.Option(
        False, "--reset", "-R", help="Replace the existing docstrings."
    ),
) -> None:
    """Generate annotations for ORM models.

    Each model is imported, its table columns are reflected (when a
    database URL is configured) and its methods are classified into
    accessors, mutators, query scopes and relations. The result is merged
    into the existing class docstring without dropping hand-written tags.

    When the hints file name is the default and neither ``--write`` nor
    ``--nowrite`` is given, you are asked whether to overwrite the model
    files instead.

    Example::

        modelhint models
        modelhint models User,Post --nowrite
        modelhint models --write --reset --ignore Legacy
    """
    from modelhint.config import resolve_config, split_names
    from modelhint.exceptions import ModelhintError
    from modelhint.generator import ModelHintGenerator
    from modelhint.models import HintConfig
    from modelhint.schema import SchemaExtractor

    if write and nowrite:
        error("--write and --nowrite cannot be combined.")
        raise typer.Exit(code=2)

    no_input = ctx.obj.get("no_input", False) if ctx.obj else False
    default_filename = HintConfig.model_fields["filename"].default

    try:
        config = resolve_config(
            cli_dirs=split_names(dirs),
            cli_filename=filename,
            cli_ignore=split_names(ignore),
        )
    except ModelhintError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    if not write and not nowrite and config.filename == default_filename:
        if no_input:
            debug("Prompt skipped (--no-input), writing to the hints file")
        else:
            write = typer.confirm(
                "Do you want to overwrite the existing model files? "
                f"Choose no to write to {config.filename} instead?",
                default=False,
            )

    model_names = [name for value in models or [] for name in split_names(value)]
    extractor = SchemaExtractor.from_config(config)
    generator = ModelHintGenerator(config, extractor=extractor, write=write, reset=reset)

    try:
        report = generator.generate(model_names, config.ignore)
    except ModelhintError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
    finally:
        if extractor is not None:
            extractor.dispose()

    if write:
        success(f"Annotated {len(report.processed)} model(s).")
        return

    path = Path(config.filename)
    try:
        generator.aggregate.save(path)
    except ModelhintError as exc:
        error(f"Failed to write model information to {config.filename}: {exc}")
        raise typer.Exit(code=exc.exit_code) from None
    info(f"Model information was written to {config.filename}")

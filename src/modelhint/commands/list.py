"""List command: show the classes found in the model directories.

Read-only companion to ``modelhint models``: it runs discovery and loads
each candidate, reporting whether it derives from the configured model base
class, without analyzing or writing anything.
"""

from __future__ import annotations

from typing import Optional

import typer

from modelhint.output import error, info, print_table


def list_command(
    dirs: Optional[str] = typer.Option(
        None, "--dir", "-D", help="Comma separated model directories, added to the configured ones."
    ),
) -> None:
    """List candidate model classes.

    Example::

        modelhint list
        modelhint list --dir src/models --json
    """
    from modelhint.config import resolve_config, split_names
    from modelhint.exceptions import AnalysisError, ModelhintError
    from modelhint.generator import ModelHintGenerator

    try:
        config = resolve_config(cli_dirs=split_names(dirs))
        generator = ModelHintGenerator(config)
        names = generator.discover()
        base = generator.load_model_base()
    except ModelhintError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    if not names:
        info(f"No classes found in: {', '.join(config.model_locations)}")
        return

    rows: list[list[str]] = []
    for name in names:
        try:
            cls = generator.introspector.load(name)
        except AnalysisError as exc:
            rows.append([name, "error", str(exc)])
            continue
        if not generator.introspector.is_subtype_of(cls, base):
            rows.append([name, "no", ""])
        elif not generator.introspector.is_instantiable(cls):
            rows.append([name, "no", "abstract"])
        else:
            rows.append([name, "yes", ""])

    print_table(["Class", "Model", "Note"], rows, title="Discovered classes")

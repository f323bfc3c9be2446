"""Config commands: view and modify the global configuration.

Provides the ``modelhint config`` sub-command group for reading, updating,
and resetting the user's global configuration file
(:class:`~modelhint.models.HintConfig`). Project-local settings belong in
``./modelhint.json`` and are not touched by these commands.
"""

from __future__ import annotations

import json

import typer

from modelhint.output import error, info, print_mapping, success


config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show() -> None:
    """Show the global configuration.

    Example::

        modelhint config show
        modelhint --json config show
    """
    from modelhint.config import get_config_dir, load_global_config
    from modelhint.exceptions import ConfigError

    try:
        config = load_global_config()
    except ConfigError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
    info(f"Config directory: {get_config_dir()}")
    print_mapping(config.model_dump(mode="json"))


@config_app.command("set")
def config_set(
    key: str = typer.Argument(
        help="Config key (dot notation, e.g., 'orm.model_base')."
    ),
    value: str = typer.Argument(help="Value to set. Lists and mappings are given as JSON."),
) -> None:
    """Set a configuration value.

    Uses dot notation for nested keys. List and mapping values
    (``model_locations``, ``database.custom_types``) are parsed as JSON;
    everything else is stored as a string. The updated config is validated
    against :class:`~modelhint.models.HintConfig` before saving.

    Raises:
        typer.Exit: With code 2 if the key path is invalid, the value
            cannot be parsed, or Pydantic validation fails.

    Example::

        modelhint config set orm.model_base myapp.db.Model
        modelhint config set database.url sqlite:///app.db
        modelhint config set model_locations '["app", "lib/models"]'
    """
    from modelhint.config import load_global_config, save_global_config
    from modelhint.models import HintConfig

    config = load_global_config()
    data = config.model_dump(mode="json")

    # Navigate the dot-separated key path.
    keys = key.split(".")
    target = data
    for k in keys[:-1]:
        if k not in target or not isinstance(target[k], dict):
            error(f"Invalid config key: {key}")
            raise typer.Exit(code=2)
        target = target[k]

    final_key = keys[-1]
    if final_key not in target:
        error(f"Unknown config key: {key}")
        raise typer.Exit(code=2)

    current = target[final_key]
    if isinstance(current, (list, dict)):
        try:
            coerced = json.loads(value)
        except json.JSONDecodeError:
            error(f"Expected JSON for {key}, got: {value}")
            raise typer.Exit(code=2) from None
    else:
        coerced = value

    target[final_key] = coerced

    try:
        new_config = HintConfig.model_validate(data)
    except ValueError as exc:
        error(f"Validation error: {exc}")
        raise typer.Exit(code=2) from None

    save_global_config(new_config)
    success(f"Set {key} = {coerced}")


@config_app.command("reset")
def config_reset(
    ctx: typer.Context,
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation."),
) -> None:
    """Reset the global configuration to defaults.

    Asks for confirmation unless ``--force`` is given. With ``--no-input``
    and without ``--force`` nothing is changed.

    Example::

        modelhint config reset --force
    """
    from modelhint.config import save_global_config
    from modelhint.models import HintConfig

    no_input = ctx.obj.get("no_input", False) if ctx.obj else False
    if not force:
        if no_input or not typer.confirm("Reset all config to defaults?"):
            info("Cancelled.")
            raise typer.Exit()

    save_global_config(HintConfig())
    success("Configuration reset to defaults.")

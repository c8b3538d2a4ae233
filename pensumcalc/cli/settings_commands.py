"""Settings CLI commands for Pensum Calc.

Known settings are school_year_dir and default_output_format; values are
validated before they are written to settings.json.
"""

import click

from pensumcalc.sdk import (
    SETTING_KEYS,
    SettingsError,
    effective_settings,
    get_settings_path,
    update_setting,
)


@click.group()
def settings():
    """Show and change settings (settings.json).

    \b
    school_year_dir         directory holding <code>.yaml school-year files
    default_output_format   table or json
    """
    pass


@settings.command("show")
def settings_show():
    """Show the effective value and source of every setting."""
    try:
        values = effective_settings()
    except SettingsError as e:
        raise click.ClickException(str(e))

    click.echo(f"Settings file: {get_settings_path()}")
    for key, (value, source) in values.items():
        click.echo(f"  {key}: {value} ({source})")


@settings.command("set")
@click.argument("key", type=click.Choice(SETTING_KEYS))
@click.argument("value")
def settings_set(key, value):
    """Set KEY to VALUE.

    \b
    Examples:
        pensum-calc settings set school_year_dir ~/school/years
        pensum-calc settings set default_output_format json
    """
    try:
        path = update_setting(key, value)
    except SettingsError as e:
        raise click.ClickException(str(e))
    click.echo(f"Set {key}: {effective_settings()[key][0]} (saved to {path})")


@settings.command("unset")
@click.argument("key", type=click.Choice(SETTING_KEYS))
def settings_unset(key):
    """Remove KEY from settings.json, reverting to the default."""
    try:
        update_setting(key, None)
        value, _ = effective_settings()[key]
    except SettingsError as e:
        raise click.ClickException(str(e))
    click.echo(f"Unset {key}, now {value} (default)")

#!/usr/bin/env python3
"""
Main CLI entry point for mainline
"""

from typing import Optional

import typer
from rich.table import Table

from mainline import __version__
from mainline.config.settings import get_env_info, validate_all_env_vars
from mainline.utils.output import console

app = typer.Typer(help="mainline - adapter-driven command palette", no_args_is_help=True)

# Level name handed to setup_tui_logging; None means MAINLINE_LOG_LEVEL
_log_level: Optional[str] = None


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only log errors"),
):
    """
    mainline - adapter-driven command palette

    [bold]Examples:[/bold]

    Try the palette against the in-memory demo adapter:
        [cyan]mainline demo[/cyan]

    Show the environment variables mainline reads:
        [cyan]mainline env[/cyan]
    """
    global _log_level

    if verbose and quiet:
        typer.echo("Error: --verbose and --quiet are mutually exclusive", err=True)
        raise typer.Exit(1)

    if verbose:
        _log_level = "debug"
    elif quiet:
        _log_level = "error"
    else:
        _log_level = None

    for error in validate_all_env_vars():
        console.print(f"[yellow]Warning:[/yellow] {error}")


@app.command()
def demo(
    theme: Optional[str] = typer.Option(
        None,
        "--theme",
        "-t",
        help="Textual theme to use (e.g. textual-dark, nord, gruvbox)",
    ),
    no_hotkeys: bool = typer.Option(
        False, "--no-hotkeys", help="Disable the global palette toggle hotkey"
    ),
    save_theme: bool = typer.Option(
        False, "--save-theme", help="Remember --theme for later runs"
    ),
):
    """Run the palette against the in-memory demo adapter."""
    from mainline.adapters.demo import DemoAdapter
    from mainline.config.ui_config import get_palette_options, set_theme
    from mainline.exceptions import ConfigurationError
    from mainline.ui.command_palette import run_palette_app
    from mainline.utils.logging_utils import setup_tui_logging

    setup_tui_logging(__name__, _log_level)

    try:
        options = get_palette_options()
    except ConfigurationError as e:
        console.print(f"❌ Error: {e}", style="red")
        raise typer.Exit(1) from e

    if theme:
        options["theme"] = theme
        if save_theme:
            set_theme(theme)
    if no_hotkeys:
        options["hotkeys"] = False

    try:
        run_palette_app(DemoAdapter(), options)
    except KeyboardInterrupt:
        pass
    except Exception as e:
        console.print(f"❌ Error: {e}", style="red")
        raise typer.Exit(1) from e


@app.command()
def version():
    """Show mainline version"""
    typer.echo(f"mainline version {__version__}")


@app.command()
def env():
    """Show the MAINLINE_* environment variables and their values"""
    table = Table(title="mainline environment")
    table.add_column("Variable", style="cyan", no_wrap=True)
    table.add_column("Value", style="white")
    table.add_column("Valid", style="bold")
    table.add_column("Default", style="dim")
    table.add_column("Description", style="white")

    for name, info in get_env_info().items():
        value = info["value"] if info["is_set"] else "[dim]unset[/dim]"
        valid = "[green]yes[/green]" if info["valid"] else "[red]no[/red]"
        table.add_row(name, value, valid, str(info["default"]), info["description"])

    console.print(table)


def run():
    """Entry point for the CLI"""
    app()


if __name__ == "__main__":
    run()

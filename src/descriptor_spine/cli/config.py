"""
CLI: ``descriptor-spine config`` — effective configuration.
"""

from __future__ import annotations

import typer
from rich.markup import escape

from descriptor_spine.cli.utils import console, print_json

app = typer.Typer(no_args_is_help=True)


@app.command("show")
def show_config(
    format: str = typer.Option("table", "--format", "-f", help="Output format: table, json, env"),
) -> None:
    """Show current configuration."""
    from descriptor_spine.core.settings import get_settings

    settings = get_settings()

    if format == "json":
        print_json(settings.model_dump(mode="json"))
        return

    if format == "env":
        for key, value in sorted(settings.model_dump().items()):
            console.print(f"DESCRIPTOR_SPINE_{key.upper()}={escape('' if value is None else str(value))}", highlight=False)
        return

    from rich.table import Table

    table = Table()
    table.add_column("Setting")
    table.add_column("Value")
    for key, value in settings.model_dump().items():
        table.add_row(key, "-" if value is None else escape(str(value)))
    table.add_row("catalog_dir (effective)", str(settings.effective_catalog_dir or "-"))
    console.print(table)

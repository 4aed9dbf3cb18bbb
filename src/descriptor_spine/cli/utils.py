"""
CLI utility helpers — output formatting and fatal-error reporting.
"""

from __future__ import annotations

import json
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from descriptor_spine.core.errors import DescriptorSpineError
from descriptor_spine.core.settings import DescriptorSettings, get_settings

console = Console()
err_console = Console(stderr=True)


def load_settings(
    *,
    archive_folder: Path | None = None,
    catalog_dir: Path | None = None,
) -> DescriptorSettings:
    """Environment settings with CLI overrides applied."""
    settings = get_settings()
    overrides: dict[str, Any] = {}
    if archive_folder is not None:
        overrides["archive_folder"] = archive_folder
    if catalog_dir is not None:
        overrides["catalog_dir"] = catalog_dir
    return settings.model_copy(update=overrides) if overrides else settings


@contextmanager
def fatal_errors() -> Iterator[None]:
    """Print fatal engine errors in red and exit 1."""
    try:
        yield
    except DescriptorSpineError as exc:
        err_console.print(f"[bold red]Error[/bold red] ({exc.category.value}): {escape(exc.message)}")
        raise typer.Exit(code=1) from exc


def print_json(payload: Any) -> None:
    console.print_json(json.dumps(payload, default=str))


def print_table(rows: list[dict[str, Any]], *, title: str = "") -> None:
    """Render a list of dicts as a Rich table."""
    if not rows:
        console.print("[dim]No items.[/dim]")
        return
    table = Table(title=title or None, show_lines=False, pad_edge=False)
    for col in rows[0]:
        table.add_column(col, overflow="fold")
    for row in rows:
        table.add_row(*(escape(str(v)) for v in row.values()))
    console.print(table)

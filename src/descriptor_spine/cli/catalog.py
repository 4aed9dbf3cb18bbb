"""
CLI: ``descriptor-spine catalog`` — descriptor catalog inspection.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.markup import escape

from descriptor_spine.cli.utils import console, err_console, fatal_errors, load_settings, print_json, print_table
from descriptor_spine.descriptors.catalog import DescriptorCatalog

app = typer.Typer(no_args_is_help=True)


def _catalog(catalog_dir: Path | None) -> DescriptorCatalog:
    settings = load_settings(catalog_dir=catalog_dir)
    return DescriptorCatalog(settings.effective_catalog_dir)


@app.command("list")
def list_descriptors(
    catalog_dir: Path | None = typer.Option(None, "--catalog-dir", "-c", help="Descriptor directory"),
    as_json: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """List every descriptor in catalog order."""
    catalog = _catalog(catalog_dir)
    with fatal_errors():
        descriptors = catalog.load()

    if catalog.directory is None:
        console.print("[yellow]No catalog directory configured.[/yellow] Every job uses the default bundle.")

    rows = [
        {
            "id": d.id,
            "label": d.display_name,
            "bundle": d.bundle_name,
            "runtimes": ", ".join(d.runtime_types) or "-",
        }
        for d in descriptors
    ]
    if as_json:
        print_json(rows)
        return
    print_table(rows, title="Descriptors")


@app.command("show")
def show_descriptor(
    descriptor_id: str = typer.Argument(..., help="Descriptor id"),
    catalog_dir: Path | None = typer.Option(None, "--catalog-dir", "-c", help="Descriptor directory"),
) -> None:
    """Show every descriptor carrying ``DESCRIPTOR_ID``."""
    catalog = _catalog(catalog_dir)
    with fatal_errors():
        found = catalog.lookup(descriptor_id)

    if not found:
        err_console.print(f"[red]Descriptor not found:[/red] {escape(descriptor_id)}")
        raise typer.Exit(1)
    if len(found) > 1:
        err_console.print(f"[yellow]Warning:[/yellow] {len(found)} descriptors share id {escape(descriptor_id)}")

    print_json([d.model_dump(mode="json", by_alias=True) for d in found])

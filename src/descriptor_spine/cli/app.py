"""
Root Typer application for the descriptor-spine CLI.
"""

from __future__ import annotations

import sys
from pathlib import Path

import typer
from rich.markup import escape
from typer import Typer

from descriptor_spine.cli.utils import console, err_console, fatal_errors, load_settings, print_json, print_table

app = Typer(
    name="descriptor-spine",
    help="descriptor-spine — pick the runtime bundle an analysis job runs with.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# ── Version callback ─────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        from descriptor_spine import __version__

        typer.echo(f"descriptor-spine {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
    log_level: str = typer.Option("WARNING", "--log-level", help="Log level for engine diagnostics (stderr)."),
) -> None:
    """descriptor-spine CLI — inspect descriptors, fingerprint jobs, dry-run selection."""
    from descriptor_spine.core.logging import configure_logging

    settings = load_settings()
    configure_logging(
        level=log_level,
        json_format=settings.log_format == "json",
        stream=sys.stderr,
        cache_logger=False,
    )


# ── Top-level commands ───────────────────────────────────────────────────


@app.command("fingerprint")
def fingerprint(
    directory: Path = typer.Argument(..., help="Job execution directory (or a single file / zip)"),
    as_json: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """List every runtime fingerprint found under DIRECTORY, nested zips included."""
    from descriptor_spine.runtimes.resolver import FingerprintResolver

    with fatal_errors():
        found = FingerprintResolver().resolve_all(directory)

    rows = [
        {
            "source": fp.source,
            "type": fp.type,
            "interpreter": fp.interpreter_version or "-",
            "dependencies": len(fp.dependencies),
        }
        for fp in found
    ]
    if as_json:
        print_json([{**row, "dependencies": dict(fp.dependencies)} for row, fp in zip(rows, found)])
    else:
        print_table(rows, title="Runtime fingerprints")

    if len(found) > 1:
        err_console.print(f"[red]{len(found)} fingerprints found. A job with this directory would be rejected.[/red]")
        raise typer.Exit(1)


@app.command("select")
def select(
    directory: Path = typer.Argument(..., help="Job execution directory"),
    descriptor_id: str | None = typer.Option(None, "--descriptor-id", "-d", help="Explicitly requested descriptor"),
    analysis_id: str | None = typer.Option(None, "--analysis-id", "-a", help="Id used to correlate log lines"),
    archive_folder: Path | None = typer.Option(None, "--archive-folder", help="Override the bundle directory"),
    as_json: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Dry-run bundle selection for DIRECTORY."""
    from descriptor_spine.execution.engine import DescriptorEngine

    settings = load_settings(archive_folder=archive_folder)
    engine = DescriptorEngine.from_settings(settings)

    with fatal_errors():
        bundle = engine.select_bundle(directory, analysis_id, descriptor_id)

    if as_json:
        print_json(bundle.to_dict())
        return

    marker = " [dim](default)[/dim]" if bundle.is_default else ""
    descriptor = bundle.descriptor
    console.print(f"[bold]Descriptor:[/bold] {escape(descriptor.display_name)} ({escape(descriptor.id)}){marker}")
    console.print(f"[bold]Bundle:[/bold] {escape(str(bundle.path))}")


# ── Sub-command registration ─────────────────────────────────────────────

from descriptor_spine.cli.catalog import app as catalog_app  # noqa: E402
from descriptor_spine.cli.config import app as config_app  # noqa: E402

app.add_typer(catalog_app, name="catalog", help="Descriptor catalog inspection.")
app.add_typer(config_app, name="config", help="Configuration inspection.")

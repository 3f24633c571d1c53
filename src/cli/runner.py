# src/cli/runner.py

"""Headless CLI commands that reuse the async lookup orchestrator."""

import asyncio
import json
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.table import Table

from src.models.product import ProductRecord
from src.scanner.barcode_scanner import (
    BarcodeScanner,
    ScannerError,
    decode_image,
)
from src.services.lookup_orchestrator import LookupOrchestrator
from src.storage.search_history import SearchHistory

logger = logging.getLogger("consulteja.cli")

# Stderr console for status messages so stdout stays clean for JSON
_err = Console(stderr=True)


def _print_product(product: ProductRecord) -> None:
    """Render one product's detail rows as a Rich table on stdout."""
    table = Table(
        title="Lookup Result",
        show_header=False,
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("Field", style="bold")
    table.add_column("Value", overflow="fold")
    for label, value in product.details():
        table.add_row(label, value)
    if product.image:
        table.add_row("Image", product.image)
    Console().print(table)


def _emit(product: ProductRecord, output_format: str) -> None:
    if output_format == "table":
        _print_product(product)
    else:
        json.dump(
            product.to_dict(),
            sys.stdout,
            ensure_ascii=False,
            indent=2,
        )
        sys.stdout.write("\n")


async def cli_lookup(barcode: str, output_format: str) -> int:
    """Look up one barcode and return an exit code (0=found, 1=not)."""
    code = barcode.strip()
    if not code:
        _err.print("[red]Empty barcode.[/red]")
        return 1

    orchestrator = LookupOrchestrator()
    _err.print(f"[bold]Looking up:[/bold] {code}")

    result = await orchestrator.lookup(code)

    for error_msg in result.errors:
        _err.print(f"[dim red]{error_msg}[/dim red]")

    if result.product is None:
        _err.print(f"[yellow]{result.message}[/yellow]")
        return 1

    _err.print(
        f"[green]✓ Found via {result.product.source}"
        f" ({len(result.attempts)} provider(s) tried)[/green]"
    )
    if result.warning:
        _err.print(f"[yellow]{result.warning}[/yellow]")
    _emit(result.product, output_format)
    return 0


async def cli_lookup_image(image_path: str, output_format: str) -> int:
    """Decode a barcode from an image file, then look it up."""
    try:
        code = decode_image(Path(image_path))
    except ScannerError as exc:
        logger.error("Image decode failed: %s", exc)
        _err.print(f"[red]{exc}[/red]")
        return 1
    if not code:
        _err.print("[yellow]No barcode found in the image.[/yellow]")
        return 1
    _err.print(f"[dim]Decoded {code} from {image_path}[/dim]")
    return await cli_lookup(code, output_format)


async def cli_scan(output_format: str) -> int:
    """Scan one barcode from the camera, then look it up."""
    scanner = BarcodeScanner()
    _err.print("[bold]Point a barcode at the camera...[/bold]")
    try:
        code = await asyncio.to_thread(scanner.scan)
    except ScannerError as exc:
        logger.error("Camera scan failed: %s", exc)
        _err.print(f"[red]{exc}[/red]")
        return 1
    if not code:
        _err.print("[yellow]No barcode detected before timeout.[/yellow]")
        return 1
    return await cli_lookup(code, output_format)


def show_history(output_format: str) -> int:
    """Print the stored lookup history, newest first."""
    history = SearchHistory()
    if not len(history):
        _err.print("[yellow]History is empty.[/yellow]")
        return 0

    if output_format != "table":
        json.dump(
            [e.to_dict() for e in history],
            sys.stdout,
            ensure_ascii=False,
            indent=2,
        )
        sys.stdout.write("\n")
        return 0

    table = Table(
        title="Lookup History",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("#", style="dim", width=4)
    table.add_column("Name", max_width=60)
    table.add_column("Barcode", style="green")
    table.add_column("Source", style="magenta")
    for idx, entry in enumerate(history, 1):
        table.add_row(str(idx), entry.name, entry.barcode, entry.source)
    Console().print(table)
    return 0


def clear_history() -> int:
    try:
        SearchHistory().clear()
    except OSError as exc:
        logger.error("Could not clear history: %s", exc, exc_info=True)
        _err.print(f"[red]Could not clear history: {exc}[/red]")
        return 1
    _err.print("[green]✓ History cleared[/green]")
    return 0


async def run_health_check() -> int:
    """Run the connectivity check on all providers."""
    from src.services.health_checker import HealthChecker

    _err.print("[bold]Running provider health check...[/bold]")
    checker = HealthChecker()
    results = await checker.check_all()

    table = Table(
        title="Provider Health Check",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("Provider", style="bold")
    table.add_column("Status", justify="center")
    table.add_column("Latency", justify="right")
    table.add_column("Notes", style="dim")

    any_down = False
    for r in results:
        if r.status == "ok":
            status = "[green]✅ OK[/green]"
        elif r.status == "slow":
            status = "[yellow]⚠️  SLOW[/yellow]"
        else:
            status = "[red]❌ DOWN[/red]"
            any_down = True

        latency = (
            f"{r.latency_ms:.0f}ms"
            if r.latency_ms > 0
            else "—"
        )
        table.add_row(r.provider_id, status, latency, r.message)

    Console().print(table)
    return 1 if any_down else 0

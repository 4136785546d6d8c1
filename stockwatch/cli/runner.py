# stockwatch/cli/runner.py

"""Headless CLI runner for the scrape/diff/notify pipeline."""

import asyncio
import json
import logging
import sys

from rich.console import Console
from rich.table import Table

from stockwatch.config.settings import Settings
from stockwatch.exceptions import StockwatchError
from stockwatch.models.product import Product, StockStatus
from stockwatch.services.notifier import TelegramNotifier
from stockwatch.services.pipeline import Pipeline, PipelineResult
from stockwatch.services.sinks import (
    CollectSink,
    ForwardSink,
    Sink,
    TrackingSink,
)
from stockwatch.storage.airtable_store import AirtableBaselineStore
from stockwatch.storage.base_store import BaselineStore
from stockwatch.storage.file_manager import FileManager
from stockwatch.storage.sqlite_store import SqliteBaselineStore

logger = logging.getLogger("stockwatch.cli")

# Stderr console for status messages so stdout stays clean for JSON
_err = Console(stderr=True)

_STOCK_STYLES: dict[StockStatus, str] = {
    StockStatus.IN_STOCK: "green",
    StockStatus.OUT_OF_STOCK: "red",
    StockStatus.UNKNOWN: "yellow",
}


def build_store(store_kind: str) -> BaselineStore:
    """Instantiate the baseline store named on the command line."""
    if store_kind == "sqlite":
        return SqliteBaselineStore()
    if store_kind == "airtable":
        return AirtableBaselineStore()
    raise ValueError(f"Unknown store: {store_kind}")


def build_sink(
    mode: str,
    store: BaselineStore | None = None,
    push_url: str | None = None,
) -> Sink:
    """Instantiate the sink strategy for *mode*."""
    if mode == "track":
        if store is None:
            raise ValueError("track mode needs a baseline store")
        return TrackingSink(store, TelegramNotifier())
    if mode == "forward":
        target = push_url or Settings.PUSH_URL
        if not target:
            _err.print("[red]forward mode needs --push-url or PUSH_URL[/red]")
            raise SystemExit(2)
        return ForwardSink(target)
    if mode == "collect":
        return CollectSink()
    raise ValueError(f"Unknown mode: {mode}")


def _print_table(products: list[Product]) -> None:
    """Render a Rich table of products to stdout."""
    table = Table(
        title="Catalog",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("#", style="dim", width=4)
    table.add_column("Name", max_width=50)
    table.add_column("Type", style="magenta")
    table.add_column("Price", justify="right")
    table.add_column("Stock", justify="center")
    table.add_column("Image", overflow="fold", style="dim")

    for idx, p in enumerate(products, 1):
        style = _STOCK_STYLES[p.stock_status]
        table.add_row(
            str(idx),
            p.name,
            p.product_type,
            p.price,
            f"[{style}]{p.stock_status.value}[/{style}]",
            p.image_url,
        )

    Console().print(table)


def _print_summary(result: PipelineResult) -> None:
    """One-line status for the run on stderr."""
    parts: list[str] = []
    if result.mode == "track":
        parts.append(f"{result.changed_count} changed")
        parts.append(f"{result.unmatched_count} untracked")
        if result.changed_count:
            parts.append(
                "notified" if result.notified else "notify failed"
            )
            parts.append(f"{result.updated_count} updated")
    elif result.mode == "forward":
        parts.append("forwarded" if result.forwarded else "forward failed")
    detail = f" ({', '.join(parts)})" if parts else ""
    _err.print(
        f"[green]✓ {result.scraped_count} products scraped{detail}[/green]"
    )
    for error_msg in result.errors:
        _err.print(f"[yellow]Warning: {error_msg}[/yellow]")


def _emit_products(
    products: list[Product], output_format: str,
) -> None:
    """Save the catalog to results/ and write it to stdout."""
    try:
        path = FileManager().save_products(products)
        _err.print(f"[dim]Saved catalog → {path}[/dim]")
    except OSError as exc:
        logger.error("Save failed: %s", exc, exc_info=True)
        _err.print(f"[red]Save failed: {exc}[/red]")

    if output_format == "table":
        _print_table(products)
    else:
        json.dump(
            [p.to_dict() for p in products],
            sys.stdout,
            ensure_ascii=False,
            indent=2,
        )
        sys.stdout.write("\n")


async def run_once(
    pipeline: Pipeline, url: str, output_format: str = "json",
) -> int:
    """Run a single cycle and return an exit code (0=ok, 1=fail)."""
    try:
        result = await pipeline.run(url)
    except StockwatchError as exc:
        _err.print(f"[red]Run failed ({type(exc).__name__}): {exc}[/red]")
        return 1

    _print_summary(result)
    if result.mode == "collect":
        _emit_products(result.products, output_format)
    return 0


async def run_every(
    pipeline: Pipeline,
    url: str,
    interval: float,
    output_format: str = "json",
    max_cycles: int | None = None,
) -> int:
    """Run cycles back to back, sleeping *interval* seconds in between.

    A failed cycle is reported and the loop carries on.  Returns the exit
    code of the last cycle.
    """
    cycles = 0
    exit_code = 0
    while max_cycles is None or cycles < max_cycles:
        exit_code = await run_once(pipeline, url, output_format)
        cycles += 1
        if max_cycles is not None and cycles >= max_cycles:
            break
        logger.debug("Sleeping %.0fs before next cycle", interval)
        await asyncio.sleep(interval)
    return exit_code


async def run_seed(url: str, store: SqliteBaselineStore) -> int:
    """Scrape *url* and start tracking every product in the local store."""
    pipeline = Pipeline(CollectSink())
    try:
        result = await pipeline.run(url)
    except StockwatchError as exc:
        _err.print(f"[red]Scrape failed: {exc}[/red]")
        return 1
    added = await store.add_products(result.products)
    _err.print(
        f"[green]✓ Tracking {added} new products"
        f" of {result.scraped_count} scraped[/green]"
    )
    return 0


async def cli_run(
    url: str | None,
    mode: str,
    store_kind: str,
    push_url: str | None = None,
    output_format: str = "json",
    every: float | None = None,
    seed: bool = False,
) -> int:
    """Entry point for headless runs; returns a process exit code."""
    target = url or Settings.SCRAPING_URL
    if not target:
        _err.print("[red]No URL given (use --url or SCRAPING_URL)[/red]")
        return 2

    if seed:
        if store_kind != "sqlite":
            _err.print("[red]--seed only works with --store sqlite[/red]")
            return 2
        sqlite_store = SqliteBaselineStore()
        try:
            return await run_seed(target, sqlite_store)
        finally:
            sqlite_store.close()

    store = build_store(store_kind) if mode == "track" else None
    try:
        pipeline = Pipeline(build_sink(mode, store, push_url))
        _err.print(f"[bold]{mode}:[/bold] {target}")
        if every:
            return await run_every(pipeline, target, every, output_format)
        return await run_once(pipeline, target, output_format)
    finally:
        if isinstance(store, SqliteBaselineStore):
            store.close()

"""Command line entry point: bulk scans and the API server."""

from __future__ import annotations

import asyncio
import json
import logging
import sys

import click
from rich.console import Console
from rich.table import Table

from seo_scanner import __version__
from seo_scanner.jobs import backfill_domains
from seo_scanner.storage import MEMORY, StoreError, open_store

console = Console(stderr=True)

_SCORE_COLORS = ((80, "green"), (50, "yellow"), (0, "red"))


def _score_color(score: int) -> str:
    return next(color for floor, color in _SCORE_COLORS if score >= floor)


@click.group()
@click.version_option(version=__version__, prog_name="seo-scanner")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def main(verbose: bool) -> None:
    """Technical SEO scanner for monitored client sites."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


@main.command()
@click.argument("domains", nargs=-1)
@click.option(
    "--file",
    "-f",
    "domain_file",
    type=click.File("r"),
    help="Read domains from a file, one per line.",
)
@click.option(
    "--store",
    "-s",
    "store_path",
    type=click.Path(dir_okay=False),
    help="SQLite database to upsert results into (default: in-memory, discarded).",
)
@click.option("--json", "as_json", is_flag=True, help="Print results as JSON on stdout.")
def scan(domains: tuple[str, ...], domain_file, store_path: str | None, as_json: bool) -> None:
    """Scan DOMAINS one at a time and report their health scores."""
    targets = list(domains)
    if domain_file is not None:
        targets.extend(line.strip() for line in domain_file if line.strip() and not line.strip().startswith("#"))
    if not targets:
        raise click.UsageError("Give at least one domain or --file.")

    try:
        outcomes = asyncio.run(_backfill(targets, store_path or MEMORY))
    except StoreError as e:
        raise click.ClickException(str(e))

    skipped = [domain for domain, result in outcomes if result is None]

    if as_json:
        payload = [result.model_dump(mode="json", by_alias=True) for _, result in outcomes if result]
        click.echo(json.dumps(payload, indent=2))
    else:
        console.print(_results_table(outcomes))

    if skipped:
        sys.exit(1)


async def _backfill(targets: list[str], store_path: str):
    store = await open_store(store_path)
    try:
        return await backfill_domains(store, targets, triggered_by="cli")
    finally:
        await store.close()


def _results_table(outcomes) -> Table:
    table = Table(title="Scan results")
    table.add_column("Domain", style="cyan")
    table.add_column("Score", justify="right")
    table.add_column("Critical", justify="right")
    table.add_column("High", justify="right")
    table.add_column("Medium", justify="right")
    table.add_column("Low", justify="right")
    table.add_column("Info", justify="right")
    table.add_column("HTTP", justify="right")
    table.add_column("Time (ms)", justify="right")

    for domain, result in outcomes:
        if result is None:
            table.add_row(domain, "[dim]skipped[/dim]", "", "", "", "", "", "", "")
            continue
        color = _score_color(result.score)
        stats = result.stats
        table.add_row(
            result.domain,
            f"[{color}]{result.score}[/{color}]",
            str(stats.critical),
            str(stats.high),
            str(stats.medium),
            str(stats.low),
            str(stats.info),
            str(result.meta.http_status),
            str(result.meta.response_time_ms),
        )
    return table


@main.command()
@click.option("--host", default="127.0.0.1", show_default=True, help="Interface to bind.")
@click.option("--port", type=int, default=8000, show_default=True, help="Port to listen on.")
def serve(host: str, port: int) -> None:
    """Start the HTTP API."""
    import uvicorn

    console.print(f"[bold]SEO scanner[/bold] API on [cyan]http://{host}:{port}[/cyan]")
    uvicorn.run("main:app", host=host, port=port, log_level="info")

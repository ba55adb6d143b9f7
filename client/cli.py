"""
FlowerEngine Command Line Interface

CLI for inspecting the Hive-Engine node list published by FlowerEngine.
"""

import asyncio
import logging
from pathlib import Path
from typing import NoReturn, Optional

import httpx
import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from shared.logging_config import configure_logging
from shared.models import NoNodeReason
from node_selector import (
    MetadataError,
    NodeService,
    select_best_available,
    select_best_overall,
)
from .config import ClientConfig, ConfigError, load_config
from .engine import EngineAPIError, EngineClient
from .hive import HiveAccountLookup

# Initialize Typer app
app = typer.Typer(
    name="flowerengine",
    help="FlowerEngine - Hive-Engine node list CLI",
    add_completion=False
)

# Rich console for pretty output
console = Console()

NO_NODE_MESSAGES = {
    NoNodeReason.NO_AVAILABLE_NODES: "No available nodes: every listed node is failing.",
    NoNodeReason.NO_REPORT: "No node report published, cannot rank nodes.",
    NoNodeReason.NO_ENGINE_NODES: "No Hive-Engine nodes found in the report.",
}


def get_lookup(config: ClientConfig) -> HiveAccountLookup:
    """Create an account lookup for the configured Hive nodes."""
    return HiveAccountLookup(endpoints=config.hive_nodes, timeout=config.timeout)


def get_engine_client(node_url: str, config: ClientConfig) -> EngineClient:
    """Create a Hive-Engine client for a node."""
    return EngineClient(node_url, timeout=config.timeout)


def run_async(coro):
    """Run an async coroutine synchronously."""
    return asyncio.run(coro)


def setup(
    config_path: Optional[Path],
    account: Optional[str],
    hive_nodes: Optional[list[str]],
    verbose: bool
) -> ClientConfig:
    """Configure logging and resolve the configuration for a command."""
    configure_logging(logging.DEBUG if verbose else logging.WARNING)

    try:
        config = load_config(config_path)
    except ConfigError as e:
        console.print(f"[red]✗ {escape(str(e))}[/red]")
        raise typer.Exit(1)

    if account:
        config.account = account
    if hive_nodes:
        config.hive_nodes = hive_nodes
    return config


def fail(action: str, error: Exception) -> NoReturn:
    """Print a fetch failure and exit."""
    console.print(f"[red]✗ Failed to {action}: {escape(str(error))}[/red]")
    raise typer.Exit(1)


# =============================================================================
# Node List Commands
# =============================================================================

@app.command()
def nodes(
    account: Optional[str] = typer.Option(None, "--account", "-a", help="Account publishing the node list"),
    hive_node: Optional[list[str]] = typer.Option(None, "--hive-node", "-n", help="Hive API node (repeatable)"),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Config file path"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging")
):
    """List active and failing nodes."""
    config = setup(config_path, account, hive_node, verbose)

    async def _nodes():
        async with get_lookup(config) as lookup:
            try:
                listing = await NodeService(lookup).list_active_and_failing_nodes(config.account)
            except MetadataError as e:
                fail("fetch node list", e)

            if not listing.active:
                console.print("[yellow]No active nodes.[/yellow]")
            else:
                table = Table(title=f"Active Nodes (@{config.account})")
                table.add_column("#", style="dim")
                table.add_column("Node", style="cyan")
                for i, node in enumerate(listing.active, 1):
                    table.add_row(str(i), node)
                console.print(table)

            if listing.failing:
                table = Table(title="Failing Nodes")
                table.add_column("Node", style="red")
                table.add_column("Reason")
                for node, reason in listing.failing.items():
                    table.add_row(node, escape(str(reason)))
                console.print(table)

    run_async(_nodes())


@app.command()
def report(
    account: Optional[str] = typer.Option(None, "--account", "-a", help="Account publishing the node list"),
    hive_node: Optional[list[str]] = typer.Option(None, "--hive-node", "-n", help="Hive API node (repeatable)"),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Config file path"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging")
):
    """Show the published benchmark report."""
    config = setup(config_path, account, hive_node, verbose)

    async def _report():
        async with get_lookup(config) as lookup:
            try:
                document = await NodeService(lookup).fetch(config.account)
            except MetadataError as e:
                fail("fetch report", e)

            if not document.report:
                console.print("[yellow]No node report published.[/yellow]")
                return

            table = Table(title=f"Node Report (@{config.account})")
            table.add_column("Node", style="cyan")
            table.add_column("Engine")
            table.add_column("Version")
            table.add_column("Score", justify="right")
            table.add_column("Latency", justify="right")
            table.add_column("Tests", justify="right")

            for row in document.report:
                engine = "[green]●[/green]" if row.engine else "[red]○[/red]"
                score = f"{row.weighted_score:.2f}" if row.weighted_score is not None else "-"
                latency = row.latency.latency_ms if row.latency else None
                table.add_row(
                    row.node,
                    engine,
                    row.ssc_node_version or "-",
                    score,
                    f"{latency:.0f} ms" if latency is not None else "-",
                    str(row.tests_completed) if row.tests_completed is not None else "-"
                )

            console.print(table)

            parameters = document.parameters
            if parameters and parameters.timestamp:
                console.print(f"\n[dim]Benchmarked at {parameters.timestamp}[/dim]")

    run_async(_report())


# =============================================================================
# Selection Commands
# =============================================================================

@app.command()
def best(
    account: Optional[str] = typer.Option(None, "--account", "-a", help="Account publishing the node list"),
    hive_node: Optional[list[str]] = typer.Option(None, "--hive-node", "-n", help="Hive API node (repeatable)"),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Config file path"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging")
):
    """Show the node with the highest weighted score."""
    config = setup(config_path, account, hive_node, verbose)

    async def _best():
        async with get_lookup(config) as lookup:
            try:
                document = await NodeService(lookup).fetch(config.account)
            except MetadataError as e:
                fail("fetch node list", e)

            selection = select_best_overall(document)
            if not selection:
                console.print(f"[yellow]{NO_NODE_MESSAGES[selection.reason]}[/yellow]")
                return

            console.print(f"[green]✓ Best performing node:[/green] {selection.node}")

    run_async(_best())


@app.command()
def available(
    account: Optional[str] = typer.Option(None, "--account", "-a", help="Account publishing the node list"),
    hive_node: Optional[list[str]] = typer.Option(None, "--hive-node", "-n", help="Hive API node (repeatable)"),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Config file path"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging")
):
    """Show the fastest healthy node that is not failing."""
    config = setup(config_path, account, hive_node, verbose)

    async def _available():
        async with get_lookup(config) as lookup:
            try:
                selection = await NodeService(lookup).get_best_available_node(config.account)
            except MetadataError as e:
                fail("fetch node list", e)

            if not selection:
                console.print(f"[yellow]{NO_NODE_MESSAGES[selection.reason]}[/yellow]")
                return

            console.print(f"[green]✓ Best available node:[/green] {selection.node}")
            if selection.fallback:
                console.print("[dim]No node passed the report checks, using the first available one.[/dim]")

    run_async(_available())


# =============================================================================
# Query Commands
# =============================================================================

@app.command()
def token(
    symbol: str = typer.Argument(..., help="Token symbol, e.g. SWAP.HIVE"),
    account: Optional[str] = typer.Option(None, "--account", "-a", help="Account publishing the node list"),
    hive_node: Optional[list[str]] = typer.Option(None, "--hive-node", "-n", help="Hive API node (repeatable)"),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Config file path"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging")
):
    """Look up a token on the best node."""
    config = setup(config_path, account, hive_node, verbose)

    async def _token():
        async with get_lookup(config) as lookup:
            try:
                document = await NodeService(lookup).fetch(config.account)
            except MetadataError as e:
                fail("fetch node list", e)

        # Hive lookup is closed here; the document is all that is needed
        selection = select_best_overall(document)
        if not selection:
            selection = select_best_available(document)
        if not selection:
            console.print("[yellow]Could not determine a node to query.[/yellow]")
            return

        console.print(f"[dim]Querying {selection.node}[/dim]")

        async with get_engine_client(selection.node, config) as engine:
            try:
                info = await engine.get_token(symbol)
            except (EngineAPIError, httpx.HTTPError) as e:
                fail(f"query {selection.node}", e)

        if info is None:
            console.print(f"[yellow]Token {symbol.upper()} not found.[/yellow]")
            return

        table = Table(title=f"{info.symbol} - {info.name}")
        table.add_column("Field", style="cyan")
        table.add_column("Value")
        table.add_row("Issuer", info.issuer)
        table.add_row("Precision", str(info.precision))
        table.add_row("Supply", info.supply or "-")
        table.add_row("Circulating", info.circulating_supply or "-")
        table.add_row("Max Supply", info.max_supply or "-")
        table.add_row("Staking", "yes" if info.staking_enabled else "no")
        table.add_row("Delegation", "yes" if info.delegation_enabled else "no")
        console.print(table)

    run_async(_token())


def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()

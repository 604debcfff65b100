"""Command-line interface for OneTap nodes."""

import asyncio
import logging
import sys

import click
import uvicorn
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from onetap import __version__
from onetap.config import settings
from onetap.logger import setup_global_logger

console = Console()
logger = logging.getLogger(__name__)


@click.group()
@click.version_option(version=__version__)
@click.option("--log-level", default=None, help="Log level (default: LOG_LEVEL setting)")
def main(log_level):
    """
    OneTap nodes - check-in and attendance actions for workflows.
    """
    setup_global_logger(log_level or settings.LOG_LEVEL)


@main.command()
def nodes():
    """List the discovered node packages."""
    from onetap.workflows.engine.nodes.registry import NodeRegistry

    available = NodeRegistry.list_nodes()
    if not available:
        console.print("[yellow]⚠ No node packages found[/yellow]")
        return

    table = Table(title="Node Packages")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Version")
    table.add_column("Category")
    table.add_column("Modes", style="dim")

    for node_id, node in sorted(available.items()):
        modes = [mode for mode in ("polling", "webhook") if node[mode]]
        table.add_row(node_id, node["name"], node["version"], node["category"], ", ".join(modes))

    console.print(table)


@main.command("test-credential")
@click.option("--api-key", default=None, help="OneTap API key (default: ONETAP_API_KEY setting)")
@click.option(
    "--environment",
    type=click.Choice(["production", "staging"]),
    default=None,
    help="OneTap environment (default: ENVIRONMENT setting)",
)
def test_credential_command(api_key, environment):
    """Check an API key against the OneTap API."""
    from onetap.credentials import resolve_credential, test_credential

    try:
        credential = resolve_credential({"apiKey": api_key or settings.ONETAP_API_KEY})
    except ValueError as e:
        console.print(f"[red]✗ {e}[/red]")
        sys.exit(1)

    environment = environment or settings.ENVIRONMENT
    console.print(f"[cyan]Testing credential against {settings.base_url_for(environment)}...[/cyan]")
    result = asyncio.run(test_credential(credential, environment))

    if result["status"] != "OK":
        console.print(f"[bold red]✗ {result['message']}[/bold red]")
        sys.exit(1)

    console.print(f"[bold green]✓ {result['message']}[/bold green]")
    account = result.get("account") or {}
    if isinstance(account, dict) and account:
        table = Table(show_header=False)
        for key, value in account.items():
            if isinstance(value, (str, int, float, bool)):
                table.add_row(key, str(value))
        console.print(table)


@main.command()
@click.option("--host", default="0.0.0.0", help="Host to bind to")
@click.option("--port", default=5678, help="Port to bind to (default: 5678)")
@click.option("--reload", is_flag=True, help="Enable auto-reload for development")
def serve(host: str, port: int, reload: bool):
    """Serve the inbound webhook endpoint."""
    url = f"http://{'localhost' if host == '0.0.0.0' else host}:{port}"

    console.print(
        Panel.fit(
            f"""[bold cyan]OneTap Nodes[/bold cyan]

[dim]Host:[/dim] {host}
[dim]Port:[/dim] {port}
[dim]Webhooks:[/dim] {url}{settings.API_V1_STR}/webhooks/<node_id>
""",
            title="Webhook Server",
            border_style="cyan",
        )
    )

    try:
        uvicorn.run("onetap.main:app", host=host, port=port, reload=reload, log_level="info")
    except KeyboardInterrupt:
        console.print("\n[yellow]Server stopped[/yellow]")
        sys.exit(0)


if __name__ == "__main__":
    main()

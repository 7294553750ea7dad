"""Click CLI: loads config, builds the board, runs discussions and direct queries."""

import asyncio
import logging
import sys
from pathlib import Path

import click
from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from config.config_loader import AppConfig, ConfigurationError, load_config
from boardroom.healthcheck import run_health_checks
from boardroom.orchestrator import BoardOrchestrator
from boardroom.output import print_direct_response, print_discussion, print_members, to_json
from boardroom.providers.base import ProviderError
from boardroom.selection import InputError

logger = logging.getLogger(__name__)

console = Console(legacy_windows=False)


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False, console=Console(stderr=True))],
    )


def _load(config_path: str | None) -> AppConfig:
    try:
        if config_path:
            return load_config(Path(config_path))
        return load_config()
    except (FileNotFoundError, ConfigurationError) as exc:
        console.print(f"[bold red]Config error:[/bold red] {escape(str(exc))}")
        sys.exit(1)


def _fail(exc: Exception) -> None:
    console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}")
    sys.exit(1)


@click.group()
@click.option("--config", "config_path", default=None, type=click.Path(), help="Path to settings.yaml")
@click.option("--verbose", is_flag=True, help="Enable DEBUG-level logging")
@click.pass_context
def main(ctx: click.Context, config_path: str | None, verbose: bool) -> None:
    """Boardroom -- ask a panel of AI board members.

    \b
    Examples:
      boardroom discuss "What is our projected revenue growth?"
      boardroom discuss "Should we rebuild the platform?" --mode all
      boardroom discuss "Can we afford this?" --mode specific:cfo
      boardroom direct "Explain REST API design principles" --provider openai
      boardroom members
      boardroom providers
    """
    load_dotenv()
    _setup_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path


def _orchestrator(ctx: click.Context) -> BoardOrchestrator:
    config = _load(ctx.obj.get("config_path"))
    return BoardOrchestrator(config)


@main.command()
@click.argument("query")
@click.option("--mode", default="relevant", show_default=True,
              help="all, relevant, or specific:<member id>")
@click.option("--json", "as_json", is_flag=True, help="Print the discussion as JSON")
@click.pass_context
def discuss(ctx: click.Context, query: str, mode: str, as_json: bool) -> None:
    """Run a board discussion for QUERY."""
    board = _orchestrator(ctx)
    try:
        discussion = asyncio.run(board.discuss_query(query, mode))
    except (InputError, ConfigurationError) as exc:
        _fail(exc)
        return

    if as_json:
        click.echo(to_json(discussion))
    else:
        print_discussion(discussion)


@main.command()
@click.argument("query")
@click.option("--provider", "provider_id", default=None, help="Provider id (default: from config)")
@click.option("--json", "as_json", is_flag=True, help="Print the completion as JSON")
@click.pass_context
def direct(ctx: click.Context, query: str, provider_id: str | None, as_json: bool) -> None:
    """Ask a single provider directly, bypassing the board."""
    board = _orchestrator(ctx)
    try:
        response = asyncio.run(board.get_direct_response(query, provider_id))
    except (InputError, ConfigurationError, ProviderError) as exc:
        _fail(exc)
        return

    if as_json:
        click.echo(to_json(response))
    else:
        print_direct_response(response)


@main.command()
@click.pass_context
def members(ctx: click.Context) -> None:
    """List configured board members and their provider chains."""
    board = _orchestrator(ctx)
    print_members(board.members, set(board.provider_ids()))


@main.command()
@click.pass_context
def providers(ctx: click.Context) -> None:
    """Probe every registered provider."""
    board = _orchestrator(ctx)
    registered = board.providers.as_dict()
    if not registered:
        console.print("[bold red]Error:[/bold red] No providers available. Check API keys in .env.")
        sys.exit(1)

    console.print("\n[bold]Checking providers...[/bold]")
    results = asyncio.run(run_health_checks(registered))

    failed = 0
    for name in sorted(results):
        ok, err = results[name]
        if ok:
            console.print(f"  [green]OK  [/green] {name}")
        else:
            failed += 1
            short_err = err.splitlines()[0][:120] if err else "unknown error"
            console.print(f"  [red]FAIL[/red] {name}: {escape(short_err)}")

    if failed:
        sys.exit(1)


if __name__ == "__main__":
    main()

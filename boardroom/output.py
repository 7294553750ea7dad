"""Rich console rendering and JSON export for board results."""

import json
import logging
from dataclasses import asdict

from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.rule import Rule
from rich.table import Table
from rich.text import Text

from boardroom.members import MemberRegistry
from boardroom.models import CompletionResponse, Discussion

logger = logging.getLogger(__name__)

console = Console(legacy_windows=False)


def to_json(result: Discussion | CompletionResponse) -> str:
    return json.dumps(asdict(result), indent=2, ensure_ascii=False)


def print_discussion(discussion: Discussion) -> None:
    """Print every member's answer followed by the run summary."""
    console.print(Rule(f"[bold cyan]Board Discussion[/bold cyan] [dim]({discussion.mode})[/dim]"))
    if not discussion.responses:
        console.print("[yellow]No board member was able to answer.[/yellow]")
    for resp in discussion.responses:
        console.print(
            Panel(
                Markdown(resp.content),
                title=f"[bold]{resp.agent_name}[/bold] ({resp.role})",
                subtitle=f"{resp.provider} · {resp.latency_ms}ms · {resp.usage.total_tokens} tokens",
                border_style="dim",
            )
        )
    console.print(
        Text(
            f"Responses: {len(discussion.responses)}/{len(discussion.candidates)} | "
            f"Total: {discussion.total_latency_ms}ms | "
            f"Cost: ${discussion.total_cost:.4f}",
            style="dim",
        )
    )


def print_direct_response(response: CompletionResponse) -> None:
    console.print(Rule(f"[bold green]{response.provider}[/bold green] ({response.model})"))
    console.print(Markdown(response.content))
    console.print(
        Text(
            f"Latency: {response.latency_ms}ms | Tokens: {response.usage.total_tokens}",
            style="dim",
        )
    )


def print_members(members: MemberRegistry, registered: set[str]) -> None:
    """Table of the board; providers without credentials are dimmed."""
    table = Table(title="Board Members")
    table.add_column("Priority", justify="right")
    table.add_column("Id")
    table.add_column("Name", style="bold")
    table.add_column("Role")
    table.add_column("Providers")

    for member in members:
        chain = [member.preferred_provider, *member.fallback_providers]
        labels = [p if p in registered else f"[dim]{p}[/dim]" for p in chain]
        table.add_row(str(member.priority), member.id, member.name, member.role, " → ".join(labels))

    console.print(table)

"""
adapters.cli.main - CLI adapter for the regulations assistant.

Mirrors src/regassist/adapters/rest/ but for terminal use. Uses the same
ServiceFactory, orchestrator and services as the REST API so behaviour
is identical.

Commands
--------
  ask        One-shot question, answered with live Regulations.gov data
  chat       Interactive chat session (history kept in memory only)
  more       Fetch the next page of a previous search
  briefing   Personalized briefing from a description of you or your org
  status     Show which credentials are configured

Usage
-----
  python run_cli.py ask "recent EPA rules on PFAS"
  python run_cli.py more search_documents --input '{"searchTerm": "PFAS"}'
  python run_cli.py briefing "small organic farm in Vermont"
"""

from __future__ import annotations

import asyncio
import json
from typing import Any, Optional

import typer
from rich import box
from rich.console import Console
from rich.markdown import Markdown
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from regassist import __version__
from regassist.domain.exceptions import DomainError
from regassist.domain.models import ConversationToken, PaginationCursor, ToolResult
from regassist.factory import ServiceFactory
from regassist.infrastructure.config import Settings
from regassist.infrastructure.logging_cfg import setup_logging

console = Console()
app = typer.Typer(
    help="Regulations.gov Assistant CLI",
    add_completion=False,
    no_args_is_help=True,
)


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------

def _make_factory() -> ServiceFactory:
    """Build a ServiceFactory from the environment, or exit with the reason."""
    config = Settings.from_env()
    setup_logging("WARNING")
    try:
        config.validate()
    except DomainError as e:
        console.print(f"[bold red]{escape(str(e))}[/bold red]")
        raise typer.Exit(code=1)
    return ServiceFactory(config)


def _run(coro) -> Any:
    """Run a coroutine, turning domain errors into a red message and exit 1."""
    try:
        return asyncio.run(coro)
    except DomainError as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(code=1)


def _items_table(items: list[dict[str, Any]]) -> Table:
    t = Table(box=box.SIMPLE, padding=(0, 1))
    t.add_column("ID", style="bold")
    t.add_column("Title")
    t.add_column("Agency")
    t.add_column("Posted")
    for item in items:
        attributes = item.get("attributes") or {}
        t.add_row(
            escape(str(item.get("id", ""))),
            escape(attributes.get("title") or "") or "[dim]—[/dim]",
            escape(attributes.get("agencyId") or ""),
            (attributes.get("postedDate") or "")[:10],
        )
    return t


def _print_result(result: Optional[ToolResult], pagination: Optional[PaginationCursor]) -> None:
    if result is None:
        return
    if not result.ok:
        console.print(f"[yellow]{escape(result.error)}[/yellow]")
        return
    if result.items:
        console.print(_items_table(result.items))
    if pagination is not None:
        hint = ""
        if pagination.has_more:
            hint = (
                f"  Next: more {pagination.operation_name} "
                f"--input '{escape(json.dumps(pagination.operation_arguments))}'"
            )
        console.print(
            f"[dim]Page {pagination.page_number}, "
            f"{pagination.total_elements} total.{hint}[/dim]"
        )


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"regassist v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True,
        help="Show the version and exit.",
    ),
) -> None:
    """Search and analyze U.S. federal regulations from the terminal."""


# ---------------------------------------------------------------------------
# Commands: Conversation
# ---------------------------------------------------------------------------

@app.command()
def ask(
    message: str = typer.Argument(..., help="Your question about federal regulations."),
) -> None:
    """Ask a one-shot question."""
    factory = _make_factory()

    async def _ask():
        with console.status("[bold cyan]Searching Regulations.gov…", spinner="dots"):
            return await factory.create_orchestrator().answer(message)

    result = _run(_ask())
    console.print(Panel(Markdown(result.text), title="Assistant", border_style="green"))
    _print_result(result.result, result.pagination)


@app.command()
def chat() -> None:
    """Start an interactive chat session."""
    factory = _make_factory()
    orchestrator = factory.create_orchestrator()

    async def _chat() -> None:
        history = ConversationToken.empty()
        console.print(Panel(
            "[bold]Regulations.gov Assistant[/bold]\n"
            "Type your question, or [bold]exit[/bold] / [bold]quit[/bold] to stop.",
            border_style="cyan",
        ))

        while True:
            try:
                user_input = Prompt.ask("\n[bold cyan]You[/bold cyan]")
            except (KeyboardInterrupt, EOFError):
                console.print("\n[dim]Goodbye![/dim]")
                break

            if user_input.strip().lower() in ("exit", "quit", "q", "bye"):
                console.print("[dim]Goodbye![/dim]")
                break

            if not user_input.strip():
                continue

            try:
                with console.status("[bold cyan]Thinking…", spinner="dots"):
                    result = await orchestrator.answer(user_input, history)
            except DomainError as e:
                console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
                continue

            history = result.history
            console.print()
            console.print(Panel(Markdown(result.text), title="Assistant", border_style="green"))
            _print_result(result.result, result.pagination)

    asyncio.run(_chat())


@app.command()
def more(
    tool_name: str = typer.Argument(..., help="Operation that produced the page, e.g. search_documents."),
    tool_input: str = typer.Option(
        "{}", "--input", "-i",
        help="JSON arguments of the page you already have.",
    ),
) -> None:
    """Fetch the next page of a previous search."""
    try:
        arguments = json.loads(tool_input)
    except json.JSONDecodeError as e:
        console.print(f"[bold red]--input is not valid JSON:[/bold red] {e}")
        raise typer.Exit(code=1)

    factory = _make_factory()
    result = _run(factory.create_pagination_service().continue_pagination(tool_name, arguments))
    _print_result(result.result, result.pagination)


# ---------------------------------------------------------------------------
# Commands: Briefing / Status
# ---------------------------------------------------------------------------

@app.command()
def briefing(
    description: str = typer.Argument(..., help="Who you are or what your organization does."),
) -> None:
    """Build a personalized regulatory briefing."""
    factory = _make_factory()

    async def _brief():
        with console.status("[bold cyan]Building your briefing…", spinner="dots"):
            return await factory.create_briefing_service().build_briefing(description)

    result = _run(_brief())
    console.print(Panel(Markdown(result.narrative), title="Your Briefing", border_style="green"))
    console.print(f"[dim]Searched: {escape(', '.join(result.queries))}[/dim]")
    if result.items:
        console.print(_items_table(result.items))


@app.command()
def status() -> None:
    """Show which credentials are configured (no network calls)."""
    config = Settings.from_env()
    info = config.credential_status()

    t = Table(box=box.SIMPLE, show_header=False, padding=(0, 2))
    t.add_column("Setting", style="bold")
    t.add_column("Value")
    t.add_row("Regulations.gov API key", _flag(info["regulationsApiKey"]))
    t.add_row("LLM provider", f"{config.llm_provider} ({config.active_llm_model})")
    t.add_row("LLM API key", _flag(info["llmApiKey"]))
    console.print(Panel(t, title="Status", border_style="blue"))


def _flag(value: Any) -> str:
    return "[green]set[/green]" if value else "[red]missing[/red]"


if __name__ == "__main__":
    app()

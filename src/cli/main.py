"""Salomão CLI.

Entry point for serving the API, inspecting the question flow, and
running the questionnaire from a terminal.

Usage:
    salomao serve          Start the API server
    salomao questions      Show the question flow
    salomao chat           Answer the questionnaire interactively
    salomao version        Show version info
"""

import logging
from typing import Optional

import typer
from rich.console import Console

from src.cli.output import format_question_table

_log = logging.getLogger(__name__)

app = typer.Typer(
    name="salomao",
    help="Conversational builder for lead-capture marketing systems",
    no_args_is_help=True,
)

console = Console()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Salomão CLI."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s:%(name)s:%(message)s",
    )


@app.command()
def version():
    """Show Salomão version and dependency info."""
    from src.api.routes.monitor import get_version
    from src.orchestrator.flow.config import get_model

    console.print(f"[bold]Salomão[/bold] v{get_version()}")
    console.print(f"  Model: {get_model()}")
    try:
        import anthropic

        console.print(f"  Anthropic SDK: {getattr(anthropic, '__version__', 'unknown')}")
    except ImportError:
        console.print("  Anthropic SDK: [red]not installed[/red]")


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Bind address"),
    port: int = typer.Option(8000, "--port", help="Bind port"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
    log_level: str = typer.Option("info", "--log-level", help="uvicorn log level"),
):
    """Start the Salomão API with uvicorn."""
    import uvicorn

    console.print(f"[green]Starting Salomão API on {host}:{port}[/green]")
    uvicorn.run(
        "src.api.main:app",
        host=host,
        port=port,
        reload=reload,
        log_level=log_level,
    )


@app.command()
def questions(
    as_json: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """Show the five-step question flow."""
    from src.orchestrator.flow import get_question_flow

    output = format_question_table(get_question_flow(), as_json=as_json)
    if as_json:
        typer.echo(output)
    else:
        console.print(output)


@app.command()
def chat(
    session: Optional[str] = typer.Option(None, "--session", help="Resume a session by ID"),
    offline: bool = typer.Option(
        False, "--offline", help="Skip the language model and use the fallback template"
    ),
):
    """Answer the questionnaire interactively."""
    from src.cli.repl import run_repl
    from src.db.connection import init_db
    from src.errors import DomainError
    from src.orchestrator.flow.generator import (
        AnthropicSystemGenerator,
        FallbackSystemGenerator,
    )

    init_db()

    generator = FallbackSystemGenerator() if offline else AnthropicSystemGenerator()

    try:
        run_repl(generator=generator, session_id=session)
    except DomainError as e:
        console.print(f"[red]{e.code}: {e.message}[/red]")
        console.print(f"[dim]{e.remediation}[/dim]")
        raise typer.Exit(1) from e


if __name__ == "__main__":
    app()

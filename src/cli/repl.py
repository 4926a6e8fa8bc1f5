"""Interactive questionnaire REPL.

Drives the flow engine in-process against the configured database and
renders each assistant turn with Rich. Numeric input selects one of the
offered options.
"""

from rich.console import Console
from rich.markdown import Markdown

from src.cli.output import format_options, format_preview
from src.db.connection import get_db_context
from src.orchestrator.flow import FlowEngine, SystemGenerator, get_question
from src.services.chat_session_store import ChatSessionStore

console = Console()


def resolve_answer(user_input: str, options: list[str] | None) -> str:
    """Map a 1-based option number to its text; anything else is literal."""
    stripped = user_input.strip()
    if options and stripped.isdigit():
        index = int(stripped)
        if 1 <= index <= len(options):
            return options[index - 1]
    return user_input


def run_repl(generator: SystemGenerator | None = None, session_id: str | None = None) -> None:
    """Run the interactive questionnaire.

    Args:
        generator: Artifact generator; defaults to the Anthropic one.
        session_id: Optional session ID to resume. Creates new if None.
    """
    with get_db_context() as db:
        engine = FlowEngine(ChatSessionStore(db), generator)

        if session_id is None:
            session = engine.start_session()
        else:
            session = ChatSessionStore(db).load(session_id)
            if session is None:
                console.print(f"[red]Session not found: {session_id}[/red]")
                return
        console.print(f"[dim]Session: {session.id}[/dim]\n")

        last = session.messages[-1] if session.messages else None
        options = last.options if last else None
        if last is not None:
            console.print(Markdown(last.content))
            if options:
                console.print(format_options(options))

        console.print("\n[dim]Ctrl+D para sair.[/dim]")

        while True:
            try:
                user_input = console.input("[bold green]> [/bold green]")
            except EOFError:
                break

            if not user_input.strip():
                continue

            result = engine.process_message(session.id, resolve_answer(user_input, options))
            console.print()
            console.print(Markdown(result.response))

            if result.is_complete:
                console.print(format_preview(result.system_preview))
                break

            question = get_question(result.next_step)
            options = list(question.options) if question and question.options else None
            if options:
                console.print(format_options(options))

    console.print("\n[dim]Sessão encerrada.[/dim]")


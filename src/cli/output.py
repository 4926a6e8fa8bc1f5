"""CLI output formatters for Rich tables and JSON.
Provides human-readable Rich output (default) and machine-parseable
JSON output (--json flag) for the question flow, plus the preview panel
shown when a chat completes.
"""

import json

from rich.panel import Panel
from rich.table import Table

from src.orchestrator.flow import QuestionStep, SystemPreview


def format_question_table(
    questions: tuple[QuestionStep, ...] | list[QuestionStep], as_json: bool = False
) -> Table | str:
    """Format the question flow as a Rich table or JSON.

    Args:
        questions: Question steps to display.
        as_json: If True, return a JSON string instead of a table.
    """
    if as_json:
        return json.dumps(
            [q.model_dump(by_alias=True, exclude_none=True) for q in questions],
            indent=2,
            ensure_ascii=False,
        )

    table = Table(title="Fluxo de perguntas", show_lines=True)
    table.add_column("#", justify="right", style="cyan")
    table.add_column("Campo", style="magenta")
    table.add_column("Tipo")
    table.add_column("Pergunta", style="white")
    table.add_column("Opções", style="dim")

    for q in questions:
        table.add_row(
            str(q.step),
            q.field,
            q.type,
            q.question,
            "\n".join(q.options) if q.options else "—",
        )
    return table


def format_options(options: list[str] | None) -> str:
    """Numbered option list shown under an assistant prompt."""
    if not options:
        return ""
    return "\n".join(f"  [cyan]{i}.[/cyan] {opt}" for i, opt in enumerate(options, 1))


def format_preview(preview: SystemPreview) -> Panel:
    """Render the completion preview as a Rich panel."""
    generated = preview.generated
    lines = [
        f"[bold]{preview.title}[/bold]",
        preview.subtitle,
        "",
        f"Botão: [green]{preview.button_text}[/green]",
        f"Gancho: {preview.hook}",
        f"Template: {preview.template}",
        f"Meta: {preview.target_weight or '—'}",
        f"Desafio: {preview.challenge or '—'}",
        f"Conversão: {preview.conversion_method or '—'}",
        f"SDR: {'sim' if preview.has_sdr else 'não'}",
        "",
        f"[bold]{generated.name}[/bold] ({generated.conversion_rate}%)",
        generated.description,
    ]
    lines.extend(f"• {feature}" for feature in generated.features)
    return Panel("\n".join(lines), title="Preview do sistema", border_style="green")

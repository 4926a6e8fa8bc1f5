"""Tests for CLI output formatting."""

import json

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from src.cli.output import format_options, format_preview, format_question_table
from src.orchestrator.flow import SystemData, fallback_system, get_question_flow
from src.orchestrator.flow.engine import build_preview


def _render(renderable) -> str:
    console = Console(width=200, record=True)
    console.print(renderable)
    return console.export_text()


class TestFormatQuestionTable:
    """Tests for question flow rendering."""

    def test_renders_table(self):
        table = format_question_table(get_question_flow())

        assert isinstance(table, Table)
        assert table.row_count == 5
        text = _render(table)
        assert "target_audience" in text
        assert "10-20kg" in text

    def test_renders_json(self):
        output = format_question_table(get_question_flow(), as_json=True)

        parsed = json.loads(output)
        assert [q["step"] for q in parsed] == [1, 2, 3, 4, 5]
        assert "options" not in parsed[0]
        assert parsed[4]["options"][0] == "Sim, quero conversão máxima!"


class TestFormatOptions:
    def test_numbers_options(self):
        assert format_options(["a", "b"]) == "  [cyan]1.[/cyan] a\n  [cyan]2.[/cyan] b"

    def test_empty(self):
        assert format_options(None) == ""
        assert format_options([]) == ""


class TestFormatPreview:
    def test_panel_contents(self):
        profile = SystemData(
            weight_goal="5-10kg",
            main_challenge="Falta de tempo",
            conversion_method="Grupo VIP",
            sdr_automation="Não, prefiro fazer manual",
        )
        preview = build_preview(profile, fallback_system(profile))

        panel = format_preview(preview)

        assert isinstance(panel, Panel)
        text = _render(panel)
        assert "Calculadora de Transformação Corporal" in text
        assert "SDR: não" in text
        assert "Sistema Personalizado (35%)" in text
        assert "Formulário otimizado" in text

"""Tests for the interactive questionnaire REPL helpers."""

from src.cli.repl import resolve_answer

OPTIONS = ["5-10kg", "10-20kg", "20-30kg", "30kg+"]


def test_number_selects_option():
    assert resolve_answer("2", OPTIONS) == "10-20kg"
    assert resolve_answer(" 4 ", OPTIONS) == "30kg+"


def test_out_of_range_number_is_literal():
    assert resolve_answer("9", OPTIONS) == "9"
    assert resolve_answer("0", OPTIONS) == "0"


def test_free_text_is_literal():
    assert resolve_answer("uns 15kg", OPTIONS) == "uns 15kg"


def test_numbers_without_options_are_literal():
    assert resolve_answer("3", None) == "3"

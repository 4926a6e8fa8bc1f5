"""Test helper utilities."""

from tests.helpers.generators import (
    SCENARIO_ANSWERS,
    FailingGenerator,
    StubGenerator,
)

__all__ = [
    "SCENARIO_ANSWERS",
    "FailingGenerator",
    "StubGenerator",
]

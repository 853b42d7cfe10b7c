"""Shared fixtures for the unit-harness tests."""

from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Callable

import pytest

from unit_harness.discovery.introspection import Introspector
from unit_harness.runner.events import OutcomeEvent, OutcomeKind


class ListSink:
    """Event sink keeping every event in order."""

    def __init__(self) -> None:
        self.events: list[OutcomeEvent] = []

    def record(self, event: OutcomeEvent) -> None:
        self.events.append(event)

    def kinds(self) -> list[OutcomeKind]:
        return [e.kind for e in self.events]

    def terminal(self) -> list[OutcomeEvent]:
        return [e for e in self.events if e.kind.is_terminal]

    def for_unit(self, qualified_name: str) -> list[OutcomeEvent]:
        return [e for e in self.events if e.name == qualified_name]


@pytest.fixture()
def sink() -> ListSink:
    return ListSink()


@pytest.fixture()
def introspector() -> Introspector:
    return Introspector()


@pytest.fixture()
def write_module(tmp_path: Path) -> Callable[[str, str], Path]:
    """Write a test module into tmp_path and return its path."""

    def _write(name: str, source: str) -> Path:
        path = tmp_path / f"{name}.py"
        path.write_text(textwrap.dedent(source), encoding="utf-8")
        return path

    return _write


CALC_MODULE = """
    from unit_harness import assertions
    from unit_harness.markers import expected_exception, test_case, test_class

    @test_class
    class Calc:
        @test_case
        def add_ok(self):
            assertions.is_true(2 + 2 == 4, "2 + 2 should be 4")

        @test_case
        @expected_exception(ZeroDivisionError)
        def div_zero(self):
            return 1 / 0

    @test_class
    class Other:
        scanned = False

        def __init__(self):
            type(self).scanned = True

        @test_case
        def div_zero(self):
            pass
"""


@pytest.fixture()
def calc_module(write_module) -> Path:
    return write_module("calc_tests", CALC_MODULE)

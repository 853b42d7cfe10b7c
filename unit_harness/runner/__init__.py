"""Runner module - fixture execution and result collection."""

from .events import EventSink, OutcomeEvent, OutcomeKind
from .test_unit import TestUnit, UnitRole
from .fixture import Fixture
from .result_collector import ResultCollector, RunStats, SummaryEntry
from .driver import ModuleResult, RunReport, RunState, TestDriver

__all__ = [
    "EventSink",
    "OutcomeEvent",
    "OutcomeKind",
    "TestUnit",
    "UnitRole",
    "Fixture",
    "ResultCollector",
    "RunStats",
    "SummaryEntry",
    "ModuleResult",
    "RunReport",
    "RunState",
    "TestDriver",
]

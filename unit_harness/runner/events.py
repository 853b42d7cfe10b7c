"""Outcome events emitted while running test units."""

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Optional, Protocol

if TYPE_CHECKING:
    from .test_unit import TestUnit


class OutcomeKind(str, Enum):
    """Classification of one execution's result."""
    SUCCESS = "SUCCESS"
    STARTED = "STARTED"
    FAILED_ASSERTION = "FAILED_ASSERTION"
    FAILED_EXECUTION = "FAILED_EXECUTION"
    SKIPPED_FIXTURE_SETUP_FAILED = "SKIPPED_FIXTURE_SETUP_FAILED"
    FAILED_NO_CONSTRUCTOR = "FAILED_NO_CONSTRUCTOR"
    FAILED_NO_TEST_CASE = "FAILED_NO_TEST_CASE"

    @property
    def is_terminal(self) -> bool:
        return self is not OutcomeKind.STARTED

    @property
    def is_not_run(self) -> bool:
        return self in NOT_RUN_KINDS


NOT_RUN_KINDS = frozenset({
    OutcomeKind.SKIPPED_FIXTURE_SETUP_FAILED,
    OutcomeKind.FAILED_NO_CONSTRUCTOR,
    OutcomeKind.FAILED_NO_TEST_CASE,
})


@dataclass(frozen=True, eq=False)
class OutcomeEvent:
    """An immutable record of one outcome.

    ``unit`` is None only for fixture-level events raised before any unit
    exists (a fixture whose constructor fails); ``fixture_name`` names the
    subject in that case.
    """
    kind: OutcomeKind
    unit: Optional["TestUnit"] = None
    cause: Optional[BaseException] = None
    fixture_name: Optional[str] = None

    @property
    def name(self) -> str:
        if self.unit is not None:
            return self.unit.qualified_name
        return self.fixture_name or "<unknown>"

    @property
    def is_lifecycle(self) -> bool:
        return self.unit is not None and self.unit.role.is_lifecycle

    @property
    def message(self) -> str:
        return "" if self.cause is None else str(self.cause)


class EventSink(Protocol):
    """Receives outcome events."""

    def record(self, event: OutcomeEvent) -> None:
        ...


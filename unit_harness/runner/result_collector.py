"""Result collector for test execution.

Buckets outcome events into passed / failed / errored / not-run and builds
per-module statistics.
"""

import traceback
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from ..markers import qualified_type_name
from .events import OutcomeEvent, OutcomeKind

# Errored entries carry a full traceback only while the bucket is this small
MAX_DETAILED_ERRORS = 2


def format_cause(error: BaseException, indent: str = "\t  ") -> str:
    """Render an exception with source-location breadcrumbs.

    Chained exceptions are rendered after the outer error: the explicit
    cause of ``raise ... from``, or else the exception that was being handled
    when the error was raised.
    """
    lines: list[str] = []
    seen: set[int] = set()
    current: Optional[BaseException] = error
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        if lines:
            lines.append("Caused by:")
        lines.append(f"{qualified_type_name(type(current))}: {current}")
        for frame in traceback.extract_tb(current.__traceback__):
            lines.append(f"{indent}{frame.name}() {frame.filename}:{frame.lineno}")
        if current.__cause__ is not None:
            current = current.__cause__
        elif not current.__suppress_context__:
            current = current.__context__
        else:
            current = None
    return "\n".join(lines)


@dataclass
class SummaryEntry:
    """One line of a bucket listing."""
    name: str
    kind: OutcomeKind
    message: str = ""
    detail: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"name": self.name, "kind": self.kind.value}
        if self.message:
            data["message"] = self.message
        if self.detail:
            data["detail"] = self.detail
        return data


@dataclass
class RunStats:
    """Statistics of one module's run."""
    passed: list[SummaryEntry] = field(default_factory=list)
    failed: list[SummaryEntry] = field(default_factory=list)
    errored: list[SummaryEntry] = field(default_factory=list)
    not_run: list[SummaryEntry] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.passed) + len(self.failed) + len(self.errored) + len(self.not_run)

    @property
    def passed_count(self) -> int:
        return len(self.passed)

    @property
    def failed_count(self) -> int:
        return len(self.failed)

    @property
    def errored_count(self) -> int:
        return len(self.errored)

    @property
    def not_run_count(self) -> int:
        return len(self.not_run)

    @property
    def all_passed(self) -> bool:
        return not (self.failed or self.errored or self.not_run)

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "passed": self.passed_count,
            "failed": self.failed_count,
            "errored": self.errored_count,
            "not_run": self.not_run_count,
        }


class ResultCollector:
    """Collects outcome events for one module at a time."""

    def __init__(self, on_event: Optional[Callable[[OutcomeEvent], None]] = None):
        """Initialize result collector.

        Args:
            on_event: Progress listener called for every event, bucketed or not.
        """
        self.on_event = on_event
        self.passed: list[OutcomeEvent] = []
        self.failed: list[OutcomeEvent] = []
        self.errored: list[OutcomeEvent] = []
        self.not_run: list[OutcomeEvent] = []

    def record(self, event: OutcomeEvent) -> None:
        """Route an event to its bucket."""
        if self.on_event is not None:
            self.on_event(event)

        if event.kind is OutcomeKind.STARTED or event.is_lifecycle:
            return

        if event.kind is OutcomeKind.SUCCESS:
            self.passed.append(event)
        elif event.kind is OutcomeKind.FAILED_ASSERTION:
            self.failed.append(event)
        elif event.kind is OutcomeKind.FAILED_EXECUTION:
            self.errored.append(event)
        elif event.kind.is_not_run:
            self.not_run.append(event)

    def reset(self) -> None:
        """Forget everything recorded so far."""
        self.passed.clear()
        self.failed.clear()
        self.errored.clear()
        self.not_run.clear()

    def summarize(self) -> RunStats:
        """Build statistics from the recorded events."""
        detailed = len(self.errored) <= MAX_DETAILED_ERRORS
        return RunStats(
            passed=[SummaryEntry(e.name, e.kind) for e in self.passed],
            failed=[SummaryEntry(e.name, e.kind, e.message) for e in self.failed],
            errored=[self._errored_entry(e, detailed) for e in self.errored],
            not_run=[self._not_run_entry(e) for e in self.not_run],
        )

    def _errored_entry(self, event: OutcomeEvent, detailed: bool) -> SummaryEntry:
        if event.cause is None:
            return SummaryEntry(event.name, event.kind, "No error information available")
        message = f"{qualified_type_name(type(event.cause))} [{event.cause}]"
        detail = format_cause(event.cause) if detailed else None
        return SummaryEntry(event.name, event.kind, message, detail)

    def _not_run_entry(self, event: OutcomeEvent) -> SummaryEntry:
        if event.kind is OutcomeKind.SKIPPED_FIXTURE_SETUP_FAILED:
            message = "One-time setup failed"
        elif event.cause is not None:
            message = f"{qualified_type_name(type(event.cause))} [{event.cause}]"
        else:
            message = ""
        return SummaryEntry(event.name, event.kind, message)

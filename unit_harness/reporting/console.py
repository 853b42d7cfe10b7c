"""Console output for test runs.

Streams a line for every non-trivial outcome while a module runs and prints
a summary block with per-bucket listings once it is done.
"""

import textwrap

import click

from ..runner.events import OutcomeEvent, OutcomeKind
from ..runner.result_collector import RunStats, SummaryEntry, format_cause


class ConsoleReporter:
    """Writes human-readable progress and summaries through click."""

    def __init__(self, err: bool = False):
        """Initialize console reporter.

        Args:
            err: Write to stderr instead of stdout (keeps stdout free for JSON).
        """
        self.err = err

    def echo(self, message: str = "") -> None:
        click.echo(message, err=self.err)

    def module_started(self, path: str) -> None:
        self.echo(f"Module {path}")

    def fixture_started(self, name: str, test_count: int) -> None:
        self.echo(f"\nRunning {name} {test_count} testcases")

    def load_failed(self, error: Exception) -> None:
        self.echo(str(error))
        cause = getattr(error, "cause", None)
        if cause is not None:
            self.echo("Stack Trace below:")
            self.echo(textwrap.indent(format_cause(cause), "\t"))

    def type_failed(self, name: str, error: Exception) -> None:
        self.echo(f"Error running test class {name}")
        self.echo(textwrap.indent(format_cause(error), "\t"))

    def on_event(self, event: OutcomeEvent) -> None:
        """Progress line for an outcome; STARTED and plain successes stay quiet."""
        if event.kind in (OutcomeKind.STARTED, OutcomeKind.SUCCESS):
            return

        self.echo(f"{event.kind.value} {event.name}")
        if event.cause is None:
            return
        if event.kind is OutcomeKind.FAILED_EXECUTION:
            self.echo(textwrap.indent(format_cause(event.cause), "\t"))
        else:
            self.echo(f"\t{event.message}")

    def summary(self, stats: RunStats) -> None:
        """Print the totals line followed by the bucket listings."""
        line = f"Total:{stats.total} Passed:{stats.passed_count}"
        if stats.failed:
            line += f" Failed:{stats.failed_count}"
        if stats.errored:
            line += f" Error:{stats.errored_count}"
        if stats.not_run:
            line += f" Not Run:{stats.not_run_count}"
        self.echo(line)

        total = stats.total
        self._listing(f"Passed ({stats.passed_count}/{total})", stats.passed)
        self._listing(f"Failed ({stats.failed_count}/{total})", stats.failed, with_errors=True)
        self._listing(f"Error ({stats.errored_count}/{total})", stats.errored, with_errors=True)
        self._listing(f"Not Run ({stats.not_run_count}/{total})", stats.not_run, with_errors=True)

    def _listing(
        self,
        header: str,
        entries: list[SummaryEntry],
        with_errors: bool = False,
    ) -> None:
        if not entries:
            return

        self.echo(header)
        for entry in entries:
            self.echo(f"\t{entry.name}")
            if not with_errors:
                continue
            self.echo(f"\t*** Error message: {entry.message}")
            if entry.detail:
                self.echo("\t*** Error Stack:")
                self.echo(textwrap.indent(entry.detail, "\t  "))

"""Test driver - orchestrates test execution for modules.

Coordinates the full flow per module:
1. Split the ``Type[.Case]`` filter
2. Load the module
3. Enumerate exported types
4. Scan each matching test class into a Fixture
5. Run the fixtures against the collector
6. Summarize
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Iterable, Optional

from ..discovery.introspection import Introspector
from ..discovery.loader import LoadError, load_module
from ..reporting.json_reporter import JsonReporter
from ..run_config.parser import split_filter
from ..run_config.schema import RunConfig, RunTarget
from .fixture import Fixture
from .result_collector import ResultCollector, RunStats

if TYPE_CHECKING:
    from ..reporting.console import ConsoleReporter

logger = logging.getLogger(__name__)


@dataclass
class ModuleResult:
    """Result of running one module."""
    target: RunTarget
    stats: RunStats = field(default_factory=RunStats)
    fixtures: list[str] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def all_passed(self) -> bool:
        return self.error is None and self.stats.all_passed


@dataclass
class RunReport:
    """Per-module results of one invocation; never merged across modules."""
    modules: list[ModuleResult] = field(default_factory=list)
    report_path: Optional[str] = None

    @property
    def all_passed(self) -> bool:
        return all(m.all_passed for m in self.modules)

    @property
    def exit_code(self) -> int:
        return 0 if self.all_passed else 1


class RunState:
    """State carried through one invocation.

    The collector is shared by every module but reset before each one, so
    per-module summaries stay independent.
    """

    def __init__(self, collector: ResultCollector):
        self.collector = collector
        self.results: list[ModuleResult] = []

    def begin_module(self, target: RunTarget) -> ModuleResult:
        self.collector.reset()
        result = ModuleResult(target=target)
        self.results.append(result)
        return result


class TestDriver:
    """Runs test modules and collects per-module statistics."""

    __test__ = False

    def __init__(
        self,
        config: Optional[RunConfig] = None,
        reporter: Optional["ConsoleReporter"] = None,
        introspector: Optional[Introspector] = None,
        loader: Callable = load_module,
    ):
        """Initialize test driver.

        Args:
            config: Execution configuration.
            reporter: Console output (None = silent).
            introspector: Type introspection (default: a fresh Introspector).
            loader: Callable turning a module path into a module.
        """
        self.config = config or RunConfig()
        self.reporter = reporter
        self.introspector = introspector or Introspector()
        self.loader = loader
        self._json_reporter = JsonReporter()

    def new_state(self) -> RunState:
        on_event = self.reporter.on_event if self.reporter else None
        return RunState(ResultCollector(on_event=on_event))

    def run(self, targets: Iterable[RunTarget]) -> RunReport:
        """Run every target in order.

        Returns:
            RunReport with one ModuleResult per target.
        """
        state = self.new_state()
        for target in targets:
            self.run_module(target, state)

        report = RunReport(modules=list(state.results))

        if self.config.save_report:
            report.report_path = self._save_report(report)

        return report

    def run_module(self, target: RunTarget, state: RunState) -> ModuleResult:
        """Load one module, run its test classes and summarize."""
        result = state.begin_module(target)

        if self.reporter:
            self.reporter.module_started(str(target))

        try:
            type_pattern, case_pattern = split_filter(target.filter)
        except ValueError as e:
            logger.warning("Skipping module %s: %s", target.path, e)
            result.error = str(e)
            if self.reporter:
                self.reporter.load_failed(e)
            return result

        try:
            module = self.loader(target.path)
        except LoadError as e:
            logger.warning("Skipping module %s: %s", target.path, e)
            result.error = str(e)
            if self.reporter:
                self.reporter.load_failed(e)
            return result

        for descriptor in self.introspector.describe_module(module):
            if type_pattern is not None and not type_pattern.search(descriptor.name):
                continue
            if not descriptor.is_test_class:
                logger.debug("%s is not a test class", descriptor.name)
                continue

            try:
                fixture = Fixture.scan(descriptor, case_pattern, state.collector)
                if fixture is None:
                    continue

                if self.reporter:
                    self.reporter.fixture_started(fixture.name, fixture.test_count)
                fixture.run(state.collector)
                result.fixtures.append(fixture.name)

            except Exception as e:
                logger.warning("Error running test class %s", descriptor.name, exc_info=True)
                if self.reporter:
                    self.reporter.type_failed(descriptor.name, e)

        result.stats = state.collector.summarize()
        if self.reporter:
            self.reporter.summary(result.stats)

        return result

    def _save_report(self, report: RunReport) -> Optional[str]:
        """Save the JSON report to the configured directory."""
        try:
            report_dir = self.config.report_dir or Path(".")
            report_path = report_dir / "unit_harness_report.json"
            saved_path = self._json_reporter.save(self._json_reporter.generate(report), report_path)
            logger.info("Report saved: %s", saved_path)
            return str(saved_path)

        except OSError as e:
            logger.warning("Failed to save report: %s", e)
            return None

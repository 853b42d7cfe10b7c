"""Tests for result bucketing and summaries."""

from __future__ import annotations

from unit_harness import markers
from unit_harness.assertions import AssertionFailure
from unit_harness.discovery.introspection import Introspector
from unit_harness.runner.events import OutcomeEvent, OutcomeKind
from unit_harness.runner.result_collector import ResultCollector, format_cause
from unit_harness.runner.test_unit import TestUnit, UnitRole


class Sample:
    @markers.test_case
    def alpha(self):
        pass

    @markers.test_case
    def beta(self):
        pass

    @markers.test_case
    def gamma(self):
        pass

    @markers.setup
    def prepare(self):
        pass


def unit(name: str, role: UnitRole = UnitRole.TEST_CASE) -> TestUnit:
    methods = {m.name: m for m in Introspector().describe_type(Sample).methods}
    return TestUnit(methods[name], role, Sample)


def raised(error: Exception) -> Exception:
    try:
        raise error
    except Exception as e:
        return e


def test_events_are_bucketed_by_kind() -> None:
    collector = ResultCollector()

    collector.record(OutcomeEvent(OutcomeKind.STARTED, unit("alpha")))
    collector.record(OutcomeEvent(OutcomeKind.SUCCESS, unit("alpha")))
    collector.record(OutcomeEvent(OutcomeKind.FAILED_ASSERTION, unit("beta"), AssertionFailure("x")))
    collector.record(OutcomeEvent(OutcomeKind.FAILED_EXECUTION, unit("gamma"), RuntimeError("y")))
    collector.record(OutcomeEvent(OutcomeKind.SKIPPED_FIXTURE_SETUP_FAILED, unit("alpha")))
    collector.record(OutcomeEvent(
        OutcomeKind.FAILED_NO_CONSTRUCTOR, cause=TypeError("args"), fixture_name="Sample",
    ))

    assert [e.name for e in collector.passed] == ["Sample.alpha"]
    assert [e.name for e in collector.failed] == ["Sample.beta"]
    assert [e.name for e in collector.errored] == ["Sample.gamma"]
    assert [e.name for e in collector.not_run] == ["Sample.alpha", "Sample"]


def test_lifecycle_events_are_never_bucketed() -> None:
    collector = ResultCollector()
    setup_unit = unit("prepare", UnitRole.SETUP)

    collector.record(OutcomeEvent(OutcomeKind.SUCCESS, setup_unit))
    collector.record(OutcomeEvent(OutcomeKind.FAILED_EXECUTION, setup_unit, RuntimeError("z")))

    assert collector.summarize().total == 0


def test_progress_listener_sees_every_event() -> None:
    seen: list[OutcomeKind] = []
    collector = ResultCollector(on_event=lambda e: seen.append(e.kind))

    collector.record(OutcomeEvent(OutcomeKind.STARTED, unit("alpha")))
    collector.record(OutcomeEvent(OutcomeKind.SUCCESS, unit("prepare", UnitRole.SETUP)))

    assert seen == [OutcomeKind.STARTED, OutcomeKind.SUCCESS]


def test_summary_totals_match_buckets() -> None:
    collector = ResultCollector()
    for kind in (
        OutcomeKind.SUCCESS,
        OutcomeKind.SUCCESS,
        OutcomeKind.FAILED_ASSERTION,
        OutcomeKind.FAILED_EXECUTION,
        OutcomeKind.FAILED_NO_TEST_CASE,
    ):
        collector.record(OutcomeEvent(kind, unit("alpha"), RuntimeError("e")))

    stats = collector.summarize()
    assert stats.total == 5
    assert stats.total == (
        stats.passed_count + stats.failed_count + stats.errored_count + stats.not_run_count
    )
    assert stats.to_dict() == {"total": 5, "passed": 2, "failed": 1, "errored": 1, "not_run": 1}
    assert not stats.all_passed


def test_assertion_failures_show_only_the_message() -> None:
    collector = ResultCollector()
    collector.record(OutcomeEvent(
        OutcomeKind.FAILED_ASSERTION, unit("beta"), raised(AssertionFailure("2 != 3")),
    ))

    entry = collector.summarize().failed[0]
    assert entry.message == "2 != 3"
    assert entry.detail is None


def test_errored_detail_included_for_small_bucket() -> None:
    collector = ResultCollector()
    collector.record(OutcomeEvent(
        OutcomeKind.FAILED_EXECUTION, unit("gamma"), raised(RuntimeError("disk full")),
    ))

    entry = collector.summarize().errored[0]
    assert entry.message == "RuntimeError [disk full]"
    assert entry.detail.startswith("RuntimeError: disk full")
    assert "raised()" in entry.detail
    assert "test_result_collector.py" in entry.detail


def test_errored_detail_dropped_for_large_bucket() -> None:
    collector = ResultCollector()
    for name in ("alpha", "beta", "gamma"):
        collector.record(OutcomeEvent(
            OutcomeKind.FAILED_EXECUTION, unit(name), raised(RuntimeError(name)),
        ))

    errored = collector.summarize().errored
    assert len(errored) == 3
    assert all(entry.detail is None for entry in errored)
    assert [entry.message for entry in errored] == [
        "RuntimeError [alpha]", "RuntimeError [beta]", "RuntimeError [gamma]",
    ]


def test_not_run_messages() -> None:
    collector = ResultCollector()
    collector.record(OutcomeEvent(OutcomeKind.SKIPPED_FIXTURE_SETUP_FAILED, unit("alpha")))
    collector.record(OutcomeEvent(
        OutcomeKind.FAILED_NO_CONSTRUCTOR, cause=TypeError("missing value"), fixture_name="Sample",
    ))

    not_run = collector.summarize().not_run
    assert not_run[0].message == "One-time setup failed"
    assert not_run[1].message == "TypeError [missing value]"


def test_reset_clears_all_buckets() -> None:
    collector = ResultCollector()
    collector.record(OutcomeEvent(OutcomeKind.SUCCESS, unit("alpha")))
    collector.record(OutcomeEvent(OutcomeKind.FAILED_EXECUTION, unit("beta"), RuntimeError()))

    collector.reset()

    assert collector.summarize().total == 0


def test_format_cause_includes_chained_cause() -> None:
    inner = raised(KeyError("k"))
    outer = AssertionFailure("Expected ValueError but was KeyError")
    outer.__cause__ = inner

    text = format_cause(outer)
    assert text.startswith("unit_harness.assertions.AssertionFailure: Expected ValueError")
    assert "Caused by:" in text
    assert "KeyError: 'k'" in text


def test_format_cause_includes_exception_being_handled() -> None:
    try:
        try:
            {}["missing"]
        except KeyError:
            raise ValueError("bad lookup")
    except ValueError as e:
        text = format_cause(e)

    assert text.startswith("ValueError: bad lookup")
    assert "Caused by:\nKeyError: 'missing'" in text


def test_format_cause_honours_from_none() -> None:
    try:
        try:
            {}["missing"]
        except KeyError:
            raise ValueError("bad lookup") from None
    except ValueError as e:
        text = format_cause(e)

    assert "KeyError" not in text
    assert "Caused by:" not in text


def test_format_cause_stops_on_cyclic_chain() -> None:
    first = RuntimeError("first")
    second = RuntimeError("second")
    first.__cause__ = second
    second.__cause__ = first

    text = format_cause(first)

    assert text.count("Caused by:") == 1
    assert text.splitlines() == ["RuntimeError: first", "Caused by:", "RuntimeError: second"]

"""Assertion helpers for test cases.

Every helper raises AssertionFailure, an AssertionError subclass, so a failed
check is reported as an assertion failure rather than an execution error.
A bare ``assert`` statement is classified the same way.
"""

from typing import Any, Optional


class AssertionFailure(AssertionError):
    """Raised when a test assertion does not hold."""


def is_true(condition: Any, msg: str = "") -> None:
    if not condition:
        raise AssertionFailure(msg)


def is_false(condition: Any, msg: str = "") -> None:
    is_true(not condition, msg)


def are_equal(expected: Any, actual: Any, msg: Optional[str] = None) -> None:
    if msg is None:
        msg = f"Not equal. Expected={expected!r} Actual={actual!r}"
    is_true(expected == actual, msg)


def are_same(expected: Any, actual: Any, msg: Optional[str] = None) -> None:
    if msg is None:
        msg = f"Not same. Expected={expected!r} to be same as Actual={actual!r}"
    is_true(expected is actual, msg)


def are_not_same(expected: Any, actual: Any, msg: Optional[str] = None) -> None:
    if msg is None:
        msg = (
            f"Same. Expected={expected!r}@{id(expected):#x} "
            f"to not be same as Actual={actual!r}@{id(actual):#x}"
        )
    is_true(expected is not actual, msg)


def are_equal_int(expected: int, actual: Any, msg: Optional[str] = None) -> None:
    """Compare after converting ``actual`` through ``int(str(actual))``."""
    if msg is None:
        msg = f"Expected={expected}(int) actual={actual!r}({type(actual).__name__})"
    try:
        value = int(str(actual))
    except ValueError:
        raise AssertionFailure(msg) from None
    is_true(value == expected, msg)


def are_close(
    expected: float,
    actual: Any,
    tolerance: float,
    msg: Optional[str] = None,
) -> None:
    """Assert ``|float(actual) - expected| < tolerance``."""
    if msg is None:
        msg = f"Expected={expected}(float) actual={actual!r}({type(actual).__name__})"
    try:
        value = float(str(actual))
    except ValueError:
        raise AssertionFailure(msg) from None
    is_true(abs(value - expected) < tolerance, msg)


def is_none(obj: Any, msg: Optional[str] = None) -> None:
    if msg is None:
        msg = f"{type(obj).__name__} was expected to be None but was {obj!r}"
    is_true(obj is None, msg)


def is_not_none(obj: Any, msg: str = "Expected to be not None but is None") -> None:
    is_true(obj is not None, msg)


def fail(msg: str = "Expected to fail") -> None:
    raise AssertionFailure(msg)

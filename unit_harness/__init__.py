"""unit-harness - a small test harness for tagged test classes."""

from .markers import (
    expected_exception,
    one_time_setup,
    one_time_teardown,
    setup,
    teardown,
    test_case,
    test_class,
)

__version__ = "0.1.0"

__all__ = [
    "expected_exception",
    "one_time_setup",
    "one_time_teardown",
    "setup",
    "teardown",
    "test_case",
    "test_class",
]

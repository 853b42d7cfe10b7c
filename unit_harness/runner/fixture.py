"""Fixture - a test class with its lifecycle methods and test cases.

Execution order for one fixture:
1. one-time setup (class level, once)
2. for each test case: fresh instance, setup, test case, teardown
3. one-time teardown (class level, once)

If the one-time setup fails, every test case is reported as skipped and the
one-time teardown is not run.
"""

import logging
import re
from typing import Any, Optional

from ..discovery.introspection import MethodDescriptor, TypeDescriptor
from ..markers import Tag
from .events import EventSink, OutcomeEvent, OutcomeKind
from .test_unit import TestUnit, UnitRole

logger = logging.getLogger(__name__)

# role -> (tag, class level)
LIFECYCLE_ROLES: dict[UnitRole, tuple[Tag, bool]] = {
    UnitRole.ONE_TIME_SETUP: (Tag.ONE_TIME_SETUP, True),
    UnitRole.ONE_TIME_TEARDOWN: (Tag.ONE_TIME_TEARDOWN, True),
    UnitRole.SETUP: (Tag.SETUP, False),
    UnitRole.TEARDOWN: (Tag.TEARDOWN, False),
}


def _signature_matches(method: MethodDescriptor, class_level: bool) -> bool:
    return (
        method.is_static == class_level
        and method.parameter_count == 0
        and not method.is_async
    )


def find_lifecycle_method(
    descriptor: TypeDescriptor,
    tag: Tag,
    class_level: bool,
) -> Optional[MethodDescriptor]:
    """Find the method bound to a lifecycle role.

    Looks at the methods declared on the type itself; if several qualify the
    last one wins. Without a match the lookup moves on to the base type.
    """
    for current in descriptor.chain():
        found = None
        for method in current.methods:
            if method.has_tag(tag) and _signature_matches(method, class_level):
                found = method
        if found is not None:
            return found
    return None


def find_test_cases(
    descriptor: TypeDescriptor,
    case_pattern: Optional[re.Pattern] = None,
) -> list[MethodDescriptor]:
    """Collect test-case methods from the type and its bases.

    A name already seen on a more derived type is an override and is not
    collected again, tagged or not. Coroutine functions are never collected
    since nothing would await them.
    """
    seen: set[str] = set()
    cases = []
    for current in descriptor.chain():
        for method in current.methods:
            if method.name in seen:
                continue
            seen.add(method.name)
            if not method.has_tag(Tag.TEST_CASE) or method.parameter_count != 0:
                continue
            if method.is_async:
                logger.warning("Skipping coroutine test case %s.%s", method.declaring_type, method.name)
                continue
            if case_pattern is not None and not case_pattern.search(method.name):
                continue
            cases.append(method)
    return cases


class Fixture:
    """A scanned test class ready to run."""

    def __init__(self, descriptor: TypeDescriptor, case_pattern: Optional[re.Pattern] = None):
        self.descriptor = descriptor
        self.case_pattern = case_pattern
        self.test_cases: list[TestUnit] = []
        self.lifecycle: dict[UnitRole, TestUnit] = {}

    @property
    def name(self) -> str:
        return self.descriptor.name

    @property
    def test_count(self) -> int:
        return len(self.test_cases)

    @property
    def one_time_setup(self) -> Optional[TestUnit]:
        return self.lifecycle.get(UnitRole.ONE_TIME_SETUP)

    @property
    def one_time_teardown(self) -> Optional[TestUnit]:
        return self.lifecycle.get(UnitRole.ONE_TIME_TEARDOWN)

    @property
    def setup(self) -> Optional[TestUnit]:
        return self.lifecycle.get(UnitRole.SETUP)

    @property
    def teardown(self) -> Optional[TestUnit]:
        return self.lifecycle.get(UnitRole.TEARDOWN)

    @classmethod
    def scan(
        cls,
        descriptor: TypeDescriptor,
        case_pattern: Optional[re.Pattern] = None,
        sink: Optional[EventSink] = None,
    ) -> Optional["Fixture"]:
        """Build a fixture from a type descriptor.

        Args:
            descriptor: The test class.
            case_pattern: Optional filter on test-case names.
            sink: Receives FAILED_NO_CONSTRUCTOR if the class cannot be created.

        Returns:
            The fixture, or None when the class cannot be instantiated or no
            test case survives filtering.
        """
        fixture = cls(descriptor, case_pattern)

        try:
            descriptor.create_instance()
        except Exception as e:
            logger.debug("Can not instantiate %s: %s", descriptor.name, e)
            if sink is not None:
                sink.record(OutcomeEvent(
                    OutcomeKind.FAILED_NO_CONSTRUCTOR,
                    cause=e,
                    fixture_name=descriptor.name,
                ))
            return None

        for role, (tag, class_level) in LIFECYCLE_ROLES.items():
            method = find_lifecycle_method(descriptor, tag, class_level)
            if method is not None:
                fixture.lifecycle[role] = TestUnit(method, role, descriptor.type)

        fixture.test_cases = [
            TestUnit(method, UnitRole.TEST_CASE, descriptor.type)
            for method in find_test_cases(descriptor, case_pattern)
        ]

        if not fixture.test_cases:
            logger.debug("No test cases in %s, skipping", descriptor.name)
            return None

        return fixture

    def run(self, sink: EventSink) -> None:
        """Run every test case, each on a fresh instance.

        Args:
            sink: Receives every outcome event.
        """
        if self.one_time_setup is not None and not self.one_time_setup.execute(None, sink):
            # One-time setup failed: nothing else runs, not even one-time teardown
            for test_case in self.test_cases:
                sink.record(OutcomeEvent(OutcomeKind.SKIPPED_FIXTURE_SETUP_FAILED, test_case))
            return

        for test_case in self.test_cases:
            instance = self._new_instance(test_case, sink)
            if instance is None:
                continue

            # A failing setup is reported but the test case still runs
            if self.setup is not None:
                self.setup.execute(instance, sink)
            test_case.execute(instance, sink)
            if self.teardown is not None:
                self.teardown.execute(instance, sink)

        if self.one_time_teardown is not None:
            self.one_time_teardown.execute(None, sink)

    def _new_instance(self, test_case: TestUnit, sink: EventSink) -> Any:
        try:
            return self.descriptor.create_instance()
        except Exception as e:
            sink.record(OutcomeEvent(OutcomeKind.FAILED_NO_CONSTRUCTOR, test_case, e))
            return None

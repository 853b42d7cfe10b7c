"""Decorators that tag test classes and their methods.

The tags are plain attributes stored on the decorated function (or class);
the introspector reads them back at discovery time.

    @test_class
    class Calc:
        @one_time_setup
        @staticmethod
        def start():
            ...

        @test_case
        @expected_exception(ZeroDivisionError)
        def div_zero(self):
            1 / 0
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

TAGS_ATTRIBUTE = "__unit_harness_tags__"


class Tag(str, Enum):
    """Supported metadata tags."""
    TEST_CLASS = "test_class"
    TEST_CASE = "test_case"
    SETUP = "setup"
    TEARDOWN = "teardown"
    ONE_TIME_SETUP = "one_time_setup"
    ONE_TIME_TEARDOWN = "one_time_teardown"
    EXPECTED_EXCEPTION = "expected_exception"


@dataclass(frozen=True)
class ExpectedException:
    """Payload of the expected-exception tag."""
    kind: type
    message: Optional[str] = None

    @property
    def kind_name(self) -> str:
        return qualified_type_name(self.kind)


def qualified_type_name(kind: type) -> str:
    """Name of a class the way it is shown in reports (builtins unqualified)."""
    module = getattr(kind, "__module__", None)
    if module in (None, "builtins"):
        return kind.__qualname__
    return f"{module}.{kind.__qualname__}"


def _tag_target(obj: Any) -> Any:
    # staticmethod/classmethod objects keep the tags on the wrapped function
    if isinstance(obj, (staticmethod, classmethod)):
        return obj.__func__
    return obj


def attach_tag(obj: Any, tag: Tag, payload: Any = None) -> Any:
    """Attach a tag (with optional payload) and return the object unchanged."""
    target = _tag_target(obj)
    tags = target.__dict__.get(TAGS_ATTRIBUTE)
    if tags is None:
        tags = {}
        setattr(target, TAGS_ATTRIBUTE, tags)
    tags[tag] = payload
    return obj


def tags_of(obj: Any) -> dict[Tag, Any]:
    """Return the tags attached directly to an object (not inherited ones)."""
    target = _tag_target(obj)
    return dict(getattr(target, "__dict__", {}).get(TAGS_ATTRIBUTE, {}))


def class_tags(cls: type) -> dict[Tag, Any]:
    """Return the tags of a class, including tags inherited from its bases."""
    result: dict[Tag, Any] = {}
    for klass in reversed(cls.__mro__):
        result.update(tags_of(klass))
    return result


def test_class(cls: type) -> type:
    """Mark a class as a test fixture."""
    return attach_tag(cls, Tag.TEST_CLASS)


def test_case(func):
    """Mark a zero-argument instance method as a test case."""
    return attach_tag(func, Tag.TEST_CASE)


def setup(func):
    """Mark an instance method to run before every test case."""
    return attach_tag(func, Tag.SETUP)


def teardown(func):
    """Mark an instance method to run after every test case."""
    return attach_tag(func, Tag.TEARDOWN)


def one_time_setup(func):
    """Mark a static or class method to run once before all test cases."""
    return attach_tag(func, Tag.ONE_TIME_SETUP)


def one_time_teardown(func):
    """Mark a static or class method to run once after all test cases."""
    return attach_tag(func, Tag.ONE_TIME_TEARDOWN)


def expected_exception(kind: type, message: Optional[str] = None):
    """Declare that a test case passes only if it raises ``kind``.

    Args:
        kind: Exception class; subclasses are accepted as well.
        message: Optional substring the exception message must contain.
    """
    if not (isinstance(kind, type) and issubclass(kind, Exception)):
        raise TypeError(f"expected_exception needs an exception class, got {kind!r}")

    def decorator(func):
        return attach_tag(func, Tag.EXPECTED_EXCEPTION, ExpectedException(kind, message))

    return decorator


# Keep pytest from collecting the decorators when they are imported into
# test modules.
test_class.__test__ = False
test_case.__test__ = False

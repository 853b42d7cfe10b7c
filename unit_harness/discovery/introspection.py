"""Introspection of test modules.

Turns Python classes into TypeDescriptor / MethodDescriptor records that the
runner consumes. Descriptors are kept in an arena keyed by class, and every
TypeDescriptor points at the descriptor of its base class so lifecycle lookup
can walk the chain explicitly.
"""

import inspect
import logging
from dataclasses import dataclass, field
from types import ModuleType
from typing import Any, Iterator, Optional

from ..markers import ExpectedException, Tag, class_tags, tags_of

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MethodDescriptor:
    """A method declared on a class, with its metadata tags."""
    declaring_type: str
    name: str
    parameter_count: int
    is_static: bool
    is_async: bool = False
    tags: dict[Tag, Any] = field(default_factory=dict, compare=False)
    attribute: Any = field(default=None, repr=False, compare=False)

    def has_tag(self, tag: Tag) -> bool:
        return tag in self.tags

    @property
    def expected_exception(self) -> Optional[ExpectedException]:
        return self.tags.get(Tag.EXPECTED_EXCEPTION)

    def bind(self, instance: Any, owner: type):
        """Resolve the callable for an instance, or for ``owner`` when instance is None."""
        return self.attribute.__get__(instance, owner)


@dataclass(frozen=True)
class TypeDescriptor:
    """A class exported by a test module."""
    name: str
    type: type
    base: Optional["TypeDescriptor"]
    methods: tuple[MethodDescriptor, ...] = ()
    tags: dict[Tag, Any] = field(default_factory=dict, compare=False)

    @property
    def is_test_class(self) -> bool:
        return Tag.TEST_CLASS in self.tags

    def create_instance(self) -> Any:
        """Call the zero-argument constructor."""
        return self.type()

    def chain(self) -> Iterator["TypeDescriptor"]:
        """Yield this descriptor followed by its base descriptors."""
        current: Optional[TypeDescriptor] = self
        while current is not None:
            yield current
            current = current.base


def _parameter_count(func: Any, implicit: int) -> int:
    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError):
        return -1

    count = 0
    for param in signature.parameters.values():
        if param.kind in (param.VAR_POSITIONAL, param.VAR_KEYWORD):
            continue
        if param.default is not param.empty:
            continue
        count += 1
    return count - implicit


def describe_method(owner: type, name: str, attribute: Any) -> Optional[MethodDescriptor]:
    """Describe one class attribute, or return None if it is not a method."""
    if isinstance(attribute, staticmethod):
        func, is_static, implicit = attribute.__func__, True, 0
    elif isinstance(attribute, classmethod):
        func, is_static, implicit = attribute.__func__, True, 1
    elif inspect.isfunction(attribute):
        func, is_static, implicit = attribute, False, 1
    else:
        return None

    return MethodDescriptor(
        declaring_type=owner.__name__,
        name=name,
        parameter_count=_parameter_count(func, implicit),
        is_static=is_static,
        is_async=inspect.iscoroutinefunction(func),
        tags=tags_of(func),
        attribute=attribute,
    )


class Introspector:
    """Builds and caches type descriptors."""

    def __init__(self):
        self._arena: dict[type, TypeDescriptor] = {}

    def describe_type(self, cls: type) -> TypeDescriptor:
        """Describe a class and, recursively, its base chain."""
        cached = self._arena.get(cls)
        if cached is not None:
            return cached

        base_cls = cls.__bases__[0] if cls.__bases__ else None
        base = None
        if base_cls is not None and base_cls is not object:
            base = self.describe_type(base_cls)

        methods = []
        for name, attribute in vars(cls).items():
            method = describe_method(cls, name, attribute)
            if method is not None:
                methods.append(method)

        descriptor = TypeDescriptor(
            name=cls.__name__,
            type=cls,
            base=base,
            methods=tuple(methods),
            tags=class_tags(cls),
        )
        self._arena[cls] = descriptor
        return descriptor

    def describe_module(self, module: ModuleType) -> list[TypeDescriptor]:
        """Describe the classes a module exports, in definition order.

        A class is exported when it is listed in ``__all__`` or, without
        ``__all__``, when it is defined in the module under a public name.
        """
        exported = getattr(module, "__all__", None)
        descriptors = []

        for name, value in vars(module).items():
            if not inspect.isclass(value):
                continue
            if exported is not None:
                if name not in exported:
                    continue
            elif name.startswith("_") or value.__module__ != module.__name__:
                continue
            descriptors.append(self.describe_type(value))

        logger.debug(
            "Module %s exports %d types", module.__name__, len(descriptors)
        )
        return descriptors

"""Discovery module - module loading and type introspection."""

from .introspection import Introspector, MethodDescriptor, TypeDescriptor
from .loader import LoadError, load_module

__all__ = [
    "Introspector",
    "MethodDescriptor",
    "TypeDescriptor",
    "LoadError",
    "load_module",
]

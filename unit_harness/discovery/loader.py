"""Module loader for test modules.

Loads a test module either from a ``.py`` file path or by dotted import name.
"""

import hashlib
import importlib
import importlib.util
import logging
import sys
from pathlib import Path
from types import ModuleType
from typing import Union

logger = logging.getLogger(__name__)


class LoadError(RuntimeError):
    """Raised when a test module cannot be loaded."""

    def __init__(self, path: str, cause: BaseException):
        super().__init__(f"Can not load test module from {path}: {type(cause).__name__}: {cause}")
        self.path = path
        self.cause = cause


def _module_name_for(file_path: Path) -> str:
    """Synthetic, collision-free module name for a file path."""
    digest = hashlib.sha1(str(file_path).encode("utf-8")).hexdigest()[:8]
    return f"_unit_harness_{file_path.stem}_{digest}"


def load_module(path: Union[str, Path]) -> ModuleType:
    """Load a test module.

    Args:
        path: Path to a ``.py`` file, or a dotted module name.

    Returns:
        The imported module.

    Raises:
        LoadError: If the module is missing or raises while importing.
    """
    text = str(path)
    file_path = Path(text)

    if file_path.suffix == ".py" or file_path.exists():
        return _load_from_file(file_path)

    try:
        logger.debug("Importing test module %s", text)
        return importlib.import_module(text)
    except Exception as e:
        raise LoadError(text, e) from e


def _load_from_file(file_path: Path) -> ModuleType:
    file_path = file_path.resolve()
    source = str(file_path)

    if not file_path.is_file():
        raise LoadError(source, FileNotFoundError(f"Test module not found: {file_path}"))

    # Sibling imports inside the test module resolve against its directory
    parent = str(file_path.parent)
    if parent not in sys.path:
        sys.path.insert(0, parent)

    module_name = _module_name_for(file_path)
    spec = importlib.util.spec_from_file_location(module_name, file_path)
    if spec is None or spec.loader is None:
        raise LoadError(source, ImportError(f"Not an importable module: {file_path}"))

    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        logger.debug("Loading test module %s as %s", file_path, module_name)
        spec.loader.exec_module(module)
    except Exception as e:
        sys.modules.pop(module_name, None)
        raise LoadError(source, e) from e

    return module

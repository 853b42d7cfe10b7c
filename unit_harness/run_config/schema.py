"""Run configuration models.

Defines dataclasses for test targets, execution settings and YAML run files.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional


@dataclass
class RunTarget:
    """A test module and an optional ``Type[.Case]`` filter."""
    path: str
    filter: Optional[str] = None

    def __post_init__(self):
        self.path = str(self.path)
        if self.filter is not None:
            self.filter = self.filter.lstrip("+") or None

    def __str__(self) -> str:
        if self.filter:
            return f"{self.path} +{self.filter}"
        return self.path


@dataclass
class RunConfig:
    """Configuration for test execution."""
    save_report: bool = False
    report_dir: Optional[Path] = None
    json_output: bool = False


@dataclass
class RunPlan:
    """Everything one invocation runs."""
    targets: list[RunTarget] = field(default_factory=list)
    config: RunConfig = field(default_factory=RunConfig)


@dataclass
class ValidationError:
    """A single validation error or warning."""
    path: str
    message: str


@dataclass
class ValidationResult:
    """Result of run plan validation."""
    valid: bool
    errors: list[ValidationError] = field(default_factory=list)
    warnings: list[ValidationError] = field(default_factory=list)

"""Run config module - targets, settings and YAML run files."""

from .schema import (
    RunConfig,
    RunPlan,
    RunTarget,
    ValidationError,
    ValidationResult,
)
from .parser import parse_run_data, parse_run_file, parse_target_args, split_filter
from .validator import validate_run_plan

__all__ = [
    "RunConfig",
    "RunPlan",
    "RunTarget",
    "ValidationError",
    "ValidationResult",
    "parse_run_data",
    "parse_run_file",
    "parse_target_args",
    "split_filter",
    "validate_run_plan",
]

"""Run plan validator.

Validates parsed RunPlan objects before anything is loaded.
"""

from pathlib import Path

from .parser import split_filter
from .schema import RunPlan, ValidationError, ValidationResult


def validate_run_plan(plan: RunPlan) -> ValidationResult:
    """Validate a parsed RunPlan.

    Checks:
    - Module file paths exist (dotted module names are checked at load time)
    - Filters compile as ``Type[.Case]`` regular expressions
    - Report settings are consistent

    Args:
        plan: Parsed RunPlan to validate.

    Returns:
        ValidationResult with errors and warnings.
    """
    errors: list[ValidationError] = []
    warnings: list[ValidationError] = []

    for i, target in enumerate(plan.targets):
        path = f"modules[{i}]"

        if not target.path:
            errors.append(ValidationError(
                path=f"{path}.path",
                message="'path' is required and must not be empty.",
            ))
            continue

        module_path = Path(target.path)
        if module_path.suffix == ".py" and not module_path.is_file():
            errors.append(ValidationError(
                path=f"{path}.path",
                message=f"Test module not found: {target.path}",
            ))

        if target.filter:
            try:
                split_filter(target.filter)
            except ValueError as e:
                errors.append(ValidationError(
                    path=f"{path}.filter",
                    message=str(e),
                ))

    if not plan.targets:
        warnings.append(ValidationError(
            path="modules",
            message="No modules defined. Nothing will run.",
        ))

    if plan.config.report_dir is not None and not plan.config.save_report:
        warnings.append(ValidationError(
            path="report.dir",
            message="'dir' is set but 'save' is false; no report will be written.",
        ))

    return ValidationResult(
        valid=len(errors) == 0,
        errors=errors,
        warnings=warnings,
    )

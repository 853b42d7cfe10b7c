"""Run file and argument parsing.

Parses YAML run files and ``MODULE [+FILTER]`` argument lists into RunPlan /
RunTarget objects.
"""

import re
from pathlib import Path
from typing import Optional, Union

import yaml

from .schema import RunConfig, RunPlan, RunTarget


def parse_run_file(file_path: Union[str, Path]) -> RunPlan:
    """Parse a YAML run file into a RunPlan.

    Relative module paths are resolved against the run file's directory.

    Args:
        file_path: Path to the YAML run file.

    Returns:
        Parsed RunPlan.

    Raises:
        FileNotFoundError: If the run file doesn't exist.
        ValueError: If the YAML is malformed or missing required fields.
    """
    file_path = Path(file_path)

    if not file_path.exists():
        raise FileNotFoundError(f"Run file not found: {file_path}")

    if file_path.suffix not in (".yaml", ".yml"):
        raise ValueError(f"Expected .yaml or .yml file, got: {file_path.suffix}")

    with open(file_path, "r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Malformed YAML in {file_path}: {e}") from e

    if data is None:
        raise ValueError(f"Empty run file: {file_path}")

    plan = parse_run_data(data, source=str(file_path))

    base_dir = file_path.parent
    for target in plan.targets:
        candidate = Path(target.path)
        if candidate.suffix == ".py" and not candidate.is_absolute():
            target.path = str(base_dir / candidate)
    if plan.config.report_dir is not None and not plan.config.report_dir.is_absolute():
        plan.config.report_dir = base_dir / plan.config.report_dir

    return plan


def parse_run_data(data: dict, source: str = "<inline>") -> RunPlan:
    """Parse a run plan from a dictionary (already loaded YAML).

    Args:
        data: Dictionary with run data.
        source: Source identifier for error messages.

    Returns:
        Parsed RunPlan.

    Raises:
        ValueError: If required fields are missing or malformed.
    """
    if not isinstance(data, dict):
        raise ValueError(f"Run file must be a YAML mapping, got {type(data).__name__}")

    if "modules" not in data:
        raise ValueError(f"Missing required field 'modules' in {source}")

    modules_data = data["modules"]
    if not isinstance(modules_data, list):
        raise ValueError(f"'modules' must be a list in {source}")

    targets = []
    for i, module_data in enumerate(modules_data):
        # Shorthand: a bare string is a module without a filter
        if isinstance(module_data, str):
            targets.append(RunTarget(path=module_data))
            continue
        if not isinstance(module_data, dict):
            raise ValueError(f"Module {i} must be a mapping or a string in {source}")
        _require_fields(module_data, ["path"], f"modules[{i}]", source)
        targets.append(RunTarget(**{
            k: v for k, v in module_data.items()
            if k in RunTarget.__dataclass_fields__
        }))

    report_data = data.get("report", {}) or {}
    if not isinstance(report_data, dict):
        raise ValueError(f"'report' must be a mapping in {source}")

    config = RunConfig(
        save_report=bool(report_data.get("save", False)),
        report_dir=Path(report_data["dir"]) if report_data.get("dir") else None,
        json_output=bool(report_data.get("json", False)),
    )

    return RunPlan(targets=targets, config=config)


def parse_target_args(args: list[str]) -> list[RunTarget]:
    """Parse ``MODULE [+FILTER] MODULE [+FILTER] ...`` into targets.

    Raises:
        ValueError: If a filter is not preceded by a module.
    """
    targets: list[RunTarget] = []
    i = 0

    while i < len(args):
        arg = args[i]
        if arg.startswith("+"):
            raise ValueError(f"Filter '{arg}' must follow a module path")

        target = RunTarget(path=arg)
        if i + 1 < len(args) and args[i + 1].startswith("+"):
            i += 1
            target.filter = args[i][1:] or None
        targets.append(target)

        i += 1

    return targets


def split_filter(
    expression: Optional[str],
) -> tuple[Optional[re.Pattern], Optional[re.Pattern]]:
    """Split ``Type[.Case]`` into a type pattern and a case pattern.

    The split happens at the first dot; each part is a regular expression
    matched anywhere in the name. An empty part means "no restriction".

    Raises:
        ValueError: If a part is not a valid regular expression.
    """
    if not expression:
        return None, None

    type_part, _, case_part = expression.lstrip("+").partition(".")
    return _compile(type_part, "type"), _compile(case_part, "test case")


def _compile(pattern: str, what: str) -> Optional[re.Pattern]:
    if not pattern:
        return None
    try:
        return re.compile(pattern)
    except re.error as e:
        raise ValueError(f"Invalid {what} pattern '{pattern}': {e}") from e


def _require_fields(
    data: dict, fields: list[str], context: str, source: str
) -> None:
    """Check that required fields exist in a dictionary."""
    for field_name in fields:
        if field_name not in data:
            raise ValueError(
                f"Missing required field '{field_name}' in {context} ({source})"
            )

"""CLI entry point for unit-harness.

    unit-harness MODULE [+FILTER] [MODULE [+FILTER] ...] [options]
    python -m unit_harness.cli MODULE [+FILTER] ... [options]

FILTER is ``Type`` or ``Type.Case``; both parts are regular expressions.
"""

import json
import logging
import sys
from pathlib import Path
from typing import Optional

import click

from . import __version__

EXIT_USAGE = 2
EXIT_INTERRUPTED = 130


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("targets", nargs=-1)
@click.option(
    "-c", "--config", "config_file",
    type=click.Path(dir_okay=False, path_type=Path),
    help="YAML run file listing modules, filters and report settings.",
)
@click.option("--json", "json_output", is_flag=True, help="Print a JSON result envelope on stdout.")
@click.option("--save-report", is_flag=True, help="Save a JSON report file.")
@click.option(
    "--report-dir",
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory for saved reports.",
)
@click.option("-v", "--verbose", is_flag=True, help="Log discovery details to stderr.")
@click.version_option(__version__, prog_name="unit-harness")
@click.pass_context
def main(
    ctx: click.Context,
    targets: tuple[str, ...],
    config_file: Optional[Path],
    json_output: bool,
    save_report: bool,
    report_dir: Optional[Path],
    verbose: bool,
):
    """Run the test classes in one or more test modules.

    \b
    Examples:
        unit-harness tests/calc_tests.py
        unit-harness tests/calc_tests.py +Calc.div_zero other_tests.py +Other
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    from .run_config import (
        RunPlan,
        parse_run_file,
        parse_target_args,
        validate_run_plan,
    )

    # Build the run plan
    try:
        plan = parse_run_file(config_file) if config_file else RunPlan()
        plan.targets.extend(parse_target_args(list(targets)))
    except (FileNotFoundError, ValueError) as e:
        output_error(str(e), json_output)
        sys.exit(EXIT_USAGE)

    config = plan.config
    config.save_report = config.save_report or save_report
    config.json_output = config.json_output or json_output
    if report_dir is not None:
        config.report_dir = report_dir

    if not plan.targets:
        click.echo(ctx.get_help())
        return

    validation = validate_run_plan(plan)
    for warning in validation.warnings:
        click.echo(f"Warning: {warning.path}: {warning.message}", err=True)
    if not validation.valid:
        errors_str = "; ".join(f"{e.path}: {e.message}" for e in validation.errors)
        output_error(f"Invalid run configuration: {errors_str}", config.json_output)
        sys.exit(EXIT_USAGE)

    from .reporting import ConsoleReporter, JsonReporter
    from .runner import TestDriver

    driver = TestDriver(config=config, reporter=ConsoleReporter(err=config.json_output))

    try:
        report = driver.run(plan.targets)
    except KeyboardInterrupt:
        output_error("Test run interrupted by user", config.json_output)
        sys.exit(EXIT_INTERRUPTED)

    if config.json_output:
        reporter = JsonReporter()
        flow_output = reporter.generate_flow_output(reporter.generate(report), report.report_path)
        click.echo(json.dumps(flow_output, ensure_ascii=False))
    elif report.report_path:
        click.echo(f"Report saved: {report.report_path}")

    sys.exit(report.exit_code)


def output_error(message: str, json_output: bool = False, **extra) -> None:
    """Report an error, as a JSON envelope when JSON output is on."""
    if not json_output:
        click.echo(f"Error: {message}", err=True)
        return

    output = {
        "success": False,
        "command": "test",
        "data": extra or None,
        "message": message,
    }
    click.echo(json.dumps(output, ensure_ascii=False))


if __name__ == "__main__":
    main()

"""JSON report generator for test runs.

Generates structured JSON reports from per-module run results.
"""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from ..runner.driver import ModuleResult, RunReport


class JsonReporter:
    """Generates JSON reports from test run results."""

    def generate(self, run_report: "RunReport") -> dict[str, Any]:
        """Generate a JSON report from a run.

        Args:
            run_report: Per-module results of the run.

        Returns:
            Report dictionary ready for JSON serialization.
        """
        modules = [self._module_section(m) for m in run_report.modules]

        return {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "status": "passed" if run_report.all_passed else "failed",
            "summary": {
                "modules": len(modules),
                "modules_failed": sum(1 for m in run_report.modules if not m.all_passed),
            },
            "modules": modules,
        }

    def _module_section(self, result: "ModuleResult") -> dict[str, Any]:
        stats = result.stats
        return {
            "module": result.target.path,
            "filter": result.target.filter,
            "status": "passed" if result.all_passed else "failed",
            "summary": stats.to_dict(),
            "fixtures": list(result.fixtures),
            "passed": [e.name for e in stats.passed],
            "failed": [e.to_dict() for e in stats.failed],
            "errored": [e.to_dict() for e in stats.errored],
            "not_run": [e.to_dict() for e in stats.not_run],
            "error": result.error,
        }

    def save(self, report: dict[str, Any], path: Path) -> Path:
        """Save report to a JSON file.

        Args:
            report: Report dictionary.
            path: Output file path.

        Returns:
            Path to the saved file.
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w", encoding="utf-8") as f:
            json.dump(report, f, indent=2, ensure_ascii=False)

        return path

    def to_json_string(self, report: dict[str, Any], pretty: bool = True) -> str:
        """Convert report to JSON string."""
        if pretty:
            return json.dumps(report, indent=2, ensure_ascii=False)
        return json.dumps(report, ensure_ascii=False)

    def generate_flow_output(
        self,
        report: dict[str, Any],
        report_path: Optional[str] = None,
    ) -> dict[str, Any]:
        """Generate the machine-readable command envelope.

        {
            "success": bool,
            "command": "test",
            "data": { ... },
            "message": str
        }

        Args:
            report: Report dictionary from generate().
            report_path: Path where report was saved.

        Returns:
            Envelope dictionary.
        """
        all_passed = report["status"] == "passed"

        data: dict[str, Any] = {
            "modules": [
                {
                    "module": m["module"],
                    "status": m["status"],
                    **m["summary"],
                }
                for m in report["modules"]
            ],
        }

        if report_path:
            data["report_path"] = report_path

        load_errors = [m for m in report["modules"] if m.get("error")]
        if load_errors:
            message = f"Test failed: {load_errors[0]['error']}"
        elif not all_passed:
            failed = report["summary"]["modules_failed"]
            message = f"{failed} of {report['summary']['modules']} modules had failures"
        else:
            message = "All tests passed"

        return {
            "success": all_passed,
            "command": "test",
            "data": data,
            "message": message,
        }

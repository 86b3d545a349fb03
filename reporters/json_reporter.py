"""JSON report generator for headless Jasmine runs."""
from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List

from reporters.base import BaseReporter, ReportFormat
from suite_types import SuiteResult


class JSONReporter(BaseReporter):
    """Generate machine-readable JSON reports."""

    @property
    def format(self) -> ReportFormat:
        return ReportFormat.JSON

    def _result_to_dict(self, result: SuiteResult) -> Dict[str, Any]:
        """Convert SuiteResult to JSON-serializable dict."""
        if result.is_error:
            return {"file": None, "error": result.error, "passed": False}
        return {
            "file": result.file,
            "passed": result.passed,
            "stats": result.stats.model_dump(),
            "failed_specs": [spec.description for spec in result.failed_specs],
            "suites": [suite.model_dump() for suite in result.suites],
        }

    def generate(self, results: List[SuiteResult], output_dir: Path) -> Path:
        """Generate a combined JSON report for the results of one run."""
        output_dir.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.utcnow().strftime("%Y%m%d-%H%M%S")
        target = output_dir / f"jasmine-{timestamp}.json"

        finished = [r for r in results if not r.is_error]
        passed = sum(1 for r in finished if r.passed)

        report_data = {
            "generated_at": datetime.utcnow().isoformat(),
            "report_version": "1.0",
            "results": [self._result_to_dict(r) for r in results],
            "summary": {
                "files": len(results),
                "passed": passed,
                "failed": len(finished) - passed,
                "errors": len(results) - len(finished),
                "specs": sum(r.stats.specs for r in finished),
                "failures": sum(r.stats.failures for r in finished),
                "time_seconds": round(sum(float(r.stats.time) for r in finished), 3),
            },
            "failed_files": [r.file for r in finished if not r.passed],
        }

        target.write_text(json.dumps(report_data, indent=2), encoding="utf-8")
        return target

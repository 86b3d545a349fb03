"""JUnit XML report generator for CI integration."""
from __future__ import annotations

import html
from datetime import datetime
from pathlib import Path
from typing import List

from reporters.base import BaseReporter, ReportFormat
from suite_types import SuiteResult, format_error_message


class JUnitReporter(BaseReporter):
    """Generate JUnit XML reports for CI/CD integration."""

    @property
    def format(self) -> ReportFormat:
        return ReportFormat.JUNIT

    def _escape_xml(self, text: str) -> str:
        """Escape special XML characters."""
        return html.escape(str(text), quote=True)

    def _format_timestamp(self, dt: datetime) -> str:
        """Format datetime for JUnit XML."""
        return dt.strftime("%Y-%m-%dT%H:%M:%S")

    def _build_error_suite_xml(self, result: SuiteResult, index: int) -> str:
        """Build XML for a run that failed before any spec executed."""
        message = self._escape_xml(result.error)
        return "\n".join([
            f'  <testsuite name="jasmine-error-{index}" tests="1" failures="0" errors="1" time="0.000">',
            '    <testcase classname="jasmine" name="runner" time="0.000">',
            f'      <error message="{message}" type="SuiteSystemError"/>',
            "    </testcase>",
            "  </testsuite>",
        ])

    def _build_testsuite_xml(self, result: SuiteResult) -> str:
        """Build XML for the specs of one spec file."""
        lines = []
        name = self._escape_xml(result.file or "jasmine")
        stats = result.stats
        lines.append(
            f'  <testsuite name="{name}" '
            f'tests="{stats.specs}" '
            f'failures="{stats.failures}" '
            f'errors="0" '
            f'time="{float(stats.time):.3f}">'
        )

        for suite in result.suites:
            classname = self._escape_xml(suite.description)
            for spec in suite.specs:
                spec_name = self._escape_xml(spec.description)
                if spec.passed:
                    lines.append(f'    <testcase classname="{classname}" name="{spec_name}"/>')
                    continue
                short = self._escape_xml(format_error_message(spec.error_message, True))
                lines.append(f'    <testcase classname="{classname}" name="{spec_name}">')
                lines.append(f'      <failure message="{short}" type="SpecFailure"><![CDATA[')
                lines.append(format_error_message(spec.error_message, False))
                lines.append("]]></failure>")
                lines.append("    </testcase>")

        lines.append("  </testsuite>")
        return "\n".join(lines)

    def generate(self, results: List[SuiteResult], output_dir: Path) -> Path:
        """Generate a JUnit XML report with one testsuite per spec file."""
        output_dir.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.utcnow().strftime("%Y%m%d-%H%M%S")
        target = output_dir / f"jasmine-{timestamp}.xml"

        finished = [r for r in results if not r.is_error]
        tests = sum(r.stats.specs for r in finished) + (len(results) - len(finished))
        failures = sum(r.stats.failures for r in finished)
        errors = len(results) - len(finished)
        total_time = sum(float(r.stats.time) for r in finished)

        lines = ['<?xml version="1.0" encoding="UTF-8"?>']
        lines.append(
            f'<testsuites name="Jasmine" '
            f'tests="{tests}" '
            f'failures="{failures}" '
            f'errors="{errors}" '
            f'time="{total_time:.3f}" '
            f'timestamp="{self._format_timestamp(datetime.utcnow())}">'
        )

        for index, result in enumerate(results, 1):
            if result.is_error:
                lines.append(self._build_error_suite_xml(result, index))
            else:
                lines.append(self._build_testsuite_xml(result))

        lines.append("</testsuites>")

        target.write_text("\n".join(lines), encoding="utf-8")
        return target

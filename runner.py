"""Run Jasmine specs headlessly and aggregate their results."""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from config import ReportingConfig, RunOptions, load_config
from exceptions import JasmineError
from executor import SuiteExecutor
from reporters import (
    ConsoleReporter,
    DesktopNotifier,
    JSONReporter,
    JUnitReporter,
    LineReporter,
    ReportFormat,
)
from result_parser import ResultParser
from server import HarnessServer, ServerLauncher
from spec_loader import clean_paths, discover_specs
from suite_address import SuiteAddressBuilder
from suite_types import RunReport, SuiteResult


class JasmineRunner:
    """Run spec targets one after another and aggregate their results."""

    def __init__(
        self,
        reporter: LineReporter,
        run_all_target: str = "spec/javascripts",
        executor: Optional[SuiteExecutor] = None,
        parser: Optional[ResultParser] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.reporter = reporter
        self.run_all_target = run_all_target
        self.logger = logger or logging.getLogger("jasmine_runner")
        self.executor = executor or SuiteExecutor(
            reporter,
            SuiteAddressBuilder(run_all_target, logger=self.logger),
            logger=self.logger,
        )
        self.parser = parser or ResultParser(reporter)

    def run(self, targets: Sequence[str], options: RunOptions) -> RunReport:
        """
        Run the supplied spec files or the spec directory.

        An empty target list is not a success: nothing runs and
        ``(False, [])`` is returned without reporting anything.
        """
        if not targets:
            return RunReport(False, [])

        self.notify_start_message(targets)

        results: List[SuiteResult] = []
        for target in targets:
            output = self.executor.run(target, options)
            result = self.parser.evaluate(output, target, options)
            if result is not None:
                results.append(result)

        return RunReport(
            self.response_status_for(results),
            self.failed_paths_from(results),
            results,
        )

    def notify_start_message(self, targets: Sequence[str]) -> None:
        if list(targets) == [self.run_all_target]:
            message = "Run all Jasmine suites"
        else:
            plural = "" if len(targets) == 1 else "s"
            message = f"Run Jasmine suite{plural} {' '.join(targets)}"
        self.reporter.info(message)

    @staticmethod
    def response_status_for(results: Sequence[SuiteResult]) -> bool:
        return not any(r.has_error_key or not r.passed for r in results)

    @staticmethod
    def failed_paths_from(results: Sequence[SuiteResult]) -> List[str]:
        # Error results carry no file and are left out
        return [r.file for r in results if not r.passed and r.file is not None]


def generate_reports(
    results: List[SuiteResult],
    reporting: ReportingConfig,
    logger: logging.Logger,
) -> List[Path]:
    """Write the run report files selected by the configured format."""
    output_format = reporting.output_format
    output_dir = reporting.reports_folder
    paths: List[Path] = []

    if output_format in (ReportFormat.JSON, ReportFormat.ALL):
        path = JSONReporter().generate(results, output_dir)
        logger.info(f"JSON report: {path}")
        paths.append(path)

    if output_format in (ReportFormat.JUNIT, ReportFormat.ALL):
        path = JUnitReporter().generate(results, output_dir)
        logger.info(f"JUnit report: {path}")
        paths.append(path)

    return paths


def run_from_cli_args(args: argparse.Namespace, logger: logging.Logger) -> int:
    """Entry point shared by the CLI script."""
    config_path = Path(args.config) if args.config else None
    cli_overrides = {
        "server": args.server,
        "port": args.port,
        "environment": args.environment,
        "server_timeout": args.server_timeout,
        "spec_dir": args.spec_dir,
        "jasmine_url": args.jasmine_url,
        "phantomjs_bin": args.phantomjs_bin,
        "notification": args.notification,
        "hide_success": args.hide_success,
        "output_format": args.output_format,
        "reports_dir": args.reports_dir,
        "verbose": args.verbose or None,
    }
    cli_overrides = {k: v for k, v in cli_overrides.items() if v is not None}

    config = load_config(config_path, cli_overrides)
    spec_dir = config.spec_dir

    if args.list:
        for path in discover_specs(spec_dir):
            print(path)
        return 0

    targets = clean_paths(args.paths or [spec_dir], spec_dir)
    if not targets:
        logger.warning("No Jasmine specs found matching the given paths")
        return 1

    options = config.run_options
    notifier = DesktopNotifier(logger=logger) if options.notification else None
    reporter = ConsoleReporter(notifier=notifier, logger=logger)
    runner = JasmineRunner(reporter, run_all_target=spec_dir, logger=logger)
    server = HarnessServer(
        launcher=ServerLauncher(
            timeout=config.server.timeout,
            poll_interval=config.server.poll_interval,
            logger=logger,
        ),
        logger=logger,
    )

    try:
        server.start(
            config.server.server_strategy,
            config.server.port,
            config.server.environment,
            spec_dir,
        )
        report = runner.run(targets, options)
    finally:
        server.stop()

    generate_reports(report.results, config.reporting, logger)

    if report.failed_files:
        logger.info(f"Failed specs: {' '.join(report.failed_files)}")

    return 0 if report.overall_passed else 1


def _build_arg_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser."""
    parser = argparse.ArgumentParser(
        description="Run Jasmine specs headlessly with PhantomJS.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s                                    # Run all suites in the spec dir
  %(prog)s spec/javascripts/models_spec.js    # Run one spec file
  %(prog)s --server none --jasmine-url http://localhost:3000/jasmine
  %(prog)s --output-format junit              # Write a JUnit report
        """,
    )

    parser.add_argument(
        "paths",
        nargs="*",
        help="Spec files to run (default: the whole spec dir)",
    )

    # Server options
    server_group = parser.add_argument_group("Server Options")
    server_group.add_argument(
        "--server",
        help="auto, thin, mongrel, webrick, jasmine_gem, none or a rake task (default: auto)",
    )
    server_group.add_argument(
        "--port",
        type=int,
        help="Port of the Jasmine test server (default: 8888)",
    )
    server_group.add_argument(
        "--environment", "-e",
        help="Rack environment of the test server (default: development)",
    )
    server_group.add_argument(
        "--server-timeout",
        type=float,
        metavar="SECONDS",
        help="Seconds to wait for the test server (default: 15)",
    )

    # Run options
    run_group = parser.add_argument_group("Run Options")
    run_group.add_argument(
        "--spec-dir",
        help="Spec directory (default: spec/javascripts)",
    )
    run_group.add_argument(
        "--jasmine-url",
        help="URL of the Jasmine test runner (default: http://localhost:<port>/jasmine)",
    )
    run_group.add_argument(
        "--phantomjs-bin",
        help="Location of the PhantomJS binary (default: phantomjs)",
    )
    run_group.add_argument(
        "--no-notification",
        dest="notification",
        action="store_const",
        const=False,
        help="Disable desktop notifications",
    )
    run_group.add_argument(
        "--hide-success",
        action="store_const",
        const=True,
        help="Hide passing specs and the success notification",
    )
    run_group.add_argument(
        "--config",
        help="Path to config file (default: config.json if exists)",
    )
    run_group.add_argument(
        "--list",
        action="store_true",
        help="List the spec files in the spec dir and exit",
    )

    # Output options
    output_group = parser.add_argument_group("Output Options")
    output_group.add_argument(
        "--output-format",
        choices=["none", "json", "junit", "all"],
        help="Run report file format (default: none)",
    )
    output_group.add_argument(
        "--reports-dir",
        help="Directory for saving run reports (default: reports)",
    )
    output_group.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose output",
    )
    output_group.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Suppress non-essential output",
    )

    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Main entry point."""
    parser = _build_arg_parser()
    args = parser.parse_args(argv)

    if args.quiet:
        log_level = logging.WARNING
    elif args.verbose:
        log_level = logging.DEBUG
    else:
        log_level = logging.INFO

    logging.basicConfig(
        level=log_level,
        format="[%(levelname)s] %(message)s" if not args.verbose else "[%(levelname)s] %(name)s: %(message)s",
    )
    logger = logging.getLogger("jasmine_runner")

    try:
        exit_code = run_from_cli_args(args, logger)
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        exit_code = 130
    except JasmineError as exc:
        logger.error(f"Error: {exc}")
        exit_code = 1
    except Exception as exc:
        logger.exception(f"Unexpected error: {exc}")
        exit_code = 1

    sys.exit(exit_code)


if __name__ == "__main__":
    main()

"""Spawn the headless browser against the Jasmine harness."""
from __future__ import annotations

import logging
import subprocess
from typing import Optional

from config import RunOptions
from exceptions import ConfigurationError, LaunchFailureError
from reporters.base import LineReporter
from suite_address import SuiteAddressBuilder


class RawOutput:
    """Standard output of one browser process, read once then closed."""

    def __init__(self, process: subprocess.Popen):
        self.process = process

    def read(self) -> str:
        return self.process.stdout.read()

    @property
    def closed(self) -> bool:
        return self.process.stdout.closed

    def close(self) -> None:
        """Close the pipe and reap the process."""
        if not self.process.stdout.closed:
            self.process.stdout.close()
        self.process.wait()

    def __enter__(self) -> "RawOutput":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class SuiteExecutor:
    """Run the PhantomJS runner script for a single target."""

    def __init__(
        self,
        reporter: LineReporter,
        address_builder: Optional[SuiteAddressBuilder] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.reporter = reporter
        self.address_builder = address_builder or SuiteAddressBuilder()
        self.logger = logger or logging.getLogger("jasmine_runner")

    def command(self, address: str, options: RunOptions) -> list[str]:
        return [options.phantomjs_bin, str(options.runner_script), address]

    def run(self, target: str, options: RunOptions) -> RawOutput:
        """Start the browser and return its output stream without waiting for it."""
        if not options.jasmine_url:
            raise ConfigurationError("No Jasmine runner URL configured")
        address = self.address_builder.build_address(target, options.jasmine_url)
        self.reporter.info(f"Run Jasmine suite at {address}")

        command = self.command(address, options)
        self.logger.debug(f"Executing: {' '.join(command)}")
        try:
            process = subprocess.Popen(
                command,
                stdout=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except OSError as exc:
            raise LaunchFailureError(
                f"Cannot run PhantomJS: {exc}",
                binary=options.phantomjs_bin,
                target=target,
            ) from exc
        return RawOutput(process)

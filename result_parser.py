"""Decode and report the JSON payload written by the PhantomJS runner."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from pydantic import ValidationError

from config import RunOptions
from exceptions import MalformedPayloadError
from reporters.base import LineReporter, Notification
from suite_types import SuiteResult, format_error_message

__all__ = [
    "DecodeOutcome",
    "DecodeStatus",
    "ResultParser",
    "decode_payload",
    "format_error_message",
    "stats_message",
]


class DecodeStatus(str, Enum):
    """How a runner payload was decoded."""
    SUCCESS = "success"
    ERROR = "error"
    MALFORMED = "malformed"


@dataclass(frozen=True)
class DecodeOutcome:
    """Result of decoding one payload."""

    status: DecodeStatus
    raw: str
    result: Optional[SuiteResult] = None
    failure: Optional[MalformedPayloadError] = None


def parse_result(raw: str) -> SuiteResult:
    """Parse a payload, raising MalformedPayloadError when it is not usable."""
    try:
        return SuiteResult.model_validate_json(raw)
    except ValidationError as exc:
        # pydantic reports invalid JSON and a wrong shape the same way
        first = exc.errors()[0]
        raise MalformedPayloadError(first.get("msg", str(exc)), raw=raw) from exc


def decode_payload(raw: str) -> DecodeOutcome:
    try:
        result = parse_result(raw)
    except MalformedPayloadError as exc:
        return DecodeOutcome(DecodeStatus.MALFORMED, raw, failure=exc)
    if result.is_error:
        return DecodeOutcome(DecodeStatus.ERROR, raw, result=result)
    return DecodeOutcome(DecodeStatus.SUCCESS, raw, result=result)


def stats_message(result: SuiteResult) -> str:
    stats = result.stats
    plural = "" if stats.failures == 1 else "s"
    return f"{stats.specs} specs, {stats.failures} failure{plural}\nin {stats.time} seconds"


class ResultParser:
    """Evaluate runner output and report it to the console and notifications."""

    def __init__(self, reporter: LineReporter):
        self.reporter = reporter

    def evaluate(self, output, target: str, options: RunOptions) -> Optional[SuiteResult]:
        """
        Read, decode and report one runner output.

        Args:
            output: Readable runner output; closed before returning
            target: Spec file or directory the output belongs to
            options: Options of the current run

        Returns:
            The suite result, or None when the output could not be decoded
        """
        try:
            raw = output.read()
        finally:
            output.close()

        outcome = decode_payload(raw)

        if outcome.status is DecodeStatus.MALFORMED:
            self.reporter.error(f"Cannot decode JSON from PhantomJS runner: {outcome.failure.message}")
            self.reporter.error(f"Please report an issue at: {options.issues_url}")
            self.reporter.error(raw)
            return None

        if outcome.status is DecodeStatus.ERROR:
            self.notify_runtime_error(outcome.result, options)
            return outcome.result

        result = outcome.result.for_file(target)
        self.notify_spec_result(result, options)
        return result

    def notify_runtime_error(self, result: SuiteResult, options: RunOptions) -> None:
        """Report a system error that kept the suite from running."""
        message = f"An error occurred: {result.error}"
        self.reporter.error(message)
        if options.notification:
            self.reporter.notify(Notification(message, title="Jasmine error", image="failed", priority=2))

    def notify_spec_result(self, result: SuiteResult, options: RunOptions) -> None:
        """Report the stats of a suite run, with a specdoc on failures."""
        message = stats_message(result)

        if result.stats.failures != 0:
            self.notify_specdoc(result, message, options)
            if options.notification:
                self.reporter.notify(
                    Notification(message, title="Jasmine suite failed", image="failed", priority=2)
                )
        else:
            self.reporter.success(message)
            if options.notification and not options.hide_success:
                self.reporter.notify(Notification(message, title="Jasmine suite passed"))

    def notify_specdoc(self, result: SuiteResult, stats: str, options: RunOptions) -> None:
        """Specdoc-like listing of every suite and spec."""
        for suite in result.suites:
            self.reporter.suite_name(f"➥ {suite.description}")

            for spec in suite.specs:
                if spec.passed:
                    if not options.hide_success:
                        self.reporter.success(f" ✔ {spec.description}")
                    continue

                self.reporter.failure(f" ✘ {spec.description}")
                self.reporter.failure(f"   ➤ {format_error_message(spec.error_message, False)}")
                if options.notification:
                    self.reporter.notify(Notification(
                        f"{spec.description}: {format_error_message(spec.error_message, True)}",
                        title="Jasmine spec failed",
                        image="failed",
                        priority=2,
                    ))

        self.reporter.info(stats)

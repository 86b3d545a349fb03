"""Reporter interfaces for headless Jasmine runs."""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import List

from suite_types import SuiteResult


class ReportLevel(str, Enum):
    """Severity of a console line."""
    INFO = "info"
    SUCCESS = "success"
    SUITE = "suite"
    FAILURE = "failure"
    ERROR = "error"


@dataclass(frozen=True)
class Notification:
    """A desktop notification event."""

    message: str
    title: str
    image: str = "success"
    priority: int = 0


class LineReporter(ABC):
    """Sink for leveled console lines and desktop notifications."""

    @abstractmethod
    def line(self, level: ReportLevel, message: str) -> None:
        """Write one line at the given level."""
        pass

    @abstractmethod
    def notify(self, notification: Notification) -> None:
        """Emit a desktop notification."""
        pass

    def info(self, message: str) -> None:
        self.line(ReportLevel.INFO, message)

    def success(self, message: str) -> None:
        self.line(ReportLevel.SUCCESS, message)

    def suite_name(self, message: str) -> None:
        self.line(ReportLevel.SUITE, message)

    def failure(self, message: str) -> None:
        self.line(ReportLevel.FAILURE, message)

    def error(self, message: str) -> None:
        self.line(ReportLevel.ERROR, message)


class ReportFormat(str, Enum):
    """Supported run report formats."""
    NONE = "none"
    JSON = "json"
    JUNIT = "junit"
    ALL = "all"


class BaseReporter(ABC):
    """Abstract base class for run report file generators."""

    @abstractmethod
    def generate(self, results: List[SuiteResult], output_dir: Path) -> Path:
        """
        Generate a report file for the results of one run.

        Args:
            results: Suite results collected during the run
            output_dir: Directory to write report to

        Returns:
            Path to the generated report file
        """
        pass

    @property
    @abstractmethod
    def format(self) -> ReportFormat:
        """Return the report format this reporter generates."""
        pass

"""Console sinks and report generators for headless Jasmine runs."""
from reporters.base import BaseReporter, LineReporter, Notification, ReportFormat, ReportLevel
from reporters.console import ConsoleReporter
from reporters.json_reporter import JSONReporter
from reporters.junit import JUnitReporter
from reporters.notifier import DesktopNotifier

__all__ = [
    "BaseReporter",
    "ConsoleReporter",
    "DesktopNotifier",
    "JSONReporter",
    "JUnitReporter",
    "LineReporter",
    "Notification",
    "ReportFormat",
    "ReportLevel",
]

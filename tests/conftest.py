"""Pytest fixtures for the headless Jasmine runner tests."""
from __future__ import annotations

import json
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Tuple

import pytest

from config import RunOptions
from reporters.base import LineReporter, Notification, ReportLevel


class RecordingReporter(LineReporter):
    """Reporter keeping every line and notification in memory."""

    def __init__(self):
        self.lines: List[Tuple[ReportLevel, str]] = []
        self.notifications: List[Notification] = []

    def line(self, level: ReportLevel, message: str) -> None:
        self.lines.append((level, message))

    def notify(self, notification: Notification) -> None:
        self.notifications.append(notification)

    def messages(self, level: ReportLevel) -> List[str]:
        return [message for lvl, message in self.lines if lvl is level]


class FakeOutput:
    """Stand-in for the stdout of a browser process."""

    def __init__(self, text: str):
        self.text = text
        self.closed = False
        self.reads = 0

    def read(self) -> str:
        self.reads += 1
        return self.text

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def reporter() -> RecordingReporter:
    return RecordingReporter()


@pytest.fixture
def options() -> RunOptions:
    return RunOptions(
        jasmine_url="http://localhost:8888/jasmine",
        phantomjs_bin="/usr/local/bin/phantomjs",
        notification=True,
        hide_success=False,
    )


@pytest.fixture
def temp_dir() -> Path:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def passing_payload() -> Dict[str, Any]:
    return {
        "passed": True,
        "stats": {"specs": 2, "failures": 0, "time": 0.1},
        "suites": [
            {
                "description": "Calculator",
                "specs": [
                    {"description": "adds numbers", "passed": True},
                    {"description": "subtracts numbers", "passed": True},
                ],
            }
        ],
    }


@pytest.fixture
def failing_payload() -> Dict[str, Any]:
    return {
        "passed": False,
        "stats": {"specs": 2, "failures": 1, "time": 0.2},
        "suites": [
            {
                "description": "Calculator",
                "specs": [
                    {"description": "adds numbers", "passed": True},
                    {
                        "description": "divides numbers",
                        "passed": False,
                        "error_message": (
                            "Expected 1 to be 2. in "
                            "http://localhost:8888/assets/calculator_spec.js?body=1 (line 42)"
                        ),
                    },
                ],
            }
        ],
    }


@pytest.fixture
def error_payload() -> Dict[str, Any]:
    return {"error": "Cannot load the Jasmine runner at http://localhost:8888/jasmine"}


@pytest.fixture
def make_output():
    """Build a FakeOutput from a payload dict or raw text."""
    def _make(payload: Any) -> FakeOutput:
        if isinstance(payload, str):
            return FakeOutput(payload)
        return FakeOutput(json.dumps(payload))
    return _make


@pytest.fixture
def spec_file(temp_dir: Path) -> Path:
    """A spec file declaring a suite with a space in its name."""
    path = temp_dir / "calculator_spec.js"
    path.write_text(
        "// Calculator specs\n"
        "\n"
        "describe('Calculator math', function() {\n"
        "  it('adds', function() {});\n"
        "  describe('nested', function() {});\n"
        "});\n",
        encoding="utf-8",
    )
    return path

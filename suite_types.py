"""Typed objects for headless Jasmine runs."""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator


class StrategyKind(str, Enum):
    """Ways of exposing the Jasmine harness over HTTP."""

    AUTO = "auto"
    THIN = "thin"
    MONGREL = "mongrel"
    WEBRICK = "webrick"
    JASMINE_GEM = "jasmine_gem"
    NONE = "none"
    CUSTOM = "custom"


RACK_VARIANTS = frozenset({StrategyKind.THIN, StrategyKind.MONGREL, StrategyKind.WEBRICK})


@dataclass(frozen=True)
class ServerStrategy:
    """A server strategy; custom strategies carry the rake task name."""

    kind: StrategyKind
    task_name: Optional[str] = None

    @classmethod
    def parse(cls, value: Union[str, StrategyKind, "ServerStrategy"]) -> "ServerStrategy":
        """Parse a configured strategy; unknown names become custom task names."""
        if isinstance(value, ServerStrategy):
            return value
        if isinstance(value, StrategyKind):
            if value is StrategyKind.CUSTOM:
                raise ValueError("A custom strategy needs a task name")
            return cls(value)
        name = str(value)
        for kind in StrategyKind:
            if kind is not StrategyKind.CUSTOM and kind.value == name:
                return cls(kind)
        return cls(StrategyKind.CUSTOM, task_name=name)

    def __str__(self) -> str:
        return self.task_name if self.kind is StrategyKind.CUSTOM else self.kind.value


@dataclass(frozen=True)
class StartRackServer:
    """Start a rackup server; variant is a rack handler or ``auto``."""

    port: int
    environment: str
    variant: str


@dataclass(frozen=True)
class StartTaskServer:
    """Start a rake task that serves the harness."""

    port: int
    task_name: str


@dataclass(frozen=True)
class NoAction:
    """Do not start any server."""


ServerAction = Union[StartRackServer, StartTaskServer, NoAction]


ASSET_ERROR_PATTERN = re.compile(r"(.*?) in http.+?assets/(.*)\?body=\d+\s\((line\s\d+)")


def format_error_message(message: Optional[str], short: bool) -> str:
    """
    Clean up a spec error message.

    Messages thrown from the asset pipeline look like
    ``{message} in http...assets/{spec}?body=1 (line {n})``; the short form keeps
    only the message, the long form points at the spec file and line.
    Any other message is returned unchanged.
    """
    if message is None:
        return ""
    match = ASSET_ERROR_PATTERN.search(message)
    if not match:
        return message
    if short:
        return match.group(1)
    return f"{match.group(1)} in {match.group(2)} on {match.group(3)}"


class SpecResult(BaseModel):
    """Outcome of a single spec."""

    description: str
    passed: bool
    error_message: Optional[str] = None


class SuiteGroup(BaseModel):
    """A described suite and its specs."""

    description: str
    specs: List[SpecResult] = Field(default_factory=list)


class SuiteStats(BaseModel):
    """Counters reported for a suite run."""

    specs: int
    failures: int
    time: Union[int, float]


class SuiteResult(BaseModel):
    """Decoded runner payload, either a system error or a suite outcome."""

    model_config = ConfigDict(frozen=True)

    error: Optional[str] = None
    file: Optional[str] = None
    passed: bool = False
    stats: Optional[SuiteStats] = None
    suites: List[SuiteGroup] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_shape(self) -> "SuiteResult":
        """A non-error payload must carry both ``passed`` and ``stats``."""
        if self.error is None and ("passed" not in self.model_fields_set or self.stats is None):
            raise ValueError("payload carries neither 'error' nor 'passed' and 'stats'")
        return self

    @property
    def is_error(self) -> bool:
        return self.error is not None

    @property
    def has_error_key(self) -> bool:
        """Whether the payload carried an ``error`` key, even a null one."""
        return "error" in self.model_fields_set

    def for_file(self, file: str) -> "SuiteResult":
        """Return a copy with the originating spec file attached."""
        return self.model_copy(update={"file": file})

    @property
    def failed_specs(self) -> List[SpecResult]:
        return [spec for suite in self.suites for spec in suite.specs if not spec.passed]


@dataclass
class RunReport:
    """Aggregated outcome of a run; behaves as the ``(passed, failed_files)`` pair."""

    overall_passed: bool
    failed_files: List[str]
    results: List[SuiteResult] = field(default_factory=list)

    def as_tuple(self) -> Tuple[bool, List[str]]:
        return (self.overall_passed, self.failed_files)

    def __iter__(self) -> Iterator:
        return iter(self.as_tuple())

    def __len__(self) -> int:
        return 2

    def __getitem__(self, index):
        return self.as_tuple()[index]

    def __eq__(self, other: object) -> bool:
        # Collected results do not take part in equality
        if isinstance(other, RunReport):
            return self.as_tuple() == other.as_tuple()
        if isinstance(other, tuple):
            return self.as_tuple() == other
        return NotImplemented

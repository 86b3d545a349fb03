"""Start the HTTP server that hosts the Jasmine harness."""
from __future__ import annotations

import logging
import os
import subprocess
from typing import Callable, List, Optional, Union

import httpx
from tenacity import Retrying, retry_if_exception_type, stop_after_delay, wait_fixed

from exceptions import ServerLaunchError, ServerUnreachableError
from suite_types import (
    RACK_VARIANTS,
    NoAction,
    ServerAction,
    ServerStrategy,
    StartRackServer,
    StartTaskServer,
    StrategyKind,
)

AUTO_RACK_VARIANT = "auto"


class ServerStrategySelector:
    """Map a configured strategy to the server that should be started."""

    RACKUP_CONFIG = "config.ru"
    HARNESS_CONFIG = "jasmine.yml"
    GEM_TASK = "jasmine"

    def __init__(self, exists: Callable[[str], bool] = os.path.exists):
        self.exists = exists

    def decide(
        self,
        strategy: Union[str, StrategyKind, ServerStrategy],
        port: int,
        environment: str,
        spec_dir: str,
    ) -> ServerAction:
        strategy = ServerStrategy.parse(strategy)
        kind = strategy.kind

        if kind is StrategyKind.AUTO:
            return self.detect(port, environment, spec_dir)
        if kind in RACK_VARIANTS:
            return StartRackServer(port, environment, kind.value)
        if kind is StrategyKind.JASMINE_GEM:
            return StartTaskServer(port, self.GEM_TASK)
        if kind is StrategyKind.NONE:
            return NoAction()
        return StartTaskServer(port, strategy.task_name)

    def detect(self, port: int, environment: str, spec_dir: str) -> ServerAction:
        """Probe the working directory for a rackup or Jasmine gem setup."""
        if self.exists(self.RACKUP_CONFIG):
            return StartRackServer(port, environment, AUTO_RACK_VARIANT)
        if self.exists(os.path.join(spec_dir, "support", self.HARNESS_CONFIG)):
            return StartTaskServer(port, self.GEM_TASK)
        return NoAction()


class ServerLauncher:
    """Spawn the harness server and wait until it answers."""

    def __init__(
        self,
        timeout: float = 15.0,
        poll_interval: float = 0.1,
        probe_timeout: float = 1.0,
        logger: Optional[logging.Logger] = None,
    ):
        self.timeout = timeout
        self.poll_interval = poll_interval
        self.probe_timeout = probe_timeout
        self.logger = logger or logging.getLogger("jasmine_server")
        self.process: Optional[subprocess.Popen] = None

    def start_rack_server(self, port: int, environment: str, variant: str) -> None:
        command = ["rackup", "-E", environment, "-p", str(port)]
        if variant != AUTO_RACK_VARIANT:
            command += ["-s", variant]
        self.logger.info(f"Start {variant} Jasmine test server on port {port}")
        self._spawn(command)

    def start_task_server(self, port: int, task_name: str) -> None:
        self.logger.info(f"Start Jasmine test server with rake task '{task_name}' on port {port}")
        self._spawn(["rake", task_name, f"JASMINE_PORT={port}"])

    def _spawn(self, command: List[str]) -> None:
        try:
            self.process = subprocess.Popen(
                command,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=True,
            )
        except OSError as exc:
            raise ServerLaunchError(f"Cannot start Jasmine test server: {exc}", command) from exc
        self.logger.debug(f"Server process {self.process.pid}: {' '.join(command)}")

    def _probe(self, port: int) -> None:
        # Any HTTP response means the server is up
        httpx.get(f"http://localhost:{port}/", timeout=self.probe_timeout)

    def wait_for_server(self, port: int) -> None:
        """Poll the server until it answers or the timeout elapses."""
        self.logger.debug(f"Waiting for Jasmine test server on port {port}")
        retrying = Retrying(
            stop=stop_after_delay(self.timeout),
            wait=wait_fixed(self.poll_interval),
            retry=retry_if_exception_type(httpx.TransportError),
            reraise=True,
        )
        try:
            retrying(self._probe, port)
        except httpx.TransportError as exc:
            self.stop()
            raise ServerUnreachableError(port, self.timeout) from exc
        self.logger.info(f"Jasmine test server is up on port {port}")

    def stop(self, grace_period: float = 5.0) -> None:
        """Terminate the spawned server, killing it if it does not exit."""
        process, self.process = self.process, None
        if process is None:
            return
        if process.poll() is None:
            self.logger.debug(f"Stopping server process {process.pid}")
            process.terminate()
            try:
                process.wait(timeout=grace_period)
            except subprocess.TimeoutExpired:
                process.kill()
                process.wait()


class HarnessServer:
    """Select, start and stop the harness server for a run."""

    def __init__(
        self,
        selector: Optional[ServerStrategySelector] = None,
        launcher: Optional[ServerLauncher] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.logger = logger or logging.getLogger("jasmine_server")
        self.selector = selector or ServerStrategySelector()
        self.launcher = launcher or ServerLauncher(logger=self.logger)

    def start(
        self,
        strategy: Union[str, StrategyKind, ServerStrategy],
        port: int,
        environment: str,
        spec_dir: str,
    ) -> ServerAction:
        action = self.selector.decide(strategy, port, environment, spec_dir)

        if isinstance(action, StartRackServer):
            self.launcher.start_rack_server(action.port, action.environment, action.variant)
        elif isinstance(action, StartTaskServer):
            self.launcher.start_task_server(action.port, action.task_name)
        else:
            self.logger.debug("No Jasmine test server started")
            return action

        self.launcher.wait_for_server(port)
        return action

    def stop(self) -> None:
        self.launcher.stop()

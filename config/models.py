"""Pydantic configuration models for the headless Jasmine runner."""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Literal, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from exceptions import ConfigFileNotFoundError, ConfigurationError
from suite_types import ServerStrategy


# Load .env file if present
load_dotenv()

DEFAULT_RUNNER_SCRIPT = Path(__file__).resolve().parent.parent / "phantomjs" / "run-jasmine.coffee"
DEFAULT_ISSUES_URL = "https://github.com/netzpirat/guard-jasmine/issues"


def _apply_env(data: Any, env_mapping: dict[str, str]) -> Any:
    """Fill unset fields from environment variables."""
    if not isinstance(data, dict):
        return data
    for field_name, env_var in env_mapping.items():
        if field_name not in data or data[field_name] is None:
            env_value = os.getenv(env_var)
            if env_value:
                data[field_name] = env_value
    return data


class ServerConfig(BaseModel):
    """Harness server configuration."""

    strategy: str = Field(
        default="auto",
        description="auto, thin, mongrel, webrick, jasmine_gem, none or a custom rake task",
    )
    port: int = Field(
        default=8888,
        ge=1,
        le=65535,
        description="Port the harness server listens on",
    )
    environment: str = Field(
        default="development",
        description="Rack environment for the server",
    )
    timeout: float = Field(
        default=15.0,
        gt=0.0,
        le=600.0,
        description="Seconds to wait for the server to answer",
    )
    poll_interval: float = Field(
        default=0.1,
        ge=0.0,
        le=10.0,
        description="Seconds between readiness probes",
    )

    @field_validator("strategy")
    @classmethod
    def validate_strategy(cls, v: str) -> str:
        """Reject blank strategies."""
        v = v.strip()
        if not v:
            raise ValueError("strategy must not be empty")
        return v

    @model_validator(mode="before")
    @classmethod
    def load_from_env(cls, data: Any) -> Any:
        """Load values from environment variables if not explicitly set."""
        return _apply_env(data, {"port": "JASMINE_PORT", "strategy": "JASMINE_SERVER"})

    @property
    def server_strategy(self) -> ServerStrategy:
        return ServerStrategy.parse(self.strategy)


class RunOptions(BaseModel):
    """Options for running suites; immutable for the duration of a run."""

    model_config = ConfigDict(frozen=True)

    jasmine_url: Optional[str] = Field(
        default=None,
        description="URL of the Jasmine test runner (defaults to the server port)",
    )
    phantomjs_bin: str = Field(
        default="phantomjs",
        description="Location of the PhantomJS binary",
    )
    runner_script: Path = Field(
        default=DEFAULT_RUNNER_SCRIPT,
        description="PhantomJS script that runs the harness and prints JSON",
    )
    notification: bool = Field(
        default=True,
        description="Show desktop notifications",
    )
    hide_success: bool = Field(
        default=False,
        description="Hide success lines and the success notification",
    )
    issues_url: str = Field(
        default=DEFAULT_ISSUES_URL,
        description="Where undecodable runner output should be reported",
    )

    @field_validator("runner_script", mode="before")
    @classmethod
    def convert_to_path(cls, v: Any) -> Path:
        """Convert string to Path."""
        if isinstance(v, str):
            return Path(v)
        return v

    @model_validator(mode="before")
    @classmethod
    def load_from_env(cls, data: Any) -> Any:
        """Load values from environment variables if not explicitly set."""
        return _apply_env(data, {"jasmine_url": "JASMINE_URL", "phantomjs_bin": "PHANTOMJS_BIN"})


class ReportingConfig(BaseModel):
    """Run report file configuration."""

    output_format: Literal["none", "json", "junit", "all"] = Field(
        default="none",
        description="Run report file format",
    )
    reports_folder: Path = Field(
        default=Path("./reports"),
        description="Directory for saving run reports",
    )

    @field_validator("reports_folder", mode="before")
    @classmethod
    def convert_to_path(cls, v: Any) -> Path:
        """Convert string to Path."""
        if isinstance(v, str):
            return Path(v)
        return v


class JasmineConfig(BaseModel):
    """Root configuration model combining all config sections."""

    server: ServerConfig = Field(default_factory=ServerConfig)
    run: RunOptions = Field(default_factory=RunOptions)
    reporting: ReportingConfig = Field(default_factory=ReportingConfig)

    spec_dir: str = Field(
        default="spec/javascripts",
        description="Spec directory; passing it as a target runs all suites",
    )
    verbose: bool = Field(
        default=False,
        description="Enable verbose logging",
    )

    @field_validator("spec_dir")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Ensure spec_dir doesn't have a trailing slash."""
        return v.rstrip("/") or v

    @property
    def run_options(self) -> RunOptions:
        """Run options with the runner URL defaulted to the server port."""
        if self.run.jasmine_url:
            return self.run
        return self.run.model_copy(
            update={"jasmine_url": f"http://localhost:{self.server.port}/jasmine"}
        )


def load_config(
    config_path: Optional[Path] = None,
    cli_overrides: Optional[dict[str, Any]] = None,
) -> JasmineConfig:
    """
    Load configuration from file with CLI overrides.

    Priority (highest to lowest):
    1. CLI arguments
    2. Environment variables
    3. Config file
    4. Defaults
    """
    config_data: dict[str, Any] = {}

    if config_path is None:
        config_path = Path("config.json")
    elif not config_path.exists():
        raise ConfigFileNotFoundError(str(config_path))

    if config_path.exists():
        with open(config_path, "r", encoding="utf-8") as f:
            if config_path.suffix in {".yaml", ".yml"}:
                import yaml
                config_data = yaml.safe_load(f) or {}
            else:
                config_data = json.load(f)

    try:
        config = JasmineConfig.model_validate(config_data)

        if cli_overrides:
            config_dict = config.model_dump()
            _apply_overrides(config_dict, cli_overrides)
            config = JasmineConfig.model_validate(config_dict)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid configuration: {exc}", {"file": str(config_path)}) from exc

    return config


def _apply_overrides(config_dict: dict[str, Any], overrides: dict[str, Any]) -> None:
    """Apply CLI overrides to config dictionary."""
    override_mapping = {
        "server": ("server", "strategy"),
        "port": ("server", "port"),
        "environment": ("server", "environment"),
        "server_timeout": ("server", "timeout"),
        "jasmine_url": ("run", "jasmine_url"),
        "phantomjs_bin": ("run", "phantomjs_bin"),
        "notification": ("run", "notification"),
        "hide_success": ("run", "hide_success"),
        "output_format": ("reporting", "output_format"),
        "reports_dir": ("reporting", "reports_folder"),
        "spec_dir": ("spec_dir", None),
        "verbose": ("verbose", None),
    }

    for key, value in overrides.items():
        if value is None:
            continue

        mapping = override_mapping.get(key)
        if mapping:
            section, field = mapping
            if field is None:
                config_dict[section] = value
            else:
                config_dict.setdefault(section, {})[field] = value

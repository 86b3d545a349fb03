"""Unit tests for config module."""
from __future__ import annotations

import json
from pathlib import Path

import pytest

from config import JasmineConfig, ReportingConfig, RunOptions, ServerConfig, load_config
from exceptions import ConfigFileNotFoundError, ConfigurationError
from suite_types import StrategyKind


class TestServerConfig:
    """Tests for ServerConfig model."""

    def test_default_values(self):
        config = ServerConfig()
        assert config.strategy == "auto"
        assert config.port == 8888
        assert config.environment == "development"
        assert config.timeout == 15.0

    def test_port_validation(self):
        with pytest.raises(ValueError):
            ServerConfig(port=0)
        with pytest.raises(ValueError):
            ServerConfig(port=70000)

    def test_blank_strategy_rejected(self):
        with pytest.raises(ValueError):
            ServerConfig(strategy="  ")

    def test_server_strategy(self):
        assert ServerConfig(strategy="thin").server_strategy.kind is StrategyKind.THIN
        custom = ServerConfig(strategy="start_server").server_strategy
        assert custom.kind is StrategyKind.CUSTOM
        assert custom.task_name == "start_server"

    def test_env_var_loading(self, monkeypatch):
        monkeypatch.setenv("JASMINE_PORT", "3001")
        monkeypatch.setenv("JASMINE_SERVER", "webrick")

        config = ServerConfig()
        assert config.port == 3001
        assert config.strategy == "webrick"


class TestRunOptions:
    """Tests for RunOptions model."""

    def test_default_values(self, monkeypatch):
        monkeypatch.delenv("PHANTOMJS_BIN", raising=False)
        options = RunOptions()
        assert options.phantomjs_bin == "phantomjs"
        assert options.notification is True
        assert options.hide_success is False
        assert options.runner_script.name == "run-jasmine.coffee"

    def test_options_are_immutable(self):
        options = RunOptions()
        with pytest.raises(ValueError):
            options.hide_success = True

    def test_runner_script_path_conversion(self):
        options = RunOptions(runner_script="/opt/run-jasmine.js")
        assert options.runner_script == Path("/opt/run-jasmine.js")

    def test_env_var_loading(self, monkeypatch):
        monkeypatch.setenv("JASMINE_URL", "http://env:3000/specs")
        monkeypatch.setenv("PHANTOMJS_BIN", "/opt/phantomjs")

        options = RunOptions()
        assert options.jasmine_url == "http://env:3000/specs"
        assert options.phantomjs_bin == "/opt/phantomjs"


class TestReportingConfig:
    """Tests for ReportingConfig model."""

    def test_default_values(self):
        config = ReportingConfig()
        assert config.output_format == "none"
        assert config.reports_folder == Path("./reports")

    def test_path_conversion(self):
        config = ReportingConfig(reports_folder="./custom/reports")
        assert isinstance(config.reports_folder, Path)

    def test_invalid_format_rejected(self):
        with pytest.raises(ValueError):
            ReportingConfig(output_format="html")


class TestJasmineConfig:
    """Tests for root JasmineConfig model."""

    def test_default_nested_configs(self):
        config = JasmineConfig()
        assert isinstance(config.server, ServerConfig)
        assert isinstance(config.run, RunOptions)
        assert isinstance(config.reporting, ReportingConfig)
        assert config.spec_dir == "spec/javascripts"

    def test_jasmine_url_follows_port(self, monkeypatch):
        monkeypatch.delenv("JASMINE_URL", raising=False)
        config = JasmineConfig(server={"port": 3001})
        assert config.run.jasmine_url is None
        assert config.run_options.jasmine_url == "http://localhost:3001/jasmine"

    def test_explicit_jasmine_url_kept(self):
        config = JasmineConfig(run={"jasmine_url": "http://localhost:3000/jasmine"})
        assert config.run_options.jasmine_url == "http://localhost:3000/jasmine"

    def test_spec_dir_trailing_slash_stripped(self):
        assert JasmineConfig(spec_dir="specs/").spec_dir == "specs"


class TestLoadConfig:
    """Tests for load_config function."""

    def test_loads_from_json_file(self, temp_dir: Path):
        config_data = {
            "server": {"strategy": "thin", "port": 3001},
            "run": {"hide_success": True},
        }
        config_file = temp_dir / "config.json"
        config_file.write_text(json.dumps(config_data))

        config = load_config(config_file)
        assert config.server.strategy == "thin"
        assert config.server.port == 3001
        assert config.run.hide_success is True

    def test_cli_overrides(self, temp_dir: Path):
        config_data = {
            "server": {"strategy": "thin", "port": 3001},
            "run": {"notification": True},
        }
        config_file = temp_dir / "config.json"
        config_file.write_text(json.dumps(config_data))

        overrides = {
            "server": "none",
            "port": 4000,
            "notification": False,
            "spec_dir": "specs",
            "reports_dir": "out",
        }

        config = load_config(config_file, cli_overrides=overrides)
        assert config.server.strategy == "none"
        assert config.server.port == 4000
        assert config.run.notification is False
        assert config.spec_dir == "specs"
        assert config.reporting.reports_folder == Path("out")

    def test_port_override_moves_default_url(self, temp_dir: Path, monkeypatch):
        monkeypatch.delenv("JASMINE_URL", raising=False)
        monkeypatch.chdir(temp_dir)
        config = load_config(cli_overrides={"port": 4000})
        assert config.run_options.jasmine_url == "http://localhost:4000/jasmine"

    def test_default_config_path(self, temp_dir: Path, monkeypatch):
        monkeypatch.chdir(temp_dir)
        monkeypatch.delenv("JASMINE_PORT", raising=False)

        config = load_config()
        assert config.server.port == 8888

    def test_missing_explicit_file(self, temp_dir: Path):
        with pytest.raises(ConfigFileNotFoundError):
            load_config(temp_dir / "missing.json")

    def test_invalid_values_raise_configuration_error(self, temp_dir: Path):
        config_file = temp_dir / "config.json"
        config_file.write_text(json.dumps({"server": {"port": -1}}))

        with pytest.raises(ConfigurationError):
            load_config(config_file)

    def test_yaml_config(self, temp_dir: Path):
        config_yaml = """
server:
  strategy: jasmine_gem
  environment: test
run:
  phantomjs_bin: /usr/local/bin/phantomjs
spec_dir: specs
"""
        config_file = temp_dir / "config.yaml"
        config_file.write_text(config_yaml)

        config = load_config(config_file)
        assert config.server.strategy == "jasmine_gem"
        assert config.server.environment == "test"
        assert config.run.phantomjs_bin == "/usr/local/bin/phantomjs"
        assert config.spec_dir == "specs"

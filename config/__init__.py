"""Configuration module for the headless Jasmine runner."""
from config.models import (
    JasmineConfig,
    ReportingConfig,
    RunOptions,
    ServerConfig,
    load_config,
)

__all__ = [
    "JasmineConfig",
    "ReportingConfig",
    "RunOptions",
    "ServerConfig",
    "load_config",
]

"""Config module exports."""

from cargo_llvmcov.config.loader import load_config
from cargo_llvmcov.config.models import (
    InstrumentationConfig,
    LlvmcovConfig,
    LoggingConfig,
    LogOutputConfig,
    OutputConfig,
    ToolchainConfig,
)

__all__ = [
    "load_config",
    "LlvmcovConfig",
    "LoggingConfig",
    "LogOutputConfig",
    "ToolchainConfig",
    "InstrumentationConfig",
    "OutputConfig",
]

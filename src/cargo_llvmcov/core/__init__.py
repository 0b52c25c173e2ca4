"""Core module exports."""

from cargo_llvmcov.core.errors import (
    BuildError,
    ConfigError,
    ErrorCode,
    InternalError,
    LlvmcovError,
    MergeError,
    ProcessError,
    ReportError,
    TestRunError,
    ToolchainError,
    WorkspaceError,
)
from cargo_llvmcov.core.logging import configure_logging, get_logger, level_for_verbosity
from cargo_llvmcov.core.progress import pluralize, status

__all__ = [
    # Errors
    "LlvmcovError",
    "ErrorCode",
    "BuildError",
    "ConfigError",
    "InternalError",
    "MergeError",
    "ProcessError",
    "ReportError",
    "TestRunError",
    "ToolchainError",
    "WorkspaceError",
    # Logging
    "configure_logging",
    "get_logger",
    "level_for_verbosity",
    # Progress
    "pluralize",
    "status",
]

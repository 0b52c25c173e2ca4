"""cargo-llvmcov error types with typed error codes.

Error code ranges:
- 1xxx: Toolchain resolution
- 2xxx: Config
- 3xxx: Build
- 4xxx: Test execution
- 5xxx: Profile merge
- 6xxx: Report
- 7xxx: Workspace
- 8xxx: Process launch
- 9xxx: Internal
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Toolchain (1xxx)
    TOOLCHAIN_NOT_FOUND = 1001

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002

    # Build (3xxx)
    BUILD_DECODE_FAILED = 3001
    BUILD_FAILED = 3002
    BUILD_NO_EXECUTABLE = 3003
    BUILD_METADATA_FAILED = 3004

    # Test execution (4xxx)
    TEST_RUN_FAILED = 4001

    # Merge (5xxx)
    MERGE_FAILED = 5001

    # Report (6xxx)
    REPORT_FAILED = 6001
    REPORT_OUTPUT_FAILED = 6002

    # Workspace (7xxx)
    WORKSPACE_CREATE_FAILED = 7001

    # Process (8xxx)
    PROCESS_SPAWN_FAILED = 8001

    # Internal (9xxx)
    INTERNAL_ERROR = 9001


@dataclass(eq=False)
class LlvmcovError(Exception):
    """Base error with structured context."""

    code: ErrorCode
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'BUILD_FAILED')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ToolchainError(LlvmcovError):
    """A required toolchain binary could not be located."""

    @classmethod
    def not_found(cls, tool: str, hint: str | None = None) -> "ToolchainError":
        message = f"{tool} not found"
        if hint:
            message = f"{message} ({hint})"
        return cls(
            code=ErrorCode.TOOLCHAIN_NOT_FOUND,
            message=message,
            details={"tool": tool},
        )


class ConfigError(LlvmcovError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )


class BuildError(LlvmcovError):
    """Instrumented build and build-metadata failures."""

    @classmethod
    def decode_failed(cls, line: str, reason: str) -> "BuildError":
        return cls(
            code=ErrorCode.BUILD_DECODE_FAILED,
            message=f"failed to decode build output: {reason}",
            details={"line": line},
        )

    @classmethod
    def build_failed(cls) -> "BuildError":
        return cls(code=ErrorCode.BUILD_FAILED, message="failed to run build")

    @classmethod
    def no_executable(cls) -> "BuildError":
        return cls(code=ErrorCode.BUILD_NO_EXECUTABLE, message="no executable found")

    @classmethod
    def metadata_failed(cls) -> "BuildError":
        return cls(code=ErrorCode.BUILD_METADATA_FAILED, message="failed to run cargo metadata")


class TestRunError(LlvmcovError):
    """A test executable exited unsuccessfully."""

    __test__ = False

    @classmethod
    def failed(cls, executable: str) -> "TestRunError":
        return cls(
            code=ErrorCode.TEST_RUN_FAILED,
            message="failed to run executable",
            details={"executable": executable},
        )


class MergeError(LlvmcovError):
    """Profile merge failures."""

    @classmethod
    def failed(cls) -> "MergeError":
        return cls(code=ErrorCode.MERGE_FAILED, message="failed to run profile merge")


class ReportError(LlvmcovError):
    """Coverage report rendering failures."""

    @classmethod
    def failed(cls, mode: str) -> "ReportError":
        return cls(
            code=ErrorCode.REPORT_FAILED,
            message=f"failed to run coverage {mode}",
            details={"mode": mode},
        )

    @classmethod
    def output_failed(cls, path: str, reason: str) -> "ReportError":
        return cls(
            code=ErrorCode.REPORT_OUTPUT_FAILED,
            message=f"failed to write coverage report to {path}: {reason}",
            details={"path": path, "reason": reason},
        )


class WorkspaceError(LlvmcovError):
    """Coverage workspace could not be set up."""

    @classmethod
    def create_failed(cls, path: str, reason: str) -> "WorkspaceError":
        return cls(
            code=ErrorCode.WORKSPACE_CREATE_FAILED,
            message=f"failed to create workspace at {path}: {reason}",
            details={"path": path, "reason": reason},
        )


class ProcessError(LlvmcovError):
    """An external program could not be started."""

    @classmethod
    def spawn_failed(cls, program: str, reason: str) -> "ProcessError":
        return cls(
            code=ErrorCode.PROCESS_SPAWN_FAILED,
            message=f"failed to start {program}: {reason}",
            details={"program": program, "reason": reason},
        )


class InternalError(LlvmcovError):
    """Internal/unexpected errors."""

    @classmethod
    def unexpected(cls, reason: str, **details: Any) -> "InternalError":
        return cls(
            code=ErrorCode.INTERNAL_ERROR,
            message=f"Internal error: {reason}",
            details=details,
        )

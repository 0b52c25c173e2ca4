"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (LLVMCOV__SECTION__KEY)
3. Global YAML (~/.config/cargo-llvmcov/config.yaml)
4. Built-in defaults (this file)

Examples:
    LLVMCOV__LOGGING__LEVEL=DEBUG
    LLVMCOV__TOOLCHAIN__RUSTFILT=/opt/bin/rustfilt
    LLVMCOV__INSTRUMENTATION__RUSTFLAGS="-C instrument-coverage"
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration."""

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        LLVMCOV__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="ERROR",
        description="Root log level. The -v flag raises verbosity above this.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class ToolchainConfig(BaseModel):
    """Explicit toolchain locations.

    Unset values fall back to the variables cargo exports to its subcommands
    (CARGO, RUSTC, CARGO_HOME, RUSTUP_HOME) and then to PATH / sysroot lookup.
    """

    cargo: str | None = None
    rustc: str | None = None
    rustfilt: str | None = None
    llvm_profdata: str | None = None
    llvm_cov: str | None = None
    cargo_home: str | None = None
    rustup_home: str | None = None


class InstrumentationConfig(BaseModel):
    """How test binaries are instrumented and run.

    Env vars:
        LLVMCOV__INSTRUMENTATION__RUSTFLAGS: Flags passed to rustc through RUSTFLAGS
        LLVMCOV__INSTRUMENTATION__BOOTSTRAP: Set RUSTC_BOOTSTRAP=1 for the build
    """

    rustflags: str = Field(
        default="-Zinstrument-coverage",
        description="RUSTFLAGS for the instrumented build. "
        "Newer toolchains accept the stable '-C instrument-coverage'.",
    )
    bootstrap: bool = Field(
        default=True,
        description="Allow unstable compiler flags on a stable toolchain.",
    )
    test_args: list[str] = Field(
        default_factory=lambda: ["--nocapture"],
        description="Arguments passed to every test executable.",
    )


class OutputConfig(BaseModel):
    """Where reports are written, relative to cargo's target directory."""

    subdirectory: str = "cov"
    html_dirname: str = "html"
    lcov_filename: str = "cov.info"

    @field_validator("subdirectory", "html_dirname", "lcov_filename")
    @classmethod
    def validate_relative(cls, v: str) -> str:
        if not v or Path(v).is_absolute():
            raise ValueError(f"Must be a non-empty relative path: {v!r}")
        return v


class LlvmcovConfig(BaseModel):
    """Root configuration for cargo-llvmcov."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    toolchain: ToolchainConfig = Field(default_factory=ToolchainConfig)
    instrumentation: InstrumentationConfig = Field(default_factory=InstrumentationConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)

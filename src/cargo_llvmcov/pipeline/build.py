"""Instrumented cargo build and build-metadata query."""

from __future__ import annotations

import subprocess
from pathlib import Path

import structlog
from pydantic import BaseModel, ValidationError

from cargo_llvmcov.config.models import InstrumentationConfig
from cargo_llvmcov.core.errors import BuildError
from cargo_llvmcov.pipeline.messages import BuildFinished, CompilerArtifact, parse_build_message
from cargo_llvmcov.process import Command

log = structlog.get_logger()


class CargoMetadata(BaseModel):
    """The slice of ``cargo metadata`` output the pipeline needs."""

    target_directory: Path


def target_directory(cargo: Path) -> Path:
    """Ask cargo where build output lives.

    The output is small and bounded, so it is buffered rather than streamed.
    """
    output = Command(cargo).args(["metadata", "--format-version", "1", "--no-deps"]).output()
    if not output.success:
        raise BuildError.metadata_failed()
    try:
        metadata = CargoMetadata.model_validate_json(output.stdout)
    except ValidationError as e:
        raise BuildError.decode_failed(output.stdout.decode(errors="replace"), str(e)) from e
    return metadata.target_directory


def build(
    cargo: Path,
    target_dir: Path,
    shard_pattern: Path,
    instrumentation: InstrumentationConfig | None = None,
) -> list[Path]:
    """Build test harnesses with coverage instrumentation.

    Build output is consumed line by line while cargo runs; reading it only
    after exit could stall cargo on a full pipe.

    Returns:
        Test executables in the order cargo reported them.

    Raises:
        BuildError: Undecodable output, a failed build, or no test executables.
    """
    instrumentation = instrumentation or InstrumentationConfig()

    command = (
        Command(cargo)
        .arg("build")
        .args(["--message-format", "json"])
        .arg("--tests")
        .args(["--target-dir", target_dir])
        .env("RUSTFLAGS", instrumentation.rustflags)
        .env("LLVM_PROFILE_FILE", shard_pattern)
        .stdout(subprocess.PIPE)
    )
    if instrumentation.bootstrap:
        command.env("RUSTC_BOOTSTRAP", "1")

    executables: list[Path] = []
    reported_failure = False

    with command.spawn() as child:
        assert child.stdout is not None
        for line in child.stdout:
            message = parse_build_message(line)
            if isinstance(message, CompilerArtifact) and message.is_test_executable:
                assert message.executable is not None
                executables.append(Path(message.executable))
            elif isinstance(message, BuildFinished) and not message.success:
                reported_failure = True
        success = child.wait()

    if not success or reported_failure:
        raise BuildError.build_failed()
    if not executables:
        raise BuildError.no_executable()

    log.debug("executables", executables=[str(exe) for exe in executables])
    return executables

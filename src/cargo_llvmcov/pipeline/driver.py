"""End-to-end coverage run: build, test, merge, report."""

from __future__ import annotations

from collections.abc import Sequence
from contextlib import ExitStack
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

import structlog

from cargo_llvmcov.config.models import LlvmcovConfig, OutputConfig
from cargo_llvmcov.core.errors import ReportError, WorkspaceError
from cargo_llvmcov.core.progress import pluralize, status
from cargo_llvmcov.pipeline.build import build, target_directory
from cargo_llvmcov.pipeline.execution import run_tests
from cargo_llvmcov.pipeline.merge import merge_profiles
from cargo_llvmcov.pipeline.report import export, show
from cargo_llvmcov.pipeline.workspace import CoverageWorkspace
from cargo_llvmcov.toolchain import Toolchain, resolve_toolchain

log = structlog.get_logger()

ReportMode = Literal["text", "lcov", "html"]


@dataclass(frozen=True)
class CoverageRequest:
    """What the user asked for."""

    mode: ReportMode = "text"
    lcov_output: Path | None = None  # lcov mode only; default is <out>/cov.info
    keep: bool = False


def run_coverage(
    request: CoverageRequest,
    config: LlvmcovConfig | None = None,
    toolchain: Toolchain | None = None,
) -> Path | None:
    """Run the whole pipeline.

    Returns:
        Where the report was written, or None for a text report on stdout.

    Raises:
        LlvmcovError: The first stage that failed. Workspace cleanup still
            runs unless the request keeps it.
    """
    config = config or LlvmcovConfig()
    toolchain = toolchain or resolve_toolchain(config.toolchain)

    output_dir = target_directory(toolchain.cargo) / config.output.subdirectory
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise WorkspaceError.create_failed(str(output_dir), str(e)) from e

    # An LCOV destination in a missing directory fails here, not after the tests ran.
    if request.lcov_output is not None and not request.lcov_output.parent.is_dir():
        raise ReportError.output_failed(
            str(request.lcov_output), "parent directory does not exist"
        )

    with ExitStack() as stack:
        workspace = stack.enter_context(CoverageWorkspace.acquire(output_dir))
        if request.keep:
            stack.pop_all()

        executables = build(
            toolchain.cargo, output_dir, workspace.shard_pattern, config.instrumentation
        )
        status(f"Built {pluralize(len(executables), 'test executable')}", style="success")

        log.debug("cargo binary", path=str(toolchain.cargo))
        log.debug("output directory", path=str(output_dir))
        log.debug("llvm-profdata", path=str(toolchain.llvm_profdata))
        log.debug("LLVM_PROFILE_FILE", pattern=str(workspace.shard_pattern))

        run_tests(executables, workspace.shard_pattern, config.instrumentation.test_args)
        status(f"Ran {pluralize(len(executables), 'test executable')}", style="success")

        shards = merge_profiles(toolchain.llvm_profdata, workspace)
        status(f"Merged {pluralize(len(shards), 'profile')}", style="success")

        log.debug("generating report..")
        location = render_report(
            request,
            config.output,
            toolchain,
            workspace.merged_profile_path,
            executables,
            output_dir,
        )

    if location is not None:
        status(f"Report written to {location}", style="success")
    return location


def render_report(
    request: CoverageRequest,
    output: OutputConfig,
    toolchain: Toolchain,
    profile: Path,
    executables: Sequence[Path],
    output_dir: Path,
) -> Path | None:
    """Dispatch on the report mode."""
    if request.mode == "lcov":
        lcov_path = request.lcov_output or output_dir / output.lcov_filename
        export(
            toolchain.llvm_cov,
            toolchain.rustfilt,
            profile,
            executables,
            toolchain.ignore_regex,
            lcov_path,
        )
        return lcov_path

    if request.mode == "html":
        html_dir = output_dir / output.html_dirname
        show(
            toolchain.llvm_cov,
            toolchain.rustfilt,
            profile,
            executables,
            toolchain.ignore_regex,
            html_dir=html_dir,
        )
        return html_dir

    show(toolchain.llvm_cov, toolchain.rustfilt, profile, executables, toolchain.ignore_regex)
    return None

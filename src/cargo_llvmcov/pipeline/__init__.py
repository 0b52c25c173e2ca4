"""Coverage pipeline: build -> run tests -> merge profiles -> report."""

from cargo_llvmcov.pipeline.build import build, target_directory
from cargo_llvmcov.pipeline.driver import CoverageRequest, ReportMode, run_coverage
from cargo_llvmcov.pipeline.execution import run_test, run_tests
from cargo_llvmcov.pipeline.merge import merge_profiles
from cargo_llvmcov.pipeline.messages import (
    BuildFinished,
    BuildMessage,
    BuildScriptExecuted,
    CompilerArtifact,
    CompilerMessage,
    parse_build_message,
)
from cargo_llvmcov.pipeline.report import export, object_args, show
from cargo_llvmcov.pipeline.workspace import CoverageWorkspace

__all__ = [
    "build",
    "target_directory",
    "CoverageRequest",
    "ReportMode",
    "run_coverage",
    "run_test",
    "run_tests",
    "merge_profiles",
    "BuildMessage",
    "BuildFinished",
    "BuildScriptExecuted",
    "CompilerArtifact",
    "CompilerMessage",
    "parse_build_message",
    "export",
    "object_args",
    "show",
    "CoverageWorkspace",
]

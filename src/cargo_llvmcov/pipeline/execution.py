"""Running instrumented test executables."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

import structlog

from cargo_llvmcov.core.errors import TestRunError
from cargo_llvmcov.process import Command

log = structlog.get_logger()

DEFAULT_TEST_ARGS = ("--nocapture",)


def run_test(
    executable: Path,
    shard_pattern: Path,
    test_args: Sequence[str] = DEFAULT_TEST_ARGS,
) -> None:
    """Run one test executable, writing its shard through LLVM_PROFILE_FILE."""
    ok = Command(executable).args(test_args).env("LLVM_PROFILE_FILE", shard_pattern).status()
    if not ok:
        raise TestRunError.failed(str(executable))


def run_tests(
    executables: Sequence[Path],
    shard_pattern: Path,
    test_args: Sequence[str] = DEFAULT_TEST_ARGS,
) -> None:
    """Run executables one at a time, in order, stopping at the first failure.

    Sequential runs keep failure attribution unambiguous; shard names are
    per-process either way.
    """
    for executable in executables:
        log.info("running tests", executable=str(executable))
        run_test(executable, shard_pattern, test_args)

"""Merging raw profile shards into one indexed profile."""

from __future__ import annotations

from pathlib import Path

import structlog

from cargo_llvmcov.core.errors import MergeError
from cargo_llvmcov.pipeline.workspace import CoverageWorkspace
from cargo_llvmcov.process import Command

log = structlog.get_logger()


def merge_profiles(llvm_profdata: Path, workspace: CoverageWorkspace) -> list[Path]:
    """Run ``llvm-profdata merge -sparse`` over every shard in the workspace.

    An empty shard set is passed through as is; llvm-profdata decides what
    that means.

    Returns:
        The shard files that were merged.
    """
    shards = workspace.shard_files()
    log.debug("merging shards", count=len(shards))
    ok = (
        Command(llvm_profdata)
        .arg("merge")
        .arg("-sparse")
        .args(shards)
        .args(["-o", workspace.merged_profile_path])
        .status()
    )
    if not ok:
        raise MergeError.failed()
    return shards

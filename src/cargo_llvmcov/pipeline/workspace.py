"""Scratch space for raw profile shards and the merged profile.

``CoverageWorkspace.acquire`` creates a shard directory salted with the
current process id, so two unrelated runs sharing a target directory never
collide. Release removes the shard directory and the merged profile on a
best-effort basis: failures are logged, never raised, so cleanup cannot mask
the outcome of the run.

Retention is an ownership transfer, not a flag. The workspace is a context
manager; to keep the files, hand release responsibility away from whoever
entered it::

    with ExitStack() as stack:
        workspace = stack.enter_context(CoverageWorkspace.acquire(base))
        if keep:
            stack.pop_all()  # nothing will release the workspace now
"""

from __future__ import annotations

import os
import shutil
from pathlib import Path
from types import TracebackType

import structlog

from cargo_llvmcov.core.errors import WorkspaceError

log = structlog.get_logger()

MERGED_PROFILE_NAME = "default.profdata"
SHARD_PATTERN = "%p.profraw"  # %p is expanded to the pid by the profiling runtime
SHARD_GLOB = "*.profraw"


class CoverageWorkspace:
    """Shard directory plus merged-profile path for one pipeline run."""

    def __init__(self, shard_directory: Path, merged_profile_path: Path) -> None:
        self.shard_directory = shard_directory
        self.merged_profile_path = merged_profile_path

    @classmethod
    def acquire(cls, base_directory: Path, *, pid: int | None = None) -> CoverageWorkspace:
        """Create ``profraw-<pid>`` under ``base_directory``.

        Raises:
            WorkspaceError: The shard directory could not be created.
        """
        pid = os.getpid() if pid is None else pid
        shard_directory = base_directory / f"profraw-{pid}"
        try:
            shard_directory.mkdir()
        except OSError as e:
            raise WorkspaceError.create_failed(str(shard_directory), str(e)) from e
        log.debug("workspace_acquired", shard_directory=str(shard_directory))
        return cls(shard_directory, base_directory / MERGED_PROFILE_NAME)

    @property
    def shard_pattern(self) -> Path:
        """Value for LLVM_PROFILE_FILE; the runtime substitutes %p per process."""
        return self.shard_directory / SHARD_PATTERN

    def shard_files(self) -> list[Path]:
        """Shards currently on disk, sorted by path."""
        return sorted(self.shard_directory.glob(SHARD_GLOB))

    def release(self) -> None:
        """Remove the shard directory and merged profile; log, never raise."""
        log.debug("remove profraw & profdata")
        try:
            shutil.rmtree(self.shard_directory)
        except OSError as e:
            log.warning("failed to remove dir", path=str(self.shard_directory), error=str(e))
        try:
            self.merged_profile_path.unlink()
        except OSError as e:
            log.warning("failed to remove file", path=str(self.merged_profile_path), error=str(e))

    def __enter__(self) -> CoverageWorkspace:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.release()

"""Tests for merging profile shards."""

from pathlib import Path

import pytest
from structlog.testing import capture_logs

from cargo_llvmcov.core.errors import ErrorCode, MergeError
from cargo_llvmcov.pipeline.merge import merge_profiles
from cargo_llvmcov.pipeline.workspace import CoverageWorkspace
from cargo_llvmcov.process import ScriptedBackend


class TestMergeProfiles:
    """llvm-profdata merge invocation."""

    def test_given_no_shards_when_merged_then_only_output_argument(
        self, backend: ScriptedBackend, workspace: CoverageWorkspace
    ) -> None:
        """An empty shard set is passed straight through to the tool."""
        # Given
        backend.push()

        # When
        with capture_logs() as logs:
            merged = merge_profiles(Path("llvm-profdata"), workspace)

        # Then
        assert merged == []
        calls = [e["command"] for e in logs if e["event"] == "call"]
        assert calls == [f"llvm-profdata merge -sparse -o {workspace.merged_profile_path}"]

    def test_given_shards_when_merged_then_each_shard_once_and_single_output(
        self, backend: ScriptedBackend, workspace: CoverageWorkspace
    ) -> None:
        """Every shard on disk appears once, followed by exactly one -o."""
        # Given
        backend.push()
        names = ["1234.profraw", "1300.profraw", "987.profraw"]
        for name in names:
            (workspace.shard_directory / name).write_bytes(b"")

        # When
        merged = merge_profiles(Path("llvm-profdata"), workspace)

        # Then
        argv = backend.invocations[0].argv
        expected_shards = [str(workspace.shard_directory / name) for name in sorted(names)]
        assert argv[:3] == ["llvm-profdata", "merge", "-sparse"]
        assert argv[3:-2] == expected_shards
        assert argv[-2:] == ["-o", str(workspace.merged_profile_path)]
        assert argv.count("-o") == 1
        assert [str(p) for p in merged] == expected_shards

    def test_given_tool_failure_when_merged_then_merge_error(
        self, backend: ScriptedBackend, workspace: CoverageWorkspace
    ) -> None:
        backend.push(success=False)

        with pytest.raises(MergeError) as exc_info:
            merge_profiles(Path("llvm-profdata"), workspace)
        assert exc_info.value.message == "failed to run profile merge"
        assert exc_info.value.code == ErrorCode.MERGE_FAILED

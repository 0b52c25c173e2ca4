"""Tests for error types and codes."""

import pytest

from cargo_llvmcov.core.errors import (
    BuildError,
    ConfigError,
    ErrorCode,
    InternalError,
    LlvmcovError,
    ReportError,
    TestRunError,
    ToolchainError,
    WorkspaceError,
)


class TestErrorCode:
    """Error code value tests."""

    @pytest.mark.parametrize(
        ("code", "expected_range"),
        [
            (ErrorCode.TOOLCHAIN_NOT_FOUND, 1000),
            (ErrorCode.CONFIG_PARSE_ERROR, 2000),
            (ErrorCode.BUILD_NO_EXECUTABLE, 3000),
            (ErrorCode.TEST_RUN_FAILED, 4000),
            (ErrorCode.MERGE_FAILED, 5000),
            (ErrorCode.REPORT_FAILED, 6000),
            (ErrorCode.WORKSPACE_CREATE_FAILED, 7000),
            (ErrorCode.PROCESS_SPAWN_FAILED, 8000),
            (ErrorCode.INTERNAL_ERROR, 9000),
        ],
    )
    def test_given_error_code_when_checked_then_in_correct_range(
        self, code: ErrorCode, expected_range: int
    ) -> None:
        """Error codes fall within their designated numeric range."""
        # Given
        error_code = code

        # When
        value = error_code.value

        # Then
        assert expected_range <= value < expected_range + 1000


class TestLlvmcovError:
    """Base error behavior tests."""

    def test_given_error_when_to_dict_then_serializes_all_fields(self) -> None:
        """Error serializes to dict with all required fields."""
        # Given
        error = LlvmcovError(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message="Test message",
            details={"key": "value"},
        )

        # When
        result = error.to_dict()

        # Then
        assert result == {
            "code": 2001,
            "error": "CONFIG_PARSE_ERROR",
            "message": "Test message",
            "details": {"key": "value"},
        }

    def test_given_error_when_str_then_human_readable(self) -> None:
        """Error string representation is human readable."""
        # Given
        error = LlvmcovError(code=ErrorCode.INTERNAL_ERROR, message="Something broke")

        # When
        result = str(error)

        # Then
        assert result == "[9001] INTERNAL_ERROR: Something broke"

    def test_given_error_when_raised_from_cause_then_chain_preserved(self) -> None:
        """Errors stay mutable so the interpreter can attach tracebacks and causes."""
        # Given
        cause = OSError("disk full")

        # When
        with pytest.raises(LlvmcovError) as exc_info:
            raise InternalError.unexpected("boom") from cause

        # Then
        assert exc_info.value.__cause__ is cause
        assert exc_info.value.__traceback__ is not None


class TestStageMessages:
    """Stage failures carry the short messages printed to the user."""

    @pytest.mark.parametrize(
        ("error", "message", "code"),
        [
            (BuildError.build_failed(), "failed to run build", ErrorCode.BUILD_FAILED),
            (BuildError.no_executable(), "no executable found", ErrorCode.BUILD_NO_EXECUTABLE),
            (
                BuildError.metadata_failed(),
                "failed to run cargo metadata",
                ErrorCode.BUILD_METADATA_FAILED,
            ),
            (TestRunError.failed("/t/a"), "failed to run executable", ErrorCode.TEST_RUN_FAILED),
            (ReportError.failed("show"), "failed to run coverage show", ErrorCode.REPORT_FAILED),
            (ReportError.failed("export"), "failed to run coverage export", ErrorCode.REPORT_FAILED),
        ],
        ids=["build", "no-executable", "metadata", "test", "show", "export"],
    )
    def test_given_factory_when_called_then_fixed_message(
        self, error: LlvmcovError, message: str, code: ErrorCode
    ) -> None:
        assert error.message == message
        assert error.code == code

    def test_given_decode_failure_when_created_then_line_in_details(self) -> None:
        error = BuildError.decode_failed("not json", "Invalid JSON")

        assert error.details == {"line": "not json"}
        assert "Invalid JSON" in error.message


class TestFactories:
    """Factory methods for errors with structured details."""

    def test_given_hint_when_tool_missing_then_hint_in_message(self) -> None:
        # Given / When
        error = ToolchainError.not_found("llvm-cov", "install llvm-tools-preview")

        # Then
        assert error.message == "llvm-cov not found (install llvm-tools-preview)"
        assert error.details == {"tool": "llvm-cov"}

    def test_given_bad_path_when_parse_error_then_includes_path(self) -> None:
        error = ConfigError.parse_error("/path/to/config.yaml", "bad indent")

        assert error.code == ErrorCode.CONFIG_PARSE_ERROR
        assert "/path/to/config.yaml" in error.message
        assert error.details["path"] == "/path/to/config.yaml"

    def test_given_bad_value_when_invalid_value_then_stringifies_value(self) -> None:
        error = ConfigError.invalid_value("logging.level", 42, "not a level")

        assert error.code == ErrorCode.CONFIG_INVALID_VALUE
        assert error.details == {"field": "logging.level", "value": "42", "reason": "not a level"}

    def test_given_workspace_failure_when_created_then_path_and_reason(self) -> None:
        error = WorkspaceError.create_failed("/t/cov/profraw-1", "File exists")

        assert error.details == {"path": "/t/cov/profraw-1", "reason": "File exists"}

    def test_given_details_when_unexpected_then_kept(self) -> None:
        error = InternalError.unexpected("no scripted result", command="cargo build")

        assert error.message == "Internal error: no scripted result"
        assert error.details == {"command": "cargo build"}

"""Tests for CLI status output."""

import pytest
from rich.console import Console
from structlog.testing import capture_logs

from cargo_llvmcov.core import progress
from cargo_llvmcov.core.progress import pluralize, status


@pytest.fixture
def console(monkeypatch: pytest.MonkeyPatch) -> Console:
    recording = Console(record=True, width=120, color_system=None)
    monkeypatch.setattr(progress, "_console", recording)
    return recording


class TestStatus:
    """Styled status lines."""

    def test_given_success_style_when_printed_then_check_prefix(self, console: Console) -> None:
        # When
        status("Merged 3 profiles", style="success")

        # Then
        assert console.export_text() == "✓ Merged 3 profiles\n"

    def test_given_indent_when_printed_then_padded(self, console: Console) -> None:
        status("/t/bin/test1", style="none", indent=4)

        assert console.export_text() == "    /t/bin/test1\n"

    def test_given_status_when_printed_then_debug_event_logged(self, console: Console) -> None:
        with capture_logs() as logs:
            status("Building tests")

        assert logs == [
            {
                "event": "status",
                "message": "Building tests",
                "style": "info",
                "logger": "progress",
                "log_level": "debug",
            }
        ]


class TestPluralize:
    @pytest.mark.parametrize(
        ("count", "expected"),
        [(0, "0 profiles"), (1, "1 profile"), (2, "2 profiles")],
    )
    def test_given_count_when_pluralized_then_word_agrees(self, count: int, expected: str) -> None:
        assert pluralize(count, "profile") == expected

    def test_given_irregular_plural_when_pluralized_then_used(self) -> None:
        assert pluralize(2, "binary", "binaries") == "2 binaries"

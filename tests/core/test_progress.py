"""Tests for core/progress.py module."""

from __future__ import annotations

from collections.abc import Iterator
from unittest.mock import patch

import pytest

from apidiff.core.progress import _STYLES, pluralize, set_quiet, status, task


@pytest.fixture(autouse=True)
def _loud() -> Iterator[None]:
    set_quiet(False)
    yield
    set_quiet(False)


class TestStatus:
    """Tests for status function."""

    def test_prints_message(self) -> None:
        with patch("apidiff.core.progress._console") as mock_console:
            status("Test message")
            mock_console.print.assert_called_once()

    def test_success_style(self) -> None:
        with patch("apidiff.core.progress._console") as mock_console:
            status("Done", style="success")
            assert "✓" in mock_console.print.call_args[0][0]

    def test_with_indent(self) -> None:
        with patch("apidiff.core.progress._console") as mock_console:
            status("Indented", indent=4)
            assert "    " + _STYLES["info"] + "Indented" in mock_console.print.call_args[0][0]

    def test_quiet_suppresses_output(self) -> None:
        set_quiet(True)
        with patch("apidiff.core.progress._console") as mock_console:
            status("hidden")
            mock_console.print.assert_not_called()


class TestTask:
    """Tests for task context manager."""

    def test_success_reports_timing(self) -> None:
        with patch("apidiff.core.progress._console") as mock_console:
            with task("Extracting"):
                pass
            last = mock_console.print.call_args[0][0]
            assert "✓" in last
            assert "Extracting (" in last

    def test_failure_reports_and_reraises(self) -> None:
        with patch("apidiff.core.progress._console") as mock_console:
            with pytest.raises(RuntimeError), task("Extracting"):
                raise RuntimeError("boom")
            last = mock_console.print.call_args[0][0]
            assert "✗" in last
            assert "Extracting failed" in last


class TestPluralize:
    """Tests for pluralize."""

    @pytest.mark.parametrize(
        ("count", "expected"),
        [(0, "0 changes"), (1, "1 change"), (2, "2 changes")],
    )
    def test_default_plural(self, count: int, expected: str) -> None:
        assert pluralize(count, "change") == expected

    def test_explicit_plural(self) -> None:
        assert pluralize(3, "entry", "entries") == "3 entries"

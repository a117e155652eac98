"""Tests for config/models.py module."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from apidiff.config.models import (
    ApiDiffConfig,
    ExtractorConfig,
    LogOutputConfig,
    WorktreeConfig,
)


class TestExtractorConfig:
    """Extractor settings validation."""

    def test_defaults_to_cargo_public_api(self) -> None:
        config = ExtractorConfig()
        assert config.command[:2] == ["cargo", "+nightly"]
        assert config.timeout_sec is None
        assert config.env == {}

    def test_default_command_is_not_shared(self) -> None:
        a = ExtractorConfig()
        a.command.append("--extra")
        assert "--extra" not in ExtractorConfig().command

    @pytest.mark.parametrize("command", [[], [""], ["   "]])
    def test_rejects_empty_command(self, command: list[str]) -> None:
        with pytest.raises(ValidationError, match="must name a program"):
            ExtractorConfig(command=command)

    @pytest.mark.parametrize("timeout", [0, -1.5])
    def test_rejects_non_positive_timeout(self, timeout: float) -> None:
        with pytest.raises(ValidationError, match="Timeout must be positive"):
            ExtractorConfig(timeout_sec=timeout)

    def test_rejects_unknown_format(self) -> None:
        with pytest.raises(ValidationError):
            ExtractorConfig(output_format="xml")  # type: ignore[arg-type]


class TestWorktreeConfig:
    """Working copy layout validation."""

    @pytest.mark.parametrize("name", ["", ".", "..", "a/b", "a\\b"])
    def test_rejects_non_component_dirname(self, name: str) -> None:
        with pytest.raises(ValidationError, match="single path component"):
            WorktreeConfig(base_dirname=name)

    def test_rejects_identical_dirnames(self) -> None:
        with pytest.raises(ValidationError, match="must differ"):
            WorktreeConfig(base_dirname="same", target_dirname="same")

    def test_rejects_non_positive_git_timeout(self) -> None:
        with pytest.raises(ValidationError):
            WorktreeConfig(git_timeout_sec=0)


class TestLogOutputConfig:
    """Log output destinations."""

    @pytest.mark.parametrize("dest", ["stderr", "stdout"])
    def test_accepts_streams(self, dest: str) -> None:
        assert LogOutputConfig(destination=dest).destination == dest

    def test_rejects_relative_file(self) -> None:
        with pytest.raises(ValidationError, match="absolute"):
            LogOutputConfig(destination="logs/apidiff.log")


def test_root_config_has_all_sections() -> None:
    config = ApiDiffConfig()
    assert config.logging.outputs[0].destination == "stderr"
    assert config.extractor.output_format == "lines"
    assert config.worktree.target_dirname == "target"

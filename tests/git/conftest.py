"""Test fixtures for git module."""

from __future__ import annotations

from pathlib import Path

import pygit2
import pytest

from apidiff.git import RepoAccess, WorktreeMaterializer


@pytest.fixture
def access(api_repo: pygit2.Repository) -> RepoAccess:
    """RepoAccess over the shared API repository."""
    return RepoAccess(Path(api_repo.workdir))


@pytest.fixture
def materializer(access: RepoAccess) -> WorktreeMaterializer:
    return WorktreeMaterializer(access, git_timeout_sec=30)


@pytest.fixture
def scratch(tmp_path: Path) -> Path:
    """Directory outside the repository for working copies."""
    path = tmp_path / "scratch"
    path.mkdir()
    return path

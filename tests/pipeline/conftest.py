"""Fixtures for pipeline tests."""

from __future__ import annotations

import threading
from pathlib import Path

import pygit2
import pytest

from apidiff.core.errors import ExtractionError
from apidiff.extract.models import SymbolDocument
from apidiff.extract.parsers import parse_lines
from apidiff.git import RepoAccess, WorktreeMaterializer
from apidiff.git.worktree import WorkingCopy


class FileExtractor:
    """Reads API.txt from the working copy; can fail or crash per reference."""

    def __init__(self, fail_on: set[str] | None = None, crash_on: set[str] | None = None) -> None:
        self.fail_on = fail_on or set()
        self.crash_on = crash_on or set()
        self.seen: list[WorkingCopy] = []
        self._lock = threading.Lock()

    def extract(self, copy: WorkingCopy) -> SymbolDocument:
        with self._lock:
            self.seen.append(copy)
        if copy.reference in self.fail_on:
            raise ExtractionError.failed(["fake-engine"], f"cannot build {copy.reference}", 1)
        if copy.reference in self.crash_on:
            raise RuntimeError("engine crashed")
        text = (copy.path / "API.txt").read_text()
        return SymbolDocument.of(parse_lines(text), reference=copy.reference)


@pytest.fixture
def materializer(api_repo: pygit2.Repository) -> WorktreeMaterializer:
    return WorktreeMaterializer(RepoAccess(Path(api_repo.workdir)), git_timeout_sec=30)


@pytest.fixture
def make_extractor() -> type[FileExtractor]:
    """Factory for FileExtractor instances."""
    return FileExtractor

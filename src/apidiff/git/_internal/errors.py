"""Centralized mapping of git-layer failures onto apidiff errors."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import AbstractContextManager, contextmanager

import pygit2

from apidiff.core.errors import MaterializeError, RefError
from apidiff.git.errors import GitError, RefNotFoundError


class ErrorMapper:
    """Maps pygit2 and git subprocess exceptions to domain errors."""

    @staticmethod
    @contextmanager
    def guard(reference: str) -> Iterator[None]:
        """Context manager for consistent exception translation."""
        try:
            yield
        except RefNotFoundError as e:
            raise RefError.unknown(reference) from e
        except (GitError, pygit2.GitError, OSError) as e:
            raise MaterializeError.failed(reference, str(e)) from e


def git_operation(reference: str) -> AbstractContextManager[None]:
    """Translate git failures while working on *reference*."""
    return ErrorMapper.guard(reference)

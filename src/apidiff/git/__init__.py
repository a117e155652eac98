"""Git access and revision materialization."""

from apidiff.git._internal import RepoAccess
from apidiff.git.errors import (
    GitCommandError,
    GitError,
    NotARepositoryError,
    RefNotFoundError,
    WorktreeError,
    WorktreeNotFoundError,
)
from apidiff.git.refs import validate_reference
from apidiff.git.worktree import WorkingCopy, WorktreeMaterializer

__all__ = [
    # Access
    "RepoAccess",
    # Materializer
    "WorkingCopy",
    "WorktreeMaterializer",
    "validate_reference",
    # Errors
    "GitCommandError",
    "GitError",
    "NotARepositoryError",
    "RefNotFoundError",
    "WorktreeError",
    "WorktreeNotFoundError",
]

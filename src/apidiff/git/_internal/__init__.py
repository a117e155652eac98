"""Internal components for git operations - not part of public API."""

from apidiff.git._internal.access import RepoAccess
from apidiff.git._internal.errors import ErrorMapper, git_operation

__all__ = [
    "ErrorMapper",
    "RepoAccess",
    "git_operation",
]

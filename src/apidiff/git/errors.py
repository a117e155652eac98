"""Git module error types.

These stay inside the git layer; the materializer maps them onto
``apidiff.core.errors`` at its boundary.
"""


class GitError(Exception):
    """Base error for git operations."""

    pass


class NotARepositoryError(GitError):
    """Path is not a git repository."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Not a git repository: {path}")
        self.path = path


class RefNotFoundError(GitError):
    """Reference (branch, tag, commit) not found."""

    def __init__(self, ref: str) -> None:
        super().__init__(f"Reference not found: {ref}")
        self.ref = ref


class GitCommandError(GitError):
    """A git subprocess exited with a failure status."""

    def __init__(self, args: list[str], returncode: int | None, stderr: str) -> None:
        status = f"exit {returncode}" if returncode is not None else "timed out"
        detail = f": {stderr.strip()}" if stderr.strip() else ""
        super().__init__(f"git {' '.join(args)} failed ({status}){detail}")
        self.args_list = args
        self.returncode = returncode
        self.stderr = stderr


# =============================================================================
# Worktree Errors
# =============================================================================


class WorktreeError(GitError):
    """Worktree operation failed."""

    pass


class WorktreeNotFoundError(WorktreeError):
    """No worktree is registered at the given path."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Worktree not found: {path}")
        self.path = path

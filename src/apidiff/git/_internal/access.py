"""Repository access layer - owns pygit2.Repository and the git worktree subprocesses."""

from __future__ import annotations

import subprocess
from collections.abc import Sequence
from pathlib import Path

import pygit2

from apidiff.git.errors import (
    GitCommandError,
    NotARepositoryError,
    RefNotFoundError,
    WorktreeNotFoundError,
)


class RepoAccess:
    """Owns pygit2.Repository and provides normalized access to repo state.

    pygit2 objects are not safe to share across threads; callers that use one
    RepoAccess from several threads serialize through their own lock.
    """

    def __init__(self, repo_path: Path | str) -> None:
        self._path = Path(repo_path)
        try:
            self._repo = pygit2.Repository(str(self._path))
        except pygit2.GitError as e:
            raise NotARepositoryError(str(self._path)) from e

    @classmethod
    def discover(cls, start: Path | str) -> RepoAccess:
        """Open the repository containing *start*, walking up parent directories."""
        found = pygit2.discover_repository(str(start))
        if found is None:
            raise NotARepositoryError(str(start))
        return cls(found)

    @property
    def repo(self) -> pygit2.Repository:
        return self._repo

    @property
    def path(self) -> Path:
        """Working directory for non-bare repos, git dir otherwise."""
        return Path(self._repo.workdir) if self._repo.workdir else Path(self._repo.path)

    @property
    def workdir(self) -> str | None:
        """Working directory path, or None for bare repos."""
        return self._repo.workdir

    @property
    def is_bare(self) -> bool:
        return self._repo.is_bare

    # =========================================================================
    # Resolution Helpers
    # =========================================================================

    def resolve_ref_oid(self, ref: str) -> pygit2.Oid:
        try:
            obj, _ = self._repo.resolve_refish(ref)
            return obj.id
        except (pygit2.GitError, KeyError, ValueError) as e:
            raise RefNotFoundError(ref) from e

    def resolve_commit(self, ref: str) -> pygit2.Commit:
        obj: pygit2.Object | None = self._repo.get(self.resolve_ref_oid(ref))
        if isinstance(obj, pygit2.Tag):
            obj = obj.peel(pygit2.Commit)  # type: ignore[assignment]
        if not isinstance(obj, pygit2.Commit):
            raise RefNotFoundError(f"{ref} is not a commit")
        return obj

    # =========================================================================
    # Worktree Operations
    # =========================================================================

    def list_worktrees(self) -> list[str]:
        """List worktree names (excluding main)."""
        return list(self._repo.list_worktrees())

    def worktree_name_for_path(self, path: Path) -> str | None:
        """Registered worktree name for a checkout directory, if any."""
        wanted = path.resolve()
        for name in self.list_worktrees():
            try:
                wt = self._repo.lookup_worktree(name)
            except pygit2.GitError:
                continue
            if Path(wt.path).resolve() == wanted:
                return name
        return None

    def add_detached_worktree(self, path: Path, commit: pygit2.Oid, *, timeout: float) -> None:
        """Register a detached worktree at *path* without populating it.

        Only writes the administrative entry and HEAD; ``populate_worktree``
        fills the tree.
        """
        self.run_git(
            ["worktree", "add", "--no-checkout", "--detach", str(path), str(commit)],
            timeout=timeout,
        )

    def populate_worktree(self, path: Path, *, timeout: float) -> None:
        """Check out HEAD into a worktree created with --no-checkout."""
        self.run_git(["reset", "--hard", "--quiet"], cwd=path, timeout=timeout)

    def require_worktree(self, path: Path) -> str:
        """Registered worktree name for *path*; raise if there is none."""
        name = self.worktree_name_for_path(path)
        if name is None:
            raise WorktreeNotFoundError(str(path))
        return name

    def remove_worktree(self, path: Path, *, timeout: float) -> None:
        """Remove worktree using git subprocess for correctness."""
        # Need --force twice: once for dirty, once for locked
        self.run_git(["worktree", "remove", "--force", "--force", str(path)], timeout=timeout)

    def prune_worktrees(self, *, timeout: float) -> None:
        """Drop registrations whose directories no longer exist."""
        self.run_git(["worktree", "prune"], timeout=timeout)

    # =========================================================================
    # Subprocess
    # =========================================================================

    def run_git(
        self, args: Sequence[str], *, cwd: Path | None = None, timeout: float = 60
    ) -> str:
        """Run git and return stdout; raise GitCommandError on failure."""
        argv = list(args)
        try:
            result = subprocess.run(
                ["git", *argv],
                cwd=str(cwd or self.path),
                capture_output=True,
                text=True,
                timeout=timeout,
            )
        except subprocess.TimeoutExpired as e:
            stderr = e.stderr.decode(errors="replace") if isinstance(e.stderr, bytes) else ""
            raise GitCommandError(argv, None, stderr) from e
        except OSError as e:
            raise GitCommandError(argv, None, str(e)) from e
        if result.returncode != 0:
            raise GitCommandError(argv, result.returncode, result.stderr)
        return result.stdout

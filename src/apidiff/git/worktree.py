"""Revision materializer - isolated, detached worktrees per reference.

Each working copy is a linked git worktree checked out at the commit the
reference resolves to. The main working tree, index and HEAD are never
touched. Registering, looking up or pruning entries under ``.git/worktrees``
goes through the materializer's lock. Populating and removing a tree run
unlocked so two checkouts can proceed in parallel.
"""

from __future__ import annotations

import shutil
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, replace
from pathlib import Path

from apidiff.core.errors import MaterializeError
from apidiff.core.logging import get_logger
from apidiff.git._internal import RepoAccess, git_operation
from apidiff.git.errors import GitError
from apidiff.git.refs import validate_reference

log = get_logger("git.worktree")


@dataclass(frozen=True, slots=True)
class WorkingCopy:
    """A materialized checkout of one reference."""

    reference: str
    commit_sha: str
    path: Path
    name: str | None = None


class WorktreeMaterializer:
    """Creates and releases working copies against one repository."""

    def __init__(
        self,
        access: RepoAccess,
        *,
        git_timeout_sec: float = 60.0,
        lock: threading.Lock | None = None,
    ) -> None:
        self._access = access
        self._timeout = git_timeout_sec
        self._lock = lock or threading.Lock()

    @property
    def access(self) -> RepoAccess:
        return self._access

    def resolve(self, reference: str) -> str:
        """Validate and resolve *reference* to a commit sha."""
        validate_reference(reference)
        with git_operation(reference), self._lock:
            return str(self._access.resolve_commit(reference).id)

    def materialize(self, reference: str, target_dir: Path) -> WorkingCopy:
        """Check out *reference* into *target_dir*, which must be absent or empty."""
        validate_reference(reference)
        target_dir = Path(target_dir).absolute()
        _check_destination(target_dir)

        with git_operation(reference), self._lock:
            commit = self._access.resolve_commit(reference)
            self._access.add_detached_worktree(target_dir, commit.id, timeout=self._timeout)

        # Registered from here on; any failure must release it
        copy = WorkingCopy(reference, str(commit.id), target_dir)
        try:
            with git_operation(reference):
                with self._lock:
                    name = self._access.worktree_name_for_path(target_dir)
                copy = replace(copy, name=name)
                log.debug(
                    "worktree_registered", reference=reference, path=str(target_dir), name=name
                )
                self._access.populate_worktree(target_dir, timeout=self._timeout)
        except BaseException:
            self.release(copy, strict=False)
            raise

        log.info("worktree_ready", reference=reference, commit=copy.commit_sha[:12])
        return copy

    def release(self, copy: WorkingCopy, *, strict: bool = True) -> None:
        """Unregister the worktree and delete its directory.

        Only the registration lookup and the fallback prune hold the lock;
        the removal itself runs unlocked.

        With ``strict=False`` a failure is logged instead of raised, for use
        while another error is already propagating.
        """
        error: Exception | None = None
        try:
            with self._lock:
                self._access.require_worktree(copy.path)
            self._access.remove_worktree(copy.path, timeout=self._timeout)
        except GitError as e:
            log.warning("worktree_remove_failed", path=str(copy.path), error=str(e))
            shutil.rmtree(copy.path, ignore_errors=True)
            try:
                with self._lock:
                    self._access.prune_worktrees(timeout=self._timeout)
            except GitError as prune_error:
                error = prune_error
            if error is None and copy.path.exists():
                error = e

        if error is None:
            log.debug("worktree_released", reference=copy.reference, path=str(copy.path))
            return
        if strict:
            raise MaterializeError.release_failed(str(copy.path), str(error)) from error
        log.error("worktree_release_failed", path=str(copy.path), error=str(error))

    @contextmanager
    def checkout(self, reference: str, target_dir: Path) -> Iterator[WorkingCopy]:
        """Materialize for the duration of the block; always released on exit."""
        copy = self.materialize(reference, target_dir)
        try:
            yield copy
        except BaseException:
            self.release(copy, strict=False)
            raise
        self.release(copy)


def _check_destination(target_dir: Path) -> None:
    if not target_dir.exists():
        return
    if not target_dir.is_dir() or any(target_dir.iterdir()):
        raise MaterializeError.path_conflict(str(target_dir))

"""Concurrent extraction of base and target revisions.

Both branches run materialize -> extract -> release on their own worker
thread and under their own temporary subdirectory. The orchestrator always
waits for both; a failing branch never cancels the other. When both fail the
base failure is reported and the target failure is attached as ``secondary``.
"""

from __future__ import annotations

import contextvars
import tempfile
from collections.abc import Iterator
from concurrent.futures import Future, ThreadPoolExecutor
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import NoReturn

import structlog

from apidiff.config.models import WorktreeConfig
from apidiff.core.errors import ApiDiffError, MaterializeError, TaskError
from apidiff.core.logging import get_logger
from apidiff.diff.engine import DiffResult, diff
from apidiff.extract.engine import Extractor
from apidiff.extract.models import SymbolDocument
from apidiff.git.refs import validate_reference
from apidiff.git.worktree import WorktreeMaterializer

log = get_logger("pipeline")

BASE = "base"
TARGET = "target"


@dataclass(frozen=True, slots=True)
class DocumentPair:
    """Extraction results for both revisions."""

    base: SymbolDocument
    target: SymbolDocument


@dataclass(frozen=True, slots=True)
class _Outcome:
    branch: str
    document: SymbolDocument | None = None
    error: ApiDiffError | None = None
    cause: BaseException | None = None


class Orchestrator:
    """Runs the two extraction branches in parallel and joins them."""

    def __init__(
        self,
        materializer: WorktreeMaterializer,
        extractor: Extractor,
        config: WorktreeConfig | None = None,
    ) -> None:
        self._materializer = materializer
        self._extractor = extractor
        self._config = config or WorktreeConfig()

    def run(
        self, base_ref: str, target_ref: str, temp_root: Path | None = None
    ) -> DocumentPair:
        """Extract both revisions. Either both documents or an ApiDiffError."""
        refs = {BASE: base_ref, TARGET: target_ref}
        for branch, ref in refs.items():
            try:
                validate_reference(ref)
            except ApiDiffError as e:
                raise e.with_context(branch=branch) from None
        for branch, ref in refs.items():
            try:
                sha = self._materializer.resolve(ref)
            except ApiDiffError as e:
                raise e.with_context(branch=branch, phase="validate") from e.__cause__
            log.debug("reference_resolved", branch=branch, reference=ref, commit=sha[:12])

        with self._temp_root(temp_root) as root:
            dirs = {
                BASE: root / self._config.base_dirname,
                TARGET: root / self._config.target_dirname,
            }
            # One context copy per branch: a Context cannot be entered by two threads
            with ThreadPoolExecutor(max_workers=2, thread_name_prefix="apidiff") as pool:
                futures = {
                    branch: pool.submit(
                        contextvars.copy_context().run,
                        self._run_branch,
                        branch,
                        refs[branch],
                        dirs[branch],
                    )
                    for branch in (BASE, TARGET)
                }
            outcomes = {branch: _collect(branch, fut) for branch, fut in futures.items()}

        base, target = outcomes[BASE], outcomes[TARGET]
        if base.error is not None:
            _raise_failure(base, target if target.error is not None else None)
        if target.error is not None:
            _raise_failure(target, None)
        assert base.document is not None and target.document is not None
        return DocumentPair(base.document, target.document)

    def compare(
        self, base_ref: str, target_ref: str, temp_root: Path | None = None
    ) -> DiffResult:
        """Extract both revisions and diff them."""
        pair = self.run(base_ref, target_ref, temp_root)
        result = diff(pair.base, pair.target)
        log.info(
            "diff_computed",
            added=len(result.added),
            removed=len(result.removed),
            changed=len(result.changed),
        )
        return result

    def _run_branch(self, branch: str, ref: str, target_dir: Path) -> SymbolDocument:
        structlog.contextvars.bind_contextvars(branch=branch, reference=ref)
        phase = "materialize"
        try:
            with self._materializer.checkout(ref, target_dir) as copy:
                phase = "extract"
                document = self._extractor.extract(copy)
                phase = "release"
        except ApiDiffError as e:
            raise e.with_context(branch=branch, phase=phase) from e.__cause__
        log.info("branch_done", symbols=len(document))
        return document

    @contextmanager
    def _temp_root(self, temp_root: Path | None) -> Iterator[Path]:
        if temp_root is not None:
            root = Path(temp_root).absolute()
            try:
                root.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise MaterializeError.temp_root_failed(str(root), str(e)) from e
            log.debug("temp_root", path=str(root), generated=False)
            yield root
            return

        with tempfile.TemporaryDirectory(prefix=self._config.tempdir_prefix) as tmp:
            log.debug("temp_root", path=tmp, generated=True)
            yield Path(tmp)


def _collect(branch: str, future: Future[SymbolDocument]) -> _Outcome:
    try:
        return _Outcome(branch, document=future.result())
    except ApiDiffError as e:
        return _Outcome(branch, error=e, cause=e.__cause__)
    except Exception as e:
        log.error("branch_crashed", branch=branch, error=repr(e))
        return _Outcome(branch, error=TaskError.failed(branch, repr(e)), cause=e)


def _raise_failure(primary: _Outcome, secondary: _Outcome | None) -> NoReturn:
    assert primary.error is not None
    error = primary.error
    if secondary is not None and secondary.error is not None:
        log.warning("secondary_failure", branch=secondary.branch, error=str(secondary.error))
        error = error.with_context(secondary=str(secondary.error))
    raise error from primary.cause

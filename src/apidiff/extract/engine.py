"""Extraction adapter - runs the symbol extraction engine against a working copy."""

from __future__ import annotations

import os
import subprocess
from typing import Protocol

from apidiff.config.models import ExtractorConfig
from apidiff.core.errors import ExtractionError
from apidiff.core.logging import get_logger
from apidiff.extract.models import SymbolDocument
from apidiff.extract.parsers import parse_output
from apidiff.git.worktree import WorkingCopy

log = get_logger("extract")

PATH_PLACEHOLDER = "{path}"


class Extractor(Protocol):
    """Anything that turns a working copy into a SymbolDocument."""

    def extract(self, copy: WorkingCopy) -> SymbolDocument: ...


class CommandExtractor:
    """Runs an external engine as a subprocess and parses its stdout.

    The engine runs with the working copy as its working directory. A non-zero
    exit, a timeout, or a missing executable is ``EXTRACTION_FAILED`` with the
    engine's own diagnostics; unparsable stdout is
    ``EXTRACTION_OUTPUT_INVALID``.
    """

    def __init__(self, config: ExtractorConfig | None = None) -> None:
        self._config = config or ExtractorConfig()

    @property
    def config(self) -> ExtractorConfig:
        return self._config

    def command_for(self, copy: WorkingCopy) -> list[str]:
        return [arg.replace(PATH_PLACEHOLDER, str(copy.path)) for arg in self._config.command]

    def extract(self, copy: WorkingCopy) -> SymbolDocument:
        argv = self.command_for(copy)
        env = {**os.environ, **self._config.env}
        log.info("extraction_started", reference=copy.reference, command=argv)

        try:
            result = subprocess.run(
                argv,
                cwd=str(copy.path),
                env=env,
                capture_output=True,
                timeout=self._config.timeout_sec,
            )
        except subprocess.TimeoutExpired as e:
            diagnostics = _decode(e.stderr) or f"timed out after {self._config.timeout_sec}s"
            raise ExtractionError.failed(argv, diagnostics) from e
        except OSError as e:
            raise ExtractionError.failed(argv, str(e)) from e

        if result.returncode != 0:
            diagnostics = _decode(result.stderr) or _decode(result.stdout)
            log.debug("extraction_failed", reference=copy.reference, code=result.returncode)
            raise ExtractionError.failed(argv, diagnostics, result.returncode)

        try:
            text = result.stdout.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ExtractionError.output_invalid(f"output is not UTF-8: {e}") from e

        document = SymbolDocument.of(
            parse_output(text, self._config.output_format), reference=copy.reference
        )
        log.info("extraction_done", reference=copy.reference, symbols=len(document))
        return document


def _decode(data: bytes | str | None) -> str:
    if data is None:
        return ""
    if isinstance(data, str):
        return data
    return data.decode("utf-8", errors="replace")

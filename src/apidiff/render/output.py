"""Output sink for rendered text."""

from __future__ import annotations

from pathlib import Path

from apidiff.core.errors import OutputError


def check_destination(path: Path) -> None:
    """Fail early when *path* already exists; output never overwrites."""
    if path.exists() or path.is_symlink():
        raise OutputError.write_failed(str(path), "destination already exists")


def write_output(text: str, path: Path) -> None:
    """Write *text* to a new file at *path*.

    The file is created exclusively; on a failed write the partial file is
    removed.
    """
    try:
        handle = path.open("x", encoding="utf-8")
    except FileExistsError as e:
        raise OutputError.write_failed(str(path), "destination already exists") from e
    except OSError as e:
        raise OutputError.write_failed(str(path), str(e)) from e

    try:
        with handle:
            handle.write(text)
    except OSError as e:
        path.unlink(missing_ok=True)
        raise OutputError.write_failed(str(path), str(e)) from e

"""CLI utilities."""

from pathlib import Path

import click

from apidiff.core.errors import ApiDiffError, error_chain
from apidiff.git import NotARepositoryError, RepoAccess


def open_repository(start_path: Path | None = None) -> RepoAccess:
    """Open the git repository containing the given path.

    Walks up the directory tree from start_path (default: current directory).

    Raises:
        click.ClickException: If not inside a git repository
    """
    if start_path is None:
        start_path = Path.cwd()
    try:
        return RepoAccess.discover(start_path.resolve())
    except NotARepositoryError:
        raise click.ClickException(
            f"Not inside a git repository: {start_path}\n"
            "apidiff must be run from within a git repository, or pass --repo PATH."
        ) from None


def format_error(error: ApiDiffError) -> str:
    """One message chain: the error, its causes, then engine diagnostics."""
    chain = error_chain(error)
    lines = [chain[0]]
    lines.extend(f"  caused by: {message}" for message in chain[1:])

    secondary = error.details.get("secondary")
    if secondary:
        lines.append(f"  also failed: {secondary}")

    diagnostics = str(error.details.get("diagnostics") or "").rstrip()
    if diagnostics:
        lines.append("")
        lines.append(diagnostics)
    return "\n".join(lines)

"""apidiff CLI - compare the public API of two git revisions."""

from pathlib import Path

import click

from apidiff import __version__
from apidiff.cli.utils import format_error, open_repository
from apidiff.config import load_config
from apidiff.core.errors import ApiDiffError
from apidiff.core.logging import configure_logging, set_run_id
from apidiff.core.progress import pluralize, status, task
from apidiff.diff import project
from apidiff.extract import CommandExtractor
from apidiff.git import WorktreeMaterializer
from apidiff.pipeline import Orchestrator
from apidiff.render import TemplateRenderer, check_destination, write_output


@click.command()
@click.version_option(version=__version__, prog_name="apidiff")
@click.argument("base")
@click.argument("target")
@click.argument(
    "template",
    required=False,
    type=click.Path(dir_okay=False, path_type=Path),
)
@click.option(
    "--tempdir",
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory to create worktrees in (default: a private temp dir)",
)
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="File to write the result to; must not exist (default: stdout)",
)
@click.option("--json", "as_json", is_flag=True, help="Emit the diff as JSON instead of a template")
@click.option(
    "--repo",
    default=".",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Repository to operate on (default: current directory)",
)
@click.option(
    "--config",
    "config_file",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Config file to use instead of the repository's .apidiff.yaml",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
def cli(
    base: str,
    target: str,
    template: Path | None,
    tempdir: Path | None,
    output: Path | None,
    as_json: bool,
    repo: Path,
    config_file: Path | None,
    verbose: bool,
) -> None:
    """Diff the public API between BASE and TARGET and render it through TEMPLATE.

    BASE and TARGET are git references (branch, tag or commit). TEMPLATE is a
    Jinja2 template receiving ``added``, ``removed`` and ``changed``
    (items with ``old`` and ``new``).
    """
    if template is None and not as_json:
        raise click.UsageError("TEMPLATE is required unless --json is given")
    if template is not None and as_json:
        raise click.UsageError("TEMPLATE and --json are mutually exclusive")

    configure_logging(level="DEBUG" if verbose else "WARNING")
    try:
        _run(base, target, template, tempdir, output, repo, config_file, verbose)
    except ApiDiffError as e:
        raise click.ClickException(format_error(e)) from e


def _run(
    base: str,
    target: str,
    template: Path | None,
    tempdir: Path | None,
    output: Path | None,
    repo: Path,
    config_file: Path | None,
    verbose: bool,
) -> None:
    access = open_repository(repo)
    config = load_config(access.path, config_file=config_file)
    if verbose:
        config.logging.level = "DEBUG"
    configure_logging(config=config.logging)
    set_run_id()

    # Fail fast on everything that needs no git work
    renderer = TemplateRenderer.from_file(template) if template is not None else None
    if output is not None:
        check_destination(output)

    materializer = WorktreeMaterializer(access, git_timeout_sec=config.worktree.git_timeout_sec)
    orchestrator = Orchestrator(materializer, CommandExtractor(config.extractor), config.worktree)

    with task(f"Extracting public API of {base} and {target}"):
        result = orchestrator.compare(base, target, tempdir)

    status(
        f"{pluralize(len(result.added), 'addition')}, "
        f"{pluralize(len(result.removed), 'removal')}, "
        f"{pluralize(len(result.changed), 'change')}",
        style="info",
    )

    model = project(result)
    text = model.to_json() + "\n" if renderer is None else renderer.render(model)

    if output is None:
        click.echo(text, nl=False)
        return
    write_output(text, output)
    status(f"Wrote {output}", style="success")


if __name__ == "__main__":
    cli()

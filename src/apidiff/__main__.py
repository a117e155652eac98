"""Allow ``python -m apidiff``."""

from apidiff.cli.main import cli

if __name__ == "__main__":
    cli()

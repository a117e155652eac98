"""apidiff - public API diff between two git revisions."""

__version__ = "0.1.0"

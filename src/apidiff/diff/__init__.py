"""Structural diff of symbol documents and its render-ready projection."""

from apidiff.diff.engine import ChangedSymbol, DiffResult, diff
from apidiff.diff.projection import ChangedItem, RenderableDiff, project

__all__ = [
    "ChangedItem",
    "ChangedSymbol",
    "DiffResult",
    "RenderableDiff",
    "diff",
    "project",
]

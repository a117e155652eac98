"""Render-ready projection of a DiffResult.

This is where symbols are flattened to display strings for templates and
JSON output.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from typing import Any

from apidiff.diff.engine import DiffResult


@dataclass(frozen=True, slots=True)
class ChangedItem:
    old: str
    new: str


@dataclass(frozen=True, slots=True)
class RenderableDiff:
    """Template context: ``added``, ``removed``, ``changed`` (``old``/``new``)."""

    added: list[str] = field(default_factory=list)
    removed: list[str] = field(default_factory=list)
    changed: list[ChangedItem] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    def to_json(self, *, indent: int | None = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)


def project(result: DiffResult) -> RenderableDiff:
    return RenderableDiff(
        added=[str(s) for s in result.added],
        removed=[str(s) for s in result.removed],
        changed=[ChangedItem(old=str(c.old), new=str(c.new)) for c in result.changed],
    )

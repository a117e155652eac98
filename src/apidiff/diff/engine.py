"""Identity-keyed structural diff of two symbol documents.

Symbols are matched by path. A path present on both sides with a different
signature is a change, not an add/remove pair. Output order follows the
source documents: ``added`` in target order, ``removed`` and ``changed`` in
base order.

Paths may repeat within one document (overloads, multiple impls). Within a
path, occurrences with identical signatures cancel first-seen first; the
remaining occurrences pair up in order as changes and any surplus is added or
removed.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from apidiff.extract.models import Symbol, SymbolDocument


@dataclass(frozen=True, slots=True)
class ChangedSymbol:
    """Same identity, different signature."""

    old: Symbol
    new: Symbol

    @property
    def path(self) -> str:
        return self.old.path


@dataclass(frozen=True, slots=True)
class DiffResult:
    """Disjoint added / removed / changed partition of two documents."""

    added: tuple[Symbol, ...] = ()
    removed: tuple[Symbol, ...] = ()
    changed: tuple[ChangedSymbol, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not (self.added or self.removed or self.changed)


def _index(symbols: Sequence[Symbol]) -> dict[str, list[int]]:
    """Positions of each path, in document order."""
    index: dict[str, list[int]] = {}
    for pos, sym in enumerate(symbols):
        index.setdefault(sym.path, []).append(pos)
    return index


def _match_path(
    base: Sequence[Symbol],
    target: Sequence[Symbol],
    base_pos: list[int],
    target_pos: list[int],
) -> tuple[list[int], list[int], list[tuple[int, int]]]:
    """Resolve one path's occurrences into (removed, added, changed) positions."""
    remaining_target = list(target_pos)
    unmatched_base: list[int] = []
    for b in base_pos:
        for t in remaining_target:
            if base[b].signature == target[t].signature:
                remaining_target.remove(t)
                break
        else:
            unmatched_base.append(b)

    pairs = list(zip(unmatched_base, remaining_target, strict=False))
    removed = unmatched_base[len(pairs) :]
    added = remaining_target[len(pairs) :]
    return removed, added, pairs


def diff(base: SymbolDocument, target: SymbolDocument) -> DiffResult:
    """Compute the partitioned diff of *base* against *target*. Pure."""
    base_syms = base.symbols
    target_syms = target.symbols
    base_index = _index(base_syms)
    target_index = _index(target_syms)

    removed_pos: set[int] = set()
    added_pos: set[int] = set()
    changed_at: dict[int, int] = {}

    for path, b_positions in base_index.items():
        t_positions = target_index.get(path)
        if t_positions is None:
            removed_pos.update(b_positions)
            continue
        removed, added, pairs = _match_path(base_syms, target_syms, b_positions, t_positions)
        removed_pos.update(removed)
        added_pos.update(added)
        changed_at.update(pairs)

    for path, t_positions in target_index.items():
        if path not in base_index:
            added_pos.update(t_positions)

    return DiffResult(
        added=tuple(s for i, s in enumerate(target_syms) if i in added_pos),
        removed=tuple(s for i, s in enumerate(base_syms) if i in removed_pos),
        changed=tuple(
            ChangedSymbol(s, target_syms[changed_at[i]])
            for i, s in enumerate(base_syms)
            if i in changed_at
        ),
    )

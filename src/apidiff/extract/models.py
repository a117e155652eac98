"""Symbol data models shared by extraction and diffing."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Symbol:
    """An exported interface element.

    ``path`` is the identity key; ``signature`` is the full rendered item and
    doubles as the display string.
    """

    path: str
    signature: str
    kind: str | None = None

    def __str__(self) -> str:
        return self.signature


@dataclass(frozen=True, slots=True)
class SymbolDocument:
    """Complete, ordered public interface of one revision."""

    symbols: tuple[Symbol, ...] = ()
    reference: str | None = None

    @classmethod
    def of(cls, symbols: Iterable[Symbol], reference: str | None = None) -> SymbolDocument:
        return cls(tuple(symbols), reference)

    def __iter__(self) -> Iterator[Symbol]:
        return iter(self.symbols)

    def __len__(self) -> int:
        return len(self.symbols)

    def paths(self) -> list[str]:
        return [s.path for s in self.symbols]

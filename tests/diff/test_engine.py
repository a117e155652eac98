"""Tests for diff/engine.py - the identity-keyed structural diff."""

from __future__ import annotations

import pytest

from apidiff.diff.engine import ChangedSymbol, DiffResult, diff
from apidiff.extract.models import Symbol, SymbolDocument


def sym(path: str, signature: str | None = None) -> Symbol:
    return Symbol(path, signature or f"pub fn {path}()")


def doc(*symbols: Symbol) -> SymbolDocument:
    return SymbolDocument.of(symbols)


class TestDiffPartition:
    """Added / removed / changed classification."""

    def test_given_rename_and_signature_change_then_partitioned(self) -> None:
        # Given
        base = doc(
            sym("demo"),
            sym("demo::parse", "pub fn demo::parse(&str) -> u32"),
            sym("demo::legacy"),
        )
        target = doc(
            sym("demo"),
            sym("demo::parse", "pub fn demo::parse(&str) -> u64"),
            sym("demo::fresh"),
        )

        # When
        result = diff(base, target)

        # Then
        assert result.added == (sym("demo::fresh"),)
        assert result.removed == (sym("demo::legacy"),)
        assert result.changed == (
            ChangedSymbol(
                sym("demo::parse", "pub fn demo::parse(&str) -> u32"),
                sym("demo::parse", "pub fn demo::parse(&str) -> u64"),
            ),
        )

    def test_given_changed_arity_and_renamed_fn_then_one_of_each(self) -> None:
        # Given
        base = doc(sym("foo::bar", "foo::bar(i32)->i32"), sym("foo::baz", "foo::baz()->()"))
        target = doc(
            sym("foo::bar", "foo::bar(i32,i32)->i32"), sym("foo::qux", "foo::qux()->()")
        )

        # When
        result = diff(base, target)

        # Then
        assert [s.path for s in result.added] == ["foo::qux"]
        assert [s.path for s in result.removed] == ["foo::baz"]
        assert [(c.old.signature, c.new.signature) for c in result.changed] == [
            ("foo::bar(i32)->i32", "foo::bar(i32,i32)->i32")
        ]

    def test_given_identical_documents_then_empty(self) -> None:
        base = doc(sym("a"), sym("b"), sym("c"))
        result = diff(base, doc(*base.symbols))
        assert result == DiffResult()
        assert result.is_empty

    def test_given_two_empty_documents_then_empty(self) -> None:
        assert diff(doc(), doc()).is_empty

    def test_given_empty_base_then_everything_added(self) -> None:
        target = doc(sym("a"), sym("b"))
        result = diff(doc(), target)
        assert result.added == target.symbols
        assert result.removed == ()
        assert result.changed == ()

    def test_given_empty_target_then_everything_removed(self) -> None:
        base = doc(sym("a"), sym("b"))
        result = diff(base, doc())
        assert result.removed == base.symbols
        assert result.added == ()

    def test_signature_change_is_never_add_remove_pair(self) -> None:
        result = diff(doc(sym("a", "old")), doc(sym("a", "new")))
        assert result.added == ()
        assert result.removed == ()
        assert [c.path for c in result.changed] == ["a"]


class TestDiffProperties:
    """Symmetry and ordering guarantees."""

    BASE = doc(sym("x"), sym("m", "m v1"), sym("gone1"), sym("k"), sym("gone2"))
    TARGET = doc(sym("new1"), sym("k"), sym("m", "m v2"), sym("new2"), sym("x"))

    def test_swapping_inputs_swaps_added_and_removed(self) -> None:
        forward = diff(self.BASE, self.TARGET)
        backward = diff(self.TARGET, self.BASE)

        assert forward.added == backward.removed
        assert forward.removed == backward.added
        assert [(c.old, c.new) for c in forward.changed] == [
            (c.new, c.old) for c in backward.changed
        ]

    def test_added_follows_target_order(self) -> None:
        assert [s.path for s in diff(self.BASE, self.TARGET).added] == ["new1", "new2"]

    def test_removed_follows_base_order(self) -> None:
        assert [s.path for s in diff(self.BASE, self.TARGET).removed] == ["gone1", "gone2"]

    def test_reordering_alone_is_not_a_change(self) -> None:
        base = doc(sym("a"), sym("b"), sym("c"))
        target = doc(sym("c"), sym("a"), sym("b"))
        assert diff(base, target).is_empty

    def test_changed_follows_base_order(self) -> None:
        base = doc(sym("p", "p1"), sym("q", "q1"))
        target = doc(sym("q", "q2"), sym("p", "p2"))
        assert [c.path for c in diff(base, target).changed] == ["p", "q"]

    def test_partitions_are_disjoint_and_cover_differences(self) -> None:
        result = diff(self.BASE, self.TARGET)
        added_paths = {s.path for s in result.added}
        removed_paths = {s.path for s in result.removed}
        changed_paths = {c.path for c in result.changed}
        assert not added_paths & removed_paths
        assert not added_paths & changed_paths
        assert not removed_paths & changed_paths
        assert added_paths == {"new1", "new2"}
        assert removed_paths == {"gone1", "gone2"}
        assert changed_paths == {"m"}


class TestDuplicatePaths:
    """Paths that occur more than once in a document."""

    def test_identical_duplicates_cancel(self) -> None:
        base = doc(sym("i", "impl A"), sym("i", "impl B"))
        target = doc(sym("i", "impl B"), sym("i", "impl A"))
        assert diff(base, target).is_empty

    def test_extra_occurrence_is_added(self) -> None:
        base = doc(sym("f", "f(a)"))
        target = doc(sym("f", "f(a)"), sym("f", "f(b)"))
        result = diff(base, target)
        assert result.added == (sym("f", "f(b)"),)
        assert result.removed == ()
        assert result.changed == ()

    def test_missing_occurrence_is_removed(self) -> None:
        base = doc(sym("f", "f(a)"), sym("f", "f(b)"))
        target = doc(sym("f", "f(b)"))
        result = diff(base, target)
        assert result.removed == (sym("f", "f(a)"),)
        assert result.added == ()

    def test_unmatched_occurrences_pair_in_order(self) -> None:
        base = doc(sym("f", "f(a)"), sym("f", "f(b)"), sym("f", "f(keep)"))
        target = doc(sym("f", "f(keep)"), sym("f", "f(x)"), sym("f", "f(y)"))
        result = diff(base, target)
        assert [(c.old.signature, c.new.signature) for c in result.changed] == [
            ("f(a)", "f(x)"),
            ("f(b)", "f(y)"),
        ]

    @pytest.mark.parametrize(
        ("base_sigs", "target_sigs", "expected"),
        [
            (["a"], ["b", "c"], (1, 0, 1)),
            (["a", "b"], ["c"], (0, 1, 1)),
            (["a", "a"], ["a"], (0, 1, 0)),
        ],
    )
    def test_surplus_counts(
        self, base_sigs: list[str], target_sigs: list[str], expected: tuple[int, int, int]
    ) -> None:
        base = doc(*(sym("d", s) for s in base_sigs))
        target = doc(*(sym("d", s) for s in target_sigs))
        result = diff(base, target)
        assert (len(result.added), len(result.removed), len(result.changed)) == expected

from __future__ import annotations

import pytest

from wpt.services.release.diff import diff_paths, removed_values
from wpt.services.release.model import DiffEntry, DiffKind


def _rebuild(entries: tuple[DiffEntry, ...], skip: DiffKind) -> list[str]:
    return [v for e in entries if e.kind is not skip for v in e.values]


@pytest.mark.parametrize(
    ("before", "after"),
    [
        ([], []),
        ([], ["a"]),
        (["a"], []),
        (["a", "b", "c"], ["a", "b", "c"]),
        (["a", "b", "c"], ["a", "c", "d"]),
        (["old.js", "main.js", "lib", "lib/a.js"], ["main.js", "lib", "lib/a.js", "lib/b.js"]),
        (["b", "a"], ["a", "b"]),
        (["x", "y", "z"], ["p", "q"]),
    ],
)
def test_entries_rebuild_both_sides(before: list[str], after: list[str]) -> None:
    entries = diff_paths(before, after)

    assert _rebuild(entries, skip=DiffKind.REMOVED) == after
    assert _rebuild(entries, skip=DiffKind.ADDED) == before


def test_identical_is_single_unchanged_entry() -> None:
    values = ["readme.txt", "inc", "inc/a.php"]
    assert diff_paths(values, values) == (DiffEntry(DiffKind.UNCHANGED, tuple(values)),)


def test_empty_before_is_single_added_entry() -> None:
    assert diff_paths([], ["a", "b"]) == (DiffEntry(DiffKind.ADDED, ("a", "b")),)


def test_empty_after_is_single_removed_entry() -> None:
    assert diff_paths(["a", "b"], []) == (DiffEntry(DiffKind.REMOVED, ("a", "b")),)


def test_both_empty_has_no_entries() -> None:
    assert diff_paths([], []) == ()


def test_runs_follow_divergence_points() -> None:
    entries = diff_paths(["a", "old", "b"], ["a", "b", "new"])

    assert entries == (
        DiffEntry(DiffKind.UNCHANGED, ("a",)),
        DiffEntry(DiffKind.REMOVED, ("old",)),
        DiffEntry(DiffKind.UNCHANGED, ("b",)),
        DiffEntry(DiffKind.ADDED, ("new",)),
    )


def test_reordering_is_reported_as_remove_and_add() -> None:
    entries = diff_paths(["b", "a"], ["a", "b"])

    removed = removed_values(entries)
    added = [v for e in entries if e.added for v in e.values]
    assert len(removed) == 1
    assert removed == added


def test_deterministic() -> None:
    before = ["c", "a", "b", "d"]
    after = ["a", "d", "c", "e"]
    assert diff_paths(before, after) == diff_paths(before, after)


def test_keeps_longest_common_subsequence_over_longest_block() -> None:
    before = ["a", "Z1", "b", "Z2", "c", "Z3", "d", "x", "y"]
    after = ["x", "y", "a", "b", "c", "d"]

    entries = diff_paths(before, after)

    kept = [v for e in entries if e.kind is DiffKind.UNCHANGED for v in e.values]
    assert kept == ["a", "b", "c", "d"]
    assert removed_values(entries) == ["Z1", "Z2", "Z3", "x", "y"]


def test_shared_head_and_tail_stay_unchanged() -> None:
    entries = diff_paths(["inc", "old.php", "readme.txt"], ["inc", "new.php", "readme.txt"])

    assert entries == (
        DiffEntry(DiffKind.UNCHANGED, ("inc",)),
        DiffEntry(DiffKind.REMOVED, ("old.php",)),
        DiffEntry(DiffKind.ADDED, ("new.php",)),
        DiffEntry(DiffKind.UNCHANGED, ("readme.txt",)),
    )

"""Order-sensitive diff of two path lists.

This is a sequence diff, not a set difference: values kept are those of a
longest common subsequence of the two lists. A value present in both lists
but out of order relative to that subsequence comes out as removed and then
added again. Both sides are listed in the same string order, so in practice
only genuinely unwanted paths are removed.
"""

from __future__ import annotations

from collections.abc import Sequence

from wpt.services.release.model import DiffEntry, DiffKind


def _lcs_table(a: Sequence[str], b: Sequence[str]) -> list[list[int]]:
    """table[i][j] is the LCS length of a[i:] and b[j:]."""
    table = [[0] * (len(b) + 1) for _ in range(len(a) + 1)]
    for i in range(len(a) - 1, -1, -1):
        row, below = table[i], table[i + 1]
        for j in range(len(b) - 1, -1, -1):
            if a[i] == b[j]:
                row[j] = below[j + 1] + 1
            else:
                row[j] = max(below[j], row[j + 1])
    return table


def diff_paths(before: Sequence[str], after: Sequence[str]) -> tuple[DiffEntry, ...]:
    """Diff `before` (what exists) against `after` (what is wanted).

    Unchanged + removed entries, concatenated in order, rebuild `before`;
    unchanged + added entries rebuild `after`. Where both a removal and an
    addition are possible, the removal is listed first.
    """
    entries: list[DiffEntry] = []

    def emit(kind: DiffKind, values: Sequence[str]) -> None:
        if not values:
            return
        if entries and entries[-1].kind is kind:
            entries[-1] = DiffEntry(kind=kind, values=entries[-1].values + tuple(values))
            return
        entries.append(DiffEntry(kind=kind, values=tuple(values)))

    # Shared head and tail need no table.
    head = 0
    limit = min(len(before), len(after))
    while head < limit and before[head] == after[head]:
        head += 1
    tail = 0
    while tail < limit - head and before[-1 - tail] == after[-1 - tail]:
        tail += 1

    a = list(before[head : len(before) - tail])
    b = list(after[head : len(after) - tail])
    emit(DiffKind.UNCHANGED, before[:head])

    table = _lcs_table(a, b)
    i = j = 0
    while i < len(a) and j < len(b):
        if a[i] == b[j]:
            emit(DiffKind.UNCHANGED, [a[i]])
            i += 1
            j += 1
        elif table[i + 1][j] >= table[i][j + 1]:
            emit(DiffKind.REMOVED, [a[i]])
            i += 1
        else:
            emit(DiffKind.ADDED, [b[j]])
            j += 1
    emit(DiffKind.REMOVED, a[i:])
    emit(DiffKind.ADDED, b[j:])

    emit(DiffKind.UNCHANGED, before[len(before) - tail :])
    return tuple(entries)


def removed_values(entries: Sequence[DiffEntry]) -> list[str]:
    """Flatten the values of every REMOVED entry, in order."""
    return [v for e in entries if e.removed for v in e.values]

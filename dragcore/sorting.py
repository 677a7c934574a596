"""
Row ordering for the drag ledger.

Rows are first grouped so that every geom's reflections and incorporated
(ancestor-grouped) rows follow it. An optional secondary pass then orders the
groups by wetted area or by percent of total CD, again pulling each chosen
row's reflections and incorporated rows along behind it.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional, Sequence, TypeVar

from dragconfig import SortBy

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

Row = TypeVar("Row")

# Maps a row to the id of the geom it is grouped under, or None if its geom is gone
AncestorLookup = Callable[[Row], Optional[str]]


def _pull_followers(
    rows: Sequence[Row],
    master: int,
    placed: List[bool],
    ordered: List[Row],
    ancestor_of: AncestorLookup,
):
    """Append reflections of ``rows[master]``, then rows incorporated into it."""

    master_id = rows[master].geom_id

    for j, row in enumerate(rows):
        if j != master and not placed[j] and row.geom_id == master_id:
            placed[j] = True
            ordered.append(row)

    for j, row in enumerate(rows):
        if j == master or placed[j]:
            continue
        ancestor = ancestor_of(row)
        if ancestor is None:
            logger.warning("Row %r references a missing geom; left in place", row.label)
            continue
        if ancestor == master_id:
            placed[j] = True
            ordered.append(row)


def group_by_ancestor(rows: Sequence[Row], ancestor_of: AncestorLookup) -> List[Row]:
    """Stable grouping: each row is followed by its reflections and incorporated rows."""

    placed = [False] * len(rows)
    ordered: List[Row] = []
    for i, row in enumerate(rows):
        if placed[i]:
            continue
        placed[i] = True
        ordered.append(row)
        _pull_followers(rows, i, placed, ordered, ancestor_of)
    return ordered


def sort_descending(
    rows: Sequence[Row],
    key: Callable[[Row], float],
    ancestor_of: AncestorLookup,
) -> List[Row]:
    """
    Selection sort on ``key``, largest first, keeping groups together.

    The scan start cycles through the row indices; among unplaced rows the
    candidate is replaced only by a strictly larger value, so ties keep the
    first candidate found.
    """

    n = len(rows)
    placed = [False] * n
    ordered: List[Row] = []
    i = 0
    while not all(placed):
        if not placed[i]:
            best = i
            for j in range(n):
                if not placed[j] and key(rows[j]) > key(rows[best]):
                    best = j
            placed[best] = True
            ordered.append(rows[best])
            _pull_followers(rows, best, placed, ordered, ancestor_of)
        i = i + 1 if i != n - 1 else 0
    return ordered


def sort_rows(rows: Sequence[Row], sort_by: SortBy, ancestor_of: AncestorLookup) -> List[Row]:
    """Group by ancestor, then apply the secondary ordering."""

    grouped = group_by_ancestor(rows, ancestor_of)
    if sort_by == SortBy.WETTED_AREA:
        return sort_descending(grouped, lambda row: row.swet, ancestor_of)
    if sort_by == SortBy.PERC_CD:
        return sort_descending(grouped, lambda row: row.perc_total_cd, ancestor_of)
    return grouped

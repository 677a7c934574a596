"""Ledger ordering: ancestor grouping, then wetted area or percent CD."""

from dataclasses import dataclass
from typing import Optional

from dragconfig import SortBy
from dragcore.sorting import group_by_ancestor, sort_descending, sort_rows


@dataclass
class Row:
    label: str
    geom_id: str
    swet: float = 0.0
    perc_total_cd: float = 0.0
    ancestor: Optional[str] = None

    def __post_init__(self):
        if self.ancestor is None:
            self.ancestor = self.geom_id


def ancestor_of(row):
    return row.ancestor


def labels(rows):
    return [row.label for row in rows]


def test_descending_wetted_area():
    rows = [Row("A", "a", swet=5.0), Row("B", "b", swet=10.0), Row("C", "c", swet=3.0)]
    assert labels(sort_rows(rows, SortBy.WETTED_AREA, ancestor_of)) == ["B", "A", "C"]


def test_reflections_follow_their_primary():
    rows = [
        Row("A", "a", swet=5.0),
        Row("A_1", "a", swet=5.0),
        Row("B", "b", swet=10.0),
        Row("B_1", "b", swet=10.0),
    ]
    assert labels(sort_rows(rows, SortBy.WETTED_AREA, ancestor_of)) == ["B", "B_1", "A", "A_1"]


def test_incorporated_rows_follow_their_ancestor():
    rows = [
        Row("Tail", "t", swet=4.0),
        Row("Pod", "p", swet=1.0, ancestor="f"),
        Row("Fuse", "f", swet=30.0),
    ]
    assert labels(sort_rows(rows, SortBy.WETTED_AREA, ancestor_of)) == ["Fuse", "Pod", "Tail"]


def test_grouping_keeps_input_order_otherwise():
    rows = [
        Row("Wing", "w"),
        Row("Fuse", "f"),
        Row("Wing_1", "w"),
        Row("Pod", "p", ancestor="w"),
    ]
    assert labels(group_by_ancestor(rows, ancestor_of)) == ["Wing", "Wing_1", "Pod", "Fuse"]
    assert labels(sort_rows(rows, SortBy.NONE, ancestor_of)) == ["Wing", "Wing_1", "Pod", "Fuse"]


def test_percent_cd_sort():
    rows = [
        Row("A", "a", perc_total_cd=0.2),
        Row("B", "b", perc_total_cd=0.5),
        Row("C", "c", perc_total_cd=0.3),
    ]
    assert labels(sort_rows(rows, SortBy.PERC_CD, ancestor_of)) == ["B", "C", "A"]


def test_ties_keep_first_candidate():
    rows = [Row("A", "a", swet=2.0), Row("B", "b", swet=2.0)]
    assert labels(sort_descending(rows, lambda r: r.swet, ancestor_of)) == ["A", "B"]


def test_stale_rows_are_kept(caplog):
    rows = [Row("A", "a", swet=1.0), Row("Ghost", "g", swet=9.0)]
    rows[1].ancestor = None

    def lookup(row):
        return None if row.label == "Ghost" else row.ancestor

    ordered = sort_rows(rows, SortBy.WETTED_AREA, lookup)
    assert labels(ordered) == ["Ghost", "A"]
    assert "missing geom" in caplog.text

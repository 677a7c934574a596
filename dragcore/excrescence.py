"""
Parasite Drag Buildup: Excrescence Ledger
=========================================

Discrete drag increments that are not derived from wetted area: gaps,
antennas, protuberances, and a single optional margin on the total.

Amounts are derived from the stored input on every update:

    COUNT          input / 10000
    CD             input
    PERCENT_GEOM   input / 100 * CD_geometry              (0 if CD_geometry <= 0)
    MARGIN         CD_sub / ((100 - input) / 100) - CD_sub (0 if CD_sub <= 0)
    DRAGAREA       input / Sref                            (0 if CD_geometry <= 0)

CD_sub is the geometry CD plus every non-margin amount, so the margin is
resolved after the other entries.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from dragconfig import ExcrescenceType
from dragconfig.drag_config import clamp, excrescence_limits

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

TYPE_STRINGS = {
    ExcrescenceType.COUNT: "Count (10000*CD)",
    ExcrescenceType.CD: "CD",
    ExcrescenceType.PERCENT_GEOM: "% of Cd_Geom",
    ExcrescenceType.MARGIN: "Margin",
    ExcrescenceType.DRAGAREA: "Drag Area (D/q)",
}


@dataclass
class ExcrescenceEntry:
    """One user-declared drag increment."""

    label: str
    kind: ExcrescenceType
    input: float
    amount: float = 0.0                   # CD increment
    f: float = 0.0                        # Flat plate area, amount * Sref
    perc_total_cd: float = 0.0            # Fraction of total CD

    @property
    def type_string(self) -> str:
        return TYPE_STRINGS[self.kind]

    @property
    def is_margin(self) -> bool:
        return self.kind == ExcrescenceType.MARGIN


def _percent_geometry(value: float, geometry_cd: float) -> float:
    if geometry_cd <= 0.0:
        return 0.0
    return value / 100.0 * geometry_cd


def _margin(value: float, subtotal_cd: float) -> float:
    if subtotal_cd <= 0.0:
        return 0.0
    if value >= 100.0:
        logger.warning("Margin of %.1f%% leaves no room for the subtotal; margin set to 0", value)
        return 0.0
    return subtotal_cd / ((100.0 - value) / 100.0) - subtotal_cd


def _drag_area(value: float, geometry_cd: float, sref: float) -> float:
    if geometry_cd <= 0.0 or sref <= 0.0:
        return 0.0
    return value / sref


class ExcrescenceLedger:
    """
    Ordered list of excrescences plus an edit buffer for the selected entry.

    The buffer (value, kind, label) seeds new entries; on ``update`` the
    buffered value becomes the input of the currently selected entry.

    Labels are never empty: an unlabeled entry is named ``EXCRES_<n>`` when
    it is created or renamed, and that name is what gets saved.
    """

    def __init__(self):
        self.entries: List[ExcrescenceEntry] = []
        self.current_index = -1
        self.edit_value = 0.0
        self.edit_kind = ExcrescenceType.CD
        self.edit_label = ""

    def __len__(self):
        return len(self.entries)

    def __iter__(self):
        return iter(self.entries)

    def clear(self):
        self.entries.clear()
        self.current_index = -1
        self.edit_value = 0.0
        self.edit_kind = ExcrescenceType.CD
        self.edit_label = ""

    # ------------------------------------------------------------------
    # Editing
    # ------------------------------------------------------------------
    @property
    def has_margin(self) -> bool:
        return any(entry.is_margin for entry in self.entries)

    @property
    def current(self) -> Optional[ExcrescenceEntry]:
        if 0 <= self.current_index < len(self.entries):
            return self.entries[self.current_index]
        return None

    @property
    def edit_limits(self) -> tuple:
        return excrescence_limits(self.edit_kind)

    def set_value(self, value: float):
        self.edit_value = clamp(value, self.edit_limits)

    def set_kind(self, kind: ExcrescenceType):
        self.edit_kind = ExcrescenceType(kind)
        self.edit_value = clamp(self.edit_value, self.edit_limits)

    def set_label(self, label: str):
        """Rename the selected entry. An empty label falls back to ``EXCRES_<index>``."""
        if self.current is not None:
            self.current.label = label or f"EXCRES_{self.current_index}"

    def add(
        self,
        label: Optional[str] = None,
        kind: Optional[ExcrescenceType] = None,
        value: Optional[float] = None,
        sref: float = 1.0,
    ) -> Optional[ExcrescenceEntry]:
        """
        Append an entry from the arguments, falling back to the edit buffer.

        Returns None when a second margin is requested; the edit buffer is
        left as it was.
        """
        requested = ExcrescenceType(kind) if kind is not None else self.edit_kind
        if requested == ExcrescenceType.MARGIN and self.has_margin:
            logger.warning("Only one margin excrescence is allowed; %r not added",
                           label or self.edit_label or "margin")
            return None

        if kind is not None:
            self.set_kind(kind)
        if value is not None:
            self.set_value(value)
        if label is not None:
            self.edit_label = label

        entry = ExcrescenceEntry(
            label=self.edit_label or f"EXCRES_{len(self.entries)}",
            kind=self.edit_kind,
            input=self.edit_value,
        )
        if entry.kind == ExcrescenceType.COUNT:
            entry.amount = entry.input / 10000.0
        elif entry.kind == ExcrescenceType.CD:
            entry.amount = entry.input
        entry.f = entry.amount * sref

        self.edit_label = ""
        self.entries.append(entry)
        self.current_index = len(self.entries) - 1
        logger.debug("Added excrescence %s (%s = %g)", entry.label, entry.type_string, entry.input)
        return entry

    def delete(self, index: Optional[int] = None):
        """Remove the entry at ``index`` (default: the selected one)."""
        if index is not None:
            self.current_index = index

        if 0 <= self.current_index < len(self.entries):
            removed = self.entries.pop(self.current_index)
            logger.debug("Deleted excrescence %s", removed.label)

        if self.entries:
            self.select(0)
        else:
            self.current_index = -1

    def select(self, index: int):
        """Make ``index`` current and load it into the edit buffer."""
        if not 0 <= index < len(self.entries):
            raise IndexError(f"Excrescence index {index} out of range (0-{len(self.entries) - 1})")
        self.current_index = index
        entry = self.entries[index]
        self.edit_kind = entry.kind
        self.edit_value = entry.input

    # ------------------------------------------------------------------
    # Totals
    # ------------------------------------------------------------------
    def subtotal_amount(self) -> float:
        """Sum of non-margin amounts."""
        return sum(entry.amount for entry in self.entries if not entry.is_margin)

    def total_amount(self) -> float:
        return sum(entry.amount for entry in self.entries)

    def total_f(self) -> float:
        return sum(entry.f for entry in self.entries)

    def total_percent(self) -> float:
        return sum(entry.perc_total_cd for entry in self.entries)

    def update(self, geometry_cd: float, sref: float, has_geometry: bool = True):
        """Recompute every amount and flat plate area from stored inputs."""

        current = self.current
        if current is not None:
            current.input = self.edit_value

        for entry in self.entries:
            if entry.is_margin:
                continue
            if entry.kind == ExcrescenceType.CD:
                entry.amount = entry.input
            elif entry.kind == ExcrescenceType.COUNT:
                entry.amount = entry.input / 10000.0
            elif not has_geometry:
                entry.amount = 0.0
            elif entry.kind == ExcrescenceType.PERCENT_GEOM:
                entry.amount = _percent_geometry(entry.input, geometry_cd)
            elif entry.kind == ExcrescenceType.DRAGAREA:
                entry.amount = _drag_area(entry.input, geometry_cd, sref)

        subtotal_cd = geometry_cd + self.subtotal_amount()
        for entry in self.entries:
            if entry.is_margin:
                entry.amount = _margin(entry.input, subtotal_cd) if has_geometry else 0.0

        if subtotal_cd > 0.0:
            for entry in self.entries:
                entry.f = entry.amount * sref

    def update_percentages(self, total_cd: float, has_geometry: bool = True):
        for entry in self.entries:
            if has_geometry and total_cd != 0.0:
                entry.perc_total_cd = entry.amount / total_cd
            else:
                entry.perc_total_cd = 0.0

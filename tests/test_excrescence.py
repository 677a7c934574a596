"""Excrescence ledger: amounts per kind, the single-margin rule, editing."""

import pytest

from dragconfig import ExcrescenceType
from dragcore.excrescence import ExcrescenceLedger


@pytest.fixture
def ledger():
    return ExcrescenceLedger()


class TestAmounts:
    GEOM_CD = 0.02
    SREF = 100.0

    def test_cd_is_identity(self, ledger):
        ledger.add("Bump", ExcrescenceType.CD, 0.001)
        ledger.update(self.GEOM_CD, self.SREF)
        assert ledger.entries[0].amount == pytest.approx(0.001)
        assert ledger.entries[0].f == pytest.approx(0.1)

    def test_counts(self, ledger):
        ledger.add("Antenna", ExcrescenceType.COUNT, 50.0)
        ledger.update(self.GEOM_CD, self.SREF)
        assert ledger.entries[0].amount == pytest.approx(0.005)

    def test_percent_of_geometry(self, ledger):
        ledger.add("Leakage", ExcrescenceType.PERCENT_GEOM, 5.0)
        ledger.update(self.GEOM_CD, self.SREF)
        assert ledger.entries[0].amount == pytest.approx(0.001)

    def test_drag_area(self, ledger):
        ledger.add("Strut", ExcrescenceType.DRAGAREA, 0.5)
        ledger.update(self.GEOM_CD, self.SREF)
        assert ledger.entries[0].amount == pytest.approx(0.005)

    def test_geometry_dependent_kinds_vanish_without_geometry_drag(self, ledger):
        ledger.add("Leakage", ExcrescenceType.PERCENT_GEOM, 5.0)
        ledger.add("Strut", ExcrescenceType.DRAGAREA, 0.5)
        ledger.update(0.0, self.SREF)
        assert [e.amount for e in ledger] == [0.0, 0.0]

    def test_margin_is_resolved_after_other_entries(self, ledger):
        ledger.add("Margin", ExcrescenceType.MARGIN, 20.0)
        ledger.add("Antenna", ExcrescenceType.COUNT, 50.0)
        ledger.update(self.GEOM_CD, self.SREF)
        subtotal = self.GEOM_CD + 0.005
        assert ledger.entries[0].amount == pytest.approx(subtotal / 0.8 - subtotal)
        assert ledger.subtotal_amount() == pytest.approx(0.005)

    def test_full_margin_is_zero(self, ledger):
        ledger.add("Margin", ExcrescenceType.MARGIN, 100.0)
        ledger.update(self.GEOM_CD, self.SREF)
        assert ledger.entries[0].amount == 0.0

    def test_percentages(self, ledger):
        ledger.add("Bump", ExcrescenceType.CD, 0.005)
        ledger.update(self.GEOM_CD, self.SREF)
        ledger.update_percentages(0.025)
        assert ledger.total_percent() == pytest.approx(0.2)

    def test_flat_plate_area_kept_when_subtotal_not_positive(self, ledger):
        ledger.add("Bump", ExcrescenceType.CD, 0.0, sref=self.SREF)
        ledger.entries[0].f = 3.0
        ledger.update(0.0, self.SREF)
        assert ledger.entries[0].f == 3.0


class TestEditing:
    def test_only_one_margin(self, ledger, caplog):
        assert ledger.add("M1", ExcrescenceType.MARGIN, 5.0) is not None
        assert ledger.add("M2", ExcrescenceType.MARGIN, 8.0) is None
        assert len(ledger) == 1
        assert "Only one margin" in caplog.text

    def test_rejected_margin_leaves_other_entries_alone(self, ledger):
        ledger.add("M", ExcrescenceType.MARGIN, 5.0)
        ledger.add("Bump", ExcrescenceType.CD, 0.001)
        buffer = (ledger.edit_value, ledger.edit_kind, ledger.edit_label)

        assert ledger.add("M2", ExcrescenceType.MARGIN, 50.0) is None
        assert (ledger.edit_value, ledger.edit_kind, ledger.edit_label) == buffer

        ledger.update(0.02, 100.0)
        bump = ledger.entries[1]
        assert bump.input == pytest.approx(0.001)
        assert bump.amount == pytest.approx(0.001)
        assert bump.f == pytest.approx(0.1)
        assert ledger.entries[0].input == pytest.approx(5.0)

    def test_rejected_margin_label_does_not_leak(self, ledger):
        ledger.add("M", ExcrescenceType.MARGIN, 5.0)
        ledger.add("M2", ExcrescenceType.MARGIN, 50.0)
        entry = ledger.add(kind=ExcrescenceType.CD, value=0.002)
        assert entry.label == "EXCRES_1"

    def test_default_labels(self, ledger):
        ledger.add(kind=ExcrescenceType.CD, value=0.001)
        ledger.add(kind=ExcrescenceType.CD, value=0.002)
        assert [e.label for e in ledger] == ["EXCRES_0", "EXCRES_1"]

    def test_empty_rename_uses_default_label(self, ledger):
        ledger.add("A", ExcrescenceType.CD, 0.001)
        ledger.set_label("")
        assert ledger.entries[0].label == "EXCRES_0"

    def test_inputs_are_clamped(self, ledger):
        entry = ledger.add("Big", ExcrescenceType.CD, 5.0)
        assert entry.input == pytest.approx(0.2)
        entry = ledger.add("Counts", ExcrescenceType.COUNT, -3.0)
        assert entry.input == 0.0

    def test_delete_moves_selection(self, ledger):
        ledger.add("A", ExcrescenceType.CD, 0.001)
        ledger.add("B", ExcrescenceType.COUNT, 10.0)
        ledger.delete()
        assert [e.label for e in ledger] == ["A"]
        assert ledger.current_index == 0
        assert ledger.edit_kind == ExcrescenceType.CD
        ledger.delete(0)
        assert len(ledger) == 0
        assert ledger.current_index == -1

    def test_select_loads_edit_buffer(self, ledger):
        ledger.add("A", ExcrescenceType.COUNT, 12.0)
        ledger.add("B", ExcrescenceType.CD, 0.003)
        ledger.select(0)
        assert ledger.edit_kind == ExcrescenceType.COUNT
        assert ledger.edit_value == pytest.approx(12.0)
        assert ledger.edit_limits == (0.0, 2000.0)

    def test_select_out_of_range(self, ledger):
        with pytest.raises(IndexError):
            ledger.select(3)

    def test_edit_value_applies_to_current_entry(self, ledger):
        ledger.add("A", ExcrescenceType.COUNT, 12.0)
        ledger.set_value(20.0)
        ledger.update(0.01, 100.0)
        assert ledger.entries[0].input == pytest.approx(20.0)
        assert ledger.entries[0].amount == pytest.approx(0.002)

    def test_rename_current(self, ledger):
        ledger.add("A", ExcrescenceType.CD, 0.001)
        ledger.set_label("Antenna")
        assert ledger.entries[0].label == "Antenna"

    def test_type_strings(self, ledger):
        ledger.add("A", ExcrescenceType.COUNT, 1.0)
        ledger.add("B", ExcrescenceType.DRAGAREA, 1.0)
        assert [e.type_string for e in ledger] == ["Count (10000*CD)", "Drag Area (D/q)"]

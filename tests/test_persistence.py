"""Settings save/load round trip and the CSV export."""

import csv
import json

import pytest

from conftest import make_wing, use_re_per_length
from dragconfig import ExcrescenceType, SortBy, TurbCfEqn, VelocityUnit
from dragcore import ParasiteDragManager, Vehicle, build_results, export_to_csv
from dragcore.persistence import load_settings, save_settings


@pytest.fixture
def manager():
    manager = ParasiteDragManager(Vehicle([make_wing()]))
    use_re_per_length(manager)
    manager.settings.sref = 55.0
    manager.settings.turb_cf_eqn = TurbCfEqn.IMPLICIT_KARMAN
    manager.settings.sort_by = SortBy.PERC_CD
    manager.settings.ref_geom_id = "WING"
    manager.reference.vinf_unit = VelocityUnit.KTAS
    manager.add_excrescence("Antenna", ExcrescenceType.COUNT, 12.0)
    manager.add_excrescence("Margin", ExcrescenceType.MARGIN, 5.0)
    return manager


class TestSettingsFile:
    def test_round_trip(self, manager, tmp_path):
        path = save_settings(manager, tmp_path / "drag.json")

        restored = ParasiteDragManager(Vehicle([make_wing()]))
        load_settings(restored, path)

        assert restored.settings.sref == pytest.approx(55.0)
        assert restored.settings.turb_cf_eqn == TurbCfEqn.IMPLICIT_KARMAN
        assert restored.settings.sort_by == SortBy.PERC_CD
        assert restored.settings.ref_geom_id == "WING"
        assert restored.reference.vinf_unit == VelocityUnit.KTAS
        assert restored.reference.re_per_length == pytest.approx(5.0e5)
        assert [(e.label, e.kind, e.input) for e in restored.excrescences] == [
            ("Antenna", ExcrescenceType.COUNT, 12.0),
            ("Margin", ExcrescenceType.MARGIN, 5.0),
        ]

    def test_default_labels_survive_reload(self, manager, tmp_path):
        manager.add_excrescence(kind=ExcrescenceType.CD, value=0.002)
        manager.delete_excrescence(0)
        assert [e.label for e in manager.excrescences] == ["Margin", "EXCRES_2"]
        path = save_settings(manager, tmp_path / "drag.json")

        restored = ParasiteDragManager(Vehicle([make_wing()]))
        load_settings(restored, path)
        assert [e.label for e in restored.excrescences] == ["Margin", "EXCRES_2"]

    def test_loaded_settings_reproduce_totals(self, manager, tmp_path):
        manager.compute_all()
        path = save_settings(manager, tmp_path / "drag.json")

        restored = ParasiteDragManager(Vehicle([make_wing()]))
        load_settings(restored, path)
        restored.compute_all()
        assert restored.total_cd() == pytest.approx(manager.total_cd())

    def test_enums_stored_as_codes(self, manager, tmp_path):
        path = save_settings(manager, tmp_path / "drag.json")
        payload = json.loads(path.read_text(encoding="utf-8"))
        assert payload["settings"]["turb_cf_eqn"] == int(TurbCfEqn.IMPLICIT_KARMAN)
        assert payload["excrescences"][1]["type"] == int(ExcrescenceType.MARGIN)

    def test_missing_file(self, manager, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_settings(manager, tmp_path / "missing.json")

    def test_missing_section(self, manager, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"settings": {}}), encoding="utf-8")
        with pytest.raises(ValueError, match="reference"):
            load_settings(manager, path)

    def test_bad_enum_code(self, manager, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({
            "settings": {"turb_cf_eqn": 77}, "reference": {}, "excrescences": [],
        }), encoding="utf-8")
        with pytest.raises(ValueError, match="turb_cf_eqn"):
            load_settings(manager, path)

    def test_not_json(self, manager, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("<xml/>", encoding="utf-8")
        with pytest.raises(ValueError):
            load_settings(manager, path)


class TestCsvExport:
    def test_results_bundle(self, manager):
        manager.compute_all()
        results = build_results(manager)
        assert results.scalar("Num_Comp") == 1
        assert results.scalar("Swet_Label") == "S_wet (ft^2)"
        assert results.scalar("Vinf_Label") == "Vinf (KTAS)"
        assert results.scalar("Pres_Label") == "Pressure (lbf/ft^2)"
        assert results.scalar("Total_Cd_Total") == pytest.approx(manager.total_cd())
        assert results["Excres_Type"] == ["Count (10000*CD)", "Margin"]

    def test_csv_file(self, manager, tmp_path):
        manager.compute_all()
        path = export_to_csv(manager, tmp_path / "out" / "drag.csv")

        with open(path, newline="", encoding="utf-8") as f:
            records = {row[0]: row[1:] for row in csv.reader(f)}

        assert records["Results_Name"] == ["Parasite_Drag"]
        assert records["Comp_Label"] == ["Wing"]
        assert float(records["Total_Cd_Total"][0]) == pytest.approx(manager.total_cd())
        assert records["TurbCfEqnName"] == ["Von Karman Implicit"]

    def test_default_file_name(self, manager, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        manager.compute_all()
        path = export_to_csv(manager)
        assert path.name == "ParasiteDragBuildUp.csv"
        assert (tmp_path / "ParasiteDragBuildUp.csv").exists()

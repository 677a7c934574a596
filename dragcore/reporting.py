"""
Parasite Drag Buildup: Results and CSV Export
=============================================

Collects the computed ledger into a flat, named results bundle and writes it
as CSV. Every column carries the unit label of the current unit selections,
e.g. ``S_wet (ft^2)`` or ``Vinf (KTAS)``.

CSV layout is one record per line: the key, then its value(s).
"""

from __future__ import annotations

import csv
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Union

from dragconfig import LengthUnit, PresUnit, TempUnit, UnitSystem, VelocityUnit
from . import friction

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

LENGTH_LABELS: Dict[LengthUnit, str] = {
    LengthUnit.MM: "mm",
    LengthUnit.CM: "cm",
    LengthUnit.M: "m",
    LengthUnit.IN: "in",
    LengthUnit.FT: "ft",
    LengthUnit.YD: "yd",
    LengthUnit.UNITLESS: "LU",
}

VELOCITY_LABELS: Dict[VelocityUnit, str] = {
    VelocityUnit.FT_S: "ft/s",
    VelocityUnit.M_S: "m/s",
    VelocityUnit.KEAS: "KEAS",
    VelocityUnit.KTAS: "KTAS",
    VelocityUnit.MPH: "mph",
    VelocityUnit.KM_HR: "km/hr",
}

TEMPERATURE_LABELS: Dict[TempUnit, str] = {
    TempUnit.C: "°C",
    TempUnit.F: "°F",
    TempUnit.K: "K",
    TempUnit.R: "°R",
}

PRESSURE_LABELS: Dict[PresUnit, str] = {
    PresUnit.PSF: "lbf/ft^2",
    PresUnit.PSI: "lbf/in^2",
    PresUnit.BA: "Ba",
    PresUnit.PA: "Pa",
    PresUnit.KPA: "kPa",
    PresUnit.MPA: "MPa",
    PresUnit.INCHHG: "\"Hg",
    PresUnit.MMHG: "mmHg",
    PresUnit.MMH20: "mmH20",
    PresUnit.MB: "mB",
    PresUnit.ATM: "atm",
}


@dataclass
class ExportLabels:
    """Column headings for the current unit selections."""

    lref: str
    sref: str
    f: str
    swet: str
    vinf: str
    temperature: str
    pressure: str
    density: str
    altitude: str

    @classmethod
    def for_units(
        cls,
        length_unit: LengthUnit,
        vinf_unit: VelocityUnit,
        temp_unit: TempUnit,
        pres_unit: PresUnit,
        alt_unit: UnitSystem,
    ) -> "ExportLabels":
        length = LENGTH_LABELS[length_unit]
        if alt_unit == UnitSystem.IMPERIAL:
            density, altitude = "Density (slug/ft^3)", "Altitude (ft)"
        else:
            density, altitude = "Density (kg/m^3)", "Altitude (m)"
        return cls(
            lref=f"L_ref ({length})",
            sref=f"S_ref ({length}^2)",
            f=f"f ({length}^2)",
            swet=f"S_wet ({length}^2)",
            vinf=f"Vinf ({VELOCITY_LABELS[vinf_unit]})",
            temperature=f"Temp ({TEMPERATURE_LABELS[temp_unit]})",
            pressure=f"Pressure ({PRESSURE_LABELS[pres_unit]})",
            density=density,
            altitude=altitude,
        )


Value = Union[str, float, int]


@dataclass
class DragResults:
    """Named result vectors, in insertion order."""

    name: str = "Parasite_Drag"
    data: Dict[str, List[Value]] = field(default_factory=dict)

    def add(self, key: str, value):
        if isinstance(value, (list, tuple)):
            self.data[key] = list(value)
        else:
            self.data[key] = [value]

    def __getitem__(self, key: str) -> List[Value]:
        return self.data[key]

    def __contains__(self, key: str) -> bool:
        return key in self.data

    def scalar(self, key: str) -> Value:
        return self.data[key][0]

    def write_csv(self, path: Path) -> Path:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(["Results_Name", self.name])
            for key, values in self.data.items():
                writer.writerow([key] + list(values))
        logger.info("Wrote drag buildup CSV to %s", path)
        return path


def build_results(manager) -> DragResults:
    """Snapshot the manager's ledger, totals and flow condition."""

    ref = manager.reference
    settings = manager.settings
    labels = ExportLabels.for_units(
        ref.length_unit, ref.vinf_unit, ref.temp_unit, ref.pres_unit, ref.alt_unit
    )

    res = DragResults()

    res.add("Alt_Label", labels.altitude)
    res.add("Vinf_Label", labels.vinf)
    res.add("Sref_Label", labels.sref)
    res.add("Temp_Label", labels.temperature)
    res.add("Pres_Label", labels.pressure)
    res.add("Rho_Label", labels.density)
    res.add("LamCfEqnName", friction.lam_cf_eqn_name(settings.lam_cf_eqn))
    res.add("TurbCfEqnName", friction.turb_cf_eqn_name(settings.turb_cf_eqn))
    res.add("Swet_Label", labels.swet)
    res.add("Lref_Label", labels.lref)
    res.add("f_Label", labels.f)

    res.add("FC_Mach", ref.mach)
    res.add("FC_Alt", ref.altitude)
    res.add("FC_Vinf", ref.vinf)
    res.add("FC_Sref", settings.sref)
    res.add("FC_Temp", ref.temperature)
    res.add("FC_Pres", ref.pressure)
    res.add("FC_Rho", ref.density)

    rows = manager.rows
    res.add("Num_Comp", len(rows))
    res.add("Comp_ID", [row.geom_id for row in rows])
    res.add("Comp_Label", [row.label for row in rows])
    res.add("Comp_Swet", [row.swet for row in rows])
    res.add("Comp_Lref", [row.lref for row in rows])
    res.add("Comp_Re", [row.re for row in rows])
    res.add("Comp_PercLam", [row.perc_lam for row in rows])
    res.add("Comp_Cf", [row.cf for row in rows])
    res.add("Comp_FineRat", [row.fine_rat for row in rows])
    res.add("Comp_FFEqn", [row.ff_type for row in rows])
    res.add("Comp_FFEqnName", [row.ff_name for row in rows])
    res.add("Comp_FFIn", [row.ff_in for row in rows])
    res.add("Comp_FFOut", [row.ff_out for row in rows])
    res.add("Comp_Roughness", [row.roughness for row in rows])
    res.add("Comp_TeTwRatio", [row.te_tw_ratio for row in rows])
    res.add("Comp_TawTwRatio", [row.taw_tw_ratio for row in rows])
    res.add("Comp_Q", [row.q for row in rows])
    res.add("Comp_f", [row.f for row in rows])
    res.add("Comp_Cd", [row.cd for row in rows])
    res.add("Comp_PercTotalCd", [row.perc_total_cd for row in rows])
    res.add("Comp_SurfNum", [row.surf_num for row in rows])

    entries = list(manager.excrescences)
    res.add("Num_Excres", len(entries))
    res.add("Excres_Label", [e.label for e in entries])
    res.add("Excres_Type", [e.type_string for e in entries])
    res.add("Excres_Input", [e.input for e in entries])
    res.add("Excres_Amount", [e.amount for e in entries])
    res.add("Excres_PercTotalCd", [e.perc_total_cd for e in entries])

    res.add("Geom_f_Total", manager.geom_f_total)
    res.add("Geom_Cd_Total", manager.geometry_cd())
    res.add("Geom_Perc_Total", manager.geom_perc_total)
    res.add("Excres_f_Total", manager.excres_f_total())
    res.add("Excres_Cd_Total", manager.excrescences.total_amount())
    res.add("Excres_Perc_Total", manager.excres_perc_total())
    res.add("Total_f_Total", manager.f_total())
    res.add("Total_Cd_Total", manager.total_cd())
    res.add("Total_Perc_Total", manager.perc_total())

    return res


def export_to_csv(manager, path: Optional[Path] = None) -> Path:
    """Write the current results; defaults to the configured file name."""
    target = Path(path) if path is not None else Path(manager.settings.file_name)
    return build_results(manager).write_csv(target)

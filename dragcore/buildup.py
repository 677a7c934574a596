"""
Parasite Drag Buildup: Component Drag Manager
=============================================

Builds the drag ledger for one vehicle: one row per surface instance and per
included sub-surface, each carrying

    f  = Swet * Q * Cf * FF        (equivalent flat plate area)
    CD = f / Sref

plus the excrescence ledger, totals and percent of total CD.

Pipeline order inside ``calculate_all``:

    wetted area -> reference length -> Reynolds number -> skin friction
    -> fineness ratio -> form factor -> ancestor overrides -> f -> CD
    -> excrescences -> percentages

The manager owns its rows and ledger. Geometry is re-resolved by id from the
vehicle on every access.
"""

from __future__ import annotations

import copy
import logging
import math
from dataclasses import dataclass
from typing import Dict, List, Optional

import numpy as np

from dragconfig import (
    DragBuildupConfig, FFWingEqn, FreestreamType, LengthUnit, ParmRole, PresUnit,
    RefFlag, SortBy, SurfType, TempUnit, UnitSystem, VelocityUnit, config as default_config,
)
from dragconfig.drag_config import clamp
from . import form_factor, friction, reduction, sorting, units
from .atmosphere import H_MIN_M, AtmosphereModel
from .excrescence import ExcrescenceLedger
from .geometry import (
    EXCLUDED_GEOM_TYPES, NO_ANCESTOR, WING_GEOM_TYPE, DegenGeom, Geom, GeometryLookupError, Vehicle,
)

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

CUSTOM_LABEL_PREFIXES = ("[W]", "[B]")


@dataclass
class SurfaceRow:
    """
    One line of the drag ledger.

    -1 marks a value not computed yet, or an input not yet copied from the
    owning Geom, which carries the physical defaults.
    """

    geom_id: str
    sub_surf_id: str = ""
    label: str = ""
    shape_type: SurfType = SurfType.BODY
    surf_num: int = 0

    # User inputs
    perc_lam: float = 0.0
    roughness: float = -1.0
    te_tw_ratio: float = -1.0
    taw_tw_ratio: float = -1.0
    ff_in: float = -1.0
    q: float = 1.0
    grouped_ancestor_gen: int = 0
    expanded_list: bool = False
    ff_type: int = 0

    # Computed
    swet: float = -1.0
    lref: float = -1.0
    re: float = -1.0
    cf: float = -1.0
    fine_rat: float = -1.0
    ff_out: float = -1.0
    ff_name: str = ""
    f: float = -1.0
    cd: float = -1.0
    perc_total_cd: float = -1.0

    @property
    def is_sub_surface(self) -> bool:
        return self.sub_surf_id != ""

    @property
    def has_custom_label(self) -> bool:
        return self.label[:3] in CUSTOM_LABEL_PREFIXES

    @property
    def ff(self) -> float:
        """Form factor used for f: the user value when given, else computed."""
        return self.ff_in if self.ff_in != -1 else self.ff_out

    @property
    def q_used(self) -> float:
        return self.q if self.q != -1 else 1.0


def magnitude(value: float) -> int:
    """Order of magnitude, floor(log10(|value|)); 0 for 0 or non-finite input."""
    if value == 0.0 or not math.isfinite(value):
        return 0
    return int(math.floor(math.log10(abs(value))))


class ParasiteDragManager:
    """
    Parasite drag buildup for one vehicle.

    Example:
        manager = ParasiteDragManager(vehicle)
        manager.compute_all()
        print(manager.total_cd())
    """

    def __init__(self, vehicle: Vehicle, drag_config: Optional[DragBuildupConfig] = None):
        self.vehicle = vehicle
        self.config = copy.deepcopy(drag_config or default_config)
        self.atmosphere = AtmosphereModel()
        self.excrescences = ExcrescenceLedger()

        self.rows: List[SurfaceRow] = []
        self.active_geom_ids: List[str] = []
        self.row_size = 0
        self.degen_geoms: List[DegenGeom] = []
        self.re_power_divisor = 1

        self.geom_f_total = 0.0
        self.geom_perc_total = 0.0

        self._row_degen: Dict[int, DegenGeom] = {}

    @property
    def reference(self):
        return self.config.reference

    @property
    def settings(self):
        return self.config.settings

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def renew(self):
        """Reset settings to defaults and drop all rows and excrescences."""
        self.config = DragBuildupConfig()
        self.rows = []
        self.excrescences.clear()
        self.degen_geoms = []
        self._row_degen = {}
        self.active_geom_ids = []
        self.row_size = 0
        self.re_power_divisor = 1
        self.geom_f_total = 0.0
        self.geom_perc_total = 0.0
        self.atmosphere = AtmosphereModel()
        logger.debug("Drag manager renewed")

    def _eligible_geom_ids(self) -> List[str]:
        ids = []
        for geom_id in self.vehicle.geom_set(self.settings.set_choice):
            geom = self.vehicle.find_geom(geom_id)
            if geom is None or geom.geom_type in EXCLUDED_GEOM_TYPES:
                continue
            if geom.num_total_surfs == 0 or geom.surf_type(0) == SurfType.DISK:
                continue
            ids.append(geom_id)
        return ids

    def _count_rows(self, geom_ids: List[str]) -> int:
        count = 0
        for geom_id in geom_ids:
            geom = self.vehicle.find_geom(geom_id)
            if geom is None:
                continue
            count += geom.num_total_surfs * (1 + len(geom.sub_surfaces))
        return count

    def set_active_geom_vec(self):
        self.active_geom_ids = self._eligible_geom_ids()

    def calc_row_size(self) -> int:
        self.row_size = self._count_rows(self.active_geom_ids)
        return self.row_size

    def is_same_geom_set(self) -> bool:
        ids = self._eligible_geom_ids()
        return ids == self.active_geom_ids and self._count_rows(ids) == self.row_size

    def refresh_degen_geom(self):
        """Drop degenerate geometry and row data when the analysed geoms changed."""
        if self.is_same_geom_set():
            return
        logger.info("Geometry set changed; clearing drag buildup rows")
        self.vehicle.clear_degen_geom()
        self.degen_geoms = []
        self._row_degen = {}
        self.rows = []
        self.set_active_geom_vec()
        self.calc_row_size()

    def setup_full_calculation(self):
        """Regenerate degenerate geometry and wetted areas for the chosen set."""
        self.vehicle.clear_degen_geom()
        self.rows = []
        self.vehicle.create_degen_geom(self.settings.set_choice)
        self.degen_geoms = list(self.vehicle.degen_geoms)

    def compute_all(self, sort: bool = True) -> List[SurfaceRow]:
        """Full recompute: geometry setup, freestream, rows, excrescences, sort."""
        self.set_active_geom_vec()
        self.calc_row_size()
        self.setup_full_calculation()
        self.update()
        self.calculate_all()
        if sort:
            self.sort_rows()
        logger.info(
            "Drag buildup: %d rows, CD_geom=%.5f, CD_total=%.5f",
            len(self.rows), self.geometry_cd(), self.total_cd(),
        )
        return self.rows

    # ------------------------------------------------------------------
    # Freestream and reference
    # ------------------------------------------------------------------
    def update(self):
        self.update_ref_wing()
        self.update_atmos()
        self.update_excres()

    def update_ref_wing(self):
        settings = self.settings
        if settings.ref_flag == RefFlag.MANUAL:
            return
        ref_geom = self.vehicle.find_geom(settings.ref_geom_id)
        if ref_geom is None:
            if settings.ref_geom_id:
                logger.warning("Reference geom %r no longer exists; reference cleared",
                               settings.ref_geom_id)
            settings.ref_geom_id = ""
            return
        if ref_geom.geom_type == WING_GEOM_TYPE:
            settings.sref = ref_geom.total_area

    def is_parm_active(self, role: ParmRole) -> bool:
        if role == ParmRole.KINEMATIC_VISCOSITY or role == ParmRole.DYNAMIC_VISCOSITY:
            return False
        return self.reference.is_active(role)

    @property
    def sref_active(self) -> bool:
        return self.settings.ref_flag == RefFlag.MANUAL

    def update_atmos(self):
        ref = self.reference
        atmos = self.atmosphere

        if ref.freestream_type == FreestreamType.US_STANDARD_1976:
            atmos.us_standard_1976(
                ref.altitude, ref.delta_temp, ref.alt_unit, ref.temp_unit, ref.pres_unit,
                ref.specific_heat_ratio,
            )
            atmos.update_mach(ref.vinf, ref.vinf_unit)
        elif ref.freestream_type in (
            FreestreamType.MANUAL_P_R, FreestreamType.MANUAL_P_T, FreestreamType.MANUAL_R_T
        ):
            atmos.manual(
                ref.freestream_type, ref.temperature, ref.pressure, ref.density,
                ref.specific_heat_ratio, ref.alt_unit, ref.temp_unit, ref.pres_unit,
            )
            atmos.update_mach(ref.vinf, ref.vinf_unit)
        else:
            # Re/L given directly; velocity follows from Mach and the standard day sound speed
            state = atmos.us_standard_1976(
                ref.altitude, ref.delta_temp, ref.alt_unit, ref.temp_unit, ref.pres_unit,
                ref.specific_heat_ratio,
            )
            vinf_system = ref.mach * state.speed_of_sound
            ref.vinf = units.convert_velocity(
                vinf_system, units.system_velocity_unit(ref.alt_unit), ref.vinf_unit,
                state.density_ratio,
            )
            state.mach = ref.mach
            return

        state = atmos.state
        ref.temperature = state.temperature
        ref.pressure = state.pressure
        ref.density = state.density
        ref.dynamic_viscosity = state.dynamic_viscosity
        ref.kinematic_viscosity = state.kinematic_viscosity
        ref.mach = state.mach

        vinf = self._vinf_in_system_units()
        if ref.kinematic_viscosity > 0.0:
            re_per_system_length = vinf / ref.kinematic_viscosity
            ref.re_per_length = re_per_system_length * units.convert_length(
                1.0, ref.length_unit, units.system_length_unit(ref.alt_unit)
            )

    def _density_ratio(self) -> float:
        state = self.atmosphere.state
        return state.density_ratio if state is not None else 1.0

    def _vinf_in_system_units(self) -> float:
        ref = self.reference
        return units.convert_velocity(
            ref.vinf, ref.vinf_unit, units.system_velocity_unit(ref.alt_unit), self._density_ratio()
        )

    # === UNIT CHANGES (convert the stored value in place) ===

    def update_vinf_unit(self, new_unit: VelocityUnit):
        ref = self.reference
        ref.vinf = units.convert_velocity(ref.vinf, ref.vinf_unit, new_unit, self._density_ratio())
        ref.vinf_unit = VelocityUnit(new_unit)

    def update_alt_unit(self, new_unit: UnitSystem):
        ref = self.reference
        new_unit = UnitSystem(new_unit)
        if new_unit != ref.alt_unit:
            ref.altitude = units.altitude_from_m(units.altitude_to_m(ref.altitude, ref.alt_unit), new_unit)
            ref.density = units.density_from_si(units.density_to_si(ref.density, ref.alt_unit), new_unit)
            ref.alt_unit = new_unit
        ref.altitude = min(ref.altitude, ref.altitude_upper_limit)

    def update_temp_unit(self, new_unit: TempUnit):
        ref = self.reference
        new_unit = TempUnit(new_unit)
        ref.temperature = units.convert_temperature(ref.temperature, ref.temp_unit, new_unit)
        ref.delta_temp = units.convert_temperature_delta(ref.delta_temp, ref.temp_unit, new_unit)
        ref.temp_unit = new_unit
        ref.temperature = max(ref.temperature, ref.temperature_lower_limit)

    def update_pres_unit(self, new_unit: PresUnit):
        ref = self.reference
        ref.pressure = units.convert_pressure(ref.pressure, ref.pres_unit, new_unit)
        ref.pres_unit = PresUnit(new_unit)

    def update_length_unit(self, new_unit: LengthUnit):
        self.reference.length_unit = LengthUnit(new_unit)

    def set_altitude(self, value: float):
        ref = self.reference
        ref.altitude = clamp(value, (units.altitude_from_m(H_MIN_M, ref.alt_unit), ref.altitude_upper_limit))

    def set_temperature(self, value: float):
        self.reference.temperature = max(value, self.reference.temperature_lower_limit)

    # ------------------------------------------------------------------
    # Row construction
    # ------------------------------------------------------------------
    def load_main_table_user_inputs(self):
        """Create one row per surface instance and per sub-surface instance."""
        rows: List[SurfaceRow] = []
        for geom_id in self.active_geom_ids:
            geom = self.vehicle.resolve(geom_id)

            for j in range(geom.num_total_surfs):
                shape = geom.surf_type(j)
                if j > 0 and shape == geom.surf_type(j - 1):
                    prev = rows[-1]
                    row = SurfaceRow(
                        geom_id=geom.id,
                        label=f"{geom.name}_{j}",
                        surf_num=j,
                        perc_lam=prev.perc_lam,
                        ff_in=prev.ff_in,
                        q=prev.q,
                        roughness=prev.roughness,
                        te_tw_ratio=prev.te_tw_ratio,
                        taw_tw_ratio=prev.taw_tw_ratio,
                        expanded_list=False,
                    )
                else:
                    if geom.is_custom:
                        prefix = "[B]" if shape == SurfType.BODY else "[W]"
                        label, surf_num = f"{prefix} {geom.name}", j
                    else:
                        label, surf_num = geom.name, 0
                    row = SurfaceRow(
                        geom_id=geom.id,
                        label=label,
                        surf_num=surf_num,
                        perc_lam=geom.perc_lam,
                        ff_in=geom.ff_user,
                        q=geom.q,
                        roughness=geom.roughness,
                        te_tw_ratio=geom.te_tw_ratio,
                        taw_tw_ratio=geom.taw_tw_ratio,
                        expanded_list=geom.expanded_list,
                    )
                row.grouped_ancestor_gen = geom.grouped_ancestor_gen
                row.shape_type = shape
                row.ff_type = self._ff_type_for(geom, shape)
                rows.append(row)

            for sub in geom.sub_surfaces:
                for k in range(geom.num_total_surfs):
                    prev = rows[-1]
                    shape = geom.surf_type(k)
                    rows.append(SurfaceRow(
                        geom_id=geom.id,
                        sub_surf_id=sub.id,
                        label=f"[ss] {sub.name}_{k}",
                        shape_type=shape,
                        surf_num=k,
                        perc_lam=prev.perc_lam,
                        ff_in=prev.ff_in,
                        q=prev.q,
                        roughness=prev.roughness,
                        te_tw_ratio=prev.te_tw_ratio,
                        taw_tw_ratio=prev.taw_tw_ratio,
                        grouped_ancestor_gen=-1,
                        expanded_list=False,
                        ff_type=self._ff_type_for(geom, shape),
                    ))

        self.rows = rows
        self.row_size = len(rows)

    @staticmethod
    def _ff_type_for(geom: Geom, shape: SurfType) -> int:
        return int(geom.ff_body_eqn) if shape == SurfType.BODY else int(geom.ff_wing_eqn)

    def _map_rows_to_degen(self):
        """Pair each primary row with its degenerate surface, skipping disks."""
        self._row_degen = {}
        if not self.degen_geoms:
            return
        cursor = 0
        for i, row in enumerate(self.rows):
            if row.is_sub_surface:
                continue
            while cursor < len(self.degen_geoms) and self.degen_geoms[cursor].surf_type == SurfType.DISK:
                cursor += 1
            if cursor >= len(self.degen_geoms):
                raise GeometryLookupError(
                    f"No degenerate geometry left for row {row.label!r}"
                )
            self._row_degen[i] = self.degen_geoms[cursor]
            cursor += 1

    @property
    def has_geometry(self) -> bool:
        return bool(self.degen_geoms)

    def _ancestor_id(self, row: SurfaceRow) -> str:
        return self.vehicle.get_ancestor_id(row.geom_id, row.grouped_ancestor_gen)

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------
    def calculate_all(self):
        self.load_main_table_user_inputs()
        self._map_rows_to_degen()

        self.calculate_swet()
        self.calculate_lref()
        self.calculate_re()
        self.calculate_cf()
        self.calculate_fine_rat()
        self.calculate_ff()
        self.overwrite_properties_from_ancestor_geom()
        self.calculate_f()
        self.calculate_cd()

        self.update_excres()
        self.update_percentage_cd()

    def calculate_swet(self):
        if not self.has_geometry:
            for row in self.rows:
                row.swet = -1.0
            return

        for row in self.rows:
            geom = self.vehicle.resolve(row.geom_id)
            tag = f"{geom.name}{row.surf_num}"
            if row.is_sub_surface:
                tag = f"{tag},{geom.sub_surface(row.sub_surf_id).name}"
            area = self.vehicle.wetted_area(tag)
            if area is None:
                logger.warning("No wetted area tagged %r; using 0", tag)
                area = 0.0
            row.swet = area

        self.update_wetted_area_totals()

    def _per_primary_row(self, compute, attr: str):
        """Set ``attr`` on primary rows via ``compute(row, degen)``; sub-surfaces copy the row above."""
        for i, row in enumerate(self.rows):
            if not self.has_geometry:
                setattr(row, attr, -1.0)
            elif row.is_sub_surface:
                setattr(row, attr, getattr(self.rows[i - 1], attr))
            else:
                setattr(row, attr, compute(row, self._row_degen[i]))

    def calculate_lref(self):
        self._per_primary_row(
            lambda row, degen: reduction.reference_length(degen.surf_type, degen.stick), "lref"
        )

    def calculate_re(self):
        self._per_primary_row(lambda row, degen: self.reynolds_number(row.lref), "re")
        self.calc_re_power_divisor()

    def reynolds_number(self, lref: float) -> float:
        ref = self.reference
        if ref.freestream_type == FreestreamType.MANUAL_RE_L:
            return ref.re_per_length * lref
        if ref.kinematic_viscosity <= 0.0:
            return 0.0
        lref_system = units.convert_length(lref, ref.length_unit, units.system_length_unit(ref.alt_unit))
        return self._vinf_in_system_units() * lref_system / ref.kinematic_viscosity

    def calc_re_power_divisor(self):
        if self.rows:
            self.re_power_divisor = magnitude(max(row.re for row in self.rows))
        else:
            self.re_power_divisor = 1

    def _friction_inputs(self, row: SurfaceRow) -> friction.FrictionInputs:
        ref = self.reference
        return friction.FrictionInputs(
            ref_length=row.lref,
            roughness=row.roughness,
            gamma=ref.specific_heat_ratio,
            mach=ref.mach,
            taw_tw_ratio=row.taw_tw_ratio,
            te_tw_ratio=row.te_tw_ratio,
            length_unit=ref.length_unit,
            tolerance=self.settings.newton_tolerance,
            max_iterations=self.settings.newton_max_iterations,
        )

    def skin_friction(self, row: SurfaceRow) -> float:
        """Turbulent Cf, blended with laminar Cf over the laminar run."""
        turb_eqn = self.settings.turb_cf_eqn
        lam_eqn = self.settings.lam_cf_eqn
        inputs = self._friction_inputs(row)

        if row.perc_lam == 0 or row.perc_lam == -1:
            return friction.calc_turb_cf(row.re, turb_eqn, inputs)
        if row.re == 0:
            return 0.0

        lam_frac = row.perc_lam / 100.0
        re_lam = row.re * lam_frac
        cf_full_turb = friction.calc_turb_cf(row.re, turb_eqn, inputs)
        cf_part_lam = friction.calc_lam_cf(re_lam, lam_eqn)
        cf_part_turb = friction.calc_turb_cf(re_lam, turb_eqn, inputs)
        return cf_full_turb - cf_part_turb * lam_frac + cf_part_lam * lam_frac

    def calculate_cf(self):
        self._per_primary_row(lambda row, degen: self.skin_friction(row), "cf")

    def calculate_fine_rat(self):
        self._per_primary_row(
            lambda row, degen: reduction.fineness_ratio(degen.surf_type, degen.stick, row.lref),
            "fine_rat",
        )

    def calculate_ff(self):
        mach = self.reference.mach
        for i, row in enumerate(self.rows):
            if not self.has_geometry:
                row.ff_out = -1.0
                row.ff_name = ""
                continue
            if row.is_sub_surface:
                prev = self.rows[i - 1]
                row.ff_out = prev.ff_out
                row.ff_name = prev.ff_name
                continue

            degen = self._row_degen[i]
            if degen.surf_type == SurfType.WING:
                sweep25, sweep50 = reduction.average_sweep(degen.stick)
                row.ff_out = form_factor.calc_ff_wing(
                    row.fine_rat, row.ff_type, mach, row.perc_lam, sweep25, sweep50
                )
                if row.ff_type == FFWingEqn.JENKINSON_TAIL:
                    row.q = form_factor.JENKINSON_TAIL_Q
                row.ff_name = form_factor.ff_wing_eqn_name(row.ff_type)
            else:
                max_area = reduction.max_planform_area(degen.stick)
                long_f = 1.0 / row.fine_rat if row.fine_rat != 0 else math.inf
                fr = row.lref / math.sqrt(max_area) if max_area > 0 else math.inf
                row.ff_out = form_factor.calc_ff_body(long_f, fr, row.ff_type, row.lref, max_area, mach)
                row.ff_name = form_factor.ff_body_eqn_name(row.ff_type)

    def overwrite_properties_from_ancestor_geom(self):
        """Grouped rows take their physics from the ancestor's primary row."""
        for row in self.rows:
            if row.grouped_ancestor_gen <= 0:
                continue
            ancestor_id = self._ancestor_id(row)
            if ancestor_id == NO_ANCESTOR:
                continue
            for source in self.rows:
                if source.geom_id == ancestor_id and source.surf_num == 0 and not source.is_sub_surface:
                    row.lref = source.lref
                    row.re = source.re
                    row.fine_rat = source.fine_rat
                    row.ff_out = source.ff_out
                    row.ff_type = source.ff_type
                    row.ff_name = source.ff_name
                    row.perc_lam = source.perc_lam
                    row.q = source.q
                    row.cf = source.cf

    def update_wetted_area_totals(self):
        """
        Fold sub-surface and secondary surface areas into their master rows.

        Both passes accumulate into the live totals, so a row filled in an
        earlier iteration may itself be folded into another later.
        """
        if not self.has_geometry:
            return
        rows = self.rows
        vehicle = self.vehicle

        # Sub-surfaces into their primary rows
        for i, target in enumerate(rows):
            if target.is_sub_surface:
                continue
            target_geom = vehicle.resolve(target.geom_id)
            for j, source in enumerate(rows):
                if i == j or not source.is_sub_surface:
                    continue
                source_geom = vehicle.resolve(source.geom_id)
                include = source_geom.sub_surface(source.sub_surf_id).include_flag
                if target_geom.expanded_list or not include or target.surf_num != 0:
                    continue
                if (target.geom_id == source.geom_id
                        or target.geom_id == self._ancestor_id(source)):
                    target.swet += source.swet

        # Secondary surfaces into their master rows
        for i, target in enumerate(rows):
            if target.is_sub_surface:
                continue
            for j, source in enumerate(rows):
                if i == j or source.is_sub_surface:
                    continue
                source_geom = vehicle.resolve(source.geom_id)
                same_geom = target.geom_id == source.geom_id
                merges = (
                    (same_geom and target.surf_num == 0)
                    or (not same_geom
                        and target.geom_id == self._ancestor_id(source)
                        and target.surf_num == 0
                        and not source_geom.expanded_list)
                    or target.has_custom_label
                )
                if merges and target.shape_type == source.shape_type and not target.expanded_list:
                    target.swet += source.swet

    def is_not_zero_line_item(self, index: int) -> bool:
        """Whether a row reports its own f and CD rather than 0."""
        row = self.rows[index]
        geom = self.vehicle.resolve(row.geom_id)

        if row.is_sub_surface:
            return geom.sub_surface(row.sub_surf_id).include_flag and geom.expanded_list

        ancestor = self.vehicle.find_geom(self._ancestor_id(row))
        ancestor_expanded = ancestor.expanded_list if ancestor is not None else False
        reports_itself = row.surf_num == 0 or geom.expanded_list or row.has_custom_label
        not_folded = row.grouped_ancestor_gen == 0 or ancestor_expanded or geom.expanded_list
        return reports_itself and not_folded

    def calculate_f(self):
        for i, row in enumerate(self.rows):
            if not self.has_geometry:
                row.f = -1.0
            elif self.is_not_zero_line_item(i):
                row.f = row.swet * row.q_used * row.cf * row.ff
            else:
                row.f = 0.0

    def calculate_cd(self):
        sref = self.settings.sref
        for i, row in enumerate(self.rows):
            if not self.has_geometry:
                row.cd = -1.0
            elif self.is_not_zero_line_item(i) and math.isfinite(row.f) and sref > 0.0:
                row.cd = row.f / sref
            else:
                row.cd = 0.0

    # ------------------------------------------------------------------
    # Excrescences, totals, percentages
    # ------------------------------------------------------------------
    def update_excres(self):
        self.excrescences.update(self.geometry_cd(), self.settings.sref, self.has_geometry)

    def add_excrescence(self, label: Optional[str] = None, kind=None, value: Optional[float] = None):
        return self.excrescences.add(label, kind, value, sref=self.settings.sref)

    def delete_excrescence(self, index: Optional[int] = None):
        self.excrescences.delete(index)

    def update_percentage_cd(self):
        total = self.total_cd()
        f_total = 0.0
        perc_total = 0.0
        for row in self.rows:
            if not self.has_geometry:
                row.perc_total_cd = 0.0
            elif math.isfinite(row.f) and total != 0.0:
                row.perc_total_cd = row.cd / total
                perc_total += row.perc_total_cd
                f_total += row.f
            else:
                row.perc_total_cd = 0.0
        self.geom_f_total = f_total
        self.geom_perc_total = perc_total
        self.excrescences.update_percentages(total, self.has_geometry)

    def geometry_cd(self) -> float:
        return float(sum(row.cd for row in self.rows if row.cd > 0.0))

    def subtotal_cd(self) -> float:
        return self.geometry_cd() + self.excrescences.subtotal_amount()

    def total_cd(self) -> float:
        if self.excrescences.has_margin:
            return self.geometry_cd() + self.excrescences.total_amount()
        return self.subtotal_cd()

    def excres_f_total(self) -> float:
        return self.excrescences.total_f()

    def excres_perc_total(self) -> float:
        return self.excrescences.total_percent()

    def f_total(self) -> float:
        return self.geom_f_total + self.excres_f_total()

    def perc_total(self) -> float:
        return self.geom_perc_total + self.excres_perc_total()

    def lref_decimals(self) -> int:
        """Display decimals for reference lengths, from the largest Lref."""
        lref_mag = magnitude(max(row.lref for row in self.rows)) if self.rows else 1
        if lref_mag > 1:
            return 1
        if lref_mag == 1:
            return 2
        return 3

    # ------------------------------------------------------------------
    # Ordering
    # ------------------------------------------------------------------
    def _sort_ancestor(self, row: SurfaceRow) -> Optional[str]:
        if self.vehicle.find_geom(row.geom_id) is None:
            return None
        return self._ancestor_id(row)

    def sort_rows(self, sort_by: Optional[SortBy] = None) -> List[SurfaceRow]:
        sort_by = self.settings.sort_by if sort_by is None else SortBy(sort_by)
        self.rows = sorting.sort_rows(self.rows, sort_by, self._sort_ancestor)
        return self.rows

    def row_values(self, attr: str) -> np.ndarray:
        """Column of the ledger as an array, in current row order."""
        return np.array([getattr(row, attr) for row in self.rows])

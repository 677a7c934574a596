"""
Parasite Drag Buildup: Single Source of Truth (SSOT)
====================================================

This configuration file defines ALL selectable options and default values for
the drag buildup. Equation selectors, unit systems, freestream definitions and
excrescence kinds are closed sets and live here as enumerations so that the
engine, the persistence layer and the CLI agree on one set of codes.

Integer values match the codes stored in saved settings files; do not renumber.
"""

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Dict, List, Optional


class SurfType(IntEnum):
    """Shape classification of a geometry surface."""
    BODY = 0                              # Body of revolution (fuselage, nacelle)
    WING = 1                              # Lifting surface
    DISK = 2                              # Actuator disk - never produces a row


class TurbCfEqn(IntEnum):
    """Turbulent skin friction equations."""
    EXPLICIT_FIT_SPALDING = 0
    EXPLICIT_FIT_SPALDING_CHI = 1
    EXPLICIT_FIT_SCHOENHERR = 2
    IMPLICIT_KARMAN = 3
    IMPLICIT_SCHOENHERR = 4
    IMPLICIT_KARMAN_SCHOENHERR = 5
    POWER_LAW_BLASIUS = 6
    POWER_LAW_PRANDTL_LOW_RE = 7
    POWER_LAW_PRANDTL_MEDIUM_RE = 8
    POWER_LAW_PRANDTL_HIGH_RE = 9
    SCHLICHTING_COMPRESSIBLE = 10
    SCHLICHTING_INCOMPRESSIBLE = 11
    SCHLICHTING_PRANDTL = 12
    SCHULTZ_GRUNOW_HIGH_RE = 13
    SCHULTZ_GRUNOW_SCHOENHERR = 14
    WHITE_CHRISTOPH_COMPRESSIBLE = 15
    ROUGHNESS_SCHLICHTING_AVG = 16
    ROUGHNESS_SCHLICHTING_LOCAL = 17
    ROUGHNESS_WHITE = 18
    ROUGHNESS_SCHLICHTING_AVG_FLOW_CORRECTION = 19
    HEATTRANSFER_WHITE_CHRISTOPH = 20


class LamCfEqn(IntEnum):
    """Laminar skin friction equations."""
    BLASIUS = 0
    BLASIUS_W_HEAT = 1                    # Not implemented - always 0


class FFWingEqn(IntEnum):
    """Form factor equations for lifting surfaces."""
    MANUAL = 0
    EDET_CONV = 1
    EDET_ADV = 2
    HOERNER = 3
    COVERT = 4
    SHEVELL = 5
    KROO = 6
    TORENBEEK = 7
    DATCOM = 8
    SCHEMENSKY_6_SERIES_AF = 9
    SCHEMENSKY_4_SERIES_AF = 10
    JENKINSON_WING = 11
    JENKINSON_TAIL = 12


class FFBodyEqn(IntEnum):
    """Form factor equations for bodies of revolution."""
    MANUAL = 0
    SCHEMENSKY_FUSE = 1
    SCHEMENSKY_NACELLE = 2
    HOERNER_STREAMBODY = 3
    TORENBEEK = 4
    SHEVELL = 5
    JENKINSON_FUSE = 6
    JENKINSON_WING_NACELLE = 7
    JENKINSON_AFT_FUSE_NACELLE = 8
    JOBE = 9


class ExcrescenceType(IntEnum):
    """How an excrescence input value is interpreted."""
    COUNT = 0                             # Drag counts (10000 * CD)
    CD = 1                                # Direct CD increment
    PERCENT_GEOM = 2                      # % of geometry CD
    MARGIN = 3                            # % margin on the total CD
    DRAGAREA = 4                          # D/q, divided by Sref


class FreestreamType(IntEnum):
    """Which inputs describe the freestream."""
    US_STANDARD_1976 = 0
    MANUAL_P_R = 2                        # Pressure + density
    MANUAL_P_T = 3                        # Pressure + temperature
    MANUAL_R_T = 4                        # Density + temperature
    MANUAL_RE_L = 5                       # Reynolds number per unit length


class UnitSystem(IntEnum):
    """Altitude / flow property unit system."""
    IMPERIAL = 0
    METRIC = 1


class LengthUnit(IntEnum):
    MM = 0
    CM = 1
    M = 2
    IN = 3
    FT = 4
    YD = 5
    UNITLESS = 6


class VelocityUnit(IntEnum):
    FT_S = 0
    M_S = 1
    MPH = 2
    KM_HR = 3
    KEAS = 4
    KTAS = 5


class TempUnit(IntEnum):
    K = 0
    C = 1
    F = 2
    R = 3


class PresUnit(IntEnum):
    PSF = 0
    PSI = 1
    BA = 2
    PA = 3
    KPA = 4
    MPA = 5
    INCHHG = 6
    MMHG = 7
    MMH20 = 8
    MB = 9
    ATM = 10


class SortBy(IntEnum):
    """Secondary ordering applied after ancestor grouping."""
    NONE = 0
    WETTED_AREA = 1
    PERC_CD = 2


class RefFlag(IntEnum):
    """Source of the reference area."""
    MANUAL = 0
    COMPONENT = 1


class ParmRole(Enum):
    """Named reference-condition parameters used for activity flags."""
    VINF = "vinf"
    ALTITUDE = "altitude"
    DELTA_TEMP = "delta_temp"
    TEMPERATURE = "temperature"
    PRESSURE = "pressure"
    DENSITY = "density"
    SPECIFIC_HEAT_RATIO = "specific_heat_ratio"
    DYNAMIC_VISCOSITY = "dynamic_viscosity"
    KINEMATIC_VISCOSITY = "kinematic_viscosity"
    MACH = "mach"
    RE_PER_LENGTH = "re_per_length"


# Upper altitude limit of the standard atmosphere table
ALTITUDE_UPPER_LIMIT: Dict[UnitSystem, float] = {
    UnitSystem.IMPERIAL: 278385.83,       # ft
    UnitSystem.METRIC: 84852.0,           # m
}

# Absolute-zero floor per temperature unit
TEMPERATURE_LOWER_LIMIT: Dict[TempUnit, float] = {
    TempUnit.C: -273.15,
    TempUnit.F: -459.666,
    TempUnit.K: 0.0,
    TempUnit.R: 0.0,
}

# Editable input range per excrescence kind
EXCRESCENCE_LIMITS: Dict[ExcrescenceType, tuple] = {
    ExcrescenceType.CD: (0.0, 0.2),
    ExcrescenceType.COUNT: (0.0, 2000.0),
    ExcrescenceType.PERCENT_GEOM: (0.0, 100.0),
    ExcrescenceType.MARGIN: (0.0, 100.0),
    ExcrescenceType.DRAGAREA: (0.0, 10.0),
}

# Parameters that are editable for each freestream definition
ACTIVE_PARMS: Dict[FreestreamType, tuple] = {
    FreestreamType.US_STANDARD_1976: (ParmRole.VINF, ParmRole.ALTITUDE, ParmRole.DELTA_TEMP),
    FreestreamType.MANUAL_P_R: (
        ParmRole.VINF, ParmRole.PRESSURE, ParmRole.DENSITY, ParmRole.SPECIFIC_HEAT_RATIO
    ),
    FreestreamType.MANUAL_P_T: (
        ParmRole.VINF, ParmRole.TEMPERATURE, ParmRole.PRESSURE, ParmRole.SPECIFIC_HEAT_RATIO
    ),
    FreestreamType.MANUAL_R_T: (
        ParmRole.VINF, ParmRole.TEMPERATURE, ParmRole.DENSITY, ParmRole.SPECIFIC_HEAT_RATIO
    ),
    FreestreamType.MANUAL_RE_L: (
        ParmRole.RE_PER_LENGTH, ParmRole.MACH, ParmRole.SPECIFIC_HEAT_RATIO
    ),
}


@dataclass
class ReferenceCondition:
    """Freestream description - values are stored in the selected units."""

    freestream_type: FreestreamType = FreestreamType.US_STANDARD_1976

    # === FLOW STATE ===
    mach: float = 0.0
    re_per_length: float = 0.0            # Re per unit length (length_unit)
    vinf: float = 500.0
    altitude: float = 20000.0
    delta_temp: float = 0.0               # Offset from standard day
    temperature: float = 288.15
    pressure: float = 2116.221
    density: float = 0.07647
    dynamic_viscosity: float = 0.0
    kinematic_viscosity: float = 0.0      # Derived, alt unit system
    specific_heat_ratio: float = 1.4

    # === UNITS ===
    alt_unit: UnitSystem = UnitSystem.IMPERIAL
    length_unit: LengthUnit = LengthUnit.FT
    temp_unit: TempUnit = TempUnit.F
    vinf_unit: VelocityUnit = VelocityUnit.FT_S
    pres_unit: PresUnit = PresUnit.PSF

    @property
    def active_parms(self) -> tuple:
        """Parameters the user may edit under the current freestream type."""
        return ACTIVE_PARMS[self.freestream_type]

    def is_active(self, role: ParmRole) -> bool:
        return role in self.active_parms

    @property
    def altitude_upper_limit(self) -> float:
        return ALTITUDE_UPPER_LIMIT[self.alt_unit]

    @property
    def temperature_lower_limit(self) -> float:
        return TEMPERATURE_LOWER_LIMIT[self.temp_unit]


@dataclass
class DragSettings:
    """Drag buildup options that are independent of the freestream."""

    # === REFERENCE QUANTITIES ===
    sref: float = 100.0                   # Reference area (length_unit^2)
    ref_flag: RefFlag = RefFlag.MANUAL
    ref_geom_id: str = ""                 # Wing supplying Sref when ref_flag == COMPONENT

    # === EQUATION CHOICES ===
    lam_cf_eqn: LamCfEqn = LamCfEqn.BLASIUS
    turb_cf_eqn: TurbCfEqn = TurbCfEqn.POWER_LAW_BLASIUS

    # === PRESENTATION ===
    sort_by: SortBy = SortBy.NONE
    set_choice: int = 0                   # Geometry set analysed
    file_name: str = "ParasiteDragBuildUp.csv"

    # === NUMERICS ===
    newton_tolerance: float = 1e-15
    newton_max_iterations: int = 100


@dataclass
class DragBuildupConfig:
    """
    Master configuration.

    The drag manager takes a private copy of this object; the module-level
    instance below only supplies defaults to the CLI and scripts.
    """

    reference: ReferenceCondition = field(default_factory=ReferenceCondition)
    settings: DragSettings = field(default_factory=DragSettings)

    # Project metadata
    project_name: str = "Parasite Drag Buildup"
    version: str = "0.1.0"

    def validate(self) -> List[str]:
        """Validate configuration for physically meaningful values."""
        errors = []
        ref = self.reference
        settings = self.settings

        if settings.sref <= 0.0:
            errors.append(
                f"REFERENCE AREA: Sref must be positive (got {settings.sref})."
            )

        if settings.ref_flag == RefFlag.COMPONENT and not settings.ref_geom_id:
            errors.append(
                "REFERENCE AREA: Component reference selected but no reference wing is set."
            )

        if ref.specific_heat_ratio <= 1.0:
            errors.append(
                f"FREESTREAM: Specific heat ratio must exceed 1.0 (got {ref.specific_heat_ratio})."
            )

        if ref.altitude > ref.altitude_upper_limit:
            errors.append(
                f"FREESTREAM: Altitude {ref.altitude} exceeds atmosphere limit "
                f"{ref.altitude_upper_limit}."
            )

        if ref.temperature < ref.temperature_lower_limit:
            errors.append(
                f"FREESTREAM: Temperature {ref.temperature} is below absolute zero "
                f"for {ref.temp_unit.name}."
            )

        if ref.freestream_type == FreestreamType.MANUAL_RE_L and ref.re_per_length <= 0.0:
            errors.append(
                "FREESTREAM: Manual Re/L selected but Reynolds number per length is not positive."
            )

        if settings.newton_max_iterations < 1:
            errors.append("NUMERICS: Newton iteration cap must be at least 1.")

        return errors

    def summary(self) -> str:
        """Generate human-readable configuration summary."""
        ref = self.reference
        settings = self.settings
        return f"""
Parasite Drag Configuration Summary
===================================
Version: {self.version}

REFERENCE
---------
Sref: {settings.sref:.3f} ({ref.length_unit.name}^2)
Reference: {settings.ref_flag.name}

FREESTREAM
----------
Definition: {ref.freestream_type.name}
Vinf: {ref.vinf:.2f} {ref.vinf_unit.name}
Altitude: {ref.altitude:.1f} ({ref.alt_unit.name})
Mach: {ref.mach:.4f}
Re/L: {ref.re_per_length:.4g}

EQUATIONS
---------
Laminar Cf: {settings.lam_cf_eqn.name}
Turbulent Cf: {settings.turb_cf_eqn.name}
Sort: {settings.sort_by.name}
"""


def clamp(value: float, limits: tuple) -> float:
    """Clamp a value into an inclusive (lower, upper) range."""
    lower, upper = limits
    return min(max(value, lower), upper)


def excrescence_limits(kind: Optional[ExcrescenceType]) -> tuple:
    """Input range for an excrescence kind; unknown kinds are unbounded below 200."""
    if kind is None:
        return (0.0, 200.0)
    return EXCRESCENCE_LIMITS.get(kind, (0.0, 200.0))


# Default instance - import this in entry points
config = DragBuildupConfig()

# Validate on import
_errors = config.validate()
if _errors:
    import warnings
    for err in _errors:
        warnings.warn(err, UserWarning)

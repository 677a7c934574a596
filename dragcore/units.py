"""
Parasite Drag Buildup: Unit Conversion
======================================

Pure conversions between the unit systems selectable for the freestream and
for geometry. Every conversion goes through SI as the pivot unit.
"""

from typing import Dict

from dragconfig import LengthUnit, PresUnit, TempUnit, UnitSystem, VelocityUnit

# Metres per unit
_LENGTH_TO_M: Dict[LengthUnit, float] = {
    LengthUnit.MM: 0.001,
    LengthUnit.CM: 0.01,
    LengthUnit.M: 1.0,
    LengthUnit.IN: 0.0254,
    LengthUnit.FT: 0.3048,
    LengthUnit.YD: 0.9144,
    LengthUnit.UNITLESS: 1.0,
}

# Metres per second per unit (equivalent airspeed handled by the caller)
_VELOCITY_TO_M_S: Dict[VelocityUnit, float] = {
    VelocityUnit.FT_S: 0.3048,
    VelocityUnit.M_S: 1.0,
    VelocityUnit.MPH: 0.44704,
    VelocityUnit.KM_HR: 1.0 / 3.6,
    VelocityUnit.KEAS: 1852.0 / 3600.0,
    VelocityUnit.KTAS: 1852.0 / 3600.0,
}

# Pascals per unit
_PRESSURE_TO_PA: Dict[PresUnit, float] = {
    PresUnit.PSF: 47.880258889,
    PresUnit.PSI: 6894.757293168,
    PresUnit.BA: 0.1,
    PresUnit.PA: 1.0,
    PresUnit.KPA: 1000.0,
    PresUnit.MPA: 1.0e6,
    PresUnit.INCHHG: 3386.389,
    PresUnit.MMHG: 133.322387415,
    PresUnit.MMH20: 9.80665,
    PresUnit.MB: 100.0,
    PresUnit.ATM: 101325.0,
}

SLUG_FT3_TO_KG_M3 = 515.378818
SLUG_FT_S_TO_PA_S = 47.880258889

# Inches per length unit, used by the roughness friction laws
INCHES_PER_UNIT: Dict[LengthUnit, float] = {
    LengthUnit.MM: 0.0393701,
    LengthUnit.CM: 0.393701,
    LengthUnit.M: 39.3701,
    LengthUnit.IN: 1.0,
    LengthUnit.FT: 12.0,
    LengthUnit.YD: 36.0,
    LengthUnit.UNITLESS: 1.0,
}


def convert_length(value: float, from_unit: LengthUnit, to_unit: LengthUnit) -> float:
    """Convert a length between units."""
    if from_unit == to_unit:
        return value
    return value * _LENGTH_TO_M[from_unit] / _LENGTH_TO_M[to_unit]


def convert_area(value: float, from_unit: LengthUnit, to_unit: LengthUnit) -> float:
    """Convert an area given the length units it is expressed in."""
    factor = convert_length(1.0, from_unit, to_unit)
    return value * factor * factor


def convert_velocity(
    value: float,
    from_unit: VelocityUnit,
    to_unit: VelocityUnit,
    density_ratio: float = 1.0,
) -> float:
    """
    Convert a velocity between units.

    Equivalent airspeed (KEAS) is related to true airspeed through the
    density ratio sigma = rho / rho_SL: V_true = V_eas / sqrt(sigma).
    """
    if from_unit == to_unit:
        return value

    v_ms = value * _VELOCITY_TO_M_S[from_unit]
    if from_unit == VelocityUnit.KEAS and density_ratio > 0.0:
        v_ms /= density_ratio ** 0.5
    if to_unit == VelocityUnit.KEAS:
        v_ms *= density_ratio ** 0.5
    return v_ms / _VELOCITY_TO_M_S[to_unit]


def to_kelvin(value: float, unit: TempUnit) -> float:
    if unit == TempUnit.K:
        return value
    if unit == TempUnit.C:
        return value + 273.15
    if unit == TempUnit.F:
        return (value + 459.67) * 5.0 / 9.0
    return value * 5.0 / 9.0


def from_kelvin(value: float, unit: TempUnit) -> float:
    if unit == TempUnit.K:
        return value
    if unit == TempUnit.C:
        return value - 273.15
    if unit == TempUnit.F:
        return value * 9.0 / 5.0 - 459.67
    return value * 9.0 / 5.0


def convert_temperature(value: float, from_unit: TempUnit, to_unit: TempUnit) -> float:
    """Convert an absolute temperature between scales."""
    if from_unit == to_unit:
        return value
    return from_kelvin(to_kelvin(value, from_unit), to_unit)


def convert_temperature_delta(value: float, from_unit: TempUnit, to_unit: TempUnit) -> float:
    """Convert a temperature difference (no offset) between scales."""
    kelvin_size = {TempUnit.K: 1.0, TempUnit.C: 1.0, TempUnit.F: 5.0 / 9.0, TempUnit.R: 5.0 / 9.0}
    return value * kelvin_size[from_unit] / kelvin_size[to_unit]


def convert_pressure(value: float, from_unit: PresUnit, to_unit: PresUnit) -> float:
    """Convert a pressure between units."""
    if from_unit == to_unit:
        return value
    return value * _PRESSURE_TO_PA[from_unit] / _PRESSURE_TO_PA[to_unit]


def density_to_si(value: float, system: UnitSystem) -> float:
    """Density in the given unit system (slug/ft^3 or kg/m^3) to kg/m^3."""
    return value * SLUG_FT3_TO_KG_M3 if system == UnitSystem.IMPERIAL else value


def density_from_si(value: float, system: UnitSystem) -> float:
    return value / SLUG_FT3_TO_KG_M3 if system == UnitSystem.IMPERIAL else value


def viscosity_to_si(value: float, system: UnitSystem) -> float:
    """Dynamic viscosity (slug/ft-s or Pa-s) to Pa-s."""
    return value * SLUG_FT_S_TO_PA_S if system == UnitSystem.IMPERIAL else value


def viscosity_from_si(value: float, system: UnitSystem) -> float:
    return value / SLUG_FT_S_TO_PA_S if system == UnitSystem.IMPERIAL else value


def altitude_to_m(value: float, system: UnitSystem) -> float:
    return convert_length(value, LengthUnit.FT, LengthUnit.M) if system == UnitSystem.IMPERIAL else value


def altitude_from_m(value: float, system: UnitSystem) -> float:
    return convert_length(value, LengthUnit.M, LengthUnit.FT) if system == UnitSystem.IMPERIAL else value


def system_length_unit(system: UnitSystem) -> LengthUnit:
    """Length unit implied by an altitude unit system."""
    return LengthUnit.FT if system == UnitSystem.IMPERIAL else LengthUnit.M


def system_velocity_unit(system: UnitSystem) -> VelocityUnit:
    """Velocity unit implied by an altitude unit system."""
    return VelocityUnit.FT_S if system == UnitSystem.IMPERIAL else VelocityUnit.M_S

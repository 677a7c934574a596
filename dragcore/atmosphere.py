"""
Freestream property model.

Provides temperature, pressure, density, viscosity and Mach for the drag
buildup from either the US Standard Atmosphere 1976 (via ``ambiance``) or a
manual combination of two state properties. Results are reported in the
caller's unit selections; the model works internally in SI.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

import numpy as np
from ambiance import Atmosphere as StandardAtmosphere

from dragconfig import FreestreamType, PresUnit, TempUnit, UnitSystem, VelocityUnit
from . import units

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

R_AIR = 287.05287                         # J/(kg K)
RHO_SL = 1.225                            # kg/m^3
SUTHERLAND_MU_REF = 1.458e-6              # kg/(m s K^0.5)
SUTHERLAND_S = 110.4                      # K

# Valid range of the ambiance implementation (geometric altitude, m)
H_MIN_M = -5004.0
H_MAX_M = 81020.0


@dataclass
class FlowProperties:
    """Freestream state in the selected unit systems."""

    altitude: float
    delta_temp: float
    temperature: float
    pressure: float
    density: float
    dynamic_viscosity: float
    speed_of_sound: float
    mach: float
    density_ratio: float

    @property
    def kinematic_viscosity(self) -> float:
        if self.density <= 0.0:
            return 0.0
        return self.dynamic_viscosity / self.density


def sutherland_viscosity(temperature_k: float) -> float:
    """Dynamic viscosity of air (Pa s) from Sutherland's law."""
    return SUTHERLAND_MU_REF * temperature_k ** 1.5 / (temperature_k + SUTHERLAND_S)


class AtmosphereModel:
    """
    Compute freestream properties for the drag buildup.

    The last computed state is cached on ``self.state`` so that Reynolds
    number and Mach dependent equations read one consistent set of values.
    """

    def __init__(self):
        self.state: FlowProperties | None = None
        self._alt_unit = UnitSystem.IMPERIAL

    def us_standard_1976(
        self,
        altitude: float,
        delta_temp: float,
        alt_unit: UnitSystem,
        temp_unit: TempUnit,
        pres_unit: PresUnit,
        specific_heat_ratio: float = 1.4,
    ) -> FlowProperties:
        """Standard day properties at altitude, shifted by a temperature offset."""

        h_m = units.altitude_to_m(altitude, alt_unit)
        h_clipped = float(np.clip(h_m, H_MIN_M, H_MAX_M))
        if h_clipped != h_m:
            logger.warning(
                "Altitude %.1f m outside standard atmosphere range; clipped to %.1f m",
                h_m, h_clipped,
            )

        atmos = StandardAtmosphere(h_clipped)
        t_std = float(atmos.temperature[0])
        p_si = float(atmos.pressure[0])

        t_k = t_std + units.convert_temperature_delta(delta_temp, temp_unit, TempUnit.K)
        rho_si = p_si / (R_AIR * t_k)
        mu_si = sutherland_viscosity(t_k)

        self.state = self._package(
            altitude=altitude,
            delta_temp=delta_temp,
            t_k=t_k,
            p_si=p_si,
            rho_si=rho_si,
            mu_si=mu_si,
            gamma=specific_heat_ratio,
            alt_unit=alt_unit,
            temp_unit=temp_unit,
            pres_unit=pres_unit,
        )
        logger.debug("Standard atmosphere at %.1f m: %s", h_clipped, self.state)
        return self.state

    def manual(
        self,
        freestream_type: FreestreamType,
        temperature: float,
        pressure: float,
        density: float,
        specific_heat_ratio: float,
        alt_unit: UnitSystem,
        temp_unit: TempUnit,
        pres_unit: PresUnit,
    ) -> FlowProperties:
        """
        Complete the thermodynamic state from two user-supplied properties.

        The third property follows from the ideal gas law; viscosity from
        Sutherland's law at the resulting temperature.
        """

        t_k = units.to_kelvin(temperature, temp_unit)
        p_si = units.convert_pressure(pressure, pres_unit, PresUnit.PA)
        rho_si = units.density_to_si(density, alt_unit)

        if freestream_type == FreestreamType.MANUAL_P_R:
            t_k = p_si / (rho_si * R_AIR)
        elif freestream_type == FreestreamType.MANUAL_P_T:
            rho_si = p_si / (R_AIR * t_k)
        elif freestream_type == FreestreamType.MANUAL_R_T:
            p_si = rho_si * R_AIR * t_k
        else:
            raise ValueError(f"Freestream type {freestream_type!r} is not a manual state definition")

        self.state = self._package(
            altitude=0.0,
            delta_temp=0.0,
            t_k=t_k,
            p_si=p_si,
            rho_si=rho_si,
            mu_si=sutherland_viscosity(t_k),
            gamma=specific_heat_ratio,
            alt_unit=alt_unit,
            temp_unit=temp_unit,
            pres_unit=pres_unit,
        )
        return self.state

    def update_mach(self, vinf: float, vinf_unit: VelocityUnit) -> float:
        """Set Mach on the cached state from a freestream velocity."""
        if self.state is None:
            raise ValueError("Atmosphere state not computed. Call us_standard_1976() or manual() first.")

        v_ms = units.convert_velocity(vinf, vinf_unit, VelocityUnit.M_S, self.state.density_ratio)
        a_ms = self._sound_speed_si()
        self.state.mach = v_ms / a_ms if a_ms > 0.0 else 0.0
        return self.state.mach

    def _sound_speed_si(self) -> float:
        velocity_unit = units.system_velocity_unit(self._alt_unit)
        return units.convert_velocity(self.state.speed_of_sound, velocity_unit, VelocityUnit.M_S)

    def _package(
        self,
        altitude: float,
        delta_temp: float,
        t_k: float,
        p_si: float,
        rho_si: float,
        mu_si: float,
        gamma: float,
        alt_unit: UnitSystem,
        temp_unit: TempUnit,
        pres_unit: PresUnit,
    ) -> FlowProperties:
        a_si = math.sqrt(gamma * R_AIR * t_k) if t_k > 0.0 else 0.0
        self._alt_unit = alt_unit
        return FlowProperties(
            altitude=altitude,
            delta_temp=delta_temp,
            temperature=units.from_kelvin(t_k, temp_unit),
            pressure=units.convert_pressure(p_si, PresUnit.PA, pres_unit),
            density=units.density_from_si(rho_si, alt_unit),
            dynamic_viscosity=units.viscosity_from_si(mu_si, alt_unit),
            speed_of_sound=units.convert_velocity(
                a_si, VelocityUnit.M_S, units.system_velocity_unit(alt_unit)
            ),
            mach=0.0,
            density_ratio=rho_si / RHO_SL,
        )

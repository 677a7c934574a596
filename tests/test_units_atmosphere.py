"""Unit conversions, the standard atmosphere and manual freestream states."""

import pytest

from dragconfig import (
    FreestreamType, LengthUnit, PresUnit, TempUnit, UnitSystem, VelocityUnit,
)
from dragcore import ParasiteDragManager, Vehicle
from dragcore import units
from dragcore.atmosphere import AtmosphereModel, sutherland_viscosity


class TestUnits:
    def test_length(self):
        assert units.convert_length(1.0, LengthUnit.FT, LengthUnit.IN) == pytest.approx(12.0)
        assert units.convert_length(1.0, LengthUnit.M, LengthUnit.MM) == pytest.approx(1000.0)

    def test_area(self):
        assert units.convert_area(1.0, LengthUnit.FT, LengthUnit.IN) == pytest.approx(144.0)

    def test_knots(self):
        knot_ft_s = units.convert_velocity(1.0, VelocityUnit.KTAS, VelocityUnit.FT_S)
        assert knot_ft_s == pytest.approx(1.68781, rel=1e-5)

    def test_equivalent_airspeed(self):
        true = units.convert_velocity(100.0, VelocityUnit.KEAS, VelocityUnit.KTAS, density_ratio=0.25)
        assert true == pytest.approx(200.0)
        back = units.convert_velocity(true, VelocityUnit.KTAS, VelocityUnit.KEAS, density_ratio=0.25)
        assert back == pytest.approx(100.0)

    def test_temperature(self):
        assert units.convert_temperature(32.0, TempUnit.F, TempUnit.K) == pytest.approx(273.15)
        assert units.convert_temperature(100.0, TempUnit.C, TempUnit.F) == pytest.approx(212.0)
        assert units.convert_temperature(491.67, TempUnit.R, TempUnit.C) == pytest.approx(0.0, abs=1e-9)

    def test_temperature_delta_has_no_offset(self):
        assert units.convert_temperature_delta(9.0, TempUnit.F, TempUnit.C) == pytest.approx(5.0)

    def test_pressure(self):
        assert units.convert_pressure(1.0, PresUnit.ATM, PresUnit.PSF) == pytest.approx(2116.22, rel=1e-5)
        assert units.convert_pressure(1.0, PresUnit.PSI, PresUnit.PSF) == pytest.approx(144.0, rel=1e-6)

    def test_density(self):
        assert units.density_to_si(1.0, UnitSystem.IMPERIAL) == pytest.approx(515.378818)
        assert units.density_from_si(1.225, UnitSystem.METRIC) == 1.225


class TestStandardAtmosphere:
    def test_sea_level_metric(self):
        state = AtmosphereModel().us_standard_1976(
            0.0, 0.0, UnitSystem.METRIC, TempUnit.K, PresUnit.PA
        )
        assert state.temperature == pytest.approx(288.15)
        assert state.pressure == pytest.approx(101325.0, rel=1e-4)
        assert state.density == pytest.approx(1.225, rel=1e-3)
        assert state.speed_of_sound == pytest.approx(340.29, rel=1e-3)
        assert state.density_ratio == pytest.approx(1.0, rel=1e-3)
        assert state.kinematic_viscosity == pytest.approx(1.46e-5, rel=1e-2)

    def test_sea_level_imperial(self):
        state = AtmosphereModel().us_standard_1976(
            0.0, 0.0, UnitSystem.IMPERIAL, TempUnit.R, PresUnit.PSF
        )
        assert state.temperature == pytest.approx(518.67, rel=1e-5)
        assert state.pressure == pytest.approx(2116.22, rel=1e-4)
        assert state.density == pytest.approx(0.0023769, rel=1e-3)

    def test_temperature_offset(self):
        model = AtmosphereModel()
        hot = model.us_standard_1976(0.0, 15.0, UnitSystem.METRIC, TempUnit.C, PresUnit.PA)
        assert hot.temperature == pytest.approx(30.0)
        assert hot.density < 1.225

    def test_altitude_is_clipped(self, caplog):
        state = AtmosphereModel().us_standard_1976(
            95000.0, 0.0, UnitSystem.METRIC, TempUnit.K, PresUnit.PA
        )
        assert state.pressure > 0.0
        assert "clipped" in caplog.text

    def test_mach(self):
        model = AtmosphereModel()
        model.us_standard_1976(0.0, 0.0, UnitSystem.METRIC, TempUnit.K, PresUnit.PA)
        assert model.update_mach(340.29, VelocityUnit.M_S) == pytest.approx(1.0, rel=1e-3)

    def test_mach_needs_state(self):
        with pytest.raises(ValueError):
            AtmosphereModel().update_mach(100.0, VelocityUnit.M_S)


class TestManualStates:
    def test_pressure_temperature(self):
        state = AtmosphereModel().manual(
            FreestreamType.MANUAL_P_T, 288.15, 101325.0, 0.0, 1.4,
            UnitSystem.METRIC, TempUnit.K, PresUnit.PA,
        )
        assert state.density == pytest.approx(1.225, rel=1e-4)

    def test_pressure_density(self):
        state = AtmosphereModel().manual(
            FreestreamType.MANUAL_P_R, 0.0, 101325.0, 1.225, 1.4,
            UnitSystem.METRIC, TempUnit.K, PresUnit.PA,
        )
        assert state.temperature == pytest.approx(288.15, rel=1e-4)

    def test_density_temperature(self):
        state = AtmosphereModel().manual(
            FreestreamType.MANUAL_R_T, 288.15, 0.0, 1.225, 1.4,
            UnitSystem.METRIC, TempUnit.K, PresUnit.PA,
        )
        assert state.pressure == pytest.approx(101325.0, rel=1e-4)
        assert state.dynamic_viscosity == pytest.approx(sutherland_viscosity(288.15))

    def test_standard_type_is_rejected(self):
        with pytest.raises(ValueError):
            AtmosphereModel().manual(
                FreestreamType.US_STANDARD_1976, 288.15, 101325.0, 1.225, 1.4,
                UnitSystem.METRIC, TempUnit.K, PresUnit.PA,
            )


class TestUnitChanges:
    @pytest.fixture
    def manager(self):
        return ParasiteDragManager(Vehicle())

    def test_velocity(self, manager):
        manager.update_vinf_unit(VelocityUnit.M_S)
        assert manager.reference.vinf == pytest.approx(152.4)
        assert manager.reference.vinf_unit == VelocityUnit.M_S

    def test_altitude(self, manager):
        manager.update_alt_unit(UnitSystem.METRIC)
        assert manager.reference.altitude == pytest.approx(6096.0)
        assert manager.reference.density == pytest.approx(0.07647 * 515.378818)

    def test_temperature(self, manager):
        manager.reference.temperature = 32.0
        manager.update_temp_unit(TempUnit.C)
        assert manager.reference.temperature == pytest.approx(0.0, abs=1e-9)

    def test_pressure(self, manager):
        manager.update_pres_unit(PresUnit.PSI)
        assert manager.reference.pressure == pytest.approx(2116.221 / 144.0, rel=1e-6)

    def test_altitude_limit(self, manager):
        manager.set_altitude(1.0e9)
        assert manager.reference.altitude == pytest.approx(278385.83)

    def test_temperature_floor(self, manager):
        manager.set_temperature(-1000.0)
        assert manager.reference.temperature == pytest.approx(-459.666)

    def test_manual_state_feeds_reynolds(self, manager):
        ref = manager.reference
        ref.freestream_type = FreestreamType.MANUAL_P_T
        ref.alt_unit = UnitSystem.METRIC
        ref.temp_unit = TempUnit.K
        ref.pres_unit = PresUnit.PA
        ref.length_unit = LengthUnit.M
        ref.vinf_unit = VelocityUnit.M_S
        ref.vinf = 100.0
        ref.temperature = 288.15
        ref.pressure = 101325.0
        manager.update_atmos()
        nu = sutherland_viscosity(288.15) / 1.225
        assert ref.re_per_length == pytest.approx(100.0 / nu, rel=1e-3)
        assert manager.reynolds_number(2.0) == pytest.approx(2.0 * ref.re_per_length)

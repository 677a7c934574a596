"""Form factor equations for wings and bodies, including the DATCOM table."""

import math

import numpy as np
import pytest

from dragconfig import FFBodyEqn, FFWingEqn
from dragcore.form_factor import (
    DATCOM_MACH_STATIONS, DATCOM_RLS_COEFFS, calc_ff_body, calc_ff_wing, datcom_rls,
    ff_body_eqn_name, ff_wing_eqn_name,
)

TOC = 0.12


@pytest.mark.parametrize("eqn", list(FFWingEqn))
def test_wing_form_factors_exceed_one(eqn):
    ff = calc_ff_wing(TOC, eqn, mach=0.3, perc_lam=10.0, sweep25=0.1, sweep50=0.08)
    assert ff >= 1.0
    assert ff_wing_eqn_name(eqn) != "ERROR"


@pytest.mark.parametrize("eqn", list(FFBodyEqn))
def test_body_form_factors_exceed_one(eqn):
    ff = calc_ff_body(6.0, 8.0, eqn, ref_length=20.0, max_area=6.0, mach=0.3)
    assert ff >= 1.0
    assert ff_body_eqn_name(eqn) != "ERROR"


class TestWing:
    def test_hoerner(self):
        assert calc_ff_wing(0.1, FFWingEqn.HOERNER) == pytest.approx(1.0 + 0.2 + 60.0 * 0.1 ** 4)

    def test_torenbeek(self):
        assert calc_ff_wing(0.1, FFWingEqn.TORENBEEK) == pytest.approx(1.0 + 0.27 + 100.0 * 0.1 ** 4)

    def test_jenkinson_wing_unswept(self):
        f_star = 1.0 + 3.3 * TOC - 0.008 * TOC ** 2 + 27.0 * TOC ** 3
        assert calc_ff_wing(TOC, FFWingEqn.JENKINSON_WING) == pytest.approx(f_star)

    def test_kroo_compressibility_raises_form_factor(self):
        low = calc_ff_wing(TOC, FFWingEqn.KROO, mach=0.1)
        high = calc_ff_wing(TOC, FFWingEqn.KROO, mach=0.7)
        assert high > low

    def test_shevell_sonic_is_undefined(self):
        assert calc_ff_wing(TOC, FFWingEqn.SHEVELL, mach=1.0) == 0.0


class TestDatcom:
    def _station(self, index, sweep25=0.0):
        return float(np.polyval(DATCOM_RLS_COEFFS[index], math.cos(sweep25)))

    def test_table_values_at_stations(self):
        for i, mach in enumerate(DATCOM_MACH_STATIONS):
            assert datcom_rls(mach, 0.0) == pytest.approx(self._station(i))

    def test_held_below_table(self):
        assert datcom_rls(0.05, 0.2) == pytest.approx(self._station(0, 0.2))

    def test_held_above_table(self):
        assert datcom_rls(0.95, 0.2) == pytest.approx(self._station(3, 0.2))

    def test_linear_between_stations(self):
        expected = 0.5 * (self._station(1) + self._station(2))
        assert datcom_rls(0.7, 0.0) == pytest.approx(expected)

    def test_transition_location_switch(self):
        laminar = calc_ff_wing(TOC, FFWingEqn.DATCOM, mach=0.25, perc_lam=20.0)
        turbulent = calc_ff_wing(TOC, FFWingEqn.DATCOM, mach=0.25, perc_lam=40.0)
        rls = self._station(0)
        assert laminar == pytest.approx((1.0 + 2.0 * TOC + 100.0 * TOC ** 4) * rls)
        assert turbulent == pytest.approx((1.0 + 1.2 * TOC + 100.0 * TOC ** 4) * rls)


class TestBody:
    def test_hoerner_streamlined_body(self):
        expected = 1.0 + 1.5 / 5.0 ** 1.5 + 7.0 / 5.0 ** 3
        assert calc_ff_body(5.0, 0.0, FFBodyEqn.HOERNER_STREAMBODY) == pytest.approx(expected)

    def test_schemensky_nacelle(self):
        assert calc_ff_body(5.0, 7.0, FFBodyEqn.SCHEMENSKY_NACELLE) == pytest.approx(1.05)

    def test_jenkinson_constants(self):
        assert calc_ff_body(5.0, 7.0, FFBodyEqn.JENKINSON_WING_NACELLE) == pytest.approx(1.25)
        assert calc_ff_body(5.0, 7.0, FFBodyEqn.JENKINSON_AFT_FUSE_NACELLE) == pytest.approx(1.5)

    def test_zero_fineness_is_undefined(self):
        assert calc_ff_body(0.0, 7.0, FFBodyEqn.TORENBEEK) == 0.0


class TestUnknownCodes:
    def test_wing(self):
        assert calc_ff_wing(TOC, 42) == 0.0
        assert ff_wing_eqn_name(42) == "ERROR"

    def test_body(self):
        assert calc_ff_body(5.0, 7.0, 42) == 0.0
        assert ff_body_eqn_name(42) == "ERROR"

"""
Parasite Drag Buildup: Form Factor Equations
============================================

Form factors correct flat-plate friction drag for thickness and shape.

Wing equations take the maximum thickness-to-chord ratio, the Mach number,
percent laminar flow and the area-weighted quarter/half chord sweep (radians).
Body equations take the inverse fineness ratio (length / diameter), the
length over square root of maximum planform area, the reference length and
that maximum area.

Unrecognized codes return 0.0 and the name ``"ERROR"``.
"""

from __future__ import annotations

import logging
import math
from typing import Dict

import numpy as np

from dragconfig import FFBodyEqn, FFWingEqn

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

# DATCOM lifting surface correction R_LS: Mach stations and cubic fits in cos(sweep25)
DATCOM_MACH_STATIONS = np.array([0.25, 0.6, 0.8, 0.9])
DATCOM_RLS_COEFFS = np.array([
    [-2.0292, 3.6345, -1.391, 0.8521],
    [-1.9735, 3.4504, -1.186, 0.858],
    [-1.6538, 2.865, -0.886, 0.934],
    [-1.8316, 3.3944, -1.3596, 1.1567],
])
DATCOM_TRANSITION_LIMIT = 0.30            # x_trans / c

JENKINSON_TAIL_Q = 1.2


def datcom_rls(mach: float, sweep25: float) -> float:
    """
    Lifting surface correction factor.

    Linear in Mach between stations; held at the end values below 0.25 and
    above 0.9.
    """
    station_values = np.polyval(DATCOM_RLS_COEFFS.T, math.cos(sweep25))
    return float(np.interp(mach, DATCOM_MACH_STATIONS, station_values))


def _datcom(toc, mach, perc_lam, sweep25, sweep50):
    thickness_location = 2.0 if perc_lam / 100.0 <= DATCOM_TRANSITION_LIMIT else 1.2
    return (1.0 + thickness_location * toc + 100.0 * toc ** 4) * datcom_rls(mach, sweep25)


def _shevell(toc, mach, perc_lam, sweep25, sweep50):
    cos25 = math.cos(sweep25)
    z = ((2.0 - mach ** 2) * cos25) / math.sqrt(1.0 - mach ** 2 * cos25 ** 2)
    return 1.0 + z * toc + 100.0 * toc ** 4


def _kroo(toc, mach, perc_lam, sweep25, sweep50):
    cos2 = math.cos(sweep25) ** 2
    compressibility = 1.0 - mach ** 2 * cos2
    return (
        1.0
        + (2.2 * cos2 * toc) / math.sqrt(compressibility)
        + (4.84 * cos2 * (1.0 + 5.0 * cos2) * toc ** 2) / (2.0 * compressibility)
    )


def _edet_conventional(toc, *_):
    return 1.0 + toc * (2.94206 + toc * (7.16974 + toc * (48.8876 + toc * (
        -1403.02 + toc * (8598.76 + toc * (-15834.3))))))


def _jenkinson_wing(toc, mach, perc_lam, sweep25, sweep50):
    f_star = 1.0 + 3.3 * toc - 0.008 * toc ** 2 + 27.0 * toc ** 3
    return (f_star - 1.0) * math.cos(sweep50) ** 2 + 1.0


def _jenkinson_tail(toc, mach, perc_lam, sweep25, sweep50):
    f_star = 1.0 + 3.52 * toc
    return (f_star - 1.0) * math.cos(sweep50) ** 2 + 1.0


_WING_EQUATIONS = {
    FFWingEqn.MANUAL: lambda *_: 1.0,
    FFWingEqn.EDET_CONV: _edet_conventional,
    FFWingEqn.EDET_ADV: lambda toc, *_: 1.0 + 4.275 * toc,
    FFWingEqn.HOERNER: lambda toc, *_: 1.0 + 2.0 * toc + 60.0 * toc ** 4,
    FFWingEqn.COVERT: lambda toc, *_: 1.0 + 1.8 * toc + 50.0 * toc ** 4,
    FFWingEqn.SHEVELL: _shevell,
    FFWingEqn.KROO: _kroo,
    FFWingEqn.TORENBEEK: lambda toc, *_: 1.0 + 2.7 * toc + 100.0 * toc ** 4,
    FFWingEqn.DATCOM: _datcom,
    FFWingEqn.SCHEMENSKY_6_SERIES_AF: lambda toc, *_: 1.0 + 1.44 * toc + 2.0 * toc ** 2,
    FFWingEqn.SCHEMENSKY_4_SERIES_AF: lambda toc, *_: 1.0 + 1.68 * toc + 3.0 * toc ** 2,
    FFWingEqn.JENKINSON_WING: _jenkinson_wing,
    FFWingEqn.JENKINSON_TAIL: _jenkinson_tail,
}

_WING_NAMES: Dict[FFWingEqn, str] = {
    FFWingEqn.MANUAL: "Manual",
    FFWingEqn.EDET_CONV: "EDET Conventional",
    FFWingEqn.EDET_ADV: "EDET Advanced",
    FFWingEqn.HOERNER: "Hoerner",
    FFWingEqn.COVERT: "Covert",
    FFWingEqn.SHEVELL: "Shevell",
    FFWingEqn.KROO: "Kroo",
    FFWingEqn.TORENBEEK: "Torenbeek",
    FFWingEqn.DATCOM: "DATCOM",
    FFWingEqn.SCHEMENSKY_6_SERIES_AF: "Schemensky 6 Series AF",
    FFWingEqn.SCHEMENSKY_4_SERIES_AF: "Schemensky 4 Series AF",
    FFWingEqn.JENKINSON_WING: "Jenkinson Wing",
    FFWingEqn.JENKINSON_TAIL: "Jenkinson Tail",
}


def _jenkinson_fuse(long_f, fr, mach, ref_length, max_area):
    slenderness = ref_length / math.sqrt((4.0 / math.pi) * max_area)
    return 1.0 + 2.2 / slenderness ** 1.5 - 0.9 / slenderness ** 3


def _jobe(long_f, fr, mach, ref_length, max_area):
    return 1.02 + 1.5 / long_f ** 1.5 + 7.0 / (0.6 * long_f ** 3 * (1.0 - mach ** 3))


_BODY_EQUATIONS = {
    FFBodyEqn.MANUAL: lambda *_: 1.0,
    FFBodyEqn.SCHEMENSKY_FUSE: lambda long_f, fr, *_: 1.0 + 60.0 / fr ** 3 + 0.0025 * fr,
    FFBodyEqn.SCHEMENSKY_NACELLE: lambda long_f, fr, *_: 1.0 + 0.35 / fr,
    FFBodyEqn.HOERNER_STREAMBODY: lambda long_f, *_: 1.0 + 1.5 / long_f ** 1.5 + 7.0 / long_f ** 3,
    FFBodyEqn.TORENBEEK: lambda long_f, *_: 1.0 + 2.2 / long_f ** 1.5 + 3.8 / long_f ** 3,
    FFBodyEqn.SHEVELL: lambda long_f, *_: 1.0 + 2.8 / long_f ** 1.5 + 3.8 / long_f ** 3,
    FFBodyEqn.JENKINSON_FUSE: _jenkinson_fuse,
    FFBodyEqn.JENKINSON_WING_NACELLE: lambda *_: 1.25,
    FFBodyEqn.JENKINSON_AFT_FUSE_NACELLE: lambda *_: 1.5,
    FFBodyEqn.JOBE: _jobe,
}

_BODY_NAMES: Dict[FFBodyEqn, str] = {
    FFBodyEqn.MANUAL: "Manual",
    FFBodyEqn.SCHEMENSKY_FUSE: "Schemensky Fuselage",
    FFBodyEqn.SCHEMENSKY_NACELLE: "Schemensky Nacelle",
    FFBodyEqn.HOERNER_STREAMBODY: "Hoerner Streamlined Body",
    FFBodyEqn.TORENBEEK: "Torenbeek",
    FFBodyEqn.SHEVELL: "Shevell",
    FFBodyEqn.JENKINSON_FUSE: "Jenkinson Fuselage",
    FFBodyEqn.JENKINSON_WING_NACELLE: "Jenkinson Wing Nacelle",
    FFBodyEqn.JENKINSON_AFT_FUSE_NACELLE: "Jenkinson Aft Fuse Nacelle",
    FFBodyEqn.JOBE: "Jobe",
}


def _lookup(enum_cls, code):
    try:
        return enum_cls(code)
    except ValueError:
        return None


def _evaluate(label, func, *args) -> float:
    try:
        value = float(func(*args))
    except (ZeroDivisionError, ValueError, TypeError):
        logger.warning("%s form factor undefined for inputs %s; using 0", label, args)
        return 0.0
    if not math.isfinite(value):
        logger.warning("%s form factor non-finite for inputs %s; using 0", label, args)
        return 0.0
    return value


def calc_ff_wing(
    toc: float,
    eqn: int,
    mach: float = 0.0,
    perc_lam: float = 0.0,
    sweep25: float = 0.0,
    sweep50: float = 0.0,
) -> float:
    """Form factor of a lifting surface."""

    key = _lookup(FFWingEqn, eqn)
    if key is None:
        logger.warning("Unrecognized wing form factor code %r", eqn)
        return 0.0
    return _evaluate(_WING_NAMES[key], _WING_EQUATIONS[key], toc, mach, perc_lam, sweep25, sweep50)


def calc_ff_body(
    long_f: float,
    fr: float,
    eqn: int,
    ref_length: float = 1.0,
    max_area: float = 1.0,
    mach: float = 0.0,
) -> float:
    """
    Form factor of a body of revolution.

    Args:
        long_f: Length over nominal diameter (inverse of the fineness ratio).
        fr: Length over square root of the maximum planform area.
        eqn: FFBodyEqn code.
        ref_length: Body reference length.
        max_area: Maximum planform area.
        mach: Freestream Mach number.
    """

    key = _lookup(FFBodyEqn, eqn)
    if key is None:
        logger.warning("Unrecognized body form factor code %r", eqn)
        return 0.0
    return _evaluate(_BODY_NAMES[key], _BODY_EQUATIONS[key], long_f, fr, mach, ref_length, max_area)


def ff_wing_eqn_name(eqn: int) -> str:
    key = _lookup(FFWingEqn, eqn)
    return _WING_NAMES[key] if key is not None else "ERROR"


def ff_body_eqn_name(eqn: int) -> str:
    key = _lookup(FFBodyEqn, eqn)
    return _BODY_NAMES[key] if key is not None else "ERROR"

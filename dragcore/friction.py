"""
Parasite Drag Buildup: Skin Friction Equations
==============================================

Turbulent and laminar flat-plate skin friction coefficients, selected by
equation code. Each family has a value function and a display-name function.

Unrecognized codes return a coefficient of 0 and the name ``"ERROR"``;
callers must not treat that 0 as a physical result.

Every law gives a positive coefficient from Re = 1e4 upward. Below that the
logarithmic fits approach their singularities (e.g. Schlichting-Prandtl
needs log10(Re) > 0.325, Spalding needs Re > 1/0.06); a non-finite result
there is logged and returned as 0.

Three turbulent laws are implicit in Cf and are solved by Newton-Raphson
starting from an explicit fit:

    Schoenherr           0.242 / (sqrt(Cf) log10(Re Cf)) = 1
    von Karman           (4.15 log10(Re Cf) + 1.70) sqrt(Cf) = 1
    Karman-Schoenherr    4.13 log10(Re Cf) sqrt(Cf) = 1
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Optional

import numpy as np

from dragconfig import LamCfEqn, LengthUnit, TurbCfEqn
from .solvers import newton_solve
from .units import INCHES_PER_UNIT

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

RECOVERY_FACTOR = 0.89
VISCOSITY_EXPONENT = 0.67


@dataclass
class FrictionInputs:
    """Everything besides Reynolds number that some friction law needs."""

    ref_length: float = 1.0
    roughness: float = 0.0
    gamma: float = 1.4
    mach: float = 0.0
    taw_tw_ratio: float = 1.0
    te_tw_ratio: float = 1.0
    length_unit: LengthUnit = LengthUnit.FT
    tolerance: float = 1e-15
    max_iterations: int = 100

    @property
    def roughness_multiplier(self) -> float:
        return INCHES_PER_UNIT.get(self.length_unit, 1.0)


# ----------------------------------------------------------------------
# Explicit turbulent laws
# ----------------------------------------------------------------------
def _schoenherr_explicit(re: float) -> float:
    return (1.0 / (3.46 * np.log10(re) - 5.6)) ** 2.0


def _schlichting_compressible(re: float) -> float:
    return 0.455 / np.log10(re) ** 2.58


# ----------------------------------------------------------------------
# Implicit turbulent laws
# ----------------------------------------------------------------------
def _implicit_schoenherr(re: float, inputs: FrictionInputs) -> float:
    def func(cf):
        return 0.242 / (np.sqrt(cf) * np.log10(re * cf)) - 1.0

    def fprime(cf):
        log_rc = np.log(re * cf)
        return (-0.278613 * log_rc - 0.557226) / (cf ** 1.5 * log_rc ** 2)

    return _solve("Schoenherr", func, fprime, _schoenherr_explicit(re), inputs)


def _implicit_karman(re: float, inputs: FrictionInputs) -> float:
    def func(cf):
        return (4.15 * np.log10(re * cf) + 1.70) * np.sqrt(cf) - 1.0

    def fprime(cf):
        return (0.901161 * np.log(re * cf) + 2.65232) / np.sqrt(cf)

    return _solve("Karman", func, fprime, _schlichting_compressible(re), inputs)


def _implicit_karman_schoenherr(re: float, inputs: FrictionInputs) -> float:
    def func(cf):
        return 4.13 * np.log10(re * cf) * np.sqrt(cf) - 1.0

    def fprime(cf):
        return (0.896818 * np.log(re * cf) + 1.79364) / np.sqrt(cf)

    return _solve("Karman-Schoenherr", func, fprime, _schoenherr_explicit(re), inputs)


def _solve(label: str, func, fprime, guess: float, inputs: FrictionInputs) -> float:
    solution = newton_solve(
        func, fprime, float(guess), tol=inputs.tolerance, maxiter=inputs.max_iterations
    )
    if not solution.converged:
        logger.warning(
            "%s implicit Cf did not converge in %d iterations; using explicit estimate %.6g",
            label, solution.iterations, guess,
        )
    return solution.value_or_guess()


# ----------------------------------------------------------------------
# Roughness and heat transfer laws
# ----------------------------------------------------------------------
def _roughness_local(re: float, inputs: FrictionInputs) -> float:
    height_ratio = inputs.ref_length / inputs.roughness
    return (1.4 + 3.7 * np.log10(height_ratio)) ** -2.0


def _roughness_schlichting_avg(re: float, inputs: FrictionInputs) -> float:
    height_ratio = inputs.ref_length / (inputs.roughness * inputs.roughness_multiplier)
    return (1.89 + 1.62 * np.log10(height_ratio)) ** -2.5


def _roughness_schlichting_avg_flow_correction(re: float, inputs: FrictionInputs) -> float:
    correction = (1.0 + (inputs.gamma - 1.0) / 2.0 * inputs.mach) ** 0.467
    return _roughness_schlichting_avg(re, inputs) / correction


def _heat_transfer_white_christoph(re: float, inputs: FrictionInputs) -> float:
    r = RECOVERY_FACTOR
    te_tw = inputs.te_tw_ratio
    f = (1.0 + 0.22 * r * ((inputs.gamma - 1.0) / 2.0) * inputs.mach ** 2 * te_tw) / (
        1.0 + 0.3 * (inputs.taw_tw_ratio - 1.0)
    )
    return (0.451 * f * f * te_tw) / np.log(0.056 * f * te_tw ** (1.0 + VISCOSITY_EXPONENT) * re)


_TURB_EQUATIONS: Dict[TurbCfEqn, Callable[[float, FrictionInputs], float]] = {
    TurbCfEqn.WHITE_CHRISTOPH_COMPRESSIBLE: lambda re, _: 0.42 / np.log(0.056 * re) ** 2.0,
    TurbCfEqn.SCHLICHTING_PRANDTL: lambda re, _: 1.0 / (2.0 * np.log10(re) - 0.65) ** 2.3,
    TurbCfEqn.SCHLICHTING_COMPRESSIBLE: lambda re, _: _schlichting_compressible(re),
    TurbCfEqn.SCHLICHTING_INCOMPRESSIBLE: lambda re, _: 0.472 / np.log10(re) ** 2.5,
    TurbCfEqn.SCHULTZ_GRUNOW_SCHOENHERR: lambda re, _: 0.427 / (np.log10(re) - 0.407) ** 2.64,
    TurbCfEqn.SCHULTZ_GRUNOW_HIGH_RE: lambda re, _: 0.37 / np.log10(re) ** 2.584,
    TurbCfEqn.POWER_LAW_BLASIUS: lambda re, _: 0.0592 / re ** 0.2,
    TurbCfEqn.POWER_LAW_PRANDTL_LOW_RE: lambda re, _: 0.074 / re ** 0.2,
    TurbCfEqn.POWER_LAW_PRANDTL_MEDIUM_RE: lambda re, _: 0.027 / re ** (1.0 / 7.0),
    TurbCfEqn.POWER_LAW_PRANDTL_HIGH_RE: lambda re, _: 0.058 / re ** 0.2,
    TurbCfEqn.EXPLICIT_FIT_SPALDING: lambda re, _: 0.455 / np.log(0.06 * re) ** 2.0,
    TurbCfEqn.EXPLICIT_FIT_SPALDING_CHI: lambda re, _: 0.225 / np.log10(re) ** 2.32,
    TurbCfEqn.EXPLICIT_FIT_SCHOENHERR: lambda re, _: _schoenherr_explicit(re),
    TurbCfEqn.IMPLICIT_SCHOENHERR: _implicit_schoenherr,
    TurbCfEqn.IMPLICIT_KARMAN: _implicit_karman,
    TurbCfEqn.IMPLICIT_KARMAN_SCHOENHERR: _implicit_karman_schoenherr,
    TurbCfEqn.ROUGHNESS_WHITE: _roughness_local,
    TurbCfEqn.ROUGHNESS_SCHLICHTING_LOCAL: _roughness_local,
    TurbCfEqn.ROUGHNESS_SCHLICHTING_AVG: _roughness_schlichting_avg,
    TurbCfEqn.ROUGHNESS_SCHLICHTING_AVG_FLOW_CORRECTION: _roughness_schlichting_avg_flow_correction,
    TurbCfEqn.HEATTRANSFER_WHITE_CHRISTOPH: _heat_transfer_white_christoph,
}

_TURB_NAMES: Dict[TurbCfEqn, str] = {
    TurbCfEqn.WHITE_CHRISTOPH_COMPRESSIBLE: "Compressible White-Christoph",
    TurbCfEqn.SCHLICHTING_PRANDTL: "Schlichting-Prandtl",
    TurbCfEqn.SCHLICHTING_COMPRESSIBLE: "Compressible Schlichting",
    TurbCfEqn.SCHLICHTING_INCOMPRESSIBLE: "Incompressible Schlichting",
    TurbCfEqn.SCHULTZ_GRUNOW_SCHOENHERR: "Schultz-Grunow Schoenherr",
    TurbCfEqn.SCHULTZ_GRUNOW_HIGH_RE: "High Reynolds Number Schultz-Grunow",
    TurbCfEqn.POWER_LAW_BLASIUS: "Blasius Power Law",
    TurbCfEqn.POWER_LAW_PRANDTL_LOW_RE: "Low Reynolds Number Prandtl Power Law",
    TurbCfEqn.POWER_LAW_PRANDTL_MEDIUM_RE: "Medium Reynolds Number Prandtl Power Law",
    TurbCfEqn.POWER_LAW_PRANDTL_HIGH_RE: "High Reynolds Number Prandtl Power Law",
    TurbCfEqn.EXPLICIT_FIT_SPALDING: "Spalding Explicit Empirical Fit",
    TurbCfEqn.EXPLICIT_FIT_SPALDING_CHI: "Spalding-Chi Explicit Empirical Fit",
    TurbCfEqn.EXPLICIT_FIT_SCHOENHERR: "Schoenherr Explicit Empirical Fit",
    TurbCfEqn.IMPLICIT_SCHOENHERR: "Schoenherr Implicit",
    TurbCfEqn.IMPLICIT_KARMAN: "Von Karman Implicit",
    TurbCfEqn.IMPLICIT_KARMAN_SCHOENHERR: "Karman-Schoenherr Implicit",
    TurbCfEqn.ROUGHNESS_WHITE: "White Roughness",
    TurbCfEqn.ROUGHNESS_SCHLICHTING_LOCAL: "Schlichting Local Roughness",
    TurbCfEqn.ROUGHNESS_SCHLICHTING_AVG: "Schlichting Avg Roughness",
    TurbCfEqn.ROUGHNESS_SCHLICHTING_AVG_FLOW_CORRECTION: "Schlichting Avg Roughness w Flow Correction",
    TurbCfEqn.HEATTRANSFER_WHITE_CHRISTOPH: "White-Christoph w Heat Transfer",
}

_LAM_NAMES: Dict[LamCfEqn, str] = {
    LamCfEqn.BLASIUS: "Blasius",
    LamCfEqn.BLASIUS_W_HEAT: "Blasius w Heat Transfer",
}


def _as_enum(enum_cls, code):
    try:
        return enum_cls(code)
    except ValueError:
        return None


def calc_turb_cf(
    re: float,
    eqn: int,
    inputs: Optional[FrictionInputs] = None,
) -> float:
    """
    Turbulent skin friction coefficient for equation code ``eqn``.

    Returns 0.0 for an unrecognized code or a non-finite result.
    """

    inputs = inputs or FrictionInputs()
    key = _as_enum(TurbCfEqn, eqn)
    if key is None:
        logger.warning("Unrecognized turbulent Cf equation code %r", eqn)
        return 0.0

    try:
        with np.errstate(all="ignore"):
            cf = float(_TURB_EQUATIONS[key](np.float64(re), inputs))
    except ZeroDivisionError:
        cf = float("nan")

    if not np.isfinite(cf):
        logger.warning("%s gave non-finite Cf at Re=%g; using 0", _TURB_NAMES[key], re)
        return 0.0
    return cf


def calc_lam_cf(re: float, eqn: int) -> float:
    """Laminar skin friction coefficient for equation code ``eqn``."""

    key = _as_enum(LamCfEqn, eqn)
    if key == LamCfEqn.BLASIUS:
        if re <= 0.0:
            return 0.0
        return float(1.32824 / np.sqrt(re))
    if key == LamCfEqn.BLASIUS_W_HEAT:
        # Heat transfer laminar model not implemented
        logger.debug("Laminar Cf with heat transfer is not implemented; returning 0")
        return 0.0
    logger.warning("Unrecognized laminar Cf equation code %r", eqn)
    return 0.0


def turb_cf_eqn_name(eqn: int) -> str:
    key = _as_enum(TurbCfEqn, eqn)
    return _TURB_NAMES.get(key, "ERROR") if key is not None else "ERROR"


def lam_cf_eqn_name(eqn: int) -> str:
    key = _as_enum(LamCfEqn, eqn)
    return _LAM_NAMES.get(key, "ERROR") if key is not None else "ERROR"

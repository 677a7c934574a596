"""
Parasite Drag Buildup: Geometric Reduction
==========================================

Reduce a degenerate stick to the scalar quantities the friction and form
factor equations need:

- reference length (area-weighted chord for wings, leading edge extent for bodies)
- area-weighted quarter and half chord sweep
- fineness ratio (max t/c for wings, nominal diameter over length for bodies)
- maximum planform panel area
"""

from typing import Tuple

import numpy as np

from dragconfig import SurfType
from .geometry import DegenStick

# Reference lengths at or below this are treated as degenerate
LREF_ZERO_TOL = 1e-6


def weighted_chord(stick: DegenStick) -> float:
    """Chord averaged over panels, each weighted by its trapezoidal area."""

    n_panels = len(stick.area_top)
    if n_panels == 0:
        return 0.0

    spans = np.linalg.norm(stick.xle[1:n_panels + 1] - stick.xle[:n_panels], axis=1)
    chords = stick.chord[:n_panels + 1]
    panel_areas = spans * 0.5 * (chords[:-1] + chords[1:])

    total_area = panel_areas.sum()
    if total_area <= 0.0:
        return 0.0
    return float(np.dot(chords[:-1], panel_areas) / total_area)


def leading_edge_length(stick: DegenStick) -> float:
    """Straight-line distance between the first and last leading edge points."""

    if len(stick.xle) == 0:
        return 0.0
    return float(np.linalg.norm(stick.xle[0] - stick.xle[-1]))


def reference_chord(stick: DegenStick) -> float:
    """Wing reference length; falls back to the leading edge extent, then 1.0."""

    for candidate in (weighted_chord(stick), leading_edge_length(stick)):
        if candidate > LREF_ZERO_TOL:
            return candidate
    return 1.0


def reference_body_length(stick: DegenStick) -> float:
    """Body reference length; falls back to the weighted chord, then 1.0."""

    for candidate in (leading_edge_length(stick), weighted_chord(stick)):
        if candidate > LREF_ZERO_TOL:
            return candidate
    return 1.0


def reference_length(surf_type: SurfType, stick: DegenStick) -> float:
    if surf_type == SurfType.WING:
        return reference_chord(stick)
    return reference_body_length(stick)


def average_sweep(stick: DegenStick) -> Tuple[float, float]:
    """
    Area-weighted quarter and half chord sweep in radians.

    Each panel's leading edge sweep is shifted aft by the chord taper over
    the panel width, where width = panel area / mean panel perimeter.
    """

    n_panels = len(stick.area_top)
    if n_panels == 0:
        return 0.0, 0.0

    with np.errstate(divide="ignore", invalid="ignore"):
        mean_perim = 0.5 * (stick.perim_top[:n_panels] + stick.perim_top[1:n_panels + 1])
        width = stick.area_top / mean_perim
        taper = (stick.chord[:n_panels] - stick.chord[1:n_panels + 1]) / width
        tan_le = np.tan(np.radians(stick.sweeple[:n_panels]))

        sweep25 = np.degrees(np.arctan(tan_le + 0.25 * taper))
        sweep50 = np.degrees(np.arctan(tan_le + 0.50 * taper))
        panel_areas = stick.chord[:n_panels] * width

    valid = np.isfinite(sweep25) & np.isfinite(sweep50) & np.isfinite(panel_areas)
    total_area = panel_areas[valid].sum()
    if total_area == 0.0:
        return 0.0, 0.0

    avg25 = np.dot(panel_areas[valid], sweep25[valid]) / total_area
    avg50 = np.dot(panel_areas[valid], sweep50[valid]) / total_area
    return float(np.radians(avg25)), float(np.radians(avg50))


def fineness_ratio(surf_type: SurfType, stick: DegenStick, lref: float) -> float:
    """Max t/c for wings; nominal diameter over reference length for bodies."""

    if surf_type == SurfType.WING:
        return float(np.max(stick.toc)) if len(stick.toc) else 0.0

    max_xsec_area = float(np.max(stick.sectarea)) if len(stick.sectarea) else 0.0
    diameter = 2.0 * np.sqrt(max_xsec_area / np.pi)
    return float(diameter / lref)


def max_planform_area(stick: DegenStick) -> float:
    return float(np.max(stick.area_top)) if len(stick.area_top) else 0.0

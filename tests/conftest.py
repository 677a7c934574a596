"""Shared vehicle builders for the drag buildup tests."""

import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT))

import pytest  # noqa: E402

from dragconfig import FFBodyEqn, FFWingEqn, FreestreamType, SurfType  # noqa: E402
from dragcore.geometry import DegenGeom, DegenStick, Geom, SubSurface  # noqa: E402

SAMPLE_VEHICLE = REPO_ROOT / "data" / "examples" / "sample_vehicle.json"


def wing_stick(chord=2.0, span=5.0, toc=0.1, y_sign=1.0):
    """Untapered, unswept single-panel wing."""
    return DegenStick(
        xle=[[0.0, 0.0, 0.0], [0.0, y_sign * span, 0.0]],
        chord=[chord, chord],
        toc=[toc, toc],
        sweeple=[0.0, 0.0],
        area_top=[chord * span],
        perim_top=[2.0 * chord, 2.0 * chord],
        sectarea=[toc * chord * chord, toc * chord * chord],
    )


def body_stick(length=10.0, max_xsec_area=3.14159, x0=0.0):
    return DegenStick(
        xle=[[x0, 0.0, 0.0], [x0 + 0.3 * length, 0.0, 0.0], [x0 + length, 0.0, 0.0]],
        chord=[0.0, 0.0, 0.0],
        toc=[0.0, 0.0, 0.0],
        sweeple=[0.0, 0.0, 0.0],
        area_top=[0.3 * length, 0.7 * length],
        perim_top=[1.0, 2.0, 1.0],
        sectarea=[0.0, max_xsec_area, 0.1],
    )


def make_wing(geom_id="WING", name="Wing", symmetric=False, swet=10.0, sub_surfaces=(),
              sub_swet=1.0, **drag):
    n_surfs = 2 if symmetric else 1
    degen = [
        DegenGeom(geom_id, SurfType.WING, [wing_stick(y_sign=1.0 if i == 0 else -1.0)])
        for i in range(n_surfs)
    ]
    wetted = {f"{name}{i}": swet for i in range(n_surfs)}
    subs = []
    for sub_name in sub_surfaces:
        subs.append(SubSurface(id=f"{geom_id}_{sub_name}", name=sub_name))
        for i in range(n_surfs):
            wetted[f"{name}{i},{sub_name}"] = sub_swet
    drag.setdefault("ff_wing_eqn", FFWingEqn.MANUAL)
    return Geom(
        id=geom_id,
        name=name,
        surf_types=[SurfType.WING] * n_surfs,
        geom_type="wing",
        sub_surfaces=subs,
        degen_geoms=degen,
        wetted_areas=wetted,
        total_area=20.0,
        **drag,
    )


def make_body(geom_id="FUSE", name="Fuselage", swet=50.0, length=10.0, parent_id="", **drag):
    drag.setdefault("ff_body_eqn", FFBodyEqn.MANUAL)
    return Geom(
        id=geom_id,
        name=name,
        surf_types=[SurfType.BODY],
        geom_type="fuselage",
        parent_id=parent_id,
        degen_geoms=[DegenGeom(geom_id, SurfType.BODY, [body_stick(length=length)])],
        wetted_areas={f"{name}0": swet},
        **drag,
    )


def make_disk(geom_id="PROP", name="Prop"):
    return Geom(
        id=geom_id,
        name=name,
        surf_types=[SurfType.DISK],
        geom_type="propeller",
        degen_geoms=[DegenGeom(geom_id, SurfType.DISK, [])],
    )


def use_re_per_length(manager, re_per_length=5.0e5, mach=0.0):
    """Freestream given directly as Re per unit length."""
    ref = manager.reference
    ref.freestream_type = FreestreamType.MANUAL_RE_L
    ref.re_per_length = re_per_length
    ref.mach = mach


@pytest.fixture
def sample_vehicle_path():
    return SAMPLE_VEHICLE

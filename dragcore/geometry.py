"""
Parasite Drag Buildup: Vehicle Geometry Interface
=================================================

The drag buildup never owns geometry. It reads a vehicle made of geoms,
each carrying:

- one shape classification per surface instance (symmetric copies included)
- sub-surfaces with an inclusion flag
- user overrides (percent laminar, form factor, Q, roughness, wall temperature ratios)
- the degenerate representation produced by the geometry kernel: one stick per
  surface with per-section leading edge, chord, t/c, sweep, planform area,
  perimeter and cross-sectional area
- tagged wetted areas (``"<Name><surf>"`` and ``"<Name><surf>,<SubName>"``)

Rows reference geoms by id string only; every access goes back through
``Vehicle.resolve`` so a geom deleted under the manager is detected.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

import numpy as np

from dragconfig import FFBodyEqn, FFWingEqn, SurfType

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

NO_ANCESTOR = "NONE"

# Geom types that never produce drag rows
EXCLUDED_GEOM_TYPES = ("blank", "hinge")
CUSTOM_GEOM_TYPE = "custom"
WING_GEOM_TYPE = "wing"


class GeometryLookupError(KeyError):
    """Raised when a geom or sub-surface id no longer resolves."""


@dataclass
class DegenStick:
    """
    One-dimensional reduction of a surface.

    ``xle``, ``chord``, ``toc``, ``sweeple``, ``perim_top`` and ``sectarea``
    have one entry per section station (N); ``area_top`` has one entry per
    panel between stations (N - 1).
    """

    xle: np.ndarray
    chord: np.ndarray
    toc: np.ndarray
    sweeple: np.ndarray                   # Leading edge sweep, degrees
    area_top: np.ndarray
    perim_top: np.ndarray
    sectarea: np.ndarray

    def __post_init__(self):
        self.xle = np.atleast_2d(np.asarray(self.xle, dtype=float))
        for name in ("chord", "toc", "sweeple", "area_top", "perim_top", "sectarea"):
            setattr(self, name, np.asarray(getattr(self, name), dtype=float))

    @classmethod
    def from_dict(cls, data: dict) -> "DegenStick":
        return cls(
            xle=data["xle"],
            chord=data["chord"],
            toc=data["toc"],
            sweeple=data["sweeple"],
            area_top=data["area_top"],
            perim_top=data["perim_top"],
            sectarea=data["sectarea"],
        )


@dataclass
class DegenGeom:
    """Degenerate representation of one surface instance."""

    geom_id: str
    surf_type: SurfType
    sticks: List[DegenStick] = field(default_factory=list)

    @property
    def stick(self) -> DegenStick:
        return self.sticks[0]


@dataclass
class SubSurface:
    id: str
    name: str
    include_flag: bool = True


@dataclass
class Geom:
    """A component of the vehicle and its drag buildup overrides."""

    id: str
    name: str
    surf_types: List[SurfType]
    geom_type: str = "generic"
    parent_id: str = ""
    sub_surfaces: List[SubSurface] = field(default_factory=list)

    # Drag buildup inputs. These are physical defaults (smooth, adiabatic
    # wall); every ledger row copies them, replacing the row's -1 markers.
    grouped_ancestor_gen: int = 0
    expanded_list: bool = False
    perc_lam: float = 0.0
    ff_user: float = -1.0
    q: float = 1.0
    roughness: float = 0.0
    te_tw_ratio: float = 1.0
    taw_tw_ratio: float = 1.0
    ff_body_eqn: FFBodyEqn = FFBodyEqn.HOERNER_STREAMBODY
    ff_wing_eqn: FFWingEqn = FFWingEqn.HOERNER

    # Wing planform area, used when this geom supplies Sref
    total_area: float = 0.0

    # Output of the geometry kernel
    degen_geoms: List[DegenGeom] = field(default_factory=list)
    wetted_areas: Dict[str, float] = field(default_factory=dict)

    @property
    def num_total_surfs(self) -> int:
        return len(self.surf_types)

    @property
    def is_custom(self) -> bool:
        return self.geom_type == CUSTOM_GEOM_TYPE

    def surf_type(self, index: int) -> SurfType:
        return self.surf_types[index]

    def sub_surface(self, sub_id: str) -> SubSurface:
        for sub in self.sub_surfaces:
            if sub.id == sub_id:
                return sub
        raise GeometryLookupError(f"Sub-surface {sub_id!r} not found on geom {self.id!r}")


class Vehicle:
    """
    Container for geoms, geometry sets and the current degenerate geometry.

    Set 0 always contains every geom. Degenerate geometry and tagged wetted
    areas are only visible after ``create_degen_geom`` has run for a set.
    """

    def __init__(self, geoms: Optional[List[Geom]] = None, sets: Optional[Dict[int, List[str]]] = None,
                 name: str = "Vehicle"):
        self.name = name
        self._geoms: Dict[str, Geom] = {}
        for geom in geoms or []:
            self.add_geom(geom)
        self._sets: Dict[int, List[str]] = dict(sets or {})
        self.degen_geoms: List[DegenGeom] = []
        self.wetted_areas: Dict[str, float] = {}

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------
    def add_geom(self, geom: Geom):
        self._geoms[geom.id] = geom

    def remove_geom(self, geom_id: str):
        self._geoms.pop(geom_id, None)
        for ids in self._sets.values():
            if geom_id in ids:
                ids.remove(geom_id)

    def find_geom(self, geom_id: str) -> Optional[Geom]:
        return self._geoms.get(geom_id)

    def resolve(self, geom_id: str) -> Geom:
        geom = self._geoms.get(geom_id)
        if geom is None:
            raise GeometryLookupError(f"Geom {geom_id!r} not found")
        return geom

    @property
    def geoms(self) -> List[Geom]:
        return list(self._geoms.values())

    def geom_set(self, set_index: int) -> List[str]:
        """Ids of the geoms in a set, in vehicle order."""
        if set_index == 0 or set_index not in self._sets:
            if set_index != 0:
                logger.warning("Geometry set %d not defined; using all geoms", set_index)
            return list(self._geoms)
        members = set(self._sets[set_index])
        return [geom_id for geom_id in self._geoms if geom_id in members]

    def get_ancestor_id(self, geom_id: str, gen: int) -> str:
        """
        Id of the ancestor ``gen`` generations above ``geom_id``.

        Generation 0 is the geom itself. A negative generation or a chain that
        runs out of parents yields ``"NONE"``.
        """
        if gen < 0:
            return NO_ANCESTOR
        current = self.find_geom(geom_id)
        if current is None:
            return NO_ANCESTOR
        for _ in range(gen):
            if not current.parent_id:
                return NO_ANCESTOR
            current = self.find_geom(current.parent_id)
            if current is None:
                return NO_ANCESTOR
        return current.id

    # ------------------------------------------------------------------
    # Degenerate geometry
    # ------------------------------------------------------------------
    def clear_degen_geom(self):
        self.degen_geoms = []
        self.wetted_areas = {}

    def create_degen_geom(self, set_index: int):
        """Collect degenerate geometry and tagged wetted areas for a set."""
        self.clear_degen_geom()
        for geom_id in self.geom_set(set_index):
            geom = self._geoms[geom_id]
            if geom.geom_type in EXCLUDED_GEOM_TYPES:
                continue
            self.degen_geoms.extend(geom.degen_geoms)
            self.wetted_areas.update(geom.wetted_areas)
        logger.debug(
            "Degenerate geometry for set %d: %d surfaces, %d wetted area tags",
            set_index, len(self.degen_geoms), len(self.wetted_areas),
        )

    def wetted_area(self, tag: str) -> Optional[float]:
        return self.wetted_areas.get(tag)


# ----------------------------------------------------------------------
# JSON loader
# ----------------------------------------------------------------------
def _geom_from_dict(data: dict) -> Geom:
    geom_id = data["id"]
    surf_types = [SurfType[s.upper()] if isinstance(s, str) else SurfType(s) for s in data["surf_types"]]

    degen = []
    for entry in data.get("degen", []):
        kind = entry["type"]
        surf_type = SurfType[kind.upper()] if isinstance(kind, str) else SurfType(kind)
        sticks = [DegenStick.from_dict(s) for s in entry.get("sticks", [])]
        degen.append(DegenGeom(geom_id=geom_id, surf_type=surf_type, sticks=sticks))

    inputs = data.get("drag", {})
    return Geom(
        id=geom_id,
        name=data.get("name", geom_id),
        surf_types=surf_types,
        geom_type=data.get("type", "generic").lower(),
        parent_id=data.get("parent_id", ""),
        sub_surfaces=[
            SubSurface(id=s["id"], name=s.get("name", s["id"]), include_flag=s.get("include", True))
            for s in data.get("sub_surfaces", [])
        ],
        grouped_ancestor_gen=inputs.get("grouped_ancestor_gen", 0),
        expanded_list=inputs.get("expanded_list", False),
        perc_lam=inputs.get("perc_lam", 0.0),
        ff_user=inputs.get("ff_user", -1.0),
        q=inputs.get("q", 1.0),
        roughness=inputs.get("roughness", 0.0),
        te_tw_ratio=inputs.get("te_tw_ratio", 1.0),
        taw_tw_ratio=inputs.get("taw_tw_ratio", 1.0),
        ff_body_eqn=FFBodyEqn(inputs.get("ff_body_eqn", FFBodyEqn.HOERNER_STREAMBODY)),
        ff_wing_eqn=FFWingEqn(inputs.get("ff_wing_eqn", FFWingEqn.HOERNER)),
        total_area=data.get("total_area", 0.0),
        degen_geoms=degen,
        wetted_areas={str(k): float(v) for k, v in data.get("wetted_areas", {}).items()},
    )


def load_vehicle(path: Path) -> Vehicle:
    """Build a vehicle from a JSON description."""

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Vehicle file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        payload = json.load(f)

    try:
        geoms = [_geom_from_dict(g) for g in payload["geoms"]]
    except KeyError as exc:
        raise ValueError(f"Vehicle file {path} missing key {exc}") from exc

    sets = {int(k): list(v) for k, v in payload.get("sets", {}).items()}
    vehicle = Vehicle(geoms, sets=sets, name=payload.get("name", path.stem))
    logger.info("Loaded vehicle %s with %d geoms", vehicle.name, len(geoms))
    return vehicle

# Parasite Drag Buildup Core Module
from .atmosphere import AtmosphereModel, FlowProperties
from .buildup import ParasiteDragManager, SurfaceRow
from .excrescence import ExcrescenceEntry, ExcrescenceLedger
from .geometry import (
    DegenGeom, DegenStick, Geom, GeometryLookupError, SubSurface, Vehicle, load_vehicle,
)
from .persistence import load_settings, save_settings
from .reporting import DragResults, ExportLabels, build_results, export_to_csv
from .solvers import RootSolution, newton_solve

__all__ = [
    "AtmosphereModel",
    "FlowProperties",
    "ParasiteDragManager",
    "SurfaceRow",
    "ExcrescenceEntry",
    "ExcrescenceLedger",
    "DegenGeom",
    "DegenStick",
    "Geom",
    "GeometryLookupError",
    "SubSurface",
    "Vehicle",
    "load_vehicle",
    "load_settings",
    "save_settings",
    "DragResults",
    "ExportLabels",
    "build_results",
    "export_to_csv",
    "RootSolution",
    "newton_solve",
]

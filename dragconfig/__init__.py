# Parasite Drag Buildup Configuration Module
from .drag_config import (
    DragBuildupConfig, DragSettings, ReferenceCondition, config,
    SurfType, TurbCfEqn, LamCfEqn, FFWingEqn, FFBodyEqn, ExcrescenceType,
    FreestreamType, UnitSystem, LengthUnit, VelocityUnit, TempUnit, PresUnit,
    SortBy, RefFlag, ParmRole, clamp, excrescence_limits,
)

__all__ = [
    "DragBuildupConfig", "DragSettings", "ReferenceCondition", "config",
    "SurfType", "TurbCfEqn", "LamCfEqn", "FFWingEqn", "FFBodyEqn",
    "ExcrescenceType", "FreestreamType", "UnitSystem", "LengthUnit",
    "VelocityUnit", "TempUnit", "PresUnit", "SortBy", "RefFlag", "ParmRole",
    "clamp", "excrescence_limits",
]

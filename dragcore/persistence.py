"""
Save and restore drag buildup settings as JSON.

Stored: drag settings, the reference condition, the reference geometry id
and the excrescence list (label, type, input). Rows are never stored; they
are rebuilt from the vehicle on the next compute.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, fields
from enum import Enum
from pathlib import Path

from dragconfig import DragSettings, ExcrescenceType, ReferenceCondition

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

FORMAT_VERSION = 1


def _encode(obj) -> dict:
    payload = {}
    for key, value in asdict(obj).items():
        payload[key] = int(value) if isinstance(value, Enum) else value
    return payload


def _decode_into(obj, payload: dict, section: str):
    """Overwrite dataclass fields from a dict, coercing to each field's current type."""
    if not isinstance(payload, dict):
        raise ValueError(f"Section {section!r} must be an object")
    for f in fields(obj):
        if f.name not in payload:
            continue
        current = getattr(obj, f.name)
        raw = payload[f.name]
        try:
            if isinstance(current, Enum):
                value = type(current)(raw)
            elif isinstance(current, bool):
                value = bool(raw)
            elif isinstance(current, int):
                value = int(raw)
            elif isinstance(current, float):
                value = float(raw)
            else:
                value = str(raw)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Invalid value for {section}.{f.name}: {raw!r}") from exc
        setattr(obj, f.name, value)


def encode_settings(manager) -> dict:
    settings = manager.settings
    return {
        "format_version": FORMAT_VERSION,
        "settings": _encode(settings),
        "reference": _encode(manager.reference),
        "ReferenceGeomID": settings.ref_geom_id,
        "excrescences": [
            {"label": e.label, "type": int(e.kind), "input": e.input}
            for e in manager.excrescences
        ],
    }


def decode_settings(manager, payload: dict):
    """Apply a decoded payload to the manager. Existing excrescences are replaced."""
    for key in ("settings", "reference", "excrescences"):
        if key not in payload:
            raise ValueError(f"Settings file missing key {key!r}")

    settings = DragSettings()
    reference = ReferenceCondition()
    _decode_into(settings, payload["settings"], "settings")
    _decode_into(reference, payload["reference"], "reference")
    settings.ref_geom_id = str(payload.get("ReferenceGeomID", settings.ref_geom_id))

    manager.config.settings = settings
    manager.config.reference = reference

    manager.excrescences.clear()
    for index, item in enumerate(payload["excrescences"]):
        try:
            label = str(item["label"])
            kind = ExcrescenceType(int(item["type"]))
            value = float(item["input"])
        except (KeyError, TypeError, ValueError) as exc:
            raise ValueError(f"Malformed excrescence entry {index}: {item!r}") from exc
        manager.add_excrescence(label, kind, value)


def save_settings(manager, path: Path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(encode_settings(manager), f, indent=2)
    logger.info("Saved drag settings to %s", path)
    return path


def load_settings(manager, path: Path):
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Settings file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        try:
            payload = json.load(f)
        except json.JSONDecodeError as exc:
            raise ValueError(f"Settings file {path} is not valid JSON: {exc}") from exc

    if not isinstance(payload, dict):
        raise ValueError(f"Settings file {path} must contain a JSON object")

    decode_settings(manager, payload)
    logger.info("Loaded drag settings from %s (%d excrescences)", path, len(manager.excrescences))

"""CI entrypoint for the parasite drag buildup.

Runs config validation and a smoke compute of the bundled example vehicle.
"""
# ruff: noqa: E402
from __future__ import annotations

import math
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from dragconfig import config
from dragcore import ParasiteDragManager, load_vehicle

EXAMPLE_VEHICLE = PROJECT_ROOT / "data" / "examples" / "sample_vehicle.json"


def run_config_validation() -> int:
    errors = config.validate()
    if errors:
        print("Configuration validation failed:")
        for err in errors:
            print(f" - {err}")
        return 1

    print("Configuration validation passed.")
    return 0


def run_smoke_compute() -> int:
    manager = ParasiteDragManager(load_vehicle(EXAMPLE_VEHICLE))
    manager.compute_all()

    total = manager.total_cd()
    if not manager.rows or not math.isfinite(total) or total <= 0.0:
        print(f"Smoke compute failed: {len(manager.rows)} rows, total CD {total}")
        return 1

    print(f"Smoke compute passed: {len(manager.rows)} rows, total CD {total:.5f}")
    return 0


def main() -> int:
    exit_codes = [run_config_validation()]
    exit_codes.append(run_smoke_compute())

    return 1 if any(code != 0 for code in exit_codes) else 0


if __name__ == "__main__":
    sys.exit(main())

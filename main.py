#!/usr/bin/env python3
"""
Parasite Drag Buildup: Main Entry Point
=======================================

Usage:
    python main.py data/examples/sample_vehicle.json
    python main.py vehicle.json --sort wetted_area --export-csv out/drag.csv
    python main.py vehicle.json --load drag_settings.json --save drag_settings.json
    python main.py vehicle.json --excres "Antenna:count:12" --excres "Margin:margin:5"
    python main.py --summary

"""

import argparse
import logging
import sys
from pathlib import Path

project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from dragconfig import (  # noqa: E402
    ExcrescenceType, FreestreamType, LamCfEqn, SortBy, TurbCfEqn, config,
)
from dragcore import (  # noqa: E402
    ParasiteDragManager, export_to_csv, load_settings, load_vehicle, save_settings,
)
from dragcore.friction import lam_cf_eqn_name, turb_cf_eqn_name  # noqa: E402


def parse_excrescence(text: str):
    """``LABEL:TYPE:VALUE`` where TYPE is an ExcrescenceType name."""
    parts = text.rsplit(":", 2)
    if len(parts) != 3:
        raise argparse.ArgumentTypeError(f"Expected LABEL:TYPE:VALUE, got {text!r}")
    label, kind, value = parts
    try:
        return label, ExcrescenceType[kind.upper()], float(value)
    except (KeyError, ValueError) as exc:
        raise argparse.ArgumentTypeError(f"Bad excrescence {text!r}: {exc}") from exc


def validate_config() -> bool:
    """Validate the default drag configuration."""
    print("Validating configuration...")
    errors = config.validate()

    if errors:
        print("\nCONFIGURATION ERRORS:")
        for err in errors:
            print(f"  [!] {err}")
        return False

    print("  Configuration valid.")
    return True


def apply_overrides(manager: ParasiteDragManager, args):
    settings = manager.settings
    ref = manager.reference

    if args.sref is not None:
        settings.sref = args.sref
    if args.turb_eqn is not None:
        settings.turb_cf_eqn = TurbCfEqn[args.turb_eqn.upper()]
    if args.lam_eqn is not None:
        settings.lam_cf_eqn = LamCfEqn[args.lam_eqn.upper()]
    if args.sort is not None:
        settings.sort_by = SortBy[args.sort.upper()]
    if args.set_index is not None:
        settings.set_choice = args.set_index

    if args.freestream is not None:
        ref.freestream_type = FreestreamType[args.freestream.upper()]
    if args.vinf is not None:
        ref.vinf = args.vinf
    if args.altitude is not None:
        manager.set_altitude(args.altitude)
    if args.mach is not None:
        ref.mach = args.mach
    if args.re_per_length is not None:
        ref.re_per_length = args.re_per_length

    for label, kind, value in args.excres or []:
        manager.add_excrescence(label, kind, value)


def print_ledger(manager: ParasiteDragManager):
    settings = manager.settings
    ref = manager.reference
    decimals = manager.lref_decimals()

    print(f"\n--- Parasite Drag Buildup: {manager.vehicle.name} ---")
    print(f"  Mach {ref.mach:.3f}  Re/L {ref.re_per_length:.4g}  Sref {settings.sref:.3f}")
    print(f"  Turbulent Cf: {turb_cf_eqn_name(settings.turb_cf_eqn)}")
    print(f"  Laminar Cf:   {lam_cf_eqn_name(settings.lam_cf_eqn)}")
    print(f"  Re shown x 10^{manager.re_power_divisor}")
    print()
    print(f"  {'Component':<24}{'Swet':>10}{'Lref':>10}{'Re':>9}{'Cf':>10}"
          f"{'FF':>8}{'Q':>6}{'f':>10}{'CD':>10}{'%CD':>8}")

    scale = 10.0 ** manager.re_power_divisor
    for row in manager.rows:
        print(
            f"  {row.label:<24}{row.swet:>10.3f}{row.lref:>10.{decimals}f}"
            f"{row.re / scale:>9.3f}{row.cf:>10.6f}{row.ff:>8.3f}{row.q_used:>6.2f}"
            f"{row.f:>10.5f}{row.cd:>10.5f}{row.perc_total_cd * 100.0:>7.1f}%"
        )

    for entry in manager.excrescences:
        print(
            f"  {entry.label:<24}{entry.type_string:>20} {entry.input:>8.3f}"
            f"{'':>14}{entry.f:>10.5f}{entry.amount:>10.5f}{entry.perc_total_cd * 100.0:>7.1f}%"
        )

    print()
    print(f"  Geometry CD:  {manager.geometry_cd():.5f}")
    print(f"  Subtotal CD:  {manager.subtotal_cd():.5f}")
    print(f"  Total CD:     {manager.total_cd():.5f}  (f = {manager.f_total():.4f})")


def main():
    parser = argparse.ArgumentParser(description="Parasite Drag Buildup")
    parser.add_argument("vehicle", nargs="?", type=Path, help="Vehicle JSON description")
    parser.add_argument("--load", type=Path, help="Load saved drag settings (JSON)")
    parser.add_argument("--save", type=Path, help="Save drag settings after computing (JSON)")
    parser.add_argument("--export-csv", type=Path, help="Write results CSV")
    parser.add_argument(
        "--sort", choices=[s.name.lower() for s in SortBy], help="Secondary row ordering"
    )
    parser.add_argument("--sref", type=float, help="Reference area")
    parser.add_argument("--vinf", type=float, help="Freestream velocity")
    parser.add_argument("--altitude", type=float, help="Altitude")
    parser.add_argument("--mach", type=float, help="Mach number (Re/L freestream)")
    parser.add_argument("--re-per-length", type=float, help="Reynolds number per unit length")
    parser.add_argument(
        "--freestream", choices=[f.name.lower() for f in FreestreamType], help="Freestream definition"
    )
    parser.add_argument(
        "--turb-eqn", choices=[e.name.lower() for e in TurbCfEqn], help="Turbulent Cf equation"
    )
    parser.add_argument(
        "--lam-eqn", choices=[e.name.lower() for e in LamCfEqn], help="Laminar Cf equation"
    )
    parser.add_argument("--set-index", type=int, help="Geometry set to analyse")
    parser.add_argument(
        "--excres", action="append", type=parse_excrescence, metavar="LABEL:TYPE:VALUE",
        help="Add an excrescence (repeatable)",
    )
    parser.add_argument("--summary", action="store_true", help="Show configuration summary")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if len(sys.argv) == 1:
        parser.print_help()
        return 0

    print(f"{config.project_name} v{config.version}")

    if args.summary:
        print(config.summary())
        return 0

    if args.vehicle is None:
        parser.error("a vehicle file is required")

    if not validate_config():
        print("\nAborting due to configuration errors.")
        return 1

    vehicle = load_vehicle(args.vehicle)
    manager = ParasiteDragManager(vehicle)

    if args.load:
        load_settings(manager, args.load)
        print(f"  Settings loaded from {args.load}")

    apply_overrides(manager, args)
    manager.compute_all()
    print_ledger(manager)

    if args.export_csv:
        path = export_to_csv(manager, args.export_csv)
        print(f"\n  CSV written to: {path}")

    if args.save:
        path = save_settings(manager, args.save)
        print(f"  Settings written to: {path}")

    print("\nDone.")
    return 0


if __name__ == "__main__":
    sys.exit(main())

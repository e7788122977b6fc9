from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import List, Optional

import numpy as np
from pydantic import ValidationError

from .config import Settings, load_config
from .plant import (
    PlantError,
    PlantStore,
    add_panels,
    add_table,
    create_plant,
    delete_panel,
    refresh,
)
from .reporting import fault_report, plant_summary


def _print_summary(store: PlantStore, company_id: str) -> None:
    s = plant_summary(store.load(company_id))
    print(f"{s['company_name']} ({s['company_id']})")
    print(f"Tables: {s['tables']}, Panels: {s['panels']}")
    print(f"Good: {s['good']}, Repairing: {s['repairing']}, Fault: {s['fault']}")
    print(f"Output: {s['output_kw']:.2f} kW (plant rating {s['plant_power_kw']:.0f} kW)")
    print(f"Last updated: {s['last_updated']}")


def cmd_create_company(args, store: PlantStore, settings: Settings, rng) -> int:
    defaults = settings.plant
    details = create_plant(
        args.company_id,
        args.name or args.company_id,
        voltage_per_panel=args.voltage if args.voltage is not None else defaults.voltage_per_panel,
        current_per_panel=args.current if args.current is not None else defaults.current_per_panel,
        plant_power_kw=args.plant_power_kw if args.plant_power_kw is not None else defaults.plant_power_kw,
    )
    path = store.create(details)
    print(f"Created {details.company_id} at {path}")
    return 0


def cmd_list(args, store: PlantStore, settings: Settings, rng) -> int:
    companies = store.list_companies()
    if not companies:
        print("No companies found.")
    for c in companies:
        print(f"{c.company_id}\t{c.company_name}\t{len(c.tables)} table(s)\t{c.plant_power_kw:.0f} kW")
    return 0


def cmd_show(args, store: PlantStore, settings: Settings, rng) -> int:
    if args.json:
        print(store.load(args.company_id).to_json())
    else:
        _print_summary(store, args.company_id)
    return 0


def cmd_add_table(args, store: PlantStore, settings: Settings, rng) -> int:
    details = store.load(args.company_id)
    table = add_table(details, args.top, args.bottom, rng=rng, config=settings.engine)
    store.save(details)
    print(f"Added {table.serial_number} ({table.id}): {table.panels_top} top, {table.panels_bottom} bottom")
    return 0


def cmd_add_panels(args, store: PlantStore, settings: Settings, rng) -> int:
    details = store.load(args.company_id)
    table = add_panels(details, args.table_id, args.side, args.count, rng=rng, config=settings.engine)
    store.save(details)
    print(f"{table.serial_number}: {table.panels_top} top, {table.panels_bottom} bottom")
    return 0


def cmd_delete_panel(args, store: PlantStore, settings: Settings, rng) -> int:
    details = store.load(args.company_id)
    table = delete_panel(details, args.table_id, args.panel_id)
    store.save(details)
    print(f"Deleted {args.panel_id} from {table.serial_number}")
    return 0


def cmd_refresh(args, store: PlantStore, settings: Settings, rng) -> int:
    details = store.load(args.company_id)
    for _ in range(args.cycles):
        refresh(details, rng=rng, config=settings.engine)
    store.save(details)
    _print_summary(store, args.company_id)
    return 0


def cmd_faults(args, store: PlantStore, settings: Settings, rng) -> int:
    faults = fault_report(store.load(args.company_id))
    if faults.empty:
        print("All strings healthy.")
    elif args.json:
        print(faults.to_json(orient="records", indent=2))
    else:
        print(faults.to_string(index=False))
    return 0


def cmd_delete_company(args, store: PlantStore, settings: Settings, rng) -> int:
    store.delete(args.company_id)
    print(f"Deleted {args.company_id}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="plantwatch",
        description="Solar plant string monitoring: tables, panels and fault simulation.",
    )
    parser.add_argument(
        "--data-dir",
        default="companies",
        help="Directory holding one folder per company.",
    )
    parser.add_argument("--config", help="Path to a settings JSON file.")
    parser.add_argument("--seed", type=int, help="Random seed for reproducible simulation.")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging.")

    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("create-company", help="Create a company plant document.")
    p.add_argument("company_id")
    p.add_argument("--name", help="Company display name (defaults to the id).")
    p.add_argument("--voltage", type=float, help="Nominal panel voltage (V).")
    p.add_argument("--current", type=float, help="Nominal panel current (A).")
    p.add_argument("--plant-power-kw", type=float, help="Plant rating (kW).")
    p.set_defaults(func=cmd_create_company)

    p = sub.add_parser("list", help="List companies.")
    p.set_defaults(func=cmd_list)

    p = sub.add_parser("show", help="Show a plant summary.")
    p.add_argument("company_id")
    p.add_argument("--json", action="store_true", help="Print the full plant document.")
    p.set_defaults(func=cmd_show)

    p = sub.add_parser("add-table", help="Add a table with top and bottom strings.")
    p.add_argument("company_id")
    p.add_argument("--top", type=int, required=True, help="Panels in the top string.")
    p.add_argument("--bottom", type=int, required=True, help="Panels in the bottom string.")
    p.set_defaults(func=cmd_add_table)

    p = sub.add_parser("add-panels", help="Append panels to one string of a table.")
    p.add_argument("company_id")
    p.add_argument("table_id")
    p.add_argument("--side", choices=["top", "bottom"], required=True)
    p.add_argument("--count", type=int, default=1)
    p.set_defaults(func=cmd_add_panels)

    p = sub.add_parser("delete-panel", help="Remove a panel, e.g. top-3 (1-based).")
    p.add_argument("company_id")
    p.add_argument("table_id")
    p.add_argument("panel_id")
    p.set_defaults(func=cmd_delete_panel)

    p = sub.add_parser("refresh", help="Run simulation cycles for every string.")
    p.add_argument("company_id")
    p.add_argument("--cycles", type=int, default=1)
    p.set_defaults(func=cmd_refresh)

    p = sub.add_parser("faults", help="List strings that are not healthy.")
    p.add_argument("company_id")
    p.add_argument("--json", action="store_true")
    p.set_defaults(func=cmd_faults)

    p = sub.add_parser("delete-company", help="Delete a company folder.")
    p.add_argument("company_id")
    p.set_defaults(func=cmd_delete_company)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        settings = load_config(args.config)
    except (FileNotFoundError, json.JSONDecodeError) as e:
        print(f"Config error: {e}", file=sys.stderr)
        return 2
    except ValidationError as e:
        print("Config validation error:", file=sys.stderr)
        print(e, file=sys.stderr)
        return 2

    store = PlantStore(args.data_dir)
    rng = np.random.default_rng(args.seed)

    try:
        return args.func(args, store, settings, rng)
    except (json.JSONDecodeError, ValidationError) as e:
        print(f"Invalid plant document: {e}", file=sys.stderr)
        return 2
    except (PlantError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())

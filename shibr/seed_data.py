#!/usr/bin/env python3
"""
seed_data.py

Generates fake clearance data to CSVs under a local folder (default: sample_data).

Entities:
- clearances, inventory_lines, platform_settings (optional)

Run:
  python -m shibr.seed_data --clearances 12 --with-settings
"""

from __future__ import annotations
import argparse
import csv
import os
import random
import sys
from datetime import date, datetime, timedelta
from typing import Dict, List, Optional

from shibr.config import get_config
from shibr.data.models import CLEARANCE_STATUSES

# -----------------------------
# Config & helper structures
# -----------------------------

STORES = [
    ("S001", "Riyadh Corner Market"),
    ("S002", "Jeddah Family Store"),
    ("S003", "Dammam Daily Needs"),
    ("S004", "Khobar Mini Mart"),
]

BRANDS = {
    "B001": ("Dates House", ["Sukkari Dates", "Ajwa Dates", "Date Paste"]),
    "B002": ("Oud Lane", ["Oud Oil", "Bakhoor Sticks", "Musk Spray"]),
    "B003": ("Desert Bean", ["Saudi Coffee", "Cardamom Blend", "Coffee Cups"]),
}

ARABIC_NAMES = {
    "Sukkari Dates": "تمر سكري",
    "Ajwa Dates": "تمر عجوة",
    "Date Paste": "معجون التمر",
    "Oud Oil": "دهن العود",
    "Bakhoor Sticks": "أعواد البخور",
    "Musk Spray": "بخاخ المسك",
    "Saudi Coffee": "قهوة سعودية",
    "Cardamom Blend": "خلطة الهيل",
    "Coffee Cups": "فناجين القهوة",
}

CLEARANCE_HEADERS = [
    "clearance_id", "rental_request_id", "store_id", "store_name",
    "brand_id", "brand_name", "status", "start_date", "end_date",
]
INVENTORY_HEADERS = [
    "clearance_id", "product_id", "product_name", "product_name_ar",
    "initial_quantity", "sold_quantity", "remaining_quantity", "unit_price",
]


# -----------------------------
# Utility functions
# -----------------------------

def ensure_dir(path: str) -> None:
    if not os.path.exists(path):
        os.makedirs(path, exist_ok=True)

def price_round(p: float) -> float:
    return round(max(p, 0.01), 2)


# -----------------------------
# Core generators
# -----------------------------

def gen_clearances(n: int, today: date) -> List[Dict]:
    clearances = []
    for i in range(1, n + 1):
        store_id, store_name = random.choice(STORES)
        brand_id = random.choice(list(BRANDS))
        end = today - timedelta(days=random.randint(1, 60))
        start = end - timedelta(days=random.choice([30, 60, 90]))
        clearances.append({
            "clearance_id": f"C{i:04d}",
            "rental_request_id": f"R{i:04d}",
            "store_id": store_id,
            "store_name": store_name,
            "brand_id": brand_id,
            "brand_name": BRANDS[brand_id][0],
            # settlement statuses are only reached through approval
            "status": random.choice(CLEARANCE_STATUSES[1:6]),
            "start_date": start.isoformat(),
            "end_date": end.isoformat(),
        })
    return clearances

def gen_inventory_lines(clearances: List[Dict], mismatch_rate: float) -> List[Dict]:
    lines = []
    for c in clearances:
        # a few clearances have nothing counted yet
        if random.random() < 0.1:
            continue
        _, products = BRANDS[c["brand_id"]]
        for idx, name in enumerate(random.sample(products, k=random.randint(1, len(products))), start=1):
            initial = random.randint(5, 60)
            sold = random.randint(0, initial)
            remaining = initial - sold
            if random.random() < mismatch_rate:
                # miscounted shelf: a unit or two lost or found
                remaining = max(0, remaining + random.choice([-2, -1, 1]))
            lines.append({
                "clearance_id": c["clearance_id"],
                "product_id": f"{c['brand_id']}-P{idx:02d}",
                "product_name": name,
                "product_name_ar": ARABIC_NAMES.get(name, ""),
                "initial_quantity": initial,
                "sold_quantity": sold,
                "remaining_quantity": remaining,
                "unit_price": price_round(random.uniform(5.0, 250.0)),
            })
    return lines


# -----------------------------
# CSV writer
# -----------------------------

def write_csv(path: str, rows: List[Dict], headers: List[str]) -> None:
    with open(path, "w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=headers)
        w.writeheader()
        for r in rows:
            w.writerow(r)


# -----------------------------
# Main
# -----------------------------

def main(argv: Optional[List[str]] = None) -> int:
    config = get_config()

    parser = argparse.ArgumentParser(description="Generate fake clearance data to CSVs.")
    parser.add_argument("--clearances", type=int, default=config.default_seed_clearances)
    parser.add_argument("--mismatch-rate", type=float, default=0.05,
                        help="Share of lines whose remaining count does not add up.")
    parser.add_argument("--with-settings", action="store_true",
                        help="Also write platform_settings.csv with the default commission rates.")
    parser.add_argument("--output-dir", type=str, default=config.data_dir)
    parser.add_argument("--seed", type=int, default=config.default_seed_value)
    parser.add_argument("--no-overwrite", action="store_true", help="Fail if CSVs already exist.")
    args = parser.parse_args(argv)

    random.seed(args.seed)

    outdir = args.output_dir
    ensure_dir(outdir)

    # file paths
    files = {
        "clearances": os.path.join(outdir, "clearances.csv"),
        "inventory_lines": os.path.join(outdir, "inventory_lines.csv"),
        "platform_settings": os.path.join(outdir, "platform_settings.csv"),
    }
    if args.no_overwrite:
        for p in files.values():
            if os.path.exists(p):
                print(f"Refusing to overwrite existing file: {p}", file=sys.stderr)
                return 2

    clearances = gen_clearances(args.clearances, datetime.now().date())
    lines = gen_inventory_lines(clearances, args.mismatch_rate)

    write_csv(files["clearances"], clearances, CLEARANCE_HEADERS)
    write_csv(files["inventory_lines"], lines, INVENTORY_HEADERS)
    if args.with_settings:
        updated_at = datetime.now().isoformat(timespec="seconds")
        write_csv(files["platform_settings"], [
            {"key": "brand_sales_commission", "value": config.default_brand_sales_commission, "updated_at": updated_at},
            {"key": "store_rent_commission", "value": config.default_store_rent_commission, "updated_at": updated_at},
        ], ["key", "value", "updated_at"])

    print(f"Wrote {len(clearances)} clearances and {len(lines)} inventory lines to {outdir}")
    return 0


if __name__ == "__main__":
    sys.exit(main())

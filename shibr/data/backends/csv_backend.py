from __future__ import annotations

import threading
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import List, Optional

import pandas as pd

from ..interface import DataAccess
from ..models import (
    ClearanceFilters, ClearanceResponse, ClearanceStatus, InventoryLineItem,
    PlatformSettings, SettlementCalculation, SettlementRecord, StringList,
)
from shibr.config import get_config
from shibr.logging import get_logger

CLEARANCE_COLUMNS = [
    "clearance_id", "rental_request_id", "store_id", "store_name",
    "brand_id", "brand_name", "status", "start_date", "end_date",
]
INVENTORY_COLUMNS = [
    "clearance_id", "product_id", "product_name", "product_name_ar",
    "initial_quantity", "sold_quantity", "remaining_quantity", "unit_price",
]
SETTINGS_COLUMNS = ["key", "value", "updated_at"]
SETTLEMENT_COLUMNS = [
    "clearance_id", "settlement_json", "calculated_at", "calculated_by", "approved_at", "approved_by",
]
SETTINGS_KEYS = ("brand_sales_commission", "store_rent_commission")

_ID_DTYPES = {"clearance_id": str, "rental_request_id": str, "store_id": str, "brand_id": str, "product_id": str}


@dataclass
class _Tables:
    clearances: pd.DataFrame
    inventory_lines: pd.DataFrame
    platform_settings: pd.DataFrame
    settlements: pd.DataFrame


def _records(df: pd.DataFrame) -> List[dict]:
    """Rows as dicts with missing cells as None instead of NaN."""
    return df.astype(object).where(pd.notna(df), None).to_dict(orient="records")


class CsvDataAccess(DataAccess):
    """
    CSV-backed implementation.
    - Loads CSVs from `data_dir` once at construction.
    - Reads filter the loaded frames; writes update the frame and rewrite the
      matching CSV file so a restart sees them.
    """

    def __init__(self, data_dir: str | Path = None) -> None:
        if data_dir is None:
            config = get_config()
            data_dir = config.data_dir

        self.data_dir = Path(data_dir)
        self.logger = get_logger(__name__)

        # If the path is relative, make it relative to the repository root
        if not self.data_dir.is_absolute():
            # Try to find the repository root by looking for characteristic files
            current = Path.cwd()
            repo_root = None

            # Look up the directory tree for pyproject.toml
            for parent in [current] + list(current.parents):
                if (parent / "pyproject.toml").exists():
                    repo_root = parent
                    break

            if repo_root:
                self.data_dir = repo_root / self.data_dir
            else:
                # Fallback to current directory
                self.data_dir = current / self.data_dir

        self._write_lock = threading.Lock()
        self._tables = self._load_tables(self.data_dir)
        self.logger.info(
            f"Loaded {len(self._tables.clearances)} clearances and "
            f"{len(self._tables.inventory_lines)} inventory lines from {self.data_dir}"
        )

    # ---------- loading helpers ----------

    @staticmethod
    def _load_tables(data_dir: Path) -> _Tables:
        # Check if data directory exists
        if not data_dir.exists():
            raise FileNotFoundError(
                f"Data directory not found: {data_dir}\n"
                f"Please either:\n"
                f"  1. Generate sample data: python -m shibr.seed_data\n"
                f"  2. Set DATA_DIR environment variable to point to your data directory\n"
                f"  3. Create a .env file with DATA_DIR=/path/to/your/data"
            )

        # Required CSV files
        required_files = ["clearances.csv", "inventory_lines.csv"]
        missing_files = [f for f in required_files if not (data_dir / f).exists()]

        if missing_files:
            raise FileNotFoundError(
                f"Required CSV files missing in {data_dir}:\n"
                f"  Missing: {', '.join(missing_files)}\n"
                f"  Expected files: {', '.join(required_files)}\n\n"
                f"Please either:\n"
                f"  1. Generate sample data: python -m shibr.seed_data\n"
                f"  2. Ensure your data directory contains all required CSV files\n"
                f"  3. Set DATA_DIR environment variable to point to a directory with the required files"
            )

        try:
            clearances = pd.read_csv(data_dir / "clearances.csv", dtype=_ID_DTYPES)
            inventory_lines = pd.read_csv(data_dir / "inventory_lines.csv", dtype=_ID_DTYPES)

            # Optional tables: absent before the first settings save / approval
            platform_settings = pd.DataFrame(columns=SETTINGS_COLUMNS)
            settlements = pd.DataFrame(columns=SETTLEMENT_COLUMNS)

            if (data_dir / "platform_settings.csv").exists():
                platform_settings = pd.read_csv(data_dir / "platform_settings.csv", dtype={"key": str})
            if (data_dir / "settlements.csv").exists():
                settlements = pd.read_csv(data_dir / "settlements.csv", dtype=_ID_DTYPES)

        except Exception as e:
            raise RuntimeError(
                f"Error reading CSV files from {data_dir}: {e}\n"
                f"Please check that the CSV files are valid and readable."
            ) from e

        for col in ("product_name", "product_name_ar"):
            if col not in inventory_lines.columns:
                inventory_lines[col] = ""
            inventory_lines[col] = inventory_lines[col].fillna("")

        return _Tables(
            clearances=clearances,
            inventory_lines=inventory_lines,
            platform_settings=platform_settings,
            settlements=settlements,
        )

    def _write(self, df: pd.DataFrame, filename: str) -> None:
        df.to_csv(self.data_dir / filename, index=False)

    # ---------- interface implementation ----------

    def list_clearance_statuses(self) -> StringList:
        if self._tables.clearances.empty:
            return StringList(values=[])
        statuses = self._tables.clearances["status"].dropna().unique().tolist()
        return StringList(values=sorted(statuses))

    def list_store_names(self) -> StringList:
        if self._tables.clearances.empty:
            return StringList(values=[])
        names = self._tables.clearances["store_name"].dropna().unique().tolist()
        return StringList(values=sorted(names))

    def list_clearances(self, filters: ClearanceFilters) -> List[ClearanceResponse]:
        df = self._tables.clearances.copy()

        if filters.status:
            if isinstance(filters.status, str):
                df = df[df["status"] == filters.status]
            else:
                df = df[df["status"].isin(filters.status)]
        if filters.store_id:
            if isinstance(filters.store_id, str):
                df = df[df["store_id"] == filters.store_id]
            else:
                df = df[df["store_id"].isin(filters.store_id)]
        if filters.brand_id:
            if isinstance(filters.brand_id, str):
                df = df[df["brand_id"] == filters.brand_id]
            else:
                df = df[df["brand_id"].isin(filters.brand_id)]
        if filters.store_name:
            df = df[df["store_name"] == filters.store_name]

        return [ClearanceResponse(**row) for row in _records(df.reindex(columns=CLEARANCE_COLUMNS))]

    def get_clearance(self, clearance_id: str) -> Optional[ClearanceResponse]:
        df = self._tables.clearances
        rows = _records(df.loc[df["clearance_id"] == clearance_id].reindex(columns=CLEARANCE_COLUMNS))
        if not rows:
            return None
        return ClearanceResponse(**rows[0])

    def update_clearance_status(self, clearance_id: str, status: ClearanceStatus) -> None:
        with self._write_lock:
            df = self._tables.clearances
            mask = df["clearance_id"] == clearance_id
            if not mask.any():
                raise KeyError(f"Unknown clearance: {clearance_id}")
            df.loc[mask, "status"] = status
            self._write(df, "clearances.csv")

    def get_inventory_lines(self, clearance_id: str) -> List[InventoryLineItem]:
        df = self._tables.inventory_lines
        flt = df.loc[df["clearance_id"] == clearance_id, INVENTORY_COLUMNS[1:]]
        return [InventoryLineItem(**row) for row in _records(flt)]

    def get_platform_settings(self) -> Optional[PlatformSettings]:
        df = self._tables.platform_settings
        if df.empty:
            return None

        values = {}
        updated_at = None
        for row in _records(df):
            if row["key"] in SETTINGS_KEYS and row["value"] is not None:
                values[row["key"]] = float(row["value"])
            if row.get("updated_at"):
                ts = pd.to_datetime(row["updated_at"]).to_pydatetime()
                updated_at = ts if updated_at is None else max(updated_at, ts)
        if not values:
            return None
        return PlatformSettings(**values, updated_at=updated_at)

    def save_platform_settings(self, settings: PlatformSettings) -> None:
        updated_at = (settings.updated_at or datetime.now()).isoformat(timespec="seconds")
        df = pd.DataFrame(
            [{"key": key, "value": getattr(settings, key), "updated_at": updated_at} for key in SETTINGS_KEYS],
            columns=SETTINGS_COLUMNS,
        )
        with self._write_lock:
            self._tables.platform_settings = df
            self._write(df, "platform_settings.csv")

    def get_settlement_record(self, clearance_id: str) -> Optional[SettlementRecord]:
        df = self._tables.settlements
        rows = _records(df.loc[df["clearance_id"] == clearance_id])
        if not rows:
            return None
        row = rows[0]
        return SettlementRecord(
            clearance_id=row["clearance_id"],
            settlement=SettlementCalculation.model_validate_json(row["settlement_json"]),
            calculated_at=row["calculated_at"],
            calculated_by=row["calculated_by"],
            approved_at=row["approved_at"],
            approved_by=row["approved_by"],
        )

    def save_settlement_record(self, record: SettlementRecord) -> None:
        row = {
            "clearance_id": record.clearance_id,
            "settlement_json": record.settlement.model_dump_json(),
            "calculated_at": record.calculated_at.isoformat(),
            "calculated_by": record.calculated_by,
            "approved_at": record.approved_at.isoformat(),
            "approved_by": record.approved_by,
        }
        with self._write_lock:
            df = self._tables.settlements
            if (df["clearance_id"] == record.clearance_id).any():
                raise ValueError(f"Settlement already stored for clearance {record.clearance_id}")
            df = pd.concat([df, pd.DataFrame([row], columns=SETTLEMENT_COLUMNS)], ignore_index=True)
            self._tables.settlements = df
            self._write(df, "settlements.csv")

    def close(self) -> None:
        self.logger.debug(f"Closing CSV data access for {self.data_dir}")

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from shibr.config import AppConfig, get_config
from shibr.data.interface import DataAccess
from shibr.data.models import (
    CLEARANCE_STATUSES,
    ClearanceResponse,
    InventoryLineItem,
    PlatformSettings,
    SettlementCalculation,
    SettlementRecord,
    StorePayout,
)
from shibr.finance.errors import ClearanceNotFoundError, InvalidInputError, SettlementAlreadyApprovedError
from shibr.finance.settlement import calculate_settlement
from shibr.logging import get_logger

APPROVABLE_STATUSES = CLEARANCE_STATUSES[: CLEARANCE_STATUSES.index("settlement_approved")]


@dataclass(frozen=True)
class ClearanceSession:
    """Everything one settlement needs, read once and passed along explicitly."""
    clearance: ClearanceResponse
    lines: List[InventoryLineItem]
    settings: PlatformSettings

    @property
    def has_inventory(self) -> bool:
        return bool(self.lines)

    @property
    def is_inventory_balanced(self) -> bool:
        return all(line.is_balanced for line in self.lines)


class ClearanceService:
    """Runs settlements for clearances stored behind a DataAccess."""

    def __init__(self, data_access: DataAccess, config: Optional[AppConfig] = None) -> None:
        self.data_access = data_access
        self.config = config or get_config()
        self.logger = get_logger(__name__)

    # ---------- platform settings ----------

    def default_platform_settings(self) -> PlatformSettings:
        return PlatformSettings(
            brand_sales_commission=self.config.default_brand_sales_commission,
            store_rent_commission=self.config.default_store_rent_commission,
        )

    def resolve_platform_settings(self) -> PlatformSettings:
        """Stored settings, or the configured defaults when none were saved yet."""
        settings = self.data_access.get_platform_settings()
        if settings is None:
            self.logger.info("No platform settings stored; using default commission rates")
            return self.default_platform_settings()
        return settings

    def update_platform_settings(
        self,
        brand_sales_commission: Optional[float] = None,
        store_rent_commission: Optional[float] = None,
        now: Optional[datetime] = None,
    ) -> PlatformSettings:
        """Change one or both commission rates. Rates must lie in [0, 100]."""
        for field, value in (
            ("brand_sales_commission", brand_sales_commission),
            ("store_rent_commission", store_rent_commission),
        ):
            if value is not None and not 0 <= value <= 100:
                raise InvalidInputError(field, value, "must be between 0 and 100")

        current = self.resolve_platform_settings()
        settings = PlatformSettings(
            brand_sales_commission=current.brand_sales_commission if brand_sales_commission is None else brand_sales_commission,
            store_rent_commission=current.store_rent_commission if store_rent_commission is None else store_rent_commission,
            updated_at=now or datetime.now(),
        )
        self.data_access.save_platform_settings(settings)
        self.logger.info(
            f"Platform settings updated: brand sales {settings.brand_sales_commission}%, "
            f"store rent {settings.store_rent_commission}%"
        )
        return settings

    # ---------- settlement ----------

    def open_session(self, clearance_id: str) -> ClearanceSession:
        clearance = self.data_access.get_clearance(clearance_id)
        if clearance is None:
            raise ClearanceNotFoundError(clearance_id)
        return ClearanceSession(
            clearance=clearance,
            lines=self.data_access.get_inventory_lines(clearance_id),
            settings=self.resolve_platform_settings(),
        )

    def calculate(self, session: ClearanceSession) -> SettlementCalculation:
        return calculate_settlement(
            session.lines,
            platform_commission_rate=session.settings.brand_sales_commission,
            store_commission_rate=session.settings.store_rent_commission,
            strict=self.config.strict_inventory_check,
        )

    def approve_settlement(
        self,
        clearance_id: str,
        approved_by: str,
        now: Optional[datetime] = None,
    ) -> SettlementRecord:
        """Calculate, freeze and persist the settlement of a clearance.

        Raises:
            ClearanceNotFoundError: Unknown clearance.
            SettlementAlreadyApprovedError: A settlement was already approved.
            InvalidInputError, InventoryMismatchError: The calculation failed;
                the clearance keeps its current status.

        The status moves first and the record is saved after it. When saving
        fails the previous status is restored, so the approval can be retried.
        """
        session = self.open_session(clearance_id)
        status = session.clearance.status
        if status not in APPROVABLE_STATUSES or self.data_access.get_settlement_record(clearance_id):
            self.logger.warning(f"Refusing to re-approve settlement for clearance {clearance_id} ({status})")
            raise SettlementAlreadyApprovedError(clearance_id, status)

        calculated_at = now or datetime.now()
        settlement = self.calculate(session)
        record = SettlementRecord(
            clearance_id=clearance_id,
            settlement=settlement,
            calculated_at=calculated_at,
            calculated_by=approved_by,
            approved_at=calculated_at,
            approved_by=approved_by,
        )
        self.data_access.update_clearance_status(clearance_id, "settlement_approved")
        try:
            self.data_access.save_settlement_record(record)
        except Exception:
            self.logger.error(f"Saving settlement for clearance {clearance_id} failed; restoring status {status}")
            self.data_access.update_clearance_status(clearance_id, status)
            raise
        self.logger.info(
            f"Settlement approved for clearance {clearance_id} by {approved_by}: "
            f"store payout {settlement.store_payout_amount}, brand total {settlement.brand_total_amount}"
        )
        return record

    def create_store_payout(self, record: SettlementRecord, store_id: str) -> Optional[StorePayout]:
        """Payout of the store's commission; None when there is nothing to pay."""
        amount = record.settlement.store_payout_amount
        if amount <= 0:
            return None
        return StorePayout(
            clearance_id=record.clearance_id,
            store_id=store_id,
            amount=amount,
            net_amount=amount,
            description=f"Store commission payout for clearance {record.clearance_id}",
        )

from __future__ import annotations

from datetime import datetime
from typing import List, Literal

from pydantic import BaseModel, ConfigDict, Field

from shibr.finance.rounding import round2

from .inventory import InventoryLineItem, InventoryMismatch


class SettlementCalculation(BaseModel):
    """Financial outcome of one rental clearance.

    Monetary fields are rounded to 2 decimals. Totals are sums of per-line
    rounded values, so ``total_sales_with_tax`` may differ from
    ``total_sales * 1.15`` by a cent.
    """
    model_config = ConfigDict(frozen=True)

    total_sales: float = Field(description="Sum of line sales values, tax-exclusive")
    total_sales_with_tax: float = Field(description="Sum of line sales values incl. VAT")
    total_sold_units: int = Field(description="Units sold across all lines")
    total_returned_units: int = Field(description="Units returned to the brand across all lines")
    platform_commission_rate: float = Field(description="Platform commission (%)")
    platform_commission_amount: float = Field(description="Platform commission on total_sales")
    store_commission_rate: float = Field(description="Store commission (%)")
    store_commission_amount: float = Field(description="Store commission on total_sales")
    store_payout_amount: float = Field(description="Amount transferred to the store")
    return_inventory_value: float = Field(description="Value of returned units at unit price, untaxed")
    brand_total_amount: float = Field(description="Sales minus platform and store commissions")
    breakdown: List[InventoryLineItem] = Field(default_factory=list, description="Reconciled lines")
    warnings: List[InventoryMismatch] = Field(default_factory=list, description="Lines whose quantities do not add up")

    @property
    def is_empty(self) -> bool:
        return not self.breakdown

    @property
    def vat_amount(self) -> float:
        return round2(self.total_sales_with_tax - self.total_sales)


class SettlementRecord(BaseModel):
    """Approved settlement as persisted with the clearance. Never modified."""
    model_config = ConfigDict(frozen=True)

    clearance_id: str = Field(description="Clearance this settlement closes")
    settlement: SettlementCalculation = Field(description="The approved calculation")
    calculated_at: datetime = Field(description="When the calculation ran")
    calculated_by: str = Field(description="Who triggered the calculation")
    approved_at: datetime = Field(description="When the settlement was approved")
    approved_by: str = Field(description="Admin who approved the settlement")


class StorePayout(BaseModel):
    """Store commission payout created after settlement approval."""
    clearance_id: str = Field(description="Clearance the payout belongs to")
    store_id: str = Field(description="Store receiving the payout")
    amount: float = Field(description="Gross payout amount")
    platform_fee: float = Field(default=0.0, description="Fee withheld; commissions are already deducted")
    net_amount: float = Field(description="Amount to transfer")
    transfer_status: Literal["pending", "completed", "failed"] = Field(default="pending", description="Bank transfer status")
    description: str = Field(default="", description="Payout description shown on statements")

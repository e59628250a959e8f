from __future__ import annotations

from datetime import date
from typing import Literal, Optional, get_args

from pydantic import BaseModel, Field

ClearanceStatus = Literal[
    "not_started",
    "pending_inventory_check",
    "pending_return_shipment",
    "return_shipped",
    "return_received",
    "pending_settlement",
    "settlement_approved",
    "payment_completed",
    "closed",
]

CLEARANCE_STATUSES: tuple[str, ...] = get_args(ClearanceStatus)


class ClearanceResponse(BaseModel):
    """Response model for rental clearance data."""
    clearance_id: str = Field(description="Unique clearance identifier")
    rental_request_id: str = Field(description="Rental being closed out")
    store_id: str = Field(description="Store that rented out the shelf")
    store_name: str = Field(description="Store display name")
    brand_id: str = Field(description="Brand that stocked the shelf")
    brand_name: str = Field(description="Brand display name")
    status: ClearanceStatus = Field(description="Current clearance workflow status")
    start_date: Optional[date] = Field(default=None, description="Rental start date")
    end_date: Optional[date] = Field(default=None, description="Rental end date")

    @property
    def is_settled(self) -> bool:
        """True once the settlement has been approved (or the clearance went further)."""
        return CLEARANCE_STATUSES.index(self.status) >= CLEARANCE_STATUSES.index("settlement_approved")

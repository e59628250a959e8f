from __future__ import annotations

from typing import List, Optional, Protocol

from .models import (
    # Filter classes
    ClearanceFilters,
    # Response models
    ClearanceResponse,
    ClearanceStatus,
    InventoryLineItem,
    PlatformSettings,
    SettlementRecord,
    # List response models
    StringList,
)


# ---- Data access protocol ----

class DataAccess(Protocol):
    """
    Backend-agnostic contract used by the clearance service and the viewer.

    The settlement calculator never talks to a DataAccess directly: callers
    read what they need (lines, one settings snapshot) and pass it in.
    """

    # Queries to populate dropdowns and filters

    def list_clearance_statuses(self) -> StringList:
        """List the statuses present in the data."""
        ...

    def list_store_names(self) -> StringList:
        """List all store names that have clearances."""
        ...

    # Clearance data queries
    def list_clearances(self, filters: ClearanceFilters) -> List[ClearanceResponse]:
        """Get clearances based on filters."""
        ...

    def get_clearance(self, clearance_id: str) -> Optional[ClearanceResponse]:
        """Get one clearance, or None if it does not exist."""
        ...

    def update_clearance_status(self, clearance_id: str, status: ClearanceStatus) -> None:
        """Move a clearance to a new workflow status."""
        ...

    # Inventory reconciliation queries
    def get_inventory_lines(self, clearance_id: str) -> List[InventoryLineItem]:
        """Get the inventory reconciliation lines of a clearance, in stored order."""
        ...

    # Platform settings
    def get_platform_settings(self) -> Optional[PlatformSettings]:
        """Get the stored platform settings, or None before the first save."""
        ...

    def save_platform_settings(self, settings: PlatformSettings) -> None:
        """Replace the stored platform settings."""
        ...

    # Approved settlements
    def get_settlement_record(self, clearance_id: str) -> Optional[SettlementRecord]:
        """Get the approved settlement of a clearance, if any."""
        ...

    def save_settlement_record(self, record: SettlementRecord) -> None:
        """Persist an approved settlement. Existing records are never overwritten."""
        ...

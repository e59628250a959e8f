from .data_filters import ClearanceFilters

from .clearances import CLEARANCE_STATUSES, ClearanceResponse, ClearanceStatus
from .inventory import InventoryLineItem, InventoryMismatch
from .platform_settings import PlatformSettings
from .settlement import SettlementCalculation, SettlementRecord, StorePayout
from .tax_totals import BasePriceItem, InclusivePriceItem, TaxTotals
from .list_response import StringList

__all__ = [
    # Filter classes
    "ClearanceFilters",
    # Clearances
    "CLEARANCE_STATUSES",
    "ClearanceResponse",
    "ClearanceStatus",
    # Inventory reconciliation
    "InventoryLineItem",
    "InventoryMismatch",
    # Settlement
    "PlatformSettings",
    "SettlementCalculation",
    "SettlementRecord",
    "StorePayout",
    # Tax
    "BasePriceItem",
    "InclusivePriceItem",
    "TaxTotals",
    # List response models
    "StringList",
]

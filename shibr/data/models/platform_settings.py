from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class PlatformSettings(BaseModel):
    """Commission configuration read at settlement time.

    Both rates are percentages in [0, 100]; the range is checked whenever a
    settings object is built, which is the only time settings are written.
    """
    brand_sales_commission: float = Field(default=8.0, ge=0, le=100, allow_inf_nan=False, description="Platform commission on brand sales (%)")
    store_rent_commission: float = Field(default=10.0, ge=0, le=100, allow_inf_nan=False, description="Store commission on brand sales (%)")
    updated_at: Optional[datetime] = Field(default=None, description="Last update; None when defaults are in use")

    @property
    def is_default(self) -> bool:
        return self.updated_at is None

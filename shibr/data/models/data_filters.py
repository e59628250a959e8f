from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class ClearanceFilters(BaseModel):
    """Filters for the clearance data."""
    status: Optional[str | list[str]] = Field(default=None, description="Status filter (single status or list of statuses)")
    store_id: Optional[str | list[str]] = Field(default=None, description="Store ID filter (single store or list of stores)")
    brand_id: Optional[str | list[str]] = Field(default=None, description="Brand ID filter (single brand or list of brands)")
    store_name: Optional[str] = Field(default=None, description="Exact store name")

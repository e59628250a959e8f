from __future__ import annotations

from pydantic import BaseModel, Field


class InventoryLineItem(BaseModel):
    """One product's reconciliation line within a rental clearance."""
    product_id: str = Field(description="Product identifier, unique within a clearance")
    product_name: str = Field(default="", description="Product display name")
    product_name_ar: str = Field(default="", description="Localized (Arabic) product display name")
    initial_quantity: int = Field(description="Quantity placed on the shelf at rental start")
    sold_quantity: int = Field(description="Quantity sold through the storefront during the rental")
    remaining_quantity: int = Field(description="Quantity left on the shelf and returned to the brand")
    unit_price: float = Field(description="Tax-exclusive base price per unit")
    total_sales_value: float = Field(default=0.0, description="unit_price * sold_quantity, rounded (derived)")
    total_sales_with_tax: float = Field(default=0.0, description="total_sales_value incl. 15% VAT, rounded (derived)")

    @property
    def is_balanced(self) -> bool:
        return self.initial_quantity == self.sold_quantity + self.remaining_quantity


class InventoryMismatch(BaseModel):
    """A line whose counted quantities do not add up."""
    product_id: str = Field(description="Product identifier of the offending line")
    initial_quantity: int = Field(description="Quantity placed on the shelf at rental start")
    sold_quantity: int = Field(description="Quantity sold during the rental")
    remaining_quantity: int = Field(description="Quantity reported as remaining")
    difference: int = Field(description="initial - sold - remaining (units unaccounted for when positive)")

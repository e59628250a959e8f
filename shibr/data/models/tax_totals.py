from __future__ import annotations

from pydantic import BaseModel, Field


class BasePriceItem(BaseModel):
    """Order line priced tax-exclusive."""
    base_price: float = Field(description="Tax-exclusive unit price")
    quantity: int = Field(description="Units ordered")


class InclusivePriceItem(BaseModel):
    """Cart line priced tax-inclusive."""
    inclusive_price: float = Field(description="Tax-inclusive unit price")
    quantity: int = Field(description="Units in the cart")


class TaxTotals(BaseModel):
    """Subtotal / VAT / total triple."""
    subtotal: float = Field(description="Tax-exclusive amount")
    tax: float = Field(description="VAT amount")
    total: float = Field(description="Tax-inclusive amount")

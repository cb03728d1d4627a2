"""
Billing Models for Retail POS Billing
The bill handed to receipt and reporting, rounded to currency precision
"""

from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field

from retail_pos.models.offer import OfferType
from retail_pos.models.tax import GSTBreakdown, SaleTaxSummary, TaxCalculationMethod


class BillLine(BaseModel):
    """One line of the bill"""

    product_id: str = Field(..., description="Product identifier")
    product_name: str = Field(default="", description="Product name")
    quantity: Decimal = Field(..., description="Quantity")
    unit_price: Decimal = Field(..., description="Unit price as charged")
    line_amount: Decimal = Field(..., description="Quantity x unit price")
    hsn_code: Optional[str] = Field(default=None, description="HSN code")
    gst_rate: Decimal = Field(..., description="Total GST rate")
    cess_rate: Decimal = Field(default=Decimal("0"), description="Cess rate")
    tax_calculation_method: TaxCalculationMethod
    taxable_amount: Decimal = Field(..., description="Taxable value")
    tax: GSTBreakdown = Field(..., description="Tax by component")
    total_amount: Decimal = Field(..., description="Taxable value + tax")


class AppliedOffer(BaseModel):
    """An offer accepted for the bill"""

    offer_id: str
    name: str = ""
    offer_type: OfferType
    priority: int
    discount: Decimal


class CartBill(BaseModel):
    """Complete bill for a cart"""

    currency: str = Field(default="INR", description="Currency code")
    lines: List[BillLine] = Field(default_factory=list)
    cart_total: Decimal = Field(..., description="Sum of line amounts, basis for offers")
    tax_summary: SaleTaxSummary = Field(..., description="GST totals and rate-wise summary")
    applied_offers: List[AppliedOffer] = Field(default_factory=list)
    total_discount: Decimal = Field(default=Decimal("0"), description="Combined discount")
    payable_total: Decimal = Field(..., description="Grand total less discount")
    is_inter_state: bool = Field(default=False, description="IGST applies")

    model_config = {
        "json_schema_extra": {
            "example": {
                "currency": "INR",
                "cart_total": "1000.00",
                "total_discount": "150.00",
                "payable_total": "1030.00",
                "is_inter_state": False
            }
        }
    }

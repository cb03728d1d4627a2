"""
Tax Models for Retail POS Billing
Pydantic models for product tax configuration and GST breakdowns
"""

from decimal import Decimal
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from retail_pos.core.money import ZERO, round_currency
from retail_pos.core.states import StateCode, resolve_state_code


class TaxCalculationMethod(str, Enum):
    """Whether a listed amount already contains tax"""
    INCLUSIVE = "inclusive"
    EXCLUSIVE = "exclusive"


class TaxSelectionMode(str, Enum):
    """How a product's component rates are maintained"""
    AUTO = "auto"
    MANUAL = "manual"


def _optional_str(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    return str(value)


# ============================================================================
# JURISDICTION
# ============================================================================

class Jurisdiction(BaseModel):
    """
    Supplier and buyer states for a sale.

    States given as names or codes are resolved to StateCode on
    construction. A missing state on either side means intra-state.
    """

    supplier_state: Optional[StateCode] = Field(
        default=None,
        description="State of supply (seller location)"
    )
    buyer_state: Optional[StateCode] = Field(
        default=None,
        description="State of billing (buyer location)"
    )

    model_config = {"frozen": True}

    @field_validator("supplier_state", "buyer_state", mode="before")
    @classmethod
    def resolve_state(cls, v):
        return resolve_state_code(v)

    @property
    def is_inter_state(self) -> bool:
        if self.supplier_state is None or self.buyer_state is None:
            return False
        return self.supplier_state != self.buyer_state


# ============================================================================
# PRODUCT
# ============================================================================

class Product(BaseModel):
    """Tax-relevant fields of a catalog product"""

    id: str = Field(..., description="Product identifier")
    name: str = Field(default="", description="Product name")
    price: Decimal = Field(default=ZERO, description="Selling price")
    mrp: Optional[Decimal] = Field(default=None, ge=0, description="Maximum retail price")
    hsn_code: Optional[str] = Field(default=None, description="HSN code")
    gst_rate: Optional[Decimal] = Field(default=None, ge=0, le=100, description="Total GST rate")
    cgst_rate: Optional[Decimal] = Field(default=None, ge=0, le=100)
    sgst_rate: Optional[Decimal] = Field(default=None, ge=0, le=100)
    igst_rate: Optional[Decimal] = Field(default=None, ge=0, le=100)
    cess_rate: Decimal = Field(default=ZERO, ge=0, description="Cess rate, additive to GST")
    tax_calculation_method: TaxCalculationMethod = Field(
        default=TaxCalculationMethod.EXCLUSIVE,
        description="Whether price includes tax"
    )
    tax_selection_mode: TaxSelectionMode = Field(
        default=TaxSelectionMode.AUTO,
        description="auto derives CGST/SGST/IGST from the GST rate"
    )
    category_id: Optional[str] = Field(default=None, description="Product category")

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v):
        return str(v)

    @field_validator("category_id", "hsn_code", mode="before")
    @classmethod
    def coerce_optional_str(cls, v):
        return _optional_str(v)

    @model_validator(mode="after")
    def apply_tax_selection(self):
        if self.tax_selection_mode == TaxSelectionMode.AUTO:
            if self.gst_rate is not None:
                half = self.gst_rate / 2
                self.cgst_rate = half
                self.sgst_rate = half
                self.igst_rate = self.gst_rate
            return self

        if self.igst_rate is None and self.cgst_rate is not None and self.sgst_rate is not None:
            self.igst_rate = self.cgst_rate + self.sgst_rate
        if self.gst_rate is None and self.igst_rate is not None:
            self.gst_rate = self.igst_rate
        return self


# ============================================================================
# RATE AND AMOUNT BREAKDOWNS
# ============================================================================

class RateSplit(BaseModel):
    """GST rate decomposed for a jurisdiction"""

    cgst: Decimal = ZERO
    sgst: Decimal = ZERO
    igst: Decimal = ZERO
    cess: Decimal = ZERO
    is_inter_state: bool = False

    model_config = {"frozen": True}

    @property
    def gst_rate(self) -> Decimal:
        return self.cgst + self.sgst + self.igst

    @property
    def total_rate(self) -> Decimal:
        return self.gst_rate + self.cess


class LineTax(BaseModel):
    """Base, tax and total for one amount at one rate"""

    base_amount: Decimal
    tax_amount: Decimal
    total: Decimal

    model_config = {"frozen": True}


class GSTBreakdown(BaseModel):
    """Tax amounts by component; derived, never persisted"""

    cgst: Decimal = ZERO
    sgst: Decimal = ZERO
    igst: Decimal = ZERO
    cess: Decimal = ZERO
    total: Decimal = ZERO
    is_inter_state: bool = False

    model_config = {"frozen": True}

    def rounded(self, places: int = 2) -> "GSTBreakdown":
        return GSTBreakdown(
            cgst=round_currency(self.cgst, places),
            sgst=round_currency(self.sgst, places),
            igst=round_currency(self.igst, places),
            cess=round_currency(self.cess, places),
            total=round_currency(self.total, places),
            is_inter_state=self.is_inter_state,
        )


class SaleLine(BaseModel):
    """A priced cart line with its resolved tax. Immutable once built."""

    product_id: str
    product_name: str = ""
    quantity: Decimal
    unit_price: Decimal
    line_amount: Decimal = Field(..., description="Quantity x unit price as entered")
    hsn_code: Optional[str] = None
    category_id: Optional[str] = None
    tax_calculation_method: TaxCalculationMethod
    rates: RateSplit
    base_amount: Decimal = Field(..., description="Taxable value")
    tax: GSTBreakdown
    total_amount: Decimal = Field(..., description="Base amount + total tax")

    model_config = {"frozen": True}


class RateWiseSummary(BaseModel):
    """Taxes grouped by GST rate (for invoice/filing)"""

    gst_rate: Decimal
    taxable_amount: Decimal = ZERO
    cgst_amount: Decimal = ZERO
    sgst_amount: Decimal = ZERO
    igst_amount: Decimal = ZERO
    cess_amount: Decimal = ZERO
    total_tax: Decimal = ZERO


class SaleTaxSummary(BaseModel):
    """Aggregated GST for a sale"""

    taxable_total: Decimal = ZERO
    cgst_total: Decimal = ZERO
    sgst_total: Decimal = ZERO
    igst_total: Decimal = ZERO
    cess_total: Decimal = ZERO
    tax_total: Decimal = ZERO
    grand_total: Decimal = ZERO
    is_inter_state: bool = False
    supply_state: Optional[StateCode] = None
    billing_state: Optional[StateCode] = None
    rate_wise_summary: List[RateWiseSummary] = Field(default_factory=list)

    @property
    def breakdown(self) -> GSTBreakdown:
        return GSTBreakdown(
            cgst=self.cgst_total,
            sgst=self.sgst_total,
            igst=self.igst_total,
            cess=self.cess_total,
            total=self.tax_total,
            is_inter_state=self.is_inter_state,
        )

    def rounded(self, places: int = 2) -> "SaleTaxSummary":
        """Copy with every amount rounded to currency precision."""
        def r(value: Decimal) -> Decimal:
            return round_currency(value, places)

        return self.model_copy(update={
            "taxable_total": r(self.taxable_total),
            "cgst_total": r(self.cgst_total),
            "sgst_total": r(self.sgst_total),
            "igst_total": r(self.igst_total),
            "cess_total": r(self.cess_total),
            "tax_total": r(self.tax_total),
            "grand_total": r(self.grand_total),
            "rate_wise_summary": [
                RateWiseSummary(
                    gst_rate=row.gst_rate,
                    taxable_amount=r(row.taxable_amount),
                    cgst_amount=r(row.cgst_amount),
                    sgst_amount=r(row.sgst_amount),
                    igst_amount=r(row.igst_amount),
                    cess_amount=r(row.cess_amount),
                    total_tax=r(row.total_tax),
                )
                for row in self.rate_wise_summary
            ],
        })

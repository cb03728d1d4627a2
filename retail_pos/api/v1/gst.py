"""
GST API Endpoints for Retail POS Billing
REST APIs for GST rate lookup and line tax calculation
"""

from decimal import Decimal
from typing import List

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from retail_pos.core.gst_config import get_all_gst_rates, get_hsn_entry
from retail_pos.core.validation import require_hsn_code, validate_tax_rate
from retail_pos.models.tax import (
    GSTBreakdown,
    Jurisdiction,
    LineTax,
    RateSplit,
    TaxCalculationMethod,
)
from retail_pos.services.line_tax_calculator import compute_breakdown
from retail_pos.services.tax_rate_resolver import split_rate

router = APIRouter(prefix="/gst", tags=["GST"])


# ============================================================================
# REQUEST/RESPONSE MODELS
# ============================================================================

class HSNRateResponse(BaseModel):
    """GST rate listed for an HSN code"""
    hsn_code: str
    description: str
    gst_rate: Decimal
    cess_rate: Decimal


class SplitRateRequest(BaseModel):
    """Request to split a GST rate for a jurisdiction"""
    rate: Decimal = Field(..., description="Total GST rate (e.g., 18)")
    cess_rate: Decimal = Field(default=Decimal("0"), ge=0, description="Cess rate")
    jurisdiction: Jurisdiction = Field(default_factory=Jurisdiction)


class LineTaxRequest(BaseModel):
    """Request to compute tax for one line amount"""
    amount: Decimal = Field(..., description="Line amount; negative for returns")
    rate: Decimal = Field(..., description="Total GST rate")
    cess_rate: Decimal = Field(default=Decimal("0"), ge=0, description="Cess rate")
    mode: TaxCalculationMethod = Field(default=TaxCalculationMethod.EXCLUSIVE)
    jurisdiction: Jurisdiction = Field(default_factory=Jurisdiction)


class LineTaxResponse(BaseModel):
    """Unrounded line tax with its component breakdown"""
    line: LineTax
    rates: RateSplit
    breakdown: GSTBreakdown


# ============================================================================
# RATE ENDPOINTS
# ============================================================================

@router.get(
    "/rates",
    response_model=List[Decimal],
    summary="List GST slabs"
)
async def list_gst_rates():
    """Return the GST rate slabs (0, 5, 12, 18, 28, 40)."""
    return get_all_gst_rates()


@router.get(
    "/hsn/{hsn_code}",
    response_model=HSNRateResponse,
    summary="Lookup HSN code",
    description="Get the listed GST rate for an HSN code"
)
async def get_hsn_rate(hsn_code: str):
    """
    Get GST information for an HSN code.

    Raises:
        400: HSN code is not 4, 6, or 8 digits
        404: HSN code not in the rate table (billing uses the default rate)
    """
    entry = get_hsn_entry(require_hsn_code(hsn_code))
    if entry is None:
        raise HTTPException(
            status_code=404,
            detail=f"HSN code {hsn_code} not found in rate table"
        )
    return HSNRateResponse(
        hsn_code=entry.hsn_code,
        description=entry.description,
        gst_rate=entry.rate,
        cess_rate=entry.cess_rate,
    )


# ============================================================================
# CALCULATION ENDPOINTS
# ============================================================================

@router.post(
    "/split",
    response_model=RateSplit,
    summary="Split GST rate",
    description="CGST/SGST for intra-state, IGST for inter-state"
)
async def split_gst_rate(request: SplitRateRequest):
    """Split a rate for the given supplier and buyer states."""
    rate = validate_tax_rate(request.rate)
    return split_rate(
        rate,
        request.jurisdiction.supplier_state,
        request.jurisdiction.buyer_state,
        request.cess_rate,
    )


@router.post(
    "/line",
    response_model=LineTaxResponse,
    summary="Compute line tax"
)
async def compute_line_tax(request: LineTaxRequest):
    """Compute base amount, tax and total for one line, by component."""
    rate = validate_tax_rate(request.rate)
    rates = split_rate(
        rate,
        request.jurisdiction.supplier_state,
        request.jurisdiction.buyer_state,
        request.cess_rate,
    )

    line, breakdown = compute_breakdown(request.amount, rates, request.mode)
    return LineTaxResponse(line=line, rates=rates, breakdown=breakdown)

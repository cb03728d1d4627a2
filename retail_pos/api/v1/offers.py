"""
Offer API Endpoints for Retail POS Billing
Evaluate an offer catalog against a cart and stack the results
"""

from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional

from fastapi import APIRouter
from pydantic import BaseModel, Field

from retail_pos.core.money import ZERO
from retail_pos.models.offer import (
    ApplicableOffer,
    CartLine,
    CustomerLoyalty,
    Offer,
    OfferUsage,
)
from retail_pos.services.billing_service import billing_service
from retail_pos.services.offer_evaluator import evaluate_all
from retail_pos.services.offer_stacker import stack

router = APIRouter(prefix="/offers", tags=["Offers"])


class EvaluateOffersRequest(BaseModel):
    """Cart and offer catalog to evaluate"""
    cart_lines: List[CartLine] = Field(..., description="Cart lines with unit prices")
    offers: List[Offer] = Field(default_factory=list, description="Active offer catalog")
    cart_total: Optional[Decimal] = Field(
        default=None,
        description="Cart total; sum of quantity x unit price when omitted"
    )
    customer_loyalty: Optional[CustomerLoyalty] = None
    usage: Dict[str, OfferUsage] = Field(default_factory=dict, description="Counters by offer id")
    now: Optional[datetime] = Field(default=None, description="Evaluation time")


class EvaluateOffersResponse(BaseModel):
    """Applicable offers and the stacked selection"""
    cart_total: Decimal
    applicable: List[ApplicableOffer]
    selected: List[ApplicableOffer]
    skipped: List[ApplicableOffer]
    total_discount: Decimal


@router.post(
    "/evaluate",
    response_model=EvaluateOffersResponse,
    summary="Evaluate offers for a cart"
)
async def evaluate_offers(request: EvaluateOffersRequest):
    """
    Evaluate every offer against the cart, then stack the applicable ones
    by priority within the cart total.
    """
    cart_total = request.cart_total
    if cart_total is None:
        cart_total = sum((line.line_amount for line in request.cart_lines), ZERO)

    applicable = evaluate_all(
        request.offers,
        request.cart_lines,
        cart_total,
        customer_loyalty=request.customer_loyalty,
        now=request.now,
        usage=request.usage,
        currency_places=billing_service.config.currency_places,
    )
    result = stack(applicable, cart_total)

    return EvaluateOffersResponse(
        cart_total=cart_total,
        applicable=applicable,
        selected=result.selected,
        skipped=result.skipped,
        total_discount=result.total_discount,
    )

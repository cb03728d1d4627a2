"""
Billing API Endpoints for Retail POS Billing
Full cart quote: line taxes, offers, payable total
"""

from datetime import datetime
from typing import Dict, List, Optional

from fastapi import APIRouter
from pydantic import BaseModel, Field

from retail_pos.models.billing import CartBill
from retail_pos.models.offer import CartLine, CustomerLoyalty, Offer, OfferUsage
from retail_pos.models.tax import Product
from retail_pos.core.logging_config import get_logger
from retail_pos.services.billing_service import billing_service

logger = get_logger(__name__)

router = APIRouter(prefix="/billing", tags=["Billing"])


class QuoteRequest(BaseModel):
    """Cart to price"""
    cart_lines: List[CartLine] = Field(..., min_length=1, description="Lines in the cart")
    products: List[Product] = Field(..., description="Products referenced by the lines")
    offers: List[Offer] = Field(default_factory=list, description="Offer catalog")
    supplier_state: Optional[str] = Field(
        default=None,
        description="Seller state code or name; business state when omitted"
    )
    buyer_state: Optional[str] = Field(default=None, description="Buyer state code or name")
    customer_loyalty: Optional[CustomerLoyalty] = None
    usage: Dict[str, OfferUsage] = Field(default_factory=dict)
    now: Optional[datetime] = None

    model_config = {
        "json_schema_extra": {
            "example": {
                "cart_lines": [{"product_id": "P1", "quantity": 5}],
                "products": [{"id": "P1", "price": "100.00", "hsn_code": "0902"}],
                "offers": [{
                    "id": "BOGO",
                    "offer_type": "buy_x_get_y",
                    "buy_quantity": 2,
                    "get_quantity": 1,
                    "priority": 1
                }],
                "buyer_state": "Maharashtra"
            }
        }
    }


@router.post(
    "/quote",
    response_model=CartBill,
    summary="Quote a cart"
)
async def quote_cart(request: QuoteRequest):
    """
    Price a cart: GST per line, applicable offers stacked by priority,
    totals rounded to currency.

    Raises:
        400: unknown supplier or buyer state
        404: a cart line references a product not in `products`
    """
    jurisdiction = billing_service.jurisdiction_for(
        buyer_state=request.buyer_state,
        supplier_state=request.supplier_state,
    )
    logger.debug(
        f"Quoting {len(request.cart_lines)} lines, inter_state={jurisdiction.is_inter_state}"
    )
    return billing_service.quote(
        cart_lines=request.cart_lines,
        products=request.products,
        offers=request.offers,
        jurisdiction=jurisdiction,
        customer_loyalty=request.customer_loyalty,
        now=request.now,
        usage=request.usage,
    )

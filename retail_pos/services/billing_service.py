"""
Billing Service for Retail POS Billing

Runs a cart through the pricing pipeline:
- Per-line GST (CGST/SGST or IGST, cess) in the product's calculation method
- Offer evaluation against the cart total
- Greedy offer stacking
- Rounding to currency for the presented bill

Usage:
    from retail_pos.services.billing_service import billing_service

    bill = billing_service.quote(
        cart_lines=[CartLine(product_id="P1", quantity=2)],
        products=[Product(id="P1", price=Decimal("100"), gst_rate=Decimal("18"))],
        offers=offers,
    )
"""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from retail_pos.core.config import BillingConfig
from retail_pos.core.exceptions import ProductNotFoundError
from retail_pos.core.logging_config import get_logger, log_with_context
from retail_pos.core.money import ZERO, round_currency
from retail_pos.models.billing import AppliedOffer, BillLine, CartBill
from retail_pos.models.offer import (
    CartLine,
    CustomerLoyalty,
    Offer,
    OfferUsage,
    StackResult,
)
from retail_pos.models.tax import Jurisdiction, Product, SaleLine
from retail_pos.services.line_tax_calculator import compute_sale_line, summarize_sale
from retail_pos.services.offer_evaluator import evaluate_all
from retail_pos.services.offer_stacker import stack

logger = get_logger(__name__)

ProductCatalog = Union[Mapping[str, Product], Iterable[Product]]


class BillingService:
    """
    Cart pricing for the POS register.

    Stateless apart from its configuration; safe to share between requests.
    """

    def __init__(self, config: Optional[BillingConfig] = None):
        self.config = config or BillingConfig.from_settings()

    def _round(self, amount: Decimal) -> Decimal:
        return round_currency(amount, self.config.currency_places)

    def jurisdiction_for(
        self,
        buyer_state: Any = None,
        supplier_state: Any = None,
    ) -> Jurisdiction:
        """
        Build the sale jurisdiction; the supplier defaults to the business
        state from configuration.
        """
        return Jurisdiction(
            supplier_state=supplier_state or self.config.business_state,
            buyer_state=buyer_state,
        )

    def price_lines(
        self,
        cart_lines: Iterable[CartLine],
        products: ProductCatalog,
        jurisdiction: Jurisdiction,
    ) -> List[SaleLine]:
        """
        Compute tax for every cart line.

        Raises:
            ProductNotFoundError: a line references an unknown product
        """
        catalog = _as_catalog(products)
        sale_lines = []
        for cart_line in cart_lines:
            product = catalog.get(cart_line.product_id)
            if product is None:
                raise ProductNotFoundError(cart_line.product_id)
            sale_lines.append(compute_sale_line(
                cart_line, product, jurisdiction, self.config.default_gst_rate
            ))
        return sale_lines

    def apply_offers(
        self,
        sale_lines: List[SaleLine],
        offers: Iterable[Offer],
        customer_loyalty: Optional[CustomerLoyalty] = None,
        now: Optional[datetime] = None,
        usage: Optional[Mapping[str, OfferUsage]] = None,
    ) -> StackResult:
        """Evaluate and stack offers for priced lines."""
        priced_lines = [
            CartLine(
                product_id=line.product_id,
                quantity=line.quantity,
                unit_price=line.unit_price,
                category_id=line.category_id,
            )
            for line in sale_lines
        ]
        cart_total = cart_total_of(sale_lines)

        applicable = evaluate_all(
            offers,
            priced_lines,
            cart_total,
            customer_loyalty=customer_loyalty,
            now=now,
            usage=usage,
            currency_places=self.config.currency_places,
        )
        result = stack(applicable, cart_total)

        logger.debug(
            f"Offers: {len(applicable)} applicable, {len(result.selected)} selected, "
            f"discount={result.total_discount}"
        )
        return result

    def quote(
        self,
        cart_lines: Iterable[CartLine],
        products: ProductCatalog,
        offers: Iterable[Offer] = (),
        jurisdiction: Optional[Jurisdiction] = None,
        customer_loyalty: Optional[CustomerLoyalty] = None,
        now: Optional[datetime] = None,
        usage: Optional[Mapping[str, OfferUsage]] = None,
    ) -> CartBill:
        """
        Price a cart end to end.

        Args:
            cart_lines: Lines in the cart
            products: Catalog products referenced by the lines
            offers: Offer catalog to evaluate
            jurisdiction: Sale jurisdiction (defaults to the business state
                on both sides, i.e. intra-state)
            customer_loyalty: Loyalty snapshot of the customer, if known
            now: Evaluation time for offer windows
            usage: Offer redemption counters keyed by offer id

        Returns:
            CartBill rounded to currency precision
        """
        jurisdiction = jurisdiction or self.jurisdiction_for()
        sale_lines = self.price_lines(cart_lines, products, jurisdiction)
        summary = summarize_sale(sale_lines, jurisdiction)
        stacked = self.apply_offers(
            sale_lines, offers, customer_loyalty=customer_loyalty, now=now, usage=usage
        )

        cart_total = cart_total_of(sale_lines)
        payable_total = summary.grand_total - stacked.total_discount

        bill = CartBill(
            currency=self.config.currency,
            lines=[self._bill_line(line) for line in sale_lines],
            cart_total=self._round(cart_total),
            tax_summary=summary.rounded(self.config.currency_places),
            applied_offers=[
                AppliedOffer(
                    offer_id=offer.offer_id,
                    name=offer.name,
                    offer_type=offer.offer_type,
                    priority=offer.priority,
                    discount=self._round(offer.discount),
                )
                for offer in stacked.selected
            ],
            total_discount=self._round(stacked.total_discount),
            payable_total=self._round(payable_total),
            is_inter_state=jurisdiction.is_inter_state,
        )

        log_with_context(
            logger,
            logging.INFO,
            "Cart quoted",
            line_count=len(bill.lines),
            offers_applied=len(bill.applied_offers),
            payable_total=str(bill.payable_total),
        )
        return bill

    def _bill_line(self, line: SaleLine) -> BillLine:
        return BillLine(
            product_id=line.product_id,
            product_name=line.product_name,
            quantity=line.quantity,
            unit_price=line.unit_price,
            line_amount=self._round(line.line_amount),
            hsn_code=line.hsn_code,
            gst_rate=line.rates.gst_rate,
            cess_rate=line.rates.cess,
            tax_calculation_method=line.tax_calculation_method,
            taxable_amount=self._round(line.base_amount),
            tax=line.tax.rounded(self.config.currency_places),
            total_amount=self._round(line.total_amount),
        )


def cart_total_of(sale_lines: Iterable[SaleLine]) -> Decimal:
    """Sum of quantity x unit price, the amount offers are measured against."""
    return sum((line.line_amount for line in sale_lines), ZERO)


def _as_catalog(products: ProductCatalog) -> Dict[str, Product]:
    if isinstance(products, Mapping):
        return dict(products)
    return {product.id: product for product in products}


# Global singleton instance
billing_service = BillingService()

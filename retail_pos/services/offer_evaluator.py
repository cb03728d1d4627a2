"""
Offer Evaluator

Decides whether an offer applies to a cart and what it is worth. An offer
that does not apply yields None; that is an answer, not an error.
"""

from datetime import datetime
from decimal import Decimal
from typing import Iterable, List, Mapping, Optional

from retail_pos.core.money import round_currency
from retail_pos.core.timezones import business_clock, to_aware, utc_now
from retail_pos.models.offer import (
    ApplicableOffer,
    CartContext,
    CartLine,
    CustomerLoyalty,
    Offer,
    OfferUsage,
)


def is_within_validity(offer: Offer, now: datetime) -> bool:
    """Date-range check; each bound is optional and inclusive."""
    now = to_aware(now)
    if offer.valid_from is not None and now < offer.valid_from:
        return False
    if offer.valid_to is not None and now > offer.valid_to:
        return False
    return True


def is_within_time_window(offer: Offer, now: datetime) -> bool:
    """
    Time-of-day check for happy-hour offers.

    The window never crosses midnight; Offer validation rejects such
    windows. `now` is read on the shop clock, whatever its timezone.
    """
    current = business_clock(now)
    if offer.time_start is not None and current < offer.time_start:
        return False
    if offer.time_end is not None and current > offer.time_end:
        return False
    return True


def has_usage_remaining(offer: Offer, usage: Optional[OfferUsage] = None) -> bool:
    """Check overall and per-customer redemption limits."""
    total_redemptions = usage.total_redemptions if usage is not None else offer.usage_count
    if offer.usage_limit is not None and total_redemptions >= offer.usage_limit:
        return False

    if offer.per_customer_limit is not None and usage is not None:
        if usage.customer_redemptions >= offer.per_customer_limit:
            return False
    return True


def evaluate(
    offer: Offer,
    cart_lines: Iterable[CartLine],
    cart_total: Decimal,
    customer_loyalty: Optional[CustomerLoyalty] = None,
    now: Optional[datetime] = None,
    usage: Optional[OfferUsage] = None,
    currency_places: int = 2,
) -> Optional[ApplicableOffer]:
    """
    Evaluate one offer against a cart.

    Preconditions, checked in order (any failure returns None):
    1. Offer is active
    2. now is inside the validity date range
    3. now is inside the time-of-day window
    4. Redemption limits are not exhausted
    5. cart_total meets the minimum purchase amount

    The discount itself comes from the offer's rule. A discount that is
    zero or negative, including one that rounds to zero, returns None.

    Args:
        offer: Offer from the catalog
        cart_lines: Cart lines with unit prices set
        cart_total: Cart total the offer is measured against
        customer_loyalty: Loyalty snapshot, needed by loyalty offers
        now: Evaluation time (defaults to the current time); a naive value is
            shop-local time
        usage: Redemption counters for this offer
        currency_places: Places the zero-discount check rounds to

    Returns:
        ApplicableOffer with the computed discount, or None
    """
    now = to_aware(now) if now is not None else utc_now()

    if not offer.active:
        return None
    if not is_within_validity(offer, now):
        return None
    if not is_within_time_window(offer, now):
        return None
    if not has_usage_remaining(offer, usage):
        return None
    if cart_total < offer.min_purchase_amount:
        return None

    cart = CartContext(
        lines=tuple(cart_lines),
        cart_total=cart_total,
        loyalty=customer_loyalty,
    )
    discount = offer.rule.discount_for(cart)

    if round_currency(discount, currency_places) <= 0:
        return None

    return ApplicableOffer.from_offer(offer, discount)


def evaluate_all(
    offers: Iterable[Offer],
    cart_lines: Iterable[CartLine],
    cart_total: Decimal,
    customer_loyalty: Optional[CustomerLoyalty] = None,
    now: Optional[datetime] = None,
    usage: Optional[Mapping[str, OfferUsage]] = None,
    currency_places: int = 2,
) -> List[ApplicableOffer]:
    """
    Evaluate every offer in a catalog, keeping catalog order.

    Args:
        usage: Redemption counters keyed by offer id

    Returns:
        Applicable offers only
    """
    now = to_aware(now) if now is not None else utc_now()
    cart_lines = list(cart_lines)
    usage = usage or {}

    applicable = []
    for offer in offers:
        result = evaluate(
            offer,
            cart_lines,
            cart_total,
            customer_loyalty=customer_loyalty,
            now=now,
            usage=usage.get(offer.id),
            currency_places=currency_places,
        )
        if result is not None:
            applicable.append(result)
    return applicable

"""
Offer Stacker

Combines applicable offers under a budget equal to the cart total.
"""

from decimal import Decimal
from typing import Iterable, List

from retail_pos.models.offer import ApplicableOffer, StackResult


def sort_offers(applicable_offers: Iterable[ApplicableOffer]) -> List[ApplicableOffer]:
    """
    Order offers by priority ascending, then discount descending.

    sorted() is stable, so offers tied on both keep their input order.
    """
    return sorted(applicable_offers, key=lambda offer: (offer.priority, -offer.discount))


def stack(applicable_offers: Iterable[ApplicableOffer], cart_total: Decimal) -> StackResult:
    """
    Select offers greedily in priority order.

    Each offer is accepted if its discount fits in what is left of the cart
    total, then deducted from it. An offer that does not fit is skipped for
    good; later offers are still tried. This is a single pass, not a search
    for the best combination: priority expresses business precedence.

    Args:
        applicable_offers: Output of the evaluator, in any order
        cart_total: Cart total, the discount budget

    Returns:
        StackResult with selected offers in acceptance order, skipped
        offers, and total_discount <= cart_total
    """
    remaining = cart_total
    selected: List[ApplicableOffer] = []
    skipped: List[ApplicableOffer] = []

    for offer in sort_offers(applicable_offers):
        if offer.discount <= remaining:
            selected.append(offer)
            remaining -= offer.discount
        else:
            skipped.append(offer)

    return StackResult(
        selected=selected,
        skipped=skipped,
        total_discount=sum((offer.discount for offer in selected), Decimal("0")),
    )

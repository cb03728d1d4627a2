"""
Offer Models for Retail POS Billing

An Offer carries the gating conditions every offer type shares (active flag,
validity window, happy-hour window, minimum purchase, usage limits, priority)
and a rule: one variant per offer type, selected by its `type` tag. Each rule
computes its own discount for a cart.

Offer records may also be given in the flat shape the offer catalog stores
(`offer_type`, `discount_value`, `buy_quantity`, ...); they are lifted into
the rule on validation.
"""

import math
from dataclasses import dataclass
from datetime import datetime, time
from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, Field, field_validator, model_validator

from retail_pos.core.money import HUNDRED, ZERO
from retail_pos.core.timezones import to_aware, to_business_time

DEFAULT_OFFER_PRIORITY = 999


class OfferType(str, Enum):
    """Supported offer types"""
    PERCENTAGE = "percentage"
    FLAT_AMOUNT = "flat_amount"
    BUY_X_GET_Y = "buy_x_get_y"
    CATEGORY_BASED = "category_based"
    LOYALTY_POINTS = "loyalty_points"
    TIME_BASED = "time_based"


def _split_ids(value: Any) -> Optional[List[str]]:
    """Accept "1, 2,3" or [1, 2, 3] and return ["1", "2", "3"]."""
    if value is None:
        return None
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    return [str(part).strip() for part in value]


# ============================================================================
# CART INPUTS
# ============================================================================

class CartLine(BaseModel):
    """A line in the cart being billed"""

    product_id: str = Field(..., description="Product identifier")
    quantity: Decimal = Field(..., description="Quantity; negative for returns")
    unit_price: Optional[Decimal] = Field(
        default=None,
        description="Unit price; the product price is used when omitted"
    )
    category_id: Optional[str] = Field(default=None, description="Product category")

    @field_validator("product_id", mode="before")
    @classmethod
    def coerce_product_id(cls, v):
        return str(v)

    @field_validator("category_id", mode="before")
    @classmethod
    def coerce_category_id(cls, v):
        if v is None or v == "":
            return None
        return str(v)

    @property
    def line_amount(self) -> Decimal:
        return self.quantity * (self.unit_price or ZERO)


class CustomerLoyalty(BaseModel):
    """Read-only snapshot of a customer's loyalty account"""

    customer_id: Optional[str] = None
    available_points: Decimal = Field(default=ZERO, ge=0)
    total_earned: Decimal = Field(default=ZERO, ge=0)
    total_redeemed: Decimal = Field(default=ZERO, ge=0)
    tier: str = "Member"

    @field_validator("customer_id", mode="before")
    @classmethod
    def coerce_customer_id(cls, v):
        return None if v is None else str(v)


class OfferUsage(BaseModel):
    """Redemption counters for one offer, as loaded by the caller"""

    total_redemptions: int = Field(default=0, ge=0)
    customer_redemptions: int = Field(default=0, ge=0)


@dataclass(frozen=True)
class CartContext:
    """What a rule sees when computing its discount"""
    lines: Tuple[CartLine, ...]
    cart_total: Decimal
    loyalty: Optional[CustomerLoyalty] = None


def _percent_of(amount: Decimal, percent: Decimal, cap: Optional[Decimal]) -> Decimal:
    discount = amount * percent / HUNDRED
    if cap is not None:
        discount = min(discount, cap)
    return discount


# ============================================================================
# OFFER RULES
# ============================================================================

class PercentageRule(BaseModel):
    """Percentage off the cart total, optionally capped"""
    type: Literal["percentage"] = "percentage"
    value: Decimal = Field(..., ge=0, le=100)
    max_discount_amount: Optional[Decimal] = Field(default=None, ge=0)

    def discount_for(self, cart: CartContext) -> Decimal:
        return _percent_of(cart.cart_total, self.value, self.max_discount_amount)


class FlatAmountRule(BaseModel):
    """
    Fixed amount off.

    Not limited to the cart total here; the stacker's budget and the
    checkout decide how much of it is usable.
    """
    type: Literal["flat_amount"] = "flat_amount"
    value: Decimal = Field(..., ge=0)

    def discount_for(self, cart: CartContext) -> Decimal:
        return self.value


class BuyXGetYRule(BaseModel):
    """Buy `buy_quantity` units, get `get_quantity` units free, per line"""
    type: Literal["buy_x_get_y"] = "buy_x_get_y"
    buy_quantity: int = Field(default=1, ge=1)
    get_quantity: int = Field(default=1, ge=1)
    applicable_products: Optional[List[str]] = None

    @field_validator("applicable_products", mode="before")
    @classmethod
    def split_products(cls, v):
        return _split_ids(v)

    def matching_lines(self, lines) -> List[CartLine]:
        if not self.applicable_products:
            return list(lines)
        wanted = set(self.applicable_products)
        return [line for line in lines if line.product_id in wanted]

    def free_units(self, quantity: Decimal) -> Tuple[int, int]:
        """Return (eligible_sets, free_units) for one line's quantity."""
        # Floor, not truncation: a return of 5 against buy 2 is -3 sets
        eligible_sets = math.floor(quantity / self.buy_quantity)
        return eligible_sets, eligible_sets * self.get_quantity

    def discount_for(self, cart: CartContext) -> Decimal:
        # Lines are counted independently; quantities are not pooled
        discount = ZERO
        for line in self.matching_lines(cart.lines):
            _, free = self.free_units(line.quantity)
            discount += free * (line.unit_price or ZERO)
        return discount


class CategoryRule(BaseModel):
    """Percentage off the subtotal of lines in the listed categories"""
    type: Literal["category_based"] = "category_based"
    value: Decimal = Field(..., ge=0, le=100)
    applicable_categories: List[str] = Field(default_factory=list)
    max_discount_amount: Optional[Decimal] = Field(default=None, ge=0)

    @field_validator("applicable_categories", mode="before")
    @classmethod
    def split_categories(cls, v):
        return _split_ids(v) or []

    def category_subtotal(self, lines) -> Decimal:
        categories = set(self.applicable_categories)
        return sum(
            (line.line_amount for line in lines if line.category_id in categories),
            ZERO,
        )

    def discount_for(self, cart: CartContext) -> Decimal:
        if not self.applicable_categories:
            return ZERO
        return _percent_of(
            self.category_subtotal(cart.lines), self.value, self.max_discount_amount
        )


class LoyaltyPointsRule(BaseModel):
    """
    Flat discount for customers holding at least `points_threshold` points.

    Points are not deducted here; redemption happens when the caller
    accepts the offer.
    """
    type: Literal["loyalty_points"] = "loyalty_points"
    value: Decimal = Field(..., ge=0)
    points_threshold: Decimal = Field(default=ZERO, ge=0)

    def discount_for(self, cart: CartContext) -> Decimal:
        if cart.loyalty is None:
            return ZERO
        if cart.loyalty.available_points < self.points_threshold:
            return ZERO
        return self.value


class TimeBasedRule(BaseModel):
    """Happy-hour style offer; percentage unless discount_kind says flat"""
    type: Literal["time_based"] = "time_based"
    value: Decimal = Field(..., ge=0)
    discount_kind: Literal["percentage", "flat_amount"] = "percentage"
    max_discount_amount: Optional[Decimal] = Field(default=None, ge=0)

    @model_validator(mode="after")
    def check_percentage(self):
        if self.discount_kind == "percentage" and self.value > HUNDRED:
            raise ValueError("percentage discount cannot exceed 100")
        return self

    def discount_for(self, cart: CartContext) -> Decimal:
        if self.discount_kind == "flat_amount":
            return self.value
        return _percent_of(cart.cart_total, self.value, self.max_discount_amount)


OfferRule = Annotated[
    Union[
        PercentageRule,
        FlatAmountRule,
        BuyXGetYRule,
        CategoryRule,
        LoyaltyPointsRule,
        TimeBasedRule,
    ],
    Field(discriminator="type"),
]

# Flat record fields that belong to the rule rather than the offer
_RULE_FIELDS = (
    "max_discount_amount",
    "buy_quantity",
    "get_quantity",
    "applicable_products",
    "applicable_categories",
    "points_threshold",
    "discount_kind",
)


# ============================================================================
# OFFER
# ============================================================================

class Offer(BaseModel):
    """An offer from the catalog"""

    id: str = Field(..., description="Offer identifier")
    name: str = Field(default="", description="Offer display name")
    description: Optional[str] = None
    rule: OfferRule
    min_purchase_amount: Decimal = Field(default=ZERO, ge=0)
    valid_from: Optional[datetime] = None
    valid_to: Optional[datetime] = None
    time_start: Optional[time] = Field(default=None, description="Happy hour start")
    time_end: Optional[time] = Field(default=None, description="Happy hour end")
    usage_limit: Optional[int] = Field(default=None, ge=1)
    per_customer_limit: Optional[int] = Field(default=None, ge=1)
    usage_count: int = Field(default=0, ge=0)
    priority: int = Field(default=DEFAULT_OFFER_PRIORITY, description="Lower is evaluated first")
    active: bool = True

    @model_validator(mode="before")
    @classmethod
    def lift_flat_record(cls, data):
        if not isinstance(data, dict) or "rule" in data:
            return data

        data = {key: value for key, value in data.items() if value is not None}
        rule = {"type": data.pop("offer_type", data.pop("type", None))}
        if "discount_value" in data:
            rule["value"] = data.pop("discount_value")
        for field in _RULE_FIELDS:
            if field in data:
                rule[field] = data.pop(field)
        data["rule"] = rule
        return data

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v):
        return str(v)

    @field_validator("priority", mode="before")
    @classmethod
    def default_priority(cls, v):
        return DEFAULT_OFFER_PRIORITY if v is None else v

    @field_validator("valid_from", "valid_to")
    @classmethod
    def localize_validity(cls, v):
        return None if v is None else to_aware(v)

    @field_validator("time_start", "time_end")
    @classmethod
    def localize_time_window(cls, v):
        return None if v is None else to_business_time(v)

    @model_validator(mode="after")
    def check_windows(self):
        if self.valid_from and self.valid_to and self.valid_from > self.valid_to:
            raise ValueError("valid_from must not be after valid_to")
        # Overnight happy hours must be configured as two offers
        if self.time_start and self.time_end and self.time_start >= self.time_end:
            raise ValueError("time window must end after it starts on the same day")
        return self

    @property
    def offer_type(self) -> OfferType:
        return OfferType(self.rule.type)


class ApplicableOffer(BaseModel):
    """An offer that applies to the current cart, with its discount"""

    offer_id: str
    name: str = ""
    offer_type: OfferType
    priority: int
    discount: Decimal
    offer: Optional[Offer] = Field(default=None, exclude=True)

    model_config = {"frozen": True}

    @classmethod
    def from_offer(cls, offer: Offer, discount: Decimal) -> "ApplicableOffer":
        return cls(
            offer_id=offer.id,
            name=offer.name,
            offer_type=offer.offer_type,
            priority=offer.priority,
            discount=discount,
            offer=offer,
        )


class StackResult(BaseModel):
    """Offers accepted by the stacker and the combined discount"""

    selected: List[ApplicableOffer] = Field(default_factory=list)
    skipped: List[ApplicableOffer] = Field(default_factory=list)
    total_discount: Decimal = ZERO

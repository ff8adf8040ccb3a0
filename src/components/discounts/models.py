"""
Discounts component models.

Data models for cart discount evaluation: the cart/customer context,
the stored discount configuration, the resolved mode and the emitted
order discount operations.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import ClassVar, Literal

from pydantic import BaseModel, ConfigDict, Field

# --- Enums / Literals ---

DiscountClass = Literal["ORDER", "PRODUCT", "SHIPPING"]
SelectionStrategy = Literal["FIRST"]
ModeName = Literal["referral", "store_credit"]
EvaluationReason = Literal[
    "missing_order_class",
    "referral_not_validated",
    "missing_referrer",
    "below_min_order",
    "no_customer",
    "no_credits",
    "zero_subtotal",
    "applied",
]

Money = Decimal


# --- Inbound Context ---


@dataclass(frozen=True)
class CustomerContext:
    """Identified buyer. Credits arrive as free text from a metafield."""

    credits_text: str | None = None


@dataclass(frozen=True)
class CartContext:
    """
    Everything one evaluation looks at.

    `config_metafield` is the raw JSON value stored on the discount. It is
    only interpreted by the mode resolver.
    """

    subtotal: Money
    discount_classes: frozenset[str] = frozenset()
    referral_validated_attribute: str | None = None
    referrer_customer_id: str | None = None
    customer: CustomerContext | None = None
    config_metafield: object | None = None

    @property
    def referral_validated(self) -> bool:
        return self.referral_validated_attribute == "true"


# --- Stored Configuration ---


class DiscountConfig(BaseModel):
    """
    Referral configuration stored as JSON on the discount.

    `referrer_credit_amount` and `min_referrer_orders` are reserved for
    referrer-side crediting and are not read by any calculator.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    referee_discount_percentage: Decimal = Field(ge=0)
    referee_min_order: Decimal = Field(ge=0)
    referrer_credit_amount: Decimal
    min_referrer_orders: int


# --- Mode ---


@dataclass(frozen=True)
class ReferralMode:
    """Referral percentage discount, driven by a stored config."""

    name: ClassVar[ModeName] = "referral"

    config: DiscountConfig


@dataclass(frozen=True)
class StoreCreditMode:
    """Fixed-amount discount from the customer's credit balance."""

    name: ClassVar[ModeName] = "store_credit"

    config_malformed: bool = False


DiscountMode = ReferralMode | StoreCreditMode


# --- Calculated Discounts ---


@dataclass(frozen=True)
class PercentageDiscount:
    percentage: Decimal
    message: str


@dataclass(frozen=True)
class FixedAmountDiscount:
    amount: Money
    message: str


CalculatedDiscount = PercentageDiscount | FixedAmountDiscount


# --- Output Operations ---


@dataclass(frozen=True)
class OrderSubtotalTarget:
    """Whole-order target. This function never excludes cart lines."""

    excluded_cart_line_ids: tuple[str, ...] = ()


@dataclass(frozen=True)
class PercentageValue:
    value: Decimal


@dataclass(frozen=True)
class FixedAmountValue:
    amount: Decimal


@dataclass(frozen=True)
class OrderDiscountCandidate:
    targets: tuple[OrderSubtotalTarget, ...]
    value: PercentageValue | FixedAmountValue
    message: str | None = None
    conditions: None = None
    associated_discount_code: None = None


@dataclass(frozen=True)
class OrderDiscountsAddOperation:
    candidates: tuple[OrderDiscountCandidate, ...]
    selection_strategy: SelectionStrategy = "FIRST"


# --- Component Configuration ---


@dataclass(frozen=True)
class DiscountRulesConfig:
    """Discount configuration from rules."""

    required_discount_class: str = "ORDER"
    currency_symbol: str = "$"
    referral_message: str = "Referral discount: {percentage}% off"
    store_credit_message: str = "Store credit: {currency_symbol}{amount}"


# --- Run Input / Output ---


@dataclass(frozen=True)
class EvaluateDiscountInput:
    """Input for a single discount evaluation."""

    cart: CartContext


@dataclass(frozen=True)
class EvaluateDiscountOutput:
    """
    Result of one evaluation.

    `operations` is empty or holds exactly one operation. `mode` is None
    when the evaluation stopped at the eligibility gate.
    """

    operations: tuple[OrderDiscountsAddOperation, ...] = field(default_factory=tuple)
    mode: ModeName | None = None
    reason: EvaluationReason = "applied"
    config_malformed: bool = False

    @property
    def applied(self) -> bool:
        return len(self.operations) > 0

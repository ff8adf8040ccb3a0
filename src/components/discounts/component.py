"""
Discounts component.

Pure functions that decide whether a cart earns an order discount and
build the single operation describing it.

Flow: eligibility gate -> mode resolution -> exactly one calculator ->
operation builder. Every failed gate ends in an empty result, never an
error.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Context, Decimal, InvalidOperation, getcontext

from pydantic import ValidationError

from src.rules.models import Rules

from .models import (
    CalculatedDiscount,
    CartContext,
    DiscountConfig,
    DiscountMode,
    DiscountRulesConfig,
    EvaluateDiscountInput,
    EvaluateDiscountOutput,
    EvaluationReason,
    FixedAmountDiscount,
    FixedAmountValue,
    OrderDiscountCandidate,
    OrderDiscountsAddOperation,
    OrderSubtotalTarget,
    PercentageDiscount,
    PercentageValue,
    ReferralMode,
    StoreCreditMode,
)

ZERO = Decimal("0")
CENTS = Decimal("0.01")

# --- Numeric Helpers ---


def parse_available_credits(text: str | None) -> Decimal:
    """
    Parse a customer's credit balance from metafield text.

    Contract: missing, unparseable or non-finite text is zero credits.
    Surrounding whitespace is ignored.
    """
    if text is None:
        return ZERO

    try:
        value = Decimal(text.strip())
    except InvalidOperation:
        return ZERO

    if not value.is_finite():
        return ZERO

    return value


def format_decimal(value: Decimal) -> str:
    """Render a decimal in plain notation without trailing zeros."""
    text = format(value, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def format_currency(value: Decimal) -> str:
    """Two decimal places, half-up."""
    # Precision must hold every integer digit plus the two cent digits
    prec = max(getcontext().prec, value.adjusted() + 3)
    return str(value.quantize(CENTS, rounding=ROUND_HALF_UP, context=Context(prec=prec)))


# --- Eligibility ---


def classify_eligibility(
    discount_classes: frozenset[str] | set[str],
    config: DiscountRulesConfig | None = None,
) -> bool:
    """Only carts granted the order discount class may be discounted."""
    config = config or DiscountRulesConfig()
    return config.required_discount_class in discount_classes


# --- Mode Resolution ---


def resolve_mode(config_metafield: object | None) -> DiscountMode:
    """
    Pick the discount mode from the stored configuration.

    A present, well-formed config selects referral mode. No config, or a
    config that fails to deserialize, selects store-credit mode.
    """
    if config_metafield is None:
        return StoreCreditMode()

    try:
        config = DiscountConfig.model_validate(config_metafield)
    except ValidationError:
        return StoreCreditMode(config_malformed=True)

    return ReferralMode(config=config)


# --- Referral Calculator ---


def check_referral_gates(cart: CartContext, config: DiscountConfig) -> EvaluationReason:
    """Return the first failing referral gate, or "applied"."""
    if not cart.referral_validated:
        return "referral_not_validated"

    if not cart.referrer_customer_id:
        return "missing_referrer"

    # Inclusive minimum
    if cart.subtotal < config.referee_min_order:
        return "below_min_order"

    return "applied"


def compute_referral_discount(
    cart: CartContext,
    config: DiscountConfig,
    rules_config: DiscountRulesConfig | None = None,
) -> PercentageDiscount | None:
    """
    Percentage-off discount for a validated referee.

    The configured percentage is trusted; no upper bound is applied.

    Args:
        cart: Cart context carrying the referral attributes and subtotal
        config: Stored referral configuration
        rules_config: Optional rules-driven messages and discount class

    Returns:
        PercentageDiscount, or None when a referral gate fails
    """
    rules_config = rules_config or DiscountRulesConfig()

    if check_referral_gates(cart, config) != "applied":
        return None

    percentage = config.referee_discount_percentage
    return PercentageDiscount(
        percentage=percentage,
        message=rules_config.referral_message.format(
            percentage=format_decimal(percentage),
        ),
    )


# --- Store Credit Calculator ---


def check_store_credit_gates(cart: CartContext) -> EvaluationReason:
    """Return the first failing store-credit gate, or "applied"."""
    if cart.customer is None:
        return "no_customer"

    credits = parse_available_credits(cart.customer.credits_text)
    if credits <= ZERO:
        return "no_credits"

    if min(credits, cart.subtotal) <= ZERO:
        return "zero_subtotal"

    return "applied"


def compute_store_credit_discount(
    cart: CartContext,
    rules_config: DiscountRulesConfig | None = None,
) -> FixedAmountDiscount | None:
    """
    Fixed-amount discount capped at both the credit balance and the subtotal.

    Args:
        cart: Cart context with the customer's credit metafield
        rules_config: Optional rules-driven currency symbol and messages

    Returns:
        FixedAmountDiscount, or None when there is nothing to apply
    """
    rules_config = rules_config or DiscountRulesConfig()

    if cart.customer is None or check_store_credit_gates(cart) != "applied":
        return None

    credits = parse_available_credits(cart.customer.credits_text)
    amount = min(credits, cart.subtotal)

    return FixedAmountDiscount(
        amount=amount,
        message=rules_config.store_credit_message.format(
            currency_symbol=rules_config.currency_symbol,
            amount=format_currency(amount),
        ),
    )


# --- Operation Builder ---


def build_operations(
    discount: CalculatedDiscount,
) -> tuple[OrderDiscountsAddOperation, ...]:
    """Wrap a calculated discount in a single order-subtotal operation."""
    value: PercentageValue | FixedAmountValue
    if isinstance(discount, PercentageDiscount):
        value = PercentageValue(value=discount.percentage)
    elif isinstance(discount, FixedAmountDiscount):
        value = FixedAmountValue(amount=discount.amount)
    else:
        raise TypeError(f"Unknown discount type: {type(discount)}")

    candidate = OrderDiscountCandidate(
        targets=(OrderSubtotalTarget(),),
        value=value,
        message=discount.message,
    )
    return (OrderDiscountsAddOperation(candidates=(candidate,)),)


# --- Evaluation ---


def evaluate(
    cart: CartContext,
    config: DiscountRulesConfig | None = None,
) -> EvaluateDiscountOutput:
    """
    Evaluate one cart.

    Pure function: eligibility gate, mode resolution, then exactly one
    calculator.

    Args:
        cart: Normalized cart context
        config: Optional rules-driven configuration

    Returns:
        EvaluateDiscountOutput with zero or one operation, the resolved
        mode and the reason evaluation stopped
    """
    config = config or DiscountRulesConfig()

    if not classify_eligibility(cart.discount_classes, config):
        return EvaluateDiscountOutput(reason="missing_order_class")

    mode = resolve_mode(cart.config_metafield)

    discount: CalculatedDiscount | None
    if isinstance(mode, ReferralMode):
        discount = compute_referral_discount(cart, mode.config, config)
        reason = check_referral_gates(cart, mode.config)
        malformed = False
    else:
        discount = compute_store_credit_discount(cart, config)
        reason = check_store_credit_gates(cart)
        malformed = mode.config_malformed

    if discount is None:
        return EvaluateDiscountOutput(
            mode=mode.name,
            reason=reason,
            config_malformed=malformed,
        )

    return EvaluateDiscountOutput(
        operations=build_operations(discount),
        mode=mode.name,
        reason="applied",
        config_malformed=malformed,
    )


# --- Run Function (Atomic Component Pattern) ---


def run(
    input_data: EvaluateDiscountInput,
    config: DiscountRulesConfig | None = None,
) -> EvaluateDiscountOutput:
    """
    Run a discount evaluation.

    This is the main entry point following the atomic component pattern.
    """
    if isinstance(input_data, EvaluateDiscountInput):
        return evaluate(input_data.cart, config)

    raise TypeError(f"Unknown input type: {type(input_data)}")


# --- Configuration Loader ---


def load_config_from_rules(rules: Rules) -> DiscountRulesConfig:
    """
    Build DiscountRulesConfig from validated rules.

    Args:
        rules: Rules loaded from rules.yaml

    Returns:
        DiscountRulesConfig for the evaluation entry points
    """
    discounts = rules.discounts

    return DiscountRulesConfig(
        required_discount_class=discounts.required_discount_class,
        currency_symbol=discounts.currency_symbol,
        referral_message=discounts.messages.referral,
        store_credit_message=discounts.messages.store_credit,
    )

"""
Discounts component.

Public API for order discount evaluation (referral and store credit).
"""

from .component import (
    build_operations,
    check_referral_gates,
    check_store_credit_gates,
    classify_eligibility,
    compute_referral_discount,
    compute_store_credit_discount,
    evaluate,
    format_currency,
    format_decimal,
    load_config_from_rules,
    parse_available_credits,
    resolve_mode,
    run,
)
from .models import (
    CartContext,
    CustomerContext,
    DiscountConfig,
    DiscountMode,
    DiscountRulesConfig,
    EvaluateDiscountInput,
    EvaluateDiscountOutput,
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
from .ports import FunctionInputPort, FunctionOutputPort

__all__ = [
    # Functions
    "build_operations",
    "check_referral_gates",
    "check_store_credit_gates",
    "classify_eligibility",
    "compute_referral_discount",
    "compute_store_credit_discount",
    "evaluate",
    "format_currency",
    "format_decimal",
    "load_config_from_rules",
    "parse_available_credits",
    "resolve_mode",
    "run",
    # Models
    "CartContext",
    "CustomerContext",
    "DiscountConfig",
    "DiscountMode",
    "DiscountRulesConfig",
    "EvaluateDiscountInput",
    "EvaluateDiscountOutput",
    "FixedAmountDiscount",
    "FixedAmountValue",
    "OrderDiscountCandidate",
    "OrderDiscountsAddOperation",
    "OrderSubtotalTarget",
    "PercentageDiscount",
    "PercentageValue",
    "ReferralMode",
    "StoreCreditMode",
    # Ports
    "FunctionInputPort",
    "FunctionOutputPort",
]

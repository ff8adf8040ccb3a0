"""
Function payload adapter.

Translates between the camelCase JSON the host platform exchanges with a
discount function and the discounts component's models.

Input shape:
    {"cart": {"cost": {"subtotalAmount": {"amount": "100.0"}},
              "referralValidated": {"value": "true"},
              "referrerCustomerId": {"value": "gid://shopify/Customer/1"},
              "buyerIdentity": {"customer": {"metafield": {"value": "25.00"}}}},
     "discount": {"discountClasses": ["ORDER"],
                  "metafield": {"jsonValue": {...}}}}

Output shape:
    {"operations": [{"orderDiscountsAdd": {...}}]}
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from src.components.discounts import (
    CartContext,
    CustomerContext,
    EvaluateDiscountOutput,
    FixedAmountValue,
    OrderDiscountCandidate,
    OrderDiscountsAddOperation,
    PercentageValue,
    format_decimal,
)

logger = logging.getLogger(__name__)


# --- Errors ---


@dataclass(frozen=True)
class InputError:
    """Structural problem with a function payload."""

    code: str
    message: str
    field: str | None = None


class FunctionInputError(ValueError):
    """Raised when a function payload cannot be read as a cart."""

    def __init__(self, errors: list[InputError]) -> None:
        self.errors = errors
        super().__init__(
            "Invalid function input: " + "; ".join(e.message for e in errors)
        )


# --- Wire Schema ---


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class AttributeModel(_WireModel):
    value: str | None = None


class MetafieldModel(_WireModel):
    value: str | None = None
    json_value: Any = Field(default=None, alias="jsonValue")


class MoneyModel(_WireModel):
    amount: Decimal = Field(ge=0)


class CartCostModel(_WireModel):
    subtotal_amount: MoneyModel = Field(alias="subtotalAmount")


class CustomerModel(_WireModel):
    metafield: MetafieldModel | None = None


class BuyerIdentityModel(_WireModel):
    customer: CustomerModel | None = None


class CartModel(_WireModel):
    cost: CartCostModel
    referral_validated: AttributeModel | None = Field(default=None, alias="referralValidated")
    referrer_customer_id: AttributeModel | None = Field(
        default=None, alias="referrerCustomerId"
    )
    buyer_identity: BuyerIdentityModel | None = Field(default=None, alias="buyerIdentity")


class DiscountModel(_WireModel):
    discount_classes: list[str] = Field(default_factory=list, alias="discountClasses")
    metafield: MetafieldModel | None = None


class FunctionInputModel(_WireModel):
    cart: CartModel
    discount: DiscountModel


# --- Input ---


def _config_value(metafield: MetafieldModel | None) -> object | None:
    """
    Raw config metafield value.

    JSON text that does not decode is passed through as text so the mode
    resolver treats it as malformed configuration.
    """
    if metafield is None:
        return None

    if metafield.json_value is not None:
        return metafield.json_value

    if metafield.value is None:
        return {}

    try:
        return json.loads(metafield.value)
    except json.JSONDecodeError:
        logger.warning("Discount config metafield is not valid JSON")
        return metafield.value


def parse_function_input(payload: dict[str, Any]) -> CartContext:
    """
    Build a CartContext from a function input payload.

    Raises:
        FunctionInputError: If required structure is missing or invalid
    """
    try:
        model = FunctionInputModel.model_validate(payload)
    except ValidationError as e:
        raise FunctionInputError(
            [
                InputError(
                    code=err["type"],
                    message=err["msg"],
                    field=".".join(str(part) for part in err["loc"]) or None,
                )
                for err in e.errors()
            ]
        ) from e

    cart = model.cart

    customer: CustomerContext | None = None
    if cart.buyer_identity is not None and cart.buyer_identity.customer is not None:
        credits = cart.buyer_identity.customer.metafield
        customer = CustomerContext(credits_text=credits.value if credits else None)

    return CartContext(
        subtotal=cart.cost.subtotal_amount.amount,
        discount_classes=frozenset(model.discount.discount_classes),
        referral_validated_attribute=(
            cart.referral_validated.value if cart.referral_validated else None
        ),
        referrer_customer_id=(
            cart.referrer_customer_id.value if cart.referrer_customer_id else None
        ),
        customer=customer,
        config_metafield=_config_value(model.discount.metafield),
    )


# --- Output ---


def _serialize_value(value: PercentageValue | FixedAmountValue) -> dict[str, Any]:
    if isinstance(value, PercentageValue):
        return {"percentage": {"value": format_decimal(value.value)}}
    return {"fixedAmount": {"amount": format_decimal(value.amount)}}


def _serialize_candidate(candidate: OrderDiscountCandidate) -> dict[str, Any]:
    return {
        "targets": [
            {"orderSubtotal": {"excludedCartLineIds": list(t.excluded_cart_line_ids)}}
            for t in candidate.targets
        ],
        "message": candidate.message,
        "value": _serialize_value(candidate.value),
        "conditions": candidate.conditions,
        "associatedDiscountCode": candidate.associated_discount_code,
    }


def _serialize_operation(operation: OrderDiscountsAddOperation) -> dict[str, Any]:
    return {
        "orderDiscountsAdd": {
            "selectionStrategy": operation.selection_strategy,
            "candidates": [_serialize_candidate(c) for c in operation.candidates],
        }
    }


def serialize_output(output: EvaluateDiscountOutput) -> dict[str, Any]:
    """Function result JSON. Decimals become plain strings."""
    return {"operations": [_serialize_operation(op) for op in output.operations]}

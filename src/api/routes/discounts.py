"""
Discount evaluation API routes.

Runs the discounts component against a function input payload and returns
the function result in the same wire format the host platform expects.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException
from pydantic import BaseModel

from src.adapters.function_io import (
    FunctionInputError,
    parse_function_input,
    serialize_output,
)
from src.api.deps import get_discount_config
from src.components.discounts import (
    DiscountRulesConfig,
    EvaluateDiscountInput,
    run,
)

logger = logging.getLogger(__name__)

router = APIRouter()


# --- Response Models ---


class ErrorResponse(BaseModel):
    """Error response."""

    ok: bool = False
    errors: list[dict[str, Any]]


# --- Routes ---


@router.post(
    "/evaluate",
    responses={400: {"model": ErrorResponse}},
)
def evaluate_discount(
    payload: dict[str, Any] = Body(...),
    config: DiscountRulesConfig = Depends(get_discount_config),
) -> dict[str, Any]:
    """
    Evaluate a cart and return zero or one order discount operation.

    An empty `operations` list means no discount applies; that is a normal
    200 response. Only structurally broken payloads are rejected with 400.
    """
    try:
        cart = parse_function_input(payload)
    except FunctionInputError as e:
        logger.warning("Rejected function input: %s", e)
        raise HTTPException(
            status_code=400,
            detail={
                "ok": False,
                "errors": [
                    {"code": err.code, "message": err.message, "field": err.field}
                    for err in e.errors
                ],
            },
        ) from e

    result = run(EvaluateDiscountInput(cart=cart), config)

    if result.config_malformed:
        logger.warning("Discount config is malformed; evaluated as store credit")
    logger.debug(
        "Discount evaluated: mode=%s reason=%s operations=%d",
        result.mode,
        result.reason,
        len(result.operations),
    )

    return serialize_output(result)

"""
Wallet funding through the payments provider checkout.
"""

import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from kuda.api.dependencies import bearer_token, flow_response, get_state_manager
from kuda.flows.responses import success
from kuda.flows.state_manager import StateManager
from kuda.utils.money import kobo_to_naira, naira_to_kobo
from kuda.utils.validation import check_spendable, parse_amount, raise_if_errors

logger = logging.getLogger(__name__)

api = APIRouter()
payments_api = api


class PaymentInitializeRequest(BaseModel):
    amount: Any = None
    email: Optional[str] = None
    callback_url: Optional[str] = None


@api.post("/initialize", tags=["Payments"])
async def initialize_payment(
    request: PaymentInitializeRequest,
    token: str = Depends(bearer_token),
    state: StateManager = Depends(get_state_manager),
):
    try:
        errors = {}
        amount = parse_amount(request.amount, errors)
        raise_if_errors(errors)
        check_spendable(amount, None, errors)
        raise_if_errors(errors, message="Amount must be greater than zero")

        email = (request.email or "").strip()
        if not email:
            email = (await state.backend_for(token).get_me()).email
        init = await state.payments.initialize_payment(
            amount=naira_to_kobo(amount),
            email=email,
            callback_url=request.callback_url,
        )
    except Exception as e:
        return flow_response(state.error_handler.handle_exception(e, title="Payment Failed"))

    logger.info("Payment %s initialized", init.reference)
    return success(
        "Payment Initialized",
        "Complete the payment on the checkout page.",
        data={"authorization_url": init.authorization_url, "access_code": init.access_code, "reference": init.reference},
    )


@api.get("/verify/{reference}", tags=["Payments"])
async def verify_payment(
    reference: str,
    token: str = Depends(bearer_token),
    state: StateManager = Depends(get_state_manager),
):
    try:
        verification = await state.payments.verify_transaction(reference)
    except Exception as e:
        return flow_response(state.error_handler.handle_exception(e, title="Verification Failed"))

    return {
        "ok": True,
        "data": {
            "reference": verification.reference,
            "status": verification.status,
            "amount": kobo_to_naira(verification.amount),
            "currency": verification.currency,
            "paid_at": verification.paid_at.isoformat() if verification.paid_at else None,
            "gateway_response": verification.gateway_response,
        },
    }

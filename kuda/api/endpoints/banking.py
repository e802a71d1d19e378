"""
Banking screens over HTTP - dashboard, transfers, bills, cards, profile, help
"""

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from kuda.api.dependencies import bearer_token, flow_response, get_config, get_state_manager
from kuda.flows import help_support
from kuda.flows.bills import BillsFlow
from kuda.flows.dashboard import DashboardView, recent_transactions, transaction_row
from kuda.flows.help_support import HelpSupportFlow
from kuda.flows.state_manager import StateManager

logger = logging.getLogger(__name__)

api = APIRouter()
banking_api = api


class VerifyAccountRequest(BaseModel):
    account_number: str = ""
    bank_code: str = ""


class TransferRequest(BaseModel):
    transfer_type: str = Field(default="kuda", description="kuda, bank or international")
    recipient: str = Field(default="", description="Account number (bank) or phone/email (kuda)")
    bank_code: str = ""
    amount: Any = None
    description: str = ""


class BillPaymentRequest(BaseModel):
    category: str = ""
    provider: str = ""
    customer_reference: str = ""
    amount: Any = None


class PersonalInfoRequest(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None


class AccountSettingsRequest(BaseModel):
    two_factor: bool = False
    biometric: bool = False
    sms_alerts: bool = True
    email_alerts: bool = True


class NotificationPreferencesRequest(BaseModel):
    push: bool = True
    email: bool = True
    sms: bool = False


class PasswordChangeRequest(BaseModel):
    current_password: str = ""
    new_password: str = ""
    confirm_password: str = ""


class ContactRequest(BaseModel):
    subject: str = ""
    message: str = ""
    email: str = ""


# ============================================================================
# DASHBOARD
# ============================================================================


@api.get("/dashboard", tags=["Dashboard"])
async def dashboard(
    show_balance: bool = Query(default=True),
    token: str = Depends(bearer_token),
    state: StateManager = Depends(get_state_manager),
    config=Depends(get_config),
):
    view = DashboardView(state.backend_for(token), recent_limit=config.dashboard.recent_transactions, error_handler=state.error_handler)
    view.show_balance = show_balance
    return flow_response(await view.load())


@api.get("/transactions", tags=["Dashboard"])
async def transactions(
    limit: int = Query(default=50, ge=1, le=500),
    token: str = Depends(bearer_token),
    state: StateManager = Depends(get_state_manager),
):
    try:
        rows = await state.backend_for(token).list_transactions()
    except Exception as e:
        return flow_response(state.error_handler.handle_exception(e, title="Could not load transactions"))
    return {"ok": True, "data": {"transactions": [transaction_row(tx) for tx in recent_transactions(rows, limit)]}}


# ============================================================================
# TRANSFERS
# ============================================================================


@api.get("/banks", tags=["Transfers"])
async def banks(token: str = Depends(bearer_token), state: StateManager = Depends(get_state_manager)):
    flow = state.transfer_flow(token)
    try:
        bank_list = await flow.load_banks()
    except Exception as e:
        return flow_response(state.error_handler.handle_exception(e, title="Could not load banks"))
    return {"ok": True, "data": {"banks": [{"name": b.name, "code": b.code} for b in bank_list]}}


@api.get("/transfers", tags=["Transfers"])
async def transfer_screen(token: str = Depends(bearer_token), state: StateManager = Depends(get_state_manager)):
    return flow_response(await state.transfer_flow(token).load())


@api.post("/transfers/verify-account", tags=["Transfers"])
async def verify_account(
    request: VerifyAccountRequest,
    token: str = Depends(bearer_token),
    state: StateManager = Depends(get_state_manager),
):
    flow = state.transfer_flow(token)
    return flow_response(await flow.verify_account(request.account_number, request.bank_code))


@api.post("/transfers", tags=["Transfers"])
async def create_transfer(
    request: TransferRequest,
    token: str = Depends(bearer_token),
    state: StateManager = Depends(get_state_manager),
):
    flow = state.transfer_flow(token)
    result = await flow.send(
        request.transfer_type,
        request.recipient,
        request.bank_code,
        request.amount,
        request.description,
    )
    return flow_response(result)


# ============================================================================
# BILLS
# ============================================================================


@api.get("/bills/categories", tags=["Bills"])
async def bill_categories():
    return {"ok": True, "data": BillsFlow.categories()}


@api.post("/bills/pay", tags=["Bills"])
async def pay_bill(
    request: BillPaymentRequest,
    token: str = Depends(bearer_token),
    state: StateManager = Depends(get_state_manager),
):
    flow = state.bills_flow(token)
    return flow_response(await flow.pay(request.model_dump(), refresh_balance=True))


# ============================================================================
# CARDS
# ============================================================================


@api.get("/cards", tags=["Cards"])
async def cards(
    reveal: bool = Query(default=False),
    token: str = Depends(bearer_token),
    state: StateManager = Depends(get_state_manager),
):
    view = state.cards_view(token)
    view.show_card_number = reveal
    return flow_response(await view.load())


@api.post("/cards/{card_id}/{action}", tags=["Cards"])
async def card_action(
    card_id: str,
    action: str,
    token: str = Depends(bearer_token),
    state: StateManager = Depends(get_state_manager),
):
    view = state.cards_view(token)
    if not view.cards:
        flow_response(await view.load())
    return flow_response(await view.apply_action(card_id, action))


# ============================================================================
# PROFILE
# ============================================================================


@api.get("/profile", tags=["Profile"])
async def profile(token: str = Depends(bearer_token), state: StateManager = Depends(get_state_manager)):
    return flow_response(await state.profile_flow(token).load())


@api.patch("/profile/personal-info", tags=["Profile"])
async def update_personal_info(
    request: PersonalInfoRequest,
    token: str = Depends(bearer_token),
    state: StateManager = Depends(get_state_manager),
):
    form_data: Dict[str, Any] = request.model_dump(exclude_none=True)
    return flow_response(await state.profile_flow(token).update_personal_info(form_data))


@api.put("/profile/account-settings", tags=["Profile"])
async def save_account_settings(
    request: AccountSettingsRequest,
    token: str = Depends(bearer_token),
    state: StateManager = Depends(get_state_manager),
):
    return flow_response(await state.profile_flow(token).save_account_settings(request.model_dump()))


@api.put("/profile/notifications", tags=["Profile"])
async def save_notification_preferences(
    request: NotificationPreferencesRequest,
    token: str = Depends(bearer_token),
    state: StateManager = Depends(get_state_manager),
):
    return flow_response(await state.profile_flow(token).save_notification_preferences(request.model_dump()))


@api.post("/profile/password", tags=["Profile"])
async def change_password(
    request: PasswordChangeRequest,
    token: str = Depends(bearer_token),
    state: StateManager = Depends(get_state_manager),
):
    return flow_response(state.profile_flow(token).change_password(request.model_dump()))


# ============================================================================
# HELP & SUPPORT
# ============================================================================


@api.get("/help/faq", tags=["Help"])
async def faq():
    return {"ok": True, "data": help_support.faq()}


@api.post("/help/contact", tags=["Help"])
async def contact(
    request: ContactRequest,
    token: str = Depends(bearer_token),
    state: StateManager = Depends(get_state_manager),
):
    flow = HelpSupportFlow(state.backend_for(token), state.error_handler)
    return flow_response(await flow.submit_contact(request.model_dump()))

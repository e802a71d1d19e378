from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, ValidationError

from kuda.integrations.contracts.backend import (
    AuthResult,
    Bill,
    Card,
    CardStatus,
    Record,
    Transaction,
    TransactionType,
    User,
)
from kuda.integrations.contracts.payments import (
    AccountVerification,
    Bank,
    PaymentInitialization,
    TransactionVerification,
    TransferRecipient,
    TransferResult,
    TransferStatus,
)
from kuda.integrations.errors import IntegrationError


class IntegrationResponseError(IntegrationError, ValueError):
    pass


# ---------------------------------------------------------------------------
# Validation models
# ---------------------------------------------------------------------------

class UserResponseModel(BaseModel):
    id: str
    email: str
    first_name: str = ""
    last_name: str = ""
    phone: str = ""
    balance: float = 0.0
    account_number: str = ""
    address: str = ""
    created_at: Optional[datetime] = None


class TransactionResponseModel(BaseModel):
    id: str
    type: TransactionType
    amount: float = Field(ge=0)
    description: str = ""
    recipient: Optional[str] = None
    reference: Optional[str] = None
    status: str = "successful"
    created_at: Optional[datetime] = None


class CardResponseModel(BaseModel):
    id: str
    card_number: str
    expiry: str = ""
    cvv: str = ""
    balance: float = 0.0
    card_type: str = "Virtual"
    status: CardStatus = CardStatus.ACTIVE


class BillResponseModel(BaseModel):
    id: str
    category: str
    provider: str = ""
    customer_reference: str = ""
    amount: float = Field(ge=0)
    status: str = "successful"
    reference: Optional[str] = None
    created_at: Optional[datetime] = None


class TransferResponseModel(BaseModel):
    reference: str
    transfer_code: str = ""
    status: TransferStatus
    amount: int = Field(ge=0)
    recipient: str = ""
    reason: str = ""


# ---------------------------------------------------------------------------
# Backend-as-a-service
# ---------------------------------------------------------------------------

def normalize_user(raw: Dict[str, Any]) -> User:
    model = _build_model(
        UserResponseModel,
        {
            "id": str(_first_non_empty(raw, "id", "user_id", "userId")),
            "email": _first_non_empty(raw, "email", default=""),
            "first_name": _first_non_empty(raw, "firstName", "first_name", default=""),
            "last_name": _first_non_empty(raw, "lastName", "last_name", default=""),
            "phone": str(_first_non_empty(raw, "phone", "phone_number", default="")),
            "balance": _first_non_empty(raw, "balance", default=0),
            "account_number": str(_first_non_empty(raw, "accountNumber", "account_number", default="")),
            "address": _first_non_empty(raw, "address", default=""),
            "created_at": _parse_timestamp(raw.get("created_at") or raw.get("createdAt")),
        },
        raw,
    )
    first_name, last_name = model.first_name, model.last_name
    if not (first_name or last_name) and raw.get("name"):
        first_name, _, last_name = str(raw["name"]).partition(" ")
    return User(
        id=model.id,
        email=model.email,
        first_name=first_name,
        last_name=last_name,
        phone=model.phone,
        balance=model.balance,
        account_number=model.account_number,
        address=model.address,
        created_at=model.created_at,
        raw=raw,
    )


def normalize_auth_response(raw: Dict[str, Any]) -> AuthResult:
    token = _first_non_empty(raw, "authToken", "auth_token", "token")
    user_raw = raw.get("user") if isinstance(raw.get("user"), dict) else None
    if user_raw is None and raw.get("id") is not None and raw.get("email"):
        user_raw = {k: v for k, v in raw.items() if k != "authToken"}
    user = normalize_user(user_raw) if user_raw else None
    return AuthResult(auth_token=str(token), user=user, raw=raw)


def normalize_transaction(raw: Dict[str, Any]) -> Transaction:
    model = _build_model(
        TransactionResponseModel,
        {
            "id": str(_first_non_empty(raw, "id")),
            "type": str(_first_non_empty(raw, "type", "transaction_type")).lower(),
            "amount": _first_non_empty(raw, "amount"),
            "description": _first_non_empty(raw, "description", "narration", default=""),
            "recipient": raw.get("recipient"),
            "reference": raw.get("reference"),
            "status": _first_non_empty(raw, "status", default="successful"),
            "created_at": _parse_timestamp(raw.get("created_at") or raw.get("createdAt")),
        },
        raw,
    )
    return Transaction(raw=raw, **model.model_dump())


def normalize_card(raw: Dict[str, Any]) -> Card:
    model = _build_model(
        CardResponseModel,
        {
            "id": str(_first_non_empty(raw, "id")),
            "card_number": str(_first_non_empty(raw, "cardNumber", "card_number", "number")),
            "expiry": str(_first_non_empty(raw, "expiry", "expiry_date", default="")),
            "cvv": str(_first_non_empty(raw, "cvv", default="")),
            "balance": _first_non_empty(raw, "balance", default=0),
            "card_type": _first_non_empty(raw, "cardType", "card_type", "type", default="Virtual"),
            "status": str(_first_non_empty(raw, "status", default="active")).lower(),
        },
        raw,
    )
    return Card(raw=raw, **model.model_dump())


def normalize_bill(raw: Dict[str, Any]) -> Bill:
    model = _build_model(
        BillResponseModel,
        {
            "id": str(_first_non_empty(raw, "id")),
            "category": _first_non_empty(raw, "category"),
            "provider": _first_non_empty(raw, "provider", default=""),
            "customer_reference": str(_first_non_empty(raw, "customerReference", "customer_reference", "phone", default="")),
            "amount": _first_non_empty(raw, "amount"),
            "status": _first_non_empty(raw, "status", default="successful"),
            "reference": raw.get("reference"),
            "created_at": _parse_timestamp(raw.get("created_at") or raw.get("createdAt")),
        },
        raw,
    )
    return Bill(raw=raw, **model.model_dump())


def normalize_record(raw: Dict[str, Any]) -> Record:
    record_id = _first_non_empty(raw, "id")
    return Record(id=str(record_id), data={k: v for k, v in raw.items() if k != "id"})


# ---------------------------------------------------------------------------
# Payments provider
# ---------------------------------------------------------------------------

def unwrap_provider_envelope(raw: Dict[str, Any]) -> Any:
    """Return `data` from the provider's ``{status, message, data}`` envelope."""
    if not isinstance(raw, dict):
        raise IntegrationResponseError("Provider response is not a JSON object.")
    if raw.get("status") is False:
        raise IntegrationResponseError(str(raw.get("message") or "Provider rejected the request."), payload=raw)
    return raw.get("data")


def normalize_bank(raw: Dict[str, Any]) -> Bank:
    return Bank(
        id=int(_first_non_empty(raw, "id")),
        name=str(_first_non_empty(raw, "name")),
        code=str(_first_non_empty(raw, "code")),
        slug=str(raw.get("slug") or ""),
        country=str(raw.get("country") or "Nigeria"),
        currency=str(raw.get("currency") or "NGN"),
        active=bool(raw.get("active", True)),
    )


def normalize_banks(items: Any) -> List[Bank]:
    if not items:
        return []
    return [normalize_bank(item) for item in items]


def normalize_account_verification(raw: Dict[str, Any]) -> AccountVerification:
    bank_id = raw.get("bank_id")
    return AccountVerification(
        account_number=str(_first_non_empty(raw, "account_number")),
        account_name=str(_first_non_empty(raw, "account_name")),
        bank_id=int(bank_id) if bank_id is not None else None,
    )


def normalize_recipient(raw: Dict[str, Any]) -> TransferRecipient:
    details = raw.get("details") if isinstance(raw.get("details"), dict) else {}
    return TransferRecipient(
        recipient_code=str(_first_non_empty(raw, "recipient_code")),
        name=str(_first_non_empty(raw, "name", default=details.get("account_name") or "")),
        account_number=str(_first_non_empty(details, "account_number", default=raw.get("account_number") or "")),
        bank_code=str(_first_non_empty(details, "bank_code", default=raw.get("bank_code") or "")),
        currency=str(raw.get("currency") or "NGN"),
        type=str(raw.get("type") or "nuban"),
    )


def normalize_transfer(raw: Dict[str, Any], *, fallback_reference: str = "") -> TransferResult:
    recipient = raw.get("recipient")
    if isinstance(recipient, dict):
        recipient = recipient.get("recipient_code", "")
    model = _build_model(
        TransferResponseModel,
        {
            "reference": str(_first_non_empty(raw, "reference", default=fallback_reference)),
            "transfer_code": str(_first_non_empty(raw, "transfer_code", default="")),
            "status": _map_transfer_status(raw.get("status")),
            "amount": _first_non_empty(raw, "amount"),
            "recipient": str(recipient or ""),
            "reason": str(raw.get("reason") or ""),
        },
        raw,
    )
    return TransferResult(raw=raw, **model.model_dump())


def normalize_initialization(raw: Dict[str, Any]) -> PaymentInitialization:
    return PaymentInitialization(
        authorization_url=str(_first_non_empty(raw, "authorization_url")),
        access_code=str(_first_non_empty(raw, "access_code")),
        reference=str(_first_non_empty(raw, "reference")),
    )


def normalize_transaction_verification(raw: Dict[str, Any]) -> TransactionVerification:
    amount = _first_non_empty(raw, "amount")
    try:
        amount = int(amount)
    except (TypeError, ValueError) as exc:
        raise IntegrationResponseError(f"Invalid transaction amount: {amount!r}", payload=raw) from exc
    return TransactionVerification(
        reference=str(_first_non_empty(raw, "reference")),
        status=str(_first_non_empty(raw, "status")).lower(),
        amount=amount,
        currency=str(raw.get("currency") or "NGN"),
        paid_at=_parse_timestamp(raw.get("paid_at") or raw.get("paidAt")),
        gateway_response=str(raw.get("gateway_response") or ""),
        raw=raw,
    )


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _first_non_empty(data: Dict[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        value = data.get(key)
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        return value
    if default is not None:
        return default
    raise IntegrationResponseError(f"Missing required field. Checked keys: {', '.join(keys)}", payload=data)


def _parse_timestamp(value: Any) -> Optional[datetime]:
    # The backend sends epoch milliseconds; the provider sends ISO strings.
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None


def _map_transfer_status(raw_status: Any) -> TransferStatus:
    value = str(raw_status or "pending").strip().lower()
    mapping = {
        "pending": TransferStatus.PENDING,
        "received": TransferStatus.PENDING,
        "processing": TransferStatus.PENDING,
        "otp": TransferStatus.OTP,
        "success": TransferStatus.SUCCESS,
        "successful": TransferStatus.SUCCESS,
        "failed": TransferStatus.FAILED,
        "abandoned": TransferStatus.FAILED,
        "reversed": TransferStatus.REVERSED,
    }
    if value not in mapping:
        raise IntegrationResponseError(f"Unsupported transfer status '{value}'.")
    return mapping[value]


def _build_model(model_type, payload: Dict[str, Any], raw: Dict[str, Any]):
    try:
        return model_type(**payload)
    except ValidationError as exc:
        raise IntegrationResponseError(f"Response validation failed: {exc}", payload=raw) from exc

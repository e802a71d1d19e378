from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

"""
Payments provider contracts.

Request/response structures for the provider's bank lookup, account
resolution, transfer and payment endpoints. Amounts on these contracts are in
kobo, the provider's unit; conversion to Naira happens in the flows.

These contracts must be used by both:
- clients/mocks/paystack.py (fake responses for development/testing)
- clients/real_http/paystack.py (real API calls)
"""


class TransferStatus(str, Enum):
    PENDING = "pending"
    SUCCESS = "success"
    FAILED = "failed"
    REVERSED = "reversed"
    OTP = "otp"


@dataclass
class Bank:
    id: int
    name: str
    code: str
    slug: str = ""
    country: str = "Nigeria"
    currency: str = "NGN"
    active: bool = True


@dataclass
class AccountVerification:
    account_number: str
    account_name: str
    bank_id: Optional[int] = None


@dataclass
class TransferRecipient:
    recipient_code: str
    name: str
    account_number: str
    bank_code: str
    currency: str = "NGN"
    type: str = "nuban"


@dataclass
class TransferResult:
    reference: str
    transfer_code: str
    status: TransferStatus
    amount: int                          # kobo
    recipient: str
    reason: str = ""
    raw: Dict[str, Any] = field(default_factory=dict)


@dataclass
class PaymentInitialization:
    authorization_url: str
    access_code: str
    reference: str


@dataclass
class TransactionVerification:
    reference: str
    status: str
    amount: int                          # kobo
    currency: str = "NGN"
    paid_at: Optional[datetime] = None
    gateway_response: str = ""
    raw: Dict[str, Any] = field(default_factory=dict)


def is_terminal_status(status: TransferStatus) -> bool:
    """Return True if the transfer has reached a final, non-changeable state."""
    return status in {TransferStatus.SUCCESS, TransferStatus.FAILED, TransferStatus.REVERSED}

"""
Paystack MOCK client.

⚠️  This is a mock implementation for development and testing.
    It makes no network calls and returns data in the provider's shapes,
    through the same normalizers as the real client. Amounts are kobo.

Configure with:
    accounts: {(account_number, bank_code): account_name} resolvable accounts
    balance_kobo: provider-side balance; transfers above it fail
    fail_operations: operation names that raise PaystackAPIError
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Tuple

from kuda.integrations.contracts.interfaces import PaymentsProvider
from kuda.integrations.contracts.payments import (
    AccountVerification,
    Bank,
    PaymentInitialization,
    TransactionVerification,
    TransferRecipient,
    TransferResult,
)
from kuda.integrations.errors import PaystackAPIError
from kuda.integrations.policy.response_wrappers import (
    normalize_account_verification,
    normalize_banks,
    normalize_initialization,
    normalize_recipient,
    normalize_transaction_verification,
    normalize_transfer,
)
from kuda.utils.money import timestamped_reference

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Seed data
# ---------------------------------------------------------------------------

_MOCK_BANKS: List[Dict[str, Any]] = [
    {"id": 1, "name": "Access Bank", "slug": "access-bank", "code": "044", "country": "Nigeria", "currency": "NGN", "active": True},
    {"id": 6, "name": "First Bank of Nigeria", "slug": "first-bank-of-nigeria", "code": "011", "country": "Nigeria", "currency": "NGN", "active": True},
    {"id": 9, "name": "Guaranty Trust Bank", "slug": "guaranty-trust-bank", "code": "058", "country": "Nigeria", "currency": "NGN", "active": True},
    {"id": 67, "name": "Kuda Bank", "slug": "kuda-bank", "code": "50211", "country": "Nigeria", "currency": "NGN", "active": True},
    {"id": 18, "name": "United Bank For Africa", "slug": "united-bank-for-africa", "code": "033", "country": "Nigeria", "currency": "NGN", "active": True},
    {"id": 21, "name": "Zenith Bank", "slug": "zenith-bank", "code": "057", "country": "Nigeria", "currency": "NGN", "active": True},
]

_MOCK_ACCOUNTS: Dict[Tuple[str, str], str] = {
    ("0123456789", "058"): "MIKE JOHNSON",
    ("9876543210", "044"): "SARAH WILSON",
    ("1234567890", "50211"): "JANE SMITH",
    ("0011223344", "057"): "DAVID BROWN",
}


class MockPaystackClient(PaymentsProvider):
    def __init__(
        self,
        accounts: Optional[Dict[Tuple[str, str], str]] = None,
        balance_kobo: int = 1_000_000_000,
        fail_operations: Optional[Iterable[str]] = None,
    ):
        self.accounts = dict(_MOCK_ACCOUNTS if accounts is None else accounts)
        self.balance_kobo = balance_kobo
        self.fail_operations = set(fail_operations or ())

        # In-memory stores (reset on restart)
        self._recipients: Dict[str, Dict[str, Any]] = {}
        self._transfers: Dict[str, Dict[str, Any]] = {}
        self._payments: Dict[str, Dict[str, Any]] = {}

        self.calls: List[str] = []

        logger.info("[PAYSTACK MOCK] Client initialised (%d resolvable accounts)", len(self.accounts))

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _record_call(self, operation: str) -> None:
        self.calls.append(operation)
        if operation in self.fail_operations:
            logger.info("[PAYSTACK MOCK] Simulated failure for %s", operation)
            raise PaystackAPIError("Paystack API error: 500", status_code=500)

    @property
    def transfers(self) -> List[Dict[str, Any]]:
        return list(self._transfers.values())

    # ------------------------------------------------------------------
    # Banks & accounts
    # ------------------------------------------------------------------

    async def get_banks(self, country: str = "nigeria") -> List[Bank]:
        self._record_call("get_banks")
        return normalize_banks([b for b in _MOCK_BANKS if b["country"].lower() == country.lower()])

    async def verify_account(self, account_number: str, bank_code: str) -> AccountVerification:
        self._record_call("verify_account")
        name = self.accounts.get((account_number, bank_code))
        if name is None:
            raise PaystackAPIError("Could not resolve account name. Check parameters or try again.", status_code=422)
        bank_id = next((b["id"] for b in _MOCK_BANKS if b["code"] == bank_code), None)
        return normalize_account_verification(
            {"account_number": account_number, "account_name": name, "bank_id": bank_id}
        )

    # ------------------------------------------------------------------
    # Transfers
    # ------------------------------------------------------------------

    async def create_transfer_recipient(
        self,
        name: str,
        account_number: str,
        bank_code: str,
        currency: str = "NGN",
        type: str = "nuban",
    ) -> TransferRecipient:
        self._record_call("create_transfer_recipient")
        code = f"RCP_{uuid.uuid4().hex[:12]}"
        raw = {
            "recipient_code": code,
            "name": name,
            "type": type,
            "currency": currency or "NGN",
            "details": {"account_number": account_number, "bank_code": bank_code, "account_name": name},
        }
        self._recipients[code] = raw
        return normalize_recipient(raw)

    async def initiate_transfer(
        self,
        amount: int,
        recipient: str,
        reason: Optional[str] = None,
        reference: Optional[str] = None,
    ) -> TransferResult:
        self._record_call("initiate_transfer")
        if recipient not in self._recipients:
            raise PaystackAPIError("Recipient specified is invalid", status_code=400)
        if amount > self.balance_kobo:
            raise PaystackAPIError("Your balance is not enough to fulfil this request", status_code=400)

        self.balance_kobo -= amount
        raw = {
            "reference": reference or timestamped_reference("transfer"),
            "transfer_code": f"TRF_{uuid.uuid4().hex[:12]}",
            "status": "success",
            "amount": int(amount),
            "recipient": recipient,
            "reason": reason or "",
            "source": "balance",
            "currency": "NGN",
        }
        self._transfers[raw["reference"]] = raw
        logger.info("[PAYSTACK MOCK] Transfer %s of %s kobo to %s", raw["reference"], amount, recipient)
        return normalize_transfer(raw)

    # ------------------------------------------------------------------
    # Payments
    # ------------------------------------------------------------------

    async def initialize_payment(
        self,
        amount: int,
        email: str,
        reference: Optional[str] = None,
        callback_url: Optional[str] = None,
    ) -> PaymentInitialization:
        self._record_call("initialize_payment")
        ref = reference or timestamped_reference("payment")
        access_code = uuid.uuid4().hex[:14]
        self._payments[ref] = {
            "reference": ref,
            "amount": int(amount),
            "email": email,
            "status": "success",
            "currency": "NGN",
            "paid_at": datetime.now(timezone.utc).isoformat(),
            "gateway_response": "Successful",
        }
        return normalize_initialization(
            {"authorization_url": f"https://checkout.paystack.com/{access_code}", "access_code": access_code, "reference": ref}
        )

    async def verify_transaction(self, reference: str) -> TransactionVerification:
        self._record_call("verify_transaction")
        raw = self._payments.get(reference)
        if raw is None:
            raise PaystackAPIError("Transaction reference not found", status_code=400)
        return normalize_transaction_verification(dict(raw))

    async def list_transactions(self, page: int = 1, per_page: int = 50) -> List[Dict[str, Any]]:
        self._record_call("list_transactions")
        items = list(self._payments.values())
        start = (max(page, 1) - 1) * per_page
        return [dict(item) for item in items[start:start + per_page]]

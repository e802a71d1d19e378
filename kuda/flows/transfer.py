"""
Transfer flow - send money to Kuda users or other Nigerian banks

Request orchestration only. The provider moves the money and the backend
keeps the balance and the transaction record; nothing here reconciles the
two. The sequence for a bank transfer is:

    verify account (debounced, keyed on account number + bank)
    -> create transfer recipient -> initiate transfer (kobo)
    -> PATCH /auth/me {balance} -> POST /transaction (debit)

The local balance is updated optimistically and rolled back only if the
provider call fails. A failure after the provider accepted the transfer is
logged and reported; it is not retried.
"""

import logging
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

from kuda.error_handler import ErrorHandler
from kuda.flows.dashboard import recent_transactions
from kuda.flows.responses import failure, success
from kuda.integrations.contracts.backend import Transaction, TransactionType
from kuda.integrations.contracts.interfaces import BackendClient, PaymentsProvider
from kuda.integrations.contracts.payments import AccountVerification, Bank
from kuda.utils.debounce import KeyedDebouncer
from kuda.utils.money import format_amount, generate_reference, naira_to_kobo
from kuda.utils.validation import (
    add_error,
    check_spendable,
    parse_amount,
    raise_if_errors,
    should_verify_account,
)

logger = logging.getLogger(__name__)

KUDA = "kuda"
BANK = "bank"
INTERNATIONAL = "international"

TRANSFER_TYPES = {
    KUDA: "Kuda to Kuda",
    BANK: "Other Banks",
    INTERNATIONAL: "International",
}

# Verification states exposed to the UI
IDLE = "idle"
VERIFYING = "verifying"
VERIFIED = "verified"
FAILED = "failed"


class TransferFlow:
    def __init__(
        self,
        backend: BackendClient,
        payments: PaymentsProvider,
        *,
        debounce_seconds: float = 0.5,
        recent_recipients: int = 3,
        history_limit: int = 20,
        country: str = "nigeria",
        currency: str = "NGN",
        error_handler: Optional[ErrorHandler] = None,
    ):
        self.backend = backend
        self.payments = payments
        self.recent_recipients_limit = recent_recipients
        self.history_limit = history_limit
        self.country = country
        self.currency = currency
        self.error_handler = error_handler or ErrorHandler()

        self.transfer_type = KUDA
        self.recipient = ""
        self.bank_code = ""
        self.banks: Optional[List[Bank]] = None
        self.balance: Optional[float] = None

        self.verification: Optional[AccountVerification] = None
        self.verification_state = IDLE
        self.verification_error: Optional[Dict[str, Any]] = None
        self._verified: Dict[Tuple[str, str], AccountVerification] = {}
        self._debouncer: KeyedDebouncer[Optional[AccountVerification]] = KeyedDebouncer(
            self._verify_key, delay=debounce_seconds
        )

        self.in_flight = False

    # ------------------------------------------------------------------ #
    # Loading
    # ------------------------------------------------------------------ #

    async def load(self) -> Dict:
        """Fetch balance, bank list and history for the screen."""
        try:
            user = await self.backend.get_me()
            self.balance = user.balance
            banks = await self.load_banks()
            history = await self.history()
        except Exception as e:
            return self.error_handler.handle_exception(e, title="Could not load transfers")

        return {
            "ok": True,
            "data": {
                "balance": self.balance,
                "transfer_types": TRANSFER_TYPES,
                "banks": [{"name": b.name, "code": b.code} for b in banks],
                "recent_recipients": self.recent_recipients(history),
                "history": [self._history_row(tx) for tx in history],
            },
        }

    async def load_banks(self) -> List[Bank]:
        if self.banks is None:
            self.banks = [b for b in await self.payments.get_banks(self.country) if b.active]
        return self.banks

    def bank_name(self, code: str) -> str:
        for bank in self.banks or []:
            if bank.code == code:
                return bank.name
        return code

    async def history(self) -> List[Transaction]:
        return recent_transactions(await self.backend.list_transactions(), self.history_limit)

    def recent_recipients(self, history: List[Transaction]) -> List[Dict[str, str]]:
        seen = set()
        recipients = []
        for tx in history:
            if tx.type != TransactionType.DEBIT or not tx.recipient or tx.recipient in seen:
                continue
            seen.add(tx.recipient)
            recipients.append({"name": tx.recipient, "reference": tx.reference or ""})
            if len(recipients) >= self.recent_recipients_limit:
                break
        return recipients

    @staticmethod
    def _history_row(tx: Transaction) -> Dict:
        received = tx.type == TransactionType.CREDIT
        return {
            "id": tx.id,
            "type": "received" if received else "sent",
            "counterparty": tx.recipient or tx.description,
            "amount": tx.amount,
            "display_amount": f"{'+' if received else '-'}{format_amount(tx.amount)}",
            "status": tx.status,
            "created_at": tx.created_at.isoformat() if tx.created_at else None,
        }

    # ------------------------------------------------------------------ #
    # Form input
    # ------------------------------------------------------------------ #

    def set_transfer_type(self, transfer_type: str) -> None:
        if transfer_type not in TRANSFER_TYPES:
            raise ValueError(f"Unknown transfer type '{transfer_type}'")
        self.transfer_type = transfer_type
        self._on_details_changed()

    def set_recipient(self, value: str) -> None:
        """Account number for bank transfers; phone number or email for Kuda transfers."""
        self.recipient = (value or "").strip()
        self._on_details_changed()

    def select_bank(self, bank_code: str) -> None:
        self.bank_code = (bank_code or "").strip()
        self._on_details_changed()

    def _key(self) -> Tuple[str, str]:
        return (self.recipient, self.bank_code)

    def _on_details_changed(self) -> None:
        key = self._key()
        if self.transfer_type != BANK or not should_verify_account(*key):
            self._debouncer.cancel()
            self._set_verification(IDLE)
            return

        if key in self._verified:
            self._debouncer.cancel()
            self._set_verification(VERIFIED, self._verified[key])
            return

        self._set_verification(VERIFYING)
        self._debouncer.schedule(key)

    def _set_verification(self, state: str, verification: Optional[AccountVerification] = None, error: Optional[Dict] = None) -> None:
        self.verification_state = state
        self.verification = verification
        self.verification_error = error

    async def _verify_key(self, key: Tuple[str, str]) -> Optional[AccountVerification]:
        account_number, bank_code = key
        try:
            verification = await self.payments.verify_account(account_number, bank_code)
        except Exception as e:
            if key == self._key():
                self._set_verification(FAILED, error=self.error_handler.handle_exception(e, title="Verification Failed"))
            return None

        self._verified[key] = verification
        if key == self._key():
            self._set_verification(VERIFIED, verification)
        return verification

    async def wait_for_verification(self) -> Optional[AccountVerification]:
        await self._debouncer.wait()
        return self.verification

    async def verify_account(self, account_number: str, bank_code: str) -> Dict:
        """Verify immediately (no debounce) - used by the HTTP API."""
        self.transfer_type = BANK
        self.recipient = (account_number or "").strip()
        self.bank_code = (bank_code or "").strip()
        self._debouncer.cancel()

        if not should_verify_account(self.recipient, self.bank_code):
            self._set_verification(IDLE)
            return failure("Enter a 10-digit account number and select a bank.")

        key = self._key()
        if key not in self._verified:
            self._set_verification(VERIFYING)
            await self._verify_key(key)
        else:
            self._set_verification(VERIFIED, self._verified[key])

        if self.verification_state == FAILED:
            return self.verification_error
        return {"ok": True, "data": self.verification_view()}

    def verification_view(self) -> Dict:
        v = self.verification
        return {
            "state": self.verification_state,
            "account_number": v.account_number if v else self.recipient,
            "account_name": v.account_name if v else None,
            "bank_code": self.bank_code,
        }

    # ------------------------------------------------------------------ #
    # Submit
    # ------------------------------------------------------------------ #

    async def submit(self, amount: Any, description: str = "") -> Dict:
        """Submit whatever the form currently holds."""
        if self.in_flight:
            return _busy()

        self.in_flight = True
        try:
            verification = self.verification if self.verification_state == VERIFIED else None
            result = await self._submit(
                amount,
                (description or "").strip(),
                transfer_type=self.transfer_type,
                recipient=self.recipient,
                bank_code=self.bank_code,
                verification=verification,
                verification_failed=self.verification_state == FAILED,
            )
        finally:
            self.in_flight = False

        if result.get("ok"):
            self._reset_form()
        return result

    async def send(
        self,
        transfer_type: str,
        recipient: str,
        bank_code: str,
        amount: Any,
        description: str = "",
    ) -> Dict:
        """
        Verify, refresh the balance and submit one transfer without touching
        the form fields. The in-flight guard is held from the first await to
        the last, so an overlapping call is rejected instead of interleaving.
        """
        if self.in_flight:
            return _busy()
        if transfer_type not in TRANSFER_TYPES:
            return failure(f"Unknown transfer type '{transfer_type}'")

        self.in_flight = True
        try:
            recipient = (recipient or "").strip()
            bank_code = (bank_code or "").strip()

            verification = None
            if transfer_type == BANK and recipient and bank_code:
                if not should_verify_account(recipient, bank_code):
                    return failure("Enter a 10-digit account number and select a bank.")
                try:
                    verification = await self._lookup((recipient, bank_code))
                except Exception as e:
                    return self.error_handler.handle_exception(e, title="Verification Failed")

            try:
                self.balance = (await self.backend.get_me()).balance
            except Exception as e:
                return self.error_handler.handle_exception(e, title="Transfer Failed")

            return await self._submit(
                amount,
                (description or "").strip(),
                transfer_type=transfer_type,
                recipient=recipient,
                bank_code=bank_code,
                verification=verification,
            )
        finally:
            self.in_flight = False

    async def _lookup(self, key: Tuple[str, str]) -> AccountVerification:
        if key not in self._verified:
            self._verified[key] = await self.payments.verify_account(*key)
        return self._verified[key]

    async def _submit(
        self,
        raw_amount: Any,
        description: str,
        *,
        transfer_type: str,
        recipient: str,
        bank_code: str,
        verification: Optional[AccountVerification],
        verification_failed: bool = False,
    ) -> Dict:
        try:
            amount = self._validate(raw_amount, transfer_type, recipient, bank_code)
            if self.balance is None:
                self.balance = (await self.backend.get_me()).balance
            errors: Dict[str, str] = {}
            check_spendable(amount, self.balance, errors)
            raise_if_errors(errors, message=next(iter(errors.values()), ""))
        except Exception as e:
            return self.error_handler.handle_exception(e, title="Error")

        if transfer_type == INTERNATIONAL:
            return failure("International transfers are not available yet.")

        recipient_name = recipient
        if transfer_type == BANK:
            if verification is None:
                if verification_failed:
                    return failure("We could not verify this account. Check the details and try again.")
                return failure("Please wait for account verification to complete.")
            recipient_name = verification.account_name

        previous_balance = self.balance
        new_balance = float(Decimal(str(previous_balance)) - amount)
        self.balance = new_balance
        reference = generate_reference("transfer")

        try:
            if transfer_type == BANK:
                transfer_recipient = await self.payments.create_transfer_recipient(
                    name=recipient_name,
                    account_number=recipient,
                    bank_code=bank_code,
                    currency=self.currency,
                )
                result = await self.payments.initiate_transfer(
                    amount=naira_to_kobo(amount),
                    recipient=transfer_recipient.recipient_code,
                    reason=description or None,
                    reference=reference,
                )
                reference = result.reference
        except Exception as e:
            self.balance = previous_balance
            return self.error_handler.handle_exception(e, title="Transfer Failed", context={"reference": reference})

        try:
            user = await self.backend.update_balance(new_balance)
            self.balance = user.balance
            tx = await self.backend.create_transaction(
                type=TransactionType.DEBIT,
                amount=float(amount),
                description=description or f"Transfer to {recipient_name}",
                recipient=recipient_name,
                reference=reference,
            )
        except Exception as e:
            logger.error("Transfer %s sent but not recorded: %s", reference, e)
            return self.error_handler.handle_exception(
                e, title="Transfer sent, but not recorded", context={"reference": reference}
            )

        logger.info("Transfer %s completed", reference)
        return success(
            "Transfer Successful!",
            f"{format_amount(amount)} sent to {recipient_name}.",
            data={"reference": reference, "balance": self.balance, "transaction_id": tx.id},
        )

    @staticmethod
    def _validate(raw_amount: Any, transfer_type: str, recipient: str, bank_code: str) -> Decimal:
        errors: Dict[str, str] = {}
        if not recipient:
            add_error(errors, "recipient", "Recipient is required")
        amount = parse_amount(raw_amount, errors)
        if transfer_type == BANK and not bank_code:
            add_error(errors, "bank", "Bank is required")
        raise_if_errors(errors)
        if amount <= 0:
            raise_if_errors({"amount": "Amount must be greater than zero"}, message="Amount must be greater than zero")
        return amount

    def _reset_form(self) -> None:
        self.recipient = ""
        self.bank_code = ""
        self._debouncer.cancel()
        self._set_verification(IDLE)


def _busy() -> Dict:
    return failure("A transfer is already in progress. Please wait.", title="Please wait")

"""
Bill payments - airtime, electricity, TV, education, betting
"""

import logging
from decimal import Decimal
from typing import Any, Dict, Optional

from kuda.error_handler import ErrorHandler
from kuda.flows.responses import failure, success
from kuda.integrations.contracts.backend import TransactionType
from kuda.integrations.contracts.interfaces import BackendClient
from kuda.utils.money import format_amount, generate_reference
from kuda.utils.validation import (
    add_error,
    check_spendable,
    parse_amount,
    raise_if_errors,
    require_str,
)

logger = logging.getLogger(__name__)

CATEGORIES = [
    {"id": "airtime", "name": "Airtime", "reference_label": "Phone Number"},
    {"id": "electricity", "name": "Electricity", "reference_label": "Meter Number"},
    {"id": "tv", "name": "TV Subscription", "reference_label": "Smart Card Number"},
    {"id": "education", "name": "Education", "reference_label": "Candidate Number"},
    {"id": "gambling", "name": "Betting", "reference_label": "Customer ID"},
]

PROVIDERS = {
    "airtime": ["MTN", "Airtel", "Glo", "9mobile"],
    "electricity": ["AEDC", "EKEDC", "IKEDC", "PHEDC"],
    "tv": ["DStv", "GOtv", "StarTimes"],
    "education": ["WAEC", "JAMB", "NECO"],
    "gambling": ["Bet9ja", "SportyBet", "NairaBet", "BetKing"],
}


class BillsFlow:
    def __init__(self, backend: BackendClient, error_handler: Optional[ErrorHandler] = None):
        self.backend = backend
        self.error_handler = error_handler or ErrorHandler()
        self.balance: Optional[float] = None
        self.in_flight = False

    @staticmethod
    def categories() -> Dict:
        return {"categories": CATEGORIES, "providers": PROVIDERS}

    async def refresh_balance(self) -> float:
        self.balance = (await self.backend.get_me()).balance
        return self.balance

    def _validate(self, form_data: Dict[str, Any]) -> Dict[str, Any]:
        errors: Dict[str, str] = {}
        category = require_str(form_data, "category", errors, label="Category")
        provider = require_str(form_data, "provider", errors, label="Provider")
        customer_reference = require_str(form_data, "customer_reference", errors, label="Customer reference")
        amount = parse_amount(form_data.get("amount"), errors)
        raise_if_errors(errors)

        if category not in PROVIDERS:
            add_error(errors, "category", "Unknown bill category")
        elif provider not in PROVIDERS[category]:
            add_error(errors, "provider", "Unknown provider for this category")
        if amount <= 0:
            add_error(errors, "amount", "Amount must be greater than zero")
        raise_if_errors(errors, message=next(iter(errors.values()), ""))

        return {"category": category, "provider": provider, "customer_reference": customer_reference, "amount": amount}

    async def pay(self, form_data: Dict[str, Any], refresh_balance: bool = False) -> Dict:
        """Pay a bill. With `refresh_balance` the balance is re-read inside the in-flight guard."""
        if self.in_flight:
            return failure("A payment is already in progress. Please wait.", title="Please wait")

        self.in_flight = True
        try:
            if refresh_balance:
                try:
                    await self.refresh_balance()
                except Exception as e:
                    return self.error_handler.handle_exception(e, title="Payment Failed")
            return await self._pay(form_data)
        finally:
            self.in_flight = False

    async def _pay(self, form_data: Dict[str, Any]) -> Dict:
        try:
            bill = self._validate(form_data)
            amount: Decimal = bill["amount"]
            if self.balance is None:
                self.balance = (await self.backend.get_me()).balance
            errors: Dict[str, str] = {}
            check_spendable(amount, self.balance, errors)
            raise_if_errors(errors, message=next(iter(errors.values()), ""))
        except Exception as e:
            return self.error_handler.handle_exception(e, title="Error")

        category_name = next(c["name"] for c in CATEGORIES if c["id"] == bill["category"])
        reference = generate_reference("bill")
        try:
            record = await self.backend.create_bill(
                {
                    "category": bill["category"],
                    "provider": bill["provider"],
                    "customer_reference": bill["customer_reference"],
                    "amount": float(amount),
                    "status": "successful",
                    "reference": reference,
                }
            )
            user = await self.backend.update_balance(float(Decimal(str(self.balance)) - amount))
            self.balance = user.balance
            await self.backend.create_transaction(
                type=TransactionType.DEBIT,
                amount=float(amount),
                description=f"{bill['provider']} {category_name}",
                recipient=bill["customer_reference"],
                reference=reference,
            )
        except Exception as e:
            return self.error_handler.handle_exception(e, title="Payment Failed", context={"reference": reference})

        logger.info("Bill payment %s completed", reference)
        return success(
            "Payment Successful!",
            f"{format_amount(amount)} {category_name.lower()} payment completed.",
            data={"bill_id": record.id, "reference": reference, "balance": self.balance},
        )

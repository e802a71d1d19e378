"""
Dashboard view - balance card, quick actions, recent transactions
"""

import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional

from kuda.error_handler import ErrorHandler
from kuda.integrations.contracts.backend import Transaction, TransactionType, User
from kuda.integrations.contracts.interfaces import BackendClient
from kuda.utils.money import format_amount

logger = logging.getLogger(__name__)

HIDDEN_BALANCE = "••••••••"

QUICK_ACTIONS = [
    {"label": "Transfer", "href": "/transfer"},
    {"label": "Airtime", "href": "/bills"},
    {"label": "Bills", "href": "/bills"},
    {"label": "Cards", "href": "/cards"},
]


def greeting(now: Optional[datetime] = None) -> str:
    hour = (now or datetime.now()).hour
    if hour < 12:
        return "Good morning!"
    if hour < 17:
        return "Good afternoon!"
    return "Good evening!"


def _sort_key(tx: Transaction) -> datetime:
    if tx.created_at is None:
        return datetime.min.replace(tzinfo=timezone.utc)
    if tx.created_at.tzinfo is None:
        return tx.created_at.replace(tzinfo=timezone.utc)
    return tx.created_at


def recent_transactions(transactions: List[Transaction], limit: int) -> List[Transaction]:
    return sorted(transactions, key=_sort_key, reverse=True)[:limit]


def transaction_row(tx: Transaction) -> Dict:
    sign = "+" if tx.type == TransactionType.CREDIT else "-"
    return {
        "id": tx.id,
        "type": tx.type.value,
        "description": tx.description,
        "amount": tx.amount,
        "display_amount": f"{sign}{format_amount(tx.amount)}",
        "created_at": tx.created_at.isoformat() if tx.created_at else None,
        "status": tx.status,
    }


class DashboardView:
    def __init__(self, backend: BackendClient, recent_limit: int = 4, error_handler: Optional[ErrorHandler] = None):
        self.backend = backend
        self.recent_limit = recent_limit
        self.error_handler = error_handler or ErrorHandler()
        self.show_balance = True
        self.user: Optional[User] = None
        self.transactions: List[Transaction] = []

    def toggle_balance(self) -> bool:
        self.show_balance = not self.show_balance
        return self.show_balance

    def balance_text(self) -> str:
        if not self.show_balance:
            return HIDDEN_BALANCE
        return format_amount(self.user.balance if self.user else 0)

    async def load(self, now: Optional[datetime] = None) -> Dict:
        try:
            self.user = await self.backend.get_me()
            self.transactions = await self.backend.list_transactions()
        except Exception as e:
            return self.error_handler.handle_exception(e, title="Could not load dashboard")

        return {
            "ok": True,
            "data": {
                "greeting": greeting(now),
                "name": self.user.name,
                "initials": self.user.initials,
                "account_number": self.user.account_number,
                "balance": self.user.balance,
                "balance_text": self.balance_text(),
                "quick_actions": QUICK_ACTIONS,
                "recent_transactions": [
                    transaction_row(tx) for tx in recent_transactions(self.transactions, self.recent_limit)
                ],
            },
        }

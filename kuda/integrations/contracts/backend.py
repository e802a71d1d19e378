"""
Backend-as-a-service contracts.

Shapes of the records owned by the backend. The app never creates
authoritative state; these are views of what the backend returned.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional


class TransactionType(str, Enum):
    DEBIT = "debit"
    CREDIT = "credit"


class CardStatus(str, Enum):
    ACTIVE = "active"
    FROZEN = "frozen"
    BLOCKED = "blocked"


@dataclass
class User:
    id: str
    email: str
    first_name: str = ""
    last_name: str = ""
    phone: str = ""
    balance: float = 0.0                  # Naira
    account_number: str = ""
    address: str = ""
    created_at: Optional[datetime] = None
    raw: Dict[str, Any] = field(default_factory=dict)

    @property
    def name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def initials(self) -> str:
        parts = [p for p in (self.first_name, self.last_name) if p]
        return "".join(p[0].upper() for p in parts) or (self.email[:1].upper() if self.email else "")


@dataclass
class AuthResult:
    auth_token: str
    user: Optional[User] = None
    raw: Dict[str, Any] = field(default_factory=dict)


@dataclass
class SignupRequest:
    first_name: str
    last_name: str
    email: str
    phone: str
    password: str


@dataclass
class Transaction:
    id: str
    type: TransactionType
    amount: float                         # Naira
    description: str = ""
    recipient: Optional[str] = None
    reference: Optional[str] = None
    status: str = "successful"
    created_at: Optional[datetime] = None
    raw: Dict[str, Any] = field(default_factory=dict)

    @property
    def signed_amount(self) -> float:
        return self.amount if self.type == TransactionType.CREDIT else -self.amount


@dataclass
class Card:
    id: str
    card_number: str
    expiry: str
    cvv: str
    balance: float = 0.0
    card_type: str = "Virtual"
    status: CardStatus = CardStatus.ACTIVE
    raw: Dict[str, Any] = field(default_factory=dict)

    def masked_number(self) -> str:
        digits = self.card_number.replace(" ", "")
        return f"**** **** **** {digits[-4:]}"


@dataclass
class Bill:
    id: str
    category: str
    provider: str
    customer_reference: str
    amount: float
    status: str = "successful"
    reference: Optional[str] = None
    created_at: Optional[datetime] = None
    raw: Dict[str, Any] = field(default_factory=dict)


@dataclass
class Record:
    """Generic backend record (notification, user_setting, user_session)."""
    id: str
    data: Dict[str, Any] = field(default_factory=dict)

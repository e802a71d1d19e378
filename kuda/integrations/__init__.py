"""
Integrations layer.
This package contains all code used to communicate with external systems:
- the backend-as-a-service (auth, transactions, cards, bills, notifications,
  user settings, user sessions)
- the payments provider (bank list, account verification, transfers,
  payment initialization/verification)

Key rule:
- Screen flows MUST NOT call external APIs directly.
- Flows call integration clients (under kuda/integrations/clients).
- MOCK clients are used during development and tests; REAL_HTTP clients when
  Paystack keys are configured or INTEGRATIONS_MODE=real.

Switching implementations:
- The selection of mock vs real clients happens in ONE place (factory.py).
"""

from .contracts.backend import (
    AuthResult,
    Bill,
    Card,
    CardStatus,
    Record,
    SignupRequest,
    Transaction,
    TransactionType,
    User,
)
from .contracts.interfaces import RESOURCES, BackendClient, PaymentsProvider, ResourceAPI
from .contracts.payments import (
    AccountVerification,
    Bank,
    PaymentInitialization,
    TransactionVerification,
    TransferRecipient,
    TransferResult,
    TransferStatus,
    is_terminal_status,
)
from .errors import BackendAPIError, ConfigurationError, IntegrationError, PaystackAPIError

__all__ = [
    # backend
    "AuthResult", "Bill", "Card", "CardStatus", "Record", "SignupRequest",
    "Transaction", "TransactionType", "User",
    # interfaces
    "RESOURCES", "BackendClient", "PaymentsProvider", "ResourceAPI",
    # payments
    "AccountVerification", "Bank", "PaymentInitialization", "TransactionVerification",
    "TransferRecipient", "TransferResult", "TransferStatus", "is_terminal_status",
    # errors
    "BackendAPIError", "ConfigurationError", "IntegrationError", "PaystackAPIError",
]

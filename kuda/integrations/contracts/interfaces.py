import copy
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from kuda.database.token_store import TokenStore
from kuda.integrations.contracts.backend import (
    AuthResult,
    Bill,
    Card,
    Record,
    SignupRequest,
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
)
from kuda.integrations.policy import response_wrappers as wrappers

# Resource collections exposed by the backend-as-a-service.
TRANSACTION = "transaction"
CARD = "card"
BILL = "bill"
NOTIFICATION = "notification"
USER_SETTING = "user_setting"
USER_SESSION = "user_session"
RESOURCES = (TRANSACTION, CARD, BILL, NOTIFICATION, USER_SETTING, USER_SESSION)


# ---------------------------------------------------------------------------
# Backend-as-a-service
# ---------------------------------------------------------------------------

class ResourceAPI:
    """CRUD accessor for one backend collection, e.g. ``backend.resource("card")``."""

    def __init__(self, backend: "BackendClient", name: str) -> None:
        if name not in RESOURCES:
            raise ValueError(f"Unknown backend resource '{name}'")
        self.backend = backend
        self.name = name

    async def get_all(self) -> List[Dict[str, Any]]:
        return await self.backend.list_records(self.name)

    async def get_by_id(self, record_id: str) -> Dict[str, Any]:
        return await self.backend.get_record(self.name, record_id)

    async def create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self.backend.create_record(self.name, data)

    async def update(self, record_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self.backend.update_record(self.name, record_id, data)

    async def delete(self, record_id: str) -> Any:
        return await self.backend.delete_record(self.name, record_id)


class BackendClient(ABC):
    """Every backend client (real or mock) must implement this interface.

    Auth state lives in `token_store`: it is written on login/signup success
    and cleared on logout.
    """

    token_store: TokenStore

    # -- Auth --

    @abstractmethod
    async def login(self, email: str, password: str) -> AuthResult:
        """Authenticate and store the returned token."""

    @abstractmethod
    async def signup(self, request: SignupRequest) -> AuthResult:
        """Create an account (starting balance, generated account number) and store the token."""

    @abstractmethod
    async def get_me(self) -> User:
        """Fetch the authenticated user."""

    @abstractmethod
    async def update_me(self, fields: Dict[str, Any]) -> User:
        """Patch fields on the authenticated user."""

    async def update_balance(self, new_balance: float) -> User:
        return await self.update_me({"balance": new_balance})

    def logout(self) -> None:
        self.token_store.clear_token()

    # -- Resources --

    @abstractmethod
    async def list_records(self, resource: str) -> List[Dict[str, Any]]:
        """GET /{resource}"""

    @abstractmethod
    async def get_record(self, resource: str, record_id: str) -> Dict[str, Any]:
        """GET /{resource}/{id}"""

    @abstractmethod
    async def create_record(self, resource: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """POST /{resource}"""

    @abstractmethod
    async def update_record(self, resource: str, record_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """PATCH /{resource}/{id}"""

    @abstractmethod
    async def delete_record(self, resource: str, record_id: str) -> Any:
        """DELETE /{resource}/{id}"""

    def resource(self, name: str) -> ResourceAPI:
        return ResourceAPI(self, name)

    def bind(self, token_store: TokenStore) -> "BackendClient":
        """Same client and backing state, different token storage (one per API caller)."""
        clone = copy.copy(self)
        clone.token_store = token_store
        return clone

    # -- Typed helpers --

    async def list_transactions(self) -> List[Transaction]:
        rows = await self.list_records(TRANSACTION)
        return [wrappers.normalize_transaction(row) for row in rows]

    async def create_transaction(
        self,
        type: TransactionType,
        amount: float,
        description: str,
        recipient: Optional[str] = None,
        reference: Optional[str] = None,
    ) -> Transaction:
        payload: Dict[str, Any] = {
            "type": TransactionType(type).value,
            "amount": amount,
            "description": description,
        }
        if recipient is not None:
            payload["recipient"] = recipient
        if reference is not None:
            payload["reference"] = reference
        return wrappers.normalize_transaction(await self.create_record(TRANSACTION, payload))

    async def list_cards(self) -> List[Card]:
        return [wrappers.normalize_card(row) for row in await self.list_records(CARD)]

    async def update_card(self, card_id: str, fields: Dict[str, Any]) -> Card:
        return wrappers.normalize_card(await self.update_record(CARD, card_id, fields))

    async def list_bills(self) -> List[Bill]:
        return [wrappers.normalize_bill(row) for row in await self.list_records(BILL)]

    async def create_bill(self, data: Dict[str, Any]) -> Bill:
        return wrappers.normalize_bill(await self.create_record(BILL, data))

    async def list_user_settings(self) -> List[Record]:
        return [wrappers.normalize_record(row) for row in await self.list_records(USER_SETTING)]


# ---------------------------------------------------------------------------
# Payments provider
# ---------------------------------------------------------------------------

class PaymentsProvider(ABC):
    """Every payments provider client must implement this interface.

    All amounts are in kobo.
    """

    @abstractmethod
    async def get_banks(self, country: str = "nigeria") -> List[Bank]:
        """Return the banks available for transfers."""

    @abstractmethod
    async def verify_account(self, account_number: str, bank_code: str) -> AccountVerification:
        """Resolve an account number at a bank to its account name."""

    @abstractmethod
    async def create_transfer_recipient(
        self,
        name: str,
        account_number: str,
        bank_code: str,
        currency: str = "NGN",
        type: str = "nuban",
    ) -> TransferRecipient:
        """Register a transfer recipient."""

    @abstractmethod
    async def initiate_transfer(
        self,
        amount: int,
        recipient: str,
        reason: Optional[str] = None,
        reference: Optional[str] = None,
    ) -> TransferResult:
        """Send `amount` kobo from the balance to a recipient code."""

    @abstractmethod
    async def verify_transaction(self, reference: str) -> TransactionVerification:
        """Check a payment by reference."""

    @abstractmethod
    async def list_transactions(self, page: int = 1, per_page: int = 50) -> List[Dict[str, Any]]:
        """Provider-side transaction history."""

    @abstractmethod
    async def initialize_payment(
        self,
        amount: int,
        email: str,
        reference: Optional[str] = None,
        callback_url: Optional[str] = None,
    ) -> PaymentInitialization:
        """Start a card/bank payment (funding) and return the checkout URL."""

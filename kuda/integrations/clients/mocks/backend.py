"""
Backend-as-a-service MOCK client.

⚠️  In-memory stand-in for the hosted backend, for development and tests.
    Stores records in the same JSON shape the real backend returns and runs
    them through the same normalizers, so screens cannot tell the difference.

Failure scenarios:
    Pass `fail_operations={"update_me", "create_record:transaction", ...}` to
    make those calls raise `BackendAPIError` the way a non-2xx response would.
"""

import copy
import logging
import time
import uuid
from typing import Any, Dict, Iterable, List, Optional

from kuda.database.token_store import TokenStore
from kuda.integrations.contracts.backend import AuthResult, SignupRequest, User
from kuda.integrations.contracts.interfaces import RESOURCES, BackendClient
from kuda.integrations.errors import BackendAPIError
from kuda.integrations.policy.response_wrappers import normalize_auth_response, normalize_user
from kuda.utils.money import ACCOUNT_NUMBER_PREFIX, generate_account_number

logger = logging.getLogger(__name__)

STARTING_BALANCE = 20000


def _now_ms() -> int:
    return int(time.time() * 1000)


class MockBackendClient(BackendClient):
    def __init__(
        self,
        token_store: Optional[TokenStore] = None,
        starting_balance: float = STARTING_BALANCE,
        account_number_prefix: str = ACCOUNT_NUMBER_PREFIX,
        fail_operations: Optional[Iterable[str]] = None,
    ):
        self.token_store = token_store or TokenStore()
        self.starting_balance = starting_balance
        self.account_number_prefix = account_number_prefix
        self.fail_operations = set(fail_operations or ())

        # In-memory stores (reset on restart)
        self._users: Dict[int, Dict[str, Any]] = {}
        self._passwords: Dict[str, str] = {}          # email -> password
        self._tokens: Dict[str, int] = {}             # token -> user id
        self._records: Dict[str, Dict[int, Dict[str, Any]]] = {name: {} for name in RESOURCES}
        self._next_id = 1

        # Every call, in order, e.g. "login", "create_record:transaction".
        self.calls: List[str] = []

        logger.info("[BACKEND MOCK] Client initialised")

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _record_call(self, operation: str) -> None:
        self.calls.append(operation)
        base = operation.split(":", 1)[0]
        if operation in self.fail_operations or base in self.fail_operations:
            logger.info("[BACKEND MOCK] Simulated failure for %s", operation)
            raise BackendAPIError("HTTP error! status: 500", status_code=500)

    def _new_id(self) -> int:
        value = self._next_id
        self._next_id += 1
        return value

    def _current_user_id(self) -> int:
        token = self.token_store.get_token()
        if not token or token not in self._tokens:
            raise BackendAPIError("Unauthorized", status_code=401)
        return self._tokens[token]

    def _issue_token(self, user_id: int) -> str:
        token = f"mock-{uuid.uuid4().hex}"
        self._tokens[token] = user_id
        return token

    def _owned(self, resource: str, record_id: Any) -> Dict[str, Any]:
        if resource not in RESOURCES:
            raise ValueError(f"Unknown backend resource '{resource}'")
        user_id = self._current_user_id()
        try:
            key = int(record_id)
        except (TypeError, ValueError):
            key = -1
        record = self._records[resource].get(key)
        if record is None or record.get("user_id") != user_id:
            raise BackendAPIError("Not Found", status_code=404)
        return record

    # ------------------------------------------------------------------
    # Seeding (tests / demo)
    # ------------------------------------------------------------------

    def seed_user(
        self,
        email: str,
        password: str,
        first_name: str = "John",
        last_name: str = "Doe",
        phone: str = "08012345678",
        balance: Optional[float] = None,
        account_number: Optional[str] = None,
    ) -> Dict[str, Any]:
        user_id = self._new_id()
        user = {
            "id": user_id,
            "firstName": first_name,
            "lastName": last_name,
            "name": f"{first_name} {last_name}",
            "email": email,
            "phone": phone,
            "accountNumber": account_number or generate_account_number(self.account_number_prefix),
            "balance": self.starting_balance if balance is None else balance,
            "created_at": _now_ms(),
        }
        self._users[user_id] = user
        self._passwords[email.lower()] = password
        return copy.deepcopy(user)

    def seed_record(self, resource: str, email: str, data: Dict[str, Any]) -> Dict[str, Any]:
        user_id = next(uid for uid, u in self._users.items() if u["email"].lower() == email.lower())
        record = {"id": self._new_id(), "user_id": user_id, "created_at": _now_ms(), **data}
        self._records[resource][record["id"]] = record
        return copy.deepcopy(record)

    def sign_in(self, email: str) -> str:
        """Issue a token for a seeded user and store it, without recording a call."""
        user_id = next(uid for uid, u in self._users.items() if u["email"].lower() == email.lower())
        token = self._issue_token(user_id)
        self.token_store.set_token(token)
        return token

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------

    async def login(self, email: str, password: str) -> AuthResult:
        self._record_call("login")
        stored = self._passwords.get((email or "").lower())
        if stored is None or stored != password:
            raise BackendAPIError("Invalid credentials", status_code=403)
        user = next(u for u in self._users.values() if u["email"].lower() == email.lower())
        token = self._issue_token(user["id"])
        result = normalize_auth_response({"authToken": token})
        self.token_store.set_token(result.auth_token)
        logger.info("[BACKEND MOCK] Login ok for user %s", user["id"])
        return result

    async def signup(self, request: SignupRequest) -> AuthResult:
        self._record_call("signup")
        if request.email.lower() in self._passwords:
            raise BackendAPIError("This account is already in use.", status_code=400)
        user = self.seed_user(
            email=request.email,
            password=request.password,
            first_name=request.first_name,
            last_name=request.last_name,
            phone=request.phone,
        )
        token = self._issue_token(user["id"])
        result = normalize_auth_response({"authToken": token, "user": user})
        self.token_store.set_token(result.auth_token)
        logger.info("[BACKEND MOCK] Signup ok for user %s", user["id"])
        return result

    async def get_me(self) -> User:
        self._record_call("get_me")
        return normalize_user(copy.deepcopy(self._users[self._current_user_id()]))

    async def update_me(self, fields: Dict[str, Any]) -> User:
        self._record_call("update_me")
        user = self._users[self._current_user_id()]
        user.update({k: v for k, v in fields.items() if k not in {"id", "created_at"}})
        return normalize_user(copy.deepcopy(user))

    # ------------------------------------------------------------------
    # Resources
    # ------------------------------------------------------------------

    async def list_records(self, resource: str) -> List[Dict[str, Any]]:
        self._record_call(f"list_records:{resource}")
        if resource not in RESOURCES:
            raise ValueError(f"Unknown backend resource '{resource}'")
        user_id = self._current_user_id()
        return [copy.deepcopy(r) for r in self._records[resource].values() if r.get("user_id") == user_id]

    async def get_record(self, resource: str, record_id: str) -> Dict[str, Any]:
        self._record_call(f"get_record:{resource}")
        return copy.deepcopy(self._owned(resource, record_id))

    async def create_record(self, resource: str, data: Dict[str, Any]) -> Dict[str, Any]:
        self._record_call(f"create_record:{resource}")
        if resource not in RESOURCES:
            raise ValueError(f"Unknown backend resource '{resource}'")
        user_id = self._current_user_id()
        record = {**copy.deepcopy(data), "id": self._new_id(), "user_id": user_id, "created_at": _now_ms()}
        self._records[resource][record["id"]] = record
        return copy.deepcopy(record)

    async def update_record(self, resource: str, record_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        self._record_call(f"update_record:{resource}")
        record = self._owned(resource, record_id)
        record.update({k: v for k, v in data.items() if k not in {"id", "user_id"}})
        return copy.deepcopy(record)

    async def delete_record(self, resource: str, record_id: str) -> Any:
        self._record_call(f"delete_record:{resource}")
        record = self._owned(resource, record_id)
        self._records[resource].pop(record["id"], None)
        return None

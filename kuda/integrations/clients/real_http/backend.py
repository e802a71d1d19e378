"""
Real backend-as-a-service HTTP client.

Auth endpoints live under the auth base URL; resource collections under the
API base URL. Every request is JSON and carries the stored bearer token when
there is one.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, List, Optional

import httpx

from kuda.database.token_store import TokenStore
from kuda.integrations.contracts.backend import AuthResult, SignupRequest, User
from kuda.integrations.contracts.interfaces import RESOURCES, BackendClient
from kuda.integrations.errors import BackendAPIError
from kuda.integrations.policy.response_wrappers import normalize_auth_response, normalize_user
from kuda.utils.money import ACCOUNT_NUMBER_PREFIX, generate_account_number

logger = logging.getLogger(__name__)

DEFAULT_AUTH_BASE_URL = "https://x8ki-letl-twmt.n7.xano.io/api:Ye7qAxAj"
DEFAULT_API_BASE_URL = "https://x8ki-letl-twmt.n7.xano.io/api:kQC-7-zf"
STARTING_BALANCE = 20000


class RealBackendClient(BackendClient):
    def __init__(
        self,
        token_store: Optional[TokenStore] = None,
        auth_base_url: Optional[str] = None,
        api_base_url: Optional[str] = None,
        timeout_seconds: float = 20.0,
        starting_balance: float = STARTING_BALANCE,
        account_number_prefix: str = ACCOUNT_NUMBER_PREFIX,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.token_store = token_store or TokenStore()
        self.auth_base_url = (auth_base_url or os.getenv("KUDA_AUTH_BASE_URL", DEFAULT_AUTH_BASE_URL)).rstrip("/")
        self.api_base_url = (api_base_url or os.getenv("KUDA_API_BASE_URL", DEFAULT_API_BASE_URL)).rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.starting_balance = starting_balance
        self.account_number_prefix = account_number_prefix
        self._transport = transport

    # ------------------------------------------------------------------ #
    # HTTP plumbing
    # ------------------------------------------------------------------ #

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout_seconds, transport=self._transport)

    def _headers(self, authenticated: bool = True) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        token = self.token_store.get_token() if authenticated else None
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    async def _send(self, method: str, url: str, *, json: Any = None, authenticated: bool = True) -> httpx.Response:
        logger.info("Backend request: %s %s", method, url)
        try:
            async with self._client() as client:
                return await client.request(method, url, json=json, headers=self._headers(authenticated))
        except httpx.RequestError as e:
            logger.error(f"Request error connecting to backend: {e}")
            raise BackendAPIError("Network error") from e

    async def _request(self, method: str, url: str, json: Any = None) -> Any:
        response = await self._send(method, url, json=json)
        if response.is_error:
            try:
                body = response.json()
            except ValueError:
                body = {"message": "Network error"}
            message = (body.get("message") if isinstance(body, dict) else None) or f"HTTP error! status: {response.status_code}"
            logger.error("Backend error: %s %s -> %s %s", method, url, response.status_code, message)
            raise BackendAPIError(message, status_code=response.status_code, payload=body if isinstance(body, dict) else {})
        return self._json_body(response) if response.content else None

    @staticmethod
    def _json_body(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            logger.error("Backend returned a non-JSON body: status=%s", response.status_code)
            raise BackendAPIError("Network error", status_code=response.status_code) from e

    def _resource_url(self, resource: str, record_id: Optional[str] = None) -> str:
        if resource not in RESOURCES:
            raise ValueError(f"Unknown backend resource '{resource}'")
        url = f"{self.api_base_url}/{resource}"
        return f"{url}/{record_id}" if record_id is not None else url

    # ------------------------------------------------------------------ #
    # Auth
    # ------------------------------------------------------------------ #

    async def login(self, email: str, password: str) -> AuthResult:
        response = await self._send(
            "POST",
            f"{self.auth_base_url}/auth/login",
            json={"email": email, "password": password},
            authenticated=False,
        )
        if response.is_error:
            logger.info("Login rejected: status=%s", response.status_code)
            raise BackendAPIError("Invalid credentials", status_code=response.status_code)

        data = self._json_body(response)
        result = normalize_auth_response(data)
        self.token_store.set_token(result.auth_token)
        return result

    async def signup(self, request: SignupRequest) -> AuthResult:
        payload = {
            "firstName": request.first_name,
            "lastName": request.last_name,
            "email": request.email,
            "phone": request.phone,
            "password": request.password,
            "name": f"{request.first_name} {request.last_name}",
            "accountNumber": generate_account_number(self.account_number_prefix),
            "balance": self.starting_balance,
        }
        response = await self._send("POST", f"{self.auth_base_url}/auth/signup", json=payload, authenticated=False)
        if response.is_error:
            try:
                body = response.json()
            except ValueError:
                body = {"message": "Signup failed"}
            message = (body.get("message") if isinstance(body, dict) else None) or "Signup failed"
            logger.info("Signup rejected: status=%s", response.status_code)
            raise BackendAPIError(message, status_code=response.status_code)

        result = normalize_auth_response(self._json_body(response))
        self.token_store.set_token(result.auth_token)
        return result

    async def get_me(self) -> User:
        return normalize_user(await self._request("GET", f"{self.auth_base_url}/auth/me"))

    async def update_me(self, fields: Dict[str, Any]) -> User:
        return normalize_user(await self._request("PATCH", f"{self.auth_base_url}/auth/me", json=fields))

    # ------------------------------------------------------------------ #
    # Resources
    # ------------------------------------------------------------------ #

    async def list_records(self, resource: str) -> List[Dict[str, Any]]:
        return await self._request("GET", self._resource_url(resource)) or []

    async def get_record(self, resource: str, record_id: str) -> Dict[str, Any]:
        return await self._request("GET", self._resource_url(resource, record_id))

    async def create_record(self, resource: str, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("POST", self._resource_url(resource), json=data)

    async def update_record(self, resource: str, record_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("PATCH", self._resource_url(resource, record_id), json=data)

    async def delete_record(self, resource: str, record_id: str) -> Any:
        return await self._request("DELETE", self._resource_url(resource, record_id))

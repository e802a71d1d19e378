"""
Real Paystack HTTP Client.

Used when PAYSTACK_SECRET_KEY is configured. Every endpoint answers with a
``{status, message, data}`` envelope; this client returns the normalized
`data`. Amounts are kobo.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, List, Optional

import httpx

from kuda.integrations.contracts.interfaces import PaymentsProvider
from kuda.integrations.contracts.payments import (
    AccountVerification,
    Bank,
    PaymentInitialization,
    TransactionVerification,
    TransferRecipient,
    TransferResult,
)
from kuda.integrations.errors import ConfigurationError, PaystackAPIError
from kuda.integrations.policy.response_wrappers import (
    normalize_account_verification,
    normalize_banks,
    normalize_initialization,
    normalize_recipient,
    normalize_transaction_verification,
    normalize_transfer,
    unwrap_provider_envelope,
)
from kuda.utils.money import timestamped_reference

logger = logging.getLogger(__name__)

PAYSTACK_BASE_URL = "https://api.paystack.co"


class RealPaystackClient(PaymentsProvider):
    def __init__(
        self,
        secret_key: Optional[str] = None,
        public_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout_seconds: float = 20.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.secret_key = secret_key or os.getenv("PAYSTACK_SECRET_KEY", "")
        self.public_key = public_key or os.getenv("PAYSTACK_PUBLIC_KEY", "")
        self.base_url = (base_url or os.getenv("PAYSTACK_BASE_URL", PAYSTACK_BASE_URL)).rstrip("/")
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    def _keys(self) -> Dict[str, str]:
        if not self.public_key or not self.secret_key:
            raise ConfigurationError("Paystack keys not found in environment variables")
        return {"public_key": self.public_key, "secret_key": self.secret_key}

    async def _request(
        self,
        method: str,
        endpoint: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
    ) -> Any:
        headers = {
            "Authorization": f"Bearer {self._keys()['secret_key']}",
            "Content-Type": "application/json",
        }
        url = f"{self.base_url}{endpoint}"
        logger.info(f"Paystack request: {method} {endpoint}")
        try:
            async with httpx.AsyncClient(timeout=self.timeout_seconds, transport=self._transport) as client:
                response = await client.request(method, url, params=params, json=json, headers=headers)
        except httpx.RequestError as e:
            logger.error(f"Request error connecting to Paystack: {e}")
            raise PaystackAPIError("Paystack API error") from e

        if response.is_error:
            try:
                body = response.json()
            except ValueError:
                body = {"message": "Paystack API error"}
            message = (body.get("message") if isinstance(body, dict) else None) or f"Paystack API error: {response.status_code}"
            logger.error(f"Paystack error: {method} {endpoint} -> {response.status_code} {message}")
            raise PaystackAPIError(message, status_code=response.status_code, payload=body if isinstance(body, dict) else {})

        try:
            body = response.json()
        except ValueError as e:
            logger.error(f"Paystack returned a non-JSON body: {method} {endpoint} -> {response.status_code}")
            raise PaystackAPIError("Paystack API error", status_code=response.status_code) from e
        return unwrap_provider_envelope(body)

    async def get_banks(self, country: str = "nigeria") -> List[Bank]:
        data = await self._request("GET", "/bank", params={"country": country})
        return normalize_banks(data)

    async def verify_account(self, account_number: str, bank_code: str) -> AccountVerification:
        data = await self._request(
            "GET",
            "/bank/resolve",
            params={"account_number": account_number, "bank_code": bank_code},
        )
        return normalize_account_verification(data or {})

    async def create_transfer_recipient(
        self,
        name: str,
        account_number: str,
        bank_code: str,
        currency: str = "NGN",
        type: str = "nuban",
    ) -> TransferRecipient:
        payload = {
            "type": type,
            "name": name,
            "account_number": account_number,
            "bank_code": bank_code,
            "currency": currency or "NGN",
        }
        data = await self._request("POST", "/transferrecipient", json=payload)
        return normalize_recipient(data or {})

    async def initiate_transfer(
        self,
        amount: int,
        recipient: str,
        reason: Optional[str] = None,
        reference: Optional[str] = None,
    ) -> TransferResult:
        payload: Dict[str, Any] = {
            "source": "balance",
            "amount": int(amount),
            "recipient": recipient,
            "reference": reference or timestamped_reference("transfer"),
        }
        if reason:
            payload["reason"] = reason
        data = await self._request("POST", "/transfer", json=payload)
        return normalize_transfer(data or {}, fallback_reference=payload["reference"])

    async def verify_transaction(self, reference: str) -> TransactionVerification:
        data = await self._request("GET", f"/transaction/verify/{reference}")
        return normalize_transaction_verification(data or {})

    async def list_transactions(self, page: int = 1, per_page: int = 50) -> List[Dict[str, Any]]:
        data = await self._request("GET", "/transaction", params={"page": page, "perPage": per_page})
        return data or []

    async def initialize_payment(
        self,
        amount: int,
        email: str,
        reference: Optional[str] = None,
        callback_url: Optional[str] = None,
    ) -> PaymentInitialization:
        payload: Dict[str, Any] = {
            "amount": int(amount),
            "email": email,
            "reference": reference or timestamped_reference("payment"),
        }
        if callback_url:
            payload["callback_url"] = callback_url
        data = await self._request("POST", "/transaction/initialize", json=payload)
        return normalize_initialization(data or {})

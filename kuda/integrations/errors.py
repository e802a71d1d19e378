"""Errors raised by the integration clients. One error type per external system."""

from __future__ import annotations

from typing import Any, Dict, Optional


class IntegrationError(Exception):
    source = "integration"

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        payload: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload or {}


class BackendAPIError(IntegrationError):
    source = "backend"


class PaystackAPIError(IntegrationError):
    source = "paystack"


class ConfigurationError(RuntimeError):
    pass

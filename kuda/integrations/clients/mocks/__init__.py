"""
Mock integration clients.

These clients return fake (but realistic) responses without calling any external API.
They are used when:
- Paystack keys are not configured
- We want to exercise screens end-to-end without external dependencies

Important:
- Mock clients must follow the SAME interface as real HTTP clients.
- Mock clients return data shaped according to kuda/integrations/contracts/*
"""

from .backend import MockBackendClient
from .paystack import MockPaystackClient

__all__ = ["MockBackendClient", "MockPaystackClient"]

"""
Real HTTP integration clients.

These clients communicate with the real external systems via HTTP:
- backend.py: the backend-as-a-service (auth + resource collections)
- paystack.py: the payments provider

Important:
- Must implement the same interfaces as the mock clients
- Must return data shaped according to kuda/integrations/contracts/*

Switching:
The selection of mock vs real clients happens in kuda/integrations/factory.py only.
"""

from .backend import RealBackendClient
from .paystack import RealPaystackClient

__all__ = ["RealBackendClient", "RealPaystackClient"]
